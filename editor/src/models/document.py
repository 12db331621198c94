"""
Quilt Block Editor - Document Models

The two document types the designers edit:
- Block: a square grid of units with a preview palette
- Pattern: a rectangular grid of block instances with a palette and borders

Documents are frozen; designers swap in a new document after every
reducer call (dataclasses.replace).
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from constants import (
    DEFAULT_BLOCK_GRID_SIZE, DEFAULT_BLOCK_SIZE_INCHES,
    DEFAULT_PATTERN_COLS, DEFAULT_PATTERN_ROWS,
)
from models.palette import Palette, default_palette
from models.pattern import BlockInstance, BorderConfig, PhysicalSize, calculate_physical_size
from models.transform import GridPosition, GridSize
from models.unit import Unit


def current_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class Block:
    """Reusable block design.

    Attributes:
        id: Document id ('' until first saved)
        title: Display title
        description: Free text; hashtags are parsed from it
        hashtags: Lowercase tags without '#'
        grid_size: Cells per side
        units: Placed units, in placement order
        palette: Preview palette used to color the units
        status: 'draft' or 'published'
    """
    id: str = ''
    title: str = ''
    description: str = ''
    hashtags: Tuple[str, ...] = ()
    grid_size: int = DEFAULT_BLOCK_GRID_SIZE
    units: Tuple[Unit, ...] = ()
    palette: Palette = None
    status: str = 'draft'
    created_at: str = ''
    updated_at: str = ''

    def __post_init__(self):
        if self.palette is None:
            object.__setattr__(self, 'palette', default_palette())

    def get_unit(self, unit_id: str) -> Optional[Unit]:
        for unit in self.units:
            if unit.id == unit_id:
                return unit
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'hashtags': list(self.hashtags),
            'grid_size': self.grid_size,
            'units': [unit.to_dict() for unit in self.units],
            'palette': self.palette.to_dict(),
            'status': self.status,
            'created_at': self.created_at,
            'updated_at': self.updated_at,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'Block':
        return Block(
            id=data.get('id', ''),
            title=data.get('title', ''),
            description=data.get('description') or '',
            hashtags=tuple(data.get('hashtags', [])),
            grid_size=int(data.get('grid_size', DEFAULT_BLOCK_GRID_SIZE)),
            units=tuple(Unit.from_dict(u) for u in data.get('units', [])),
            palette=Palette.from_dict(data['palette']) if data.get('palette') else default_palette(),
            status=data.get('status', 'draft'),
            created_at=data.get('created_at', ''),
            updated_at=data.get('updated_at', ''),
        )


@dataclass(frozen=True)
class Pattern:
    """Quilt pattern composed of block instances."""
    id: str = ''
    title: str = ''
    description: str = ''
    grid_size: GridSize = GridSize(DEFAULT_PATTERN_ROWS, DEFAULT_PATTERN_COLS)
    physical_size: PhysicalSize = None
    palette: Palette = None
    block_instances: Tuple[BlockInstance, ...] = ()
    border_config: Optional[BorderConfig] = None
    status: str = 'draft'
    created_at: str = ''
    updated_at: str = ''

    def __post_init__(self):
        if self.palette is None:
            object.__setattr__(self, 'palette', default_palette())
        if self.physical_size is None:
            object.__setattr__(self, 'physical_size',
                               calculate_physical_size(self.grid_size, DEFAULT_BLOCK_SIZE_INCHES))

    def get_instance(self, instance_id: str) -> Optional[BlockInstance]:
        for instance in self.block_instances:
            if instance.id == instance_id:
                return instance
        return None

    def get_instance_at(self, position: GridPosition) -> Optional[BlockInstance]:
        for instance in self.block_instances:
            if instance.position == position:
                return instance
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'grid_size': self.grid_size.to_dict(),
            'physical_size': self.physical_size.to_dict(),
            'palette': self.palette.to_dict(),
            'block_instances': [instance.to_dict() for instance in self.block_instances],
            'border_config': self.border_config.to_dict() if self.border_config else None,
            'status': self.status,
            'created_at': self.created_at,
            'updated_at': self.updated_at,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'Pattern':
        grid_size = GridSize.from_dict(data['grid_size']) if data.get('grid_size') else \
            GridSize(DEFAULT_PATTERN_ROWS, DEFAULT_PATTERN_COLS)
        if data.get('physical_size'):
            physical_size = PhysicalSize.from_dict(data['physical_size'])
        else:
            physical_size = calculate_physical_size(grid_size, DEFAULT_BLOCK_SIZE_INCHES)
        return Pattern(
            id=data.get('id', ''),
            title=data.get('title', ''),
            description=data.get('description') or '',
            grid_size=grid_size,
            physical_size=physical_size,
            palette=Palette.from_dict(data['palette']) if data.get('palette') else default_palette(),
            block_instances=tuple(BlockInstance.from_dict(i) for i in data.get('block_instances', [])),
            border_config=BorderConfig.from_dict(data['border_config']) if data.get('border_config') else None,
            status=data.get('status', 'draft'),
            created_at=data.get('created_at', ''),
            updated_at=data.get('updated_at', ''),
        )
