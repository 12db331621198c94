"""
Quilt Block Editor - Pattern-level models

Block instances place a library block in a pattern grid cell with their own
rotation, mirroring and per-role color overrides. Borders frame the finished
grid, innermost first.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from constants import (
    DEFAULT_BORDER_CORNER_STYLE, DEFAULT_BORDER_ROLE, DEFAULT_BORDER_STYLE,
    DEFAULT_BORDER_WIDTH_INCHES, ROTATIONS,
)
from models.patch import Patch, apply_field_patch, snapshot_fields
from models.transform import GridPosition, GridSize


@dataclass(frozen=True)
class BlockInstance:
    """Placement of a library block inside the pattern grid.

    Attributes:
        id: Stable instance id
        block_id: Id of the referenced library block
        position: Grid cell (instances always occupy exactly one cell)
        rotation: 0, 90, 180 or 270 degrees clockwise
        flip_horizontal: Mirror across the vertical axis
        flip_vertical: Mirror across the horizontal axis
        palette_overrides: Sparse role id -> color map, applied over the pattern palette
    """
    id: str
    block_id: str
    position: GridPosition
    rotation: int = 0
    flip_horizontal: bool = False
    flip_vertical: bool = False
    palette_overrides: Dict[str, str] = None

    def __post_init__(self):
        if self.palette_overrides is None:
            object.__setattr__(self, 'palette_overrides', {})
        if self.rotation not in ROTATIONS:
            raise ValueError(f"Invalid rotation {self.rotation}, expected one of {ROTATIONS}")

    def with_patch(self, patch: Patch) -> 'BlockInstance':
        return apply_field_patch(self, patch)

    def read_fields(self, keys) -> Patch:
        return snapshot_fields(self, keys)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'block_id': self.block_id,
            'position': self.position.to_dict(),
            'rotation': self.rotation,
            'flip_horizontal': self.flip_horizontal,
            'flip_vertical': self.flip_vertical,
            'palette_overrides': dict(self.palette_overrides),
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'BlockInstance':
        return BlockInstance(
            id=data['id'],
            block_id=data['block_id'],
            position=GridPosition.from_dict(data['position']),
            rotation=int(data.get('rotation', 0)),
            flip_horizontal=bool(data.get('flip_horizontal', False)),
            flip_vertical=bool(data.get('flip_vertical', False)),
            palette_overrides=dict(data.get('palette_overrides') or {}),
        )


@dataclass(frozen=True)
class Border:
    """One border strip around the quilt."""
    id: str
    width_inches: float = DEFAULT_BORDER_WIDTH_INCHES
    style: str = DEFAULT_BORDER_STYLE
    fabric_role: str = DEFAULT_BORDER_ROLE
    corner_style: str = DEFAULT_BORDER_CORNER_STYLE

    def with_patch(self, patch: Patch) -> 'Border':
        return apply_field_patch(self, patch)

    def read_fields(self, keys) -> Patch:
        return snapshot_fields(self, keys)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'width_inches': self.width_inches,
            'style': self.style,
            'fabric_role': self.fabric_role,
            'corner_style': self.corner_style,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'Border':
        return Border(
            id=data['id'],
            width_inches=float(data.get('width_inches', DEFAULT_BORDER_WIDTH_INCHES)),
            style=data.get('style', DEFAULT_BORDER_STYLE),
            fabric_role=data.get('fabric_role', DEFAULT_BORDER_ROLE),
            corner_style=data.get('corner_style', DEFAULT_BORDER_CORNER_STYLE),
        )


@dataclass(frozen=True)
class BorderConfig:
    """Border list, innermost first. Exists only once a border has been added."""
    enabled: bool = True
    borders: Tuple[Border, ...] = ()

    def get_border(self, border_id: str) -> Optional[Border]:
        for border in self.borders:
            if border.id == border_id:
                return border
        return None

    def index_of(self, border_id: str) -> int:
        for i, border in enumerate(self.borders):
            if border.id == border_id:
                return i
        return -1

    @property
    def total_width_inches(self) -> float:
        """Sum of all border widths, one side only."""
        return sum(border.width_inches for border in self.borders)

    def to_dict(self) -> Dict[str, Any]:
        return {'enabled': self.enabled, 'borders': [b.to_dict() for b in self.borders]}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'BorderConfig':
        return BorderConfig(
            enabled=bool(data.get('enabled', True)),
            borders=tuple(Border.from_dict(b) for b in data.get('borders', [])),
        )


@dataclass(frozen=True)
class PhysicalSize:
    """Finished quilt dimensions in inches, excluding borders."""
    width_inches: float
    height_inches: float
    block_size_inches: float

    def to_dict(self) -> Dict[str, float]:
        return {
            'width_inches': self.width_inches,
            'height_inches': self.height_inches,
            'block_size_inches': self.block_size_inches,
        }

    @staticmethod
    def from_dict(data: Dict[str, float]) -> 'PhysicalSize':
        return PhysicalSize(float(data['width_inches']), float(data['height_inches']),
                            float(data['block_size_inches']))


def calculate_physical_size(grid_size: GridSize, block_size_inches: float) -> PhysicalSize:
    return PhysicalSize(
        width_inches=grid_size.cols * block_size_inches,
        height_inches=grid_size.rows * block_size_inches,
        block_size_inches=block_size_inches,
    )
