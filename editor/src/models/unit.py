"""
Quilt Block Editor - Unit Model

Units are the geometric pieces placed inside a block grid. Each variant is a
frozen dataclass with a TYPE tag; all share id, anchor position and span,
and add their own fabric-role slots and orientation state.

Units are never mutated. Edits are expressed as partial field patches
(plain dicts keyed by field name) and applied with Unit.with_patch(), which
returns a new unit.

Usage:
    unit = HstUnit(id='u1', position=GridPosition(0, 0), span=Span(1, 1),
                   fabric_role='feature', secondary_fabric_role='background',
                   variant='nw')
    rotated = unit.with_patch({'variant': 'ne'})
"""

from dataclasses import dataclass, fields
from typing import Any, ClassVar, Dict, Type

from models.patch import Patch, apply_field_patch, snapshot_fields
from models.transform import GridPosition, Span


@dataclass(frozen=True)
class Unit:
    """Common fields of every unit variant."""
    TYPE: ClassVar[str] = ''

    id: str
    position: GridPosition
    span: Span

    @property
    def type(self) -> str:
        return self.TYPE

    def with_patch(self, patch: Patch) -> 'Unit':
        """Return a copy with the patch fields applied.

        Keys that are not fields of this variant are ignored, so a patch
        computed for one variant never corrupts another.
        """
        return apply_field_patch(self, patch)

    def read_fields(self, keys) -> Patch:
        """Snapshot the named fields as a patch."""
        return snapshot_fields(self, keys)

    def covers(self, position: GridPosition) -> bool:
        """Check if this unit's footprint includes a cell."""
        return (self.position.row <= position.row < self.position.row + self.span.rows
                and self.position.col <= position.col < self.position.col + self.span.cols)

    def fits_in(self, grid_size: int) -> bool:
        """Check if the whole footprint lies inside a square grid."""
        return (self.position.row >= 0 and self.position.col >= 0
                and self.position.row + self.span.rows <= grid_size
                and self.position.col + self.span.cols <= grid_size)

    # ========================================
    # Serialization
    # ========================================

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'type': self.TYPE}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, (GridPosition, Span)):
                value = value.to_dict()
            elif isinstance(value, dict):
                value = dict(value)
            data[f.name] = value
        return data

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'Unit':
        """Build the matching variant from a dict.

        Raises:
            ValueError: If the type tag is unknown
        """
        unit_type = data.get('type')
        cls = UNIT_TYPES.get(unit_type)
        if cls is None:
            raise ValueError(f"Unknown unit type '{unit_type}'")
        kwargs = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            value = data[f.name]
            if f.name == 'position':
                value = GridPosition.from_dict(value)
            elif f.name == 'span':
                value = Span.from_dict(value)
            elif isinstance(value, dict):
                value = dict(value)
            kwargs[f.name] = value
        return cls(**kwargs)


@dataclass(frozen=True)
class SquareUnit(Unit):
    """Single-cell solid square."""
    TYPE: ClassVar[str] = 'square'

    fabric_role: str = 'background'


@dataclass(frozen=True)
class HstUnit(Unit):
    """Half-square triangle. Variant names the corner the primary triangle fills."""
    TYPE: ClassVar[str] = 'hst'

    fabric_role: str = 'background'
    secondary_fabric_role: str = 'background'
    variant: str = 'nw'


@dataclass(frozen=True)
class FlyingGeeseUnit(Unit):
    """Two-cell unit: a goose triangle pointing in `direction` and two sky triangles."""
    TYPE: ClassVar[str] = 'flying_geese'

    direction: str = 'right'
    patch_fabric_roles: Dict[str, str] = None

    def __post_init__(self):
        if self.patch_fabric_roles is None:
            object.__setattr__(self, 'patch_fabric_roles',
                               {'goose': 'background', 'sky1': 'background', 'sky2': 'background'})


@dataclass(frozen=True)
class QstUnit(Unit):
    """Quarter-square triangle: four triangles meeting at the center."""
    TYPE: ClassVar[str] = 'qst'

    patch_fabric_roles: Dict[str, str] = None

    def __post_init__(self):
        if self.patch_fabric_roles is None:
            object.__setattr__(self, 'patch_fabric_roles',
                               {'top': 'background', 'right': 'background',
                                'bottom': 'background', 'left': 'background'})


UNIT_TYPES: Dict[str, Type[Unit]] = {
    SquareUnit.TYPE: SquareUnit,
    HstUnit.TYPE: HstUnit,
    FlyingGeeseUnit.TYPE: FlyingGeeseUnit,
    QstUnit.TYPE: QstUnit,
}
