"""Base class for unit type plugins.

Each unit type is a self-contained plugin that defines:
- Its fabric-role patches and orientation variants
- How rotation and mirroring remap the variant or the patch roles
- Triangle geometry for rendering
- Placement rules (single tap or two adjacent cells)

The transformation bridge only talks to this interface, so adding a unit
type never touches rotate/flip/role code elsewhere.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from constants import DEFAULT_UNIT_ROLE
from models.patch import Patch
from models.transform import GridPosition, Span
from models.unit import Unit
from services.placement import can_place

Point = Tuple[float, float]


@dataclass(frozen=True)
class PatchDefinition:
    """One independently colorable region of a unit."""
    id: str
    name: str
    default_role: str = DEFAULT_UNIT_ROLE


@dataclass
class UnitConfig:
    """Type-agnostic view of a unit: optional variant plus patch id -> role id."""
    variant: Optional[str] = None
    patch_roles: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Triangle:
    """Triangle in unit-local coordinates, tagged with the patch it colors."""
    patch_id: str
    points: Tuple[Point, Point, Point]

    def flat_points(self) -> List[float]:
        """Points as [x1, y1, x2, y2, x3, y3]."""
        return [coord for point in self.points for coord in point]


@dataclass
class PlacementValidation:
    """Result of checking a placement anchor.

    Attributes:
        valid: The anchor can start a placement
        valid_adjacent_cells: Second cells for two-tap units (empty otherwise)
    """
    valid: bool
    valid_adjacent_cells: List[GridPosition] = field(default_factory=list)


class BaseUnitDefinition(ABC):
    """Abstract base class for unit definitions.

    Subclasses must set the class attributes describing the type and implement:
    - read_config(): Unit -> UnitConfig
    - config_update(): variant / patch roles -> field patch
    - build(): construct a new unit
    - get_triangles(): geometry

    Rotation and flip hooks are optional. A hook returning None means the unit
    has no such behavior, which the bridge reports as a no-op.
    """

    type_id: str = ''
    display_name: str = ''
    category: str = 'basic'  # basic | compound | advanced
    description: str = ''
    default_span: Span = Span(1, 1)
    patches: List[PatchDefinition] = []
    variants: List[str] = []
    default_variant: Optional[str] = None
    placement_mode: str = 'single_tap'  # single_tap | two_tap
    supports_batch_placement: bool = True

    # ========================================
    # Identity and geometry
    # ========================================

    def patch_ids(self) -> List[str]:
        return [p.id for p in self.patches]

    def primary_patch_id(self) -> str:
        return self.patches[0].id

    def get_span(self, variant: Optional[str] = None) -> Span:
        """Span for a variant. Fixed-span types ignore the variant."""
        return self.default_span

    @abstractmethod
    def get_triangles(self, config: UnitConfig, width: float, height: float) -> List[Triangle]:
        """Triangles covering a width x height box."""

    # ========================================
    # Unit <-> config mapping
    # ========================================

    @abstractmethod
    def read_config(self, unit: Unit) -> UnitConfig:
        """Extract variant and patch roles from a unit of this type."""

    @abstractmethod
    def config_update(self, unit: Unit, variant: Optional[str] = None,
                      patch_roles: Optional[Dict[str, str]] = None) -> Patch:
        """Translate a variant and/or patch roles into a field patch for this type."""

    @abstractmethod
    def build(self, unit_id: str, position: GridPosition, variant: Optional[str] = None,
              role_id: str = DEFAULT_UNIT_ROLE) -> Unit:
        """Create a unit with every patch set to role_id."""

    # ========================================
    # Transform hooks (optional)
    # ========================================

    def rotate_variant(self, variant: str) -> Optional[str]:
        return None

    def flip_horizontal_variant(self, variant: str) -> Optional[str]:
        return None

    def flip_vertical_variant(self, variant: str) -> Optional[str]:
        return None

    def rotate_patch_roles(self, roles: Dict[str, str]) -> Optional[Dict[str, str]]:
        return None

    def flip_horizontal_patch_roles(self, roles: Dict[str, str]) -> Optional[Dict[str, str]]:
        return None

    def flip_vertical_patch_roles(self, roles: Dict[str, str]) -> Optional[Dict[str, str]]:
        return None

    # ========================================
    # Placement
    # ========================================

    def validate_placement(self, units: Iterable[Unit], position: GridPosition, grid_size: int,
                           variant: Optional[str] = None) -> PlacementValidation:
        """Single-tap rule: the variant's whole span must fit and be unoccupied."""
        span = self.get_span(variant or self.default_variant)
        return PlacementValidation(can_place(units, position, span, grid_size))

    # ========================================
    # Validation
    # ========================================

    def validate_definition(self) -> List[str]:
        """Return a list of problems with this definition (empty if valid)."""
        errors = []
        if not self.type_id:
            errors.append("type_id must be non-empty")
        if not self.display_name:
            errors.append("display_name must be non-empty")
        if not self.patches:
            errors.append("at least one patch is required")
        if len(set(self.patch_ids())) != len(self.patches):
            errors.append("patch ids must be unique")
        if self.default_variant is not None and self.default_variant not in self.variants:
            errors.append(f"default_variant '{self.default_variant}' is not in variants")
        if self.placement_mode not in ('single_tap', 'two_tap'):
            errors.append(f"unknown placement_mode '{self.placement_mode}'")
        return errors

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} '{self.type_id}'>"
