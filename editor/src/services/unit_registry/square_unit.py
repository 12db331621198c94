"""Square unit - one cell, one fabric."""

from typing import Dict, List, Optional

from constants import DEFAULT_UNIT_ROLE
from models.transform import GridPosition, Span
from models.unit import SquareUnit, Unit
from .base_unit import BaseUnitDefinition, PatchDefinition, Triangle, UnitConfig


class SquareDefinition(BaseUnitDefinition):
    """Solid square. Rotation and mirroring leave it unchanged."""

    type_id = 'square'
    display_name = 'Square'
    category = 'basic'
    description = 'A single solid square of fabric'
    default_span = Span(1, 1)
    patches = [PatchDefinition('fill', 'Fill')]
    variants = []
    default_variant = None

    def read_config(self, unit: Unit) -> UnitConfig:
        return UnitConfig(patch_roles={'fill': unit.fabric_role})

    def config_update(self, unit: Unit, variant: Optional[str] = None,
                      patch_roles: Optional[Dict[str, str]] = None) -> dict:
        if patch_roles and 'fill' in patch_roles:
            return {'fabric_role': patch_roles['fill']}
        return {}

    def build(self, unit_id: str, position: GridPosition, variant: Optional[str] = None,
              role_id: str = DEFAULT_UNIT_ROLE) -> Unit:
        return SquareUnit(id=unit_id, position=position, span=self.default_span, fabric_role=role_id)

    def get_triangles(self, config: UnitConfig, width: float, height: float) -> List[Triangle]:
        # Two triangles cover the square
        return [
            Triangle('fill', ((0, 0), (width, 0), (width, height))),
            Triangle('fill', ((0, 0), (width, height), (0, height))),
        ]
