"""Half-square triangle unit.

A 1x1 cell split diagonally into two triangles. The variant names the corner
the primary triangle fills:

    nw ◸    ne ◹    sw ◺    se ◿
"""

from typing import Dict, List, Optional

from constants import DEFAULT_UNIT_ROLE
from models.transform import GridPosition, Span
from models.unit import HstUnit, Unit
from .base_unit import BaseUnitDefinition, PatchDefinition, Triangle, UnitConfig

# Clockwise quarter turn
ROTATE_MAP = {'nw': 'ne', 'ne': 'se', 'se': 'sw', 'sw': 'nw'}
FLIP_H_MAP = {'nw': 'ne', 'ne': 'nw', 'sw': 'se', 'se': 'sw'}
FLIP_V_MAP = {'nw': 'sw', 'sw': 'nw', 'ne': 'se', 'se': 'ne'}


class HstDefinition(BaseUnitDefinition):
    """Half-square triangle: orientation changes through the variant tag."""

    type_id = 'hst'
    display_name = 'Half-Square Triangle'
    category = 'basic'
    description = 'A square split diagonally into two triangles'
    default_span = Span(1, 1)
    patches = [
        PatchDefinition('primary', 'Primary'),
        PatchDefinition('secondary', 'Secondary'),
    ]
    variants = ['nw', 'ne', 'sw', 'se']
    default_variant = 'nw'

    def read_config(self, unit: Unit) -> UnitConfig:
        return UnitConfig(
            variant=unit.variant,
            patch_roles={'primary': unit.fabric_role, 'secondary': unit.secondary_fabric_role},
        )

    def config_update(self, unit: Unit, variant: Optional[str] = None,
                      patch_roles: Optional[Dict[str, str]] = None) -> dict:
        update = {}
        if variant is not None:
            update['variant'] = variant
        if patch_roles:
            if 'primary' in patch_roles:
                update['fabric_role'] = patch_roles['primary']
            if 'secondary' in patch_roles:
                update['secondary_fabric_role'] = patch_roles['secondary']
        return update

    def build(self, unit_id: str, position: GridPosition, variant: Optional[str] = None,
              role_id: str = DEFAULT_UNIT_ROLE) -> Unit:
        variant = variant if variant in self.variants else self.default_variant
        return HstUnit(id=unit_id, position=position, span=self.default_span,
                       fabric_role=role_id, secondary_fabric_role=role_id, variant=variant)

    def rotate_variant(self, variant: str) -> Optional[str]:
        return ROTATE_MAP.get(variant)

    def flip_horizontal_variant(self, variant: str) -> Optional[str]:
        return FLIP_H_MAP.get(variant)

    def flip_vertical_variant(self, variant: str) -> Optional[str]:
        return FLIP_V_MAP.get(variant)

    def get_triangles(self, config: UnitConfig, width: float, height: float) -> List[Triangle]:
        w, h = width, height
        variant = config.variant or self.default_variant
        if variant == 'nw':
            primary = ((0, 0), (w, 0), (0, h))
            secondary = ((w, 0), (w, h), (0, h))
        elif variant == 'ne':
            primary = ((0, 0), (w, 0), (w, h))
            secondary = ((0, 0), (w, h), (0, h))
        elif variant == 'sw':
            primary = ((0, 0), (0, h), (w, h))
            secondary = ((0, 0), (w, 0), (w, h))
        else:
            primary = ((w, 0), (w, h), (0, h))
            secondary = ((0, 0), (w, 0), (0, h))
        return [Triangle('primary', primary), Triangle('secondary', secondary)]
