"""Quarter-square triangle unit.

Four triangles meet at the cell center. The shape is symmetric, so rotation
and mirroring are expressed by moving roles between the four patches.
"""

from typing import Dict, List, Optional

from constants import DEFAULT_UNIT_ROLE
from models.transform import GridPosition, Span
from models.unit import QstUnit, Unit
from .base_unit import BaseUnitDefinition, PatchDefinition, Triangle, UnitConfig

QST_PATCH_IDS = ['top', 'right', 'bottom', 'left']


class QstDefinition(BaseUnitDefinition):

    type_id = 'qst'
    display_name = 'Quarter-Square Triangle'
    category = 'basic'
    description = 'A square split into four triangles meeting at the center'
    default_span = Span(1, 1)
    patches = [
        PatchDefinition('top', 'Top'),
        PatchDefinition('right', 'Right'),
        PatchDefinition('bottom', 'Bottom'),
        PatchDefinition('left', 'Left'),
    ]
    variants = []
    default_variant = None

    def read_config(self, unit: Unit) -> UnitConfig:
        return UnitConfig(patch_roles=dict(unit.patch_fabric_roles))

    def config_update(self, unit: Unit, variant: Optional[str] = None,
                      patch_roles: Optional[Dict[str, str]] = None) -> dict:
        if not patch_roles:
            return {}
        merged = dict(unit.patch_fabric_roles)
        merged.update({k: v for k, v in patch_roles.items() if k in QST_PATCH_IDS})
        return {'patch_fabric_roles': merged}

    def build(self, unit_id: str, position: GridPosition, variant: Optional[str] = None,
              role_id: str = DEFAULT_UNIT_ROLE) -> Unit:
        return QstUnit(id=unit_id, position=position, span=self.default_span,
                       patch_fabric_roles={patch_id: role_id for patch_id in QST_PATCH_IDS})

    def rotate_patch_roles(self, roles: Dict[str, str]) -> Optional[Dict[str, str]]:
        # Clockwise: each side takes the role of the side before it
        return {
            'top': roles['left'],
            'right': roles['top'],
            'bottom': roles['right'],
            'left': roles['bottom'],
        }

    def flip_horizontal_patch_roles(self, roles: Dict[str, str]) -> Optional[Dict[str, str]]:
        return {'top': roles['top'], 'right': roles['left'], 'bottom': roles['bottom'], 'left': roles['right']}

    def flip_vertical_patch_roles(self, roles: Dict[str, str]) -> Optional[Dict[str, str]]:
        return {'top': roles['bottom'], 'right': roles['right'], 'bottom': roles['top'], 'left': roles['left']}

    def get_triangles(self, config: UnitConfig, width: float, height: float) -> List[Triangle]:
        cx, cy = width / 2, height / 2
        return [
            Triangle('top', ((0, 0), (width, 0), (cx, cy))),
            Triangle('right', ((width, 0), (width, height), (cx, cy))),
            Triangle('bottom', ((width, height), (0, height), (cx, cy))),
            Triangle('left', ((0, height), (0, 0), (cx, cy))),
        ]
