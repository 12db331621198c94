"""Flying Geese unit.

A 2:1 unit spanning two cells: a center "goose" triangle pointing in the
unit's direction and two flanking "sky" triangles. Horizontal directions
span 1x2, vertical directions span 2x1.

Placement takes two taps: the first cell, then an adjacent free cell that
decides the direction.
"""

from typing import Dict, Iterable, List, Optional

from constants import DEFAULT_UNIT_ROLE
from models.transform import GridPosition, Span
from models.unit import FlyingGeeseUnit, Unit
from services.placement import get_valid_adjacent_cells, in_bounds, is_cell_occupied
from .base_unit import BaseUnitDefinition, PatchDefinition, PlacementValidation, Triangle, UnitConfig

ROTATE_MAP = {'up': 'right', 'right': 'down', 'down': 'left', 'left': 'up'}
# A mirror along the pointing axis leaves the direction alone
FLIP_H_MAP = {'left': 'right', 'right': 'left', 'up': 'up', 'down': 'down'}
FLIP_V_MAP = {'up': 'down', 'down': 'up', 'left': 'left', 'right': 'right'}


def get_span_for_direction(direction: str) -> Span:
    if direction in ('left', 'right'):
        return Span(1, 2)
    return Span(2, 1)


def _swap_sky(roles: Dict[str, str]) -> Dict[str, str]:
    return {'goose': roles['goose'], 'sky1': roles['sky2'], 'sky2': roles['sky1']}


class FlyingGeeseDefinition(BaseUnitDefinition):

    type_id = 'flying_geese'
    display_name = 'Flying Geese'
    category = 'compound'
    description = 'A 2:1 ratio unit with a center triangle and two flanking triangles'
    default_span = Span(1, 2)
    patches = [
        PatchDefinition('goose', 'Goose'),
        PatchDefinition('sky1', 'Sky 1'),
        PatchDefinition('sky2', 'Sky 2'),
    ]
    variants = ['right', 'left', 'down', 'up']
    default_variant = 'right'
    placement_mode = 'two_tap'
    supports_batch_placement = False

    def get_span(self, variant: Optional[str] = None) -> Span:
        return get_span_for_direction(variant or self.default_variant)

    def read_config(self, unit: Unit) -> UnitConfig:
        return UnitConfig(variant=unit.direction, patch_roles=dict(unit.patch_fabric_roles))

    def config_update(self, unit: Unit, variant: Optional[str] = None,
                      patch_roles: Optional[Dict[str, str]] = None) -> dict:
        update = {}
        if variant is not None:
            update['direction'] = variant
            update['span'] = self.get_span(variant)
        if patch_roles:
            merged = dict(unit.patch_fabric_roles)
            merged.update({k: v for k, v in patch_roles.items() if k in ('goose', 'sky1', 'sky2')})
            update['patch_fabric_roles'] = merged
        return update

    def build(self, unit_id: str, position: GridPosition, variant: Optional[str] = None,
              role_id: str = DEFAULT_UNIT_ROLE) -> Unit:
        direction = variant if variant in self.variants else self.default_variant
        return FlyingGeeseUnit(
            id=unit_id,
            position=position,
            span=self.get_span(direction),
            direction=direction,
            patch_fabric_roles={'goose': role_id, 'sky1': role_id, 'sky2': role_id},
        )

    def rotate_variant(self, variant: str) -> Optional[str]:
        return ROTATE_MAP.get(variant)

    def flip_horizontal_variant(self, variant: str) -> Optional[str]:
        return FLIP_H_MAP.get(variant)

    def flip_vertical_variant(self, variant: str) -> Optional[str]:
        return FLIP_V_MAP.get(variant)

    def flip_horizontal_patch_roles(self, roles: Dict[str, str]) -> Optional[Dict[str, str]]:
        return _swap_sky(roles)

    def flip_vertical_patch_roles(self, roles: Dict[str, str]) -> Optional[Dict[str, str]]:
        return _swap_sky(roles)

    def validate_placement(self, units: Iterable[Unit], position: GridPosition, grid_size: int,
                           variant: Optional[str] = None) -> PlacementValidation:
        """With a direction, the direction's footprint must be free.

        Without one this is the first tap of a two-tap placement: the anchor
        must be free, and its free orthogonal neighbors are the cells that
        may complete it.
        """
        if variant is not None:
            return super().validate_placement(units, position, grid_size, variant)
        if not in_bounds(position, grid_size) or is_cell_occupied(units, position):
            return PlacementValidation(False)
        return PlacementValidation(True, get_valid_adjacent_cells(units, position, grid_size))

    def get_triangles(self, config: UnitConfig, width: float, height: float) -> List[Triangle]:
        w, h = width, height
        direction = config.variant or self.default_variant
        if direction == 'right':
            goose = ((0, 0), (w, h / 2), (0, h))
            sky1 = ((0, 0), (w, 0), (w, h / 2))
            sky2 = ((0, h), (w, h / 2), (w, h))
        elif direction == 'left':
            goose = ((w, 0), (0, h / 2), (w, h))
            sky1 = ((0, 0), (w, 0), (0, h / 2))
            sky2 = ((0, h / 2), (w, h), (0, h))
        elif direction == 'down':
            goose = ((0, 0), (w / 2, h), (w, 0))
            sky1 = ((0, 0), (0, h), (w / 2, h))
            sky2 = ((w, 0), (w / 2, h), (w, h))
        else:
            goose = ((0, h), (w / 2, 0), (w, h))
            sky1 = ((0, 0), (w / 2, 0), (0, h))
            sky2 = ((w / 2, 0), (w, 0), (w, h))
        return [Triangle('goose', goose), Triangle('sky1', sky1), Triangle('sky2', sky2)]
