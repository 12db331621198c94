"""
Unit Transformation Bridge

Type-agnostic operations over any unit, dispatched through the unit registry:
- rotate / flip horizontal / flip vertical
- assign a role to one patch, replace a role everywhere, check role usage
- colored triangle geometry for renderers

Every function returns a partial field patch (or None for "no behavior")
and never mutates the unit, so callers can record before/after patches
in an operation.
"""

import logging
from typing import Dict, List, Optional, Tuple

from constants import DEFAULT_UNIT_ROLE, FALLBACK_ROLE_COLOR
from models.palette import Palette
from models.patch import Patch
from models.transform import GridPosition, Span
from models.unit import Unit
from services.unit_registry import BaseUnitDefinition, UnitConfig, UnitRegistry, unit_registry

logger = logging.getLogger(__name__)


def _definition(unit_type: str, registry: Optional[UnitRegistry]) -> BaseUnitDefinition:
    return (registry or unit_registry).get_or_raise(unit_type)


# ========================================
# Config extraction
# ========================================

def to_unit_config(unit: Unit, registry: Optional[UnitRegistry] = None) -> UnitConfig:
    """Generic variant + patch roles view of a unit."""
    return _definition(unit.type, registry).read_config(unit)


def get_all_role_ids(unit: Unit, registry: Optional[UnitRegistry] = None) -> List[str]:
    return list(to_unit_config(unit, registry).patch_roles.values())


def unit_uses_role(unit: Unit, role_id: str, registry: Optional[UnitRegistry] = None) -> bool:
    return role_id in get_all_role_ids(unit, registry)


def role_state(unit: Unit, registry: Optional[UnitRegistry] = None) -> Patch:
    """Snapshot of every role-bearing field of a unit, as a patch.

    Applying this patch later restores each slot exactly, whichever of
    primary/secondary/per-patch fields held which role.
    """
    definition = _definition(unit.type, registry)
    config = definition.read_config(unit)
    return definition.config_update(unit, patch_roles=config.patch_roles)


def substitute_role(patch: Patch, old_role_id: str, new_role_id: str) -> Patch:
    """Replace a role id inside a role-state patch.

    Handles both flat slots ('fabric_role': 'x') and per-patch maps
    ('patch_fabric_roles': {'goose': 'x', ...}).
    """
    result = {}
    for key, value in patch.items():
        if isinstance(value, dict):
            result[key] = {k: (new_role_id if v == old_role_id else v) for k, v in value.items()}
        elif value == old_role_id:
            result[key] = new_role_id
        else:
            result[key] = value
    return result


# ========================================
# Transforms
# ========================================

def apply_rotation(unit: Unit, registry: Optional[UnitRegistry] = None) -> Optional[Patch]:
    """Quarter turn clockwise.

    Returns:
        Field patch, or None when the type does not rotate (e.g. square)
    """
    definition = _definition(unit.type, registry)
    config = definition.read_config(unit)

    new_variant = None
    new_roles = None
    if config.variant is not None:
        new_variant = definition.rotate_variant(config.variant)
    rotated_roles = definition.rotate_patch_roles(config.patch_roles)
    if rotated_roles is not None:
        new_roles = rotated_roles

    if new_variant is None and new_roles is None:
        return None
    return definition.config_update(unit, variant=new_variant, patch_roles=new_roles)


def _apply_flip(unit: Unit, registry: Optional[UnitRegistry], horizontal: bool) -> Optional[Patch]:
    definition = _definition(unit.type, registry)
    config = definition.read_config(unit)

    if horizontal:
        flip_variant = definition.flip_horizontal_variant
        flip_roles = definition.flip_horizontal_patch_roles
    else:
        flip_variant = definition.flip_vertical_variant
        flip_roles = definition.flip_vertical_patch_roles

    new_variant = None
    if config.variant is not None:
        flipped = flip_variant(config.variant)
        if flipped is not None and flipped != config.variant:
            new_variant = flipped

    # A flip changes the orientation or recolors the parts, never both
    new_roles = None
    if new_variant is None:
        new_roles = flip_roles(config.patch_roles)

    if new_variant is None and new_roles is None:
        return None
    return definition.config_update(unit, variant=new_variant, patch_roles=new_roles)


def apply_flip_horizontal(unit: Unit, registry: Optional[UnitRegistry] = None) -> Optional[Patch]:
    """Mirror across the vertical axis. None when the type has no flip behavior."""
    return _apply_flip(unit, registry, horizontal=True)


def apply_flip_vertical(unit: Unit, registry: Optional[UnitRegistry] = None) -> Optional[Patch]:
    """Mirror across the horizontal axis. None when the type has no flip behavior."""
    return _apply_flip(unit, registry, horizontal=False)


# ========================================
# Role assignment
# ========================================

def assign_patch_role(unit: Unit, role_id: str, patch_id: Optional[str] = None,
                      registry: Optional[UnitRegistry] = None) -> Tuple[Patch, Patch]:
    """Assign a role to one patch of a unit.

    An absent or unknown patch_id falls back to the definition's primary patch.

    Returns:
        (prev, next) role-state patches for undo recording
    """
    definition = _definition(unit.type, registry)
    config = definition.read_config(unit)
    target = patch_id if patch_id in definition.patch_ids() else definition.primary_patch_id()

    new_roles = dict(config.patch_roles)
    new_roles[target] = role_id

    prev = definition.config_update(unit, patch_roles=config.patch_roles)
    next_ = definition.config_update(unit, patch_roles=new_roles)
    return prev, next_


def replace_role(unit: Unit, old_role_id: str, new_role_id: str,
                 registry: Optional[UnitRegistry] = None) -> Patch:
    """Substitute new_role_id in every slot holding old_role_id.

    Returns:
        Field patch, empty if the unit does not use old_role_id
    """
    definition = _definition(unit.type, registry)
    config = definition.read_config(unit)
    if old_role_id not in config.patch_roles.values():
        return {}
    new_roles = {k: (new_role_id if v == old_role_id else v) for k, v in config.patch_roles.items()}
    return definition.config_update(unit, patch_roles=new_roles)


# ========================================
# Construction and geometry
# ========================================

def build_unit(type_id: str, unit_id: str, position: GridPosition, variant: Optional[str] = None,
               role_id: str = DEFAULT_UNIT_ROLE, registry: Optional[UnitRegistry] = None) -> Unit:
    return _definition(type_id, registry).build(unit_id, position, variant=variant, role_id=role_id)


def get_span_for_unit(type_id: str, variant: Optional[str] = None,
                      registry: Optional[UnitRegistry] = None) -> Span:
    """Span a unit type takes for a variant; used for ghost previews."""
    definition = _definition(type_id, registry)
    return definition.get_span(variant or definition.default_variant)


def resolve_color(role_id: str, palette: Palette, overrides: Optional[Dict[str, str]] = None) -> str:
    """Color for a role: instance override, then palette, then the fallback grey."""
    if overrides and overrides.get(role_id):
        return overrides[role_id]
    color = palette.get_color(role_id)
    return color if color else FALLBACK_ROLE_COLOR


def get_unit_triangles_with_colors(unit: Unit, cell_size: float, palette: Palette,
                                   overrides: Optional[Dict[str, str]] = None,
                                   registry: Optional[UnitRegistry] = None) -> List[Tuple[List[float], str]]:
    """Flat triangle points with resolved colors, in unit-local pixels.

    Args:
        unit: Unit to draw
        cell_size: Size of one grid cell
        palette: Palette roles resolve against
        overrides: Optional per-instance role -> color map

    Returns:
        List of ([x1, y1, x2, y2, x3, y3], '#RRGGBB')
    """
    definition = _definition(unit.type, registry)
    config = definition.read_config(unit)
    width = unit.span.cols * cell_size
    height = unit.span.rows * cell_size
    result = []
    for triangle in definition.get_triangles(config, width, height):
        role_id = config.patch_roles.get(triangle.patch_id)
        result.append((triangle.flat_points(), resolve_color(role_id, palette, overrides)))
    return result
