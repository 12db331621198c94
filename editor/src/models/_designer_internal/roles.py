"""
Palette role lifecycle helpers shared by both designers.

Pure functions deciding ids, names, default colors and fallbacks; the
designer mixins wrap them in operations.
"""

from typing import Optional

from constants import (
    ADDITIONAL_ROLE_COLORS, ADDITIONAL_ROLE_FALLBACK_COLOR, MAX_PALETTE_ROLES,
    VARIANT_ROLE_ID_PREFIX, VARIANT_ROLE_NAME_PREFIX,
)
from models.palette import FabricRole, Palette


def can_add_role(palette: Palette) -> bool:
    return len(palette) < MAX_PALETTE_ROLES


def next_role_id(palette: Palette) -> str:
    """'accent<n>' with n starting at len(roles) - 1, counting up until unused."""
    number = max(len(palette) - 1, 1)
    while palette.has_role(f"accent{number}"):
        number += 1
    return f"accent{number}"


def next_role_color(palette: Palette) -> str:
    """Next default color for an added role, cycling through ADDITIONAL_ROLE_COLORS."""
    if not ADDITIONAL_ROLE_COLORS:
        return ADDITIONAL_ROLE_FALLBACK_COLOR
    index = max(0, len(palette) - 4) % len(ADDITIONAL_ROLE_COLORS)
    return ADDITIONAL_ROLE_COLORS[index]


def new_role(palette: Palette, name: Optional[str] = None, color: Optional[str] = None) -> FabricRole:
    role_id = next_role_id(palette)
    number = role_id[len('accent'):]
    return FabricRole(
        id=role_id,
        name=name or f"Accent {number}",
        color=color or next_role_color(palette),
    )


def can_remove_role(palette: Palette, role_id: str) -> bool:
    """A role can go if it exists and is not the last one."""
    return len(palette) > 1 and palette.has_role(role_id)


def choose_fallback(palette: Palette, role_id: str, fallback_role_id: Optional[str] = None,
                    skip_variants: bool = False) -> Optional[str]:
    """Role that takes over references to a removed role.

    An explicit fallback wins when it exists and differs from the removed
    role; otherwise the first other role in palette order.

    Args:
        palette: Palette before removal
        role_id: Role being removed
        fallback_role_id: Caller-chosen fallback, optional
        skip_variants: Prefer non-variant roles when picking automatically

    Returns:
        Fallback role id, or None if no other role exists
    """
    if fallback_role_id and fallback_role_id != role_id and palette.has_role(fallback_role_id):
        return fallback_role_id
    candidates = [r for r in palette.roles if r.id != role_id]
    if skip_variants:
        preferred = [r for r in candidates if not r.is_variant_color]
        if preferred:
            candidates = preferred
    return candidates[0].id if candidates else None


def next_variant_role_id(palette: Palette) -> str:
    number = 1
    while palette.has_role(f"{VARIANT_ROLE_ID_PREFIX}{number}"):
        number += 1
    return f"{VARIANT_ROLE_ID_PREFIX}{number}"


def variant_role_name(color: str) -> str:
    return f"{VARIANT_ROLE_NAME_PREFIX} {color}"
