"""
Quilt Block Editor - Block Palette Mixin

Fabric role lifecycle for the block preview palette:
- recolor, add, rename, remove (with reassignment of every referencing unit)
- paint mode: an active role applied by tapping unit patches
"""

from typing import List, Optional

from models.color import colors_equal, normalize_color
from models.unit import Unit
from models._designer_internal.roles import (
    can_add_role, can_remove_role, choose_fallback, new_role,
)
from services.operations import AddRole, RemoveRole, RenameRole, RoleReference, UpdatePalette
from services.unit_bridge import role_state, unit_uses_role


class BlockPaletteMixin:
    """Mixin containing palette operations for BlockDesigner

    This mixin expects the parent class to have:
    - self._block: current Block document
    - self._registry: UnitRegistry
    - self._logger: Logger instance
    - self._commit(operation, description): record-then-apply
    """

    # ========================================
    # Role editing
    # ========================================

    def set_role_color(self, role_id: str, color: str) -> bool:
        """Recolor a role

        Raises:
            ValueError: If color is not a parseable color
        """
        role = self._block.palette.get_role(role_id)
        if role is None:
            return False
        color = normalize_color(color)
        if colors_equal(role.color, color):
            return False
        self._commit(UpdatePalette(role_id, role.color, color), "Change fabric color")
        self._logger.debug(f"Role {role_id} color {role.color} -> {color}")
        return True

    def add_role(self, name: Optional[str] = None, color: Optional[str] = None) -> Optional[str]:
        """Append a new role

        Returns:
            New role id, or None when the palette is full
        """
        palette = self._block.palette
        if not can_add_role(palette):
            self._logger.debug("add_role: palette is full")
            return None
        role = new_role(palette, name, normalize_color(color) if color else None)
        self._commit(AddRole(role, len(palette)), "Add fabric")
        self._logger.debug(f"Added role {role.id} ({role.color})")
        return role.id

    def rename_role(self, role_id: str, name: str) -> bool:
        role = self._block.palette.get_role(role_id)
        if role is None or role.name == name:
            return False
        self._commit(RenameRole(role_id, role.name, name), "Rename fabric")
        return True

    def can_remove_role(self, role_id: Optional[str] = None) -> bool:
        """Check if a role (or, without an id, any role) may be removed"""
        palette = self._block.palette
        if role_id is None:
            return len(palette) > 1
        return can_remove_role(palette, role_id)

    def get_units_using_role(self, role_id: str) -> List[Unit]:
        return [u for u in self._block.units if unit_uses_role(u, role_id, self._registry)]

    def remove_role(self, role_id: str, fallback_role_id: Optional[str] = None) -> bool:
        """Remove a role, moving every unit slot that used it to a fallback

        Args:
            role_id: Role to remove
            fallback_role_id: Replacement role; the first other role when
                omitted or invalid

        Returns:
            False if the role is missing or is the last one
        """
        palette = self._block.palette
        if not can_remove_role(palette, role_id):
            self._logger.debug(f"remove_role: cannot remove '{role_id}'")
            return False

        fallback = choose_fallback(palette, role_id, fallback_role_id)
        affected = tuple(
            RoleReference(unit.id, role_state(unit, self._registry))
            for unit in self.get_units_using_role(role_id)
        )
        operation = RemoveRole(palette.get_role(role_id), palette.index_of(role_id), fallback, affected)
        self._commit(operation, "Remove fabric")

        if self._active_role_id == role_id:
            self._active_role_id = None
            if self._mode == 'paint_mode':
                self._mode = 'idle'
        self._logger.debug(f"Removed role {role_id}, {len(affected)} units moved to {fallback}")
        return True

    # ========================================
    # Paint mode
    # ========================================

    def set_active_role(self, role_id: Optional[str]) -> bool:
        """Enter paint mode with a role, or leave it with None"""
        if role_id is None:
            self._active_role_id = None
            if self._mode == 'paint_mode':
                self._mode = 'idle'
            return True
        if not self._block.palette.has_role(role_id):
            return False
        self._active_role_id = role_id
        self._mode = 'paint_mode'
        self._selected_unit_id = None
        return True

    def enter_paint_mode(self, role_id: str) -> bool:
        return self.set_active_role(role_id)

    def exit_paint_mode(self) -> None:
        self.set_active_role(None)
