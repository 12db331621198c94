"""
Quilt Block Editor - Pattern Palette Mixin

Fabric role lifecycle for the pattern palette. Removing a role drops every
instance override keyed by it and moves borders that use it to the fallback
role; undo restores both.

Recoloring a role carries every instance override holding its old color to
the new one, so a recolored variant role stays attached to the instances
that use it. Variant roles are otherwise owned by the override sync and
cannot be removed directly.
"""

from typing import List, Optional, Tuple

from models.color import colors_equal, normalize_color
from models.palette import Palette
from models.pattern import BlockInstance, BorderConfig
from models._designer_internal.roles import (
    can_add_role, can_remove_role, choose_fallback, new_role,
)
from services.operations import (
    AddRole, Batch, RemoveRole, RenameRole, RoleReference, UpdateBlockInstance, UpdateBorder,
    UpdatePalette,
)


class PatternPaletteMixin:
    """Mixin containing palette operations for PatternDesigner

    This mixin expects the parent class to have:
    - self._pattern: current Pattern document
    - self._logger: Logger instance
    - self._commit(operation, description): record-then-apply
    """

    @staticmethod
    def _remove_role_operations(palette: Palette, role_id: str, fallback_role_id: Optional[str],
                                instances: Tuple[BlockInstance, ...],
                                border_config: Optional[BorderConfig]) -> list:
        """Border reassignments followed by the RemoveRole carrying instance overrides"""
        operations = []
        if border_config is not None and fallback_role_id is not None:
            for border in border_config.borders:
                if border.fabric_role == role_id:
                    operations.append(UpdateBorder(border.id, prev={'fabric_role': role_id},
                                                   next={'fabric_role': fallback_role_id}))
        affected = tuple(
            RoleReference(instance.id, {'palette_overrides': dict(instance.palette_overrides)})
            for instance in instances
            if role_id in instance.palette_overrides
        )
        operations.append(RemoveRole(palette.get_role(role_id), palette.index_of(role_id),
                                     fallback_role_id, affected))
        return operations

    # ========================================
    # Role editing
    # ========================================

    def set_role_color(self, role_id: str, color: str) -> bool:
        """Recolor a role and the instance overrides that share its color

        The palette change and the override changes are one undo step.

        Raises:
            ValueError: If color is not a parseable color
        """
        role = self._pattern.palette.get_role(role_id)
        if role is None:
            return False
        color = normalize_color(color)
        if colors_equal(role.color, color):
            return False
        operations = [UpdatePalette(role_id, role.color, color)]
        for instance in self._pattern.block_instances:
            overrides = {
                key: color if colors_equal(value, role.color) else value
                for key, value in instance.palette_overrides.items()
            }
            if overrides != instance.palette_overrides:
                operations.append(UpdateBlockInstance(
                    instance.id,
                    prev={'palette_overrides': dict(instance.palette_overrides)},
                    next={'palette_overrides': overrides},
                ))
        operation = operations[0] if len(operations) == 1 else Batch(tuple(operations))
        self._commit(operation, "Change fabric color")
        self._logger.debug(f"Role {role_id} color {role.color} -> {color}, "
                           f"{len(operations) - 1} override(s) followed")
        return True

    def add_role(self, name: Optional[str] = None, color: Optional[str] = None) -> Optional[str]:
        """Append a new role

        A color already in the palette is not added twice; the role holding
        it is returned instead.

        Returns:
            New or existing role id, or None when the palette is full
        """
        palette = self._pattern.palette
        if color:
            color = normalize_color(color)
            existing = palette.find_by_color(color)
            if existing is not None:
                self._logger.debug(f"add_role: {color} already held by {existing.id}")
                return existing.id
        if not can_add_role(palette):
            self._logger.debug("add_role: palette is full")
            return None
        role = new_role(palette, name, color)
        self._commit(AddRole(role, len(palette)), "Add fabric")
        return role.id

    def rename_role(self, role_id: str, name: str) -> bool:
        role = self._pattern.palette.get_role(role_id)
        if role is None or role.name == name:
            return False
        self._commit(RenameRole(role_id, role.name, name), "Rename fabric")
        return True

    def can_remove_role(self, role_id: Optional[str] = None) -> bool:
        palette = self._pattern.palette
        if role_id is None:
            return len(palette) > 1
        role = palette.get_role(role_id)
        return role is not None and not role.is_variant_color and can_remove_role(palette, role_id)

    def remove_role(self, role_id: str, fallback_role_id: Optional[str] = None) -> bool:
        """Remove a regular role

        Args:
            role_id: Role to remove
            fallback_role_id: Role borders move to; the first other regular
                role when omitted or invalid

        Returns:
            False if the role is missing, a variant role, or the last role
        """
        if not self.can_remove_role(role_id):
            self._logger.debug(f"remove_role: cannot remove '{role_id}'")
            return False
        pattern = self._pattern
        fallback = choose_fallback(pattern.palette, role_id, fallback_role_id, skip_variants=True)
        operations = self._remove_role_operations(pattern.palette, role_id, fallback,
                                                  pattern.block_instances, pattern.border_config)
        operation = operations[0] if len(operations) == 1 else Batch(tuple(operations))
        self._commit(operation, "Remove fabric")
        self._logger.debug(f"Removed role {role_id}, fallback {fallback}")
        return True

    def get_instances_using_role(self, role_id: str) -> List[BlockInstance]:
        """Instances with an override for a role"""
        return [i for i in self._pattern.block_instances if role_id in i.palette_overrides]
