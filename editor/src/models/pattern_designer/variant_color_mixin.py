"""
Quilt Block Editor - Pattern Variant Color Mixin

Per-instance role color overrides and the variant roles that mirror them.

Every distinct override color that is not already a regular palette color is
registered in the palette as a variant role (is_variant_color True). Variant
roles are reference counted by color value: the sync step run on every
commit adds a role the first time a color is used and removes it once no
instance override uses that color any more. The add/remove operations are
recorded in the same undo step as the edit that caused them.

Variant roles count toward MAX_PALETTE_ROLES. While the palette is full a
new override color is not registered; the override still colors its
instance, and the color is registered by a later sync once a slot frees up.
"""

from typing import List, Optional, Tuple

from models.color import colors_equal, normalize_color
from models.palette import FabricRole, Palette
from models.pattern import BlockInstance, BorderConfig
from models._designer_internal.roles import (
    can_add_role, choose_fallback, next_variant_role_id, variant_role_name,
)
from services.operations import (
    AddRole, Batch, UpdateBlockInstance, apply_operation_to_block_instances,
    apply_operation_to_border_config, apply_operation_to_palette,
)


class PatternVariantColorMixin:
    """Mixin containing instance override colors for PatternDesigner

    This mixin expects the parent class to have:
    - self._pattern: current Pattern document
    - self._logger: Logger instance
    - self._commit(operation, description): record-then-apply
    - self._remove_role_operations(palette, role_id, fallback, instances, border_config)
    """

    # ========================================
    # Overrides
    # ========================================

    def _set_overrides(self, instance: BlockInstance, overrides: dict, description: str) -> bool:
        if overrides == instance.palette_overrides:
            return False
        self._commit(UpdateBlockInstance(
            instance.id,
            prev={'palette_overrides': dict(instance.palette_overrides)},
            next={'palette_overrides': overrides},
        ), description)
        return True

    def set_instance_role_override(self, instance_id: str, role_id: str, color: str) -> bool:
        """Color one role of one instance independently of the pattern palette

        Raises:
            ValueError: If color is not a parseable color
        """
        instance = self._pattern.get_instance(instance_id)
        if instance is None:
            self._logger.debug(f"set_instance_role_override: instance '{instance_id}' not found")
            return False
        overrides = dict(instance.palette_overrides)
        overrides[role_id] = normalize_color(color)
        changed = self._set_overrides(instance, overrides, "Override block color")
        if changed:
            self._logger.debug(f"Instance {instance_id} role {role_id} -> {overrides[role_id]}")
        return changed

    def clear_instance_role_override(self, instance_id: str, role_id: str) -> bool:
        instance = self._pattern.get_instance(instance_id)
        if instance is None or role_id not in instance.palette_overrides:
            return False
        overrides = dict(instance.palette_overrides)
        del overrides[role_id]
        return self._set_overrides(instance, overrides, "Clear block color")

    def reset_instance_overrides(self, instance_id: str) -> bool:
        instance = self._pattern.get_instance(instance_id)
        if instance is None or not instance.palette_overrides:
            return False
        return self._set_overrides(instance, {}, "Reset block colors")

    def get_instance_color(self, instance_id: str, role_id: str) -> Optional[str]:
        """Effective color of a role for one instance: override, then palette"""
        instance = self._pattern.get_instance(instance_id)
        if instance is None:
            return None
        return instance.palette_overrides.get(role_id) or self._pattern.palette.get_color(role_id)

    # ========================================
    # Variant role sync
    # ========================================

    @staticmethod
    def _override_colors(instances, palette: Palette) -> List[str]:
        """Distinct override colors, first use order, minus regular palette colors"""
        colors = []
        for instance in instances:
            for value in instance.palette_overrides.values():
                color = normalize_color(value)
                if palette.find_by_color(color, include_variants=False) is not None:
                    continue
                if color not in colors:
                    colors.append(color)
        return colors

    def _variant_sync_operations(self, instances: Tuple[BlockInstance, ...], palette: Palette,
                                 border_config: Optional[BorderConfig]) -> list:
        """Operations that make the variant roles match the override colors in use

        Removals come first so a freed color is not re-registered under a new id.
        """
        wanted = self._override_colors(instances, palette)
        operations = []
        working = palette
        kept: List[str] = []

        for role in palette.variant_roles():
            in_use = any(colors_equal(role.color, color) for color in wanted)
            duplicate = any(colors_equal(role.color, color) for color in kept)
            if in_use and not duplicate:
                kept.append(normalize_color(role.color))
                continue
            fallback = choose_fallback(working, role.id, skip_variants=True)
            for operation in self._remove_role_operations(working, role.id, fallback,
                                                          instances, border_config):
                operations.append(operation)
                working = apply_operation_to_palette(working, operation)
                instances = apply_operation_to_block_instances(instances, operation)
                border_config = apply_operation_to_border_config(border_config, operation)
            self._logger.debug(f"Variant color {role.color} no longer used, removing {role.id}")

        for color in wanted:
            if color in kept:
                continue
            if not can_add_role(working):
                self._logger.debug(f"Palette full, variant color {color} not registered")
                continue
            role = FabricRole(
                id=next_variant_role_id(working),
                name=variant_role_name(color),
                color=color,
                is_variant_color=True,
            )
            operation = AddRole(role, len(working))
            operations.append(operation)
            working = apply_operation_to_palette(working, operation)
            self._logger.debug(f"Registered variant color {color} as {role.id}")
        return operations

    def _with_variant_sync(self, operation):
        """Extend an operation with the variant role changes it implies"""
        pattern = self._pattern
        instances = apply_operation_to_block_instances(pattern.block_instances, operation)
        palette = apply_operation_to_palette(pattern.palette, operation)
        border_config = apply_operation_to_border_config(pattern.border_config, operation)
        sync = self._variant_sync_operations(instances, palette, border_config)
        if not sync:
            return operation
        if isinstance(operation, Batch):
            return Batch(operation.operations + tuple(sync))
        return Batch((operation,) + tuple(sync))

    def get_variant_roles(self) -> List[FabricRole]:
        return self._pattern.palette.variant_roles()
