"""
Quilt Block Editor - Block Transform Mixin

Rotation, mirroring and role assignment for placed units. Every action goes
through the unit bridge, so no unit type is named here; types without a
behavior for an action make it a no-op.
"""

from typing import Optional

from models.patch import Patch
from services.operations import UpdateUnit
from services.unit_bridge import (
    apply_flip_horizontal, apply_flip_vertical, apply_rotation, assign_patch_role,
)


class BlockTransformMixin:
    """Mixin containing unit transforms for BlockDesigner

    This mixin expects the parent class to have:
    - self._block: current Block document
    - self._registry: UnitRegistry
    - self._logger: Logger instance
    - self._commit(operation, description): record-then-apply
    """

    def _commit_unit_patch(self, unit_id: str, patch: Optional[Patch], description: str) -> bool:
        unit = self._block.get_unit(unit_id)
        if unit is None or not patch:
            return False
        prev = unit.read_fields(patch.keys())
        if prev == patch:
            return False
        self._commit(UpdateUnit(unit_id, prev=prev, next=dict(patch)), description)
        return True

    # ========================================
    # Rotation / Flip
    # ========================================

    def rotate_unit(self, unit_id: str) -> bool:
        """Rotate a unit a quarter turn clockwise

        Returns:
            False if the unit is missing or its type does not rotate
        """
        unit = self._block.get_unit(unit_id)
        if unit is None:
            self._logger.debug(f"rotate_unit: unit '{unit_id}' not found")
            return False
        changed = self._commit_unit_patch(unit_id, apply_rotation(unit, self._registry), "Rotate")
        if changed:
            self._logger.debug(f"Rotated unit {unit_id}")
        return changed

    def flip_unit_horizontal(self, unit_id: str) -> bool:
        unit = self._block.get_unit(unit_id)
        if unit is None:
            return False
        return self._commit_unit_patch(unit_id, apply_flip_horizontal(unit, self._registry), "Flip horizontal")

    def flip_unit_vertical(self, unit_id: str) -> bool:
        unit = self._block.get_unit(unit_id)
        if unit is None:
            return False
        return self._commit_unit_patch(unit_id, apply_flip_vertical(unit, self._registry), "Flip vertical")

    # ========================================
    # Role assignment
    # ========================================

    def assign_role(self, unit_id: str, role_id: str, patch_id: Optional[str] = None) -> bool:
        """Assign a palette role to one patch of a unit

        Args:
            unit_id: Target unit
            role_id: Role to assign; must exist in the palette
            patch_id: Patch to color, the unit type's primary patch when omitted
                or unknown

        Returns:
            False if the unit or role is missing, or the patch already has the role
        """
        unit = self._block.get_unit(unit_id)
        if unit is None or not self._block.palette.has_role(role_id):
            self._logger.debug(f"assign_role: unit '{unit_id}' or role '{role_id}' not found")
            return False
        prev, next_ = assign_patch_role(unit, role_id, patch_id, self._registry)
        if prev == next_:
            return False
        self._commit(UpdateUnit(unit_id, prev=prev, next=next_), "Assign fabric")
        self._logger.debug(f"Assigned role {role_id} to unit {unit_id} patch {patch_id}")
        return True

    def paint_unit(self, unit_id: str, patch_id: Optional[str] = None) -> bool:
        """Assign the active paint role to a patch (paint mode tap)"""
        if self._active_role_id is None:
            return False
        return self.assign_role(unit_id, self._active_role_id, patch_id)
