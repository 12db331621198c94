"""
Block-level operation vocabulary.

Every edit the block designer makes is one of these immutable operations
(or a Batch of them). Each carries enough data to be applied and inverted
without consulting the document:

- AddUnit / RemoveUnit: the full unit and its list index
- UpdateUnit: before/after field patches
- ResizeGrid: old/new size plus the units the step removes or restores
- UpdatePalette, AddRole, RemoveRole, RestoreRole, RenameRole: shared palette ops
- Batch: ordered group

invert_block_operation() is self-inverse; the apply_operation_to_* reducers
each handle one slice of the block and return the input object unchanged
when the operation does not touch that slice.
"""

import logging
from dataclasses import dataclass
from typing import Tuple, Union

from models.palette import Palette
from models.patch import Patch
from models.unit import Unit
from services.unit_bridge import substitute_role
from .common import (
    AddRole, Batch, IndexedEntry, RemoveRole, RenameRole, RestoreRole, RoleReference, UpdatePalette,
    PALETTE_OPERATIONS, apply_operation_to_palette, fold_operation, index_by_id, insert_at,
    invert_batch, invert_palette_operation,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AddUnit:
    unit: Unit
    index: int = -1


@dataclass(frozen=True)
class RemoveUnit:
    unit: Unit
    index: int = -1


@dataclass(frozen=True)
class UpdateUnit:
    unit_id: str
    prev: Patch
    next: Patch


@dataclass(frozen=True)
class ResizeGrid:
    """Change the block grid size.

    Attributes:
        prev_size: Size before the step
        next_size: Size after the step
        removed_units: Units this step deletes (out of bounds at next_size)
        restored_units: Units this step puts back at their recorded index
    """
    prev_size: int
    next_size: int
    removed_units: Tuple[IndexedEntry, ...] = ()
    restored_units: Tuple[IndexedEntry, ...] = ()


BlockOperation = Union[AddUnit, RemoveUnit, UpdateUnit, ResizeGrid, UpdatePalette, AddRole,
                       RemoveRole, RestoreRole, RenameRole, Batch]


# ========================================
# Invert
# ========================================

def _restore_unit_roles(ref: RoleReference, role_id: str, fallback_role_id: str) -> UpdateUnit:
    return UpdateUnit(ref.target_id, prev=substitute_role(ref.prev, role_id, fallback_role_id), next=ref.prev)


def invert_block_operation(operation: BlockOperation) -> BlockOperation:
    """Return the operation that undoes `operation`.

    Raises:
        TypeError: If the operation is not part of the block vocabulary
    """
    if isinstance(operation, AddUnit):
        return RemoveUnit(operation.unit, operation.index)
    if isinstance(operation, RemoveUnit):
        return AddUnit(operation.unit, operation.index)
    if isinstance(operation, UpdateUnit):
        return UpdateUnit(operation.unit_id, prev=operation.next, next=operation.prev)
    if isinstance(operation, ResizeGrid):
        return ResizeGrid(
            prev_size=operation.next_size,
            next_size=operation.prev_size,
            removed_units=operation.restored_units,
            restored_units=operation.removed_units,
        )
    if isinstance(operation, PALETTE_OPERATIONS):
        return invert_palette_operation(operation, _restore_unit_roles)
    if isinstance(operation, Batch):
        return invert_batch(operation, invert_block_operation)
    raise TypeError(f"Unknown block operation: {type(operation).__name__}")


# ========================================
# Apply: units
# ========================================

def _reduce_units(units: Tuple[Unit, ...], operation) -> Tuple[Unit, ...]:
    if isinstance(operation, AddUnit):
        if index_by_id(units, operation.unit.id) != -1:
            logger.warning(f"add_unit: unit '{operation.unit.id}' already present")
            return units
        return insert_at(units, operation.unit, operation.index)

    if isinstance(operation, RemoveUnit):
        index = index_by_id(units, operation.unit.id)
        if index == -1:
            logger.warning(f"remove_unit: unit '{operation.unit.id}' not found")
            return units
        return units[:index] + units[index + 1:]

    if isinstance(operation, UpdateUnit):
        index = index_by_id(units, operation.unit_id)
        if index == -1:
            logger.warning(f"update_unit: unit '{operation.unit_id}' not found")
            return units
        updated = units[index].with_patch(operation.next)
        if updated is units[index]:
            return units
        return units[:index] + (updated,) + units[index + 1:]

    if isinstance(operation, ResizeGrid):
        result = units
        removed_ids = {entry.item.id for entry in operation.removed_units}
        if removed_ids:
            result = tuple(unit for unit in result if unit.id not in removed_ids)
        for entry in sorted(operation.restored_units, key=lambda e: e.index):
            if index_by_id(result, entry.item.id) == -1:
                result = insert_at(result, entry.item, entry.index)
        return result

    if isinstance(operation, RemoveRole):
        if operation.fallback_role_id is None:
            return units
        result = units
        for ref in operation.affected:
            index = index_by_id(result, ref.target_id)
            if index == -1:
                logger.warning(f"remove_role: affected unit '{ref.target_id}' not found")
                continue
            patch = substitute_role(ref.prev, operation.role.id, operation.fallback_role_id)
            result = result[:index] + (result[index].with_patch(patch),) + result[index + 1:]
        return result

    return units


def apply_operation_to_units(units: Tuple[Unit, ...], operation: BlockOperation) -> Tuple[Unit, ...]:
    """Unit-list reducer. Returns `units` itself when nothing matched."""
    return fold_operation(units, operation, _reduce_units)


# ========================================
# Apply: palette and grid size
# ========================================

def apply_block_operation_to_palette(palette: Palette, operation: BlockOperation) -> Palette:
    return apply_operation_to_palette(palette, operation)


def _reduce_grid_size(size: int, operation) -> int:
    if isinstance(operation, ResizeGrid):
        return operation.next_size
    return size


def apply_operation_to_grid_size(size: int, operation: BlockOperation) -> int:
    return fold_operation(size, operation, _reduce_grid_size)
