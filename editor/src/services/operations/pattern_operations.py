"""
Pattern-level operation vocabulary.

Mirrors block_operations for the pattern designer: block instances take the
place of units, the grid is rectangular and may shift when rows or columns
are inserted or deleted at the start edge, and borders have their own
operations. Palette operations are the shared ones from common.

Slices with their own reducer: block instances, palette, grid size, border config.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from models.palette import Palette
from models.patch import Patch
from models.pattern import BlockInstance, Border, BorderConfig
from models.transform import GridSize, InstanceShift
from .common import (
    AddRole, Batch, IndexedEntry, RemoveRole, RenameRole, RestoreRole, RoleReference, UpdatePalette,
    PALETTE_OPERATIONS, apply_operation_to_palette, fold_operation, index_by_id, insert_at,
    invert_batch, invert_palette_operation,
)

logger = logging.getLogger(__name__)


# ========================================
# Instance operations
# ========================================

@dataclass(frozen=True)
class AddBlockInstance:
    instance: BlockInstance
    index: int = -1


@dataclass(frozen=True)
class RemoveBlockInstance:
    instance: BlockInstance
    index: int = -1


@dataclass(frozen=True)
class UpdateBlockInstance:
    instance_id: str
    prev: Patch
    next: Patch


@dataclass(frozen=True)
class ResizePatternGrid:
    """Change the pattern grid size.

    Applied in three explicit steps: drop removed_instances, shift every
    survivor by instance_shift, insert restored_instances at their recorded
    index and position. Inverting swaps sizes and removed/restored lists
    and negates the shift, so no step depends on comparing sizes.
    """
    prev_size: GridSize
    next_size: GridSize
    removed_instances: Tuple[IndexedEntry, ...] = ()
    restored_instances: Tuple[IndexedEntry, ...] = ()
    instance_shift: InstanceShift = InstanceShift()


# ========================================
# Border operations
# ========================================

@dataclass(frozen=True)
class AddBorder:
    """Insert a border. created_config: the border config did not exist before."""
    border: Border
    index: int = -1
    created_config: bool = False


@dataclass(frozen=True)
class RemoveBorder:
    """Remove a border. created_config: drop the config once it is empty."""
    border: Border
    index: int = -1
    created_config: bool = False


@dataclass(frozen=True)
class UpdateBorder:
    border_id: str
    prev: Patch
    next: Patch


@dataclass(frozen=True)
class SetBordersEnabled:
    """Toggle borders. created_config: no config exists on the disabled side."""
    prev_enabled: bool
    next_enabled: bool
    created_config: bool = False


@dataclass(frozen=True)
class ReorderBorders:
    from_index: int
    to_index: int


PatternOperation = Union[AddBlockInstance, RemoveBlockInstance, UpdateBlockInstance, ResizePatternGrid,
                         AddBorder, RemoveBorder, UpdateBorder, SetBordersEnabled, ReorderBorders,
                         UpdatePalette, AddRole, RemoveRole, RestoreRole, RenameRole, Batch]


# ========================================
# Invert
# ========================================

def _without_role_override(prev: Patch, role_id: str) -> Patch:
    overrides = dict(prev.get('palette_overrides') or {})
    overrides.pop(role_id, None)
    return {'palette_overrides': overrides}


def _restore_instance_overrides(ref: RoleReference, role_id: str, fallback_role_id: str) -> UpdateBlockInstance:
    return UpdateBlockInstance(ref.target_id, prev=_without_role_override(ref.prev, role_id), next=ref.prev)


def invert_pattern_operation(operation: PatternOperation) -> PatternOperation:
    """Return the operation that undoes `operation`.

    Raises:
        TypeError: If the operation is not part of the pattern vocabulary
    """
    if isinstance(operation, AddBlockInstance):
        return RemoveBlockInstance(operation.instance, operation.index)
    if isinstance(operation, RemoveBlockInstance):
        return AddBlockInstance(operation.instance, operation.index)
    if isinstance(operation, UpdateBlockInstance):
        return UpdateBlockInstance(operation.instance_id, prev=operation.next, next=operation.prev)
    if isinstance(operation, ResizePatternGrid):
        return ResizePatternGrid(
            prev_size=operation.next_size,
            next_size=operation.prev_size,
            removed_instances=operation.restored_instances,
            restored_instances=operation.removed_instances,
            instance_shift=-operation.instance_shift,
        )
    if isinstance(operation, AddBorder):
        return RemoveBorder(operation.border, operation.index, operation.created_config)
    if isinstance(operation, RemoveBorder):
        return AddBorder(operation.border, operation.index, operation.created_config)
    if isinstance(operation, UpdateBorder):
        return UpdateBorder(operation.border_id, prev=operation.next, next=operation.prev)
    if isinstance(operation, SetBordersEnabled):
        return SetBordersEnabled(operation.next_enabled, operation.prev_enabled, operation.created_config)
    if isinstance(operation, ReorderBorders):
        return ReorderBorders(operation.to_index, operation.from_index)
    if isinstance(operation, PALETTE_OPERATIONS):
        return invert_palette_operation(operation, _restore_instance_overrides)
    if isinstance(operation, Batch):
        return invert_batch(operation, invert_pattern_operation)
    raise TypeError(f"Unknown pattern operation: {type(operation).__name__}")


# ========================================
# Apply: block instances
# ========================================

def _replace_at(items: tuple, index: int, item) -> tuple:
    return items[:index] + (item,) + items[index + 1:]


def _reduce_instances(instances: Tuple[BlockInstance, ...], operation) -> Tuple[BlockInstance, ...]:
    if isinstance(operation, AddBlockInstance):
        if index_by_id(instances, operation.instance.id) != -1:
            logger.warning(f"add_block_instance: instance '{operation.instance.id}' already present")
            return instances
        return insert_at(instances, operation.instance, operation.index)

    if isinstance(operation, RemoveBlockInstance):
        index = index_by_id(instances, operation.instance.id)
        if index == -1:
            logger.warning(f"remove_block_instance: instance '{operation.instance.id}' not found")
            return instances
        return instances[:index] + instances[index + 1:]

    if isinstance(operation, UpdateBlockInstance):
        index = index_by_id(instances, operation.instance_id)
        if index == -1:
            logger.warning(f"update_block_instance: instance '{operation.instance_id}' not found")
            return instances
        updated = instances[index].with_patch(operation.next)
        if updated is instances[index]:
            return instances
        return _replace_at(instances, index, updated)

    if isinstance(operation, ResizePatternGrid):
        result = instances
        removed_ids = {entry.item.id for entry in operation.removed_instances}
        if removed_ids:
            result = tuple(i for i in result if i.id not in removed_ids)
        shift = operation.instance_shift
        if shift:
            result = tuple(
                i.with_patch({'position': i.position.offset(shift.row_delta, shift.col_delta)})
                for i in result
            )
        for entry in sorted(operation.restored_instances, key=lambda e: e.index):
            if index_by_id(result, entry.item.id) == -1:
                result = insert_at(result, entry.item, entry.index)
        return result

    if isinstance(operation, RemoveRole):
        result = instances
        for ref in operation.affected:
            index = index_by_id(result, ref.target_id)
            if index == -1:
                logger.warning(f"remove_role: affected instance '{ref.target_id}' not found")
                continue
            patch = _without_role_override(ref.prev, operation.role.id)
            result = _replace_at(result, index, result[index].with_patch(patch))
        return result

    return instances


def apply_operation_to_block_instances(instances: Tuple[BlockInstance, ...],
                                       operation: PatternOperation) -> Tuple[BlockInstance, ...]:
    """Instance-list reducer. Returns `instances` itself when nothing matched."""
    return fold_operation(instances, operation, _reduce_instances)


# ========================================
# Apply: palette, grid size, borders
# ========================================

def apply_pattern_operation_to_palette(palette: Palette, operation: PatternOperation) -> Palette:
    return apply_operation_to_palette(palette, operation)


def _reduce_grid_size(size: GridSize, operation) -> GridSize:
    if isinstance(operation, ResizePatternGrid):
        return operation.next_size
    return size


def apply_operation_to_pattern_grid_size(size: GridSize, operation: PatternOperation) -> GridSize:
    return fold_operation(size, operation, _reduce_grid_size)


def _reduce_border_config(config: Optional[BorderConfig], operation) -> Optional[BorderConfig]:
    if isinstance(operation, AddBorder):
        if config is None:
            config = BorderConfig(enabled=True, borders=())
        if config.index_of(operation.border.id) != -1:
            logger.warning(f"add_border: border '{operation.border.id}' already present")
            return config
        return BorderConfig(config.enabled, insert_at(config.borders, operation.border, operation.index))

    if isinstance(operation, RemoveBorder):
        if config is None or config.index_of(operation.border.id) == -1:
            logger.warning(f"remove_border: border '{operation.border.id}' not found")
            return config
        borders = tuple(b for b in config.borders if b.id != operation.border.id)
        if operation.created_config and not borders:
            return None
        return BorderConfig(config.enabled, borders)

    if isinstance(operation, UpdateBorder):
        if config is None:
            logger.warning(f"update_border: no border config for '{operation.border_id}'")
            return config
        index = config.index_of(operation.border_id)
        if index == -1:
            logger.warning(f"update_border: border '{operation.border_id}' not found")
            return config
        updated = config.borders[index].with_patch(operation.next)
        if updated is config.borders[index]:
            return config
        return BorderConfig(config.enabled, _replace_at(config.borders, index, updated))

    if isinstance(operation, SetBordersEnabled):
        if operation.next_enabled:
            if config is None:
                return BorderConfig(enabled=True, borders=())
            if config.enabled:
                return config
            return BorderConfig(True, config.borders)
        if config is None:
            return config
        if operation.created_config and not config.borders:
            return None
        if not config.enabled:
            return config
        return BorderConfig(False, config.borders)

    if isinstance(operation, ReorderBorders):
        if config is None:
            return config
        count = len(config.borders)
        if not (0 <= operation.from_index < count and 0 <= operation.to_index < count):
            logger.warning(f"reorder_borders: index out of range ({operation.from_index} -> {operation.to_index})")
            return config
        if operation.from_index == operation.to_index:
            return config
        borders = list(config.borders)
        moved = borders.pop(operation.from_index)
        borders.insert(operation.to_index, moved)
        return BorderConfig(config.enabled, tuple(borders))

    return config


def apply_operation_to_border_config(config: Optional[BorderConfig],
                                     operation: PatternOperation) -> Optional[BorderConfig]:
    """Border-config reducer. Returns `config` itself when nothing matched."""
    return fold_operation(config, operation, _reduce_border_config)
