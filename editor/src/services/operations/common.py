"""
Shared operation scaffolding for the block and pattern editors.

Holds what both operation vocabularies have in common:
- Batch: ordered group of operations recorded as one undo step
- Palette operations (color, add/remove/rename role) and their palette reducer
- RestoreRole: the batch-shaped inverse of RemoveRole
- fold_operation(): applies a possibly-composite operation through a reducer

Each editor module adds its own entity operations and builds its invert/apply
functions on top of these.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple, TypeVar

from models.palette import FabricRole, Palette
from models.patch import Patch

logger = logging.getLogger(__name__)

V = TypeVar('V')


# ========================================
# Composite operations
# ========================================

@dataclass(frozen=True)
class Batch:
    """Ordered operations applied in order and undone in reverse."""
    operations: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class IndexedEntry:
    """An entity together with the list index it occupied."""
    index: int
    item: Any


# ========================================
# Palette operations
# ========================================

@dataclass(frozen=True)
class UpdatePalette:
    """Recolor one role."""
    role_id: str
    prev_color: str
    next_color: str


@dataclass(frozen=True)
class AddRole:
    """Insert a role at a palette index (-1 appends)."""
    role: FabricRole
    index: int = -1


@dataclass(frozen=True)
class RoleReference:
    """Prior role state of one entity touched by a role removal.

    Attributes:
        target_id: Unit or instance id
        prev: Field patch restoring every role slot the entity had
    """
    target_id: str
    prev: Patch


@dataclass(frozen=True)
class RemoveRole:
    """Remove a role, reassigning every referencing entity.

    A RemoveRole without fallback and affected entities is the plain inverse
    of AddRole and inverts back to it.
    """
    role: FabricRole
    index: int
    fallback_role_id: Optional[str] = None
    affected: Tuple[RoleReference, ...] = ()

    @property
    def is_plain(self) -> bool:
        return self.fallback_role_id is None and not self.affected


@dataclass(frozen=True)
class RestoreRole:
    """Inverse of RemoveRole: AddRole followed by one update per affected entity.

    Carries the RemoveRole fields so inverting it yields the original removal
    exactly; `operations` holds the member operations that are applied.
    """
    role: FabricRole
    index: int
    fallback_role_id: Optional[str]
    affected: Tuple[RoleReference, ...]
    operations: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class RenameRole:
    role_id: str
    prev_name: str
    next_name: str


PALETTE_OPERATIONS = (UpdatePalette, AddRole, RemoveRole, RestoreRole, RenameRole)


def is_composite(operation) -> bool:
    return isinstance(operation, (Batch, RestoreRole))


# ========================================
# Invert helpers
# ========================================

def invert_batch(batch: Batch, invert: Callable[[Any], Any]) -> Batch:
    """Invert each member and reverse the order."""
    return Batch(tuple(invert(op) for op in reversed(batch.operations)))


def invert_palette_operation(operation, restore_update: Callable[[RoleReference, str, Optional[str]], Any]):
    """Invert one of the shared palette operations.

    Args:
        operation: UpdatePalette, AddRole, RemoveRole, RestoreRole or RenameRole
        restore_update: Builds the editor-specific update that restores one
            affected entity: (reference, removed role id, fallback id) -> operation

    Returns:
        The inverse operation
    """
    if isinstance(operation, UpdatePalette):
        return UpdatePalette(operation.role_id, operation.next_color, operation.prev_color)
    if isinstance(operation, AddRole):
        return RemoveRole(operation.role, operation.index)
    if isinstance(operation, RemoveRole):
        if operation.is_plain:
            return AddRole(operation.role, operation.index)
        members = [AddRole(operation.role, operation.index)]
        members.extend(restore_update(ref, operation.role.id, operation.fallback_role_id)
                       for ref in operation.affected)
        return RestoreRole(operation.role, operation.index, operation.fallback_role_id,
                           operation.affected, tuple(members))
    if isinstance(operation, RestoreRole):
        return RemoveRole(operation.role, operation.index, operation.fallback_role_id, operation.affected)
    if isinstance(operation, RenameRole):
        return RenameRole(operation.role_id, operation.next_name, operation.prev_name)
    raise TypeError(f"Not a palette operation: {type(operation).__name__}")


# ========================================
# Apply helpers
# ========================================

def fold_operation(value: V, operation, reducer: Callable[[V, Any], V]) -> V:
    """Apply an operation through a single-operation reducer.

    Composite operations (Batch, RestoreRole) are unpacked recursively and
    their members applied in order.
    """
    if is_composite(operation):
        for member in operation.operations:
            value = fold_operation(value, member, reducer)
        return value
    return reducer(value, operation)


def _reduce_palette(palette: Palette, operation) -> Palette:
    if isinstance(operation, UpdatePalette):
        if not palette.has_role(operation.role_id):
            logger.warning(f"update_palette: role '{operation.role_id}' not found")
            return palette
        return palette.with_role_color(operation.role_id, operation.next_color)
    if isinstance(operation, AddRole):
        if palette.has_role(operation.role.id):
            logger.warning(f"add_role: role '{operation.role.id}' already present")
            return palette
        return palette.with_role_inserted(operation.role, operation.index)
    if isinstance(operation, RemoveRole):
        if not palette.has_role(operation.role.id):
            logger.warning(f"remove_role: role '{operation.role.id}' not found")
            return palette
        return palette.without_role(operation.role.id)
    if isinstance(operation, RenameRole):
        if not palette.has_role(operation.role_id):
            logger.warning(f"rename_role: role '{operation.role_id}' not found")
            return palette
        return palette.with_role_name(operation.role_id, operation.next_name)
    return palette


def apply_operation_to_palette(palette: Palette, operation) -> Palette:
    """Palette reducer shared by both editors.

    Returns the same Palette object when the operation does not touch it.
    """
    return fold_operation(palette, operation, _reduce_palette)


# ========================================
# Indexed list helpers
# ========================================

def insert_at(items: Tuple[Any, ...], item, index: int) -> Tuple[Any, ...]:
    """Insert into a tuple; an out-of-range or negative index appends."""
    if index is None or index < 0 or index > len(items):
        return items + (item,)
    return items[:index] + (item,) + items[index:]


def index_by_id(items: Tuple[Any, ...], item_id: str) -> int:
    for i, item in enumerate(items):
        if item.id == item_id:
            return i
    return -1
