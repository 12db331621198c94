"""Reversible edit operations for the block and pattern editors.

Shared scaffolding (Batch, palette operations, composite folding) lives in
common; each editor has its own vocabulary module with invert/apply functions.
"""

from .common import (
    AddRole, Batch, IndexedEntry, RemoveRole, RenameRole, RestoreRole, RoleReference, UpdatePalette,
    apply_operation_to_palette, fold_operation, is_composite,
)
from .block_operations import (
    AddUnit, RemoveUnit, ResizeGrid, UpdateUnit, BlockOperation, apply_block_operation_to_palette,
    apply_operation_to_grid_size, apply_operation_to_units, invert_block_operation,
)
from .pattern_operations import (
    AddBlockInstance, AddBorder, RemoveBlockInstance, RemoveBorder, ReorderBorders,
    ResizePatternGrid, SetBordersEnabled, UpdateBlockInstance, UpdateBorder, PatternOperation,
    apply_operation_to_block_instances, apply_operation_to_border_config, apply_pattern_operation_to_palette,
    apply_operation_to_pattern_grid_size, invert_pattern_operation,
)
