"""
Quilt Block Editor - Block Designer

THE STORE for one block being designed. Owns the Block document, the undo
history and the transient editing state (mode, selection, paint role,
two-tap placement, range anchor, preview preset).

Every edit builds an operation from services.operations, applies it through
the pure block reducers and records it; the document itself is immutable and
swapped after each step.

Usage:
    designer = BlockDesigner()
    unit_id = designer.add_hst(GridPosition(0, 0), variant='ne')
    designer.rotate_unit(unit_id)
    designer.undo()
"""

import logging
from dataclasses import replace
from typing import Optional

from constants import DEFAULT_BLOCK_TITLE
from models.document import Block, current_timestamp
from models.palette import Palette
from models.unit import Unit
from models._designer_internal.history_mixin import DesignerHistoryMixin
from services.operations import (
    apply_block_operation_to_palette, apply_operation_to_grid_size, apply_operation_to_units,
    invert_block_operation,
)
from services.placement import count_empty_cells
from services.unit_registry import UnitRegistry, unit_registry
from utils.config import EditorConfig
from utils.history_manager import HistoryManager
from utils.id_generator import IdGenerator, generate_uuid
from .document_mixin import BlockDocumentMixin
from .palette_mixin import BlockPaletteMixin
from .placement_mixin import BlockPlacementMixin
from .transform_mixin import BlockTransformMixin


class BlockDesigner(BlockPlacementMixin, BlockTransformMixin, BlockPaletteMixin,
                    BlockDocumentMixin, DesignerHistoryMixin):
    """Block design store

    Properties:
        block: Current Block document
        units, palette, grid_size: Shortcuts into the block
        mode: One of BLOCK_DESIGNER_MODES
        selected_unit_id: Selected unit or None
        active_role_id: Paint role or None
    """

    def __init__(self, block: Optional[Block] = None, config: Optional[EditorConfig] = None,
                 id_generator: Optional[IdGenerator] = None, registry: Optional[UnitRegistry] = None):
        self._logger = logging.getLogger('BlockDesigner')
        self._config = (config or EditorConfig()).clamped()
        self._id_generator = id_generator or generate_uuid
        self._registry = registry or unit_registry
        self._history = HistoryManager(invert_block_operation, self._config.max_history)
        self._dirty = False
        self._block = block if block is not None else self._blank_block()
        self._reset_view_state()

    def _blank_block(self, grid_size: Optional[int] = None) -> Block:
        now = current_timestamp()
        return Block(
            title=DEFAULT_BLOCK_TITLE,
            grid_size=grid_size or self._config.default_block_grid_size,
            created_at=now,
            updated_at=now,
        )

    def _reset_view_state(self):
        self._mode = 'idle'
        self._selected_unit_id = None
        self._selected_unit_type = None
        self._selected_variant = None
        self._active_role_id = None
        self._two_tap = None
        self._range_fill_anchor = None
        self._preview_preset = 'all_same'

    # ========================================
    # Apply
    # ========================================

    def _apply_operation(self, operation) -> None:
        block = self._block
        units = apply_operation_to_units(block.units, operation)
        palette = apply_block_operation_to_palette(block.palette, operation)
        grid_size = apply_operation_to_grid_size(block.grid_size, operation)
        if units is block.units and palette is block.palette and grid_size == block.grid_size:
            return
        self._block = replace(block, units=units, palette=palette, grid_size=grid_size,
                              updated_at=current_timestamp())

    def _after_history_step(self) -> None:
        if self._selected_unit_id and self._block.get_unit(self._selected_unit_id) is None:
            self._selected_unit_id = None
        if self._active_role_id and not self._block.palette.has_role(self._active_role_id):
            self._active_role_id = None
            if self._mode == 'paint_mode':
                self._mode = 'idle'

    # ========================================
    # Read access
    # ========================================

    @property
    def block(self) -> Block:
        return self._block

    @property
    def units(self):
        return self._block.units

    @property
    def palette(self) -> Palette:
        return self._block.palette

    @property
    def grid_size(self) -> int:
        return self._block.grid_size

    @property
    def mode(self) -> str:
        return self._mode

    @property
    def selected_unit_id(self) -> Optional[str]:
        return self._selected_unit_id

    @property
    def selected_unit(self) -> Optional[Unit]:
        if self._selected_unit_id is None:
            return None
        return self._block.get_unit(self._selected_unit_id)

    @property
    def selected_unit_type(self) -> Optional[str]:
        return self._selected_unit_type

    @property
    def active_role_id(self) -> Optional[str]:
        return self._active_role_id

    @property
    def range_fill_anchor(self):
        return self._range_fill_anchor

    @property
    def preview_preset(self) -> str:
        return self._preview_preset

    def empty_cell_count(self) -> int:
        return count_empty_cells(self._block.units, self._block.grid_size)

    def __repr__(self):
        return (f"BlockDesigner(title={self._block.title!r}, grid={self._block.grid_size}, "
                f"units={len(self._block.units)})")
