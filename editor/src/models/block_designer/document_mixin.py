"""
Quilt Block Editor - Block Document Mixin

Whole-document actions for the block designer: grid resizing, metadata,
preview mode, and loading or starting a block.
"""

from dataclasses import replace
from typing import Any, Dict, List, Optional

from constants import (
    BLOCK_GRID_SIZES, DESCRIPTION_MAX_LENGTH, PREVIEW_PRESETS, TITLE_MAX_LENGTH,
)
from models.document import Block, current_timestamp
from models.unit import Unit
from services.operations import IndexedEntry, ResizeGrid
from services.persistence import extract_hashtags, serialize_block


class BlockDocumentMixin:
    """Mixin containing document-level actions for BlockDesigner

    This mixin expects the parent class to have:
    - self._block: current Block document
    - self._logger: Logger instance
    - self._commit(operation, description): record-then-apply
    - self._reset_history(), self._reset_view_state()
    """

    # ========================================
    # Grid size
    # ========================================

    def get_units_out_of_bounds(self, size: int) -> List[Unit]:
        return [unit for unit in self._block.units if not unit.fits_in(size)]

    def set_grid_size(self, size: int) -> Optional[List[Unit]]:
        """Resize the block grid, removing units that no longer fit

        The size change and the removals are one undo step.

        Returns:
            Units removed, or None if the size is unchanged or not allowed
        """
        current = self._block.grid_size
        if size == current:
            return None
        if size not in BLOCK_GRID_SIZES:
            self._logger.debug(f"set_grid_size: {size} outside allowed sizes")
            return None

        removed = tuple(
            IndexedEntry(index, unit)
            for index, unit in enumerate(self._block.units)
            if not unit.fits_in(size)
        )
        self._commit(ResizeGrid(prev_size=current, next_size=size, removed_units=removed),
                     f"Resize grid to {size}x{size}")

        removed_ids = {entry.item.id for entry in removed}
        if self._selected_unit_id in removed_ids:
            self._selected_unit_id = None
        self._logger.debug(f"Grid {current} -> {size}, removed {len(removed)} units")
        return [entry.item for entry in removed]

    # ========================================
    # Metadata
    # ========================================

    def set_title(self, title: str) -> None:
        title = (title or '')[:TITLE_MAX_LENGTH]
        self._block = replace(self._block, title=title, updated_at=current_timestamp())
        self._dirty = True

    def set_description(self, description: str) -> None:
        """Set the description and re-derive hashtags from it"""
        description = (description or '')[:DESCRIPTION_MAX_LENGTH]
        self._block = replace(
            self._block,
            description=description,
            hashtags=tuple(extract_hashtags(description)),
            updated_at=current_timestamp(),
        )
        self._dirty = True

    # ========================================
    # Preview
    # ========================================

    def enter_preview(self) -> None:
        self._mode = 'preview'
        self._selected_unit_id = None
        self._active_role_id = None
        self._two_tap = None

    def exit_preview(self) -> None:
        self._mode = 'idle'

    def set_preview_preset(self, preset: str) -> bool:
        if preset not in PREVIEW_PRESETS:
            return False
        self._preview_preset = preset
        return True

    # ========================================
    # Load / New / Snapshot
    # ========================================

    def load_block(self, block: Block) -> None:
        """Replace the document; history and view state start fresh"""
        self._block = block
        self._reset_history()
        self._reset_view_state()
        self._logger.debug(f"Loaded block '{block.title}' ({len(block.units)} units)")

    def new_block(self, grid_size: Optional[int] = None) -> None:
        self.load_block(self._blank_block(grid_size))

    def get_snapshot(self) -> Dict[str, Any]:
        """Serialized copy of the current block"""
        return serialize_block(self._block)
