"""
Quilt Block Editor - Pattern Designer

THE STORE for one quilt pattern. Owns the Pattern document, its undo
history and the editing state around it (mode, selections, placement
rotation, grid resize position, range anchor, block cache).

Edits are operations from services.operations applied through the pattern
reducers (instances, palette, grid size, borders). Before recording, every
operation is extended with the variant role changes its override colors
imply, so undo restores palette and overrides together.

Usage:
    designer = PatternDesigner()
    instance_id = designer.add_block_instance(block.id, GridPosition(0, 0))
    designer.set_instance_role_override(instance_id, 'feature', '#AA0000')
    designer.undo()
"""

import logging
from dataclasses import replace
from typing import Any, Dict, Optional

from constants import DEFAULT_PATTERN_TITLE, DESCRIPTION_MAX_LENGTH, PATTERN_DESIGNER_MODES, TITLE_MAX_LENGTH
from models.document import Pattern, current_timestamp
from models.palette import Palette
from models.pattern import BlockInstance, calculate_physical_size
from models.transform import GridSize
from models._designer_internal.history_mixin import DesignerHistoryMixin
from services.operations import (
    apply_operation_to_block_instances, apply_operation_to_border_config,
    apply_operation_to_pattern_grid_size, apply_pattern_operation_to_palette, invert_pattern_operation,
)
from services.persistence import serialize_pattern
from utils.config import EditorConfig
from utils.history_manager import HistoryManager
from utils.id_generator import IdGenerator, generate_uuid
from .border_mixin import PatternBorderMixin
from .grid_mixin import PatternGridMixin
from .instance_mixin import PatternInstanceMixin
from .palette_mixin import PatternPaletteMixin
from .variant_color_mixin import PatternVariantColorMixin


class PatternDesigner(PatternInstanceMixin, PatternVariantColorMixin, PatternGridMixin,
                      PatternPaletteMixin, PatternBorderMixin, DesignerHistoryMixin):
    """Pattern design store

    Properties:
        pattern: Current Pattern document
        block_instances, palette, grid_size: Shortcuts into the pattern
        mode: One of PATTERN_DESIGNER_MODES
    """

    def __init__(self, pattern: Optional[Pattern] = None, config: Optional[EditorConfig] = None,
                 id_generator: Optional[IdGenerator] = None):
        self._logger = logging.getLogger('PatternDesigner')
        self._config = (config or EditorConfig()).clamped()
        self._id_generator = id_generator or generate_uuid
        self._history = HistoryManager(invert_pattern_operation, self._config.max_history)
        self._dirty = False
        self._pattern = pattern if pattern is not None else self._blank_pattern()
        self._block_cache = {}
        self._reset_view_state()

    def _blank_pattern(self, rows: Optional[int] = None, cols: Optional[int] = None) -> Pattern:
        now = current_timestamp()
        grid_size = GridSize(rows or self._config.default_pattern_rows,
                             cols or self._config.default_pattern_cols)
        return Pattern(
            title=DEFAULT_PATTERN_TITLE,
            grid_size=grid_size,
            physical_size=calculate_physical_size(grid_size, self._config.block_size_inches),
            created_at=now,
            updated_at=now,
        )

    def _reset_view_state(self):
        self._mode = 'idle'
        self._selected_instance_id = None
        self._selected_library_block_id = None
        self._selected_border_id = None
        self._placement_rotation = 0
        self._grid_resize_position = 'end'
        self._range_fill_anchor = None

    # ========================================
    # Commit / Apply
    # ========================================

    def _commit(self, operation, description: str = "") -> None:
        super()._commit(self._with_variant_sync(operation), description)

    def _apply_operation(self, operation) -> None:
        pattern = self._pattern
        instances = apply_operation_to_block_instances(pattern.block_instances, operation)
        palette = apply_pattern_operation_to_palette(pattern.palette, operation)
        grid_size = apply_operation_to_pattern_grid_size(pattern.grid_size, operation)
        border_config = apply_operation_to_border_config(pattern.border_config, operation)
        if (instances is pattern.block_instances and palette is pattern.palette
                and grid_size == pattern.grid_size and border_config is pattern.border_config):
            return
        physical_size = pattern.physical_size
        if grid_size != pattern.grid_size:
            physical_size = calculate_physical_size(grid_size, physical_size.block_size_inches)
        self._pattern = replace(
            pattern,
            block_instances=instances,
            palette=palette,
            grid_size=grid_size,
            physical_size=physical_size,
            border_config=border_config,
            updated_at=current_timestamp(),
        )

    def _after_history_step(self) -> None:
        if self._selected_instance_id and self._pattern.get_instance(self._selected_instance_id) is None:
            self._selected_instance_id = None
        config = self._pattern.border_config
        if self._selected_border_id and (config is None or config.get_border(self._selected_border_id) is None):
            self._selected_border_id = None

    # ========================================
    # Document
    # ========================================

    def load_pattern(self, pattern: Pattern) -> None:
        """Replace the document; history and view state start fresh"""
        self._pattern = pattern
        self._reset_history()
        self._reset_view_state()
        self._logger.debug(f"Loaded pattern '{pattern.title}' ({len(pattern.block_instances)} blocks)")

    def new_pattern(self, rows: Optional[int] = None, cols: Optional[int] = None) -> None:
        self.load_pattern(self._blank_pattern(rows, cols))

    def set_title(self, title: str) -> None:
        self._pattern = replace(self._pattern, title=(title or '')[:TITLE_MAX_LENGTH],
                                updated_at=current_timestamp())
        self._dirty = True

    def set_description(self, description: str) -> None:
        self._pattern = replace(self._pattern, description=(description or '')[:DESCRIPTION_MAX_LENGTH],
                                updated_at=current_timestamp())
        self._dirty = True

    def get_snapshot(self) -> Dict[str, Any]:
        return serialize_pattern(self._pattern)

    def set_mode(self, mode: str) -> bool:
        if mode not in PATTERN_DESIGNER_MODES:
            return False
        self._mode = mode
        if mode == 'idle':
            self._selected_instance_id = None
            self._selected_library_block_id = None
        return True

    def enter_preview(self) -> None:
        self.set_mode('preview')
        self._selected_instance_id = None
        self._selected_border_id = None

    def exit_preview(self) -> None:
        self.set_mode('idle')

    # ========================================
    # Read access
    # ========================================

    @property
    def pattern(self) -> Pattern:
        return self._pattern

    @property
    def block_instances(self):
        return self._pattern.block_instances

    @property
    def palette(self) -> Palette:
        return self._pattern.palette

    @property
    def grid_size(self) -> GridSize:
        return self._pattern.grid_size

    @property
    def mode(self) -> str:
        return self._mode

    @property
    def selected_instance_id(self) -> Optional[str]:
        return self._selected_instance_id

    @property
    def selected_instance(self) -> Optional[BlockInstance]:
        if self._selected_instance_id is None:
            return None
        return self._pattern.get_instance(self._selected_instance_id)

    @property
    def selected_library_block_id(self) -> Optional[str]:
        return self._selected_library_block_id

    @property
    def selected_border_id(self) -> Optional[str]:
        return self._selected_border_id

    @property
    def placement_rotation(self) -> int:
        return self._placement_rotation

    @property
    def grid_resize_position(self) -> str:
        return self._grid_resize_position

    @property
    def range_fill_anchor(self):
        return self._range_fill_anchor

    def __repr__(self):
        size = self._pattern.grid_size
        return (f"PatternDesigner(title={self._pattern.title!r}, grid={size.rows}x{size.cols}, "
                f"blocks={len(self._pattern.block_instances)})")
