"""
Quilt Block Editor - Pattern Grid Mixin

Pattern grid sizing. Every change is one ResizePatternGrid operation that
records the instances it drops and, for rows or columns inserted or deleted
at the start edge, the shift applied to the survivors.
"""

from constants import (
    GRID_RESIZE_POSITIONS, LARGE_GRID_THRESHOLD, MAX_PATTERN_GRID_SIZE, MIN_PATTERN_GRID_SIZE,
)
from models.transform import GridSize, InstanceShift
from services.operations import IndexedEntry, ResizePatternGrid
from services.placement import count_empty_cells, has_pieces_in_column, has_pieces_in_row


def _size_allowed(value: int) -> bool:
    return MIN_PATTERN_GRID_SIZE <= value <= MAX_PATTERN_GRID_SIZE


class PatternGridMixin:
    """Mixin containing grid operations for PatternDesigner

    This mixin expects the parent class to have:
    - self._pattern: current Pattern document
    - self._grid_resize_position: 'start' or 'end'
    - self._logger: Logger instance
    - self._commit(operation, description): record-then-apply
    """

    def _commit_resize(self, next_size: GridSize, remove, shift: InstanceShift, description: str) -> bool:
        """Record a resize dropping every instance for which remove(instance) is true"""
        pattern = self._pattern
        removed = tuple(
            IndexedEntry(index, instance)
            for index, instance in enumerate(pattern.block_instances)
            if remove(instance)
        )
        self._commit(ResizePatternGrid(
            prev_size=pattern.grid_size,
            next_size=next_size,
            removed_instances=removed,
            instance_shift=shift,
        ), description)
        if self._selected_instance_id in {entry.item.id for entry in removed}:
            self._selected_instance_id = None
        self._logger.debug(f"Grid {tuple(pattern.grid_size)} -> {tuple(next_size)}, "
                           f"removed {len(removed)} blocks, shift ({shift.row_delta}, {shift.col_delta})")
        return True

    # ========================================
    # Resize
    # ========================================

    def resize_grid(self, rows: int, cols: int) -> bool:
        """Set the grid size, dropping instances outside it

        Returns:
            False if either dimension is out of range or nothing changes
        """
        if not (_size_allowed(rows) and _size_allowed(cols)):
            return False
        next_size = GridSize(rows, cols)
        if next_size == self._pattern.grid_size:
            return False
        return self._commit_resize(next_size, lambda i: not next_size.contains(i.position),
                                   InstanceShift(), f"Resize grid to {rows}x{cols}")

    def add_row(self) -> bool:
        size = self._pattern.grid_size
        if not self.can_add_row():
            return False
        shift = InstanceShift(1, 0) if self._grid_resize_position == 'start' else InstanceShift()
        return self._commit_resize(GridSize(size.rows + 1, size.cols), lambda i: False, shift, "Add row")

    def remove_row(self) -> bool:
        """Remove the first or last row, per the resize position, with its instances"""
        size = self._pattern.grid_size
        if not self.can_remove_row():
            return False
        if self._grid_resize_position == 'start':
            return self._commit_resize(GridSize(size.rows - 1, size.cols), lambda i: i.position.row == 0,
                                       InstanceShift(-1, 0), "Remove row")
        last = size.rows - 1
        return self._commit_resize(GridSize(size.rows - 1, size.cols), lambda i: i.position.row >= last,
                                   InstanceShift(), "Remove row")

    def add_column(self) -> bool:
        size = self._pattern.grid_size
        if not self.can_add_column():
            return False
        shift = InstanceShift(0, 1) if self._grid_resize_position == 'start' else InstanceShift()
        return self._commit_resize(GridSize(size.rows, size.cols + 1), lambda i: False, shift, "Add column")

    def remove_column(self) -> bool:
        size = self._pattern.grid_size
        if not self.can_remove_column():
            return False
        if self._grid_resize_position == 'start':
            return self._commit_resize(GridSize(size.rows, size.cols - 1), lambda i: i.position.col == 0,
                                       InstanceShift(0, -1), "Remove column")
        last = size.cols - 1
        return self._commit_resize(GridSize(size.rows, size.cols - 1), lambda i: i.position.col >= last,
                                   InstanceShift(), "Remove column")

    def set_grid_resize_position(self, position: str) -> bool:
        """Choose where rows and columns are added or removed: 'start' or 'end'"""
        if position not in GRID_RESIZE_POSITIONS:
            return False
        self._grid_resize_position = position
        return True

    # ========================================
    # Queries
    # ========================================

    def can_add_row(self) -> bool:
        return self._pattern.grid_size.rows < MAX_PATTERN_GRID_SIZE

    def can_remove_row(self) -> bool:
        return self._pattern.grid_size.rows > MIN_PATTERN_GRID_SIZE

    def can_add_column(self) -> bool:
        return self._pattern.grid_size.cols < MAX_PATTERN_GRID_SIZE

    def can_remove_column(self) -> bool:
        return self._pattern.grid_size.cols > MIN_PATTERN_GRID_SIZE

    def has_blocks_in_row(self, row: int) -> bool:
        return has_pieces_in_row(self._pattern.block_instances, row)

    def has_blocks_in_column(self, col: int) -> bool:
        return has_pieces_in_column(self._pattern.block_instances, col)

    def is_grid_large(self) -> bool:
        size = self._pattern.grid_size
        return size.rows > LARGE_GRID_THRESHOLD or size.cols > LARGE_GRID_THRESHOLD

    def empty_slot_count(self) -> int:
        return count_empty_cells(self._pattern.block_instances, self._pattern.grid_size)

    def can_publish(self) -> bool:
        """Every slot holds a block"""
        return self.empty_slot_count() == 0
