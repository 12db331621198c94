"""
Placement & Occupancy

Grid reasoning shared by both designers:
- occupancy of cells by span-bearing pieces (units cover their span,
  pattern instances cover one cell)
- free orthogonal neighbors for the two-tap flying-geese gesture
- direction/anchor derivation for the second tap
- rectangular range fill between an anchor and an end cell

Per-cell queries scan the piece list; bulk queries build a numpy
occupancy mask once.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

import numpy as np

from models.transform import GridPosition, GridSize, Span

SINGLE_CELL = Span(1, 1)


def _footprint(piece) -> Tuple[GridPosition, Span]:
    return piece.position, getattr(piece, 'span', SINGLE_CELL)


def _as_grid_size(grid_size) -> GridSize:
    if isinstance(grid_size, GridSize):
        return grid_size
    return GridSize(int(grid_size), int(grid_size))


def in_bounds(position: GridPosition, grid_size) -> bool:
    return _as_grid_size(grid_size).contains(position)


# ========================================
# Occupancy
# ========================================

def occupancy_mask(pieces: Iterable, grid_size) -> np.ndarray:
    """Boolean rows x cols array, True where a piece covers the cell.

    Footprints are clipped to the grid.

    Args:
        pieces: Units or block instances
        grid_size: Square size (int) or GridSize
    """
    size = _as_grid_size(grid_size)
    mask = np.zeros((size.rows, size.cols), dtype=bool)
    for piece in pieces:
        position, span = _footprint(piece)
        r0, c0 = max(position.row, 0), max(position.col, 0)
        r1 = min(position.row + span.rows, size.rows)
        c1 = min(position.col + span.cols, size.cols)
        if r0 < r1 and c0 < c1:
            mask[r0:r1, c0:c1] = True
    return mask


def get_piece_at(pieces: Iterable, position: GridPosition):
    """First piece whose footprint covers the cell, or None."""
    for piece in pieces:
        anchor, span = _footprint(piece)
        if (anchor.row <= position.row < anchor.row + span.rows
                and anchor.col <= position.col < anchor.col + span.cols):
            return piece
    return None


def is_cell_occupied(pieces: Iterable, position: GridPosition) -> bool:
    return get_piece_at(pieces, position) is not None


def count_empty_cells(pieces: Iterable, grid_size) -> int:
    mask = occupancy_mask(pieces, grid_size)
    return int(mask.size - np.count_nonzero(mask))


def get_empty_cells(pieces: Iterable, grid_size) -> List[GridPosition]:
    """Every uncovered cell, row-major."""
    mask = occupancy_mask(pieces, grid_size)
    return [GridPosition(int(r), int(c)) for r, c in np.argwhere(~mask)]


def has_pieces_in_row(pieces: Iterable, row: int) -> bool:
    for piece in pieces:
        position, span = _footprint(piece)
        if position.row <= row < position.row + span.rows:
            return True
    return False


def has_pieces_in_column(pieces: Iterable, col: int) -> bool:
    for piece in pieces:
        position, span = _footprint(piece)
        if position.col <= col < position.col + span.cols:
            return True
    return False


def fits_in_grid(piece, grid_size) -> bool:
    """Check if the whole footprint lies inside the grid."""
    size = _as_grid_size(grid_size)
    position, span = _footprint(piece)
    return (position.row >= 0 and position.col >= 0
            and position.row + span.rows <= size.rows
            and position.col + span.cols <= size.cols)


def can_place(pieces: Iterable, position: GridPosition, span: Span, grid_size) -> bool:
    """Check that a footprint is in bounds and covers no occupied cell."""
    size = _as_grid_size(grid_size)
    if position.row < 0 or position.col < 0:
        return False
    if position.row + span.rows > size.rows or position.col + span.cols > size.cols:
        return False
    mask = occupancy_mask(pieces, size)
    return not mask[position.row:position.row + span.rows, position.col:position.col + span.cols].any()


# ========================================
# Two-tap placement
# ========================================

def get_valid_adjacent_cells(pieces: Iterable, position: GridPosition, grid_size) -> List[GridPosition]:
    """Up, down, left and right neighbors that are in bounds and free."""
    size = _as_grid_size(grid_size)
    mask = occupancy_mask(pieces, size)
    neighbors = [
        position.offset(-1, 0),
        position.offset(1, 0),
        position.offset(0, -1),
        position.offset(0, 1),
    ]
    return [cell for cell in neighbors if size.contains(cell) and not mask[cell.row, cell.col]]


@dataclass(frozen=True)
class TwoTapPlacement:
    """Pending first tap of a two-cell placement.

    The valid second cells are computed once, when the first tap lands.
    """
    first_cell: GridPosition
    valid_cells: Tuple[GridPosition, ...] = field(default_factory=tuple)

    def accepts(self, second_cell: GridPosition) -> bool:
        return second_cell in self.valid_cells


def derive_direction(first_cell: GridPosition, second_cell: GridPosition) -> Tuple[str, GridPosition]:
    """Direction and anchor for a two-cell piece spanning both cells.

    Decision order: right, left, down, otherwise up. The anchor is the
    top-left of the two cells.
    """
    row_diff = second_cell.row - first_cell.row
    col_diff = second_cell.col - first_cell.col
    if col_diff == 1:
        direction = 'right'
    elif col_diff == -1:
        direction = 'left'
    elif row_diff == 1:
        direction = 'down'
    else:
        direction = 'up'
    anchor = GridPosition(min(first_cell.row, second_cell.row), min(first_cell.col, second_cell.col))
    return direction, anchor


# ========================================
# Range fill
# ========================================

def get_range_fill_cells(anchor: Optional[GridPosition], end: GridPosition,
                         pieces: Iterable = (), grid_size=None) -> List[GridPosition]:
    """Unoccupied cells of the rectangle between anchor and end, inclusive, row-major.

    Without an anchor the range is just the end cell. When grid_size is given
    cells outside the grid are skipped.
    """
    if anchor is None:
        return [end]
    pieces = list(pieces)
    min_row, max_row = sorted((anchor.row, end.row))
    min_col, max_col = sorted((anchor.col, end.col))
    size = _as_grid_size(grid_size) if grid_size is not None else None
    cells = []
    for row in range(min_row, max_row + 1):
        for col in range(min_col, max_col + 1):
            cell = GridPosition(row, col)
            if size is not None and not size.contains(cell):
                continue
            if not is_cell_occupied(pieces, cell):
                cells.append(cell)
    return cells
