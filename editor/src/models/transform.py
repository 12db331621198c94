"""Grid coordinate data structures shared by blocks and patterns."""
from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class GridPosition:
    """Zero-indexed cell coordinate.

    Used for unit anchors in a block grid and instance positions
    in a pattern grid. The anchor of a multi-cell piece is its top-left cell.
    """
    row: int
    col: int

    def __iter__(self):
        """Allow tuple unpacking: row, col = position"""
        return iter((self.row, self.col))

    def offset(self, row_delta: int, col_delta: int) -> 'GridPosition':
        return GridPosition(self.row + row_delta, self.col + col_delta)

    def to_dict(self) -> Dict[str, int]:
        return {'row': self.row, 'col': self.col}

    @staticmethod
    def from_dict(data: Dict[str, int]) -> 'GridPosition':
        return GridPosition(int(data['row']), int(data['col']))


@dataclass(frozen=True)
class Span:
    """Rectangular cell footprint measured from an anchor position."""
    rows: int = 1
    cols: int = 1

    def __iter__(self):
        return iter((self.rows, self.cols))

    def transposed(self) -> 'Span':
        return Span(self.cols, self.rows)

    def to_dict(self) -> Dict[str, int]:
        return {'rows': self.rows, 'cols': self.cols}

    @staticmethod
    def from_dict(data: Dict[str, int]) -> 'Span':
        return Span(int(data['rows']), int(data['cols']))


@dataclass(frozen=True)
class GridSize:
    """Rectangular pattern grid dimensions (rows x cols)."""
    rows: int
    cols: int

    def __iter__(self):
        return iter((self.rows, self.cols))

    def contains(self, position: GridPosition) -> bool:
        """Check whether a cell lies inside this grid."""
        return 0 <= position.row < self.rows and 0 <= position.col < self.cols

    @property
    def cell_count(self) -> int:
        return self.rows * self.cols

    def to_dict(self) -> Dict[str, int]:
        return {'rows': self.rows, 'cols': self.cols}

    @staticmethod
    def from_dict(data: Dict[str, int]) -> 'GridSize':
        return GridSize(int(data['rows']), int(data['cols']))


@dataclass(frozen=True)
class InstanceShift:
    """Positional shift applied to every surviving pattern instance.

    Recorded by grid resizes that insert or delete a row/column at the
    start edge, so the rest of the grid keeps its relative layout.
    """
    row_delta: int = 0
    col_delta: int = 0

    def __bool__(self) -> bool:
        return bool(self.row_delta or self.col_delta)

    def __neg__(self) -> 'InstanceShift':
        return InstanceShift(-self.row_delta, -self.col_delta)

    def to_dict(self) -> Dict[str, int]:
        return {'row_delta': self.row_delta, 'col_delta': self.col_delta}

    @staticmethod
    def from_dict(data: Dict[str, int]) -> 'InstanceShift':
        return InstanceShift(int(data.get('row_delta', 0)), int(data.get('col_delta', 0)))


def cells_in_span(position: GridPosition, span: Span):
    """Yield every cell covered by a footprint, row-major."""
    for r in range(position.row, position.row + span.rows):
        for c in range(position.col, position.col + span.cols):
            yield GridPosition(r, c)
