"""
Game basics: sides, cells, square arithmetic, move notation and serialization.
Teaching notes:
- A board of size N holds N*N cells numbered row-major from 0.
- Rows and columns are 1-based when they leave the program ("2 3" is row 2, column 3).
- There is no empty cell: an unclaimed cell is a NEUTRAL cell holding one spot.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple


class GameError(Exception):
    """Base class for errors raised by the game core."""


class OutOfRangeError(GameError, IndexError):
    pass


class InvalidSpotCountError(GameError, ValueError):
    pass


class EmptyHistoryError(GameError):
    pass


class ReadOnlyBoardError(GameError):
    pass


class MoveFormatError(GameError, ValueError):
    pass


class CascadeDivergedError(AssertionError):
    """Cascade resolution ran out of rescans on a board that is neither stable nor won."""


class Side(Enum):
    NEUTRAL = 0
    RED = 1
    BLUE = 2

    @property
    def marker(self) -> str:
        return _MARKERS[self]

    @property
    def display_name(self) -> str:
        return self.name.capitalize()

    @property
    def opponent(self) -> "Side":
        if self is Side.RED:
            return Side.BLUE
        if self is Side.BLUE:
            return Side.RED
        raise ValueError("NEUTRAL has no opponent")

    @classmethod
    def from_marker(cls, marker: str) -> "Side":
        for side, m in _MARKERS.items():
            if m == marker:
                return side
        raise MoveFormatError(f"Unknown side marker: {marker!r}")


_MARKERS = {Side.NEUTRAL: '-', Side.RED: 'r', Side.BLUE: 'b'}


@dataclass(frozen=True)
class Cell:
    side: Side
    spots: int

    def __str__(self) -> str:
        return f"{self.spots}{self.side.marker}"


NEUTRAL_CELL = Cell(Side.NEUTRAL, 1)


def make_cell(num: int, side: Side) -> Cell:
    """Cell for NUM spots of SIDE; zero spots means an unclaimed cell."""
    if num < 0:
        raise InvalidSpotCountError(f"Invalid number of spots: {num}")
    if num == 0 or side is Side.NEUTRAL:
        return NEUTRAL_CELL
    return Cell(side, num)


def sq_num(size: int, r: int, c: int) -> int:
    return (c - 1) + (r - 1) * size


def row_of(size: int, n: int) -> int:
    return n // size + 1


def col_of(size: int, n: int) -> int:
    return n % size + 1


def neighbor_squares(size: int, n: int) -> List[int]:
    """Orthogonal neighbours of square N that exist on the board."""
    r, c = row_of(size, n), col_of(size, n)
    out: List[int] = []
    if r > 1:
        out.append(n - size)
    if c > 1:
        out.append(n - 1)
    if c < size:
        out.append(n + 1)
    if r < size:
        out.append(n + size)
    return out


def neighbor_count(size: int, n: int) -> int:
    r, c = row_of(size, n), col_of(size, n)
    return (r > 1) + (c > 1) + (r < size) + (c < size)


def move_string(row: int, col: int) -> str:
    return f"{row} {col}"


def parse_move(text: str) -> Tuple[int, int]:
    """Parse "ROW COL" (1-based) into a (row, col) pair."""
    parts = text.split()
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise MoveFormatError(f"Invalid move: {text!r}")
    return int(parts[0]), int(parts[1])


def serialize_cells(cells: List[Cell], size: int) -> str:
    rows = []
    for r in range(size):
        rows.append(' '.join(str(cell) for cell in cells[r * size:(r + 1) * size]))
    return '/'.join(rows)


def deserialize_cells(text: str) -> List[Cell]:
    """Parse the compact form "2r 1-/1- 1b" into a row-major list of cells."""
    rows = [row.split() for row in text.strip().split('/')]
    size = len(rows)
    if size < 2 or any(len(row) != size for row in rows):
        raise MoveFormatError(f"Board text is not square: {text!r}")
    cells: List[Cell] = []
    for row in rows:
        for token in row:
            spots, marker = token[:-1], token[-1:]
            if not spots.isdigit():
                raise MoveFormatError(f"Invalid cell: {token!r}")
            cells.append(make_cell(int(spots), Side.from_marker(marker)))
    return cells
