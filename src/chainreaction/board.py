"""
Board state for the chain-reaction game.

A Board owns an N x N grid of cells and the undo history of its moves.
Squares are addressed either by square number (row-major, from 0) or by
1-based row and column; every method that takes a square accepts both forms.

Whose move it is is never stored: it follows from the parity of the total
number of spots, which grows by exactly one per move.

A Board may carry a notifier, a callable invoked with the board after each
change to its contents.
"""
from __future__ import annotations

from typing import Callable, List, Optional, Tuple

from . import cascade
from .game_basics import (
    NEUTRAL_CELL,
    Cell,
    EmptyHistoryError,
    OutOfRangeError,
    ReadOnlyBoardError,
    Side,
    col_of,
    deserialize_cells,
    make_cell,
    move_string,
    neighbor_count,
    neighbor_squares,
    row_of,
    serialize_cells,
    sq_num,
)

Notifier = Callable[["Board"], None]


def _nop(board: "Board") -> None:
    pass


class UndoHistory:
    """LIFO stack of grid snapshots. Snapshots share no storage with a live grid."""

    def __init__(self) -> None:
        self._snapshots: List[Tuple[Cell, ...]] = []

    def push(self, grid: List[Cell]) -> None:
        self._snapshots.append(tuple(grid))

    def pop(self) -> List[Cell]:
        if not self._snapshots:
            raise EmptyHistoryError("Nothing to undo")
        return list(self._snapshots.pop())

    def clear(self) -> None:
        self._snapshots.clear()

    def __len__(self) -> int:
        return len(self._snapshots)

    def __bool__(self) -> bool:
        return bool(self._snapshots)


class Board:
    """An N x N chain-reaction board in its initial, all-neutral configuration."""

    def __init__(self, size: int) -> None:
        self._notifier: Notifier = _nop
        self._history = UndoHistory()
        self._readonly: Optional[ReadOnlyBoard] = None
        self._size = 0
        self._grid: List[Cell] = []
        self._reset(size)

    @classmethod
    def from_text(cls, text: str) -> "Board":
        """Board whose contents are parsed from the compact "2r 1-/1- 1b" form."""
        cells = deserialize_cells(text)
        size = int(round(len(cells) ** 0.5))
        board = cls(size)
        board._grid = cells
        return board

    def _reset(self, size: int) -> None:
        if size < 2:
            raise ValueError(f"Board size must be at least 2, got {size}")
        self._size = size
        self._grid = [NEUTRAL_CELL] * (size * size)
        self._history.clear()

    # -- geometry -----------------------------------------------------------

    @property
    def size(self) -> int:
        return self._size

    def exists(self, r: int, c: Optional[int] = None) -> bool:
        if c is None:
            return 0 <= r < self._size * self._size
        return 1 <= r <= self._size and 1 <= c <= self._size

    def sq_num(self, r: int, c: int) -> int:
        if not self.exists(r, c):
            raise OutOfRangeError(f"No square at row {r}, column {c}")
        return sq_num(self._size, r, c)

    def _square(self, r: int, c: Optional[int]) -> int:
        if c is not None:
            return self.sq_num(r, c)
        if not self.exists(r):
            raise OutOfRangeError(f"No square numbered {r}")
        return r

    def row(self, n: int) -> int:
        return row_of(self._size, self._square(n, None))

    def col(self, n: int) -> int:
        return col_of(self._size, self._square(n, None))

    def neighbors(self, r: int, c: Optional[int] = None) -> List[int]:
        return neighbor_squares(self._size, self._square(r, c))

    def neighbor_count(self, r: int, c: Optional[int] = None) -> int:
        return neighbor_count(self._size, self._square(r, c))

    def move_string(self, n: int) -> str:
        return move_string(self.row(n), self.col(n))

    # -- queries ------------------------------------------------------------

    def get(self, r: int, c: Optional[int] = None) -> Cell:
        return self._grid[self._square(r, c)]

    def cells(self) -> Tuple[Cell, ...]:
        return tuple(self._grid)

    def num_pieces(self) -> int:
        return sum(cell.spots for cell in self._grid)

    def red_pieces(self) -> int:
        return sum(cell.spots for cell in self._grid if cell.side is Side.RED)

    def blue_pieces(self) -> int:
        return sum(cell.spots for cell in self._grid if cell.side is Side.BLUE)

    def num_of_side(self, side: Side) -> int:
        return sum(1 for cell in self._grid if cell.side is side)

    def whose_move(self) -> Side:
        """Side to move next. Once the game is won this is unconstrained."""
        return Side.RED if (self.num_pieces() + self._size) % 2 == 0 else Side.BLUE

    def is_legal(self, side: Side, r: Optional[int] = None, c: Optional[int] = None) -> bool:
        """With a square: may SIDE add a spot there? Without: is it SIDE's turn?"""
        if r is None:
            return side is self.whose_move()
        owner = self.get(r, c).side
        return owner is Side.NEUTRAL or owner is side

    def get_winner(self) -> Optional[Side]:
        first = self._grid[0].side
        if first is Side.NEUTRAL:
            return None
        for cell in self._grid:
            if cell.side is not first:
                return None
        return first

    def is_overfull(self, n: int) -> bool:
        return self._grid[n].spots > neighbor_count(self._size, n)

    def is_stable(self) -> bool:
        return not any(self.is_overfull(n) for n in range(len(self._grid)))

    @property
    def history_depth(self) -> int:
        return len(self._history)

    def can_undo(self) -> bool:
        return bool(self._history)

    # -- mutation -----------------------------------------------------------

    def _put(self, n: int, cell: Cell) -> None:
        self._grid[n] = cell

    def add_spot(self, side: Side, r: int, c: Optional[int] = None) -> None:
        """Add a spot of SIDE at the square and resolve the cascade.

        Assumes is_legal(SIDE, square); the caller is responsible for checking.
        """
        n = self._square(r, c)
        self._history.push(self._grid)
        self._grid[n] = Cell(side, self._grid[n].spots + 1)
        cascade.resolve(self, n)
        self._announce()

    def set(self, *args) -> None:
        """Set a square to NUM spots of SIDE; zero spots leaves it neutral.

        Called as set(square, num, side) or set(row, col, num, side).
        """
        if len(args) == 3:
            n, num, side = self._square(args[0], None), args[1], args[2]
        elif len(args) == 4:
            n, num, side = self._square(args[0], args[1]), args[2], args[3]
        else:
            raise TypeError("set() takes (square, num, side) or (row, col, num, side)")
        self._grid[n] = make_cell(num, side)
        self._announce()

    def clear(self, size: int) -> None:
        self._reset(size)
        self._announce()

    def copy_from(self, other: "Board") -> None:
        """Copy OTHER's contents into me without touching my undo history."""
        if other.size != self._size:
            raise ValueError(f"Cannot copy a {other.size}x{other.size} board into a {self._size}x{self._size} board")
        self._grid = list(other.cells())
        self._announce()

    def clone(self) -> "Board":
        """Copy of my contents with a fresh undo history and no notifier."""
        board = Board(self._size)
        board._grid = list(self._grid)
        return board

    def undo(self) -> None:
        self._grid = self._history.pop()
        self._announce()

    def set_notifier(self, notify: Optional[Notifier]) -> None:
        self._notifier = notify if notify is not None else _nop

    def _announce(self) -> None:
        self._notifier(self)

    def readonly(self) -> "ReadOnlyBoard":
        if self._readonly is None:
            self._readonly = ReadOnlyBoard(self)
        return self._readonly

    # -- text ---------------------------------------------------------------

    def dump(self) -> str:
        lines = ["==="]
        for r in range(self._size):
            row = self._grid[r * self._size:(r + 1) * self._size]
            lines.append("    " + "".join(f"{cell} " for cell in row))
        footer = "==="
        winner = self.get_winner()
        if winner is not None:
            footer += f"* {winner.display_name} wins"
        lines.append(footer)
        return "\n".join(lines)

    def to_display_string(self) -> str:
        """The dump with row numbers on the left and column numbers below."""
        lines = self.dump().strip().splitlines()
        out = [f"{i:2d} {lines[i].strip()}" for i in range(1, len(lines) - 1)]
        out.append("  " + "".join(f"{c:3d}" for c in range(1, self._size + 1)))
        return "\n".join(out)

    def serialize(self) -> str:
        return serialize_cells(self._grid, self._size)

    def __str__(self) -> str:
        return self.dump()

    def __repr__(self) -> str:
        return f"Board.from_text({self.serialize()!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ReadOnlyBoard):
            other = other.owner
        if not isinstance(other, Board):
            return NotImplemented
        return self._size == other._size and self._grid == other._grid

    __hash__ = None  # type: ignore[assignment]


class ReadOnlyBoard:
    """A view of a Board that answers every query and refuses every change."""

    def __init__(self, owner: Board) -> None:
        self._owner = owner

    @property
    def owner(self) -> Board:
        return self._owner

    @property
    def size(self) -> int:
        return self._owner.size

    def __getattr__(self, name: str):
        # Only the public surface is forwarded; private state stays with the owner.
        if name.startswith("_"):
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")
        return getattr(self._owner, name)

    def _refuse(self, *args, **kwargs) -> None:
        raise ReadOnlyBoardError("Board is read-only")

    add_spot = _refuse
    set = _refuse
    clear = _refuse
    copy_from = _refuse
    undo = _refuse
    set_notifier = _refuse
    _put = _refuse

    def readonly(self) -> "ReadOnlyBoard":
        return self

    def __str__(self) -> str:
        return self._owner.dump()

    def __eq__(self, other: object) -> bool:
        return self._owner == other

    __hash__ = None  # type: ignore[assignment]
