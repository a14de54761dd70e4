"""
Cascade resolution: bring a board with overfull cells back to a stable one.

A cell is overfull when it holds more spots than it has orthogonal
neighbours. An overfull cell explodes: it gives one spot to each neighbour,
and every neighbour that receives a spot changes to the exploding side.

Resolution explodes the square that was just played (if needed) and then
rescans the whole board in row-major order until a pass finds nothing to do.
It stops at once when one side owns every cell, even if overfull cells
remain: the game is over and the winning position is kept as it stands.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .game_basics import Cell, CascadeDivergedError, neighbor_count, neighbor_squares

if TYPE_CHECKING:  # pragma: no cover
    from .board import Board


def explode(board: "Board", n: int) -> None:
    """Explode square N once. Total spot count is unchanged."""
    size = board.size
    cell = board.get(n)
    targets = neighbor_squares(size, n)
    # Keeps s - k rather than resetting to 1, so a cell that got two spots
    # before the scan reached it still conserves every spot.
    board._put(n, Cell(cell.side, cell.spots - len(targets)))
    for t in targets:
        board._put(t, Cell(cell.side, board.get(t).spots + 1))


def resolve(board: "Board", start: int) -> int:
    """Resolve all explosions after a spot was added at START.

    Returns the number of explosions performed.
    """
    size = board.size
    squares = size * size
    explosions = 0
    if board.is_overfull(start):
        explode(board, start)
        explosions += 1

    passes = 0
    while board.get_winner() is None:
        if board.is_stable():
            return explosions
        if passes >= squares:
            logging.critical(
                "Cascade did not settle after %d passes (%d explosions):\n%s",
                passes, explosions, board.dump(),
            )
            raise CascadeDivergedError(f"Cascade did not settle after {passes} passes")
        for n in range(squares):
            if board.get(n).spots > neighbor_count(size, n):
                explode(board, n)
                explosions += 1
                if board.get_winner() is not None:
                    return explosions
        passes += 1
    return explosions
