"""
Positional features and control utilities for chain-reaction boards.
"""
from functools import lru_cache
from typing import Dict, Tuple

import numpy as np

from .game_basics import Side


@lru_cache(maxsize=None)
def capacity_grid(size: int) -> np.ndarray:
    """N x N array of neighbour counts (2 at corners, 3 on edges, 4 inside)."""
    cap = np.full((size, size), 4, dtype=np.int16)
    cap[0, :] -= 1
    cap[-1, :] -= 1
    cap[:, 0] -= 1
    cap[:, -1] -= 1
    cap.setflags(write=False)
    return cap


def board_arrays(board) -> Tuple[np.ndarray, np.ndarray]:
    """Return (owners, spots) as N x N arrays; owners hold Side values (0, 1, 2)."""
    n = board.size
    cells = board.cells()
    owners = np.fromiter((cell.side.value for cell in cells), dtype=np.int8, count=n * n)
    spots = np.fromiter((cell.spots for cell in cells), dtype=np.int32, count=n * n)
    return owners.reshape(n, n), spots.reshape(n, n)


def side_spots(owners: np.ndarray, spots: np.ndarray, side: Side) -> int:
    return int(spots[owners == side.value].sum())


def calculate_control_metrics(board) -> Dict[str, float]:
    owners, spots = board_arrays(board)
    critical = spots == capacity_grid(board.size)
    total_cells = owners.size
    metrics: Dict[str, float] = {}
    for side in (Side.RED, Side.BLUE):
        mine = owners == side.value
        key = side.name.lower()
        metrics[f'{key}_cells'] = int(mine.sum())
        metrics[f'{key}_spots'] = int(spots[mine].sum())
        metrics[f'{key}_critical'] = int((mine & critical).sum())
        metrics[f'{key}_cell_share'] = float(mine.sum()) / total_cells
    metrics['neutral_cells'] = int((owners == Side.NEUTRAL.value).sum())
    metrics['spot_difference'] = metrics['red_spots'] - metrics['blue_spots']
    return metrics


def calculate_game_phase(board) -> str:
    owners, _ = board_arrays(board)
    claimed = float((owners != Side.NEUTRAL.value).mean())
    if claimed <= 0.25:
        return 'opening'
    elif claimed <= 0.75:
        return 'midgame'
    else:
        return 'endgame'
