"""
Symmetry and canonicalization for N x N boards.
Teaching notes:
- A square board has 8 symmetries (the dihedral group of the square). The
  rules only look at orthogonal neighbours, so every symmetry maps a legal
  game onto a legal game and commutes with cascades.
- We canonicalize a board by taking the lexicographically smallest image.
- Squares transform with the board; index maps are precomputed per size.
"""
from functools import lru_cache
from typing import Dict, List, Tuple

import numpy as np

from .board import Board
from .game_basics import serialize_cells

ALL_SYMS = ['id', 'rot90', 'rot180', 'rot270', 'hflip', 'vflip', 'd1', 'd2']


def transform_grid(grid: np.ndarray, kind: str) -> np.ndarray:
    if kind == 'id':
        return grid.copy()
    elif kind == 'rot90':
        return np.rot90(grid, k=-1)
    elif kind == 'rot180':
        return np.rot90(grid, k=2)
    elif kind == 'rot270':
        return np.rot90(grid, k=1)
    elif kind == 'hflip':
        return np.fliplr(grid)
    elif kind == 'vflip':
        return np.flipud(grid)
    elif kind == 'd1':
        return grid.T
    elif kind == 'd2':
        return np.rot90(grid, k=2).T
    else:
        raise ValueError(f"Unknown transformation: {kind}")


@lru_cache(maxsize=None)
def sym_index_map(size: int, kind: str) -> Tuple[int, ...]:
    """mapping[i] is where square i lands under KIND."""
    squares = np.arange(size * size).reshape(size, size)
    image = transform_grid(squares, kind).ravel()
    mapping = [0] * (size * size)
    for dest, src in enumerate(image):
        mapping[int(src)] = dest
    return tuple(mapping)


def apply_action_transform(size: int, action: int, kind: str) -> int:
    return sym_index_map(size, kind)[action]


def transform_board(board, kind: str) -> Board:
    size = board.size
    mapping = sym_index_map(size, kind)
    cells = board.cells()
    grid = [cells[0]] * (size * size)
    for i, cell in enumerate(cells):
        grid[mapping[i]] = cell
    out = Board(size)
    for n, cell in enumerate(grid):
        out._put(n, cell)
    return out


def symmetry_info(board) -> Dict:
    by_op: Dict[str, str] = {}
    for k in ALL_SYMS:
        t = transform_board(board, k)
        by_op[k] = serialize_cells(list(t.cells()), board.size)
    images: List[Tuple[str, str]] = sorted((s, k) for k, s in by_op.items())
    canonical_str, canonical_op = images[0]
    unique_images = len(set(by_op.values()))
    board_str = by_op['id']
    return {
        'canonical_form': canonical_str,
        'canonical_op': canonical_op,
        'orbit_size': unique_images,
        'horizontal_symmetric': by_op['hflip'] == board_str,
        'vertical_symmetric': by_op['vflip'] == board_str,
        'diagonal_symmetric': by_op['d1'] == board_str or by_op['d2'] == board_str,
        'rotational_symmetric': by_op['rot180'] == board_str,
        'any_symmetric': unique_images < len(ALL_SYMS),
    }
