from typing import List

import pytest
try:
    from hypothesis import given, settings, strategies as st  # type: ignore
    HAS_HYP = True
except ModuleNotFoundError:  # pragma: no cover - test infra
    HAS_HYP = False
    import pytest as _pytest  # type: ignore
    _pytest.skip("Hypothesis not installed", allow_module_level=True)

from chainreaction.board import Board
from chainreaction.game_basics import Side
from chainreaction.solver import legal_moves
from chainreaction.symmetry import ALL_SYMS, apply_action_transform, transform_board

moves_st = st.lists(st.integers(min_value=0, max_value=10_000), min_size=1, max_size=40)


def _play(board: Board, picks: List[int]):
    """Yield (side, move) for each pick until the game ends."""
    for pick in picks:
        if board.get_winner() is not None:
            return
        side = board.whose_move()
        moves = legal_moves(board, side)
        yield side, moves[pick % len(moves)]


@settings(max_examples=60, deadline=None)
@given(st.integers(min_value=2, max_value=4), moves_st)
def test_add_spot_adds_exactly_one_spot_and_settles(size: int, picks: List[int]):
    b = Board(size)
    for side, mv in _play(b, picks):
        before = b.num_pieces()
        b.add_spot(side, mv)
        assert b.num_pieces() == before + 1
        assert min(cell.spots for cell in b.cells()) >= 1
        if b.get_winner() is None:
            assert b.is_stable()
            assert b.whose_move() is side.opponent


@settings(max_examples=60, deadline=None)
@given(st.integers(min_value=2, max_value=4), moves_st)
def test_add_spot_then_undo_restores_grid(size: int, picks: List[int]):
    b = Board(size)
    for side, mv in _play(b, picks):
        before = b.cells()
        b.add_spot(side, mv)
        after = b.cells()
        b.undo()
        assert b.cells() == before
        b.add_spot(side, mv)
        assert b.cells() == after


@settings(max_examples=40, deadline=None)
@given(st.integers(min_value=2, max_value=4), moves_st, st.sampled_from(ALL_SYMS))
def test_moves_commute_with_symmetries(size: int, picks: List[int], op: str):
    b = Board(size)
    for side, mv in _play(b, picks):
        mirrored = transform_board(b, op)
        mirrored.add_spot(side, apply_action_transform(size, mv, op))
        b.add_spot(side, mv)
        if b.get_winner() is None:
            assert transform_board(b, op) == mirrored
        else:
            # a win cuts resolution short, so only the outcome is scan-order free
            assert mirrored.get_winner() is b.get_winner()


@given(st.integers(min_value=2, max_value=6), st.sampled_from(ALL_SYMS))
def test_symmetry_index_map_is_permutation(size: int, op: str):
    images = {apply_action_transform(size, i, op) for i in range(size * size)}
    assert images == set(range(size * size))


@given(st.integers(min_value=2, max_value=5))
def test_rot90_four_times_identity(size: int):
    b = Board(size)
    b.set(0, 2, Side.RED)
    b.set(size * size - 1, 3, Side.BLUE)
    t = b
    for _ in range(4):
        t = transform_board(t, 'rot90')
    assert t == b
