import pytest

from chainreaction.board import Board
from chainreaction.game_basics import (
    Cell,
    EmptyHistoryError,
    InvalidSpotCountError,
    OutOfRangeError,
    ReadOnlyBoardError,
    Side,
)


def test_fresh_board_is_all_neutral():
    b = Board(3)
    assert b.size == 3
    assert all(cell == Cell(Side.NEUTRAL, 1) for cell in b.cells())
    assert b.num_pieces() == 9
    assert b.red_pieces() == 0 and b.blue_pieces() == 0
    assert b.get_winner() is None
    assert b.is_stable()


@pytest.mark.parametrize("n", [2, 3, 4, 5, 6])
def test_red_moves_first_on_every_size(n: int):
    b = Board(n)
    assert b.whose_move() is Side.RED
    assert b.is_legal(Side.RED)
    assert not b.is_legal(Side.BLUE)


def test_size_below_two_rejected():
    with pytest.raises(ValueError):
        Board(1)
    b = Board(2)
    with pytest.raises(ValueError):
        b.clear(0)


def test_square_arithmetic():
    b = Board(4)
    assert b.sq_num(1, 1) == 0
    assert b.sq_num(2, 3) == 6
    assert (b.row(6), b.col(6)) == (2, 3)
    assert b.move_string(6) == "2 3"
    assert b.neighbor_count(0) == 2
    assert b.neighbor_count(1, 2) == 3
    assert b.neighbor_count(2, 2) == 4
    assert sorted(b.neighbors(5)) == [1, 4, 6, 9]


@pytest.mark.parametrize("args", [(9,), (-1,), (0, 1), (1, 4), (4, 1)])
def test_get_out_of_range_raises(args):
    b = Board(3)
    with pytest.raises(OutOfRangeError):
        b.get(*args)


def test_get_by_square_and_by_row_col_agree():
    b = Board(3)
    b.set(2, 3, 2, Side.BLUE)
    assert b.get(5) == Cell(Side.BLUE, 2)
    assert b.get(2, 3) == Cell(Side.BLUE, 2)


def test_is_legal_by_ownership():
    b = Board(2)
    b.set(1, 1, 2, Side.RED)
    assert b.is_legal(Side.RED, 1, 1)
    assert not b.is_legal(Side.BLUE, 1, 1)
    assert b.is_legal(Side.BLUE, 1, 2)
    assert b.is_legal(Side.BLUE, 3)


def test_set_normalizes_zero_and_rejects_negative():
    b = Board(2)
    b.set(0, 2, Side.RED)
    b.set(0, 0, Side.RED)
    assert b.get(0) == Cell(Side.NEUTRAL, 1)
    with pytest.raises(InvalidSpotCountError):
        b.set(1, 1, -1, Side.BLUE)


def test_winner_requires_every_cell():
    b = Board(2)
    for n in range(3):
        b.set(n, 1, Side.BLUE)
    assert b.get_winner() is None
    b.set(3, 1, Side.BLUE)
    assert b.get_winner() is Side.BLUE


def test_turn_flips_after_each_move():
    b = Board(3)
    b.add_spot(Side.RED, 1, 1)
    assert b.whose_move() is Side.BLUE
    b.add_spot(Side.BLUE, 3, 3)
    assert b.whose_move() is Side.RED


def test_clear_resets_contents_and_history():
    b = Board(2)
    b.add_spot(Side.RED, 0)
    b.clear(4)
    assert b.size == 4
    assert b.num_pieces() == 16
    assert not b.can_undo()
    with pytest.raises(EmptyHistoryError):
        b.undo()


def test_clone_is_independent_with_fresh_history():
    b = Board(3)
    b.add_spot(Side.RED, 4)
    c = b.clone()
    assert c == b
    assert c.history_depth == 0
    c.add_spot(Side.BLUE, 0)
    assert c != b
    assert b.get(0) == Cell(Side.NEUTRAL, 1)


def test_copy_from_keeps_history_and_requires_same_size():
    a = Board(3)
    a.add_spot(Side.RED, 4)
    b = Board(3)
    b.add_spot(Side.RED, 0)
    b.copy_from(a)
    assert b == a
    assert b.history_depth == 1
    b.undo()
    assert b.get(0) == Cell(Side.NEUTRAL, 1)
    with pytest.raises(ValueError):
        Board(2).copy_from(a)


def test_notifier_called_after_each_mutation():
    b = Board(2)
    seen = []
    b.set_notifier(lambda board: seen.append(board.num_pieces()))
    b.add_spot(Side.RED, 0)
    b.set(1, 2, Side.BLUE)
    b.copy_from(Board(2))
    b.clear(3)
    assert seen == [5, 6, 4, 9]


def test_last_notifier_wins():
    b = Board(2)
    first, second = [], []
    b.set_notifier(lambda board: first.append(1))
    b.set_notifier(lambda board: second.append(1))
    b.add_spot(Side.RED, 0)
    assert first == []
    assert second == [1]


def test_readonly_view_forwards_queries_and_refuses_changes():
    b = Board(2)
    view = b.readonly()
    b.add_spot(Side.RED, 0)
    assert view.get(0) == Cell(Side.RED, 2)
    assert view.num_pieces() == 5
    assert view.whose_move() is Side.BLUE
    assert view == b
    for mutate in (
        lambda: view.add_spot(Side.BLUE, 1),
        lambda: view.set(1, 2, Side.BLUE),
        lambda: view.clear(3),
        lambda: view.copy_from(Board(2)),
        lambda: view.undo(),
    ):
        with pytest.raises(ReadOnlyBoardError):
            mutate()
    assert b.num_pieces() == 5


def test_readonly_view_hides_private_members():
    b = Board(2)
    b.add_spot(Side.RED, 0)
    view = b.readonly()
    with pytest.raises(AttributeError):
        view._reset(5)
    with pytest.raises(AttributeError):
        view._history.clear()
    with pytest.raises(AttributeError):
        view._grid
    assert b.size == 2
    assert b.can_undo()
    assert view.get(0) == Cell(Side.RED, 2)


def test_dump_and_display_format():
    b = Board(2)
    b.add_spot(Side.RED, 1, 1)
    assert b.dump() == "===\n    2r 1- \n    1- 1- \n==="
    assert str(b) == b.dump()
    assert b.to_display_string() == " 1 2r 1-\n 2 1- 1-\n    1  2"


def test_dump_reports_winner():
    b = Board.from_text("1b 2b/1b 2b")
    assert b.dump().endswith("===* Blue wins")


def test_text_round_trip():
    b = Board(3)
    b.add_spot(Side.RED, 0)
    b.add_spot(Side.BLUE, 8)
    text = b.serialize()
    assert text == "2r 1- 1-/1- 1- 1-/1- 1- 2b"
    assert Board.from_text(text) == b
