import numpy as np

from chainreaction.board import Board
from chainreaction.features import (
    board_arrays,
    calculate_control_metrics,
    calculate_game_phase,
    capacity_grid,
)
from chainreaction.game_basics import Side
from chainreaction.symmetry import symmetry_info


def test_capacity_grid_matches_neighbor_counts():
    cap = capacity_grid(3)
    assert cap.tolist() == [[2, 3, 2], [3, 4, 3], [2, 3, 2]]
    b = Board(5)
    assert cap.shape == (3, 3)
    assert capacity_grid(5).ravel().tolist() == [b.neighbor_count(n) for n in range(25)]


def test_board_arrays():
    b = Board.from_text("2r 1-/1- 1b")
    owners, spots = board_arrays(b)
    assert owners.tolist() == [[Side.RED.value, 0], [0, Side.BLUE.value]]
    assert spots.tolist() == [[2, 1], [1, 1]]
    assert np.issubdtype(spots.dtype, np.integer)


def test_control_metrics():
    m = calculate_control_metrics(Board.from_text("2r 1-/1- 1b"))
    assert m['red_cells'] == 1 and m['red_spots'] == 2 and m['red_critical'] == 1
    assert m['blue_cells'] == 1 and m['blue_spots'] == 1 and m['blue_critical'] == 0
    assert m['neutral_cells'] == 2
    assert m['spot_difference'] == 1
    assert m['red_cell_share'] == 0.25


def test_game_phase():
    assert calculate_game_phase(Board(3)) == 'opening'
    assert calculate_game_phase(Board.from_text("2r 1-/1- 1b")) == 'midgame'
    assert calculate_game_phase(Board.from_text("2r 1b/1r 1b")) == 'endgame'


def test_symmetry_info_on_corner_move():
    b = Board(3)
    b.add_spot(Side.RED, 8)
    info = symmetry_info(b)
    assert info['orbit_size'] == 4
    assert info['canonical_form'] == "1- 1- 1-/1- 1- 1-/1- 1- 2r"
    assert info['diagonal_symmetric']
    assert not info['rotational_symmetric']
    empty = symmetry_info(Board(3))
    assert empty['orbit_size'] == 1
    assert empty['any_symmetric']
