"""
Static evaluation of positions.

An evaluator maps (board, winning_value) to an integer. Values near
+winning_value favour Red and values near -winning_value favour Blue; an
actual win is detected by the search, not here.
"""
from typing import Callable, Dict

from .features import board_arrays, side_spots
from .game_basics import Side

Evaluator = Callable[[object, int], int]


def static_eval(board, winning_value: int) -> int:
    """Total of Red and Blue spots, capped at WINNING_VALUE.

    This does not tell Red's spots from Blue's, so on its own it cannot say
    who is ahead; it only grows as the board fills.
    """
    owners, spots = board_arrays(board)
    value = side_spots(owners, spots, Side.RED) + side_spots(owners, spots, Side.BLUE)
    return min(value, winning_value)


def spot_difference(board, winning_value: int) -> int:
    """Red spots minus Blue spots, clamped to [-WINNING_VALUE, WINNING_VALUE]."""
    owners, spots = board_arrays(board)
    value = side_spots(owners, spots, Side.RED) - side_spots(owners, spots, Side.BLUE)
    return max(-winning_value, min(value, winning_value))


EVALUATORS: Dict[str, Evaluator] = {
    'total': static_eval,
    'difference': spot_difference,
}


def get_evaluator(name: str) -> Evaluator:
    try:
        return EVALUATORS[name]
    except KeyError:
        raise ValueError(f"Unknown evaluator: {name} (choose from {', '.join(sorted(EVALUATORS))})") from None
