"""chainreaction package.

Board state and cascade rules for the chain-reaction game, an alpha-beta
opponent, and small self-play and dataset utilities.

Convenience imports are exposed for common workflows.
"""

from .board import Board, ReadOnlyBoard, UndoHistory
from .game_basics import (
    CascadeDivergedError,
    Cell,
    EmptyHistoryError,
    GameError,
    InvalidSpotCountError,
    OutOfRangeError,
    ReadOnlyBoardError,
    Side,
)
from .evaluation import static_eval
from .solver import SearchEngine, choose_move, legal_moves

__all__ = [
    "Board",
    "ReadOnlyBoard",
    "UndoHistory",
    "Cell",
    "Side",
    "GameError",
    "OutOfRangeError",
    "InvalidSpotCountError",
    "EmptyHistoryError",
    "ReadOnlyBoardError",
    "CascadeDivergedError",
    "legal_moves",
    "static_eval",
    "SearchEngine",
    "choose_move",
]
