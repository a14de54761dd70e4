"""
Tactics: moves that end the game at once, and moves that hand the game over.
Teaching notes:
- In a chain-reaction game one explosion can flip the whole board, so a
  one-ply lookahead catches most blunders before any deeper search.
"""
from typing import List

from .game_basics import Side
from .solver import apply_move, legal_moves


def immediate_winning_moves(board, side: Side) -> List[int]:
    wins: List[int] = []
    for mv in legal_moves(board, side):
        if apply_move(board, side, mv).get_winner() is side:
            wins.append(mv)
    return wins


def gives_opponent_immediate_win(board, side: Side, move: int) -> bool:
    if not board.is_legal(side, move):
        return False
    child = apply_move(board, side, move)
    if child.get_winner() is not None:
        return False
    return len(immediate_winning_moves(child, side.opponent)) > 0


def safe_moves(board, side: Side) -> List[int]:
    return [mv for mv in legal_moves(board, side) if not gives_opponent_immediate_win(board, side, mv)]
