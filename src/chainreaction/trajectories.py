"""
Self-play trajectory generation: two search engines play one game.
"""
import logging
from typing import Dict, List, Optional

import numpy as np

from .board import Board
from .config import SearchConfig
from .features import calculate_control_metrics, calculate_game_phase
from .solver import legal_moves


def generate_trajectory(
    config: SearchConfig,
    epsilon: float = 0.0,
    max_plies: int = 500,
    seed: Optional[int] = None,
) -> List[Dict]:
    """Play one game from an empty board and return one record per ply.

    With probability EPSILON a ply is a uniformly random legal move instead
    of the engine's choice; all randomness comes from SEED.
    """
    if not 0.0 <= epsilon <= 1.0:
        raise ValueError(f"Epsilon out of range [0,1]: {epsilon}")
    rng = np.random.default_rng(seed)
    engine = config.make_engine()
    board = Board(config.size)
    game: List[Dict] = []
    for ply in range(max_plies):
        if board.get_winner() is not None:
            break
        side = board.whose_move()
        state = board.serialize()
        if epsilon > 0.0 and rng.random() < epsilon:
            moves = legal_moves(board, side)
            mv = int(rng.choice(moves))
            policy = 'random'
            value = None
        else:
            result = engine.search(board, side)
            mv, value = result.move, result.value
            policy = 'search'
        entry = {
            'ply': ply,
            'state': state,
            'player_to_move': side.marker,
            'action': mv,
            'move': board.move_string(mv),
            'policy': policy,
            'value': value,
            'game_phase': calculate_game_phase(board),
        }
        entry.update(calculate_control_metrics(board))
        board.add_spot(side, mv)
        winner = board.get_winner()
        entry['winner_after'] = winner.marker if winner is not None else ''
        game.append(entry)
    if board.get_winner() is None:
        logging.warning("Self-play stopped after %d plies without a winner", max_plies)
    return game
