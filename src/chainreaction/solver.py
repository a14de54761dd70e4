"""
Move generation and game-tree search, from Red's point of view.
Search policy:
- Fixed-depth minimax with alpha-beta pruning; Red maximizes, Blue minimizes.
- A won position scores +/-(winning_value + remaining depth), so sooner wins
  (and later losses) are preferred, and any win outranks any static estimate.
- Every explored position is a clone; the caller's board is never changed.
- At the root the first move found with the best value is kept, unless
  randomize_ties asks for a seeded choice among equally valued moves.
"""
import logging
import math
import random
from dataclasses import dataclass
from typing import List, Optional

from .evaluation import Evaluator, static_eval
from .game_basics import GameError, Side

WINNING_VALUE = 2 ** 31 - 1
TEST_DEPTH = 4


def legal_moves(board, side: Side) -> List[int]:
    """Squares where SIDE may add a spot, in row-major order. Turn is not checked."""
    return [n for n in range(board.size * board.size) if board.is_legal(side, n)]


def apply_move(board, side: Side, move: int):
    child = board.clone()
    child.add_spot(side, move)
    return child


@dataclass
class SearchResult:
    move: int
    value: int
    nodes: int


class SearchEngine:
    def __init__(
        self,
        depth: int = TEST_DEPTH,
        winning_value: int = WINNING_VALUE,
        evaluator: Evaluator = static_eval,
        seed: Optional[int] = None,
        randomize_ties: bool = False,
    ) -> None:
        if depth < 1:
            raise ValueError(f"Search depth must be at least 1, got {depth}")
        self.depth = depth
        self.winning_value = winning_value
        self.evaluator = evaluator
        self.randomize_ties = randomize_ties
        self._random = random.Random(seed)
        self._nodes = 0

    def choose_move(self, board, side: Side) -> int:
        return self.search(board, side).move

    def search(self, board, side: Side) -> SearchResult:
        if board.get_winner() is not None:
            raise GameError("Game is already over")
        work = board.clone()
        moves = legal_moves(work, side)
        if not moves:
            raise GameError(f"{side.display_name} has no legal move")
        self._nodes = 1
        maximizing = side is Side.RED
        if self.randomize_ties:
            move, value = self._search_root_exact(work, side, moves, maximizing)
        else:
            move, value = self._search_root(work, side, moves, maximizing)
        logging.debug(
            "search side=%s depth=%d move=%s value=%d nodes=%d",
            side.display_name, self.depth, work.move_string(move), value, self._nodes,
        )
        return SearchResult(move=move, value=value, nodes=self._nodes)

    def _search_root(self, board, side: Side, moves: List[int], maximizing: bool):
        alpha, beta = -math.inf, math.inf
        best_move = moves[0]
        best = -math.inf if maximizing else math.inf
        for mv in moves:
            value = self._min_max(apply_move(board, side, mv), side.opponent, self.depth - 1, alpha, beta)
            if maximizing and value > best:
                best, best_move = value, mv
                alpha = max(alpha, value)
            elif not maximizing and value < best:
                best, best_move = value, mv
                beta = min(beta, value)
        return best_move, int(best)

    def _search_root_exact(self, board, side: Side, moves: List[int], maximizing: bool):
        # Full window per child so that equal values are exact, not bounds.
        values = [
            self._min_max(apply_move(board, side, mv), side.opponent, self.depth - 1, -math.inf, math.inf)
            for mv in moves
        ]
        best = max(values) if maximizing else min(values)
        tied = [mv for mv, v in zip(moves, values) if v == best]
        return self._random.choice(tied), int(best)

    def _min_max(self, board, side: Side, depth: int, alpha: float, beta: float) -> float:
        self._nodes += 1
        winner = board.get_winner()
        if winner is not None:
            score = self.winning_value + depth
            return score if winner is Side.RED else -score
        if depth == 0:
            return self.evaluator(board, self.winning_value)
        moves = legal_moves(board, side)
        if not moves:
            return self.evaluator(board, self.winning_value)
        if side is Side.RED:
            best = -math.inf
            for mv in moves:
                value = self._min_max(apply_move(board, side, mv), Side.BLUE, depth - 1, alpha, beta)
                best = max(best, value)
                alpha = max(alpha, value)
                if alpha >= beta:
                    break
        else:
            best = math.inf
            for mv in moves:
                value = self._min_max(apply_move(board, side, mv), Side.RED, depth - 1, alpha, beta)
                best = min(best, value)
                beta = min(beta, value)
                if alpha >= beta:
                    break
        return best


def choose_move(board, side: Side, depth: int = TEST_DEPTH, seed: Optional[int] = None) -> int:
    """Search DEPTH plies ahead and return the square SIDE should play."""
    return SearchEngine(depth=depth, seed=seed).choose_move(board, side)
