from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .board import Board
from .config import SearchConfig
from .datasets import ExportArgs, run_export
from .evaluation import EVALUATORS
from .features import calculate_control_metrics
from .game_basics import GameError, parse_move
from .symmetry import symmetry_info
from .tactics import gives_opponent_immediate_win, immediate_winning_moves


def _add_position_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--board", help='Board text, e.g. "2r 1-/1- 1b" (rows split by "/")')
    p.add_argument("--size", type=int, default=None, help="Size of an empty starting board")
    p.add_argument(
        "--move",
        dest="moves",
        action="append",
        default=[],
        help='Move "ROW COL" (1-based) played by the side to move; repeatable',
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="chainreaction", description="Chain-reaction board game CLI")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument("--seed", type=int, default=None, help="Seed for search tie-breaking and self-play")

    p_show = sub.add_parser("show", help="Play moves on a board and print it")
    _add_position_args(p_show)
    p_show.add_argument("--display", action="store_true", help="Print with row and column numbers")
    p_show.add_argument("--symmetry", action="store_true", help="Also report symmetry info")

    p_move = sub.add_parser("move", help="Search for the best move of the side to move")
    _add_position_args(p_move)
    p_move.add_argument("--depth", type=int, default=None, help="Search depth in plies")
    p_move.add_argument("--evaluator", choices=sorted(EVALUATORS), default=None)
    p_move.add_argument("--randomize-ties", action="store_true", default=None,
                        help="Pick randomly (seeded) among equally valued root moves")

    p_tac = sub.add_parser("tactics", help="List immediate wins and blunders for the side to move")
    _add_position_args(p_tac)

    p_sp = sub.add_parser("selfplay", help="Play seeded self-play games and export one row per ply")
    p_sp.add_argument("--out", type=Path, default=Path("data_raw"), help="Output directory (default: data_raw)")
    p_sp.add_argument("--size", type=int, default=None, help="Board size (default: CHAINREACTION_SIZE or 6)")
    p_sp.add_argument("--depth", type=int, default=None, help="Search depth in plies")
    p_sp.add_argument("--evaluator", choices=sorted(EVALUATORS), default=None)
    p_sp.add_argument("--randomize-ties", action="store_true", default=None,
                      help="Pick randomly (seeded) among equally valued root moves")
    p_sp.add_argument("--games", type=int, default=1)
    p_sp.add_argument("--epsilon", type=float, default=0.1, help="Probability of a random move per ply")
    p_sp.add_argument("--max-plies", type=int, default=500)
    p_sp.add_argument(
        "--format",
        choices=["csv", "parquet", "both"],
        default="csv",
        help="Export format: csv (default), parquet, both",
    )
    return p


def _load_position(ns: argparse.Namespace, config: SearchConfig) -> Board:
    if ns.board:
        board = Board.from_text(ns.board)
    else:
        board = Board(ns.size if ns.size is not None else config.size)
    for text in ns.moves:
        r, c = parse_move(text)
        side = board.whose_move()
        if board.get_winner() is not None:
            raise GameError(f"Game is over; cannot play {text!r}")
        if not board.exists(r, c) or not board.is_legal(side, r, c):
            raise GameError(f"Illegal move for {side.display_name}: {text!r}")
        board.add_spot(side, r, c)
    return board


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if getattr(ns, "verbose", False) else logging.INFO,
                        format="[%(levelname)s] %(message)s")

    if getattr(ns, "version", False):
        try:
            from importlib.metadata import version as _ver

            print(_ver("chainreaction"))
        except Exception:
            print("unknown")
        return 0

    try:
        config = SearchConfig.from_env(seed=ns.seed)
    except ValueError as e:
        logging.error("%s", e)
        return 2

    if ns.cmd == "selfplay":
        if ns.epsilon < 0.0 or ns.epsilon > 1.0:
            logging.error("Epsilon out of range [0,1]: %s", ns.epsilon)
            return 2
        config = config.with_overrides(
            size=ns.size, depth=ns.depth, evaluator=ns.evaluator, randomize_ties=ns.randomize_ties,
        )
        try:
            config.make_engine()
            out = run_export(ExportArgs(
                out=ns.out,
                size=config.size,
                depth=config.depth,
                evaluator=config.evaluator,
                randomize_ties=config.randomize_ties,
                games=ns.games,
                epsilon=ns.epsilon,
                seed=config.seed if config.seed is not None else 0,
                max_plies=ns.max_plies,
                verbose=ns.verbose,
                cli_argv=list(argv) if argv is not None else None,
                format=ns.format,
            ))
        except ValueError as e:
            logging.error("%s", e)
            return 2
        logging.info("Exported self-play plies to: %s", out)
        return 0

    if ns.cmd not in {"show", "move", "tactics"}:
        parser.print_help()
        return 0

    try:
        board = _load_position(ns, config)
    except (GameError, ValueError) as e:
        logging.error("%s", e)
        return 2

    if ns.cmd == "show":
        print(board.to_display_string() if ns.display else board.dump())
        if ns.symmetry:
            info = symmetry_info(board)
            logging.info(
                "canonical_form=%s orbit_size=%d op=%s",
                info['canonical_form'],
                info['orbit_size'],
                info['canonical_op'],
            )
        return 0

    side = board.whose_move()
    if board.get_winner() is not None:
        logging.error("Game is over: %s wins", board.get_winner().display_name)
        return 2

    if ns.cmd == "move":
        config = config.with_overrides(
            depth=ns.depth, evaluator=ns.evaluator, randomize_ties=ns.randomize_ties,
        )
        try:
            engine = config.make_engine()
        except ValueError as e:
            logging.error("%s", e)
            return 2
        result = engine.search(board, side)
        logging.info(
            "to_move=%s value=%d nodes=%d",
            side.display_name,
            result.value,
            result.nodes,
        )
        print(board.move_string(result.move))
        return 0

    wins = immediate_winning_moves(board, side)
    blunders = [n for n in range(board.size * board.size)
                if board.is_legal(side, n) and gives_opponent_immediate_win(board, side, n)]
    metrics = calculate_control_metrics(board)
    logging.info(
        "to_move=%s wins=%s blunders=%s red_spots=%d blue_spots=%d",
        side.display_name,
        [board.move_string(n) for n in wins],
        [board.move_string(n) for n in blunders],
        metrics['red_spots'],
        metrics['blue_spots'],
    )
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main(sys.argv[1:]))
