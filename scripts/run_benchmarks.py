#!/usr/bin/env python3
from __future__ import annotations

import argparse
import logging
import math
import random
import statistics as stats
import time
from dataclasses import dataclass
from typing import List, Tuple

from chainreaction.board import Board
from chainreaction.solver import SearchEngine, legal_moves


def ci95(values: List[float]) -> Tuple[float, float]:
    if not values:
        return (float("nan"), float("nan"))
    m = stats.fmean(values)
    s = stats.pstdev(values) if len(values) > 1 else 0.0
    z = 1.96
    half = z * (s / math.sqrt(len(values)))
    return m, half


@dataclass
class Config:
    seeds: int = 10
    size: int = 4
    depths: Tuple[int, ...] = (1, 2, 3)
    opening_plies: int = 6


def random_position(size: int, plies: int, seed: int) -> Board:
    rnd = random.Random(seed)
    b = Board(size)
    for _ in range(plies):
        if b.get_winner() is not None:
            break
        side = b.whose_move()
        b.add_spot(side, rnd.choice(legal_moves(b, side)))
    return b


def main() -> int:
    ap = argparse.ArgumentParser(description="Time choose_move over random openings")
    ap.add_argument("--seeds", type=int, default=Config.seeds)
    ap.add_argument("--size", type=int, default=Config.size)
    ns = ap.parse_args()
    cfg = Config(seeds=ns.seeds, size=ns.size)
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")

    for depth in cfg.depths:
        times: List[float] = []
        nodes: List[float] = []
        for s in range(cfg.seeds):
            board = random_position(cfg.size, cfg.opening_plies, s)
            if board.get_winner() is not None:
                continue
            engine = SearchEngine(depth=depth)
            t0 = time.perf_counter()
            result = engine.search(board, board.whose_move())
            times.append(time.perf_counter() - t0)
            nodes.append(result.nodes)
        m_time, h_time = ci95(times)
        m_nodes, _ = ci95(nodes)
        logging.info(
            "size=%d depth=%d search: mean=%.4fs ± %.4fs (95%% CI) nodes=%.0f",
            cfg.size, depth, m_time, h_time, m_nodes,
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
