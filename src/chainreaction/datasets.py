"""
Dataset helpers for chain-reaction self-play.

This module plays seeded self-play games and writes one row per ply, plus a
manifest describing how the rows were produced.
"""
from __future__ import annotations

import csv
import hashlib
import importlib.util
import json
import logging
import sys
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

from .config import SearchConfig
from .trajectories import generate_trajectory


@dataclass
class ExportArgs:
    out: Path
    size: int = 3
    depth: int = 2
    evaluator: str = "total"
    randomize_ties: bool = False
    games: int = 1
    epsilon: float = 0.1
    seed: int = 0
    max_plies: int = 500
    verbose: bool = False
    cli_argv: List[str] | None = None
    format: str = "csv"  # one of: "csv", "parquet", "both"


DATASET_VERSION = "1.0.0"
PLIES_STEM = "chainreaction_plies"


def _schema_hash(rows: List[Dict[str, Any]]) -> str:
    keys = sorted({k for r in rows for k in r.keys()})
    payload = "\n".join(keys).encode("utf-8")
    return hashlib.sha256(payload).hexdigest()


def _sha256_file(path: Path) -> str:
    h = hashlib.sha256()
    with path.open('rb') as f:
        for chunk in iter(lambda: f.read(8192), b''):
            h.update(chunk)
    return h.hexdigest()


def _parquet_available() -> bool:
    return (importlib.util.find_spec('pandas') is not None
            and importlib.util.find_spec('pyarrow') is not None)


def write_csv(path: Path, rows: List[Dict[str, Any]]) -> None:
    fnames = sorted({k for r in rows for k in r.keys()})
    rows_sorted = sorted(rows, key=lambda r: (int(r.get('game', 0)), int(r.get('ply', 0))))
    with path.open('w', newline='') as f:
        w = csv.DictWriter(f, fieldnames=fnames)
        w.writeheader()
        for r in rows_sorted:
            w.writerow(r)


def run_export(args: ExportArgs) -> Path:
    fmt = (args.format or "csv").lower()
    if fmt not in {"csv", "parquet", "both"}:
        raise ValueError(f"Unknown export format: {args.format}")
    if fmt == "parquet" and not _parquet_available():
        # Strict: only parquet was requested; fail before writing anything
        raise RuntimeError(
            "Parquet dependencies not available (install pandas and pyarrow). "
            "Use pip install .[parquet] to enable parquet support."
        )
    args.out.mkdir(parents=True, exist_ok=True)

    config = SearchConfig(
        size=args.size,
        depth=args.depth,
        evaluator=args.evaluator,
        randomize_ties=args.randomize_ties,
        seed=args.seed,
    )
    rows: List[Dict[str, Any]] = []
    winners: Counter = Counter()
    for g in range(args.games):
        logging.info("Playing self-play game %d/%d (size=%d depth=%d)…",
                     g + 1, args.games, args.size, args.depth)
        game = generate_trajectory(config, epsilon=args.epsilon, max_plies=args.max_plies, seed=args.seed + g)
        for entry in game:
            entry['game'] = g
        rows.extend(game)
        winners[game[-1]['winner_after'] if game else ''] += 1
    logging.info("Collected %d plies from %d games", len(rows), args.games)

    plies_csv = args.out / f'{PLIES_STEM}.csv'
    plies_parquet = args.out / f'{PLIES_STEM}.parquet'
    wrote_csv = False
    wrote_parquet = False

    if fmt in {"csv", "both"}:
        write_csv(plies_csv, rows)
        wrote_csv = True
        logging.info("Wrote CSV: %s (%d rows)", plies_csv, len(rows))

    if fmt in {"parquet", "both"}:
        if _parquet_available():
            import pandas as pd  # type: ignore

            pd.DataFrame(rows).to_parquet(plies_parquet)
            wrote_parquet = True
            logging.info("Wrote Parquet file: %s", plies_parquet)
        else:
            logging.warning(
                "Parquet dependencies not available (install pandas and pyarrow). "
                "Proceeding with CSV only; manifest will record parquet_written=false."
            )

    packages: Dict[str, Any] = {}
    for pkg in ["numpy", "pandas", "pyarrow"]:
        if importlib.util.find_spec(pkg) is not None:
            mod = __import__(pkg)
            packages[pkg] = getattr(mod, "__version__", None)

    files: Dict[str, Any] = {
        "plies_csv": str(plies_csv) if wrote_csv else None,
        "plies_parquet": str(plies_parquet) if wrote_parquet else None,
    }
    checksums = {label: _sha256_file(Path(p)) for label, p in files.items() if p is not None}

    manifest = {
        "dataset_version": DATASET_VERSION,
        "created_at": datetime.now(timezone.utc).isoformat(),
        "args": {
            "size": args.size,
            "depth": args.depth,
            "evaluator": args.evaluator,
            "randomize_ties": args.randomize_ties,
            "games": args.games,
            "epsilon": args.epsilon,
            "seed": args.seed,
            "max_plies": args.max_plies,
            "format": args.format,
        },
        "python": {"python_version": sys.version.split(" ")[0], "packages": packages},
        "cli_argv": args.cli_argv,
        "row_counts": {"plies": len(rows)},
        "winners": dict(sorted(winners.items())),
        "schema_hash": {"plies": _schema_hash(rows) if rows else None},
        "files": files,
        "checksums": checksums,
        "parquet_written": wrote_parquet,
    }
    (args.out / "manifest.json").write_text(json.dumps(manifest, indent=2))
    logging.info("Wrote manifest.json with metadata and schema hashes")
    return args.out
