"""Search and board settings.

Environment-first: CHAINREACTION_* variables override the defaults, and
explicit keyword overrides (e.g. from CLI flags) override both.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Optional

from .evaluation import Evaluator, get_evaluator
from .solver import TEST_DEPTH, WINNING_VALUE, SearchEngine

DEFAULT_SIZE = 6


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class SearchConfig:
    size: int = DEFAULT_SIZE
    depth: int = TEST_DEPTH
    winning_value: int = WINNING_VALUE
    evaluator: str = "total"
    randomize_ties: bool = False
    seed: Optional[int] = None

    @classmethod
    def from_env(cls, **overrides) -> "SearchConfig":
        cfg = cls(
            size=_env_int("CHAINREACTION_SIZE", DEFAULT_SIZE),
            depth=_env_int("CHAINREACTION_DEPTH", TEST_DEPTH),
            evaluator=os.getenv("CHAINREACTION_EVALUATOR", "total"),
            randomize_ties=_env_bool("CHAINREACTION_RANDOMIZE_TIES", False),
            seed=_env_int("CHAINREACTION_SEED", None),
        )
        return cfg.with_overrides(**overrides)

    def with_overrides(self, **overrides) -> "SearchConfig":
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def evaluator_fn(self) -> Evaluator:
        return get_evaluator(self.evaluator)

    def make_engine(self) -> SearchEngine:
        return SearchEngine(
            depth=self.depth,
            winning_value=self.winning_value,
            evaluator=self.evaluator_fn(),
            seed=self.seed,
            randomize_ties=self.randomize_ties,
        )
