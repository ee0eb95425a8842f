from __future__ import annotations

"""Seedable randomness for shuffles and digit sequences."""

import os
import random
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")

DIGITS: List[str] = ["1", "2", "3", "4", "5", "6", "7", "8", "9"]


def make_rng(seed: Optional[int] = None) -> random.Random:
    """Build an RNG, falling back to the SEED env var when no seed is given."""
    if seed is None:
        env = os.environ.get("SEED")
        if env is not None:
            try:
                seed = int(env)
            except ValueError:
                seed = None
    return random.Random(seed)


def shuffled(items: Sequence[T], rng: random.Random) -> List[T]:
    """Return a shuffled copy (Fisher-Yates via Random.shuffle)."""
    out = list(items)
    rng.shuffle(out)
    return out


def digit_sequence(length: int, rng: random.Random) -> List[str]:
    """Independent uniform draws from 1..9; repeats allowed."""
    return [rng.choice(DIGITS) for _ in range(int(length))]
