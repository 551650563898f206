"""
Injected randomness. Every randomized choice in the pipeline goes through a
RandomSource so runs can be pinned with a seed or scripted in tests.
"""
import random
from typing import Protocol


class RandomSource(Protocol):
    def random(self) -> float:
        """Next float in [0, 1)."""
        ...


def shot_rng(seed: int, index: int) -> random.Random:
    """
    Per-shot stream derived from (seed, index).
    Shots draw from independent streams, so a kit is reproducible for a seed
    no matter how many workers process it.
    """
    return random.Random(f"{int(seed)}:{int(index)}")


def uniform(rng: RandomSource, low: float, high: float) -> float:
    """Draw from [low, high)."""
    return low + rng.random() * (high - low)
