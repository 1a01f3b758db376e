"""
Probabilistic ("soft") trigger gate.

A rule whose condition held only executes if a uniform draw in
[0, max_threshold) falls below its clamped threshold. This is the only
place randomness enters a run; pass a seeded source for reproducible runs.
"""

from __future__ import annotations

from typing import Optional, Protocol

import numpy as np


class RandomSource(Protocol):
    def uniform(self, low: float, high: float) -> float: ...


def make_random_source(seed: Optional[int] = None) -> np.random.Generator:
    return np.random.default_rng(seed)


def clamp_threshold(threshold: float, max_threshold: float) -> float:
    """Cap at max_threshold, floor at 0."""
    if threshold > max_threshold:
        return max_threshold
    if threshold < 0.0:
        return 0.0
    return threshold


def draw(max_threshold: float, random_source: RandomSource) -> float:
    return float(random_source.uniform(0.0, max_threshold))


def passes_threshold(
    threshold: float,
    max_threshold: float,
    random_source: RandomSource,
) -> bool:
    return draw(max_threshold, random_source) < clamp_threshold(threshold, max_threshold)
