"""
Candidate Selector.

Rank selection over files sorted by coverage, worst first. The weight of a
file depends only on its position in that order, so the worst-covered file
is the most likely pick without being the only one.
"""

from __future__ import annotations

import random
from typing import Callable, Sequence, TypeVar

from gamekins.models.files import FileDetails

T = TypeVar("T")

DEFAULT_RANK_BIAS = 1.5


def initialize_rank_selection(n: int, bias: float = DEFAULT_RANK_BIAS) -> list[float]:
    """Build the cumulative rank table for n candidates.

    Position ``i`` gets the linear-ranking weight of rank ``n - 1 - i``:

        w_i = (2 - c + 2 * (c - 1) * (n - 1 - i) / (n - 1)) / n

    so the first position weighs ``c / n`` and the last ``(2 - c) / n``.

    Args:
        n: Number of candidates
        bias: Selection pressure c, between 1.0 (uniform) and 2.0

    Returns:
        Cumulative probabilities, ascending and ending at 1.0

    Raises:
        ValueError: If n is not positive or the bias is out of range
    """
    if n <= 0:
        raise ValueError("Rank selection needs at least one candidate")
    if not 1.0 <= bias <= 2.0:
        raise ValueError(f"Rank bias must be between 1.0 and 2.0, got {bias}")
    if n == 1:
        return [1.0]

    rank_values = []
    total = 0.0
    for i in range(n):
        rank = n - 1 - i
        total += (2 - bias + 2 * (bias - 1) * rank / (n - 1)) / n
        rank_values.append(total)
    return rank_values


def select_candidate(
    candidates: Sequence[T],
    rank_values: Sequence[float],
    rng: random.Random,
) -> T:
    """Draw one candidate using a cumulative rank table.

    Args:
        candidates: Candidates in rank order
        rank_values: Cumulative probabilities, one per candidate
        rng: Random source of the round

    Returns:
        The first candidate whose cumulative value exceeds the draw, or the
        last one if rounding left none

    Raises:
        ValueError: If there are no candidates
    """
    if not candidates:
        raise ValueError("Cannot select from an empty candidate list")

    probability = rng.random()
    for candidate, value in zip(candidates, rank_values):
        if value > probability:
            return candidate
    return candidates[-1]


def rank_select(
    candidates: Sequence[T],
    rng: random.Random,
    bias: float = DEFAULT_RANK_BIAS,
    key: Callable[[T], float] | None = None,
) -> T:
    """Sort candidates by coverage, worst first, and draw one.

    Args:
        candidates: Eligible files
        rng: Random source of the round
        bias: Selection pressure
        key: Sort key, defaults to the coverage ratio of a FileDetails

    Returns:
        The selected candidate
    """
    sort_key = key or _coverage_of
    ordered = sorted(candidates, key=sort_key)
    return select_candidate(ordered, initialize_rank_selection(len(ordered), bias), rng)


def _coverage_of(candidate) -> float:
    if isinstance(candidate, FileDetails):
        return candidate.coverage
    return float(candidate)
