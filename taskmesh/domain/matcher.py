"""Resource matcher: 0/1 two-dimensional knapsack over candidate capacities.

Each candidate contributes ``sqrt(threads**2 + ram**2)``; the matcher picks
the subset with the largest total contribution whose summed threads and RAM
stay within the task budget. No candidate is split or used twice.

The DP keeps one ``(Tmax + 1, Rmax + 1)`` layer per processed candidate.
Every update reads only the previous layer, which is exactly what a single
table swept in descending ``t``/``r`` order would read, and the stacked
layers make the reconstruction walk exact.

Tie-breaking: when several subsets reach the same value, the reverse walk
includes a candidate as soon as including it reproduces the optimum. The
outcome is deterministic for a given candidate order but carries no
preference between equally valued subsets.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar

import numpy as np

from taskmesh.config.constants import MATCH_TOLERANCE
from taskmesh.domain.agent import Capacity


class HasCapacity(Protocol):
    capacity: Capacity


C = TypeVar("C", bound=HasCapacity)


@dataclass(frozen=True)
class MatchResult(Generic[C]):
    """Selected candidates and the capacity they cover together."""

    selected: tuple[C, ...]
    covered_threads: int
    covered_ram: int
    value: float

    @property
    def matched(self) -> bool:
        return len(self.selected) > 0


def capacity_value(threads: int, ram: int) -> float:
    """Contribution of one candidate to the knapsack objective."""
    return math.sqrt(threads * threads + ram * ram)


def knapsack_table(
    max_threads: int, max_ram: int, items: Sequence[tuple[int, int]]
) -> np.ndarray:
    """Return the layered DP table of shape ``(n + 1, Tmax + 1, Rmax + 1)``.

    ``table[i, t, r]`` is the best value reachable with the first ``i`` items
    under budget ``(t, r)``. Items that alone exceed the budget are skipped.
    """
    n = len(items)
    table = np.zeros((n + 1, max_threads + 1, max_ram + 1), dtype=np.float64)
    for i, (threads, ram) in enumerate(items):
        table[i + 1] = table[i]
        if threads > max_threads or ram > max_ram:
            continue
        value = capacity_value(threads, ram)
        prev = table[i]
        table[i + 1, threads:, ram:] = np.maximum(
            prev[threads:, ram:],
            prev[: max_threads + 1 - threads, : max_ram + 1 - ram] + value,
        )
    return table


def select_subset(
    max_threads: int, max_ram: int, items: Sequence[tuple[int, int]]
) -> list[int]:
    """Return indices (ascending) of the optimal 0/1 subset of ``items``."""
    if max_threads < 1 or max_ram < 1:
        raise ValueError("task budgets must be >= 1")
    for threads, ram in items:
        if threads < 1 or ram < 1:
            raise ValueError("candidate capacities must be >= 1")
    if not items:
        return []

    table = knapsack_table(max_threads, max_ram, items)
    t, r = max_threads, max_ram
    chosen: list[int] = []
    for i in range(len(items) - 1, -1, -1):
        threads, ram = items[i]
        if threads > t or ram > r:
            continue
        with_item = table[i, t - threads, r - ram] + capacity_value(threads, ram)
        if abs(table[i + 1, t, r] - with_item) <= MATCH_TOLERANCE:
            chosen.append(i)
            t -= threads
            r -= ram
    chosen.reverse()
    return chosen


def match_resources(
    max_threads: int, max_ram: int, candidates: Sequence[C]
) -> MatchResult[C]:
    """Pick the candidate subset that best covers a ``(threads, ram)`` budget.

    An empty pool or an infeasible budget yields an empty, unmatched result.
    """
    items = [(c.capacity.threads, c.capacity.ram) for c in candidates]
    indices = select_subset(max_threads, max_ram, items)
    selected = tuple(candidates[i] for i in indices)
    return MatchResult(
        selected=selected,
        covered_threads=sum(items[i][0] for i in indices),
        covered_ram=sum(items[i][1] for i in indices),
        value=sum(capacity_value(*items[i]) for i in indices),
    )
