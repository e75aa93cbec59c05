"""Tests for taskmesh.domain.matcher (2D 0/1 knapsack)."""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from random import Random

import pytest

from taskmesh.domain.agent import Capacity
from taskmesh.domain.matcher import (
    capacity_value,
    knapsack_table,
    match_resources,
    select_subset,
)


@dataclass(frozen=True)
class _Candidate:
    name: str
    capacity: Capacity


def _candidates(caps: list[tuple[int, int]]) -> list[_Candidate]:
    return [_Candidate(f"c{i}", Capacity(t, r)) for i, (t, r) in enumerate(caps)]


def _brute_force(max_threads: int, max_ram: int, items: list[tuple[int, int]]) -> float:
    best = 0.0
    for k in range(len(items) + 1):
        for combo in itertools.combinations(items, k):
            if sum(c[0] for c in combo) <= max_threads and sum(c[1] for c in combo) <= max_ram:
                best = max(best, sum(capacity_value(*c) for c in combo))
    return best


class TestMatchResources:
    def test_picks_best_feasible_pair(self) -> None:
        pool = _candidates([(10, 4), (8, 6), (5, 5)])
        result = match_resources(15, 10, pool)
        assert [c.name for c in result.selected] == ["c0", "c2"]
        assert (result.covered_threads, result.covered_ram) == (15, 9)
        assert result.value == pytest.approx(17.84, abs=0.01)
        assert result.matched

    def test_empty_pool_is_unmatched(self) -> None:
        result = match_resources(8, 8, [])
        assert result.selected == ()
        assert not result.matched
        assert result.value == 0.0

    def test_infeasible_budget_is_unmatched(self) -> None:
        result = match_resources(3, 3, _candidates([(4, 1), (1, 4)]))
        assert not result.matched
        assert (result.covered_threads, result.covered_ram) == (0, 0)

    def test_exact_fit_selected(self) -> None:
        result = match_resources(4, 4, _candidates([(4, 4)]))
        assert [c.name for c in result.selected] == ["c0"]

    def test_selection_preserves_candidate_order(self) -> None:
        pool = _candidates([(1, 1), (2, 2), (3, 3)])
        result = match_resources(100, 100, pool)
        assert [c.name for c in result.selected] == ["c0", "c1", "c2"]


class TestSelectSubset:
    def test_rejects_zero_budget(self) -> None:
        with pytest.raises(ValueError, match="budgets"):
            select_subset(0, 5, [(1, 1)])

    def test_rejects_zero_capacity(self) -> None:
        with pytest.raises(ValueError, match="capacities"):
            select_subset(5, 5, [(0, 1)])

    def test_empty_items(self) -> None:
        assert select_subset(5, 5, []) == []

    def test_matches_brute_force_optimum(self) -> None:
        rng = Random(2024)
        for _ in range(60):
            n = rng.randint(1, 8)
            items = [(rng.randint(1, 16), rng.randint(1, 16)) for _ in range(n)]
            max_threads = rng.randint(1, 40)
            max_ram = rng.randint(1, 40)
            chosen = select_subset(max_threads, max_ram, items)
            assert chosen == sorted(set(chosen))
            assert sum(items[i][0] for i in chosen) <= max_threads
            assert sum(items[i][1] for i in chosen) <= max_ram
            value = sum(capacity_value(*items[i]) for i in chosen)
            assert value == pytest.approx(_brute_force(max_threads, max_ram, items))

    def test_same_input_same_output(self) -> None:
        items = [(3, 5), (5, 3), (4, 4), (2, 6)]
        assert select_subset(8, 9, items) == select_subset(8, 9, items)


class TestKnapsackTable:
    def test_shape(self) -> None:
        table = knapsack_table(5, 7, [(1, 1), (2, 2)])
        assert table.shape == (3, 6, 8)

    def test_layers_are_monotone(self) -> None:
        table = knapsack_table(6, 6, [(2, 3), (3, 2), (1, 1)])
        for i in range(1, table.shape[0]):
            assert (table[i] >= table[i - 1]).all()

    def test_oversized_item_copies_layer(self) -> None:
        table = knapsack_table(3, 3, [(5, 1)])
        assert (table[1] == table[0]).all()
