"""Tests for combination generation and ranking.

Run with: pytest tests/test_combinations.py -v
"""

import itertools

import pytest

from src.solver.combinations import (
    Combination,
    best_combination,
    ceil_div,
    generate_combinations,
)

TYPE_TASKS = (1, 2, 3)


class TestGenerateCombinations:
    """Coverage, caps and the one-per-(v0, v1) rule."""

    @pytest.mark.parametrize(
        "demand, available",
        [(5, (5, 5, 5)), (7, (2, 3, 1)), (1, (0, 0, 4)), (12, (3, 2, 6)), (9, (9, 0, 0))],
    )
    def test_every_combination_covers_within_caps(self, demand, available):
        combos = generate_combinations(demand, available, TYPE_TASKS)
        for c in combos:
            covered = sum(v * t for v, t in zip(c.counts, TYPE_TASKS))
            assert covered >= demand
            assert c.residual == covered - demand
            assert all(v <= a for v, a in zip(c.counts, available))
            assert c.counts != (0, 0, 0)

        pairs = [c.counts[:2] for c in combos]
        assert len(pairs) == len(set(pairs))

    def test_v2_is_minimal_for_each_pair(self):
        combos = generate_combinations(5, (5, 5, 5), TYPE_TASKS)
        for c in combos:
            v0, v1, v2 = c.counts
            if v2 > 0:
                assert v0 * 1 + v1 * 2 + (v2 - 1) * 3 < 5

    def test_known_candidates(self):
        combos = generate_combinations(5, (5, 5, 5), TYPE_TASKS)
        by_pair = {c.counts[:2]: c for c in combos}

        assert by_pair[(0, 0)].counts == (0, 0, 2)
        assert by_pair[(0, 1)].counts == (0, 1, 1)
        assert by_pair[(0, 1)].residual == 0
        assert by_pair[(5, 0)].counts == (5, 0, 0)
        # caps are ceil(5/1)=5, ceil(5/2)=3, ceil(5/3)=2 → every pair is coverable
        assert len(combos) == 6 * 4

    def test_pairs_in_ascending_order(self):
        combos = generate_combinations(4, (3, 3, 3), TYPE_TASKS)
        pairs = [c.counts[:2] for c in combos]
        assert pairs == sorted(pairs)

    def test_caps_limit_to_useful_counts(self):
        combos = generate_combinations(2, (10, 10, 10), TYPE_TASKS)
        assert max(c.counts[0] for c in combos) <= 2
        assert max(c.counts[1] for c in combos) <= 1
        assert max(c.counts[2] for c in combos) <= 1

    def test_insufficient_supply_gives_nothing(self):
        assert generate_combinations(10, (1, 0, 0), TYPE_TASKS) == []

    def test_single_type_cover(self):
        combos = generate_combinations(4, (0, 0, 2), TYPE_TASKS)
        assert combos == [Combination((0, 0, 2), residual=2)]

    def test_exhaustive_small_grid(self):
        """Every (v0, v1) pair that can be covered appears exactly once."""
        for demand, a0, a1, a2 in itertools.product(range(1, 7), range(3), range(3), range(3)):
            combos = generate_combinations(demand, (a0, a1, a2), TYPE_TASKS)
            caps = [min(a, ceil_div(demand, t)) for a, t in zip((a0, a1, a2), TYPE_TASKS)]
            expected = {
                (v0, v1)
                for v0 in range(caps[0] + 1)
                for v1 in range(caps[1] + 1)
                if (v0, v1) != (0, 0) and v0 + 2 * v1 + 3 * caps[2] >= demand
                or (v0, v1) == (0, 0) and caps[2] > 0 and 3 * caps[2] >= demand
            }
            assert {c.counts[:2] for c in combos} == expected


class TestRanking:
    """Smaller residual wins; equal residuals fall back to fewer users."""

    def test_residual_first(self):
        a = Combination((0, 0, 2), residual=1)
        b = Combination((1, 2, 0), residual=0)
        assert b.is_better_than(a)

    def test_penalty_breaks_ties(self):
        a = Combination((0, 1, 1), residual=0)
        b = Combination((1, 2, 0), residual=0)
        assert a.penalty == 2
        assert a.is_better_than(b)

    def test_best_combination(self):
        combos = generate_combinations(5, (5, 5, 5), TYPE_TASKS)
        assert best_combination(combos).counts == (0, 1, 1)

    def test_best_combination_keeps_first_on_full_tie(self):
        a = Combination((2, 0, 0), residual=0)
        b = Combination((0, 2, 0), residual=0)
        assert best_combination([a, b]) is a
