"""
Combination generation for a single destination.

A Combination says how many users of each of the three types to send so
that their tasks cover a demand. For every (v0, v1) pair within the caps,
only the smallest v2 that reaches the demand is kept: a larger v2 would add
users without being needed for coverage. The candidate set is therefore
O(cap0 · cap1) instead of the full cube, and the caller picks among the
candidates by realized cost.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


def ceil_div(a: int, b: int) -> int:
    return -(-a // b)


@dataclass(frozen=True)
class Combination:
    """Per-type user counts covering a demand.

    residual : covered tasks minus demand (≥ 0 for generated combinations)
    penalty  : total users consumed
    """

    counts: tuple[int, int, int]
    residual: int

    @property
    def penalty(self) -> int:
        return sum(self.counts)

    def rank(self) -> tuple[int, int]:
        """Sort key: smaller |residual| first, then fewer users."""
        return (abs(self.residual), self.penalty)

    def is_better_than(self, other: Combination) -> bool:
        return self.rank() < other.rank()

    def __str__(self) -> str:
        v0, v1, v2 = self.counts
        return f"({v0}, {v1}, {v2}) residual={self.residual} penalty={self.penalty}"


def generate_combinations(
    demand: int,
    available: Sequence[int],
    type_tasks: Sequence[int],
) -> list[Combination]:
    """Enumerate the minimal-v2 covers of demand.

    Args:
        demand: Tasks to cover.
        available: Users available per type; each cap is further limited to
            ceil(demand / type_tasks[m]), the most that could ever be useful.
        type_tasks: Tasks one user of each type completes.

    Returns:
        Combinations in (v0, v1) ascending order; at most one per (v0, v1).
    """
    t0, t1, t2 = type_tasks
    cap0, cap1, cap2 = (
        min(available[m], ceil_div(demand, type_tasks[m])) for m in range(3)
    )

    combinations: list[Combination] = []
    for v0 in range(cap0 + 1):
        for v1 in range(cap1 + 1):
            base = v0 * t0 + v1 * t1
            for v2 in range(cap2 + 1):
                if v0 == 0 and v1 == 0 and v2 == 0:
                    continue
                total = base + v2 * t2
                if total >= demand:
                    combinations.append(Combination((v0, v1, v2), total - demand))
                    break
    return combinations


def best_combination(combinations: Sequence[Combination]) -> Combination:
    """The best combination by rank; the earliest wins ties."""
    return min(combinations, key=Combination.rank)
