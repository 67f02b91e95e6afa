"""
Greedy construction of a Solution, and the deterministic recovery pass.

Both procedures fill destinations one at a time from the reservoir:

  1. Re-sort the reservoir by cost to the destination (cheapest first),
     once per destination.
  2. Generate the minimal-v2 Combinations covering its demand.
  3. Choose one Combination and move the users it extracts.

They differ in visiting order and in how step 3 chooses:

  construct_greedy   random order; cheapest realized cost first, then the
                     best rank (residual, penalty) among equally cheap ones.
                     Stops at the first destination the remaining supply
                     cannot cover.
  construct_recovery demand-ascending order; best rank only. Skips the
                     destinations it cannot cover and keeps going.
"""

from __future__ import annotations

from typing import Callable, Sequence

import numpy as np

from src.instance.cost_model import CostModel, User
from src.solver.combinations import (
    Combination,
    best_combination,
    ceil_div,
    generate_combinations,
)
from src.solver.solution import Solution


class _Supply:
    """Per-type reservoir counts and their task capacity, tracked locally."""

    def __init__(self, solution: Solution) -> None:
        self.tasks = solution.model.tasks_per_type
        self.available = solution.reservoir.type_counts()
        self.possible_tasks = sum(n * t for n, t in zip(self.available, self.tasks))

    def covers(self, demand: int) -> bool:
        return self.possible_tasks >= demand

    def consume(self, extraction: dict[User, int]) -> None:
        for user, n in extraction.items():
            self.available[user.user_type] -= n
            self.possible_tasks -= n * self.tasks[user.user_type]


def _cost_to(model: CostModel, destination: int) -> Callable[[User], int]:
    # [origin][type][slot] as nested lists of ints for fast keyed lookups
    table = model.cost[:, destination, :, :].tolist()

    def unit_cost(user: User) -> int:
        return table[user.origin][user.user_type][user.slot]

    return unit_cost


def _extraction_cost(extraction: dict[User, int], unit_cost: Callable[[User], int]) -> int:
    return sum(n * unit_cost(u) for u, n in extraction.items())


def _cheapest_combination(
    solution: Solution,
    combinations: Sequence[Combination],
    unit_cost: Callable[[User], int],
) -> Combination:
    """Minimum realized cost; ties go to the best rank.

    The reservoir must already be sorted by unit_cost.
    """
    best_cost = None
    tied: list[Combination] = []
    for comb in combinations:
        cost = _extraction_cost(solution.reservoir.extract(comb), unit_cost)
        if best_cost is None or cost < best_cost:
            best_cost = cost
            tied = [comb]
        elif cost == best_cost:
            tied.append(comb)
    return best_combination(tied)


def _fill(
    solution: Solution,
    supply: _Supply,
    destination: int,
    combination: Combination,
) -> None:
    extraction = solution.reservoir.extract(combination)
    solution.move(destination, extraction)
    supply.consume(extraction)


def demanding_destinations(model: CostModel) -> list[int]:
    """Destination indices with non-zero demand, in index order."""
    return [j for j in range(model.n_cells) if model.demand[j] != 0]


def construct_greedy(model: CostModel, rng: np.random.Generator) -> Solution:
    """One randomized greedy construction attempt.

    The result may be partial: construction stops at the first destination
    the remaining users cannot cover.
    """
    solution = Solution(model)
    supply = _Supply(solution)
    tasks = supply.tasks

    order = demanding_destinations(model)
    rng.shuffle(order)

    for j in order:
        demand = int(model.demand[j])
        if not supply.covers(demand):
            break

        unit_cost = _cost_to(model, j)
        solution.reservoir.sort_by(unit_cost)
        dispatchable = [
            min(ceil_div(demand, tasks[m]), supply.available[m]) for m in range(model.n_types)
        ]
        combinations = generate_combinations(demand, dispatchable, tasks)
        if not combinations:
            break

        chosen = _cheapest_combination(solution, combinations, unit_cost)
        _fill(solution, supply, j, chosen)

    return solution


def construct_recovery(model: CostModel) -> Solution:
    """Deterministic single pass, smallest demand first.

    Used when the restart loop ends on an infeasible best. When the supply
    cannot cover every destination, the result is the partial coverage the
    supply allows.
    """
    solution = Solution(model)
    supply = _Supply(solution)
    tasks = supply.tasks

    order = sorted(demanding_destinations(model), key=lambda j: int(model.demand[j]))

    for j in order:
        demand = int(model.demand[j])
        unit_cost = _cost_to(model, j)
        solution.reservoir.sort_by(unit_cost)
        if not supply.covers(demand):
            continue

        combinations = generate_combinations(demand, supply.available, tasks)
        if not combinations:
            continue
        _fill(solution, supply, j, best_combination(combinations))

    return solution
