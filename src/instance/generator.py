"""
Random instance generation for benchmarks and tests.

Instances are drawn from a numpy Generator so a seed reproduces them
exactly. `slack` controls how much spare task capacity the supply carries
over the total demand: values below 1.0 produce instances no solver can
satisfy.
"""

from __future__ import annotations

import numpy as np

from src.instance.cost_model import N_TYPES, CostModel, User


def generate_instance(
    rng: np.random.Generator,
    n_cells: int = 20,
    n_periods: int = 2,
    type_tasks: tuple[int, int, int] = (1, 2, 3),
    demand_range: tuple[int, int] = (0, 12),
    max_cost: int = 50,
    slack: float = 1.5,
) -> CostModel:
    """Generate a random CostModel.

    Costs grow with the task capacity of the type, so stronger users are
    dearer. Supply is spread uniformly over (origin, type, slot) until the
    total capacity reaches slack * total demand.
    """
    cost = rng.integers(0, max_cost + 1, size=(n_cells, n_cells, N_TYPES, n_periods))
    for m, tasks in enumerate(type_tasks):
        cost[:, :, m, :] *= tasks
    idx = np.arange(n_cells)
    cost[idx, idx, :, :] = 0  # users already at a cell travel for free

    demand = rng.integers(demand_range[0], demand_range[1] + 1, size=n_cells)
    target = int(np.ceil(demand.sum() * slack))

    supply: dict[User, int] = {}
    capacity = 0
    while capacity < target:
        u = User(
            int(rng.integers(n_cells)),
            int(rng.integers(N_TYPES)),
            int(rng.integers(n_periods)),
        )
        supply[u] = supply.get(u, 0) + 1
        capacity += type_tasks[u.user_type]

    return CostModel(type_tasks=list(type_tasks), cost=cost, demand=demand, supply=supply)
