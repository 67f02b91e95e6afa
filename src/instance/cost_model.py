"""
Problem instance data: users and the cost model.

A User is a homogeneous group of people sharing an origin cell, a type and
an availability slot. The CostModel holds everything the solver reads but
never writes: the 4-D cost tensor, per-type task capacities, per-cell
demand and the initial supply of every User.

Usage:
    model = CostModel(type_tasks=[1, 2, 3], cost=cost, demand=demand, supply=supply)
    model.unit_cost(User(0, 2, 1), destination=4)
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

N_TYPES = 3  # the combination generator enumerates exactly three types


@dataclass(frozen=True)
class User:
    """A (origin, type, slot) group of identical users."""

    origin: int
    user_type: int
    slot: int

    def __str__(self) -> str:
        return f"({self.origin}, {self.user_type}, {self.slot})"


@dataclass
class CostModel:
    """Read-only problem data.

    Attributes:
        type_tasks: Tasks one user of type m completes.
        cost: Integer tensor indexed [origin][destination][type][slot].
        demand: Tasks each destination cell requires.
        supply: Initial count of every User; zero counts are omitted.
    """

    type_tasks: np.ndarray
    cost: np.ndarray
    demand: np.ndarray
    supply: dict[User, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.type_tasks = np.asarray(self.type_tasks, dtype=np.int64)
        self.cost = np.asarray(self.cost, dtype=np.int64)
        self.demand = np.asarray(self.demand, dtype=np.int64)

        if self.cost.ndim != 4:
            raise ValueError(f"cost tensor must be 4-D, got shape {self.cost.shape}")
        n_cells, n_dest, n_types, _ = self.cost.shape
        if n_cells != n_dest:
            raise ValueError(f"cost tensor must be square in cells, got {n_cells}x{n_dest}")
        if n_types != N_TYPES or self.type_tasks.shape != (N_TYPES,):
            raise ValueError(f"exactly {N_TYPES} user types are supported")
        if self.demand.shape != (n_cells,):
            raise ValueError(f"demand must have {n_cells} entries, got {self.demand.shape}")
        if (self.type_tasks <= 0).any():
            raise ValueError("every user type must complete at least one task")
        if (self.cost < 0).any() or (self.demand < 0).any():
            raise ValueError("costs and demand must be non-negative")

        for u, n in self.supply.items():
            if not (0 <= u.origin < self.n_cells and 0 <= u.user_type < self.n_types):
                raise ValueError(f"user {u} is outside the instance dimensions")
            if not 0 <= u.slot < self.n_periods:
                raise ValueError(f"user {u} has an unknown slot")
            if n < 0:
                raise ValueError(f"negative supply for user {u}")

        # Plain ints for the hot loops; numpy scalar arithmetic is slow there.
        self._tasks: list[int] = [int(x) for x in self.type_tasks]

    @property
    def n_cells(self) -> int:
        return int(self.cost.shape[0])

    @property
    def n_types(self) -> int:
        return int(self.cost.shape[2])

    @property
    def n_periods(self) -> int:
        return int(self.cost.shape[3])

    @property
    def tasks_per_type(self) -> list[int]:
        """Per-type task capacities as Python ints."""
        return list(self._tasks)

    def unit_cost(self, user: User, destination: int) -> int:
        """Cost of sending one user of this kind to the destination."""
        return int(self.cost[user.origin, destination, user.user_type, user.slot])

    def total_demand(self) -> int:
        return int(self.demand.sum())

    def total_capacity(self) -> int:
        """Tasks the whole initial supply could complete."""
        return sum(n * self._tasks[u.user_type] for u, n in self.supply.items())
