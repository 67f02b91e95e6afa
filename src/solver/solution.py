"""
Solution: one Cell per destination plus the reservoir of unassigned users.

A fresh Solution holds every user in the reservoir and is therefore
infeasible. It changes only through `move`, which takes a batch of users
out of the reservoir and into one destination while updating total cost
and per-type totals in the same step. A move that would over-draw the
reservoir raises before anything changes.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Iterator, Mapping, NamedTuple

from src.instance.cost_model import CostModel, User
from src.solver.cell import Cell, InvalidRemovalError


class Coherence(Enum):
    """Result of cross-checking incremental counters against recomputation."""

    COHERENT = auto()
    INC_FULFILL = auto()  # a cell's fulfilled counter drifted
    INC_COST = auto()  # total_cost drifted
    INC_CUSTOMERS = auto()  # a per-type assignment total drifted


class Assignment(NamedTuple):
    """One non-zero x[origin][destination][type][slot]."""

    origin: int
    destination: int
    user_type: int
    slot: int
    count: int


class Solution:
    """A (possibly partial) assignment of users to destinations."""

    def __init__(self, model: CostModel) -> None:
        self.model = model
        tasks = model.tasks_per_type
        self._cells = [Cell(tasks, int(d)) for d in model.demand]
        self._reservoir = Cell(tasks, 0)
        for user, n in model.supply.items():
            self._reservoir.add(user, n)

        self._total_customers = [0] * model.n_types
        self._total_cost = 0
        self.elapsed_ms: float = 0.0

    # ── Read access ───────────────────────────────────────────────────────────

    @property
    def total_cost(self) -> int:
        return self._total_cost

    @property
    def reservoir(self) -> Cell:
        """Users not assigned yet."""
        return self._reservoir

    @property
    def n_destinations(self) -> int:
        return len(self._cells)

    def destination(self, j: int) -> Cell:
        return self._cells[j]

    def count_of_type(self, user_type: int) -> int:
        """Users of this type assigned across all destinations."""
        return self._total_customers[user_type]

    def assignments(self) -> Iterator[Assignment]:
        """All non-zero assignments, ordered by destination."""
        for j, cell in enumerate(self._cells):
            for user, n in cell.items():
                yield Assignment(user.origin, j, user.user_type, user.slot, n)

    # ── Mutation ──────────────────────────────────────────────────────────────

    def move(self, destination: int, extraction: Mapping[User, int]) -> int:
        """Move users from the reservoir to a destination.

        Returns:
            The cost added to total_cost.

        Raises:
            ValueError: if destination is not a cell index.
            InvalidRemovalError: if the reservoir does not hold the users.
            Either way the Solution is left unchanged.
        """
        if not 0 <= destination < len(self._cells):
            raise ValueError(f"destination {destination} is outside 0..{len(self._cells) - 1}")
        cell = self._cells[destination]
        for user, n in extraction.items():
            if self._reservoir.count(user) < n:
                raise InvalidRemovalError(
                    f"reservoir holds {self._reservoir.count(user)} of {user}, {n} requested"
                )

        added = 0
        self._reservoir.remove_all(extraction)
        cell.add_all(extraction)
        for user, n in extraction.items():
            added += n * self.model.unit_cost(user, destination)
            self._total_customers[user.user_type] += n
        self._total_cost += added
        return added

    # ── Oracles ───────────────────────────────────────────────────────────────

    def compute_cost(self) -> int:
        """Recompute the total cost from the assignments."""
        return sum(
            a.count * int(self.model.cost[a.origin, a.destination, a.user_type, a.slot])
            for a in self.assignments()
        )

    def check_coherence(self) -> Coherence:
        """Compare every incremental counter with its recomputed value."""
        for cell in self._cells:
            if cell.compute_fulfilled() != cell.fulfilled:
                return Coherence.INC_FULFILL

        if self.compute_cost() != self._total_cost:
            return Coherence.INC_COST

        for m in range(self.model.n_types):
            assigned = sum(cell.type_count(m) for cell in self._cells)
            if assigned != self._total_customers[m]:
                return Coherence.INC_CUSTOMERS

        return Coherence.COHERENT

    def __repr__(self) -> str:
        return (
            f"Solution(cost={self._total_cost}, "
            f"customers={self._total_customers}, elapsed_ms={self.elapsed_ms:.1f})"
        )
