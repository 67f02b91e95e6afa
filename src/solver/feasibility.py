"""Feasibility check for a Solution against a CostModel."""

from __future__ import annotations

from enum import Enum, auto

from src.instance.cost_model import CostModel, User
from src.solver.solution import Solution


class Feasibility(Enum):
    """Valid feasibility outcomes"""

    FEASIBLE = auto()
    UNF_DEMAND = auto()  # some destination has fewer tasks than it requires
    UNF_CUSTOMERS = auto()  # some user kind is assigned beyond its supply


def check_feasibility(solution: Solution, model: CostModel | None = None) -> Feasibility:
    """Check demand (destinations in index order), then availability.

    Args:
        solution: The solution to evaluate.
        model: Instance to check against; defaults to the solution's own.
    """
    if model is None:
        model = solution.model
    for j in range(solution.n_destinations):
        if solution.destination(j).fulfilled < int(model.demand[j]):
            return Feasibility.UNF_DEMAND

    assigned: dict[User, int] = {}
    for a in solution.assignments():
        user = User(a.origin, a.user_type, a.slot)
        assigned[user] = assigned.get(user, 0) + a.count

    for user, n in assigned.items():
        if n > model.supply.get(user, 0):
            return Feasibility.UNF_CUSTOMERS

    return Feasibility.FEASIBLE
