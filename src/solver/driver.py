"""
Restart driver: time-boxed repeated greedy construction.

Runs `construct_greedy` back-to-back and keeps the cheapest Solution. The
loop is not preemptive: an attempt in progress always finishes. Before
starting another attempt the driver predicts its end as
`elapsed + last_attempt_duration` and stops if that reaches the budget.
At least one attempt always runs.

If the retained Solution is infeasible it is discarded in favour of the
deterministic recovery pass.

Quick start:
    solver = RestartSolver(model, SolverConfig(time_budget_s=2.0, random_seed=7))
    result = solver.solve_with_diagnostics()
    print(result.status, result.solution.total_cost)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable

import numpy as np

from src.instance.cost_model import CostModel
from src.solver.config import SolverConfig
from src.solver.construction import construct_greedy, construct_recovery
from src.solver.feasibility import Feasibility, check_feasibility
from src.solver.solution import Solution

logger = logging.getLogger(__name__)


class SolverStatus(Enum):
    """Valid solver outcomes"""

    FEASIBLE = auto()  # best restart attempt was feasible
    RECOVERED = auto()  # recovery pass produced a feasible solution
    PARTIAL = auto()  # even recovery could not meet every demand


@dataclass
class SolveResult:
    """Final solution plus diagnostics for one solve."""

    solution: Solution
    status: SolverStatus
    feasibility: Feasibility
    attempts: int
    improvements: int
    solve_time_ms: float


class RestartSolver:
    """Randomized restarts under a wall-clock budget.

    Args:
        model: Read-only problem data.
        solver_config: Budget and seed. Defaults to SolverConfig().
        clock: Monotonic seconds source; injectable for tests.
        construct: One-attempt constructor; injectable for tests.
    """

    def __init__(
        self,
        model: CostModel,
        solver_config: SolverConfig | None = None,
        clock: Callable[[], float] = time.perf_counter,
        construct: Callable[[CostModel, np.random.Generator], Solution] = construct_greedy,
    ) -> None:
        self.model = model
        self.config = solver_config or SolverConfig()
        self.rng = np.random.default_rng(self.config.random_seed)
        self._clock = clock
        self._construct = construct

        self.total_solves: int = 0
        self.total_attempts: int = 0
        self.total_recoveries: int = 0

    def solve(self) -> Solution:
        """Return the final Solution."""
        return self.solve_with_diagnostics().solution

    def solve_with_diagnostics(self) -> SolveResult:
        """Run the restart loop, then recover if the best is infeasible."""
        start = self._clock()
        budget = self.config.time_budget_s

        best: Solution | None = None
        attempts = 0
        improvements = 0
        while True:
            before = self._clock()
            candidate = self._construct(self.model, self.rng)
            after = self._clock()
            attempts += 1

            if best is None or candidate.total_cost < best.total_cost:
                best = candidate
                improvements += 1
                logger.debug("attempt %d improved cost to %d", attempts, best.total_cost)

            last_duration = after - before
            if (after - start) + last_duration >= budget:
                break

        feasibility = check_feasibility(best)
        status = SolverStatus.FEASIBLE
        if feasibility != Feasibility.FEASIBLE:
            logger.info("best of %d attempts is %s; running recovery", attempts, feasibility.name)
            self.total_recoveries += 1
            best = construct_recovery(self.model)
            feasibility = check_feasibility(best)
            status = (
                SolverStatus.RECOVERED
                if feasibility == Feasibility.FEASIBLE
                else SolverStatus.PARTIAL
            )

        elapsed_ms = (self._clock() - start) * 1e3
        best.elapsed_ms = elapsed_ms
        self.total_solves += 1
        self.total_attempts += attempts
        logger.info(
            "solved in %.1f ms: %d attempts, cost %d, status %s",
            elapsed_ms,
            attempts,
            best.total_cost,
            status.name,
        )
        return SolveResult(
            solution=best,
            status=status,
            feasibility=feasibility,
            attempts=attempts,
            improvements=improvements,
            solve_time_ms=elapsed_ms,
        )


def solve(model: CostModel, solver_config: SolverConfig | None = None) -> Solution:
    """Convenience wrapper: one RestartSolver run."""
    return RestartSolver(model, solver_config).solve()
