"""
Task coverage solver.

Assigns users from a reservoir to destination cells so every destination's
task demand is met at low cost, using time-boxed randomized greedy restarts
with a deterministic recovery pass.

Quick start:
    from src.solver import RestartSolver, SolverConfig
    solver = RestartSolver(model, SolverConfig(time_budget_s=2.0))
    solution = solver.solve()
"""

from src.solver.cell import Cell, InvalidRemovalError
from src.solver.combinations import Combination, generate_combinations
from src.solver.config import RunConfig, SolverConfig, LoggingConfig, load_config
from src.solver.construction import construct_greedy, construct_recovery
from src.solver.driver import RestartSolver, SolveResult, SolverStatus, solve
from src.solver.feasibility import Feasibility, check_feasibility
from src.solver.solution import Assignment, Coherence, Solution

__all__ = [
    "Cell",
    "InvalidRemovalError",
    "Combination",
    "generate_combinations",
    "RunConfig",
    "SolverConfig",
    "LoggingConfig",
    "load_config",
    "construct_greedy",
    "construct_recovery",
    "RestartSolver",
    "SolveResult",
    "SolverStatus",
    "solve",
    "Feasibility",
    "check_feasibility",
    "Assignment",
    "Coherence",
    "Solution",
]
