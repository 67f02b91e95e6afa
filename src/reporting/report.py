"""
Text output for solved instances.

  format_solution     full x[i][j][m][t] listing, one line per assignment
  format_summary      one CSV line: name;cost;seconds;type0;type1;type2
  optimality_gap      % gap against a reference file of optimal costs
  feasibility_message human-readable feasibility verdict
"""

from __future__ import annotations

import math
import re
from pathlib import Path

from src.solver.feasibility import Feasibility
from src.solver.solution import Solution

_REFERENCE_SEPARATORS = re.compile(r'[";\t]+')

_FEASIBILITY_TEXT = {
    Feasibility.FEASIBLE: "Solution is feasible",
    Feasibility.UNF_DEMAND: "Solution is not feasible: demand not satisfied",
    Feasibility.UNF_CUSTOMERS: "Solution is not feasible: exceeded number of available users",
}


def format_solution(solution: Solution) -> str:
    """Header with the cardinalities, then origin;destination;type;slot;count lines."""
    model = solution.model
    lines = [f"{model.n_cells}; {model.n_periods}; {model.n_types}"]
    for a in solution.assignments():
        lines.append(f"{a.origin};{a.destination};{a.user_type};{a.slot};{a.count}")
    return "\n".join(lines) + "\n"


def format_summary(instance_name: str, solution: Solution) -> str:
    """instance;cost;exec_time_s;type0_assigned;type1_assigned;type2_assigned"""
    counts = ";".join(str(solution.count_of_type(m)) for m in range(solution.model.n_types))
    return f"{instance_name};{solution.total_cost};{solution.elapsed_ms / 1000:.3f};{counts}"


def append_line(path: str | Path, text: str) -> None:
    """Append text to path, adding a trailing newline if missing."""
    if not text.endswith("\n"):
        text += "\n"
    with open(path, "a", encoding="utf-8") as f:
        f.write(text)


def optimality_gap(instance_stem: str, cost: int, reference_path: str | Path) -> float | None:
    """Percentage gap between cost and the reference optimum for this instance.

    The reference file holds one row per instance; fields are separated by
    quotes, semicolons or tabs. The first field is the instance name
    and the third is its optimal cost.

    Returns:
        (cost - optimal) / optimal * 100, or None if no row matches. A zero
        optimum gives inf for a positive cost and nan for a zero cost.
    """
    with open(reference_path, encoding="utf-8") as f:
        for line in f:
            fields = [v for v in _REFERENCE_SEPARATORS.split(line.strip()) if v]
            if len(fields) < 3 or fields[0] != instance_stem:
                continue
            optimal = float(fields[2])
            if optimal == 0:
                return math.inf if cost > 0 else math.nan
            return (cost - optimal) / optimal * 100
    return None


def format_gap(file_name: str, cost: int, gap: float | None) -> str:
    if gap is None:
        return f"{file_name} Cost: {cost}"
    return f"{file_name}: {gap:.3f} percent"


def feasibility_message(instance_stem: str, feasibility: Feasibility) -> str:
    return f"{instance_stem}: {_FEASIBILITY_TEXT[feasibility]}"
