"""
run_batch.py
──────────────────────────────────────────────────────────────────────────────
Solve every instance in a directory and append one summary line each.

Usage:
    python scripts/run_batch.py instances/ -o summary.csv
    python scripts/run_batch.py instances/ -o summary.csv --pattern "Co_100_*.txt"
    python scripts/run_batch.py instances/ -o summary.csv --time-budget 1.0 --seed 3

Each line is: instance;cost;seconds;type0;type1;type2. Instances whose final
solution is not feasible are reported on stderr but still summarised.
"""

import argparse
import logging
import sys
from pathlib import Path

from src.instance.loader import InstanceFormatError, load_instance
from src.reporting.report import append_line, feasibility_message, format_summary
from src.solver.config import RunConfig, load_config, with_overrides
from src.solver.driver import RestartSolver, SolverStatus
from src.solver.solution import Coherence

logger = logging.getLogger("run_batch")


def main():
    """Main"""

    parser = argparse.ArgumentParser(description="Solve a directory of instances")
    parser.add_argument("directory", type=str, help="Directory holding instance files")
    parser.add_argument("-o", "--output", required=True, help="Summary CSV to append to")
    parser.add_argument("--pattern", type=str, default="*.txt", help="Instance file glob")
    parser.add_argument(
        "--config",
        type=str,
        default="config/default_solver.yaml",
        help="Path to solver config YAML",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed (overrides config)")
    parser.add_argument(
        "--time-budget", type=float, default=None, help="Seconds per instance (overrides config)"
    )
    args = parser.parse_args()

    config_path = Path(args.config)
    config = load_config(config_path) if config_path.exists() else RunConfig()
    config = with_overrides(config, args.time_budget, args.seed)
    logging.basicConfig(level=config.logging.level, format=config.logging.format)

    instances = sorted(Path(args.directory).glob(args.pattern))
    if not instances:
        print(f"No instances matching {args.pattern} in {args.directory}", file=sys.stderr)
        return 1

    failures = 0
    for path in instances:
        try:
            model = load_instance(path)
        except (OSError, InstanceFormatError) as exc:
            print(f"Skipping {path.name}: {exc}", file=sys.stderr)
            failures += 1
            continue

        result = RestartSolver(model, config.solver).solve_with_diagnostics()
        solution = result.solution

        coherence = solution.check_coherence()
        if coherence != Coherence.COHERENT:
            logger.warning("%s: incoherent solution. %s", path.name, coherence.name)
        if result.status == SolverStatus.PARTIAL:
            print(feasibility_message(path.stem, result.feasibility), file=sys.stderr)

        append_line(args.output, format_summary(path.name, solution))
        print(
            f"{path.name:<28} cost={solution.total_cost:>8} "
            f"attempts={result.attempts:>5} {result.status.name}"
        )

    print(f"\nSolved {len(instances) - failures}/{len(instances)} instances → {args.output}")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
