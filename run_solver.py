"""
Quick-run script for the task coverage solver.

Usage:
    python run_solver.py -i instances/Co_30_1_T.txt                 # print cost
    python run_solver.py -i inst.txt -o summary.csv -s solution.txt # append outputs
    python run_solver.py -i inst.txt -os optimal.csv                # print optimality gap
    python run_solver.py -i inst.txt --test                         # feasibility verdict
    python run_solver.py -i inst.txt --seed 7 --time-budget 1.0

Summary lines are appended as: instance;cost;seconds;type0;type1;type2
"""

import argparse
import logging
import sys
from pathlib import Path

from src.instance.loader import InstanceFormatError, load_instance
from src.reporting.report import (
    append_line,
    feasibility_message,
    format_gap,
    format_solution,
    format_summary,
    optimality_gap,
)
from src.solver.config import RunConfig, load_config, with_overrides
from src.solver.driver import RestartSolver
from src.solver.feasibility import check_feasibility
from src.solver.solution import Coherence

logger = logging.getLogger("run_solver")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Solve one task coverage instance")
    parser.add_argument("-i", "--input", required=True, help="Instance file to solve")
    parser.add_argument("-o", "--output", default=None, help="Append a summary line to this CSV")
    parser.add_argument("-s", "--solution", default=None, help="Append the full solution here")
    parser.add_argument(
        "-os", "--optimal", default=None, help="Reference file of optimal costs (prints the gap)"
    )
    parser.add_argument(
        "--test", action="store_true", help="Only print whether the solution is feasible"
    )
    parser.add_argument(
        "--config",
        type=str,
        default="config/default_solver.yaml",
        help="Path to solver config YAML",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed (overrides config)")
    parser.add_argument(
        "--time-budget", type=float, default=None, help="Seconds for restarts (overrides config)"
    )
    return parser


def load_run_config(path: str) -> RunConfig:
    config_path = Path(path)
    if config_path.exists():
        return load_config(config_path)
    return RunConfig()


def main(argv: list[str] | None = None) -> int:
    """Main function that runs if the file is run directly."""

    args = build_parser().parse_args(argv)
    config = with_overrides(load_run_config(args.config), args.time_budget, args.seed)
    logging.basicConfig(level=config.logging.level, format=config.logging.format)

    input_path = Path(args.input)
    try:
        model = load_instance(input_path)
    except (OSError, InstanceFormatError) as exc:
        print(f"Unable to read instance {input_path}: {exc}", file=sys.stderr)
        return 1

    file_name = input_path.name
    instance_name = input_path.stem

    solution = RestartSolver(model, config.solver).solve()

    coherence = solution.check_coherence()
    if coherence != Coherence.COHERENT:
        logger.warning("%s: incoherent solution. %s", file_name, coherence.name)

    if args.test:
        print(feasibility_message(instance_name, check_feasibility(solution)))
        return 0

    if args.output:
        append_line(args.output, format_summary(file_name, solution))
    if args.solution:
        append_line(args.solution, format_solution(solution))
    if args.optimal:
        try:
            gap = optimality_gap(instance_name, solution.total_cost, args.optimal)
        except (OSError, ValueError) as exc:
            print(f"Unable to read reference file {args.optimal}: {exc}", file=sys.stderr)
            return 1
        print(format_gap(file_name, solution.total_cost, gap))
    if not (args.output or args.solution or args.optimal):
        print(format_summary(file_name, solution))
    return 0


if __name__ == "__main__":
    sys.exit(main())
