"""Tests for text output and the run_solver command line.

Run with: pytest tests/test_reporting.py -v
"""

import math

import pytest

import run_solver
from src.instance.cost_model import User
from src.instance.loader import parse_instance
from src.reporting.report import (
    append_line,
    feasibility_message,
    format_gap,
    format_solution,
    format_summary,
    optimality_gap,
)
from src.solver.feasibility import Feasibility
from src.solver.solution import Solution

# Two users at cell 1 cover the demand of cell 0 at 4 each
SMALL_INSTANCE = """\
2 1 3
1 2 3
0 0
0 0
4 0
1 0
0 0
0 0
2 0
0 0
0 0
2 0
0 0
0 2
1 0
0 0
2 0
0 0
"""


@pytest.fixture
def solved() -> Solution:
    model = parse_instance(SMALL_INSTANCE)
    sol = Solution(model)
    sol.move(0, {User(1, 0, 0): 2})
    sol.elapsed_ms = 1234.0
    return sol


@pytest.fixture
def instance_file(tmp_path):
    path = tmp_path / "Co_2_1_T.txt"
    path.write_text(SMALL_INSTANCE, encoding="utf-8")
    return path


# ── Test: Formatting ──────────────────────────────────────────────


class TestFormatting:
    """Solution listing, summary line and verdicts."""

    def test_format_solution(self, solved):
        assert format_solution(solved) == "2; 1; 3\n1;0;0;0;2\n"

    def test_format_empty_solution(self, solved):
        assert format_solution(Solution(solved.model)) == "2; 1; 3\n"

    def test_format_summary(self, solved):
        assert format_summary("Co_2_1_T.txt", solved) == "Co_2_1_T.txt;8;1.234;2;0;0"

    def test_feasibility_messages(self):
        assert feasibility_message("Co_2", Feasibility.FEASIBLE) == "Co_2: Solution is feasible"
        assert "demand not satisfied" in feasibility_message("Co_2", Feasibility.UNF_DEMAND)
        assert "available users" in feasibility_message("Co_2", Feasibility.UNF_CUSTOMERS)

    def test_format_gap(self):
        assert format_gap("a.txt", 110, 10.0) == "a.txt: 10.000 percent"
        assert format_gap("a.txt", 110, None) == "a.txt Cost: 110"

    def test_append_line_adds_newline(self, tmp_path):
        path = tmp_path / "out.csv"
        append_line(path, "first")
        append_line(path, "second\n")
        assert path.read_text(encoding="utf-8") == "first\nsecond\n"


# ── Test: Optimality gap ──────────────────────────────────────────


class TestOptimalityGap:
    """Reference rows: name first, optimal cost third."""

    def test_semicolon_rows(self, tmp_path):
        ref = tmp_path / "optimal.csv"
        ref.write_text("Co_1;x;50\nCo_2;x;200\n", encoding="utf-8")
        assert optimality_gap("Co_2", 210, ref) == pytest.approx(5.0)

    def test_quoted_and_tabbed_rows(self, tmp_path):
        ref = tmp_path / "optimal.csv"
        ref.write_text('"Co_2"\t"x"\t"80"\n', encoding="utf-8")
        assert optimality_gap("Co_2", 100, ref) == pytest.approx(25.0)

    def test_zero_optimum(self, tmp_path):
        ref = tmp_path / "optimal.csv"
        ref.write_text("Co_2;x;0\n", encoding="utf-8")
        assert optimality_gap("Co_2", 15, ref) == math.inf
        assert math.isnan(optimality_gap("Co_2", 0, ref))
        assert format_gap("Co_2.txt", 15, math.inf) == "Co_2.txt: inf percent"

    def test_missing_instance(self, tmp_path):
        ref = tmp_path / "optimal.csv"
        ref.write_text("Co_1;x;50\n", encoding="utf-8")
        assert optimality_gap("Co_9", 10, ref) is None


# ── Test: Command line ────────────────────────────────────────────


class TestCommandLine:
    """run_solver.main end to end on a small file."""

    def _base_args(self, instance_file, tmp_path) -> list[str]:
        return [
            "-i",
            str(instance_file),
            "--config",
            str(tmp_path / "missing.yaml"),
            "--time-budget",
            "0",
            "--seed",
            "1",
        ]

    def test_test_mode_prints_verdict(self, instance_file, tmp_path, capsys):
        code = run_solver.main(self._base_args(instance_file, tmp_path) + ["--test"])
        assert code == 0
        assert capsys.readouterr().out.strip() == "Co_2_1_T: Solution is feasible"

    def test_default_prints_summary(self, instance_file, tmp_path, capsys):
        assert run_solver.main(self._base_args(instance_file, tmp_path)) == 0
        out = capsys.readouterr().out.strip()
        assert out.startswith("Co_2_1_T.txt;8;")
        assert out.endswith(";2;0;0")

    def test_output_files_are_appended(self, instance_file, tmp_path, capsys):
        summary = tmp_path / "summary.csv"
        listing = tmp_path / "solution.txt"
        args = self._base_args(instance_file, tmp_path) + ["-o", str(summary), "-s", str(listing)]

        run_solver.main(args)
        run_solver.main(args)

        assert len(summary.read_text(encoding="utf-8").splitlines()) == 2
        assert listing.read_text(encoding="utf-8") == "2; 1; 3\n1;0;0;0;2\n" * 2
        assert capsys.readouterr().out == ""

    def test_prints_gap(self, instance_file, tmp_path, capsys):
        ref = tmp_path / "optimal.csv"
        ref.write_text("Co_2_1_T;x;4\n", encoding="utf-8")
        run_solver.main(self._base_args(instance_file, tmp_path) + ["-os", str(ref)])
        assert capsys.readouterr().out.strip() == "Co_2_1_T.txt: 100.000 percent"

    def test_unreadable_instance(self, tmp_path, capsys):
        code = run_solver.main(["-i", str(tmp_path / "nope.txt"), "--time-budget", "0"])
        assert code == 1
        assert "Unable to read instance" in capsys.readouterr().err

    def test_instance_not_utf8(self, tmp_path, capsys):
        path = tmp_path / "Co_bad.txt"
        path.write_bytes(SMALL_INSTANCE.encode("utf-8") + b"\xff")
        code = run_solver.main(["-i", str(path), "--time-budget", "0"])
        assert code == 1
        assert "not UTF-8" in capsys.readouterr().err

    def test_infinite_cost_in_instance(self, tmp_path, capsys):
        path = tmp_path / "Co_inf.txt"
        path.write_text(SMALL_INSTANCE.replace("4 0", "inf 0", 1), encoding="utf-8")
        code = run_solver.main(["-i", str(path), "--time-budget", "0"])
        assert code == 1
        assert "Unable to read instance" in capsys.readouterr().err
