"""
Instance file parser.

Reads the whitespace-separated text format into a CostModel:

    nCells nPeriods nTypes
    typeTasks...
    (nPeriods * nTypes) blocks of:  "m t" header + nCells rows of nCells costs
    demand...
    (nPeriods * nTypes) blocks of:  "m t" header + one row of nCells counts

Blank lines between sections are ignored. Decimal costs are floored.
"""

from __future__ import annotations

import math
from pathlib import Path

import numpy as np

from src.instance.cost_model import CostModel, User


class InstanceFormatError(ValueError):
    """Raised when an instance file does not follow the expected layout."""

    def __init__(self, message: str, line_no: int | None = None) -> None:
        self.line_no = line_no
        where = f"line {line_no}: " if line_no is not None else ""
        super().__init__(f"{where}{message}")


class _LineReader:
    """Yields non-blank lines as token lists, tracking the source line number."""

    def __init__(self, text: str) -> None:
        self._lines = [
            (no, line.split()) for no, line in enumerate(text.splitlines(), start=1) if line.strip()
        ]
        self._pos = 0

    @property
    def line_no(self) -> int | None:
        if self._pos < len(self._lines):
            return self._lines[self._pos][0]
        return None

    def next_tokens(self, expected: int, what: str) -> list[str]:
        if self._pos >= len(self._lines):
            raise InstanceFormatError(f"unexpected end of file while reading {what}")
        no, tokens = self._lines[self._pos]
        if len(tokens) < expected:
            raise InstanceFormatError(
                f"expected {expected} values for {what}, found {len(tokens)}", no
            )
        self._pos += 1
        return tokens[:expected]

    def ints(self, expected: int, what: str) -> list[int]:
        no = self.line_no
        tokens = self.next_tokens(expected, what)
        try:
            return [int(tok) for tok in tokens]
        except ValueError as exc:
            raise InstanceFormatError(f"non-integer value in {what}", no) from exc

    def floored(self, expected: int, what: str) -> list[int]:
        no = self.line_no
        tokens = self.next_tokens(expected, what)
        try:
            return [math.floor(float(tok)) for tok in tokens]
        except (ValueError, OverflowError) as exc:
            raise InstanceFormatError(f"non-numeric value in {what}", no) from exc


def _block_header(reader: _LineReader, n_types: int, n_periods: int, what: str) -> tuple[int, int]:
    no = reader.line_no
    m, t = reader.ints(2, f"{what} header")
    if not (0 <= m < n_types and 0 <= t < n_periods):
        raise InstanceFormatError(f"{what} header ({m}, {t}) out of range", no)
    return m, t


def parse_instance(text: str) -> CostModel:
    """Parse instance text into a CostModel.

    Raises:
        InstanceFormatError: on any structural problem in the text.
    """
    reader = _LineReader(text)

    n_cells, n_periods, n_types = reader.ints(3, "cardinalities")
    if n_cells <= 0 or n_periods <= 0 or n_types <= 0:
        raise InstanceFormatError("cardinalities must be positive", 1)

    type_tasks = reader.ints(n_types, "type tasks")

    cost = np.zeros((n_cells, n_cells, n_types, n_periods), dtype=np.int64)
    for _ in range(n_periods * n_types):
        m, t = _block_header(reader, n_types, n_periods, "cost block")
        for i in range(n_cells):
            cost[i, :, m, t] = reader.floored(n_cells, f"cost row {i} of ({m}, {t})")

    demand = reader.ints(n_cells, "demand")

    supply: dict[User, int] = {}
    for _ in range(n_periods * n_types):
        m, t = _block_header(reader, n_types, n_periods, "supply block")
        no = reader.line_no
        counts = reader.ints(n_cells, f"supply of ({m}, {t})")
        for i, count in enumerate(counts):
            if count < 0:
                raise InstanceFormatError(f"negative supply at cell {i}", no)
            if count == 0:
                continue
            supply[User(i, m, t)] = count

    try:
        return CostModel(type_tasks=type_tasks, cost=cost, demand=demand, supply=supply)
    except ValueError as exc:
        raise InstanceFormatError(str(exc)) from exc


def load_instance(path: str | Path) -> CostModel:
    """Load a CostModel from an instance file."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            text = f.read()
    except UnicodeDecodeError as exc:
        raise InstanceFormatError(f"not UTF-8 text ({exc.reason} at byte {exc.start})") from exc
    return parse_instance(text)
