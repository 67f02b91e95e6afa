"""
Solver configuration dataclasses and YAML loader.

All runtime knobs live here as typed, frozen dataclasses.
Load from YAML with `load_config()` or construct directly for tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

DEFAULT_TIME_BUDGET_S = 4.95


@dataclass(frozen=True)
class SolverConfig:
    """Restart loop parameters."""

    time_budget_s: float = DEFAULT_TIME_BUDGET_S  # no new attempt starts past this
    random_seed: int | None = None                # None → fresh entropy every run

    def __post_init__(self) -> None:
        if self.time_budget_s < 0:
            raise ValueError(f"time_budget_s must be non-negative, got {self.time_budget_s}")


@dataclass(frozen=True)
class LoggingConfig:
    """Logging setup applied once by the command-line entry points."""

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class RunConfig:
    """Top-level configuration aggregating all sub-configs."""

    solver: SolverConfig = field(default_factory=SolverConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | Path) -> RunConfig:
    """Load a RunConfig from a YAML file.

    Args:
        path: Path to a YAML config file. Missing sections keep defaults.

    Returns:
        Fully constructed RunConfig with all sub-configs.
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return RunConfig(
        solver=SolverConfig(**raw.get("solver", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
    )


def with_overrides(
    config: RunConfig,
    time_budget_s: float | None = None,
    random_seed: int | None = None,
) -> RunConfig:
    """Return a copy of config with CLI overrides applied."""
    if time_budget_s is None and random_seed is None:
        return config
    solver = SolverConfig(
        time_budget_s=(
            time_budget_s if time_budget_s is not None else config.solver.time_budget_s
        ),
        random_seed=random_seed if random_seed is not None else config.solver.random_seed,
    )
    return RunConfig(solver=solver, logging=config.logging)
