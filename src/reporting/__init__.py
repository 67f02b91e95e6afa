from src.reporting.report import (
    append_line,
    feasibility_message,
    format_gap,
    format_solution,
    format_summary,
    optimality_gap,
)

__all__ = [
    "append_line",
    "feasibility_message",
    "format_gap",
    "format_solution",
    "format_summary",
    "optimality_gap",
]
