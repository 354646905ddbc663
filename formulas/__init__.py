"""Pure formula engine for event report charts.

This package contains deterministic, testable computations that operate on
in-memory statistics records and return DTOs. It must not import Django or
perform any database I/O; catalogs and statistics are injected by callers.
"""

from .chart_calculator import calculate_chart
from .evaluator import evaluate_formula
from .formatting import format_value
from .validator import validate_formula

__all__ = ["calculate_chart", "evaluate_formula", "format_value", "validate_formula"]
