"""Unit tests for display formatting."""

from __future__ import annotations

import math

import pytest

from formulas.dto import EvaluationResult
from formulas.formatting import (
    DEFAULT_FORMATTING,
    NA_DISPLAY,
    FormattingConfig,
    format_value,
    parse_formatted_value,
    resolve_formatting,
)

pytestmark = pytest.mark.unit

EURO = FormattingConfig(rounded=True, prefix="€")
EXACT = FormattingConfig(rounded=False)


@pytest.mark.parametrize(
    ("value", "config", "expected"),
    [
        (1234.4, EURO, "€1234"),
        (1234.5, EURO, "€1235"),
        (-2.5, FormattingConfig(), "-3"),
        (12.345, EXACT, "12.35"),
        (12.5, EXACT, "12.5"),
        (42, FormattingConfig(rounded=False, suffix="%"), "42%"),
        (-0.001, FormattingConfig(), "0"),
        (1234567, EURO, "€1234567"),
    ],
)
def test_format_value(value: float, config: FormattingConfig, expected: str) -> None:
    """Rounding, decimals, prefix and suffix are applied as configured."""

    assert format_value(value, config) == expected


@pytest.mark.parametrize(
    "value",
    ["NA", None, math.nan, math.inf, EvaluationResult.na(), EvaluationResult.error("broken")],
)
def test_not_applicable_values_render_sentinel(value: object) -> None:
    """NA and errors render as N/A, ignoring prefix/suffix."""

    assert format_value(value, FormattingConfig(prefix="€", suffix="%")) == NA_DISPLAY


def test_number_results_are_formatted() -> None:
    """EvaluationResult numbers format like plain floats."""

    assert format_value(EvaluationResult.number(1785), EURO) == "€1785"


def test_formatting_is_stable_under_reapplication() -> None:
    """Formatting a parsed display string reproduces the same string."""

    first = format_value(12.345, EXACT)
    again = format_value(parse_formatted_value(first, EXACT), EXACT)
    assert first == again == "12.35"


def test_parse_formatted_value_strips_prefix_and_suffix() -> None:
    """Parsing undoes prefix/suffix and maps N/A to None."""

    assert parse_formatted_value("€1234", EURO) == 1234.0
    assert parse_formatted_value("42.5%", FormattingConfig(suffix="%")) == 42.5
    assert parse_formatted_value(NA_DISPLAY) is None
    assert parse_formatted_value("abc") is None


def test_resolve_formatting_fills_defaults_once() -> None:
    """Loose payloads become complete FormattingConfig values."""

    assert resolve_formatting(None) == DEFAULT_FORMATTING
    assert resolve_formatting({}) == DEFAULT_FORMATTING
    assert resolve_formatting({"prefix": "€"}) == FormattingConfig(rounded=True, prefix="€", suffix="")
    assert resolve_formatting({"rounded": False}).rounded is False
    assert resolve_formatting(None, default=EXACT) == EXACT
    assert resolve_formatting(EURO) is EURO
