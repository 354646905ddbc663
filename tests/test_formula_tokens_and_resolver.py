"""Unit tests for token extraction and variable resolution."""

from __future__ import annotations

import pytest

from formulas.resolver import (
    NOT_FOUND,
    resolve_dotted_path,
    resolve_flat,
    resolve_special_token,
    resolve_variable,
)
from formulas.tokens import extract_variables, is_special_token, single_token, split_special_token, token_pattern_for

pytestmark = pytest.mark.unit


def test_extract_variables_preserves_order_and_drops_duplicates() -> None:
    """Tokens come back in first-appearance order without repeats."""

    formula = "[stats.male] + [stats.female] / [stats.male] * [PARAM:price]"
    assert extract_variables(formula) == ("stats.male", "stats.female", "PARAM:price")


def test_extract_variables_ignores_text_outside_brackets() -> None:
    """Only bracketed tokens are extracted."""

    assert extract_variables("200 * 300 * 0.0145") == ()
    assert extract_variables("") == ()


def test_special_token_helpers() -> None:
    """PARAM/MANUAL tokens are recognized and split into prefix and key."""

    assert is_special_token("PARAM:jerseyPrice")
    assert is_special_token("MANUAL:visitors")
    assert not is_special_token("stats.female")
    assert split_special_token("PARAM:jerseyPrice") == ("PARAM:", "jerseyPrice")
    assert split_special_token("stats.female") is None


def test_token_pattern_escapes_dots() -> None:
    """A dotted token only matches itself, not wildcard look-alikes."""

    pattern = token_pattern_for("stats.female")
    assert pattern.search("[stats.female]")
    assert not pattern.search("[statsXfemale]")


def test_single_token_detects_bare_references() -> None:
    """A formula that is exactly one token is reported as such."""

    assert single_token(" [stats.reportText1] ") == "stats.reportText1"
    assert single_token("[stats.female] + 1") is None


def test_dotted_path_resolves_nested_record() -> None:
    """`stats.female` walks into the nested `stats` mapping."""

    assert resolve_variable("stats.female", {"stats": {"female": 5}}) == 5


def test_flat_fallback_resolves_bare_name() -> None:
    """A bare token resolves against a flat record."""

    assert resolve_variable("female", {"female": 5}) == 5


def test_dotted_token_against_flat_record_is_not_found() -> None:
    """Mixing a dotted token with a flat record is not a false positive."""

    assert resolve_variable("stats.female", {"female": 5}) is NOT_FOUND


def test_none_values_are_treated_as_absent() -> None:
    """Explicit None is the same as a missing key."""

    assert resolve_dotted_path({"stats": {"female": None}}, "stats.female") is NOT_FOUND
    assert resolve_flat({"female": None}, "female") is NOT_FOUND


def test_custom_strategy_order_is_respected() -> None:
    """Strategies are tried in the order given."""

    record = {"stats.female": 1, "stats": {"female": 2}}
    assert resolve_variable("stats.female", record) == 2
    assert resolve_variable("stats.female", record, strategies=(resolve_flat, resolve_dotted_path)) == 1


def test_special_tokens_bind_from_parameters_and_manual_data() -> None:
    """PARAM tokens read element parameters; MANUAL tokens read manual data."""

    parameters = {"jerseyPrice": {"value": 85, "label": "Jersey price", "unit": "EUR"}, "plain": 3}
    assert resolve_special_token("PARAM:jerseyPrice", parameters=parameters) == 85
    assert resolve_special_token("PARAM:plain", parameters=parameters) == 3
    assert resolve_special_token("MANUAL:visitors", manual_data={"visitors": 40}) == 40
    assert resolve_special_token("PARAM:missing", parameters=parameters) is NOT_FOUND
    assert resolve_special_token("MANUAL:visitors") is NOT_FOUND


def test_not_found_sentinel_is_falsy_singleton() -> None:
    """NOT_FOUND is a single falsy sentinel."""

    assert not NOT_FOUND
    assert repr(NOT_FOUND) == "NOT_FOUND"
    assert type(NOT_FOUND)() is NOT_FOUND
