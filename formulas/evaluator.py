"""Formula evaluation against a statistics record.

Evaluation runs in four steps:

1. extract the bracketed tokens,
2. resolve each token (record strategies, or element bindings for
   `PARAM:` / `MANUAL:` tokens),
3. substitute the resolved numbers into the formula text,
4. parse and evaluate the remaining arithmetic with the restricted parser in
   `formulas.arithmetic`, rounding to 2 decimals.

Evaluation never raises: every outcome is an `EvaluationResult` tagged
`number`, `NA` or `error`. A well-formed formula whose data is absent, or
whose result is not finite (e.g. `x / 0`), is NA. A malformed formula, a
non-numeric value or an uncatalogued token is an error.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from .arithmetic import FormulaSyntaxError, evaluate_expression
from .dto import EvaluationResult, StatsCoverage
from .registry import default_variable_descriptors
from .resolver import DEFAULT_STRATEGIES, NOT_FOUND, ResolutionStrategy, resolve_special_token, resolve_variable
from .stats import SAMPLE_STATS, ensure_derived_metrics
from .tokens import extract_variables, is_special_token, token_pattern_for
from .validator import CatalogLike, catalog_names, check_formula_syntax

logger = logging.getLogger(__name__)

_CENTS = Decimal("0.01")


class _NotNumeric(Exception):
    pass


def _coerce_number(value: Any) -> float:
    """Return a float for numbers and numeric strings; raise _NotNumeric otherwise."""

    if isinstance(value, bool):
        raise _NotNumeric
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            raise _NotNumeric from None
        if not math.isfinite(number):
            raise _NotNumeric
        return number
    raise _NotNumeric


def _number_literal(value: float) -> str:
    """Render a number as one parenthesised operand in plain decimal notation."""

    return f"({format(Decimal(repr(value)), 'f')})"


def round_result(value: float) -> float:
    """Round to 2 decimals, half away from zero."""

    return float(Decimal(repr(value)).quantize(_CENTS, rounding=ROUND_HALF_UP))


def evaluate_formula(
    formula: str,
    record: Mapping[str, Any],
    *,
    parameters: Mapping[str, Any] | None = None,
    manual_data: Mapping[str, Any] | None = None,
    strategies: tuple[ResolutionStrategy, ...] = DEFAULT_STRATEGIES,
    catalog: CatalogLike | None = None,
) -> EvaluationResult:
    """Evaluate a formula against a statistics record.

    Args:
        formula: Formula text such as `[stats.female] + [stats.male]`.
        record: Statistics record (flat or with nested `stats`).
        parameters: Bindings for `[PARAM:key]` tokens.
        manual_data: Bindings for `[MANUAL:key]` tokens.
        strategies: Ordered variable resolution strategies.
        catalog: Variable catalog; defaults to the built-in registry. Tokens
            that are absent from the record and not catalogued are reported as
            unknown variables.

    Returns:
        EvaluationResult. Catalogued variables absent from the record yield NA,
        never a placeholder number.
    """

    if not formula or not formula.strip():
        return EvaluationResult.error("Formula is empty.")

    known = catalog_names(catalog if catalog is not None else default_variable_descriptors())
    substitutions: dict[str, float] = {}
    absent: list[str] = []
    unknown: list[str] = []
    for token in extract_variables(formula):
        if is_special_token(token):
            value = resolve_special_token(token, parameters=parameters, manual_data=manual_data)
        else:
            value = resolve_variable(token, record, strategies=strategies)
        if value is NOT_FOUND:
            if not is_special_token(token) and token not in known:
                unknown.append(token)
            else:
                absent.append(token)
            continue
        try:
            number = _coerce_number(value)
        except _NotNumeric:
            return EvaluationResult.error(f"Variable [{token}] is not numeric: {value!r}.")
        substitutions[token] = number

    if unknown:
        return EvaluationResult.error(f"Unknown variables: {', '.join(unknown)}")

    syntax_error = check_formula_syntax(formula)
    if syntax_error is not None:
        return EvaluationResult.error(syntax_error)

    if absent:
        logger.debug("Formula %r has no data for %s", formula, absent)
        return EvaluationResult.na(f"No data for: {', '.join(absent)}")

    text = formula
    for token, number in substitutions.items():
        literal = _number_literal(number)
        text = token_pattern_for(token).sub(lambda _match: literal, text)

    try:
        result = evaluate_expression(text)
    except FormulaSyntaxError as exc:
        return EvaluationResult.error(str(exc))
    except (ArithmeticError, ValueError) as exc:
        logger.warning("Formula %r failed to evaluate: %s", formula, exc)
        return EvaluationResult.error(f"Evaluation failed: {exc}")

    if not math.isfinite(result):
        return EvaluationResult.na("Result is not a finite number.")
    return EvaluationResult.number(round_result(result))


def evaluate_formulas_batch(
    formulas: Iterable[str],
    record: Mapping[str, Any],
    **options: Any,
) -> dict[str, EvaluationResult]:
    """Evaluate several formulas against one record.

    Returns:
        Mapping formula -> EvaluationResult, in input order.
    """

    return {formula: evaluate_formula(formula, record, **options) for formula in formulas}


def check_stats_for_formula(
    formula: str,
    record: Mapping[str, Any],
    *,
    strategies: tuple[ResolutionStrategy, ...] = DEFAULT_STRATEGIES,
) -> StatsCoverage:
    """Report which record variables a formula needs and which are present.

    Special tokens are bound per element and are not part of the report.
    """

    missing: list[str] = []
    available: list[str] = []
    for token in extract_variables(formula):
        if is_special_token(token):
            continue
        if resolve_variable(token, record, strategies=strategies) is NOT_FOUND:
            missing.append(token)
        else:
            available.append(token)
    return StatsCoverage(missing_variables=tuple(missing), available_variables=tuple(available))


def try_formula(
    formula: str,
    *,
    parameters: Mapping[str, Any] | None = None,
    manual_data: Mapping[str, Any] | None = None,
    catalog: CatalogLike | None = None,
) -> EvaluationResult:
    """Evaluate a formula against the built-in sample statistics.

    Used by the formula editor to preview a result before saving.
    """

    result = evaluate_formula(
        formula,
        ensure_derived_metrics(SAMPLE_STATS),
        parameters=parameters,
        manual_data=manual_data,
        catalog=catalog,
    )
    logger.debug("Sample evaluation of %r -> %s", formula, result.kind)
    return result
