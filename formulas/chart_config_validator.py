"""Save-time validation for chart configurations.

Configurations are admin-authored, so validation is strict: a configuration
with errors must not be persisted. Warnings are informational.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .chart_calculator import ChartCalculationResult, calculate_chart
from .chart_config_dto import CHART_TYPES, CONTENT_CHART_TYPES, REQUIRED_ELEMENT_COUNTS, ChartConfiguration
from .tokens import single_token
from .validator import CatalogLike, catalog_names, check_formula_syntax, validate_formula


@dataclass(frozen=True, slots=True)
class ChartConfigValidationResult:
    """Result of validating a chart configuration."""

    is_valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    def as_json(self) -> dict[str, Any]:
        return {"isValid": self.is_valid, "errors": list(self.errors), "warnings": list(self.warnings)}


def validate_chart_configuration(config: ChartConfiguration, *, catalog: CatalogLike) -> ChartConfigValidationResult:
    """Validate a chart configuration before it is saved.

    Args:
        config: ChartConfiguration to validate.
        catalog: Variable catalog used for formula validation.

    Returns:
        ChartConfigValidationResult containing errors and warnings.
    """

    errors: list[str] = []
    warnings: list[str] = []
    known = catalog_names(catalog)
    ref = config.chart_id or "<new>"

    if not config.chart_id.strip():
        errors.append("Chart id must be a non-empty string.")
    if not config.title.strip():
        errors.append(f"Chart[{ref}].title must be a non-empty string.")

    if config.type not in CHART_TYPES:
        errors.append(f"Chart[{ref}].type is not a supported value: {config.type!r}.")
    else:
        required = REQUIRED_ELEMENT_COUNTS[config.type]
        if len(config.elements) != required:
            errors.append(
                f"Chart[{ref}] {config.type} charts must have exactly {required} element(s), "
                f"got {len(config.elements)}."
            )

    if config.type == "value":
        if config.kpi_formatting is None:
            errors.append(f"Chart[{ref}] value charts require kpiFormatting.")
        if config.bar_formatting is None:
            errors.append(f"Chart[{ref}] value charts require barFormatting.")
        if config.kpi_formula:
            errors.extend(_formula_errors(f"Chart[{ref}].kpiFormula", config.kpi_formula, known))

    seen_ids: set[str] = set()
    for idx, element in enumerate(config.elements):
        where = f"Chart[{ref}].elements[{idx}]"
        if not element.id:
            errors.append(f"{where}.id must be a non-empty string.")
        elif element.id in seen_ids:
            errors.append(f"{where}.id duplicates {element.id!r}.")
        seen_ids.add(element.id)
        if not element.label:
            errors.append(f"{where}.label must be a non-empty string.")
        if not element.formula:
            errors.append(f"{where}.formula must be a non-empty string.")
            continue
        if config.type in CONTENT_CHART_TYPES:
            if single_token(element.formula) is None:
                errors.append(f"{where}.formula must be a single [variable] token for {config.type} charts.")
            else:
                result = validate_formula(element.formula, known)
                if not result.is_valid:
                    errors.append(f"{where}.formula: {result.error}")
            continue
        errors.extend(_formula_errors(f"{where}.formula", element.formula, known))

    if config.show_total and config.type != "bar":
        warnings.append(f"Chart[{ref}] showTotal only applies to bar charts.")
    if config.type != "value" and (config.kpi_formatting is not None or config.bar_formatting is not None):
        warnings.append(f"Chart[{ref}] kpiFormatting/barFormatting only apply to value charts.")

    return ChartConfigValidationResult(is_valid=not errors, errors=tuple(errors), warnings=tuple(warnings))


def _formula_errors(where: str, formula: str, known: frozenset[str]) -> list[str]:
    result = validate_formula(formula, known)
    if not result.is_valid:
        return [f"{where}: {result.error}"]
    syntax_error = check_formula_syntax(formula)
    if syntax_error is not None:
        return [f"{where}: {syntax_error}"]
    return []


@dataclass(frozen=True, slots=True)
class ChartStatsCheck:
    """Outcome of test-calculating a configuration against real statistics."""

    is_valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    calculation: ChartCalculationResult | None = field(default=None)


def validate_chart_with_stats(
    config: ChartConfiguration,
    record: Mapping[str, Any],
    *,
    catalog: CatalogLike | None = None,
) -> ChartStatsCheck:
    """Calculate a configuration against a record and report data problems.

    Errors are raised for elements that do not produce a value and for a
    requested total that cannot be computed. Warnings flag pie charts whose
    values are all zero and negative values.
    """

    errors: list[str] = []
    warnings: list[str] = []
    calculation = calculate_chart(config, record, catalog=catalog)

    for element in calculation.elements:
        if element.content is not None:
            continue
        if element.result.is_error:
            errors.append(f'Formula evaluation failed for element "{element.label}": {element.result.message}')
        elif element.result.is_na:
            errors.append(f'No value for element "{element.label}": {element.result.message or "N/A"}')
        elif element.result.value is not None and element.result.value < 0:
            warnings.append(f'Element "{element.label}" has a negative value.')

    if config.show_total and calculation.total is not None and not calculation.total.is_number:
        errors.append(f"Total calculation failed for {config.type} chart.")

    if config.type == "pie" and calculation.elements:
        numbers = [element.result.value for element in calculation.elements if element.result.is_number]
        if numbers and len(numbers) == len(calculation.elements) and sum(numbers) == 0:
            warnings.append("All pie chart values are zero; the chart will show N/A.")

    return ChartStatsCheck(
        is_valid=not errors,
        errors=tuple(errors),
        warnings=tuple(warnings),
        calculation=calculation,
    )
