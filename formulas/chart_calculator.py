"""Chart calculation: evaluate every element of a chart configuration.

The calculator is the boundary between formula evaluation and report
rendering. It never raises into rendering code; configuration problems found
at render time (wrong element count, unsupported type) come back as a result
with `has_errors=True` and every element marked N/A.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from .chart_config_dto import CONTENT_CHART_TYPES, REQUIRED_ELEMENT_COUNTS, ChartConfiguration, ChartElement
from .dto import EvaluationResult
from .evaluator import evaluate_formula, round_result
from .formatting import NA_DISPLAY, PERCENT_FORMATTING, FormattingConfig, format_value, resolve_formatting
from .resolver import DEFAULT_STRATEGIES, NOT_FOUND, ResolutionStrategy, resolve_variable
from .stats import ensure_derived_metrics
from .tokens import single_token
from .validator import CatalogLike

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ElementResult:
    """Calculated value of one chart element.

    Attributes:
        id: Element id.
        label: Element label.
        color: Element color.
        result: Tagged evaluation outcome.
        display: Formatted display string (`N/A` unless a number or content).
        share: Percentage share of the pair sum (pie charts only).
        share_display: Formatted share, e.g. `42.86%`.
        content: Opaque string content (text/image charts, string KPIs).
    """

    id: str
    label: str
    color: str
    result: EvaluationResult
    display: str
    share: EvaluationResult | None = None
    share_display: str | None = None
    content: str | None = None

    def as_json(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"id": self.id, "label": self.label, "color": self.color}
        if self.content is not None:
            # Content elements carry text, not a numeric result.
            payload["content"] = self.content
        else:
            payload["value"] = self.result.value if self.result.is_number else "NA"
            payload["result"] = self.result.as_json()
        payload["display"] = self.display
        if self.share is not None:
            payload["share"] = self.share.value if self.share.is_number else "NA"
            payload["shareDisplay"] = self.share_display
        return payload


@dataclass(frozen=True, slots=True)
class ChartCalculationResult:
    """Display-ready result for one chart."""

    chart_id: str
    title: str
    type: str
    elements: tuple[ElementResult, ...]
    kpi: EvaluationResult | None = None
    kpi_display: str | None = None
    total: EvaluationResult | None = None
    total_display: str | None = None
    content: str | None = None
    has_errors: bool = False
    error: str | None = None
    subtitle: str | None = None
    total_label: str | None = None

    def as_json(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "chartId": self.chart_id,
            "title": self.title,
            "type": self.type,
            "elements": [element.as_json() for element in self.elements],
            "hasErrors": self.has_errors,
        }
        if self.kpi is not None:
            payload["kpi"] = self.kpi.value if self.kpi.is_number else "NA"
            payload["kpiDisplay"] = self.kpi_display
        if self.total is not None:
            payload["total"] = self.total.value if self.total.is_number else "NA"
            payload["totalDisplay"] = self.total_display
        if self.content is not None:
            payload["content"] = self.content
        if self.error:
            payload["error"] = self.error
        if self.subtitle:
            payload["subtitle"] = self.subtitle
        if self.total_label:
            payload["totalLabel"] = self.total_label
        return payload


@dataclass(frozen=True, slots=True)
class CalculationSummary:
    """Counts over a batch of chart results."""

    total_charts: int
    active_charts: int
    charts_with_errors: int
    elements_with_errors: int
    total_elements: int
    chart_types: dict[str, int]

    def as_json(self) -> dict[str, Any]:
        return {
            "totalCharts": self.total_charts,
            "activeCharts": self.active_charts,
            "chartsWithErrors": self.charts_with_errors,
            "elementsWithErrors": self.elements_with_errors,
            "totalElements": self.total_elements,
            "chartTypes": dict(self.chart_types),
        }


class _Context:
    """Per-calculation evaluation options shared by every element."""

    def __init__(
        self,
        record: Mapping[str, Any],
        strategies: tuple[ResolutionStrategy, ...],
        catalog: CatalogLike | None,
    ) -> None:
        self.record = record
        self.strategies = strategies
        self.catalog = catalog

    def evaluate(self, element: ChartElement) -> EvaluationResult:
        return evaluate_formula(
            element.formula,
            self.record,
            parameters=element.parameters,
            manual_data=element.manual_data,
            strategies=self.strategies,
            catalog=self.catalog,
        )

    def string_content(self, formula: str) -> str | None:
        """Return the string bound to a single-token formula, if any."""

        token = single_token(formula)
        if token is None:
            return None
        value = resolve_variable(token, self.record, strategies=self.strategies)
        if value is NOT_FOUND or isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return str(value)
        if isinstance(value, str):
            return value
        return None


def _element_result(
    element: ChartElement,
    result: EvaluationResult,
    formatting: FormattingConfig,
    **extra: Any,
) -> ElementResult:
    return ElementResult(
        id=element.id,
        label=element.label,
        color=element.color,
        result=result,
        display=format_value(result, formatting),
        **extra,
    )


def _sum(results: Iterable[EvaluationResult]) -> EvaluationResult:
    """Sum number results; any NA or error makes the sum NA."""

    total = 0.0
    for result in results:
        if not result.is_number:
            return EvaluationResult.na("Sum includes a value that is not a number.")
        total += result.value  # type: ignore[operator]
    return EvaluationResult.number(round_result(total))


def _first_error(results: Iterable[EvaluationResult | None]) -> str | None:
    for result in results:
        if result is not None and result.is_error:
            return result.message
    return None


def _configuration_error(config: ChartConfiguration, message: str) -> ChartCalculationResult:
    logger.warning("Chart %s cannot be calculated: %s", config.chart_id, message)
    na = EvaluationResult.na(message)
    return ChartCalculationResult(
        chart_id=config.chart_id,
        title=config.title,
        type=config.type,
        elements=tuple(
            ElementResult(id=element.id, label=element.label, color=element.color, result=na, display=NA_DISPLAY)
            for element in config.elements
        ),
        has_errors=True,
        error=message,
        subtitle=config.subtitle,
        total_label=config.total_label,
    )


def calculate_chart(
    config: ChartConfiguration,
    record: Mapping[str, Any],
    *,
    strategies: tuple[ResolutionStrategy, ...] = DEFAULT_STRATEGIES,
    catalog: CatalogLike | None = None,
) -> ChartCalculationResult:
    """Calculate one chart against a statistics record.

    Args:
        config: Chart configuration.
        record: Statistics record; derived metrics are filled in first.
        strategies: Variable resolution strategies.
        catalog: Optional catalog used to flag unknown variables.

    Returns:
        ChartCalculationResult shaped by chart type.
    """

    required = REQUIRED_ELEMENT_COUNTS.get(config.type)
    if required is None:
        return _configuration_error(config, f"Unsupported chart type: {config.type!r}.")
    if len(config.elements) != required:
        return _configuration_error(
            config,
            f"{config.type} charts require exactly {required} element(s), got {len(config.elements)}.",
        )

    context = _Context(ensure_derived_metrics(record), strategies, catalog)
    if config.type in CONTENT_CHART_TYPES:
        return _calculate_content(config, context)
    if config.type == "kpi":
        return _calculate_kpi(config, context)
    if config.type == "pie":
        return _calculate_pie(config, context)
    if config.type == "bar":
        return _calculate_bar(config, context)
    return _calculate_value(config, context)


def _calculate_content(config: ChartConfiguration, context: _Context) -> ChartCalculationResult:
    element = config.elements[0]
    content = context.string_content(element.formula)
    error = None
    if single_token(element.formula) is None:
        error = f"{config.type} charts need a single [variable] formula."
        result = EvaluationResult.error(error)
    elif content is None:
        result = EvaluationResult.na("No content.")
    else:
        result = EvaluationResult.na()
    element_result = ElementResult(
        id=element.id,
        label=element.label,
        color=element.color,
        result=result,
        display=content if content is not None else NA_DISPLAY,
        content=content,
    )
    return ChartCalculationResult(
        chart_id=config.chart_id,
        title=config.title,
        type=config.type,
        elements=(element_result,),
        content=content,
        has_errors=error is not None,
        error=error,
        subtitle=config.subtitle,
    )


def _calculate_kpi(config: ChartConfiguration, context: _Context) -> ChartCalculationResult:
    element = config.elements[0]
    formatting = resolve_formatting(element.formatting)
    result = context.evaluate(element)
    content = None
    if not result.is_number:
        # Single-token KPIs bound to text (e.g. a top country) show the text.
        text = context.string_content(element.formula)
        if text is not None:
            content = text
            result = EvaluationResult.na("KPI value is text.")
    display = content if content is not None else format_value(result, formatting)
    element_result = ElementResult(
        id=element.id,
        label=element.label,
        color=element.color,
        result=result,
        display=display,
        content=content,
    )
    error = _first_error([result])
    return ChartCalculationResult(
        chart_id=config.chart_id,
        title=config.title,
        type=config.type,
        elements=(element_result,),
        kpi=result,
        kpi_display=display,
        content=content,
        has_errors=error is not None,
        error=error,
        subtitle=config.subtitle,
    )


def _calculate_pie(config: ChartConfiguration, context: _Context) -> ChartCalculationResult:
    results = [context.evaluate(element) for element in config.elements]
    total = _sum(results)
    if total.is_number and total.value == 0:
        total = EvaluationResult.na("Pie values sum to zero.")

    elements = []
    for element, result in zip(config.elements, results):
        if total.is_number and result.is_number:
            share = EvaluationResult.number(round_result(result.value / total.value * 100))  # type: ignore[operator]
        else:
            share = EvaluationResult.na(total.message)
        elements.append(
            _element_result(
                element,
                result,
                resolve_formatting(element.formatting),
                share=share,
                share_display=format_value(share, PERCENT_FORMATTING),
            )
        )
    error = _first_error(results)
    return ChartCalculationResult(
        chart_id=config.chart_id,
        title=config.title,
        type=config.type,
        elements=tuple(elements),
        total=total,
        total_display=format_value(total, resolve_formatting(config.elements[0].formatting)),
        has_errors=error is not None,
        error=error,
        subtitle=config.subtitle,
        total_label=config.total_label,
    )


def _calculate_bar(config: ChartConfiguration, context: _Context) -> ChartCalculationResult:
    results = [context.evaluate(element) for element in config.elements]
    elements = tuple(
        _element_result(element, result, resolve_formatting(element.formatting))
        for element, result in zip(config.elements, results)
    )
    total = None
    total_display = None
    if config.show_total:
        total = _sum(results)
        total_display = format_value(total, resolve_formatting(config.elements[0].formatting))
    error = _first_error(results)
    return ChartCalculationResult(
        chart_id=config.chart_id,
        title=config.title,
        type=config.type,
        elements=elements,
        total=total,
        total_display=total_display,
        has_errors=error is not None,
        error=error,
        subtitle=config.subtitle,
        total_label=config.total_label,
    )


def _calculate_value(config: ChartConfiguration, context: _Context) -> ChartCalculationResult:
    bar_formatting = resolve_formatting(config.bar_formatting)
    kpi_formatting = resolve_formatting(config.kpi_formatting)
    results = [context.evaluate(element) for element in config.elements]
    elements = tuple(
        _element_result(element, result, bar_formatting) for element, result in zip(config.elements, results)
    )
    if config.kpi_formula:
        parameters: dict[str, Any] = {}
        manual_data: dict[str, Any] = {}
        for element in config.elements:
            parameters.update(element.parameters)
            manual_data.update(element.manual_data)
        kpi = context.evaluate(
            ChartElement(
                id="kpi",
                label=config.total_label or config.title,
                formula=config.kpi_formula,
                parameters=parameters,
                manual_data=manual_data,
            )
        )
    else:
        kpi = _sum(results)
    error = _first_error([*results, kpi])
    return ChartCalculationResult(
        chart_id=config.chart_id,
        title=config.title,
        type=config.type,
        elements=elements,
        kpi=kpi,
        kpi_display=format_value(kpi, kpi_formatting),
        has_errors=error is not None,
        error=error,
        subtitle=config.subtitle,
        total_label=config.total_label,
    )


def calculate_charts(
    configs: Iterable[ChartConfiguration],
    record: Mapping[str, Any],
    **options: Any,
) -> list[ChartCalculationResult]:
    """Calculate several charts against one record, in input order."""

    enriched = ensure_derived_metrics(record)
    return [calculate_chart(config, enriched, **options) for config in configs]


def calculate_active_charts(
    configs: Iterable[ChartConfiguration],
    record: Mapping[str, Any],
    **options: Any,
) -> list[ChartCalculationResult]:
    """Calculate active charts only, ordered by `order` for report display."""

    active = sorted((config for config in configs if config.is_active), key=lambda config: config.order)
    return calculate_charts(active, record, **options)


def summarize_calculations(
    configs: Iterable[ChartConfiguration],
    results: Iterable[ChartCalculationResult],
) -> CalculationSummary:
    """Count charts, active charts and N/A elements over a calculation batch."""

    configs = list(configs)
    results = list(results)
    elements = [element for result in results for element in result.elements]
    return CalculationSummary(
        total_charts=len(configs),
        active_charts=sum(1 for config in configs if config.is_active),
        charts_with_errors=sum(1 for result in results if result.has_errors),
        elements_with_errors=sum(
            1 for element in elements if not element.result.is_number and element.content is None
        ),
        total_elements=len(elements),
        chart_types=dict(Counter(result.type for result in results)),
    )
