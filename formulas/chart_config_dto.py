"""DTO schema for report chart configurations.

A chart configuration is admin-authored: a chart type, a title and a fixed
number of elements, each carrying a formula. Configurations are:
- serializable for JSON storage and the editor API,
- validated before they are persisted,
- consumed by the chart calculator to produce display-ready results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Final, Literal

from .formatting import FormattingConfig

ChartType = Literal["pie", "bar", "kpi", "text", "image", "value"]

CHART_TYPES: Final[tuple[str, ...]] = ("pie", "bar", "kpi", "text", "image", "value")

REQUIRED_ELEMENT_COUNTS: Final[dict[str, int]] = {
    "kpi": 1,
    "text": 1,
    "image": 1,
    "pie": 2,
    "bar": 5,
    "value": 5,
}

# Chart types whose single element is opaque string content.
CONTENT_CHART_TYPES: Final[frozenset[str]] = frozenset({"text", "image"})

DEFAULT_ELEMENT_COLOR: Final[str] = "#cccccc"


@dataclass(frozen=True, slots=True)
class ChartElement:
    """One formula-backed element of a chart.

    Args:
        id: Element id, unique within its chart.
        label: Display label.
        formula: Formula text with bracketed variable tokens.
        color: Display color (hex).
        formatting: Optional per-element formatting.
        parameters: Bindings for `[PARAM:key]` tokens, either plain values or
            `{"value": ..., "label": ..., "unit": ...}` mappings.
        manual_data: Bindings for `[MANUAL:key]` tokens.
        description: Optional help text.
    """

    id: str
    label: str
    formula: str
    color: str = DEFAULT_ELEMENT_COLOR
    formatting: FormattingConfig | None = None
    parameters: dict[str, Any] = field(default_factory=dict)
    manual_data: dict[str, Any] = field(default_factory=dict)
    description: str = ""


@dataclass(frozen=True, slots=True)
class ChartConfiguration:
    """Persisted definition of one report chart.

    Args:
        chart_id: Unique chart id (slug).
        title: Display title.
        type: Chart type; fixes the required element count.
        order: Display position on report pages (ascending).
        is_active: Whether the chart renders on report pages.
        elements: Chart elements in display order.
        kpi_formatting: Formatting for the KPI total of `value` charts.
        bar_formatting: Formatting for the bars of `value` charts.
        subtitle: Optional subtitle.
        show_total: Whether `bar` charts display the sum of their bars.
        total_label: Label used next to totals.
        kpi_formula: Optional formula overriding the summed KPI of `value` charts.
    """

    chart_id: str
    title: str
    type: ChartType
    order: int = 0
    is_active: bool = True
    elements: tuple[ChartElement, ...] = ()
    kpi_formatting: FormattingConfig | None = None
    bar_formatting: FormattingConfig | None = None
    subtitle: str | None = None
    show_total: bool = False
    total_label: str | None = None
    kpi_formula: str | None = None

    @property
    def required_element_count(self) -> int | None:
        return REQUIRED_ELEMENT_COUNTS.get(self.type)
