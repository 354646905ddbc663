"""JSON encoding/decoding helpers for ChartConfiguration payloads.

Payload keys are camelCase to match the editor API and the YAML seed file.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, cast

from .chart_config_dto import DEFAULT_ELEMENT_COLOR, ChartConfiguration, ChartElement
from .formatting import FormattingConfig, resolve_formatting


def encode_chart_configuration(config: ChartConfiguration) -> dict[str, Any]:
    """Encode a ChartConfiguration into a JSON-serializable dictionary.

    Args:
        config: ChartConfiguration to encode.

    Returns:
        Dict payload safe for JSON responses and JSONField storage.
    """

    payload: dict[str, Any] = {
        "chartId": config.chart_id,
        "title": config.title,
        "type": config.type,
        "order": config.order,
        "isActive": config.is_active,
        "elements": [_encode_element(element) for element in config.elements],
        "showTotal": config.show_total,
    }
    if config.kpi_formatting is not None:
        payload["kpiFormatting"] = config.kpi_formatting.as_json()
    if config.bar_formatting is not None:
        payload["barFormatting"] = config.bar_formatting.as_json()
    if config.subtitle:
        payload["subtitle"] = config.subtitle
    if config.total_label:
        payload["totalLabel"] = config.total_label
    if config.kpi_formula:
        payload["kpiFormula"] = config.kpi_formula
    return payload


def _encode_element(element: ChartElement) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": element.id,
        "label": element.label,
        "formula": element.formula,
        "color": element.color,
    }
    if element.formatting is not None:
        payload["formatting"] = element.formatting.as_json()
    if element.parameters:
        payload["parameters"] = dict(element.parameters)
    if element.manual_data:
        payload["manualData"] = dict(element.manual_data)
    if element.description:
        payload["description"] = element.description
    return payload


def decode_chart_configuration(payload: Mapping[str, Any]) -> ChartConfiguration:
    """Decode a ChartConfiguration from a payload dictionary.

    Args:
        payload: Mapping previously produced by `encode_chart_configuration`,
            posted by the editor, or read from the YAML seed file.

    Returns:
        ChartConfiguration instance. Shape problems (element counts, missing
        formatting) are left for `validate_chart_configuration` to report.

    Raises:
        ValueError: When the payload is not a mapping or elements is not a list.
    """

    if not isinstance(payload, Mapping):
        raise ValueError("Chart configuration payload must be an object.")
    elements_raw = payload.get("elements") or []
    if not isinstance(elements_raw, list):
        raise ValueError("Chart configuration elements must be a list.")
    elements = tuple(
        _decode_element(cast(Mapping[str, Any], raw), index) for index, raw in enumerate(elements_raw)
    )
    return ChartConfiguration(
        chart_id=str(payload.get("chartId") or "").strip(),
        title=str(payload.get("title") or "").strip(),
        type=str(payload.get("type") or "").strip(),  # type: ignore[arg-type]
        order=_parse_int(payload.get("order")) or 0,
        is_active=_parse_bool(payload.get("isActive", True)),
        elements=elements,
        kpi_formatting=_parse_formatting(payload.get("kpiFormatting")),
        bar_formatting=_parse_formatting(payload.get("barFormatting")),
        subtitle=_parse_optional_str(payload.get("subtitle")),
        show_total=_parse_bool(payload.get("showTotal")),
        total_label=_parse_optional_str(payload.get("totalLabel")),
        kpi_formula=_parse_optional_str(payload.get("kpiFormula")),
    )


def _decode_element(raw: Mapping[str, Any], index: int) -> ChartElement:
    if not isinstance(raw, Mapping):
        raise ValueError(f"Chart element #{index + 1} must be an object.")
    return ChartElement(
        id=str(raw.get("id") or f"element-{index + 1}").strip(),
        label=str(raw.get("label") or "").strip(),
        formula=str(raw.get("formula") or "").strip(),
        color=str(raw.get("color") or DEFAULT_ELEMENT_COLOR),
        formatting=_parse_formatting(raw.get("formatting")),
        parameters=_parse_mapping(raw.get("parameters")),
        manual_data=_parse_mapping(raw.get("manualData")),
        description=str(raw.get("description") or ""),
    )


def _parse_formatting(value: object) -> FormattingConfig | None:
    """Return a FormattingConfig for a mapping payload, or None when absent or empty."""

    if not isinstance(value, Mapping) or not value:
        return None
    return resolve_formatting(value)


def _parse_mapping(value: object) -> dict[str, Any]:
    if isinstance(value, Mapping):
        return {str(key): item for key, item in value.items()}
    return {}


def _parse_optional_str(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_int(value: object) -> int | None:
    """Best-effort int parsing for stored payloads."""

    if value is None or value == "":
        return None
    try:
        return int(str(value))
    except ValueError:
        return None


def _parse_bool(value: object) -> bool:
    """Best-effort bool parsing for stored payloads."""

    if isinstance(value, bool):
        return value
    if value is None:
        return False
    normalized = str(value).strip().casefold()
    return normalized in {"1", "true", "yes", "on"}
