"""Unit tests for chart configuration JSON payloads."""

from __future__ import annotations

import pytest

from formulas.chart_config_codec import decode_chart_configuration, encode_chart_configuration
from formulas.formatting import FormattingConfig

pytestmark = pytest.mark.unit

PAYLOAD = {
    "chartId": "merchandise-sales",
    "title": "Merchandise Sales",
    "type": "bar",
    "order": "4",
    "isActive": "true",
    "showTotal": True,
    "totalLabel": "possible merch sales",
    "elements": [
        {
            "id": "jersey-sales",
            "label": "Jersey",
            "formula": "[stats.jersey] * [PARAM:jerseyPrice]",
            "color": "#7b68ee",
            "parameters": {"jerseyPrice": {"value": 85, "label": "Jersey price", "unit": "EUR"}},
            "formatting": {"rounded": True, "prefix": "€"},
        },
        {"label": "Scarf", "formula": "[stats.scarf]"},
    ],
}


def test_decode_parses_camel_case_payload() -> None:
    """Editor payloads decode into typed DTOs with defaults filled in."""

    config = decode_chart_configuration(PAYLOAD)
    assert config.chart_id == "merchandise-sales"
    assert config.order == 4
    assert config.is_active is True
    assert config.show_total is True
    assert config.total_label == "possible merch sales"
    jersey, scarf = config.elements
    assert jersey.formatting == FormattingConfig(rounded=True, prefix="€", suffix="")
    assert jersey.parameters["jerseyPrice"]["value"] == 85
    assert scarf.id == "element-2"
    assert scarf.color == "#cccccc"
    assert scarf.formatting is None


def test_encode_then_decode_preserves_configuration() -> None:
    """Encoding a decoded configuration is lossless."""

    config = decode_chart_configuration(PAYLOAD)
    assert decode_chart_configuration(encode_chart_configuration(config)) == config


def test_missing_formatting_blocks_stay_absent() -> None:
    """Absent kpi/bar formatting is not replaced by defaults."""

    config = decode_chart_configuration({"chartId": "v", "title": "V", "type": "value", "elements": []})
    assert config.kpi_formatting is None
    assert config.bar_formatting is None
    assert "barFormatting" not in encode_chart_configuration(config)


@pytest.mark.parametrize("payload", [[], {"elements": "nope"}, {"elements": ["nope"]}])
def test_decode_rejects_malformed_payloads(payload: object) -> None:
    """Non-object payloads and non-list elements raise ValueError."""

    with pytest.raises(ValueError):
        decode_chart_configuration(payload)  # type: ignore[arg-type]


def test_empty_formatting_blocks_decode_as_absent() -> None:
    """An empty `{}` block is treated like a missing one, so value charts still need real formatting."""

    config = decode_chart_configuration(
        {
            "chartId": "v",
            "title": "V",
            "type": "value",
            "kpiFormatting": {},
            "barFormatting": {},
            "elements": [{"id": "a", "label": "A", "formula": "[stats.female]", "formatting": {}}],
        }
    )
    assert config.kpi_formatting is None
    assert config.bar_formatting is None
    assert config.elements[0].formatting is None
