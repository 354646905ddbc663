"""Integration tests for admin-side chart configuration validation."""

from __future__ import annotations

import pytest
from django.forms import inlineformset_factory

from reports.forms import ChartConfigurationForm, ChartElementInlineFormSet
from reports.models import ChartConfiguration, ChartElement

pytestmark = pytest.mark.integration

ElementFormSet = inlineformset_factory(
    ChartConfiguration,
    ChartElement,
    formset=ChartElementInlineFormSet,
    fields=("position", "element_id", "label", "formula", "color"),
    extra=0,
)


def _chart_data(**overrides: str) -> dict[str, str]:
    data = {
        "chart_id": "generated-value",
        "title": "Generated Value",
        "chart_type": "value",
        "order": "5",
        "is_active": "on",
        "kpi_formatting": "",
        "bar_formatting": "",
        "kpi_formula": "",
    }
    data.update(overrides)
    return data


def _formset_data(*elements: tuple[str, str]) -> dict[str, str]:
    data = {
        "elements-TOTAL_FORMS": str(len(elements)),
        "elements-INITIAL_FORMS": "0",
        "elements-MIN_NUM_FORMS": "0",
        "elements-MAX_NUM_FORMS": "1000",
    }
    for index, (element_id, formula) in enumerate(elements):
        data[f"elements-{index}-position"] = str(index)
        data[f"elements-{index}-element_id"] = element_id
        data[f"elements-{index}-label"] = element_id.title()
        data[f"elements-{index}-formula"] = formula
        data[f"elements-{index}-color"] = "#cccccc"
    return data


@pytest.mark.django_db
def test_value_chart_form_requires_both_formatting_blocks() -> None:
    """Value charts without KPI and bar formatting cannot be saved."""

    form = ChartConfigurationForm(data=_chart_data())
    assert not form.is_valid()
    assert "kpi_formatting" in form.errors
    assert "bar_formatting" in form.errors

    form = ChartConfigurationForm(
        data=_chart_data(
            kpi_formatting='{"rounded": true, "prefix": "€"}',
            bar_formatting='{"rounded": true, "prefix": "€"}',
        )
    )
    assert form.is_valid(), form.errors


@pytest.mark.django_db
@pytest.mark.parametrize("bad_value", ["[1]", '"euros"', "{}", "3"])
def test_value_chart_form_requires_formatting_objects(bad_value: str) -> None:
    """Formatting blocks must be non-empty JSON objects, not lists, strings or numbers."""

    form = ChartConfigurationForm(
        data=_chart_data(kpi_formatting=bad_value, bar_formatting='{"rounded": true, "prefix": "€"}')
    )
    assert not form.is_valid()
    assert "kpi_formatting" in form.errors
    assert "bar_formatting" not in form.errors


@pytest.mark.django_db
def test_chart_form_checks_kpi_formula() -> None:
    """An unknown variable in the KPI formula is a field error."""

    form = ChartConfigurationForm(
        data=_chart_data(chart_type="kpi", kpi_formula="[stats.nope] * 2")
    )
    assert not form.is_valid()
    assert "Unknown variables: stats.nope" in form.errors["kpi_formula"][0]


@pytest.mark.django_db
def test_element_formset_enforces_element_count() -> None:
    """Pie charts need exactly two elements."""

    chart = ChartConfiguration.objects.create(chart_id="gender", title="Gender", chart_type="pie")
    formset = ElementFormSet(data=_formset_data(("female", "[stats.female]")), instance=chart)
    assert not formset.is_valid()
    assert "exactly 2" in formset.non_form_errors()[0]

    formset = ElementFormSet(
        data=_formset_data(("female", "[stats.female]"), ("male", "[stats.male]")),
        instance=chart,
    )
    assert formset.is_valid(), formset.errors


@pytest.mark.django_db
def test_element_formset_flags_bad_formulas() -> None:
    """Unknown variables and multi-token text formulas are field errors."""

    chart = ChartConfiguration.objects.create(chart_id="gender", title="Gender", chart_type="pie")
    formset = ElementFormSet(
        data=_formset_data(("female", "[stats.female]"), ("male", "[stats.men]")),
        instance=chart,
    )
    assert not formset.is_valid()
    assert "Unknown variables: stats.men" in formset.forms[1].errors["formula"][0]

    notes = ChartConfiguration.objects.create(chart_id="notes", title="Notes", chart_type="text")
    formset = ElementFormSet(
        data=_formset_data(("text", "[stats.reportText1] + [stats.reportText2]")),
        instance=notes,
    )
    assert not formset.is_valid()
    assert "single [variable]" in formset.forms[0].errors["formula"][0]
