"""Admin forms enforcing chart configuration rules at save time."""

from __future__ import annotations

from django import forms
from django.forms.models import BaseInlineFormSet

from definitions.catalog import variable_catalog
from formulas.chart_config_dto import CONTENT_CHART_TYPES, REQUIRED_ELEMENT_COUNTS
from formulas.tokens import single_token
from formulas.validator import check_formula_syntax, validate_formula
from reports.models import ChartConfiguration


class ChartConfigurationForm(forms.ModelForm):
    """Chart configuration form; value charts need both formatting blocks."""

    class Meta:
        model = ChartConfiguration
        fields = "__all__"

    def clean(self):
        """Validate type-specific fields."""

        cleaned = super().clean()
        chart_type = cleaned.get("chart_type")
        if chart_type == ChartConfiguration.ChartType.VALUE:
            if not _is_formatting_block(cleaned.get("kpi_formatting")):
                self.add_error("kpi_formatting", "Value charts require KPI formatting as a JSON object.")
            if not _is_formatting_block(cleaned.get("bar_formatting")):
                self.add_error("bar_formatting", "Value charts require bar formatting as a JSON object.")
        kpi_formula = (cleaned.get("kpi_formula") or "").strip()
        if kpi_formula:
            error = _formula_error(kpi_formula)
            if error:
                self.add_error("kpi_formula", error)
        return cleaned


class ChartElementInlineFormSet(BaseInlineFormSet):
    """Inline formset enforcing the element count required by the chart type."""

    def clean(self) -> None:
        """Validate element count and formulas across the inline forms."""

        super().clean()
        if any(self.errors):
            return

        chart_type = self.instance.chart_type
        kept = [
            form
            for form in self.forms
            if form.cleaned_data and not form.cleaned_data.get("DELETE", False)
        ]
        required = REQUIRED_ELEMENT_COUNTS.get(chart_type)
        if required is not None and len(kept) != required:
            raise forms.ValidationError(
                f"{chart_type} charts must have exactly {required} element(s), got {len(kept)}."
            )

        for form in kept:
            formula = (form.cleaned_data.get("formula") or "").strip()
            if chart_type in CONTENT_CHART_TYPES:
                if single_token(formula) is None:
                    form.add_error("formula", f"{chart_type} charts need a single [variable] formula.")
                    continue
                result = validate_formula(formula, variable_catalog)
                if not result.is_valid:
                    form.add_error("formula", result.error)
                continue
            error = _formula_error(formula)
            if error:
                form.add_error("formula", error)


def _formula_error(formula: str) -> str | None:
    result = validate_formula(formula, variable_catalog)
    if not result.is_valid:
        return result.error
    return check_formula_syntax(formula)


def _is_formatting_block(value: object) -> bool:
    return isinstance(value, dict) and bool(value)
