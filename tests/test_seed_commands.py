"""Integration tests for the seed_variables and seed_charts management commands."""

from __future__ import annotations

from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from definitions.catalog import variable_catalog
from definitions.models import VariableDefinition
from formulas.registry import default_chart_configurations, default_variable_descriptors
from reports.models import ChartConfiguration

pytestmark = pytest.mark.integration


def _run(command: str, *args: str) -> str:
    out = StringIO()
    call_command(command, *args, stdout=out)
    return out.getvalue()


@pytest.mark.django_db
def test_seed_variables_check_does_not_write() -> None:
    """--check reports pending creations and leaves the table empty."""

    output = _run("seed_variables", "--check")
    assert output.startswith("[CHECK]")
    assert f"'created': {len(default_variable_descriptors())}" in output
    assert VariableDefinition.objects.count() == 0


@pytest.mark.django_db
def test_seed_variables_write_is_idempotent() -> None:
    """A second --write finds nothing to change."""

    _run("seed_variables", "--write")
    assert VariableDefinition.objects.count() == len(default_variable_descriptors())
    assert variable_catalog.is_known("stats.female")

    output = _run("seed_variables", "--write")
    assert "'created': 0" in output
    assert f"'no_change': {len(default_variable_descriptors())}" in output


@pytest.mark.django_db
def test_seed_variables_restores_edited_rows() -> None:
    """Rows edited away from the registry are counted as updates."""

    _run("seed_variables", "--write")
    VariableDefinition.objects.filter(name="stats.female").update(label="Women")

    output = _run("seed_variables", "--write")
    assert "'updated': 1" in output
    assert VariableDefinition.objects.get(name="stats.female").label == "Female"


@pytest.mark.django_db
def test_seed_charts_write_is_idempotent() -> None:
    """Default charts are created once and then left alone."""

    assert ChartConfiguration.objects.count() == 0
    _run("seed_charts", "--check")
    assert ChartConfiguration.objects.count() == 0

    _run("seed_charts", "--write")
    assert ChartConfiguration.objects.count() == len(default_chart_configurations())
    merch = ChartConfiguration.objects.get(chart_id="merchandise-sales")
    assert merch.elements.count() == 5
    assert merch.show_total is True

    output = _run("seed_charts", "--write")
    assert f"'no_change': {len(default_chart_configurations())}" in output


@pytest.mark.django_db
@pytest.mark.parametrize("command", ["seed_variables", "seed_charts"])
def test_seed_commands_require_exactly_one_mode(command: str) -> None:
    """Passing neither or both modes is refused."""

    with pytest.raises(CommandError):
        _run(command)
    with pytest.raises(CommandError):
        _run(command, "--check", "--write")
