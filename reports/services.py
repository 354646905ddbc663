"""Service-layer functions for the reports app.

Services coordinate Django persistence (ORM, transactions) with the pure
`formulas` engine: models are converted to DTOs before any validation or
calculation happens.
"""

from __future__ import annotations

import logging
from typing import Any

from django.core.exceptions import ValidationError
from django.db import transaction

from definitions.catalog import variable_catalog
from formulas.chart_calculator import ChartCalculationResult, calculate_active_charts
from formulas.chart_config_dto import ChartConfiguration as ChartConfigurationDTO
from formulas.chart_config_dto import ChartElement as ChartElementDTO
from formulas.chart_config_validator import ChartConfigValidationResult, validate_chart_configuration
from formulas.formatting import FormattingConfig, resolve_formatting
from formulas.stats import StatsQuality, assess_stats_quality
from formulas.validator import CatalogLike
from reports.models import ChartConfiguration, ChartElement, Project

logger = logging.getLogger(__name__)


def _formatting_or_none(raw: object) -> FormattingConfig | None:
    if not isinstance(raw, dict) or not raw:
        return None
    return resolve_formatting(raw)


def _formatting_payload(config: FormattingConfig | None) -> dict[str, Any] | None:
    return config.as_json() if config is not None else None


def chart_configuration_to_dto(configuration: ChartConfiguration) -> ChartConfigurationDTO:
    """Convert a persisted configuration (with its elements) into a DTO."""

    elements = tuple(
        ChartElementDTO(
            id=element.element_id,
            label=element.label,
            formula=element.formula,
            color=element.color,
            formatting=_formatting_or_none(element.formatting),
            parameters=dict(element.parameters or {}),
            manual_data=dict(element.manual_data or {}),
            description=element.description,
        )
        for element in configuration.elements.all()
    )
    return ChartConfigurationDTO(
        chart_id=configuration.chart_id,
        title=configuration.title,
        type=configuration.chart_type,  # type: ignore[arg-type]
        order=configuration.order,
        is_active=configuration.is_active,
        elements=elements,
        kpi_formatting=_formatting_or_none(configuration.kpi_formatting),
        bar_formatting=_formatting_or_none(configuration.bar_formatting),
        subtitle=configuration.subtitle or None,
        show_total=configuration.show_total,
        total_label=configuration.total_label or None,
        kpi_formula=configuration.kpi_formula or None,
    )


def load_chart_configurations(*, active_only: bool = False) -> list[ChartConfigurationDTO]:
    """Return persisted chart configurations as DTOs, ordered for display."""

    queryset = ChartConfiguration.objects.prefetch_related("elements").order_by("order", "chart_id")
    if active_only:
        queryset = queryset.filter(is_active=True)
    return [chart_configuration_to_dto(configuration) for configuration in queryset]


def save_chart_configuration(
    config: ChartConfigurationDTO,
    *,
    catalog: CatalogLike | None = None,
) -> tuple[ChartConfiguration, ChartConfigValidationResult]:
    """Validate and persist a chart configuration, replacing its elements.

    Args:
        config: Configuration to save; `chart_id` identifies the row to update.
        catalog: Variable catalog for formula validation (defaults to the
            process-wide catalog).

    Returns:
        Tuple of (saved model instance, validation result with warnings).

    Raises:
        ValidationError: When the configuration is invalid; nothing is written.
    """

    validation = validate_chart_configuration(config, catalog=catalog if catalog is not None else variable_catalog)
    if not validation.is_valid:
        logger.info("Rejected chart configuration %s: %s", config.chart_id, validation.errors)
        raise ValidationError(list(validation.errors))

    with transaction.atomic():
        configuration, created = ChartConfiguration.objects.update_or_create(
            chart_id=config.chart_id,
            defaults={
                "title": config.title,
                "chart_type": config.type,
                "order": config.order,
                "is_active": config.is_active,
                "subtitle": config.subtitle or "",
                "show_total": config.show_total,
                "total_label": config.total_label or "",
                "kpi_formula": config.kpi_formula or "",
                "kpi_formatting": _formatting_payload(config.kpi_formatting),
                "bar_formatting": _formatting_payload(config.bar_formatting),
            },
        )
        configuration.elements.all().delete()
        ChartElement.objects.bulk_create(
            [
                ChartElement(
                    configuration=configuration,
                    element_id=element.id,
                    label=element.label,
                    formula=element.formula,
                    color=element.color,
                    formatting=_formatting_payload(element.formatting),
                    parameters=dict(element.parameters),
                    manual_data=dict(element.manual_data),
                    description=element.description,
                    position=position,
                )
                for position, element in enumerate(config.elements)
            ]
        )
    logger.info("%s chart configuration %s", "Created" if created else "Updated", config.chart_id)
    return configuration, validation


def calculate_project_charts(project: Project) -> tuple[list[ChartCalculationResult], StatsQuality]:
    """Calculate every active chart for a project's statistics.

    Data quality is reported alongside the results; it never blocks
    calculation.
    """

    record = project.stats_record()
    configurations = load_chart_configurations(active_only=True)
    results = calculate_active_charts(configurations, record, catalog=variable_catalog)
    quality = assess_stats_quality(record)
    if not quality.has_minimum_data:
        logger.info(
            "Project %s is missing required metrics: %s",
            project.slug,
            ", ".join(quality.missing_required),
        )
    return results, quality
