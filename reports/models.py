"""Database models for event projects and chart configurations.

Chart configurations are persisted here but computed by the pure `formulas`
package; models convert to and from `formulas.chart_config_dto` DTOs via
`reports.services`.
"""

from __future__ import annotations

from typing import Any

from django.db import models


class Project(models.Model):
    """One event whose statistics feed the report charts.

    `stats` holds the per-event counters (e.g. `{"female": 120, "male": 160}`);
    formulas reference them as `[stats.female]`.
    """

    name = models.CharField(max_length=200)
    slug = models.SlugField(max_length=200, unique=True)
    event_date = models.DateField(null=True, blank=True)
    stats = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-event_date", "name"]

    def stats_record(self) -> dict[str, Any]:
        """Return the statistics record formulas are evaluated against.

        Counters are exposed both under `stats` (for `[stats.female]`) and at
        the top level (for legacy bare-name formulas such as `[female]`).
        """

        stats = dict(self.stats or {})
        return {**stats, "stats": stats}

    def __str__(self) -> str:
        """Return the project name for display contexts."""

        return self.name


class ChartConfiguration(models.Model):
    """Admin-authored definition of one report chart."""

    class ChartType(models.TextChoices):
        """Supported chart types; each fixes the element count."""

        PIE = "pie", "Pie (2 elements)"
        BAR = "bar", "Bar (5 elements)"
        KPI = "kpi", "KPI (1 element)"
        TEXT = "text", "Text (1 element)"
        IMAGE = "image", "Image (1 element)"
        VALUE = "value", "Value (KPI + 5 bars)"

    chart_id = models.SlugField(max_length=100, unique=True)
    title = models.CharField(max_length=200)
    chart_type = models.CharField(max_length=10, choices=ChartType.choices)
    order = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)
    subtitle = models.CharField(max_length=200, blank=True)
    show_total = models.BooleanField(default=False)
    total_label = models.CharField(max_length=200, blank=True)
    kpi_formula = models.TextField(blank=True)
    kpi_formatting = models.JSONField(
        null=True,
        blank=True,
        help_text='Value charts only, e.g. {"rounded": true, "prefix": "€"}.',
    )
    bar_formatting = models.JSONField(
        null=True,
        blank=True,
        help_text='Value charts only, e.g. {"rounded": true, "prefix": "€"}.',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["order", "chart_id"]

    def __str__(self) -> str:
        """Return a concise display string for admin/debug usage."""

        return f"{self.title} ({self.chart_type})"


class ChartElement(models.Model):
    """One formula-backed element of a chart configuration."""

    configuration = models.ForeignKey(ChartConfiguration, on_delete=models.CASCADE, related_name="elements")
    element_id = models.SlugField(max_length=100)
    label = models.CharField(max_length=200)
    formula = models.TextField()
    color = models.CharField(max_length=20, default="#cccccc")
    formatting = models.JSONField(null=True, blank=True)
    parameters = models.JSONField(default=dict, blank=True)
    manual_data = models.JSONField(default=dict, blank=True)
    description = models.CharField(max_length=300, blank=True)
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["position", "id"]
        constraints = [
            models.UniqueConstraint(fields=["configuration", "element_id"], name="uniq_chart_element_id"),
        ]

    def __str__(self) -> str:
        """Return the element label for display contexts."""

        return self.label
