"""Database models for the variable catalog.

Rows are reference data edited by admins (or seeded from the built-in
registry). The engine never reads these models directly; it receives
`VariableDescriptor` DTOs through `definitions.catalog.variable_catalog`.
"""

from __future__ import annotations

from django.db import models

from formulas.dto import VariableDescriptor


class VariableDefinition(models.Model):
    """A variable that chart formulas may reference as `[name]`."""

    class ValueType(models.TextChoices):
        """Broad value categories for editor display."""

        COUNT = "count", "Count"
        PERCENTAGE = "percentage", "Percentage"
        CURRENCY = "currency", "Currency"
        NUMERIC = "numeric", "Numeric"
        TEXT = "text", "Text"

    name = models.CharField(
        max_length=120,
        unique=True,
        help_text="Token used inside brackets, e.g. `stats.female`.",
    )
    label = models.CharField(max_length=120)
    category = models.CharField(max_length=60, db_index=True)
    description = models.TextField(blank=True)
    example_usage = models.CharField(max_length=200, blank=True)
    value_type = models.CharField(max_length=20, choices=ValueType.choices, default=ValueType.COUNT)
    derived = models.BooleanField(default=False, help_text="Computed from other statistics.")
    is_active = models.BooleanField(default=True)
    sort_order = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["sort_order", "name"]
        verbose_name = "Variable definition"
        verbose_name_plural = "Variable definitions"

    def as_descriptor(self) -> VariableDescriptor:
        """Return the DTO consumed by the formula engine."""

        return VariableDescriptor(
            name=self.name,
            category=self.category,
            display_name=self.label,
            description=self.description,
            example_usage=self.example_usage or f"[{self.name}]",
            value_type=self.value_type,
            derived=self.derived,
        )

    def __str__(self) -> str:
        """Return the variable name for display contexts."""

        return self.name
