"""Admin registrations for variable definitions."""

from __future__ import annotations

from django.contrib import admin, messages

from definitions.catalog import refresh_variable_catalog
from definitions.models import VariableDefinition


@admin.register(VariableDefinition)
class VariableDefinitionAdmin(admin.ModelAdmin):
    """Admin configuration for VariableDefinition."""

    list_display = ("name", "label", "category", "value_type", "derived", "is_active", "sort_order")
    list_filter = ("category", "value_type", "derived", "is_active")
    search_fields = ("name", "label", "description")
    actions = ["refresh_catalog"]

    @admin.action(description="Refresh the cached variable catalog")
    def refresh_catalog(self, request, queryset) -> None:
        """Reload the process-wide catalog so edits reach the formula editor."""

        catalog = refresh_variable_catalog()
        self.message_user(
            request,
            f"Variable catalog reloaded ({len(catalog.variables())} variables).",
            messages.SUCCESS,
        )
