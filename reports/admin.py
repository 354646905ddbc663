"""Admin registrations for reports models."""

from __future__ import annotations

from django.contrib import admin

from reports.forms import ChartConfigurationForm, ChartElementInlineFormSet
from reports.models import ChartConfiguration, ChartElement, Project


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    """Admin configuration for Project."""

    list_display = ("name", "slug", "event_date", "updated_at")
    search_fields = ("name", "slug")
    prepopulated_fields = {"slug": ("name",)}


class ChartElementInline(admin.TabularInline):
    """Inline editor for chart elements."""

    model = ChartElement
    formset = ChartElementInlineFormSet
    extra = 0
    fields = ("position", "element_id", "label", "formula", "color", "formatting", "parameters", "manual_data")


@admin.register(ChartConfiguration)
class ChartConfigurationAdmin(admin.ModelAdmin):
    """Admin configuration for ChartConfiguration."""

    form = ChartConfigurationForm
    inlines = [ChartElementInline]
    list_display = ("title", "chart_id", "chart_type", "order", "is_active")
    list_filter = ("chart_type", "is_active")
    list_editable = ("order", "is_active")
    search_fields = ("title", "chart_id")
