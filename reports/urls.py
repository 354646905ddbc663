"""URL configuration for the reports API."""

from __future__ import annotations

from django.urls import path

from reports import views

app_name = "reports"

urlpatterns = [
    path("formulas/validate/", views.validate_formula_api, name="validate_formula"),
    path("chart-config/", views.chart_config_api, name="chart_config"),
    path("projects/<slug:slug>/charts/", views.project_charts_api, name="project_charts"),
]
