"""URL configuration for the variable catalog API."""

from __future__ import annotations

from django.urls import path

from definitions import views

app_name = "definitions"

urlpatterns = [
    path("variables-config/", views.variables_config, name="variables_config"),
    path("variables-config/refresh/", views.refresh_variables_config, name="refresh_variables_config"),
]
