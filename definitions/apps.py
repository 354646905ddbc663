"""Django app configuration for the variable catalog."""

from __future__ import annotations

from django.apps import AppConfig


class DefinitionsConfig(AppConfig):
    """AppConfig for variable definitions."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "definitions"
    verbose_name = "Variable definitions"
