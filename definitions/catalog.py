"""Process-wide variable catalog backed by `VariableDefinition` rows.

The catalog is loaded lazily on first use and refreshed only by an explicit
action (`POST /api/variables-config/refresh/`, `seed_variables --write`, the
admin "refresh" action) or, when `VARIABLE_CATALOG_TTL_SECONDS` is set, once
the cached copy is older than that.
"""

from __future__ import annotations

import logging

from django.conf import settings

from formulas.catalog import VariableCatalog
from formulas.dto import VariableDescriptor
from formulas.registry import default_variable_descriptors

logger = logging.getLogger(__name__)


def load_active_descriptors() -> list[VariableDescriptor]:
    """Return active variable definitions as DTOs.

    An empty table falls back to the built-in registry so a fresh installation
    can validate formulas before `seed_variables` has run.
    """

    from definitions.models import VariableDefinition

    descriptors = [row.as_descriptor() for row in VariableDefinition.objects.filter(is_active=True)]
    if not descriptors:
        logger.warning("No variable definitions in the database; using the built-in registry.")
        return list(default_variable_descriptors())
    return descriptors


def _ttl_seconds() -> float | None:
    ttl = getattr(settings, "VARIABLE_CATALOG_TTL_SECONDS", 0) or 0
    return float(ttl) if ttl > 0 else None


variable_catalog = VariableCatalog(load_active_descriptors, ttl_seconds=_ttl_seconds())


def refresh_variable_catalog() -> VariableCatalog:
    """Drop the cached catalog and reload it from the database."""

    variable_catalog.invalidate()
    variable_catalog.load()
    return variable_catalog
