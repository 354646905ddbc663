"""JSON endpoints for the variable catalog."""

from __future__ import annotations

import logging

from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_GET, require_POST

from definitions.catalog import refresh_variable_catalog, variable_catalog
from definitions.permissions import staff_required_json
from formulas.catalog import VariableCatalog

logger = logging.getLogger(__name__)


def _catalog_payload(catalog: VariableCatalog) -> dict[str, object]:
    variables = catalog.variables()
    return {
        "success": True,
        "variables": [descriptor.as_json() for descriptor in variables],
        "loaded_at": catalog.last_loaded_at.isoformat() if catalog.last_loaded_at else None,
    }


@require_GET
def variables_config(request: HttpRequest) -> JsonResponse:
    """Return the variable catalog for the formula editor."""

    return JsonResponse(_catalog_payload(variable_catalog))


@require_POST
@staff_required_json
def refresh_variables_config(request: HttpRequest) -> JsonResponse:
    """Reload the variable catalog from the database and return it."""

    catalog = refresh_variable_catalog()
    logger.info("Variable catalog refreshed by %s", request.user)
    return JsonResponse(_catalog_payload(catalog))
