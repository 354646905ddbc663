"""JSON endpoints for formula checks, chart configurations and report charts."""

from __future__ import annotations

import json
import logging
from typing import Any

from django.core.exceptions import ValidationError
from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from definitions.catalog import variable_catalog
from definitions.permissions import staff_required_json
from formulas.chart_config_codec import decode_chart_configuration, encode_chart_configuration
from formulas.evaluator import try_formula
from formulas.validator import check_formula_syntax, validate_formula
from reports.models import Project
from reports.services import calculate_project_charts, load_chart_configurations, save_chart_configuration

logger = logging.getLogger(__name__)


def _json_body(request: HttpRequest) -> dict[str, Any] | None:
    """Parse a JSON object request body, or return None when malformed."""

    try:
        payload = json.loads(request.body or b"{}")
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None
    return payload if isinstance(payload, dict) else None


@require_POST
@staff_required_json
def validate_formula_api(request: HttpRequest) -> JsonResponse:
    """Validate a formula and preview it against sample statistics."""

    payload = _json_body(request)
    if payload is None:
        return JsonResponse({"success": False, "error": "Request body must be a JSON object."}, status=400)

    formula = str(payload.get("formula") or "")
    result = validate_formula(formula, variable_catalog)
    response = result.as_json()
    if result.is_valid:
        syntax_error = check_formula_syntax(formula)
        if syntax_error is not None:
            response["isValid"] = False
            response["error"] = syntax_error
    response["sampleResult"] = None
    if response["isValid"]:
        response["sampleResult"] = try_formula(formula, catalog=variable_catalog).as_json()
    return JsonResponse(response)


@require_http_methods(["GET", "POST"])
@staff_required_json
def chart_config_api(request: HttpRequest) -> JsonResponse:
    """List chart configurations (GET) or create/update one (POST)."""

    if request.method == "GET":
        configurations = load_chart_configurations()
        return JsonResponse(
            {"success": True, "configurations": [encode_chart_configuration(c) for c in configurations]}
        )

    payload = _json_body(request)
    if payload is None:
        return JsonResponse({"success": False, "errors": ["Request body must be a JSON object."]}, status=400)
    try:
        config = decode_chart_configuration(payload)
    except ValueError as exc:
        return JsonResponse({"success": False, "errors": [str(exc)]}, status=400)

    try:
        _instance, validation = save_chart_configuration(config)
    except ValidationError as exc:
        return JsonResponse({"success": False, "errors": exc.messages}, status=400)

    return JsonResponse(
        {
            "success": True,
            "configuration": encode_chart_configuration(config),
            "warnings": list(validation.warnings),
        }
    )


@require_GET
def project_charts_api(request: HttpRequest, slug: str) -> JsonResponse:
    """Return calculated active charts for a project's public report page."""

    project = Project.objects.filter(slug=slug).first()
    if project is None:
        return JsonResponse({"success": False, "error": "Project not found."}, status=404)

    results, quality = calculate_project_charts(project)
    return JsonResponse(
        {
            "success": True,
            "project": {"name": project.name, "slug": project.slug},
            "charts": [result.as_json() for result in results],
            "dataQuality": quality.as_json(),
        }
    )
