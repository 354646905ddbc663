"""Access helpers for JSON endpoints."""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps

from django.http import HttpRequest, HttpResponse, JsonResponse


def staff_required_json(view: Callable[..., HttpResponse]) -> Callable[..., HttpResponse]:
    """Reject non-staff requests with a JSON 403 instead of a login redirect."""

    @wraps(view)
    def wrapper(request: HttpRequest, *args, **kwargs) -> HttpResponse:
        user = request.user
        if not (user.is_authenticated and user.is_staff):
            return JsonResponse({"success": False, "error": "Staff access required."}, status=403)
        return view(request, *args, **kwargs)

    return wrapper
