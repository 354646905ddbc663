"""URL configuration for eventReport."""

from __future__ import annotations

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("api/", include("definitions.urls")),
    path("api/", include("reports.urls")),
    path("admin/", admin.site.urls),
]
