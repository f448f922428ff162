# comments in French
from __future__ import annotations

from django.http import HttpResponse
from django.urls import include, path


def healthz(_request) -> HttpResponse:
    """endpoint très simple pour les sondes de liveness."""
    return HttpResponse("ok", content_type="text/plain")


urlpatterns = [
    path("placement/", include(("placement.urls", "placement"), namespace="placement")),
    path("healthz", healthz),
]
