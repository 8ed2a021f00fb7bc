from pathlib import Path

from django.conf import settings
from django.contrib import admin
from django.http import HttpResponse, JsonResponse
from django.urls import include, path
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)

from apps.common.views import live_health, ready_health

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("apps.api.urls")),
    path("health/live", live_health, name="health-live"),
    path("health/ready", ready_health, name="health-ready"),
]


def _static_schema(request):  # pragma: no cover (simple IO)
    file_path = Path(settings.BASE_DIR) / "static" / settings.OPENAPI_STATIC_JSON
    if not file_path.exists():
        return JsonResponse(
            {
                "error": "schema_not_found",
                "message": "Static schema not found. Run `manage.py spectacular --format openapi-json` or enable DEBUG.",
            },
            status=404,
        )
    return HttpResponse(file_path.read_text(), content_type="application/json")


# DEBUG serves the live schema; otherwise the exported static file is served.
if settings.DEBUG:
    urlpatterns += [path("schema/", SpectacularAPIView.as_view(), name="schema")]
else:
    urlpatterns += [path("schema/", _static_schema, name="schema")]

urlpatterns += [
    path(
        "docs/swagger/",
        SpectacularSwaggerView.as_view(url_name="schema"),
        name="swagger-ui",
    ),
    path(
        "docs/redoc/",
        SpectacularRedocView.as_view(url_name="schema"),
        name="redoc",
    ),
]
