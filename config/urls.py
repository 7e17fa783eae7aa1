from django.urls import path, include
from rest_framework import permissions

from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularSwaggerView,
    SpectacularRedocView,
)

# ================================
# URL PATTERNS
# ================================
urlpatterns = [

    # -------------------------
    # Platform services
    # Base: /api/v1/
    # -------------------------
    path("api/v1/", include("app.platform.rbac.urls")),

    # -------------------------
    # OpenAPI / Swagger / Redoc
    # -------------------------
    path(
        "api/schema/",
        SpectacularAPIView.as_view(permission_classes=[permissions.AllowAny]),
        name="schema",
    ),
    path(
        "api/schema/swagger-ui/",
        SpectacularSwaggerView.as_view(url_name="schema", permission_classes=[permissions.AllowAny]),
        name="swagger-ui",
    ),
    path(
        "api/schema/redoc/",
        SpectacularRedocView.as_view(url_name="schema", permission_classes=[permissions.AllowAny]),
        name="redoc",
    ),
]
