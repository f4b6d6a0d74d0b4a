"""
Project URL configuration.

Surfaces
--------
- `/` and `/api/health`: unauthenticated banner and readiness probe.
- `/api/auth/{register,login,me}`: auth endpoints (APIViews).
- `/api/issues[/<id>|/stats]`: router-driven issue ViewSet.
- `/api/schema`, `/api/docs`: OpenAPI schema and Swagger UI.
- `/admin/`: Django admin (back-office only).

Notes
-----
- Every API path accepts an optional trailing slash, so clients may call
  `/api/issues` or `/api/issues/` interchangeably.
- Unknown routes fall through to `core.views.not_found` when DEBUG is off.
"""

from __future__ import annotations

from django.contrib import admin
from django.urls import include, path, re_path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework.routers import SimpleRouter

from accounts.views import LoginView, MeView, RegisterView
from core.views import health, index
from issues.views import IssueViewSet

router = SimpleRouter()
router.trailing_slash = "/?"
router.register(r"issues", IssueViewSet, basename="issue")

urlpatterns = [
    path("", index, name="index"),
    path("admin/", admin.site.urls),

    # OpenAPI / Docs
    re_path(r"^api/schema/?$", SpectacularAPIView.as_view(), name="schema"),
    re_path(r"^api/docs/?$", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),

    re_path(r"^api/health/?$", health, name="health"),

    # Auth
    re_path(r"^api/auth/register/?$", RegisterView.as_view(), name="auth-register"),
    re_path(r"^api/auth/login/?$", LoginView.as_view(), name="auth-login"),
    re_path(r"^api/auth/me/?$", MeView.as_view(), name="auth-me"),

    path("api/", include(router.urls)),
]

handler404 = "core.views.not_found"
