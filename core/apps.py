"""AppConfig for the `core` app.

Scope
-----
Holds shared infrastructure pieces used across the project:
- middleware (observability and size limits),
- logging helpers (request-id),
- the error taxonomy and DRF exception handler,
- the abstract owned-record model and request-schema helpers.
"""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Standard Django AppConfig; keep defaults lightweight."""
    default_auto_field = "django.db.models.BigAutoField"
    name = "core"
