"""Django AppConfig for the accounts app.

This app houses the project's custom user model (`accounts.User`), bearer token
handling and the auth endpoints. `ready()` registers the drf-spectacular
extension describing the bearer scheme.
"""

from django.apps import AppConfig


class AccountsConfig(AppConfig):
    """Standard Django app config; uses BigAutoField as the default PK type."""
    default_auto_field = "django.db.models.BigAutoField"
    name = "accounts"

    def ready(self) -> None:
        # Registers OpenApiAuthenticationExtension subclasses on import.
        from . import schema  # noqa: F401
