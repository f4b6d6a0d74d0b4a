"""
drf-spectacular extension for the bearer token scheme.

Imported by `accounts.apps.AccountsConfig.ready()`; defining the class is the
registration, so this module must stay free of other side effects.
"""

from __future__ import annotations

from drf_spectacular.extensions import OpenApiAuthenticationExtension


class BearerTokenAuthenticationScheme(OpenApiAuthenticationExtension):
    """Document `BearerTokenAuthentication` as an HTTP bearer (JWT) scheme."""
    target_class = "accounts.authentication.BearerTokenAuthentication"
    name = "bearerAuth"

    def get_security_definition(self, auto_schema):
        return {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
        }
