"""
Request-schema helpers shared by the API views.

- `StrictFieldsMixin`: rejects payload keys the serializer does not declare, so
  loosely-typed bodies fail deterministically instead of being silently dropped.
  Declared read-only fields count as known and are ignored as DRF usually does.
- `validate_request`: runs a serializer and raises the domain `ValidationError`
  (with field errors) instead of DRF's, keeping one error envelope.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from rest_framework import serializers

from .exceptions import ValidationError


class StrictFieldsMixin:
    """Serializer mixin: unknown top-level keys are a validation error."""

    unknown_field_message = "Unknown field."

    def to_internal_value(self, data):
        if isinstance(data, Mapping):
            unknown = sorted(set(data) - set(self.fields))
            if unknown:
                raise serializers.ValidationError({name: [self.unknown_field_message] for name in unknown})
        return super().to_internal_value(data)


def validate_request(serializer: serializers.Serializer, *, message: str) -> dict[str, Any]:
    """Return `validated_data` or raise `ValidationError(message, errors=...)`."""
    if not serializer.is_valid():
        raise ValidationError(message, errors=serializer.errors)
    return dict(serializer.validated_data)
