"""
Shared model building blocks.

This module provides `OwnedModel`: a consistent ownership
pattern (immutable `created_by` + audit timestamps) for records that any
authenticated user may read but only their creator may change.

Ownership
---------
- `created_by` is assigned once from the authenticated caller at creation and
  is never written again; no serializer accepts it from a client.
- Reads are not owner-scoped; writes are checked with `is_owned_by()` by the
  service layer before any mutation.
"""

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models


class OwnedModel(models.Model):
    """
    Abstract base for ownership + audit fields.

    Fields:
        created_by: FK to the owning user.
        created_at / updated_at: server-assigned timestamps; `updated_at`
            refreshes on every `save()`.

    Invariants:
        - `created_by` must be set (see `clean()`).
        - Default ordering is newest-first by `created_at`, then by id.
    """

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="%(class)ss",
        editable=False,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ("-created_at", "-id")

    def clean(self):
        """Validate invariants for owned records (must have an owner)."""
        super().clean()
        if self.created_by_id is None:
            raise ValidationError({"created_by": "Owner must be set for owned records."})

    def is_owned_by(self, user) -> bool:
        """Return True if the instance was created by the given authenticated `user`."""
        return bool(
            user
            and getattr(user, "is_authenticated", False)
            and self.created_by_id == user.pk
        )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={getattr(self, 'id', None)} created_by_id={self.created_by_id}>"
