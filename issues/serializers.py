"""
Serializers for issues.

Output uses the SPA's wire names (`_id`, `createdBy`, `createdAt`,
`updatedAt`). The write serializers reject unknown keys; the read-only output
fields are accepted and ignored so a client may send back what it received.

- `IssueCreateSerializer`: `title` and `description` required; `status` is
  read-only (new issues always start `Open`).
- `IssueUpdateSerializer`: every writable field optional (used with
  `partial=True` for both PUT and PATCH).
- `IssueListParamsSerializer`: `page` / `limit` from the query string.
"""

from __future__ import annotations

from django.conf import settings
from rest_framework import serializers

from accounts.serializers import UserPublicSerializer
from core.serializers import StrictFieldsMixin

from .models import Issue, IssuePriority, IssueSeverity, IssueStatus


class IssueSerializer(serializers.ModelSerializer):
    _id = serializers.IntegerField(source="pk", read_only=True)
    createdBy = UserPublicSerializer(source="created_by", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Issue
        fields = [
            "_id",
            "title",
            "description",
            "status",
            "priority",
            "severity",
            "createdBy",
            "createdAt",
            "updatedAt",
        ]


class IssueUpdateSerializer(StrictFieldsMixin, IssueSerializer):
    pass


class IssueCreateSerializer(IssueUpdateSerializer):
    class Meta(IssueSerializer.Meta):
        read_only_fields = ["status"]


class IssueListParamsSerializer(serializers.Serializer):
    page = serializers.IntegerField(min_value=1, required=False, default=1)
    limit = serializers.IntegerField(min_value=1, required=False)

    def validate_limit(self, value: int) -> int:
        maximum = settings.ISSUES_MAX_PAGE_SIZE
        if value > maximum:
            raise serializers.ValidationError(f"Ensure this value is less than or equal to {maximum}.")
        return value


class IssueStatsSerializer(serializers.Serializer):
    """Documentation shape for `GET /api/issues/stats`."""
    total = serializers.IntegerField()
    byStatus = serializers.DictField(
        child=serializers.IntegerField(), help_text=f"Keys: {', '.join(IssueStatus.values)}"
    )
    byPriority = serializers.DictField(
        child=serializers.IntegerField(), help_text=f"Keys: {', '.join(IssuePriority.values)}"
    )
    bySeverity = serializers.DictField(
        child=serializers.IntegerField(), help_text=f"Keys: {', '.join(IssueSeverity.values)}"
    )
