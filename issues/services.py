"""
Issue lifecycle: create, list, fetch, update, delete and stats.

Authorization model
-------------------
- Any authenticated caller may create, list, read and aggregate issues.
- Only the creator may update or delete an issue. The check runs after the
  lookup and before any validation or write, so a non-owner gets 403 for an
  existing id and 404 for a missing one, and the row is never touched.

Notes
-----
- Writes are last-write-wins; there is no status transition graph.
- Every function raises a `core.exceptions` domain error; views only shape
  responses.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import Count

from core.exceptions import AuthorizationError, NotFoundError, ValidationError
from core.serializers import validate_request

from .filters import IssueFilter
from .models import Issue, IssuePriority, IssueSeverity, IssueStatus
from .serializers import IssueListParamsSerializer, IssueUpdateSerializer

logger = logging.getLogger("issues.services")

ISSUE_NOT_FOUND_MESSAGE = "Issue not found"
UPDATE_FORBIDDEN_MESSAGE = "Not authorized to update this issue"
DELETE_FORBIDDEN_MESSAGE = "Not authorized to delete this issue"
MISSING_FIELDS_MESSAGE = "Please provide title and description"
INVALID_ISSUE_MESSAGE = "Invalid issue data"
INVALID_QUERY_MESSAGE = "Invalid query parameters"


@dataclass(frozen=True)
class IssuePage:
    items: list
    total: int
    page: int
    limit: int

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)


def _full_clean(issue: Issue) -> None:
    try:
        issue.full_clean()
    except DjangoValidationError as exc:
        raise ValidationError(INVALID_ISSUE_MESSAGE, errors=exc.message_dict) from None


def create_issue(
    owner,
    *,
    title: Optional[str],
    description: Optional[str],
    priority: Optional[str] = None,
    severity: Optional[str] = None,
) -> Issue:
    """
    Persist a new `Open` issue owned by `owner`.

    Raises:
        ValidationError: blank title/description or an unknown priority/severity.
    """
    title = (title or "").strip()
    description = (description or "").strip()
    if not title or not description:
        raise ValidationError(MISSING_FIELDS_MESSAGE)

    issue = Issue(
        created_by=owner,
        title=title,
        description=description,
        status=IssueStatus.OPEN,
        priority=priority or IssuePriority.MEDIUM,
        severity=severity or IssueSeverity.MINOR,
    )
    _full_clean(issue)
    issue.save()
    logger.info("issue created issue_id=%s user_id=%s", issue.pk, owner.pk)
    return issue


def list_issues(params: Mapping[str, Any]) -> IssuePage:
    """
    Filter, search and paginate issues (newest first).

    `params` is usually `request.query_params`: `status`, `priority`,
    `severity`, `search`, `page`, `limit`. A page past the end is empty.

    Raises:
        ValidationError: unknown enum value or bad `page` / `limit`.
    """
    paging = validate_request(IssueListParamsSerializer(data=params), message=INVALID_QUERY_MESSAGE)
    page = paging["page"]
    limit = paging.get("limit") or settings.ISSUES_PAGE_SIZE

    filterset = IssueFilter(params, queryset=Issue.objects.select_related("created_by"))
    if not filterset.is_valid():
        errors = {name: list(messages) for name, messages in filterset.errors.items()}
        raise ValidationError(INVALID_QUERY_MESSAGE, errors=errors)

    queryset = filterset.qs.order_by("-created_at", "-id")
    total = queryset.count()
    offset = (page - 1) * limit
    # Past the end; an offset beyond the backend integer range must not reach SQL.
    items = list(queryset[offset:offset + limit]) if offset < total else []
    return IssuePage(items=items, total=total, page=page, limit=limit)


def get_issue(issue_id) -> Issue:
    """
    Fetch one issue with its creator.

    Raises:
        NotFoundError: absent or malformed id.
    """
    try:
        pk = int(issue_id)
    except (TypeError, ValueError):
        raise NotFoundError(ISSUE_NOT_FOUND_MESSAGE) from None
    if pk < 1:
        raise NotFoundError(ISSUE_NOT_FOUND_MESSAGE)

    try:
        return Issue.objects.select_related("created_by").get(pk=pk)
    except Issue.DoesNotExist:
        raise NotFoundError(ISSUE_NOT_FOUND_MESSAGE) from None


def update_issue(caller, issue_id, changes: Mapping[str, Any]) -> Issue:
    """
    Apply the keys present in `changes` to an issue the caller owns.

    Raises:
        NotFoundError: absent or malformed id.
        AuthorizationError: caller is not the creator.
        ValidationError: unknown key or invalid value.
    """
    issue = get_issue(issue_id)
    if not issue.is_owned_by(caller):
        logger.warning("issue update denied issue_id=%s user_id=%s", issue.pk, getattr(caller, "pk", None))
        raise AuthorizationError(UPDATE_FORBIDDEN_MESSAGE)

    data = validate_request(
        IssueUpdateSerializer(issue, data=changes, partial=True),
        message=INVALID_ISSUE_MESSAGE,
    )
    for field, value in data.items():
        setattr(issue, field, value)
    # `updated_at` is auto_now, so it refreshes even when no field changed.
    issue.save(update_fields=[*data, "updated_at"])
    logger.info("issue updated issue_id=%s fields=%s", issue.pk, ",".join(sorted(data)) or "-")
    return issue


def delete_issue(caller, issue_id) -> None:
    """
    Remove an issue the caller owns.

    Raises:
        NotFoundError: absent or malformed id.
        AuthorizationError: caller is not the creator.
    """
    issue = get_issue(issue_id)
    if not issue.is_owned_by(caller):
        logger.warning("issue delete denied issue_id=%s user_id=%s", issue.pk, getattr(caller, "pk", None))
        raise AuthorizationError(DELETE_FORBIDDEN_MESSAGE)

    pk = issue.pk
    issue.delete()
    logger.info("issue deleted issue_id=%s", pk)


def _bucket(field: str, choices) -> dict[str, int]:
    counts = {value: 0 for value in choices.values}
    for row in Issue.objects.order_by().values(field).annotate(n=Count("id")):
        if row[field] in counts:
            counts[row[field]] = row["n"]
    return counts


def issue_stats() -> dict[str, Any]:
    """Totals across all issues; every enum value is present, zero when unused."""
    return {
        "total": Issue.objects.count(),
        "byStatus": _bucket("status", IssueStatus),
        "byPriority": _bucket("priority", IssuePriority),
        "bySeverity": _bucket("severity", IssueSeverity),
    }
