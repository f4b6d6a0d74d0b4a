"""
Query-string filters for the issue listing.

`status`, `priority` and `severity` are exact matches against their enums and
AND together; `search` is a case-insensitive substring match on title OR
description. Unknown enum values make the filterset invalid rather than being
silently ignored.
"""

from __future__ import annotations

import django_filters
from django.db.models import Q

from .models import Issue, IssuePriority, IssueSeverity, IssueStatus


class IssueFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=IssueStatus.choices)
    priority = django_filters.ChoiceFilter(choices=IssuePriority.choices)
    severity = django_filters.ChoiceFilter(choices=IssueSeverity.choices)
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Issue
        fields = ["status", "priority", "severity", "search"]

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(Q(title__icontains=value) | Q(description__icontains=value))
