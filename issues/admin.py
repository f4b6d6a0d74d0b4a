"""
Django admin registration for issues.

Back-office only. The owner is shown but not editable; ownership is fixed at
creation.
"""

from __future__ import annotations

from django.contrib import admin

from .models import Issue


@admin.register(Issue)
class IssueAdmin(admin.ModelAdmin):
    """Issue listing filtered by the three enums, searchable by text and owner email."""
    list_display = ("id", "title", "status", "priority", "severity", "created_by", "created_at", "updated_at")
    list_filter = ("status", "priority", "severity")
    search_fields = ("title", "description", "created_by__email")
    list_select_related = ("created_by",)
    readonly_fields = ("created_by", "created_at", "updated_at")
    date_hierarchy = "created_at"
