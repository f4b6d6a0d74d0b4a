"""
Issue endpoints (`/api/issues`).

All routes require a bearer token. Reads are open to every authenticated user;
update and delete are owner-only (checked in `issues.services`). PUT and PATCH
are both partial updates: only the keys present in the body are written.

Responses use the `core.responses.success` envelope, except the listing which
carries its pagination counters at the top level:
`{success, count, total, totalPages, currentPage, data}`.
"""

from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.exceptions import ValidationError
from core.responses import success

from . import services
from .models import IssuePriority, IssueSeverity, IssueStatus
from .serializers import (
    IssueCreateSerializer,
    IssueSerializer,
    IssueStatsSerializer,
    IssueUpdateSerializer,
)

_LIST_PARAMETERS = [
    OpenApiParameter("status", OpenApiTypes.STR, enum=IssueStatus.values),
    OpenApiParameter("priority", OpenApiTypes.STR, enum=IssuePriority.values),
    OpenApiParameter("severity", OpenApiTypes.STR, enum=IssueSeverity.values),
    OpenApiParameter("search", OpenApiTypes.STR, description="Case-insensitive match on title or description."),
    OpenApiParameter("page", OpenApiTypes.INT, description="1-based page number (default 1)."),
    OpenApiParameter("limit", OpenApiTypes.INT, description="Page size (default 10, max 100)."),
]
_FORBIDDEN = OpenApiResponse(description="Caller is not the issue's creator")
_NOT_FOUND = OpenApiResponse(description='{"success": false, "message": "Issue not found"}')


@extend_schema_view(
    list=extend_schema(
        summary="List issues",
        parameters=_LIST_PARAMETERS,
        responses={200: IssueSerializer(many=True), 400: OpenApiResponse(description="Invalid filter or paging")},
    ),
    create=extend_schema(
        summary="Create an issue",
        request=IssueCreateSerializer,
        responses={201: IssueSerializer, 400: OpenApiResponse(description="Missing or invalid fields")},
    ),
    retrieve=extend_schema(summary="Retrieve an issue", responses={200: IssueSerializer, 404: _NOT_FOUND}),
    update=extend_schema(
        summary="Update an issue",
        request=IssueUpdateSerializer,
        responses={200: IssueSerializer, 403: _FORBIDDEN, 404: _NOT_FOUND},
    ),
    partial_update=extend_schema(
        summary="Update an issue",
        request=IssueUpdateSerializer,
        responses={200: IssueSerializer, 403: _FORBIDDEN, 404: _NOT_FOUND},
    ),
    destroy=extend_schema(summary="Delete an issue", responses={200: None, 403: _FORBIDDEN, 404: _NOT_FOUND}),
    stats=extend_schema(summary="Issue counts by status, priority and severity", responses={200: IssueStatsSerializer}),
)
@extend_schema(tags=["Issues"])
class IssueViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]
    # Any non-slash segment reaches the service, which answers 404 for malformed ids.
    lookup_value_regex = r"[^/]+"

    def list(self, request):
        page = services.list_issues(request.query_params)
        return Response({
            "success": True,
            "count": page.count,
            "total": page.total,
            "totalPages": page.total_pages,
            "currentPage": page.page,
            "data": IssueSerializer(page.items, many=True).data,
        })

    def create(self, request):
        serializer = IssueCreateSerializer(data=request.data)
        if not serializer.is_valid():
            missing = {"title", "description"} & set(serializer.errors)
            message = services.MISSING_FIELDS_MESSAGE if missing else services.INVALID_ISSUE_MESSAGE
            raise ValidationError(message, errors=serializer.errors)

        issue = services.create_issue(request.user, **serializer.validated_data)
        return success(
            IssueSerializer(issue).data,
            message="Issue created successfully",
            status=status.HTTP_201_CREATED,
        )

    def retrieve(self, request, pk=None):
        return success(IssueSerializer(services.get_issue(pk)).data)

    def update(self, request, pk=None):
        issue = services.update_issue(request.user, pk, request.data)
        return success(IssueSerializer(issue).data, message="Issue updated successfully")

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        services.delete_issue(request.user, pk)
        return success({}, message="Issue deleted successfully")

    @action(detail=False, methods=["get"], url_path="stats")
    def stats(self, request):
        return success(services.issue_stats())
