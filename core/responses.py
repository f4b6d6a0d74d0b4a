"""Success envelope used by every API view: `{success: true, message?, data?}`."""

from __future__ import annotations

from typing import Any, Optional

from rest_framework import status as http_status
from rest_framework.response import Response


def success(data: Any = None, *, message: Optional[str] = None, status: int = http_status.HTTP_200_OK) -> Response:
    payload: dict[str, Any] = {"success": True}
    if message:
        payload["message"] = message
    if data is not None:
        payload["data"] = data
    return Response(payload, status=status)
