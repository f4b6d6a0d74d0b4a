"""
Core middleware for request safety and observability.

Components
----------
- `RequestSizeLimitMiddleware`:
    * Rejects large request bodies early with a pre-rendered 413 JSON envelope.
    * Applies to POST/PUT/PATCH only and relies on `Content-Length` when present.
    * Limit is configurable via `MAX_REQUEST_BYTES` (read per request).

- `RequestIDLogMiddleware`:
    * Reads `X-Request-ID` (or generates one) and reflects it in the response.
    * Stores the id in a contextvar for use by `core.logging.RequestIDFilter`.
    * Logs one structured line per request including latency (ms) and user id.

Notes
-----
- Bearer authentication happens inside DRF views, after this middleware has
  called `get_response`, so the logged user id is read once the response exists.
"""

from __future__ import annotations

import logging
import re
import time
import uuid
from typing import Callable, Optional

from django.conf import settings
from django.http import HttpRequest, HttpResponse
from rest_framework.renderers import JSONRenderer
from rest_framework.response import Response

from .logging import request_id_var

logger = logging.getLogger("issue_tracker.request")

# Allow simple, safe request-id tokens coming from clients
_ALLOWED_CHARS = re.compile(r"^[A-Za-z0-9._\-]{1,200}$")


def _coerce_request_id(raw: str | None) -> str:
    """
    Coerce a client-provided request id to a safe token, or generate a new one.
    """
    if raw and _ALLOWED_CHARS.match(raw):
        return raw
    return uuid.uuid4().hex


def _rendered(payload: dict, status: int) -> Response:
    """Build a DRF Response outside a view and render it so it can be returned directly."""
    resp = Response(payload, status=status)
    resp.accepted_renderer = JSONRenderer()
    resp.accepted_media_type = "application/json"
    resp.renderer_context = {}
    resp.render()
    return resp


class RequestSizeLimitMiddleware:
    """
    Reject overly large request bodies with 413, before any parsing.

    - Uses Content-Length if present; if missing or unparsable we allow through.
    - Applies to POST/PUT/PATCH only.
    - Configured via settings.MAX_REQUEST_BYTES; 0 disables the check.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        max_bytes = int(getattr(settings, "MAX_REQUEST_BYTES", 1_000_000))
        if request.method.upper() in {"POST", "PUT", "PATCH"} and max_bytes > 0:
            raw_len: Optional[str] = request.META.get("CONTENT_LENGTH")
            try:
                content_length = int(raw_len) if raw_len else None
            except ValueError:
                content_length = None

            if content_length is not None and content_length > max_bytes:
                return _rendered(
                    {
                        "success": False,
                        "message": f"Request entity too large. Max {max_bytes} bytes.",
                    },
                    status=413,
                )

        return self.get_response(request)


class RequestIDLogMiddleware:
    """
    - Reads `X-Request-ID` (if provided) or generates one.
    - Adds `request.request_id` and response header `X-Request-ID`.
    - Logs one structured line per request with latency (ms) and key attributes.
    - Stores request_id in a `contextvar` so other logs can include it.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        rid = _coerce_request_id(request.headers.get("X-Request-ID"))
        setattr(request, "request_id", rid)
        token = request_id_var.set(rid)

        try:
            start = time.perf_counter()
            response = self.get_response(request)
            duration_ms = int((time.perf_counter() - start) * 1000)

            response.headers["X-Request-ID"] = rid

            # DRF sets the authenticated user on the Django request after auth runs.
            user = getattr(request, "user", None)
            user_id = getattr(user, "pk", None) if getattr(user, "is_authenticated", False) else None

            logger.info(
                "request",
                extra={
                    "request_id": rid,
                    "method": request.method,
                    "path": request.path,
                    "status": getattr(response, "status_code", 0),
                    "user_id": user_id,
                    "duration_ms": duration_ms,
                },
            )
            return response
        finally:
            request_id_var.reset(token)
