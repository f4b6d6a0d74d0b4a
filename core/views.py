"""Core utility views (unauthenticated).

Currently exposes:
- `index`: API banner at `/` (name, liveness, server time).
- `health`: lightweight readiness endpoint that checks DB connectivity and
  returns a minimal JSON payload. Intended for load balancers/k8s probes.
- `not_found`: JSON 404 envelope for unknown routes (`handler404`).

Security
--------
- Public by design; payloads contain no sensitive data and no per-request state.
"""

import logging

from django.db import connection
from django.http import JsonResponse
from django.utils.timezone import now

logger = logging.getLogger("core.health")


def index(request):
    """Banner for humans poking at the API root."""
    return JsonResponse(
        {
            "message": "Issue Tracker API",
            "status": "Server is running",
            "timestamp": now().isoformat(),
        }
    )


def health(request):
    """
    Lightweight health endpoint (no auth).
    Checks DB connectivity and returns a simple JSON status.

    Returns:
        200 JSON when DB is reachable; 503 JSON when a DB error is raised.
    """
    status = 200
    payload = {
        "status": "OK",
        "app": "issue-tracker",
        "database": "Connected",
        "timestamp": now().isoformat(),
    }
    try:
        connection.ensure_connection()
    except Exception as exc:
        logger.warning("database unreachable: %s", exc)
        payload["status"] = "DOWN"
        payload["database"] = "Disconnected"
        payload["error"] = str(exc)
        status = 503
    return JsonResponse(payload, status=status)


def not_found(request, exception=None):
    """JSON replacement for Django's HTML 404 page (active when DEBUG is off)."""
    return JsonResponse({"success": False, "message": "Route not found"}, status=404)
