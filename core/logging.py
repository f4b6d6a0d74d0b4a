"""
Logging helpers for request-scoped correlation.

Overview
--------
- Exposes a `contextvars.ContextVar` (`request_id_var`) that stores the current
  request id for the lifetime of the request (set by middleware).
- Provides `RequestIDFilter`, a `logging.Filter` that injects `request_id` onto
  every `LogRecord` so formatters using `%(request_id)s` never break, even when
  the log line originates outside an HTTP request (e.g., `dev_seed`).

Usage
-----
- Middleware (`core.middleware.RequestIDLogMiddleware`) sets the value on each
  request and also adds `X-Request-ID` to responses.
- Configure the filter on handlers in Django LOGGING settings so all logs have a
  stable correlation id. A dash `"-"` is used when no request id is present.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


class RequestIDFilter(logging.Filter):
    """
    Ensures `%(request_id)s` is always present in log records, even when a logger
    emits outside of an HTTP request context (e.g., management commands).
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get()
        return True
