"""Request instrumentation for Prometheus."""

from __future__ import annotations

import time
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from app.telemetry import observe_request

# Scrapes and probes would otherwise dominate the request counters.
_UNTRACKED_PATHS = frozenset({"/metrics", "/health"})


class TelemetryMiddleware(BaseHTTPMiddleware):
    """Record count and latency per route template.

    Polling clients hit ``/api/content/{request_id}`` many times per request,
    so labels always use the template rather than the concrete path.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if request.url.path in _UNTRACKED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:  # pragma: no cover - handled by the app error handler
            observe_request(
                request.method,
                self._route_label(request),
                500,
                time.perf_counter() - started,
            )
            raise

        observe_request(
            request.method,
            self._route_label(request),
            response.status_code,
            time.perf_counter() - started,
        )
        return response

    @staticmethod
    def _route_label(request: Request) -> str:
        route: Any = request.scope.get("route")
        template = getattr(route, "path", None)
        if template:
            return template
        return "unmatched"
