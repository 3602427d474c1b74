"""API Gateway — request metrics middleware."""

from __future__ import annotations

import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Match
from starlette.types import ASGIApp

from api_gateway.core.metrics import GatewayMetrics

UNMATCHED_ROUTE = "unmatched"


class MetricsMiddleware(BaseHTTPMiddleware):
    """Counts and times every request, labelled by route pattern."""

    def __init__(self, app: ASGIApp, metrics: GatewayMetrics) -> None:
        super().__init__(app)
        self._metrics = metrics

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        route = _route_pattern(request)
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            self._metrics.observe_request(
                request.method, route, 500, time.perf_counter() - started
            )
            raise

        self._metrics.observe_request(
            request.method, route, response.status_code, time.perf_counter() - started
        )
        return response


def _route_pattern(request: Request) -> str:
    """Return the template of the route ``request`` resolves to, e.g. ``/api/users/{id}``."""
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match == Match.FULL:
            return getattr(route, "path", UNMATCHED_ROUTE)
    return UNMATCHED_ROUTE
