"""API Gateway — proxy routes (forwards to the user and product services).

Routes are declared in one explicit table and registered in specificity
order: at the first differing segment a literal beats a ``{param}``, so
``/products/search`` always wins over ``/products/{id}`` whatever the table
order.
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Any

from fastapi import APIRouter, Request, status
from fastapi.responses import Response

from api_gateway.core.registry import PRODUCT, USER, BackendRegistry, BackendTarget
from api_gateway.services.aggregator import build_dashboard
from api_gateway.services.forwarding import ForwardingClient, ForwardRequest, LocalFault, Method
from api_gateway.services.normalizer import GatewayResponse, normalize, relay

SERVICE_NAMES = {
    USER: "User Service",
    PRODUCT: "Product Service",
}

Endpoint = Callable[[Request], Awaitable[Response]]


@dataclass(frozen=True)
class ProxyRoute:
    """One row of the routing table."""

    method: Method
    pattern: str
    service: str
    upstream_path: str
    forward_query: bool = False

    @property
    def forward_body(self) -> bool:
        return self.method in ("POST", "PUT")


ROUTE_TABLE: tuple[ProxyRoute, ...] = (
    # ── User service ──────────────────────────
    ProxyRoute("GET", "/users", USER, "users"),
    ProxyRoute("GET", "/users/{id}", USER, "users/{id}"),
    ProxyRoute("POST", "/users", USER, "users"),
    ProxyRoute("PUT", "/users/{id}", USER, "users/{id}"),
    ProxyRoute("DELETE", "/users/{id}", USER, "users/{id}"),
    # ── Product service ───────────────────────
    ProxyRoute("GET", "/products", PRODUCT, "products"),
    ProxyRoute("GET", "/products/{id}", PRODUCT, "products/{id}"),
    ProxyRoute("GET", "/products/search", PRODUCT, "products/search", forward_query=True),
    ProxyRoute("POST", "/products", PRODUCT, "products"),
    ProxyRoute("PUT", "/products/{id}", PRODUCT, "products/{id}"),
    ProxyRoute("DELETE", "/products/{id}", PRODUCT, "products/{id}"),
)


def _is_param(segment: str) -> bool:
    return segment.startswith("{") and segment.endswith("}")


def specificity_key(pattern: str) -> tuple[int, ...]:
    """Sort key placing literal segments ahead of parameters, position by position."""
    return tuple(1 if _is_param(seg) else 0 for seg in pattern.strip("/").split("/"))


def ordered_routes(table: Iterable[ProxyRoute]) -> list[ProxyRoute]:
    """Return ``table`` in registration order (stable within equal specificity)."""
    return sorted(table, key=lambda r: specificity_key(r.pattern))


def forwarding_client(request: Request) -> ForwardingClient:
    return request.app.state.forwarding_client


def forward_headers(request: Request) -> dict[str, str]:
    correlation_id = getattr(request.state, "correlation_id", None)
    return {"X-Correlation-ID": correlation_id} if correlation_id else {}


async def read_json_body(request: Request) -> Any:
    """Parse the inbound body; empty means no body.

    Raises:
        ValueError: if the body is present but not JSON.
    """
    raw = await request.body()
    if not raw.strip():
        return None
    return json.loads(raw)


def _make_endpoint(route: ProxyRoute, target: BackendTarget, timeout_ms: int) -> Endpoint:
    service_name = SERVICE_NAMES.get(route.service, route.service)

    async def endpoint(request: Request) -> Response:
        body = None
        if route.forward_body:
            try:
                body = await read_json_body(request)
            except ValueError as exc:
                fault = LocalFault(message=f"Invalid JSON body: {exc}")
                return normalize(fault, service_name).to_response()

        req = ForwardRequest(
            target=target,
            method=route.method,
            path_suffix=route.upstream_path.format(**request.path_params),
            body=body,
            query=list(request.query_params.multi_items()) if route.forward_query else [],
            timeout_ms=timeout_ms,
            headers=forward_headers(request),
        )
        outcome = await forwarding_client(request).forward(req)
        result = relay(outcome, service_name)

        if route.method == "DELETE" and result.status < 400:
            result = GatewayResponse(status=status.HTTP_204_NO_CONTENT)
        return result.to_response()

    endpoint.__name__ = f"{route.method.lower()}_{route.upstream_path.replace('/', '_')}"
    return endpoint


def build_router(
    registry: BackendRegistry,
    *,
    timeout_ms: int,
    table: Iterable[ProxyRoute] = ROUTE_TABLE,
) -> APIRouter:
    """Build the ``/api`` router from ``table``.

    Every backend is resolved here, so an unknown service name fails
    application construction with ``ConfigFault``.
    """
    router = APIRouter(prefix="/api", tags=["Proxy"])

    for route in ordered_routes(table):
        target = registry.resolve(route.service)
        router.add_api_route(
            route.pattern,
            _make_endpoint(route, target, timeout_ms),
            methods=[route.method],
            response_class=Response,
            summary=f"{route.method} {route.pattern} -> {route.service} service",
        )

    # Shares the /users/{id} prefix but not its segment count
    @router.get("/users/{id}/dashboard", response_class=Response, summary="User dashboard")
    async def user_dashboard(id: str, request: Request) -> Response:
        result = await build_dashboard(
            forwarding_client(request),
            registry,
            id,
            timeout_ms=timeout_ms,
            headers=forward_headers(request),
        )
        return result.to_response()

    return router
