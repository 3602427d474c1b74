"""API Gateway — user dashboard aggregation.

Fans out to the user and product services concurrently and joins both
results. Any failing branch fails the whole call; when both fail the user
service outcome is reported.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

from fastapi import status

from api_gateway.core.registry import PRODUCT, USER, BackendRegistry
from api_gateway.services.forwarding import (
    ForwardingClient,
    ForwardRequest,
    LocalFault,
    Success,
)
from api_gateway.services.normalizer import GatewayResponse, normalize

AGGREGATION = "Aggregation"


async def build_dashboard(
    client: ForwardingClient,
    registry: BackendRegistry,
    user_id: str,
    *,
    timeout_ms: int,
    headers: dict[str, str] | None = None,
) -> GatewayResponse:
    """Compose ``{user, totalProducts, timestamp}`` for ``user_id``."""
    user_req = ForwardRequest(
        target=registry.resolve(USER),
        method="GET",
        path_suffix=f"users/{user_id}",
        timeout_ms=timeout_ms,
        headers=dict(headers or {}),
    )
    products_req = ForwardRequest(
        target=registry.resolve(PRODUCT),
        method="GET",
        path_suffix="products",
        timeout_ms=timeout_ms,
        headers=dict(headers or {}),
    )

    user_outcome, products_outcome = await asyncio.gather(
        client.forward(user_req),
        client.forward(products_req),
    )

    # Declaration order decides which failure is reported
    for outcome in (user_outcome, products_outcome):
        if not isinstance(outcome, Success):
            return normalize(outcome, AGGREGATION)

    products = products_outcome.body
    if not isinstance(products, list):
        return normalize(
            LocalFault(message="Product service did not return a product list"),
            AGGREGATION,
        )

    return GatewayResponse(
        status=status.HTTP_200_OK,
        body={
            "user": user_outcome.body,
            "totalProducts": len(products),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )
