"""API Gateway — application lifespan (startup / shutdown hooks)."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
import structlog
from fastapi import FastAPI

from api_gateway.services.forwarding import ForwardingClient

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the pooled backend HTTP client for the lifetime of the app."""
    settings = app.state.settings
    registry = app.state.registry
    log.info(
        "api_gateway starting up",
        port=settings.port,
        backends={name: registry.resolve(name).base_url for name in registry.names()},
    )

    async with httpx.AsyncClient(
        timeout=settings.forward_timeout_ms / 1000,
        follow_redirects=True,
    ) as http_client:
        app.state.forwarding_client = ForwardingClient(http_client, app.state.metrics)
        yield

    log.info("api_gateway shutting down")
