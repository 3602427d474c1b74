"""Shared fixtures for API Gateway tests.

Each test gets its own application built with an isolated Prometheus
registry, with the lifespan running so the pooled backend client exists.
Backends are mocked with respx.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from prometheus_client import CollectorRegistry

from api_gateway.core.config import GatewaySettings
from api_gateway.core.registry import BackendRegistry
from api_gateway.main import create_app

USER_URL = "http://users.test"
PRODUCT_URL = "http://products.test"


@pytest.fixture
def settings() -> GatewaySettings:
    return GatewaySettings(
        user_service_url=USER_URL,
        product_service_url=PRODUCT_URL,
        forward_timeout_ms=5000,
    )


@pytest.fixture
def backends(settings: GatewaySettings) -> BackendRegistry:
    return BackendRegistry.from_settings(settings)


@pytest.fixture
def metrics_registry() -> CollectorRegistry:
    return CollectorRegistry()


@pytest.fixture
async def app(settings: GatewaySettings, metrics_registry: CollectorRegistry) -> AsyncIterator[FastAPI]:
    application = create_app(settings, metrics_registry)
    async with application.router.lifespan_context(application):
        yield application


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://gateway") as ac:
        yield ac
