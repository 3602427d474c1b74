"""API Gateway — FastAPI application factory.

Single public entry point; forwards calls to the user and product services.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from prometheus_client import CollectorRegistry

from api_gateway import __version__
from api_gateway.core.config import GatewaySettings
from api_gateway.core.config import settings as default_settings
from api_gateway.core.errors import register_exception_handlers
from api_gateway.core.events import lifespan
from api_gateway.core.metrics import GatewayMetrics
from api_gateway.core.registry import BackendRegistry
from api_gateway.core.telemetry import MetricsMiddleware
from api_gateway.routers import metrics
from api_gateway.routers.proxy import build_router
from common.health import create_health_router
from common.logging import setup_logging
from common.middleware import RequestContextMiddleware, SecurityHeadersMiddleware


def create_app(
    settings: GatewaySettings | None = None,
    registry: CollectorRegistry | None = None,
) -> FastAPI:
    settings = settings or default_settings
    setup_logging(
        log_level=settings.log_level,
        json_logs=settings.json_logs,
        service_name=settings.service_name,
    )

    application = FastAPI(
        title="API Gateway",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    backends = BackendRegistry.from_settings(settings)
    gateway_metrics = GatewayMetrics(registry)
    application.state.settings = settings
    application.state.registry = backends
    application.state.metrics = gateway_metrics

    register_exception_handlers(application)

    # Last added is outermost: CORS, request context, metrics, security headers, gzip
    application.add_middleware(GZipMiddleware, minimum_size=1000)
    application.add_middleware(SecurityHeadersMiddleware)
    application.add_middleware(MetricsMiddleware, metrics=gateway_metrics)
    application.add_middleware(RequestContextMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    application.include_router(create_health_router(settings.service_name))
    application.include_router(metrics.router)
    application.include_router(
        build_router(backends, timeout_ms=settings.forward_timeout_ms)
    )

    return application


app = create_app()
