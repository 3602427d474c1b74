"""Reusable health-check router.

``GET /health`` reports process liveness only. It never consults backends,
so it stays ``UP`` while downstream services are unreachable.
"""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter


def create_health_router(service_name: str) -> APIRouter:
    """Build a health router for ``service_name``.

    Returns:
        A FastAPI ``APIRouter`` serving ``/health``.
    """
    router = APIRouter(tags=["health"])

    @router.get("/health", summary="Liveness probe")
    async def health() -> dict[str, str]:
        return {
            "status": "UP",
            "service": service_name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    return router
