"""API Gateway — failure normalization.

Turns a non-success ``ForwardOutcome`` into the uniform client-facing error
envelope:

    UpstreamError  ->  backend status, {"error": "<service> error", "message", "status"}
    Unreachable    ->  503,            {"error": "<service> unavailable", "message"}
    LocalFault     ->  500,            {"error": "Gateway error", "message"}
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog
from fastapi import status
from fastapi.responses import JSONResponse, Response

from api_gateway.services.forwarding import (
    ForwardOutcome,
    LocalFault,
    Success,
    Unreachable,
    UpstreamError,
)

logger = structlog.get_logger()

UNREACHABLE_MESSAGE = "Service is not responding"


@dataclass(frozen=True)
class GatewayResponse:
    """Status and JSON body written back to the original caller."""

    status: int
    body: Any = None

    def to_response(self) -> Response:
        if self.body is None or self.status == status.HTTP_204_NO_CONTENT:
            return Response(status_code=self.status)
        return JSONResponse(status_code=self.status, content=self.body)


def upstream_message(status_code: int, body: Any) -> Any:
    """Return ``body["message"]`` as sent when the backend supplied one, else a generic line."""
    if isinstance(body, dict) and body.get("message") is not None:
        return body["message"]
    return f"Request failed with status code {status_code}"


def normalize(outcome: ForwardOutcome, service_name: str) -> GatewayResponse:
    """Render a failed outcome as a ``GatewayResponse``. Total; never raises."""
    if isinstance(outcome, UpstreamError):
        message = upstream_message(outcome.status, outcome.body)
        logger.warning(
            "upstream_error",
            backend=service_name,
            status=outcome.status,
            message=message,
        )
        return GatewayResponse(
            status=outcome.status,
            body={
                "error": f"{service_name} error",
                "message": message,
                "status": outcome.status,
            },
        )

    if isinstance(outcome, Unreachable):
        logger.warning("upstream_unreachable", backend=service_name, detail=outcome.detail)
        return GatewayResponse(
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
            body={
                "error": f"{service_name} unavailable",
                "message": UNREACHABLE_MESSAGE,
            },
        )

    if isinstance(outcome, LocalFault):
        message = outcome.message
    else:
        # A Success handed in by mistake is still answered, as a gateway fault
        message = f"Unexpected {type(outcome).__name__} outcome"
    logger.error("gateway_fault", backend=service_name, message=message)
    return GatewayResponse(
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        body={"error": "Gateway error", "message": message},
    )


def relay(outcome: ForwardOutcome, service_name: str) -> GatewayResponse:
    """Pass a ``Success`` through unchanged; normalize anything else."""
    if isinstance(outcome, Success):
        return GatewayResponse(status=outcome.status, body=outcome.body)
    return normalize(outcome, service_name)
