"""API Gateway — forwarding client.

Issues one outbound call per ``ForwardRequest`` and classifies the result
exactly once into a ``ForwardOutcome``:

  * ``Success``        backend answered with a status below 400
  * ``UpstreamError``  backend answered with a status of 400 or above
  * ``Unreachable``    no answer: connection refused, timeout, DNS failure
  * ``LocalFault``     the call could not be built or its result not read

Downstream code branches on the outcome type and never re-inspects
exceptions.
"""

from __future__ import annotations

import asyncio
import json
import time
from dataclasses import dataclass, field
from typing import Any, Literal, Union

import httpx
import structlog

from api_gateway.core.metrics import GatewayMetrics
from api_gateway.core.registry import BackendTarget

logger = structlog.get_logger()

Method = Literal["GET", "POST", "PUT", "DELETE"]

DEFAULT_TIMEOUT_MS = 5000
JSON_HEADERS = {"Content-Type": "application/json"}


@dataclass
class ForwardRequest:
    """One outbound call, built per incoming request and used once."""

    target: BackendTarget
    method: Method
    path_suffix: str
    body: Any = None
    query: list[tuple[str, str]] = field(default_factory=list)
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def url(self) -> str:
        return f"{self.target.base_url}/api/{self.path_suffix}"


@dataclass(frozen=True)
class Success:
    status: int
    body: Any


@dataclass(frozen=True)
class UpstreamError:
    status: int
    body: Any


@dataclass(frozen=True)
class Unreachable:
    detail: str = ""


@dataclass(frozen=True)
class LocalFault:
    message: str


ForwardOutcome = Union[Success, UpstreamError, Unreachable, LocalFault]


def decode_body(response: httpx.Response) -> Any:
    """Decode a backend body: JSON when possible, ``None`` when empty, else text."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class ForwardingClient:
    """Wraps a shared ``httpx.AsyncClient`` and returns classified outcomes."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        metrics: GatewayMetrics | None = None,
    ) -> None:
        self._http = http_client
        self._metrics = metrics

    async def forward(self, req: ForwardRequest) -> ForwardOutcome:
        """Perform ``req`` and classify the result. Never raises."""
        started = time.perf_counter()
        outcome = await self._send(req)
        elapsed = time.perf_counter() - started

        logger.debug(
            "forwarded_call",
            backend=req.target.name,
            method=req.method,
            url=req.url,
            outcome=type(outcome).__name__,
            status=getattr(outcome, "status", None),
            elapsed_ms=round(elapsed * 1000, 2),
        )
        if self._metrics is not None:
            self._metrics.observe_downstream(
                req.target.name, req.method, _outcome_label(outcome), elapsed
            )
        return outcome

    async def _send(self, req: ForwardRequest) -> ForwardOutcome:
        try:
            content = None
            if req.method in ("POST", "PUT") and req.body is not None:
                content = json.dumps(req.body).encode("utf-8")
            # httpx timeouts are per phase; wait_for bounds the whole call
            response = await asyncio.wait_for(
                self._http.request(
                    req.method,
                    req.url,
                    content=content,
                    params=req.query or None,
                    headers={**JSON_HEADERS, **req.headers},
                    timeout=req.timeout_ms / 1000,
                ),
                timeout=req.timeout_ms / 1000,
            )
        except asyncio.TimeoutError:
            return Unreachable(detail=f"No complete response within {req.timeout_ms} ms")
        except httpx.UnsupportedProtocol as exc:
            # Malformed base URL; raised before any connection attempt
            return LocalFault(message=str(exc))
        except httpx.TransportError as exc:
            return Unreachable(detail=str(exc) or type(exc).__name__)
        except httpx.RequestError as exc:
            # e.g. DecodingError: a response arrived but could not be read
            return LocalFault(message=str(exc))
        except (httpx.InvalidURL, TypeError, ValueError) as exc:
            return LocalFault(message=str(exc))

        body = decode_body(response)
        if response.status_code >= 400:
            return UpstreamError(status=response.status_code, body=body)
        return Success(status=response.status_code, body=body)


def _outcome_label(outcome: ForwardOutcome) -> str:
    if isinstance(outcome, (Success, UpstreamError)):
        return str(outcome.status)
    if isinstance(outcome, Unreachable):
        return "unreachable"
    return "local_fault"
