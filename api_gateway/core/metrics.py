"""Metrics definitions for the API Gateway."""

from __future__ import annotations

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram


class GatewayMetrics:
    """A container for all Prometheus metrics of the API Gateway.

    Callers only increment and observe through the helper methods; the
    underlying collectors are not meant to be touched directly.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics with optional registry for test isolation."""
        if registry is None:
            registry = REGISTRY
        self.registry = registry
        self.http_requests_total = Counter(
            "gateway_http_requests_total",
            "Total number of HTTP requests",
            ["method", "route", "status"],
            registry=registry,
        )
        self.http_request_duration_seconds = Histogram(
            "gateway_http_request_duration_seconds",
            "Duration of HTTP requests in seconds",
            ["method", "route", "status"],
            registry=registry,
        )
        self.downstream_calls_total = Counter(
            "gateway_downstream_calls_total",
            "Total number of calls forwarded to backend services.",
            ["service", "method", "outcome"],
            registry=registry,
        )
        self.downstream_call_duration_seconds = Histogram(
            "gateway_downstream_call_duration_seconds",
            "Duration of calls forwarded to backend services in seconds.",
            ["service", "method"],
            registry=registry,
        )

    def observe_request(self, method: str, route: str, status: int, duration: float) -> None:
        labels = {"method": method, "route": route, "status": str(status)}
        self.http_requests_total.labels(**labels).inc()
        self.http_request_duration_seconds.labels(**labels).observe(duration)

    def observe_downstream(self, service: str, method: str, outcome: str, duration: float) -> None:
        self.downstream_calls_total.labels(service=service, method=method, outcome=outcome).inc()
        self.downstream_call_duration_seconds.labels(service=service, method=method).observe(
            duration
        )
