"""API Gateway — environment-based configuration."""

from __future__ import annotations

from common.config import BaseServiceSettings


class GatewaySettings(BaseServiceSettings):
    """Settings specific to the API Gateway."""

    service_name: str = "api-gateway"
    port: int = 3000

    # Backend base URLs (static; no discovery)
    user_service_url: str = "http://localhost:8081"
    product_service_url: str = "http://localhost:8082"

    # Hard upper bound for every forwarded call
    forward_timeout_ms: int = 5000

    cors_origins: list[str] = ["*"]


settings = GatewaySettings()
