"""API Gateway — static backend target registry.

Targets are resolved once from settings when the application is built and
never change afterwards, so concurrent reads need no locking.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from api_gateway.core.config import GatewaySettings
from api_gateway.core.errors import ConfigFault

USER = "user"
PRODUCT = "product"


@dataclass(frozen=True)
class BackendTarget:
    """A logical backend service and the base URL it listens on."""

    name: str
    base_url: str


class BackendRegistry:
    """Read-only mapping from logical service name to ``BackendTarget``."""

    def __init__(self, targets: Mapping[str, str]) -> None:
        self._targets: Mapping[str, BackendTarget] = MappingProxyType(
            {name: BackendTarget(name=name, base_url=url) for name, url in targets.items()}
        )

    @classmethod
    def from_settings(cls, settings: GatewaySettings) -> BackendRegistry:
        return cls(
            {
                USER: settings.user_service_url,
                PRODUCT: settings.product_service_url,
            }
        )

    def resolve(self, name: str) -> BackendTarget:
        """Return the target registered under ``name``.

        Raises:
            ConfigFault: if no backend is registered under ``name``.
        """
        try:
            return self._targets[name]
        except KeyError:
            raise ConfigFault(f"Unknown backend service '{name}'") from None

    def names(self) -> list[str]:
        return sorted(self._targets)
