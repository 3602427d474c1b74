"""Gateway shared utilities package."""

from common.config import BaseServiceSettings
from common.logging import setup_logging

__all__ = ["setup_logging", "BaseServiceSettings"]
