"""Run the gateway with uvicorn: ``python -m api_gateway``."""

from __future__ import annotations

import uvicorn

from api_gateway.core.config import settings


def main() -> None:
    uvicorn.run(
        "api_gateway.main:app",
        host="0.0.0.0",
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
