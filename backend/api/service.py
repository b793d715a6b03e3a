"""
API service entrypoint: serves the Club Live app with uvicorn.

PaaS hosts set PORT dynamically; it wins over CL_API_PORT.
"""
from __future__ import annotations

import os

import uvicorn

from shared.config import Environment, Settings, get_settings


def listen_port(settings: Settings) -> int:
    return int(os.environ.get("PORT") or settings.api_port)


def main() -> None:
    settings = get_settings()
    reload = settings.environment == Environment.DEV and settings.debug

    uvicorn.run(
        "api.app:app",
        host=settings.api_host,
        port=listen_port(settings),
        # uvicorn ignores workers when reloading
        workers=1 if reload else settings.api_workers,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=False,  # RequestLoggingMiddleware writes the access log
        timeout_keep_alive=30,
    )


if __name__ == "__main__":
    main()
