"""Entry point for serving the request portal.

Host and port are read from the ``HOST`` and ``PORT`` environment
variables (defaults ``0.0.0.0`` and ``8000``).  All other
configuration is read by ``broadcast_portal_api.app.core.config``.

Usage:
    python run.py
"""
import os

from uvicorn import Config, Server

from broadcast_portal_api.app.core.config import settings


def main() -> None:
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    config = Config(
        app="broadcast_portal_api.app.main:app",
        host=host,
        port=port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
    Server(config).run()


if __name__ == "__main__":
    try:
        main()
    except (KeyboardInterrupt, SystemExit):
        pass
