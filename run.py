"""Entry point for the Nightlife API server.

Serves the FastAPI application with Uvicorn.  Host, port and the
keep-alive timeout are read from the environment via ``Settings``
(``HOST``, ``PORT``, ``KEEP_ALIVE_TIMEOUT``).  Values missing from the
environment are taken from ``.env`` in the project root (or the file
named by ``ENV_FILE``) when it exists.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from nightlife_api.app.core.config import settings
from nightlife_api.app.main import app


async def main() -> None:
    """Start the API using Uvicorn."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
        timeout_keep_alive=settings.keep_alive_timeout,
    )
    server = Server(config)
    logging.getLogger(__name__).info("Server is listening on port %s", settings.port)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
