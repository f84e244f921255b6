"""Entry point for serving the Skill Swap API.

Launches the FastAPI application with Uvicorn.  Configuration is taken
from environment variables (see ``skill_swap_api/app/core/config.py``);
the bind address comes from ``HOST`` and ``PORT``.

Usage:
    python run.py
"""
import asyncio
import logging
import os

from uvicorn import Config, Server

from skill_swap_api.app.main import app


async def serve() -> None:
    """Run the API until interrupted.

    Host and port are read from ``HOST`` and ``PORT``; defaults are
    ``0.0.0.0`` and ``5000``.
    """
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "5000"))
    config = Config(app=app, host=host, port=port, reload=False, log_level="info")
    server = Server(config)
    logging.getLogger(__name__).info("Serving Skill Swap API on %s:%s", host, port)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(serve())
    except (KeyboardInterrupt, SystemExit):
        pass
