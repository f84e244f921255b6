"""
Main entrypoint for the Skill Swap API.

``create_app`` assembles the FastAPI application from an explicit
``Settings`` object: it configures logging, builds the ``Database``
handle, stores both on ``app.state``, installs CORS and the error
handlers, and mounts the versioned router.  The module-level ``app``
uses the environment-derived default settings, e.g.::

    uvicorn skill_swap_api.app.main:app --reload
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.v1.router import router as v1_router
from .core.config import Settings, settings as default_settings
from .core.db import Database
from .core.errors import register_exception_handlers
from .core.logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration for this application instance.  Defaults to the
        settings read from the environment at import time.

    Returns
    -------
    FastAPI
        A configured application.  The database schema is brought up
        to date when the application starts.
    """
    settings = settings or default_settings
    setup_logging(settings.log_level, settings.log_file)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)
    app.state.settings = settings
    app.state.db = Database.from_settings(settings)

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)
    app.include_router(v1_router, prefix=settings.api_prefix)

    @app.get("/", include_in_schema=False)
    async def root() -> dict:
        return {"msg": "Skill Swap Platform Backend API is running!"}

    @app.on_event("startup")
    async def startup_event() -> None:
        app.state.db.init()
        logger.info("Database ready at %s", app.state.db.path)

    return app


app = create_app()
