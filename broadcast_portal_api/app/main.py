"""
Main entrypoint for the broadcast club request portal API.

This module assembles the FastAPI application, sets up logging and
includes versioned routers.  The ``create_app`` function builds and
configures the app, which is then instantiated at module import time
as ``app``, e.g.::

    uvicorn broadcast_portal_api.app.main:app --reload

The application title, version and route prefix are provided via
``Settings`` from ``core.config``.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.errors import PyMongoError

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.db import close_client, init_db
from .core.logging_config import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger = logging.getLogger(__name__)
    try:
        init_db()
    except PyMongoError:
        # Keep serving; routes report storage failures individually.
        logger.exception("Database initialisation failed")
    yield
    close_client()


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Configures logging, CORS and the versioned API router.  Database
    indexes and singleton documents are prepared on startup.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    setup_logging()

    app = FastAPI(title=settings.project_name, version=settings.api_version, lifespan=lifespan)

    origins = [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(v1_router, prefix=settings.api_prefix)

    @app.get("/", include_in_schema=False)
    async def root() -> dict:
        return {"message": settings.project_name}

    return app


app = create_app()
