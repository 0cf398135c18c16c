"""Liveness and database connectivity check."""

import logging
from typing import Dict

from fastapi import APIRouter
from pymongo.errors import PyMongoError

from broadcast_portal_api.app.core.db import ping


router = APIRouter()


@router.get("/health", response_model=Dict[str, str])
async def health() -> Dict[str, str]:
    try:
        ping()
        database = "connected"
    except PyMongoError as e:
        logging.getLogger(__name__).warning("Database ping failed: %s", e)
        database = "unavailable"
    return {"status": "ok", "database": database}
