"""
MongoDB integration.

This module owns the single ``MongoClient`` used by the process.  The
client is created lazily on first use and reused across requests
(``get_database``).  ``init_db`` runs on application start: it creates
indexes and seeds the singleton documents the services expect
(blacklist, suggestion list, application list and the application
validity flag).

Collection names are module constants so services and tests refer to
the same place.
"""

import logging
from typing import Optional

from pymongo import ASCENDING, MongoClient
from pymongo.database import Database

from .config import settings


SONG_REQUESTS = "song_requests"
MORNING_SONG_REQUESTS = "morning_song_requests"
SUGGESTION_REQUESTS = "suggestion_requests"
APPLICATIONS = "applications"
BLACKLIST = "blacklist"
VALIDITY_FLAGS = "validity_flags"
VERIFICATION_CODES = "verification_codes"
CONSUMED_TOKENS = "consumed_tokens"

_client: Optional[MongoClient] = None


def get_client() -> MongoClient:
    """Return the process-wide client, connecting on first call."""
    global _client
    if _client is None:
        logging.getLogger(__name__).info("Connecting to MongoDB database %s", settings.database_name)
        _client = MongoClient(
            settings.database_url,
            serverSelectionTimeoutMS=settings.database_timeout_ms,
            tz_aware=True,
        )
    return _client


def set_client(client: Optional[MongoClient]) -> None:
    """Replace the shared client.

    Used by tests to install an in-memory client, and by shutdown to
    drop the reference after closing it.
    """
    global _client
    _client = client


def close_client() -> None:
    """Close the shared client if one was opened."""
    global _client
    if _client is not None:
        _client.close()
        _client = None


def get_database() -> Database:
    """Return the portal database handle."""
    return get_client()[settings.database_name]


def ping() -> bool:
    """Return ``True`` if the database answers; raise ``PyMongoError`` otherwise."""
    get_database().list_collection_names()
    return True


def init_db() -> None:
    """Create indexes and seed singleton documents.

    Seeding uses ``$setOnInsert`` upserts so that existing operator data
    (blacklist entries, a closed validity flag) is never overwritten.
    """
    logger = logging.getLogger(__name__)
    db = get_database()

    db[SONG_REQUESTS].create_index([("date", ASCENDING)], unique=True)
    db[MORNING_SONG_REQUESTS].create_index([("date", ASCENDING)], unique=True)

    db[BLACKLIST].update_one(
        {"_id": settings.blacklist_document_id},
        {"$setOnInsert": {"entries": []}},
        upsert=True,
    )
    db[SUGGESTION_REQUESTS].update_one(
        {"_id": settings.suggestion_document_id},
        {"$setOnInsert": {"requests": []}},
        upsert=True,
    )
    db[APPLICATIONS].update_one(
        {"_id": settings.application_document_id},
        {"$setOnInsert": {"applications": []}},
        upsert=True,
    )
    db[VALIDITY_FLAGS].update_one(
        {"_id": settings.application_flag_id},
        {"$setOnInsert": {"isValid": True, "message": ""}},
        upsert=True,
    )
    logger.info("Database %s initialised", settings.database_name)
