"""
Song request endpoints for API v1.

``/song-request`` is the daily lunchtime board and requires a
submission token from the email verification flow.
``/morning-song-request`` is the morning broadcast board; it applies
the same rules but never asked for an email address, so it takes no
token.  Rejections are ordinary responses with ``isValid: false``.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pymongo.errors import PyMongoError

from broadcast_portal_api.app.core.calendar import MAX_EPOCH_MILLIS
from broadcast_portal_api.app.core.security import submission_token
from broadcast_portal_api.app.schemas.common import Validity
from broadcast_portal_api.app.schemas.song_request import (
    SongRequestCreate,
    SongRequestDelete,
    SongRequestRead,
)
from broadcast_portal_api.app.services.song_request_service import (
    MorningSongRequestService,
    SongRequestService,
)
from broadcast_portal_api.app.services.verification_service import (
    VerificationError,
    VerificationService,
)


router = APIRouter()
logger = logging.getLogger(__name__)


def _storage_error() -> HTTPException:
    logger.exception("Database error while handling a song request")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Request could not be processed")


@router.post("/song-request", response_model=Validity, summary="Submit a song request")
async def submit_song_request(
    data: SongRequestCreate,
    date: Optional[int] = Query(None, ge=0, le=MAX_EPOCH_MILLIS, description="Client clock in epoch milliseconds"),
    token: Optional[Dict[str, Any]] = Depends(submission_token),
) -> Validity:
    """Validate and store a song request for today."""
    try:
        VerificationService.claim_token(token)
        try:
            result = await SongRequestService.submit(data, requested_at=date)
        except Exception:
            VerificationService.release_token(token)
            raise
        if not result.is_valid:
            VerificationService.release_token(token)
        return result
    except VerificationError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except PyMongoError:
        raise _storage_error()


@router.get("/song-request", response_model=List[SongRequestRead], summary="List today's song requests")
async def list_song_requests() -> List[SongRequestRead]:
    try:
        return await SongRequestService.list_today()
    except PyMongoError:
        raise _storage_error()


@router.delete("/song-request", response_model=Validity, summary="Withdraw a song request")
async def delete_song_request(data: SongRequestDelete) -> Validity:
    """Remove today's requests matching name and student number.

    Always reports success, also when nothing matched.
    """
    try:
        return await SongRequestService.delete(data)
    except PyMongoError:
        raise _storage_error()


@router.post("/morning-song-request", response_model=Validity, summary="Submit a morning song request")
async def submit_morning_song_request(
    data: SongRequestCreate,
    date: Optional[int] = Query(None, ge=0, le=MAX_EPOCH_MILLIS, description="Client clock in epoch milliseconds"),
) -> Validity:
    try:
        return await MorningSongRequestService.submit(data, requested_at=date)
    except PyMongoError:
        raise _storage_error()


@router.get("/morning-song-request", response_model=List[SongRequestRead], summary="List today's morning requests")
async def list_morning_song_requests() -> List[SongRequestRead]:
    try:
        return await MorningSongRequestService.list_today()
    except PyMongoError:
        raise _storage_error()


@router.delete("/morning-song-request", response_model=Validity, summary="Withdraw a morning song request")
async def delete_morning_song_request(data: SongRequestDelete) -> Validity:
    try:
        return await MorningSongRequestService.delete(data)
    except PyMongoError:
        raise _storage_error()
