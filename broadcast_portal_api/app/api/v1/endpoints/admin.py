"""
Moderation endpoints for API v1.

These routes let club operators manage the blacklist, open or close
application intake, answer suggestions and inspect stored requests.
Every route requires the static ``ADMIN_TOKEN`` as a bearer token.
"""

import datetime as dt
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from broadcast_portal_api.app.core.calendar import portal_today
from broadcast_portal_api.app.core.security import require_admin
from broadcast_portal_api.app.schemas.application import ApplicationRead, ApplicationValidity
from broadcast_portal_api.app.schemas.moderation import BlacklistEntryCreate, BlacklistEntryRead
from broadcast_portal_api.app.schemas.song_request import SongRequestRead
from broadcast_portal_api.app.schemas.suggestion import SuggestionAnswer, SuggestionRead
from broadcast_portal_api.app.services.application_service import ApplicationService
from broadcast_portal_api.app.services.moderation_service import ModerationService
from broadcast_portal_api.app.services.song_request_service import (
    MorningSongRequestService,
    SongRequestService,
)
from broadcast_portal_api.app.services.suggestion_service import SuggestionService


router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/blacklist", response_model=List[BlacklistEntryRead])
async def list_blacklist() -> List[BlacklistEntryRead]:
    return await ModerationService.list_blacklist()


@router.post("/blacklist", response_model=BlacklistEntryRead, status_code=status.HTTP_201_CREATED)
async def add_to_blacklist(data: BlacklistEntryCreate) -> BlacklistEntryRead:
    """Bar a student from song requests and suggestions."""
    return await ModerationService.add_to_blacklist(data)


@router.delete("/blacklist/{student_number}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_from_blacklist(student_number: str) -> Response:
    """Lift a ban.  ``student_number`` may be raw or year-prefixed."""
    try:
        await ModerationService.remove_from_blacklist(student_number)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/application-validity", response_model=ApplicationValidity)
async def get_application_validity() -> ApplicationValidity:
    return await ModerationService.get_application_validity()


@router.put("/application-validity", response_model=ApplicationValidity)
async def set_application_validity(data: ApplicationValidity) -> ApplicationValidity:
    """Open (``isValid: true``) or close application intake."""
    return await ModerationService.set_application_validity(data)


@router.get("/applications", response_model=List[ApplicationRead])
async def list_applications() -> List[ApplicationRead]:
    return await ApplicationService.list_applications()


@router.put("/suggestions/{suggestion_id}/answer", response_model=SuggestionRead)
async def answer_suggestion(suggestion_id: str, data: SuggestionAnswer) -> SuggestionRead:
    try:
        return await SuggestionService.answer(suggestion_id, data.answer)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/song-requests", response_model=Dict[str, List[SongRequestRead]])
async def list_song_requests(
    date: Optional[dt.date] = Query(None, description="Day to show (YYYY-MM-DD); defaults to today"),
) -> Dict[str, List[SongRequestRead]]:
    """Both boards of one day with full student numbers."""
    day = date or portal_today()
    return {
        "songRequests": await SongRequestService.list_for_day(day),
        "morningSongRequests": await MorningSongRequestService.list_for_day(day),
    }
