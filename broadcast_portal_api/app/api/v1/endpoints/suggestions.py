"""
Suggestion endpoints for API v1.

Students post suggestions to the club and everyone can read the list
together with the club's answers.  On success the response message is
the confirmation text shown to the student.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pymongo.errors import PyMongoError

from broadcast_portal_api.app.core.calendar import MAX_EPOCH_MILLIS
from broadcast_portal_api.app.core.security import submission_token
from broadcast_portal_api.app.schemas.common import Validity
from broadcast_portal_api.app.schemas.suggestion import SuggestionCreate, SuggestionRead
from broadcast_portal_api.app.services.suggestion_service import SuggestionService
from broadcast_portal_api.app.services.verification_service import (
    VerificationError,
    VerificationService,
)


router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/suggestion-request", response_model=Validity, summary="Submit a suggestion")
async def submit_suggestion(
    data: SuggestionCreate,
    date: Optional[int] = Query(None, ge=0, le=MAX_EPOCH_MILLIS, description="Client clock in epoch milliseconds"),
    token: Optional[Dict[str, Any]] = Depends(submission_token),
) -> Validity:
    try:
        VerificationService.claim_token(token)
        try:
            result = await SuggestionService.submit(data, requested_at=date)
        except Exception:
            VerificationService.release_token(token)
            raise
        if not result.is_valid:
            VerificationService.release_token(token)
        return result
    except VerificationError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except PyMongoError:
        logger.exception("Database error while storing a suggestion")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Request could not be processed")


@router.get("/suggestion-request", response_model=List[SuggestionRead], summary="List suggestions")
async def list_suggestions() -> List[SuggestionRead]:
    try:
        return await SuggestionService.list_suggestions()
    except PyMongoError:
        logger.exception("Database error while listing suggestions")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Request could not be processed")
