"""
Membership application endpoint for API v1.

Accepted only while the operator keeps application intake open; the
closed-intake message comes from the validity flag.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pymongo.errors import PyMongoError

from broadcast_portal_api.app.core.calendar import MAX_EPOCH_MILLIS
from broadcast_portal_api.app.core.security import submission_token
from broadcast_portal_api.app.schemas.application import ApplicationCreate
from broadcast_portal_api.app.schemas.common import Validity
from broadcast_portal_api.app.services.application_service import ApplicationService
from broadcast_portal_api.app.services.verification_service import (
    VerificationError,
    VerificationService,
)


router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/submit-application", response_model=Validity, summary="Submit an application")
async def submit_application(
    data: ApplicationCreate,
    date: Optional[int] = Query(None, ge=0, le=MAX_EPOCH_MILLIS, description="Client clock in epoch milliseconds"),
    token: Optional[Dict[str, Any]] = Depends(submission_token),
) -> Validity:
    try:
        VerificationService.claim_token(token)
        try:
            result = await ApplicationService.submit(data, requested_at=date)
        except Exception:
            VerificationService.release_token(token)
            raise
        if not result.is_valid:
            VerificationService.release_token(token)
        return result
    except VerificationError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except PyMongoError:
        logger.exception("Database error while storing an application")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Request could not be processed")
