"""
Email verification endpoints for API v1.

``POST /email-verification`` mails a one-time code to a school
address.  ``POST /email-verification/confirm`` exchanges the code for
a submission token, which the client sends in the
``X-Verification-Token`` header of its next submission.
"""

import logging

from fastapi import APIRouter, HTTPException, status
from pymongo.errors import PyMongoError

from broadcast_portal_api.app.core.mailer import MailDeliveryError
from broadcast_portal_api.app.schemas.verification import (
    VerificationConfirm,
    VerificationRequest,
    VerificationSent,
    VerificationToken,
)
from broadcast_portal_api.app.services.verification_service import (
    VerificationError,
    VerificationService,
)


router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/email-verification",
    response_model=VerificationSent,
    response_model_exclude_none=True,
    summary="Mail a verification code",
)
async def request_code(data: VerificationRequest) -> VerificationSent:
    try:
        return await VerificationService.issue_code(data.email_addr)
    except VerificationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except MailDeliveryError:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Verification email could not be sent")
    except PyMongoError:
        logger.exception("Database error while issuing a verification code")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Request could not be processed")


@router.post("/email-verification/confirm", response_model=VerificationToken, summary="Confirm a verification code")
async def confirm_code(data: VerificationConfirm) -> VerificationToken:
    try:
        return await VerificationService.confirm_code(data.email_addr, data.code)
    except VerificationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except PyMongoError:
        logger.exception("Database error while confirming a verification code")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Request could not be processed")
