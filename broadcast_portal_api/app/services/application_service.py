"""
Business logic for membership applications.

Applications have no per-submission rules.  Intake as a whole is
gated by the operator's validity flag, which is read from the database
on every submission.
"""

import logging
from typing import List, Optional

from ..core.calendar import from_epoch_millis, normalize_student_number, portal_today
from ..core.config import settings
from ..core.db import APPLICATIONS, get_database
from ..schemas.application import ApplicationCreate, ApplicationRead
from ..schemas.common import Validity
from .moderation_service import load_application_validity


class ApplicationService:
    """Service for membership applications."""

    @classmethod
    async def submit(cls, data: ApplicationCreate, requested_at: Optional[int] = None) -> Validity:
        """Append an application unless intake is closed.

        When the flag is closed its message is returned and the
        applications document is not touched.
        """
        logger = logging.getLogger(__name__)
        flag = load_application_validity()
        if not flag.is_valid:
            logger.info("Application from %s refused: intake closed", data.student_number)
            return Validity(is_valid=False, message=flag.message)
        record = {
            "name": data.name,
            "studentNumber": normalize_student_number(data.student_number, portal_today()),
            "fileURL": data.file_url,
            "fileType": data.file_type,
            "timestamp": from_epoch_millis(requested_at),
        }
        get_database()[APPLICATIONS].update_one(
            {"_id": settings.application_document_id},
            {"$push": {"applications": record}},
            upsert=True,
        )
        logger.info("Stored application from %s", record["studentNumber"])
        return Validity(is_valid=True, message="")

    @classmethod
    async def list_applications(cls) -> List[ApplicationRead]:
        doc = get_database()[APPLICATIONS].find_one({"_id": settings.application_document_id})
        if not doc:
            return []
        return [ApplicationRead.model_validate(item) for item in doc.get("applications", [])]
