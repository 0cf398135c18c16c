"""
Business logic for club suggestions.

All suggestions share one ever-growing list in a single document; they
are not partitioned by day.  The only submission rule is the blacklist.
Moderators answer suggestions by id.
"""

import logging
import uuid
from typing import List, Optional

from ..core.calendar import (
    display_student_number,
    from_epoch_millis,
    normalize_student_number,
    portal_today,
)
from ..core.config import settings
from ..core.db import SUGGESTION_REQUESTS, get_database
from ..schemas.common import Validity
from ..schemas.suggestion import SuggestionCreate, SuggestionRead
from .moderation_service import blacklisted_numbers
from .song_request_service import MSG_BLACKLISTED


MSG_SUGGESTION_STORED = "건의사항이 성공적으로 신청되었습니다."


class SuggestionService:
    """Service for suggestions and their answers."""

    @classmethod
    async def submit(cls, data: SuggestionCreate, requested_at: Optional[int] = None) -> Validity:
        logger = logging.getLogger(__name__)
        student_number = normalize_student_number(data.student_number, portal_today())
        if student_number in blacklisted_numbers():
            logger.info("Rejected suggestion from blacklisted student %s", student_number)
            return Validity(is_valid=False, message=MSG_BLACKLISTED)
        record = {
            "id": uuid.uuid4().hex,
            "name": data.name,
            "studentNumber": student_number,
            "suggestion": data.suggestion,
            "answer": "",
            "timestamp": from_epoch_millis(requested_at),
        }
        get_database()[SUGGESTION_REQUESTS].update_one(
            {"_id": settings.suggestion_document_id},
            {"$push": {"requests": record}},
            upsert=True,
        )
        logger.info("Stored suggestion %s from %s", record["id"], student_number)
        return Validity(is_valid=True, message=MSG_SUGGESTION_STORED)

    @classmethod
    async def list_suggestions(cls) -> List[SuggestionRead]:
        """Every suggestion, oldest first, with display student numbers."""
        doc = get_database()[SUGGESTION_REQUESTS].find_one({"_id": settings.suggestion_document_id})
        if not doc:
            return []
        results: List[SuggestionRead] = []
        for req in doc.get("requests", []):
            item = dict(req)
            item["studentNumber"] = display_student_number(req.get("studentNumber", ""))
            results.append(SuggestionRead.model_validate(item))
        return results

    @classmethod
    async def answer(cls, suggestion_id: str, answer: str) -> SuggestionRead:
        """Store a moderator's answer to one suggestion.

        Raises ``ValueError`` if no suggestion has ``suggestion_id``.
        """
        logger = logging.getLogger(__name__)
        collection = get_database()[SUGGESTION_REQUESTS]
        result = collection.update_one(
            {"_id": settings.suggestion_document_id, "requests.id": suggestion_id},
            {"$set": {"requests.$.answer": answer}},
        )
        if result.matched_count == 0:
            raise ValueError(f"Suggestion {suggestion_id} not found")
        logger.info("Answered suggestion %s", suggestion_id)
        for item in await cls.list_suggestions():
            if item.id == suggestion_id:
                return item
        raise ValueError(f"Suggestion {suggestion_id} not found")
