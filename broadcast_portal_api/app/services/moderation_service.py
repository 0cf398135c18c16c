"""
Operator-controlled moderation data.

Two pieces of configuration live in the database rather than in the
environment because club operators change them while the portal runs:

* the **blacklist**, a list of ``{name, studentNumber}`` entries kept in
  one document; members may not submit song requests or suggestions;
* the **application validity flag**, ``{isValid, message}``, which
  opens or closes membership application intake.

Both are read fresh on every request.  Nothing here is cached in
process, so a change made through one server instance is seen by all
of them immediately.
"""

import logging
from typing import Any, Dict, List, Set

from ..core.calendar import normalize_student_number, portal_today
from ..core.config import settings
from ..core.db import BLACKLIST, VALIDITY_FLAGS, get_database
from ..schemas.application import ApplicationValidity
from ..schemas.moderation import BlacklistEntryCreate, BlacklistEntryRead


def load_blacklist() -> List[Dict[str, Any]]:
    """Return the raw blacklist entries (empty if the document is missing)."""
    doc = get_database()[BLACKLIST].find_one({"_id": settings.blacklist_document_id})
    if not doc:
        return []
    return doc.get("entries", [])


def blacklisted_numbers() -> Set[str]:
    return {entry.get("studentNumber") for entry in load_blacklist()}


def load_application_validity() -> ApplicationValidity:
    """Read the application flag.  A missing flag means intake is open."""
    doc = get_database()[VALIDITY_FLAGS].find_one({"_id": settings.application_flag_id})
    if not doc:
        return ApplicationValidity(is_valid=True, message="")
    return ApplicationValidity(is_valid=bool(doc.get("isValid", True)), message=doc.get("message") or "")


class ModerationService:
    """Service for the blacklist and the application validity flag."""

    @classmethod
    async def list_blacklist(cls) -> List[BlacklistEntryRead]:
        return [BlacklistEntryRead.model_validate(entry) for entry in load_blacklist()]

    @classmethod
    async def add_to_blacklist(cls, data: BlacklistEntryCreate) -> BlacklistEntryRead:
        """Add a student to the blacklist.

        The student number is stored in its year-prefixed form.  Adding
        a number that is already listed leaves the list unchanged.
        """
        logger = logging.getLogger(__name__)
        student_number = normalize_student_number(data.student_number, portal_today())
        entry = {"name": data.name, "studentNumber": student_number}
        for existing in load_blacklist():
            if existing.get("studentNumber") == student_number:
                return BlacklistEntryRead.model_validate(existing)
        get_database()[BLACKLIST].update_one(
            {"_id": settings.blacklist_document_id},
            {"$push": {"entries": entry}},
            upsert=True,
        )
        logger.info("Student %s added to blacklist", student_number)
        return BlacklistEntryRead.model_validate(entry)

    @classmethod
    async def remove_from_blacklist(cls, student_number: str) -> None:
        """Remove every entry with ``student_number``.

        Accepts either the stored prefixed form or a raw 5-digit number,
        which is prefixed with the current year.
        """
        logger = logging.getLogger(__name__)
        stored = normalize_student_number(student_number, portal_today())
        result = get_database()[BLACKLIST].update_one(
            {"_id": settings.blacklist_document_id},
            {"$pull": {"entries": {"studentNumber": stored}}},
        )
        if result.modified_count == 0:
            raise ValueError(f"Student {stored} not found in blacklist")
        logger.info("Student %s removed from blacklist", stored)

    @classmethod
    async def get_application_validity(cls) -> ApplicationValidity:
        return load_application_validity()

    @classmethod
    async def set_application_validity(cls, data: ApplicationValidity) -> ApplicationValidity:
        """Open or close application intake."""
        logger = logging.getLogger(__name__)
        get_database()[VALIDITY_FLAGS].update_one(
            {"_id": settings.application_flag_id},
            {"$set": {"isValid": data.is_valid, "message": data.message}},
            upsert=True,
        )
        logger.info("Application intake %s", "opened" if data.is_valid else "closed")
        return data
