"""
Business logic for song requests.

Requests are grouped into one bucket document per calendar day
(``{date, requests: [...]}``).  A new request is checked against a
snapshot of today's bucket and the blacklist by ``check_song_request``
and, if accepted, appended with an atomic ``$push``.  The check and the
append are separate operations; two requests arriving at the same
moment may both pass the quota or duplicate checks.  At the volume of
one school that is accepted.

The same rules serve the morning broadcast board, which only differs
in the collection it writes to (``MorningSongRequestService``).
"""

import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from ..core.calendar import (
    bucket_key,
    display_student_number,
    from_epoch_millis,
    normalize_student_number,
    portal_today,
)
from ..core.config import settings
from ..core.db import MORNING_SONG_REQUESTS, SONG_REQUESTS, get_database
from ..schemas.common import Validity
from ..schemas.song_request import SongRequestCreate, SongRequestDelete, SongRequestRead
from .moderation_service import blacklisted_numbers


# Characters dropped from titles before comparing them.
TITLE_PUNCTUATION = frozenset("{}[]/?.,;:|)*~`!^-_+<>@#$%&\\=('\"")

MSG_LIMIT_REACHED = "오늘 신청이 마감되었습니다. ({limit}개)"
MSG_DUPLICATE_SONG = "동일한 신청곡이 존재합니다."
MSG_ALREADY_REQUESTED = "이미 신청하셨습니다."
MSG_BLACKLISTED = "블랙리스트에 등록되신 것 같습니다. 최근 신청 시 주의사항을 위반한 적이 있는지 확인해주세요"
MSG_DUPLICATE_SINGER = "동일한 가수의 신청곡이 존재합니다."


def normalize_title(title: str) -> str:
    """Uppercase ``title`` and drop punctuation and all whitespace.

    >>> normalize_title("Hello, World!")
    'HELLOWORLD'
    """
    upper = title.upper()
    kept = "".join(ch for ch in upper if ch not in TITLE_PUNCTUATION)
    return "".join(kept.split())


def check_song_request(
    request: Dict[str, Any],
    bucket: List[Dict[str, Any]],
    blacklist: Iterable[str],
    limit: Optional[int] = None,
) -> Validity:
    """Decide whether ``request`` may join today's ``bucket``.

    ``request`` must already carry the normalized (year-prefixed)
    ``studentNumber``.  Rules are checked in a fixed order and the
    first one that fails gives the message:

    1. the bucket holds ``limit`` requests already;
    2. a request with the same normalized title exists;
    3. the student already has a request in the bucket;
    4. the student is blacklisted;
    5. a request by the same singer exists (exact, case-sensitive match).
    """
    if limit is None:
        limit = settings.daily_request_limit
    student_number = request["studentNumber"]
    title = normalize_title(request["songTitle"])
    singer = request["singer"]

    if len(bucket) >= limit:
        return Validity(is_valid=False, message=MSG_LIMIT_REACHED.format(limit=limit))
    if any(normalize_title(req.get("songTitle", "")) == title for req in bucket):
        return Validity(is_valid=False, message=MSG_DUPLICATE_SONG)
    if any(req.get("studentNumber") == student_number for req in bucket):
        return Validity(is_valid=False, message=MSG_ALREADY_REQUESTED)
    if student_number in set(blacklist):
        return Validity(is_valid=False, message=MSG_BLACKLISTED)
    if any(req.get("singer") == singer for req in bucket):
        return Validity(is_valid=False, message=MSG_DUPLICATE_SINGER)
    return Validity(is_valid=True, message="")


class SongRequestService:
    """Service for the daily song request board."""

    collection = SONG_REQUESTS

    @classmethod
    def _load_bucket(cls, day: date) -> List[Dict[str, Any]]:
        doc = get_database()[cls.collection].find_one({"date": bucket_key(day)})
        if not doc:
            return []
        return doc.get("requests", [])

    @classmethod
    async def submit(cls, data: SongRequestCreate, requested_at: Optional[int] = None) -> Validity:
        """Validate a request against today's bucket and store it if accepted.

        ``requested_at`` is the client's epoch-milliseconds clock and
        becomes the record timestamp; the bucket day always comes from
        the server clock.
        """
        logger = logging.getLogger(__name__)
        today = portal_today()
        record = {
            "name": data.name,
            "studentNumber": normalize_student_number(data.student_number, today),
            "songTitle": data.song_title,
            "singer": data.singer,
            "imageUrl": data.image_url,
            "timestamp": from_epoch_millis(requested_at),
        }
        bucket = cls._load_bucket(today)
        validity = check_song_request(record, bucket, blacklisted_numbers())
        if not validity.is_valid:
            logger.info(
                "Rejected %s request from %s: %s",
                cls.collection,
                record["studentNumber"],
                validity.message,
            )
            return validity
        get_database()[cls.collection].update_one(
            {"date": bucket_key(today)},
            {"$push": {"requests": record}},
            upsert=True,
        )
        logger.info(
            "Stored %s request %r by %s from %s",
            cls.collection,
            data.song_title,
            data.singer,
            record["studentNumber"],
        )
        return validity

    @classmethod
    async def list_today(cls) -> List[SongRequestRead]:
        """Today's requests with student numbers in display form."""
        results: List[SongRequestRead] = []
        for req in cls._load_bucket(portal_today()):
            item = dict(req)
            item["studentNumber"] = display_student_number(req.get("studentNumber", ""))
            results.append(SongRequestRead.model_validate(item))
        return results

    @classmethod
    async def list_for_day(cls, day: date) -> List[SongRequestRead]:
        """Requests of any day, student numbers left in stored form."""
        return [SongRequestRead.model_validate(req) for req in cls._load_bucket(day)]

    @classmethod
    async def delete(cls, data: SongRequestDelete) -> Validity:
        """Withdraw today's requests matching both name and student number.

        Succeeds even when nothing matches.
        """
        logger = logging.getLogger(__name__)
        today = portal_today()
        student_number = normalize_student_number(data.student_number, today)
        result = get_database()[cls.collection].update_one(
            {"date": bucket_key(today)},
            {"$pull": {"requests": {"name": data.name, "studentNumber": student_number}}},
        )
        if result.modified_count:
            logger.info("Withdrew %s request of %s", cls.collection, student_number)
        return Validity(is_valid=True, message="")


class MorningSongRequestService(SongRequestService):
    """The morning broadcast board: same rules, separate store."""

    collection = MORNING_SONG_REQUESTS
