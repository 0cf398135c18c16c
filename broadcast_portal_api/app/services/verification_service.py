"""
Email verification with one-time codes.

A student proves they own a school mailbox in three steps:

1. ``issue_code`` mails a random 6-digit code to the address and keeps
   a keyed hash of it with an expiry;
2. ``confirm_code`` compares the code the student typed against the
   stored hash, discards the stored code and returns a signed
   *submission token* bound to the address;
3. a submission route accepts the token once (``claim_token``).

Codes are never stored in plain text.  Unless
``EXPOSE_VERIFICATION_CODE`` is set, they are never returned in an
HTTP response either.
"""

import hmac
import logging
import secrets
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pymongo.errors import DuplicateKeyError

from ..core.config import settings
from ..core.db import CONSUMED_TOKENS, VERIFICATION_CODES, get_database
from ..core.mailer import MailDeliveryError, send_verification_email
from ..core.security import create_access_token, hash_secret
from ..schemas.verification import VerificationSent, VerificationToken


class VerificationError(Exception):
    """A code or token was wrong, expired or already used."""


def generate_code() -> str:
    """Return a 6-digit decimal code, leading zeros allowed."""
    return f"{secrets.randbelow(1_000_000):06d}"


def school_address(email_addr: str) -> str:
    """Turn a mailbox name into a full school address.

    A full address is accepted only on the school domain.
    """
    email_addr = email_addr.strip().lower()
    domain = settings.school_email_domain.lower()
    if "@" in email_addr:
        local, _, given_domain = email_addr.partition("@")
        if given_domain != domain:
            raise VerificationError(f"Only @{settings.school_email_domain} addresses can be verified")
    else:
        local = email_addr
    if not local or any(ch.isspace() for ch in local):
        raise VerificationError("Invalid email address")
    return f"{local}@{domain}"


class VerificationService:
    """Service issuing and checking verification codes and tokens."""

    @classmethod
    async def issue_code(cls, email_addr: str) -> VerificationSent:
        """Mail a fresh code to ``email_addr``, replacing any earlier one.

        Raises
        ------
        VerificationError
            If the address is not a school address.
        MailDeliveryError
            If the relay fails; the stored code is removed again.
        """
        logger = logging.getLogger(__name__)
        address = school_address(email_addr)
        code = generate_code()
        collection = get_database()[VERIFICATION_CODES]
        collection.replace_one(
            {"_id": address},
            {
                "_id": address,
                "codeHash": hash_secret(code),
                "expiresAt": time.time() + settings.verification_code_ttl_seconds,
                "attempts": 0,
            },
            upsert=True,
        )
        try:
            await send_verification_email(code, address)
        except MailDeliveryError:
            collection.delete_one({"_id": address})
            raise
        logger.info("Verification code issued for %s", address)
        return VerificationSent(
            sent=True,
            email_addr=address,
            code=code if settings.expose_verification_code else None,
        )

    @classmethod
    async def confirm_code(cls, email_addr: str, code: str) -> VerificationToken:
        """Exchange a correct code for a single-use submission token.

        A code can be confirmed once.  Wrong guesses count against
        ``VERIFICATION_MAX_ATTEMPTS``; once exhausted, or after expiry,
        the code is discarded.
        """
        logger = logging.getLogger(__name__)
        address = school_address(email_addr)
        collection = get_database()[VERIFICATION_CODES]
        doc = collection.find_one({"_id": address})
        if not doc:
            raise VerificationError("No verification code was issued for this address")
        if doc.get("expiresAt", 0) < time.time():
            collection.delete_one({"_id": address})
            raise VerificationError("Verification code expired")
        if not hmac.compare_digest(doc.get("codeHash", ""), hash_secret(code)):
            attempts = doc.get("attempts", 0) + 1
            if attempts >= settings.verification_max_attempts:
                collection.delete_one({"_id": address})
                logger.warning("Too many wrong verification codes for %s", address)
            else:
                collection.update_one({"_id": address}, {"$set": {"attempts": attempts}})
            raise VerificationError("Verification code does not match")
        # Delete first so that two concurrent confirmations cannot both win.
        result = collection.delete_one({"_id": address, "codeHash": doc["codeHash"]})
        if result.deleted_count == 0:
            raise VerificationError("Verification code already used")
        token = create_access_token(
            {"sub": address, "purpose": "submission", "jti": uuid.uuid4().hex},
            expires_delta=settings.verification_token_ttl_seconds,
        )
        logger.info("Verification confirmed for %s", address)
        return VerificationToken(token=token, expires_in=settings.verification_token_ttl_seconds)

    @classmethod
    def claim_token(cls, payload: Optional[Dict[str, Any]]) -> None:
        """Mark a submission token as used.

        ``payload`` is the decoded token from the ``submission_token``
        dependency, or ``None`` when verification is disabled.
        """
        if payload is None:
            return
        try:
            get_database()[CONSUMED_TOKENS].insert_one(
                {
                    "_id": payload["jti"],
                    "email": payload.get("sub"),
                    "consumedAt": datetime.now(timezone.utc),
                }
            )
        except DuplicateKeyError as e:
            raise VerificationError("Verification token already used") from e

    @classmethod
    def release_token(cls, payload: Optional[Dict[str, Any]]) -> None:
        """Undo ``claim_token`` for a submission that was not stored."""
        if payload is None:
            return
        get_database()[CONSUMED_TOKENS].delete_one({"_id": payload["jti"]})
