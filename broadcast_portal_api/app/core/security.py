"""
Security helpers for signed tokens and operator authentication.

This module implements a lightweight JSON Web Token (JWT) mechanism
using HMAC‑SHA256 signatures and base64url encoding.  Tokens embed
arbitrary claims and an expiration timestamp (``exp``).  The secret
key from the application settings signs and verifies every token.

Two kinds of callers are authenticated here:

* students, who present a short-lived *submission token* in the
  ``X-Verification-Token`` header after confirming an emailed code;
* club operators, who present the static ``ADMIN_TOKEN`` as a bearer
  token on the moderation routes.
"""

import base64
import hashlib
import hmac
import json
import time
from typing import Any, Dict, Optional

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import settings


def _b64_url_encode(data: bytes) -> str:
    """Base64‑url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64‑url encoded string, adding padding if necessary."""
    padding = '=' * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    """Compute HMAC‑SHA256 signature of a message using the given secret."""
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def hash_secret(value: str) -> str:
    """Keyed hash of a short secret (e.g. a verification code) for storage."""
    return _sign(value.encode("utf-8"), settings.secret_key).hex()


def create_access_token(data: Dict[str, Any], expires_delta: Optional[int] = None) -> str:
    """Create a signed JWT token with the given payload.

    The payload is extended with an ``exp`` field representing the
    expiration time as a UNIX timestamp.  The token is a string of the
    form ``header.payload.signature``, where each part is base64url
    encoded.

    Parameters
    ----------
    data : dict
        Claims to embed in the token (e.g. ``{"sub": "student@school"}``).
    expires_delta : Optional[int]
        Lifetime of the token in seconds.  Defaults to
        ``settings.verification_token_ttl_seconds``.
    """
    to_encode = data.copy()
    exp_seconds = expires_delta or settings.verification_token_ttl_seconds
    to_encode["exp"] = int(time.time()) + exp_seconds
    header = {"alg": "HS256", "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(',', ':')).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(to_encode, separators=(',', ':')).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature = _sign(signing_input, settings.secret_key)
    signature_b64 = _b64_url_encode(signature)
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Verify and decode a JWT token.

    Returns the payload dictionary if the signature matches and the
    token has not expired, otherwise ``None``.
    """
    try:
        parts = token.split('.')
        if len(parts) != 3:
            return None
        header_b64, payload_b64, signature_b64 = parts
        signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
        expected_sig = _sign(signing_input, settings.secret_key)
        actual_sig = _b64_url_decode(signature_b64)
        if not hmac.compare_digest(expected_sig, actual_sig):
            return None
        data = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
        if data.get("exp") is None or int(data["exp"]) < int(time.time()):
            return None
        return data
    except (ValueError, TypeError):
        # Malformed base64 or JSON
        return None


def submission_token(
    x_verification_token: Optional[str] = Header(None),
) -> Optional[Dict[str, Any]]:
    """Dependency that validates the submission token header.

    Returns the decoded claims, or ``None`` when verification is
    disabled.  Whether the token was already used is checked by the
    verification service when the submission is accepted.
    """
    if not settings.require_verification:
        return None
    if not x_verification_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Email verification required",
        )
    payload = decode_access_token(x_verification_token)
    if not payload or payload.get("purpose") != "submission" or not payload.get("jti"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired verification token",
        )
    return payload


security = HTTPBearer(auto_error=False)


def require_admin(credentials: HTTPAuthorizationCredentials = Depends(security)) -> Dict[str, str]:
    """Dependency that admits only the holder of ``ADMIN_TOKEN``."""
    if credentials is None or not settings.admin_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not hmac.compare_digest(credentials.credentials.encode("utf-8"), settings.admin_token.encode("utf-8")):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return {"sub": "admin"}
