"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
portal starts against a local MongoDB without any setup.  In a
deployment, override these via environment variables.

Singleton documents (blacklist, suggestion list, application list and
the application validity flag) are addressed by fixed identifiers.
They are configuration embedded as data, so their identifiers are
configurable here rather than hardcoded in the services.
"""

import os
from dataclasses import dataclass


def _as_bool(value: str) -> bool:
    return value.lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Broadcast Club Request Portal")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    api_prefix: str = os.getenv("API_PREFIX", "/api/v1")
    debug: bool = _as_bool(os.getenv("DEBUG", "false"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")
    secret_key: str = os.getenv("SECRET_KEY", "change_me")

    # Static bearer token for the moderation routes.  When empty, every
    # admin route answers 401.
    admin_token: str = os.getenv("ADMIN_TOKEN", "")

    # Comma‑separated list of allowed CORS origins ("*" for any).
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")

    database_url: str = os.getenv("DATABASE_URL", "mongodb://localhost:27017")
    database_name: str = os.getenv("DATABASE_NAME", "broadcast_portal")
    database_timeout_ms: int = int(os.getenv("DATABASE_TIMEOUT_MS", "5000"))

    # Daily buckets and the student number year prefix are computed in
    # this timezone.  It is passed explicitly to every date computation;
    # the process timezone is never changed.
    portal_timezone: str = os.getenv("PORTAL_TIMEZONE", "Asia/Seoul")
    daily_request_limit: int = int(os.getenv("DAILY_REQUEST_LIMIT", "10"))

    school_email_domain: str = os.getenv("SCHOOL_EMAIL_DOMAIN", "seoun.sen.ms.kr")
    smtp_host: str = os.getenv("SMTP_HOST", "smtp.gmail.com")
    smtp_port: int = int(os.getenv("SMTP_PORT", "587"))
    smtp_user: str = os.getenv("SMTP_USER", os.getenv("EMAIL", ""))
    smtp_password: str = os.getenv("SMTP_PASSWORD", os.getenv("EMAIL_PASSWORD", ""))
    email_from: str = os.getenv("EMAIL_FROM", os.getenv("EMAIL", ""))

    # Submission routes demand a token obtained from a confirmed
    # verification code.  Disable only for local development.
    require_verification: bool = _as_bool(os.getenv("REQUIRE_VERIFICATION", "true"))
    # Older clients compared the code themselves and expect it in the
    # response body.  Leave off unless such a client must be served.
    expose_verification_code: bool = _as_bool(os.getenv("EXPOSE_VERIFICATION_CODE", "false"))
    verification_code_ttl_seconds: int = int(os.getenv("VERIFICATION_CODE_TTL_SECONDS", "300"))
    verification_token_ttl_seconds: int = int(os.getenv("VERIFICATION_TOKEN_TTL_SECONDS", "900"))
    verification_max_attempts: int = int(os.getenv("VERIFICATION_MAX_ATTEMPTS", "5"))

    blacklist_document_id: str = os.getenv("BLACKLIST_DOCUMENT_ID", "blacklist")
    suggestion_document_id: str = os.getenv("SUGGESTION_DOCUMENT_ID", "suggestions")
    application_document_id: str = os.getenv("APPLICATION_DOCUMENT_ID", "applications")
    application_flag_id: str = os.getenv("APPLICATION_FLAG_ID", "application")


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# must be set before importing this module.
settings = Settings()
