"""
Request portal - test configuration and fixtures.

The database is an in-memory ``mongomock`` client installed in place of
the shared ``MongoClient``; the SMTP relay is replaced per test.
"""
import os
from typing import AsyncGenerator, Dict, List

import mongomock
import pytest
from httpx import ASGITransport, AsyncClient

# Settings are read at import time, so the environment comes first.
os.environ['REQUIRE_VERIFICATION'] = 'false'
os.environ['EXPOSE_VERIFICATION_CODE'] = 'false'
os.environ['ADMIN_TOKEN'] = 'test-admin-token'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['SMTP_USER'] = 'club@example.com'
os.environ['SMTP_PASSWORD'] = 'smtp-password'
os.environ['EMAIL_FROM'] = 'club@example.com'
os.environ['DATABASE_NAME'] = 'broadcast_portal_test'

from broadcast_portal_api.app.core import db as db_module
from broadcast_portal_api.app.core.config import settings
from broadcast_portal_api.app.main import app
from broadcast_portal_api.app.services import verification_service




@pytest.fixture
def mongo():
    """Fresh in-memory database, initialised like on startup"""
    client = mongomock.MongoClient()
    db_module.set_client(client)
    db_module.init_db()
    yield client[settings.database_name]
    db_module.set_client(None)


@pytest.fixture
async def client(mongo) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client talking to the app in-process"""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac


@pytest.fixture
def api() -> str:
    return settings.api_prefix


@pytest.fixture
def sent_mail(monkeypatch) -> List[Dict[str, str]]:
    """Capture verification mails instead of talking to SMTP"""
    outbox: List[Dict[str, str]] = []

    async def fake_send(code: str, to_email: str) -> None:
        outbox.append({'code': code, 'to': to_email})

    monkeypatch.setattr(verification_service, 'send_verification_email', fake_send)
    return outbox


@pytest.fixture
def require_verification(monkeypatch):
    monkeypatch.setattr(settings, 'require_verification', True)


