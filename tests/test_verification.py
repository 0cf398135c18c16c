import pytest
from httpx import AsyncClient
from pymongo.errors import ServerSelectionTimeoutError

from broadcast_portal_api.app.core import mailer
from broadcast_portal_api.app.core.config import settings
from broadcast_portal_api.app.core.mailer import MailDeliveryError, build_verification_message
from broadcast_portal_api.app.core.security import create_access_token, decode_access_token
from broadcast_portal_api.app.services import verification_service
from broadcast_portal_api.app.services.song_request_service import SongRequestService
from broadcast_portal_api.app.services.verification_service import (
    VerificationError,
    generate_code,
    school_address,
)
from tests.helpers import application_payload, song_payload, suggestion_payload


async def _verify(client: AsyncClient, api: str, sent_mail, local_part: str = 'student1') -> str:
    response = await client.post(f'{api}/email-verification', json={'emailAddr': local_part})
    assert response.status_code == 200
    code = sent_mail[-1]['code']
    response = await client.post(
        f'{api}/email-verification/confirm',
        json={'emailAddr': local_part, 'code': code},
    )
    assert response.status_code == 200
    return response.json()['token']


def test_generate_code_shape():
    for _ in range(50):
        code = generate_code()
        assert len(code) == 6 and code.isdigit()


def test_school_address():
    assert school_address('student1') == f'student1@{settings.school_email_domain}'
    assert school_address(f'Student1@{settings.school_email_domain.upper()}') == f'student1@{settings.school_email_domain}'
    with pytest.raises(VerificationError):
        school_address('student1@gmail.com')
    with pytest.raises(VerificationError):
        school_address('two words')


def test_verification_message():
    message = build_verification_message('012345', 'student1@school.example')
    assert message['To'] == 'student1@school.example'
    assert message['Subject'] == mailer.VERIFICATION_SUBJECT
    assert '012345' in message.get_payload(decode=True).decode('utf-8')


def test_tampered_token_rejected():
    token = create_access_token({'sub': 'a@b', 'purpose': 'submission', 'jti': 'x'})
    assert decode_access_token(token)['sub'] == 'a@b'
    header, payload, signature = token.split('.')
    assert decode_access_token(f'{header}.{payload}x.{signature}') is None
    assert decode_access_token('not-a-token') is None


def test_expired_token_rejected():
    token = create_access_token({'sub': 'a@b'}, expires_delta=-10)
    assert decode_access_token(token) is None


@pytest.mark.asyncio
async def test_code_is_mailed_not_returned(client: AsyncClient, api, mongo, sent_mail):
    response = await client.post(f'{api}/email-verification', json={'emailAddr': 'student1'})

    assert response.status_code == 200
    body = response.json()
    assert body == {'sent': True, 'emailAddr': f'student1@{settings.school_email_domain}'}
    assert sent_mail[0]['to'] == f'student1@{settings.school_email_domain}'
    stored = mongo['verification_codes'].find_one({'_id': body['emailAddr']})
    assert stored['codeHash'] != sent_mail[0]['code']


@pytest.mark.asyncio
async def test_code_exposed_for_legacy_clients(client: AsyncClient, api, sent_mail, monkeypatch):
    monkeypatch.setattr(settings, 'expose_verification_code', True)
    response = await client.post(f'{api}/email-verification', json={'emailAddr': 'student1'})
    assert response.json()['code'] == sent_mail[0]['code']


@pytest.mark.asyncio
async def test_foreign_domain_rejected(client: AsyncClient, api, sent_mail):
    response = await client.post(f'{api}/email-verification', json={'emailAddr': 'someone@gmail.com'})
    assert response.status_code == 400
    assert sent_mail == []


@pytest.mark.asyncio
async def test_mail_failure(client: AsyncClient, api, mongo, monkeypatch):
    async def failing_send(code, to_email):
        raise MailDeliveryError('relay down')

    monkeypatch.setattr(verification_service, 'send_verification_email', failing_send)
    response = await client.post(f'{api}/email-verification', json={'emailAddr': 'student1'})
    assert response.status_code == 502
    assert mongo['verification_codes'].count_documents({}) == 0


@pytest.mark.asyncio
async def test_unconfigured_relay(client: AsyncClient, api, monkeypatch):
    monkeypatch.setattr(settings, 'smtp_password', '')
    response = await client.post(f'{api}/email-verification', json={'emailAddr': 'student1'})
    assert response.status_code == 502


@pytest.mark.asyncio
async def test_confirm_once(client: AsyncClient, api, mongo, sent_mail):
    await client.post(f'{api}/email-verification', json={'emailAddr': 'student1'})
    code = sent_mail[0]['code']

    response = await client.post(f'{api}/email-verification/confirm', json={'emailAddr': 'student1', 'code': code})
    assert response.status_code == 200
    claims = decode_access_token(response.json()['token'])
    assert claims['sub'] == f'student1@{settings.school_email_domain}'
    assert claims['purpose'] == 'submission'

    again = await client.post(f'{api}/email-verification/confirm', json={'emailAddr': 'student1', 'code': code})
    assert again.status_code == 400


@pytest.mark.asyncio
async def test_new_code_replaces_old(client: AsyncClient, api, sent_mail):
    await client.post(f'{api}/email-verification', json={'emailAddr': 'student1'})
    await client.post(f'{api}/email-verification', json={'emailAddr': 'student1'})
    old, new = sent_mail[0]['code'], sent_mail[1]['code']
    if old != new:
        stale = await client.post(f'{api}/email-verification/confirm', json={'emailAddr': 'student1', 'code': old})
        assert stale.status_code == 400
    fresh = await client.post(f'{api}/email-verification/confirm', json={'emailAddr': 'student1', 'code': new})
    assert fresh.status_code == 200


@pytest.mark.asyncio
async def test_wrong_code_attempts_exhausted(client: AsyncClient, api, mongo, sent_mail):
    await client.post(f'{api}/email-verification', json={'emailAddr': 'student1'})
    code = sent_mail[0]['code']
    wrong = '000000' if code != '000000' else '111111'

    for _ in range(settings.verification_max_attempts):
        response = await client.post(f'{api}/email-verification/confirm', json={'emailAddr': 'student1', 'code': wrong})
        assert response.status_code == 400

    assert mongo['verification_codes'].count_documents({}) == 0
    response = await client.post(f'{api}/email-verification/confirm', json={'emailAddr': 'student1', 'code': code})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_expired_code(client: AsyncClient, api, mongo, sent_mail):
    await client.post(f'{api}/email-verification', json={'emailAddr': 'student1'})
    mongo['verification_codes'].update_many({}, {'$set': {'expiresAt': 0}})
    response = await client.post(
        f'{api}/email-verification/confirm',
        json={'emailAddr': 'student1', 'code': sent_mail[0]['code']},
    )
    assert response.status_code == 400
    assert 'expired' in response.json()['detail']


@pytest.mark.asyncio
async def test_submission_requires_token(client: AsyncClient, api, require_verification):
    response = await client.post(f'{api}/song-request', json=song_payload(0))
    assert response.status_code == 401

    response = await client.post(
        f'{api}/song-request', json=song_payload(0), headers={'X-Verification-Token': 'garbage'},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_token_accepted_once(client: AsyncClient, api, sent_mail, require_verification):
    token = await _verify(client, api, sent_mail)
    headers = {'X-Verification-Token': token}

    response = await client.post(f'{api}/song-request', json=song_payload(0), headers=headers)
    assert response.json() == {'isValid': True, 'message': ''}

    response = await client.post(f'{api}/suggestion-request', json=suggestion_payload(0), headers=headers)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_rejected_submission_keeps_token(client: AsyncClient, api, sent_mail, mongo, monkeypatch):
    await client.post(f'{api}/song-request', json=song_payload(0, songTitle='Hello'))
    monkeypatch.setattr(settings, 'require_verification', True)
    token = await _verify(client, api, sent_mail)
    headers = {'X-Verification-Token': token}

    rejected = await client.post(f'{api}/song-request', json=song_payload(1, songTitle='HELLO'), headers=headers)
    assert rejected.json()['isValid'] is False

    accepted = await client.post(f'{api}/song-request', json=song_payload(1), headers=headers)
    assert accepted.json()['isValid'] is True
    assert mongo['consumed_tokens'].count_documents({}) == 1


@pytest.mark.asyncio
async def test_application_with_token(client: AsyncClient, api, sent_mail, require_verification):
    token = await _verify(client, api, sent_mail)
    response = await client.post(
        f'{api}/submit-application', json=application_payload(0), headers={'X-Verification-Token': token},
    )
    assert response.json() == {'isValid': True, 'message': ''}


@pytest.mark.asyncio
async def test_morning_board_needs_no_token(client: AsyncClient, api, require_verification):
    response = await client.post(f'{api}/morning-song-request', json=song_payload(0))
    assert response.json()['isValid'] is True


@pytest.mark.asyncio
async def test_token_survives_storage_failure(client: AsyncClient, api, sent_mail, mongo, monkeypatch,
                                              require_verification):
    token = await _verify(client, api, sent_mail)
    headers = {'X-Verification-Token': token}
    load_bucket = SongRequestService._load_bucket
    calls = []

    def flaky(day):
        calls.append(day)
        if len(calls) == 1:
            raise ServerSelectionTimeoutError('no servers')
        return load_bucket(day)

    monkeypatch.setattr(SongRequestService, '_load_bucket', flaky)

    response = await client.post(f'{api}/song-request', json=song_payload(0), headers=headers)
    assert response.status_code == 500
    assert mongo['consumed_tokens'].count_documents({}) == 0

    response = await client.post(f'{api}/song-request', json=song_payload(0), headers=headers)
    assert response.json() == {'isValid': True, 'message': ''}
    assert mongo['consumed_tokens'].count_documents({}) == 1


@pytest.mark.asyncio
async def test_out_of_range_clock_keeps_token(client: AsyncClient, api, sent_mail, mongo, require_verification):
    token = await _verify(client, api, sent_mail)
    headers = {'X-Verification-Token': token}

    response = await client.post(f'{api}/suggestion-request', params={'date': 10 ** 18},
                                 json=suggestion_payload(0), headers=headers)
    assert response.status_code == 422
    assert mongo['consumed_tokens'].count_documents({}) == 0

    response = await client.post(f'{api}/suggestion-request', json=suggestion_payload(0), headers=headers)
    assert response.json()['isValid'] is True
