from datetime import datetime, timezone

import pytest
from httpx import AsyncClient

from broadcast_portal_api.app.core.calendar import normalize_student_number, portal_today
from broadcast_portal_api.app.core.config import settings
from tests.helpers import as_utc, suggestion_payload


def _stored(mongo):
    return mongo['suggestion_requests'].find_one({'_id': settings.suggestion_document_id})['requests']


@pytest.mark.asyncio
async def test_submit_suggestion(client: AsyncClient, api, mongo):
    payload = suggestion_payload(0)
    response = await client.post(f'{api}/suggestion-request', params={'date': 1704067200000}, json=payload)

    assert response.status_code == 200
    assert response.json() == {'isValid': True, 'message': '건의사항이 성공적으로 신청되었습니다.'}

    stored = _stored(mongo)
    assert len(stored) == 1
    assert stored[0]['answer'] == ''
    assert stored[0]['suggestion'] == payload['suggestion'].strip()
    assert stored[0]['studentNumber'] == normalize_student_number(payload['studentNumber'], portal_today())
    assert stored[0]['id']
    assert as_utc(stored[0]['timestamp']) == datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_list_suggestions(client: AsyncClient, api):
    first, second = suggestion_payload(0), suggestion_payload(1)
    await client.post(f'{api}/suggestion-request', json=first)
    await client.post(f'{api}/suggestion-request', json=second)

    response = await client.get(f'{api}/suggestion-request')
    assert response.status_code == 200
    data = response.json()
    assert [s['studentNumber'] for s in data] == [first['studentNumber'], second['studentNumber']]
    assert all(s['answer'] == '' for s in data)


@pytest.mark.asyncio
async def test_suggestions_are_not_limited_per_day(client: AsyncClient, api, mongo):
    for i in range(12):
        response = await client.post(f'{api}/suggestion-request', json=suggestion_payload(0))
        assert response.json()['isValid'] is True
    assert len(_stored(mongo)) == 12


@pytest.mark.asyncio
async def test_blacklisted_suggestion_rejected(client: AsyncClient, api, mongo):
    payload = suggestion_payload(0)
    mongo['blacklist'].update_one(
        {'_id': settings.blacklist_document_id},
        {'$push': {'entries': {
            'name': payload['name'],
            'studentNumber': normalize_student_number(payload['studentNumber'], portal_today()),
        }}},
    )
    response = await client.post(f'{api}/suggestion-request', json=payload)
    assert response.json() == {
        'isValid': False,
        'message': '블랙리스트에 등록되신 것 같습니다. 최근 신청 시 주의사항을 위반한 적이 있는지 확인해주세요',
    }
    assert _stored(mongo) == []


@pytest.mark.asyncio
async def test_blank_suggestion_rejected(client: AsyncClient, api):
    response = await client.post(f'{api}/suggestion-request', json=suggestion_payload(0, suggestion='   '))
    assert response.status_code == 422
