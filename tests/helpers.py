"""Payload builders shared by the API tests."""
from datetime import datetime, timezone
from typing import Dict

from faker import Faker

fake = Faker('ko_KR')

ADMIN_HEADERS = {'Authorization': 'Bearer test-admin-token'}


def song_payload(index: int = 0, **overrides) -> Dict[str, str]:
    """A valid song request; different indexes never collide"""
    payload = {
        'name': fake.name(),
        'studentNumber': f'{10100 + index:05d}',
        'songTitle': f'Song {chr(65 + index)}',
        'singer': f'Singer {index}',
        'imageUrl': f'https://i.scdn.co/image/{index}',
    }
    payload.update(overrides)
    return payload


def suggestion_payload(index: int = 0, **overrides) -> Dict[str, str]:
    payload = {
        'name': fake.name(),
        'studentNumber': f'{20200 + index:05d}',
        'suggestion': fake.sentence(),
    }
    payload.update(overrides)
    return payload


def application_payload(index: int = 0, **overrides) -> Dict[str, str]:
    payload = {
        'name': fake.name(),
        'studentNumber': f'{30300 + index:05d}',
        'fileURL': f'https://storage.example.com/applications/{index}.pdf',
        'fileType': 'application/pdf',
    }
    payload.update(overrides)
    return payload


def as_utc(value: datetime) -> datetime:
    """Stored timestamps may come back naive (UTC) from the in-memory client"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
