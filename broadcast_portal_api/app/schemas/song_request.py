"""
Pydantic schemas for song requests.

Field aliases follow the JSON contract of the request forms
(``studentNumber``, ``songTitle``, ``imageUrl``).  Incoming student
numbers are the raw 5-digit form; the service adds the year prefix
before storing or comparing them.
"""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .common import STUDENT_NUMBER_PATTERN


class SongRequestCreate(BaseModel):
    """Schema for submitting a song request."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, description="Requester's name")
    student_number: str = Field(
        ..., alias="studentNumber", pattern=STUDENT_NUMBER_PATTERN, description="5-digit student number"
    )
    song_title: str = Field(..., alias="songTitle", min_length=1)
    singer: str = Field(..., min_length=1)
    image_url: str = Field(
        "",
        validation_alias=AliasChoices("imageUrl", "imgSrc", "image_url"),
        serialization_alias="imageUrl",
        description="Album art URL picked from the music search",
    )

    @field_validator("name", "song_title")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field must not be blank")
        return v

    @field_validator("singer")
    @classmethod
    def singer_not_blank(cls, v: str) -> str:
        # Kept verbatim: singers are compared exactly.
        if not v.strip():
            raise ValueError("Field must not be blank")
        return v


class SongRequestDelete(BaseModel):
    """Schema for withdrawing a song request."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1)
    student_number: str = Field(..., alias="studentNumber", pattern=STUDENT_NUMBER_PATTERN)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field must not be blank")
        return v


class SongRequestRead(BaseModel):
    """A stored song request as returned by the API."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    student_number: str = Field(..., alias="studentNumber")
    song_title: str = Field(..., alias="songTitle")
    singer: str
    image_url: str = Field("", alias="imageUrl")
    timestamp: Optional[datetime] = None
