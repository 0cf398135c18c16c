"""
Pydantic schemas for club suggestions.

A suggestion is free text addressed to the club.  Moderators reply by
filling ``answer``, which stays empty until then.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import STUDENT_NUMBER_PATTERN


class SuggestionCreate(BaseModel):
    """Schema for submitting a suggestion."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1)
    student_number: str = Field(..., alias="studentNumber", pattern=STUDENT_NUMBER_PATTERN)
    suggestion: str = Field(..., min_length=1, max_length=2000)

    @field_validator("suggestion")
    @classmethod
    def strip_suggestion(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Suggestion must not be blank")
        return v


class SuggestionRead(BaseModel):
    """Schema for reading a suggestion."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    name: str
    student_number: str = Field(..., alias="studentNumber")
    suggestion: str
    answer: str = ""
    timestamp: Optional[datetime] = None


class SuggestionAnswer(BaseModel):
    """Schema for a moderator's reply."""

    answer: str = Field(..., min_length=1, max_length=2000)
