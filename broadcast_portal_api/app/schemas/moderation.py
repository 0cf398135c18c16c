"""Pydantic schemas for operator moderation routes."""

from pydantic import BaseModel, ConfigDict, Field

from .common import STUDENT_NUMBER_PATTERN


class BlacklistEntryCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1)
    student_number: str = Field(..., alias="studentNumber", pattern=STUDENT_NUMBER_PATTERN)


class BlacklistEntryRead(BaseModel):
    """A blacklist entry; ``studentNumber`` keeps its year prefix."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    student_number: str = Field(..., alias="studentNumber")
