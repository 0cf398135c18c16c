"""Pydantic schemas for membership applications."""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .common import STUDENT_NUMBER_PATTERN


class ApplicationCreate(BaseModel):
    """Schema for submitting an application form.

    The application file itself is uploaded to external storage by the
    client; only its URL and type are recorded here.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1)
    student_number: str = Field(..., alias="studentNumber", pattern=STUDENT_NUMBER_PATTERN)
    file_url: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("fileURL", "applicationFileURL", "file_url"),
        serialization_alias="fileURL",
    )
    file_type: str = Field(..., alias="fileType", min_length=1)


class ApplicationRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    student_number: str = Field(..., alias="studentNumber")
    file_url: str = Field(..., alias="fileURL")
    file_type: str = Field(..., alias="fileType")
    timestamp: Optional[datetime] = None


class ApplicationValidity(BaseModel):
    """The operator switch that opens or closes application intake."""

    model_config = ConfigDict(populate_by_name=True)

    is_valid: bool = Field(..., alias="isValid")
    message: str = Field("", description="Shown to applicants while intake is closed")
