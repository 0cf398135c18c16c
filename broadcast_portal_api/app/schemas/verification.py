"""Pydantic schemas for the email verification flow."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class VerificationRequest(BaseModel):
    """Ask for a code to be mailed.

    ``emailAddr`` is either the local part of a school address or a
    full address on the school domain.
    """

    model_config = ConfigDict(populate_by_name=True)

    email_addr: str = Field(..., alias="emailAddr", min_length=1, max_length=254)


class VerificationSent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sent: bool = True
    email_addr: str = Field(..., alias="emailAddr")
    code: Optional[str] = None


class VerificationConfirm(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email_addr: str = Field(..., alias="emailAddr", min_length=1, max_length=254)
    code: str = Field(..., pattern=r"^\d{6}$")


class VerificationToken(BaseModel):
    token: str
    expires_in: int
