"""
Shared response shapes.

Every submission route answers with a ``Validity`` object: ``isValid``
tells the client whether the submission was stored and ``message`` is
shown to the student verbatim (empty on plain success).
"""

from pydantic import BaseModel, ConfigDict, Field


STUDENT_NUMBER_PATTERN = r"^\d{5}$"


class Validity(BaseModel):
    """Outcome of a submission."""

    model_config = ConfigDict(populate_by_name=True)

    is_valid: bool = Field(..., alias="isValid")
    message: str = ""
