"""Credential Schemas — login form fields.

Invariants:
    - email is a syntactically valid address (email-validator via EmailStr)
    - password is at least 6 characters; it is never echoed back in errors or logs
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class Credentials(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: EmailStr
    password: str = Field(min_length=6, repr=False)
