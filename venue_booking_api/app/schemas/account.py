"""
Pydantic models for customer and organizer accounts.

Customers (``users``) and organizers share the same registration and
login payloads.  Passwords must be at least eight characters and mix
upper and lower case letters, a digit and one of ``@$!%*?&``.
"""

import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
PHONE_PATTERN = r"^\+?[\d\s\-\(\)]+$"
_PASSWORD_RULE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}$")


def check_password_strength(value: str) -> str:
    if not _PASSWORD_RULE.match(value):
        raise ValueError(
            "Password must contain at least one uppercase letter, one lowercase letter, "
            "one number and one special character (@$!%*?&)"
        )
    return value


class AccountRegister(BaseModel):
    name: str = Field(..., min_length=2, max_length=100, examples=["Jane Doe"])
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN, examples=["jane@example.com"])
    password: str = Field(..., min_length=8, max_length=128, examples=["Str0ng!Pass"])
    phone: Optional[str] = Field(None, max_length=30, pattern=PHONE_PATTERN, examples=["+8801712345678"])

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Name must be at least 2 characters")
        return value

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("password")
    @classmethod
    def strong_password(cls, value: str) -> str:
        return check_password_strength(value)


class AccountLogin(BaseModel):
    email: str = Field(..., pattern=EMAIL_PATTERN, examples=["jane@example.com"])
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return value.strip().lower()


class AccountRead(BaseModel):
    """Public view of an account; never includes the password hash."""

    id: int
    name: str
    email: str
    phone: Optional[str] = None
    created_at: datetime

    model_config = {
        "from_attributes": True,
    }


class AuthResponse(BaseModel):
    user: AccountRead
    token: str
    token_type: str = "bearer"


class OrganizerAuthResponse(BaseModel):
    organizer: AccountRead
    token: str
    token_type: str = "bearer"


class ProfileUpdate(BaseModel):
    """Partial profile update; omitted fields stay unchanged."""

    name: Optional[str] = Field(None, min_length=2, max_length=100)
    phone: Optional[str] = Field(None, max_length=30, pattern=PHONE_PATTERN)


class PasswordChange(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=128)

    @field_validator("new_password")
    @classmethod
    def strong_password(cls, value: str) -> str:
        return check_password_strength(value)
