from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationInfo, field_validator

PASSWORD_MIN_LENGTH = 6
# bcrypt only looks at the first 72 bytes of the secret
PASSWORD_MAX_BYTES = 72


class UserCreate(BaseModel):
    name: str = Field(..., max_length=255)
    email: EmailStr
    password: str
    password_confirmation: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name cannot be empty")
        return v.strip()

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        """Enforce the minimum length and bcrypt's 72-byte limit when UTF-8 encoded.

        Raise a validation error so API returns a 422 with a clear message.
        """
        if len(v) < PASSWORD_MIN_LENGTH:
            raise ValueError(f"password must be at least {PASSWORD_MIN_LENGTH} characters")
        if len(v.encode("utf-8")) > PASSWORD_MAX_BYTES:
            raise ValueError("password too long: must be at most 72 bytes when UTF-8 encoded")
        return v

    @field_validator("password_confirmation")
    @classmethod
    def passwords_match(cls, v, info: ValidationInfo):
        # password is absent from info.data when it failed its own validation
        if v is not None and "password" in info.data and v != info.data["password"]:
            raise ValueError("password confirmation does not match")
        return v


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserOut(BaseModel):
    id: int
    name: str
    email: EmailStr
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuthOut(BaseModel):
    user: UserOut
    token: str
    token_type: str = "bearer"
