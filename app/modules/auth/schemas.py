from pydantic import BaseModel, Field, field_validator
from typing import Optional

from app.core.phone import normalize_phone


class OtpRequest(BaseModel):
    phone: str

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        return normalize_phone(v)


class OtpResponse(BaseModel):
    phone: str
    message: str


class VerifyRequest(BaseModel):
    phone: str
    code: str = Field(min_length=4, max_length=10)
    display_name: Optional[str] = Field(default=None, max_length=40)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        return normalize_phone(v)


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    user_id: str
    phone: str
    is_new_user: bool = False
