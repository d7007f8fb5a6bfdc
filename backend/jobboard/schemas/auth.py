from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from jobboard.enums import Role
from jobboard.schemas.profile import ProfileResponse

# bcrypt only reads the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    full_name: str = Field(alias="fullName", min_length=1)
    role: Optional[Role] = None

    class Config:
        populate_by_name = True
        use_enum_values = True

    @field_validator("full_name")
    @classmethod
    def strip_full_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("fullName must not be empty")
        return value

    @field_validator("password")
    @classmethod
    def check_password_length(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        return value


class SignInRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class SessionResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    expires_at: int

    class Config:
        from_attributes = True


class UserResponse(BaseModel):
    id: str
    email: str
    user_metadata: Dict[str, Any] = {}
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SignUpResponse(BaseModel):
    user: UserResponse
    session: SessionResponse
    message: str = "Account created successfully"


class SignInResponse(BaseModel):
    user: UserResponse
    session: SessionResponse
    profile: Optional[ProfileResponse] = None


class CurrentUserResponse(BaseModel):
    user: UserResponse
    profile: ProfileResponse
