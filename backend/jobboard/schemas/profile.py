from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from jobboard.schemas.common import Pagination


class ProfileSummary(BaseModel):
    id: str
    full_name: str
    email: str
    phone: Optional[str] = None
    location: Optional[str] = None
    skills: List[str] = []
    experience_years: int = 0
    avatar_url: Optional[str] = None

    class Config:
        from_attributes = True


class RecruiterSummary(BaseModel):
    full_name: str
    company_name: Optional[str] = None
    company_website: Optional[str] = None
    avatar_url: Optional[str] = None

    class Config:
        from_attributes = True


class ProfileResponse(BaseModel):
    id: str
    email: str
    full_name: str
    role: str
    phone: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    resume_url: Optional[str] = None
    skills: List[str] = []
    experience_years: int = 0
    company_name: Optional[str] = None
    company_website: Optional[str] = None
    is_verified: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    """Owner-editable fields. id, email, role and moderation flags are dropped."""

    full_name: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    resume_url: Optional[str] = None
    skills: Optional[List[str]] = None
    experience_years: Optional[int] = Field(None, ge=0)
    company_name: Optional[str] = None
    company_website: Optional[str] = None


class ResumeUpdate(BaseModel):
    resume_url: str = Field(alias="resumeUrl", min_length=1)

    class Config:
        populate_by_name = True


class UserStatusUpdate(BaseModel):
    is_active: Optional[bool] = Field(None, alias="isActive")
    is_verified: Optional[bool] = Field(None, alias="isVerified")

    class Config:
        populate_by_name = True


class UserListResponse(BaseModel):
    users: List[ProfileResponse]
    pagination: Pagination
