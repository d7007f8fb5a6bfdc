from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from jobboard.enums import ExperienceLevel, JobType
from jobboard.schemas.common import Pagination
from jobboard.schemas.profile import RecruiterSummary

REQUIRED_TEXT_FIELDS = ("title", "description", "company_name", "location")


def _require_text(value):
    if value is None:
        raise ValueError("must not be empty")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
    return value


def _check_salary_range(salary_min: Optional[int], salary_max: Optional[int]) -> None:
    if salary_min is not None and salary_max is not None and salary_min > salary_max:
        raise ValueError("salary_min must not exceed salary_max")


class JobCreate(BaseModel):
    """Client-writable job fields. Server-managed fields are rejected."""

    title: str
    description: str
    company_name: str
    location: str
    job_type: JobType
    experience_level: ExperienceLevel
    salary_min: Optional[int] = Field(None, ge=0)
    salary_max: Optional[int] = Field(None, ge=0)
    salary_currency: str = Field("USD", min_length=3, max_length=3)
    required_skills: List[str] = []
    benefits: List[str] = []
    application_deadline: Optional[datetime] = None
    is_active: bool = True

    class Config:
        extra = "forbid"
        use_enum_values = True

    @field_validator(*REQUIRED_TEXT_FIELDS, mode="before")
    @classmethod
    def require_text(cls, value):
        return _require_text(value)

    @model_validator(mode="after")
    def check_salary(self):
        _check_salary_range(self.salary_min, self.salary_max)
        return self


class JobUpdate(BaseModel):
    """Partial update. Unknown and server-managed fields are stripped."""

    title: Optional[str] = None
    description: Optional[str] = None
    company_name: Optional[str] = None
    location: Optional[str] = None
    job_type: Optional[JobType] = None
    experience_level: Optional[ExperienceLevel] = None
    salary_min: Optional[int] = Field(None, ge=0)
    salary_max: Optional[int] = Field(None, ge=0)
    salary_currency: Optional[str] = Field(None, min_length=3, max_length=3)
    required_skills: Optional[List[str]] = None
    benefits: Optional[List[str]] = None
    application_deadline: Optional[datetime] = None
    is_active: Optional[bool] = None

    class Config:
        extra = "ignore"
        use_enum_values = True

    @field_validator(*REQUIRED_TEXT_FIELDS, mode="before")
    @classmethod
    def require_text(cls, value):
        return _require_text(value)

    @model_validator(mode="after")
    def check_salary(self):
        _check_salary_range(self.salary_min, self.salary_max)
        return self


class JobFilters(BaseModel):
    search: Optional[str] = None
    location: Optional[str] = None
    job_type: Optional[JobType] = None
    experience_level: Optional[ExperienceLevel] = None
    skills: List[str] = []

    class Config:
        use_enum_values = True


class JobSummary(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    company_name: str
    location: str
    job_type: str
    experience_level: Optional[str] = None
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    salary_currency: str
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class JobResponse(BaseModel):
    id: str
    recruiter_id: str
    title: str
    description: str
    company_name: str
    location: str
    job_type: str
    experience_level: str
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    salary_currency: str
    required_skills: List[str]
    benefits: List[str]
    application_deadline: Optional[datetime] = None
    is_active: bool
    views_count: int
    applications_count: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class JobDetailResponse(JobResponse):
    recruiter: Optional[RecruiterSummary] = None


class JobListResponse(BaseModel):
    jobs: List[JobDetailResponse]
    pagination: Pagination


class OwnJobListResponse(BaseModel):
    jobs: List[JobResponse]
    pagination: Pagination
