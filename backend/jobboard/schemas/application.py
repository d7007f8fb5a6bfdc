from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from jobboard.enums import ApplicationStatus
from jobboard.schemas.common import Pagination
from jobboard.schemas.job import JobSummary
from jobboard.schemas.profile import ProfileSummary


class ApplicationCreate(BaseModel):
    job_id: UUID = Field(alias="jobId")
    resume_url: str = Field(alias="resumeUrl")
    cover_letter: Optional[str] = Field(None, alias="coverLetter")

    class Config:
        populate_by_name = True

    @field_validator("resume_url")
    @classmethod
    def require_resume_url(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("resumeUrl must not be empty")
        return value


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus
    notes: Optional[str] = None

    class Config:
        use_enum_values = True


class ApplicationResponse(BaseModel):
    id: str
    job_id: str
    applicant_id: str
    cover_letter: Optional[str] = None
    resume_url: str
    status: str
    notes: Optional[str] = None
    applied_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ApplicationWithJob(ApplicationResponse):
    job: Optional[JobSummary] = None


class ApplicationWithApplicant(ApplicationResponse):
    applicant: Optional[ProfileSummary] = None


class MyApplicationListResponse(BaseModel):
    applications: List[ApplicationWithJob]
    pagination: Pagination


class JobApplicationListResponse(BaseModel):
    applications: List[ApplicationWithApplicant]
    pagination: Pagination
