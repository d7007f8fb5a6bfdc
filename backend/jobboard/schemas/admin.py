from typing import List, Optional

from pydantic import BaseModel, Field

from jobboard.schemas.common import Pagination
from jobboard.schemas.job import JobResponse


class JobOwnerSummary(BaseModel):
    full_name: str
    email: str
    company_name: Optional[str] = None

    class Config:
        from_attributes = True


class AdminJobResponse(JobResponse):
    recruiter: Optional[JobOwnerSummary] = None


class AdminJobListResponse(BaseModel):
    jobs: List[AdminJobResponse]
    pagination: Pagination


class PlatformStats(BaseModel):
    total_users: int = Field(serialization_alias="totalUsers")
    job_seekers: int = Field(serialization_alias="jobSeekers")
    recruiters: int
    total_jobs: int = Field(serialization_alias="totalJobs")
    active_jobs: int = Field(serialization_alias="activeJobs")
    total_applications: int = Field(serialization_alias="totalApplications")
