from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from jobboard.schemas.common import Pagination
from jobboard.schemas.job import JobSummary


class SavedJobCreate(BaseModel):
    job_id: UUID = Field(alias="jobId")

    class Config:
        populate_by_name = True


class SavedJobResponse(BaseModel):
    id: str
    job_id: str
    user_id: str
    created_at: datetime

    class Config:
        from_attributes = True


class SavedJobWithJob(SavedJobResponse):
    job: Optional[JobSummary] = None


class SavedJobListResponse(BaseModel):
    saved_jobs: List[SavedJobWithJob] = Field(serialization_alias="savedJobs")
    pagination: Pagination
