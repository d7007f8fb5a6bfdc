from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.auth import get_current_actor, require_role
from jobboard.database import get_db
from jobboard.enums import ExperienceLevel, JobType, Role
from jobboard.schemas import (
    JobCreate,
    JobDetailResponse,
    JobFilters,
    JobListResponse,
    JobResponse,
    JobUpdate,
    MessageResponse,
    OwnJobListResponse,
)
from jobboard.services.identity import Actor
from jobboard.services.jobs import JobService, parse_skills

router = APIRouter()

require_recruiter = require_role(Role.RECRUITER, Role.ADMIN)


def get_job_service(db: AsyncSession = Depends(get_db)) -> JobService:
    return JobService(db)


@router.get("", response_model=JobListResponse)
async def list_jobs(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None),
    location: Optional[str] = Query(None),
    job_type: Optional[JobType] = Query(None, alias="jobType"),
    experience_level: Optional[ExperienceLevel] = Query(None, alias="experienceLevel"),
    skills: Optional[str] = Query(None),
    actor: Actor = Depends(get_current_actor),
    service: JobService = Depends(get_job_service),
):
    filters = JobFilters(
        search=search,
        location=location,
        job_type=job_type,
        experience_level=experience_level,
        skills=parse_skills(skills),
    )
    jobs, pagination = await service.list(filters, page, limit)
    return JobListResponse(
        jobs=[JobDetailResponse.model_validate(job) for job in jobs],
        pagination=pagination,
    )


@router.get("/my-jobs", response_model=OwnJobListResponse)
async def my_jobs(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    actor: Actor = Depends(require_recruiter),
    service: JobService = Depends(get_job_service),
):
    jobs, pagination = await service.own_jobs(actor, page, limit)
    return OwnJobListResponse(
        jobs=[JobResponse.model_validate(job) for job in jobs],
        pagination=pagination,
    )


@router.get("/{job_id}", response_model=JobDetailResponse)
async def get_job(
    job_id: str,
    actor: Actor = Depends(get_current_actor),
    service: JobService = Depends(get_job_service),
):
    job = await service.get(actor, job_id)
    return JobDetailResponse.model_validate(job)


@router.post("", response_model=JobResponse, status_code=201)
async def create_job(
    job: JobCreate,
    actor: Actor = Depends(require_recruiter),
    service: JobService = Depends(get_job_service),
):
    created = await service.create(actor, job)
    return JobResponse.model_validate(created)


@router.put("/{job_id}", response_model=JobResponse)
async def update_job(
    job_id: str,
    update: JobUpdate,
    actor: Actor = Depends(require_recruiter),
    service: JobService = Depends(get_job_service),
):
    job = await service.update(actor, job_id, update)
    return JobResponse.model_validate(job)


@router.delete("/{job_id}", response_model=MessageResponse)
async def delete_job(
    job_id: str,
    actor: Actor = Depends(require_recruiter),
    service: JobService = Depends(get_job_service),
):
    await service.delete(actor, job_id)
    return MessageResponse(message="Job deleted successfully")
