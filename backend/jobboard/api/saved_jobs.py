from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.auth import require_role
from jobboard.database import get_db
from jobboard.enums import Role
from jobboard.schemas import (
    MessageResponse,
    SavedJobCreate,
    SavedJobListResponse,
    SavedJobResponse,
    SavedJobWithJob,
)
from jobboard.services.identity import Actor
from jobboard.services.saved_jobs import SavedJobService

router = APIRouter()

require_job_seeker = require_role(Role.JOB_SEEKER)


def get_saved_job_service(db: AsyncSession = Depends(get_db)) -> SavedJobService:
    return SavedJobService(db)


@router.post("", response_model=SavedJobResponse, status_code=201)
async def save_job(
    request: SavedJobCreate,
    actor: Actor = Depends(require_job_seeker),
    service: SavedJobService = Depends(get_saved_job_service),
):
    saved = await service.save(actor, str(request.job_id))
    return SavedJobResponse.model_validate(saved)


@router.get("", response_model=SavedJobListResponse)
async def list_saved_jobs(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    actor: Actor = Depends(require_job_seeker),
    service: SavedJobService = Depends(get_saved_job_service),
):
    saved_jobs, pagination = await service.list(actor, page, limit)
    return SavedJobListResponse(
        saved_jobs=[SavedJobWithJob.model_validate(s) for s in saved_jobs],
        pagination=pagination,
    )


@router.delete("/{job_id}", response_model=MessageResponse)
async def unsave_job(
    job_id: str,
    actor: Actor = Depends(require_job_seeker),
    service: SavedJobService = Depends(get_saved_job_service),
):
    await service.unsave(actor, job_id)
    return MessageResponse(message="Job removed from saved list")
