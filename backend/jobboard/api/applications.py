from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.auth import require_role
from jobboard.database import get_database, get_db
from jobboard.enums import ApplicationStatus, Role
from jobboard.schemas import (
    ApplicationCreate,
    ApplicationResponse,
    ApplicationStatusUpdate,
    ApplicationWithApplicant,
    ApplicationWithJob,
    JobApplicationListResponse,
    MessageResponse,
    MyApplicationListResponse,
)
from jobboard.services.applications import ApplicationService
from jobboard.services.identity import Actor
from jobboard.services.notifications import NotificationSink

router = APIRouter()

require_job_seeker = require_role(Role.JOB_SEEKER)
require_recruiter = require_role(Role.RECRUITER, Role.ADMIN)


def get_application_service(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> ApplicationService:
    database = get_database(request)
    settings = request.app.state.settings
    return ApplicationService(
        db,
        NotificationSink(session_factory=database.session_factory),
        enforce_transitions=settings.enforce_status_transitions,
    )


@router.post("", response_model=ApplicationResponse, status_code=201)
async def apply_to_job(
    request: ApplicationCreate,
    actor: Actor = Depends(require_job_seeker),
    service: ApplicationService = Depends(get_application_service),
):
    application = await service.apply(
        actor,
        str(request.job_id),
        request.resume_url,
        cover_letter=request.cover_letter,
    )
    return ApplicationResponse.model_validate(application)


@router.get("/my-applications", response_model=MyApplicationListResponse)
async def my_applications(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[ApplicationStatus] = Query(None),
    actor: Actor = Depends(require_job_seeker),
    service: ApplicationService = Depends(get_application_service),
):
    applications, pagination = await service.list_mine(
        actor, page, limit, status=status.value if status else None
    )
    return MyApplicationListResponse(
        applications=[ApplicationWithJob.model_validate(a) for a in applications],
        pagination=pagination,
    )


@router.get("/job/{job_id}", response_model=JobApplicationListResponse)
async def job_applications(
    job_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[ApplicationStatus] = Query(None),
    actor: Actor = Depends(require_recruiter),
    service: ApplicationService = Depends(get_application_service),
):
    applications, pagination = await service.list_for_job(
        actor, job_id, page, limit, status=status.value if status else None
    )
    return JobApplicationListResponse(
        applications=[ApplicationWithApplicant.model_validate(a) for a in applications],
        pagination=pagination,
    )


@router.patch("/{application_id}/status", response_model=ApplicationResponse)
async def update_application_status(
    application_id: str,
    update: ApplicationStatusUpdate,
    actor: Actor = Depends(require_recruiter),
    service: ApplicationService = Depends(get_application_service),
):
    application = await service.update_status(actor, application_id, update.status, update.notes)
    return ApplicationResponse.model_validate(application)


@router.delete("/{application_id}", response_model=MessageResponse)
async def withdraw_application(
    application_id: str,
    actor: Actor = Depends(require_job_seeker),
    service: ApplicationService = Depends(get_application_service),
):
    await service.withdraw(actor, application_id)
    return MessageResponse(message="Application withdrawn successfully")
