from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.auth import get_current_actor
from jobboard.database import get_db
from jobboard.schemas import ProfileResponse, ProfileUpdate, ResumeUpdate
from jobboard.services.identity import Actor
from jobboard.services.profiles import ProfileService

router = APIRouter()


def get_profile_service(db: AsyncSession = Depends(get_db)) -> ProfileService:
    return ProfileService(db)


@router.post("/resume", response_model=ProfileResponse)
async def upload_resume(
    request: ResumeUpdate,
    actor: Actor = Depends(get_current_actor),
    service: ProfileService = Depends(get_profile_service),
):
    profile = await service.set_resume(actor, request.resume_url)
    return ProfileResponse.model_validate(profile)


@router.get("/{profile_id}", response_model=ProfileResponse)
async def get_profile(
    profile_id: str,
    actor: Actor = Depends(get_current_actor),
    service: ProfileService = Depends(get_profile_service),
):
    profile = await service.get(profile_id)
    return ProfileResponse.model_validate(profile)


@router.put("/{profile_id}", response_model=ProfileResponse)
async def update_profile(
    profile_id: str,
    update: ProfileUpdate,
    actor: Actor = Depends(get_current_actor),
    service: ProfileService = Depends(get_profile_service),
):
    profile = await service.update(actor, profile_id, update)
    return ProfileResponse.model_validate(profile)
