from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.auth import get_admin_db, get_identity_provider, require_admin
from jobboard.enums import Role
from jobboard.schemas import (
    AdminJobListResponse,
    AdminJobResponse,
    MessageResponse,
    PlatformStats,
    ProfileResponse,
    UserListResponse,
    UserStatusUpdate,
)
from jobboard.services.admin import AdminService
from jobboard.services.identity import Actor, IdentityProvider

router = APIRouter()


def get_admin_service(
    actor: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_admin_db),
    provider: IdentityProvider = Depends(get_identity_provider),
) -> AdminService:
    return AdminService(actor, db, provider)


@router.get("/users", response_model=UserListResponse)
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    role: Optional[Role] = Query(None),
    search: Optional[str] = Query(None),
    service: AdminService = Depends(get_admin_service),
):
    users, pagination = await service.list_users(page, limit, role=role, search=search)
    return UserListResponse(
        users=[ProfileResponse.model_validate(u) for u in users],
        pagination=pagination,
    )


@router.patch("/users/{user_id}/status", response_model=ProfileResponse)
async def update_user_status(
    user_id: str,
    update: UserStatusUpdate,
    service: AdminService = Depends(get_admin_service),
):
    profile = await service.update_user_status(user_id, update)
    return ProfileResponse.model_validate(profile)


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str,
    service: AdminService = Depends(get_admin_service),
):
    await service.delete_user(user_id)
    return MessageResponse(message="User deleted successfully")


@router.get("/jobs", response_model=AdminJobListResponse)
async def list_jobs(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status: Optional[Literal["active", "inactive"]] = Query(None),
    service: AdminService = Depends(get_admin_service),
):
    jobs, pagination = await service.list_jobs(page, limit, status=status)
    return AdminJobListResponse(
        jobs=[AdminJobResponse.model_validate(job) for job in jobs],
        pagination=pagination,
    )


@router.get("/stats", response_model=PlatformStats)
async def get_stats(service: AdminService = Depends(get_admin_service)):
    return PlatformStats(**await service.stats())
