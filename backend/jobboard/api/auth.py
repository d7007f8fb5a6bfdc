import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.auth import (
    extract_bearer,
    get_current_actor,
    get_identity_provider,
    get_resolver,
)
from jobboard.database import get_db
from jobboard.enums import Role
from jobboard.errors import AppError, Forbidden, NotFound, UpstreamFailure, ValidationError
from jobboard.schemas import (
    CurrentUserResponse,
    MessageResponse,
    ProfileResponse,
    SignInRequest,
    SignInResponse,
    SignUpRequest,
    SignUpResponse,
    SessionResponse,
    UserResponse,
)
from jobboard.services.identity import Actor, IdentityProvider, IdentityResolver
from jobboard.services.profiles import ProfileService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/signup", response_model=SignUpResponse, status_code=201)
async def signup(
    request: SignUpRequest,
    db: AsyncSession = Depends(get_db),
    provider: IdentityProvider = Depends(get_identity_provider),
):
    role = Role(request.role or Role.JOB_SEEKER)
    if role == Role.ADMIN:
        raise ValidationError("Admin accounts cannot be self-registered")

    user, session = await provider.sign_up(
        request.email,
        request.password,
        {"full_name": request.full_name, "role": role.value},
    )

    try:
        await ProfileService(db).create(user.id, user.email, request.full_name, role)
    except AppError as e:
        logger.error(f"Profile creation failed for {user.id}: {e}")
        await provider.delete_user(user.id)
        raise UpstreamFailure("Failed to create account")

    return SignUpResponse(
        user=UserResponse.model_validate(user),
        session=SessionResponse.model_validate(session),
    )


@router.post("/signin", response_model=SignInResponse)
async def signin(
    request: SignInRequest,
    db: AsyncSession = Depends(get_db),
    provider: IdentityProvider = Depends(get_identity_provider),
):
    user, session = await provider.sign_in(request.email, request.password)

    try:
        profile = await ProfileService(db).get(user.id)
    except NotFound:
        profile = None

    if profile is not None and not profile.is_active:
        raise Forbidden("Account is deactivated")

    return SignInResponse(
        user=UserResponse.model_validate(user),
        session=SessionResponse.model_validate(session),
        profile=ProfileResponse.model_validate(profile) if profile else None,
    )


@router.post("/signout", response_model=MessageResponse)
async def signout(
    authorization: Optional[str] = Header(None),
    actor: Actor = Depends(get_current_actor),
    provider: IdentityProvider = Depends(get_identity_provider),
    resolver: IdentityResolver = Depends(get_resolver),
):
    credential = extract_bearer(authorization)
    await provider.sign_out(credential)
    await resolver.forget(credential)
    return MessageResponse(message="Signed out successfully")


@router.get("/me", response_model=CurrentUserResponse)
async def me(
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    profile = await ProfileService(db).get(actor.id)
    return CurrentUserResponse(
        user={"id": actor.id, "email": actor.email},
        profile=ProfileResponse.model_validate(profile),
    )
