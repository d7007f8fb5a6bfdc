"""
Admin Console

User and content moderation. Runs on the elevated store session, which the
API only opens after the caller's admin role has been verified.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from jobboard.database import store_errors
from jobboard.enums import Role
from jobboard.errors import NotFound, UpstreamFailure, ValidationError
from jobboard.models import Application, Job, Profile
from jobboard.policy import Action, authorize
from jobboard.schemas import Pagination, UserStatusUpdate
from jobboard.services.identity import IdentityProvider
from jobboard.services.pagination import paginate

logger = logging.getLogger(__name__)


class AdminService:
    def __init__(self, actor, session: AsyncSession, provider: IdentityProvider):
        authorize(actor, Action.ADMIN)
        self.actor = actor
        self.session = session
        self.provider = provider

    async def list_users(
        self,
        page: int,
        limit: int,
        role: Optional[Role] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[Profile], Pagination]:
        query = select(Profile)
        if role:
            query = query.where(Profile.role == Role(role).value)
        if search:
            query = query.where(
                or_(
                    Profile.full_name.icontains(search, autoescape=True),
                    Profile.email.icontains(search, autoescape=True),
                )
            )
        query = query.order_by(Profile.created_at.desc(), Profile.id.desc())

        with store_errors("get users"):
            return await paginate(self.session, query, page, limit)

    async def update_user_status(self, user_id: str, data: UserStatusUpdate) -> Profile:
        with store_errors("update user status"):
            profile = await self.session.get(Profile, user_id)
            if profile is None:
                raise NotFound("User not found")

            if data.is_active is not None:
                profile.is_active = data.is_active
            if data.is_verified is not None:
                profile.is_verified = data.is_verified
            await self.session.commit()

        logger.info(f"Admin {self.actor.id} updated status of user {user_id}")
        return profile

    async def delete_user(self, user_id: str) -> None:
        """Delete the profile (cascading to owned rows), then the identity record."""
        if user_id == self.actor.id:
            raise ValidationError("Admins cannot delete their own account")

        with store_errors("delete user"):
            result = await self.session.execute(
                delete(Profile)
                .where(Profile.id == user_id)
                .execution_options(synchronize_session=False)
            )
            if not result.rowcount:
                raise NotFound("User not found")
            await self.session.commit()

        try:
            await self.provider.delete_user(user_id)
        except UpstreamFailure as e:
            logger.error(f"Identity delete failed for {user_id}: {e}")

        logger.info(f"Admin {self.actor.id} deleted user {user_id}")

    async def list_jobs(
        self, page: int, limit: int, status: Optional[str] = None
    ) -> Tuple[List[Job], Pagination]:
        query = select(Job)
        if status == "active":
            query = query.where(Job.is_active.is_(True))
        elif status == "inactive":
            query = query.where(Job.is_active.is_(False))
        query = query.order_by(Job.created_at.desc(), Job.id.desc())

        with store_errors("get jobs"):
            return await paginate(
                self.session, query, page, limit, options=[selectinload(Job.recruiter)]
            )

    async def stats(self) -> dict:
        async def count(query) -> int:
            return (await self.session.execute(query)).scalar_one()

        with store_errors("get statistics"):
            return {
                "total_users": await count(select(func.count(Profile.id))),
                "job_seekers": await count(
                    select(func.count(Profile.id)).where(Profile.role == Role.JOB_SEEKER.value)
                ),
                "recruiters": await count(
                    select(func.count(Profile.id)).where(Profile.role == Role.RECRUITER.value)
                ),
                "total_jobs": await count(select(func.count(Job.id))),
                "active_jobs": await count(
                    select(func.count(Job.id)).where(Job.is_active.is_(True))
                ),
                "total_applications": await count(select(func.count(Application.id))),
            }
