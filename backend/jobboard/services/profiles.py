import logging

from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.database import store_errors
from jobboard.enums import Role
from jobboard.errors import NotFound
from jobboard.models import Profile
from jobboard.policy import Action, authorize
from jobboard.schemas import ProfileUpdate

logger = logging.getLogger(__name__)

# Columns that reject NULL; an explicit null in an update leaves them unchanged
NON_NULLABLE_FIELDS = {"full_name", "skills", "experience_years"}


class ProfileService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, user_id: str, email: str, full_name: str, role: Role) -> Profile:
        """Create the profile mirroring a newly registered identity."""
        profile = Profile(id=user_id, email=email, full_name=full_name, role=Role(role).value)
        self.session.add(profile)
        with store_errors("create profile"):
            await self.session.commit()
        return profile

    async def get(self, profile_id: str) -> Profile:
        with store_errors("get profile"):
            profile = await self.session.get(Profile, profile_id)
        if profile is None:
            raise NotFound("Profile not found")
        return profile

    async def update(self, actor, profile_id: str, data: ProfileUpdate) -> Profile:
        profile = await self.get(profile_id)
        authorize(actor, Action.PROFILE_UPDATE, profile)

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field in NON_NULLABLE_FIELDS:
                continue
            setattr(profile, field, value)

        with store_errors("update profile"):
            await self.session.commit()
        return profile

    async def set_resume(self, actor, resume_url: str) -> Profile:
        profile = await self.get(actor.id)
        profile.resume_url = resume_url
        with store_errors("update resume"):
            await self.session.commit()
        return profile
