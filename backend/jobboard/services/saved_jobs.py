"""
Saved-Job Registry

Per-user bookmarks. (job_id, user_id) is unique in the store; a duplicate
save surfaces as Conflict("Job already saved"). Unsave is idempotent.
"""

import logging
from typing import List, Tuple

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from jobboard.database import is_unique_violation, store_errors
from jobboard.errors import Conflict, NotFound, UpstreamFailure
from jobboard.models import Job, SavedJob
from jobboard.policy import Action, authorize
from jobboard.schemas import Pagination
from jobboard.services.pagination import paginate

logger = logging.getLogger(__name__)

ALREADY_SAVED = "Job already saved"


class SavedJobService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(self, actor, job_id: str) -> SavedJob:
        with store_errors("save job"):
            if await self.session.get(Job, job_id) is None:
                raise NotFound("Job not found")

        saved = SavedJob(job_id=job_id, user_id=actor.id)
        authorize(actor, Action.SAVED_JOB_MANAGE, saved)

        with store_errors("save job"):
            try:
                self.session.add(saved)
                await self.session.commit()
            except IntegrityError as e:
                await self.session.rollback()
                if is_unique_violation(e):
                    raise Conflict(ALREADY_SAVED)
                raise UpstreamFailure("Failed to save job", client_error=True) from e

        return saved

    async def list(self, actor, page: int, limit: int) -> Tuple[List[SavedJob], Pagination]:
        query = (
            select(SavedJob)
            .where(SavedJob.user_id == actor.id)
            .order_by(SavedJob.created_at.desc(), SavedJob.id.desc())
        )
        with store_errors("get saved jobs"):
            return await paginate(
                self.session, query, page, limit, options=[selectinload(SavedJob.job)]
            )

    async def unsave(self, actor, job_id: str) -> None:
        """Remove the bookmark if present. A missing bookmark is not an error."""
        with store_errors("unsave job"):
            await self.session.execute(
                delete(SavedJob)
                .where(SavedJob.job_id == job_id, SavedJob.user_id == actor.id)
                .execution_options(synchronize_session=False)
            )
            await self.session.commit()
