"""
Job Listing Workflow

Create, search, read, update and delete job postings. Only recruiters and
admins may post; only the owning recruiter or an admin may change or remove
a posting. Server-managed fields (id, recruiter_id, timestamps, counters)
never come from client input: JobCreate rejects them and JobUpdate drops
them.

Public search:
    - search: case-insensitive literal substring over title OR description OR company
    - location: case-insensitive literal substring (% and _ are not wildcards)
    - job_type / experience_level: exact match
    - skills: any requested skill present in required_skills, case-insensitive
    - active jobs only, newest first
"""

import json
import logging
from typing import List, Tuple

from sqlalchemy import Text, cast, delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from jobboard.database import store_errors
from jobboard.errors import NotFound, ValidationError
from jobboard.models import Job
from jobboard.policy import Action, authorize, is_admin
from jobboard.schemas import JobCreate, JobFilters, JobUpdate, Pagination
from jobboard.services.pagination import paginate

logger = logging.getLogger(__name__)

# Columns that reject NULL; an explicit null in an update leaves them unchanged
NON_NULLABLE_FIELDS = {
    "title",
    "description",
    "company_name",
    "location",
    "job_type",
    "experience_level",
    "salary_currency",
    "required_skills",
    "benefits",
    "is_active",
}


def parse_skills(raw: str) -> List[str]:
    """Split a comma-separated skills query value, dropping blanks."""
    if not raw:
        return []
    return [skill.strip() for skill in raw.split(",") if skill.strip()]


def skills_overlap(skills: List[str]):
    # required_skills is a JSON array; match each requested skill as a quoted
    # element, lowercased on both sides
    column = func.lower(cast(Job.required_skills, Text))
    return or_(
        *[column.contains(json.dumps(skill.lower()), autoescape=True) for skill in skills]
    )


class JobService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _load(self, job_id: str) -> Job:
        with store_errors("get job"):
            job = await self.session.get(Job, job_id)
        if job is None:
            raise NotFound("Job not found")
        return job

    async def create(self, actor, data: JobCreate) -> Job:
        authorize(actor, Action.JOB_CREATE)

        job = Job(**data.model_dump(), recruiter_id=actor.id)
        self.session.add(job)
        with store_errors("create job"):
            await self.session.commit()

        logger.info(f"Job {job.id} created by {actor.id}")
        return job

    async def list(
        self, filters: JobFilters, page: int, limit: int
    ) -> Tuple[List[Job], Pagination]:
        query = select(Job).where(Job.is_active.is_(True))

        if filters.search:
            query = query.where(
                or_(
                    Job.title.icontains(filters.search, autoescape=True),
                    Job.description.icontains(filters.search, autoescape=True),
                    Job.company_name.icontains(filters.search, autoescape=True),
                )
            )

        if filters.location:
            query = query.where(Job.location.icontains(filters.location, autoescape=True))

        if filters.job_type:
            query = query.where(Job.job_type == filters.job_type)

        if filters.experience_level:
            query = query.where(Job.experience_level == filters.experience_level)

        if filters.skills:
            query = query.where(skills_overlap(filters.skills))

        query = query.order_by(Job.created_at.desc(), Job.id.desc())

        with store_errors("get jobs"):
            return await paginate(
                self.session, query, page, limit, options=[selectinload(Job.recruiter)]
            )

    async def get(self, actor, job_id: str) -> Job:
        """
        Fetch one job with its recruiter summary.

        Views by anyone other than the owner or an admin bump views_count.
        Inactive jobs are only visible to their owner and admins.
        """
        with store_errors("get job"):
            if not is_admin(actor):
                await self.session.execute(
                    update(Job)
                    .where(Job.id == job_id, Job.recruiter_id != actor.id, Job.is_active.is_(True))
                    .values(views_count=Job.views_count + 1, updated_at=Job.updated_at)
                    .execution_options(synchronize_session=False)
                )
                await self.session.commit()

            result = await self.session.execute(
                select(Job)
                .where(Job.id == job_id)
                .options(selectinload(Job.recruiter))
                .execution_options(populate_existing=True)
            )
            job = result.scalar_one_or_none()

        if job is None:
            raise NotFound("Job not found")
        if not job.is_active and job.recruiter_id != actor.id and not is_admin(actor):
            raise NotFound("Job not found")
        return job

    async def update(self, actor, job_id: str, data: JobUpdate) -> Job:
        job = await self._load(job_id)
        authorize(actor, Action.JOB_UPDATE, job)

        updates = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or field not in NON_NULLABLE_FIELDS
        }
        salary_min = updates.get("salary_min", job.salary_min)
        salary_max = updates.get("salary_max", job.salary_max)
        if salary_min is not None and salary_max is not None and salary_min > salary_max:
            raise ValidationError("salary_min must not exceed salary_max")

        for field, value in updates.items():
            setattr(job, field, value)

        with store_errors("update job"):
            await self.session.commit()

        return job

    async def delete(self, actor, job_id: str) -> None:
        job = await self._load(job_id)
        authorize(actor, Action.JOB_DELETE, job)

        with store_errors("delete job"):
            await self.session.execute(delete(Job).where(Job.id == job_id))
            await self.session.commit()

        logger.info(f"Job {job_id} deleted by {actor.id}")

    async def own_jobs(self, actor, page: int, limit: int) -> Tuple[List[Job], Pagination]:
        """The recruiter's own postings, active or not."""
        query = (
            select(Job)
            .where(Job.recruiter_id == actor.id)
            .order_by(Job.created_at.desc(), Job.id.desc())
        )
        with store_errors("get jobs"):
            return await paginate(self.session, query, page, limit)
