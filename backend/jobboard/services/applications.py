"""
Application Workflow

Job seekers apply to active jobs, recruiters move applications through the
review pipeline, applicants may withdraw. Each creation and each status
change notifies the other party.

Status Flow:
    pending ──► reviewing ──► shortlisted ──► accepted
       │            │              │
       └────────────┴──────────────┴────────► rejected

    accepted and rejected are terminal.

By default any status in the enum is accepted on update. With
``enforce_transitions`` the graph above is enforced (re-setting the current
status is always allowed, so notes can be edited).

Uniqueness:
    One application per (job, applicant). The lookup gives a friendly error
    on the common path; the database constraint catches concurrent inserts,
    and both paths raise the same Conflict.
"""

import logging
from typing import Dict, FrozenSet, List, Optional, Tuple

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from jobboard.database import is_unique_violation, store_errors
from jobboard.enums import ApplicationStatus, NotificationType, Role
from jobboard.errors import Conflict, NotFound, UpstreamFailure, ValidationError
from jobboard.middleware.metrics import record_application_created, record_status_change
from jobboard.models import Application, Job
from jobboard.policy import Action, authorize, check_role
from jobboard.schemas import Pagination
from jobboard.services.notifications import NotificationSink
from jobboard.services.pagination import paginate

logger = logging.getLogger(__name__)

ALREADY_APPLIED = "You have already applied to this job"

ALLOWED_TRANSITIONS: Dict[ApplicationStatus, FrozenSet[ApplicationStatus]] = {
    ApplicationStatus.PENDING: frozenset({
        ApplicationStatus.REVIEWING,
        ApplicationStatus.SHORTLISTED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.ACCEPTED,
    }),
    ApplicationStatus.REVIEWING: frozenset({
        ApplicationStatus.SHORTLISTED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.ACCEPTED,
    }),
    ApplicationStatus.SHORTLISTED: frozenset({
        ApplicationStatus.REJECTED,
        ApplicationStatus.ACCEPTED,
    }),
    ApplicationStatus.REJECTED: frozenset(),
    ApplicationStatus.ACCEPTED: frozenset(),
}


def can_transition(current: ApplicationStatus, new: ApplicationStatus) -> bool:
    return current == new or new in ALLOWED_TRANSITIONS[current]


def parse_status(value: str) -> ApplicationStatus:
    try:
        return ApplicationStatus(value)
    except ValueError:
        allowed = ", ".join(status.value for status in ApplicationStatus)
        raise ValidationError(f"Invalid status '{value}'. Expected one of: {allowed}")


class ApplicationService:
    """
    Args:
        session: Request session
        notifications: Sink for the best-effort side-effect notifications
        enforce_transitions: Reject status moves outside the lifecycle graph
    """

    def __init__(
        self,
        session: AsyncSession,
        notifications: NotificationSink,
        enforce_transitions: bool = False,
    ):
        self.session = session
        self.notifications = notifications
        self.enforce_transitions = enforce_transitions

    async def _get_job(self, job_id: str) -> Job:
        with store_errors("get job"):
            job = await self.session.get(Job, job_id)
        if job is None:
            raise NotFound("Job not found")
        return job

    async def _get_application(self, application_id: str) -> Application:
        with store_errors("get application"):
            application = await self.session.get(Application, application_id)
        if application is None:
            raise NotFound("Application not found")
        return application

    async def _find_existing(self, job_id: str, applicant_id: str) -> Optional[Application]:
        with store_errors("check existing application"):
            result = await self.session.execute(
                select(Application).where(
                    Application.job_id == job_id,
                    Application.applicant_id == applicant_id,
                )
            )
        return result.scalar_one_or_none()

    async def apply(
        self,
        actor,
        job_id: str,
        resume_url: str,
        cover_letter: Optional[str] = None,
    ) -> Application:
        check_role(actor, [Role.JOB_SEEKER])
        job = await self._get_job(job_id)
        authorize(actor, Action.APPLICATION_CREATE, job)

        if await self._find_existing(job_id, actor.id) is not None:
            raise Conflict(ALREADY_APPLIED)

        application = Application(
            job_id=job_id,
            applicant_id=actor.id,
            resume_url=resume_url,
            cover_letter=cover_letter,
            status=ApplicationStatus.PENDING.value,
        )
        recruiter_id, title = job.recruiter_id, job.title

        with store_errors("apply to job"):
            try:
                self.session.add(application)
                await self.session.flush()
                await self.session.execute(
                    update(Job)
                    .where(Job.id == job_id)
                    .values(applications_count=Job.applications_count + 1, updated_at=Job.updated_at)
                    .execution_options(synchronize_session=False)
                )
                await self.session.commit()
            except IntegrityError as e:
                await self.session.rollback()
                if is_unique_violation(e):
                    raise Conflict(ALREADY_APPLIED)
                raise UpstreamFailure("Failed to apply to job", client_error=True) from e

        record_application_created()
        logger.info(f"Application {application.id} submitted for job {job_id}")

        await self.notifications.notify(
            recruiter_id,
            "New Application",
            f"You have a new application for {title}",
            NotificationType.APPLICATION,
        )
        return application

    async def list_mine(
        self,
        actor,
        page: int,
        limit: int,
        status: Optional[str] = None,
    ) -> Tuple[List[Application], Pagination]:
        query = select(Application).where(Application.applicant_id == actor.id)
        if status:
            query = query.where(Application.status == parse_status(status).value)
        query = query.order_by(Application.applied_at.desc(), Application.id.desc())

        with store_errors("get applications"):
            return await paginate(
                self.session, query, page, limit, options=[selectinload(Application.job)]
            )

    async def list_for_job(
        self,
        actor,
        job_id: str,
        page: int,
        limit: int,
        status: Optional[str] = None,
    ) -> Tuple[List[Application], Pagination]:
        job = await self._get_job(job_id)
        authorize(actor, Action.APPLICATION_LIST_FOR_JOB, job)

        query = select(Application).where(Application.job_id == job_id)
        if status:
            query = query.where(Application.status == parse_status(status).value)
        query = query.order_by(Application.applied_at.desc(), Application.id.desc())

        with store_errors("get applications"):
            return await paginate(
                self.session, query, page, limit, options=[selectinload(Application.applicant)]
            )

    async def update_status(
        self,
        actor,
        application_id: str,
        status: str,
        notes: Optional[str] = None,
    ) -> Application:
        application = await self._get_application(application_id)
        job = await self._get_job(application.job_id)
        authorize(actor, Action.APPLICATION_UPDATE_STATUS, job)

        new_status = parse_status(status)
        current = ApplicationStatus(application.status)
        if self.enforce_transitions and not can_transition(current, new_status):
            raise ValidationError(
                f"Cannot move application from {current.value} to {new_status.value}"
            )

        application.status = new_status.value
        if notes is not None:
            application.notes = notes

        with store_errors("update application"):
            await self.session.commit()

        record_status_change(new_status.value)
        logger.info(f"Application {application_id}: {current.value} -> {new_status.value}")

        await self.notifications.notify(
            application.applicant_id,
            "Application Update",
            f"Your application for {job.title} has been {new_status.value}",
            NotificationType.APPLICATION,
        )
        return application

    async def withdraw(self, actor, application_id: str) -> None:
        application = await self._get_application(application_id)
        authorize(actor, Action.APPLICATION_WITHDRAW, application)

        with store_errors("withdraw application"):
            await self.session.execute(
                delete(Application)
                .where(Application.id == application_id, Application.applicant_id == actor.id)
                .execution_options(synchronize_session=False)
            )
            await self.session.execute(
                update(Job)
                .where(Job.id == application.job_id, Job.applications_count > 0)
                .values(applications_count=Job.applications_count - 1, updated_at=Job.updated_at)
                .execution_options(synchronize_session=False)
            )
            await self.session.commit()

        logger.info(f"Application {application_id} withdrawn")
