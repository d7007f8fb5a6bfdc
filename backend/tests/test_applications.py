"""
Tests for the application workflow

Tests cover:
- Apply: role gating, inactive jobs, duplicates (lookup and constraint paths)
- Recruiter notifications on apply, applicant notifications on status change
- Notification failures never fail the triggering request
- Listing for applicant and for job owner
- Status updates with and without the transition graph
- Withdraw and the applications counter
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy import func, select

from jobboard.enums import ApplicationStatus, Role
from jobboard.errors import Conflict, Forbidden, NotFound, ValidationError
from jobboard.models import Application, Job
from jobboard.services.applications import (
    ALREADY_APPLIED,
    ApplicationService,
    can_transition,
    parse_status,
)
from jobboard.services.notifications import NotificationSink

RESUME = "https://files.example.com/resume.pdf"


async def applications_count(session, job_id: str) -> int:
    query = select(Job.applications_count).where(Job.id == job_id)
    return (await session.execute(query)).scalar_one()


async def stored_applications(session, job_id: str) -> int:
    query = select(func.count(Application.id)).where(Application.job_id == job_id)
    return (await session.execute(query)).scalar_one()


@pytest.fixture
def service(session, notifications):
    return ApplicationService(session, notifications)


@pytest.fixture
async def posting(make_actor, make_job):
    """(recruiter, seeker, job) with an active job owned by the recruiter."""
    recruiter = await make_actor(Role.RECRUITER)
    seeker = await make_actor(Role.JOB_SEEKER)
    job = await make_job(recruiter, title="Platform Engineer")
    return recruiter, seeker, job


class TestStatusHelpers:
    def test_parse_status(self):
        assert parse_status("reviewing") == ApplicationStatus.REVIEWING

    def test_parse_status_rejects_unknown(self):
        with pytest.raises(ValidationError):
            parse_status("hired")

    def test_transition_graph(self):
        assert can_transition(ApplicationStatus.PENDING, ApplicationStatus.REVIEWING)
        assert can_transition(ApplicationStatus.SHORTLISTED, ApplicationStatus.ACCEPTED)
        assert not can_transition(ApplicationStatus.ACCEPTED, ApplicationStatus.PENDING)
        assert not can_transition(ApplicationStatus.REJECTED, ApplicationStatus.REVIEWING)

    def test_same_status_always_allowed(self):
        assert can_transition(ApplicationStatus.ACCEPTED, ApplicationStatus.ACCEPTED)


class TestApply:
    @pytest.mark.asyncio
    async def test_apply_creates_pending_application(self, session, service, posting):
        recruiter, seeker, job = posting

        application = await service.apply(seeker, job.id, RESUME, cover_letter="Hello")

        assert application.status == ApplicationStatus.PENDING.value
        assert application.job_id == job.id
        assert application.applicant_id == seeker.id
        assert application.cover_letter == "Hello"
        assert await applications_count(session, job.id) == 1

    @pytest.mark.asyncio
    async def test_recruiter_notified(self, session, service, posting):
        recruiter, seeker, job = posting

        await service.apply(seeker, job.id, RESUME)

        items, unread = await NotificationSink(session=session).list(recruiter)
        assert unread == 1
        assert items[0].title == "New Application"
        assert items[0].message == "You have a new application for Platform Engineer"
        assert items[0].type == "application"

    @pytest.mark.asyncio
    async def test_duplicate_rejected(self, session, service, posting):
        recruiter, seeker, job = posting
        job_id = job.id

        await service.apply(seeker, job_id, RESUME)
        with pytest.raises(Conflict) as exc_info:
            await service.apply(seeker, job_id, RESUME)

        assert exc_info.value.message == ALREADY_APPLIED
        assert exc_info.value.status_code == 400
        assert await stored_applications(session, job_id) == 1

    @pytest.mark.asyncio
    async def test_duplicate_caught_by_constraint(self, session, service, posting):
        """A concurrent duplicate that slips past the lookup still yields Conflict."""
        recruiter, seeker, job = posting
        job_id = job.id
        await service.apply(seeker, job_id, RESUME)

        with patch.object(service, "_find_existing", AsyncMock(return_value=None)):
            with pytest.raises(Conflict) as exc_info:
                await service.apply(seeker, job_id, RESUME)

        assert exc_info.value.message == ALREADY_APPLIED
        assert await stored_applications(session, job_id) == 1
        assert await applications_count(session, job_id) == 1

    @pytest.mark.asyncio
    async def test_inactive_job_forbidden(self, service, make_actor, make_job):
        recruiter = await make_actor(Role.RECRUITER)
        seeker = await make_actor(Role.JOB_SEEKER)
        job = await make_job(recruiter, is_active=False)

        with pytest.raises(Forbidden) as exc_info:
            await service.apply(seeker, job.id, RESUME)
        assert "no longer accepting" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_missing_job(self, service, make_actor):
        seeker = await make_actor(Role.JOB_SEEKER)
        with pytest.raises(NotFound):
            await service.apply(seeker, "00000000-0000-0000-0000-000000000000", RESUME)

    @pytest.mark.asyncio
    async def test_recruiter_cannot_apply(self, service, posting):
        recruiter, seeker, job = posting
        with pytest.raises(Forbidden):
            await service.apply(recruiter, job.id, RESUME)

    @pytest.mark.asyncio
    async def test_notification_failure_does_not_fail_apply(self, session, posting):
        recruiter, seeker, job = posting
        job_id = job.id
        broken = NotificationSink(session_factory=MagicMock(side_effect=RuntimeError("store down")))
        service = ApplicationService(session, broken)

        application = await service.apply(seeker, job_id, RESUME)

        assert application.status == "pending"
        assert await stored_applications(session, job_id) == 1


class TestListApplications:
    @pytest.mark.asyncio
    async def test_list_mine_with_job(self, service, posting, make_job):
        recruiter, seeker, job = posting
        other_job = await make_job(recruiter, title="SRE")
        await service.apply(seeker, job.id, RESUME)
        await service.apply(seeker, other_job.id, RESUME)

        applications, meta = await service.list_mine(seeker, 1, 10)

        assert meta.total == 2
        assert {a.job.title for a in applications} == {"Platform Engineer", "SRE"}

    @pytest.mark.asyncio
    async def test_list_mine_status_filter(self, service, posting):
        recruiter, seeker, job = posting
        application = await service.apply(seeker, job.id, RESUME)
        await service.update_status(recruiter, application.id, "reviewing")

        pending, _ = await service.list_mine(seeker, 1, 10, status="pending")
        reviewing, _ = await service.list_mine(seeker, 1, 10, status="reviewing")

        assert pending == []
        assert [a.id for a in reviewing] == [application.id]

    @pytest.mark.asyncio
    async def test_list_for_job_by_owner(self, service, posting):
        recruiter, seeker, job = posting
        await service.apply(seeker, job.id, RESUME)

        applications, meta = await service.list_for_job(recruiter, job.id, 1, 10)

        assert meta.total == 1
        assert applications[0].applicant.id == seeker.id

    @pytest.mark.asyncio
    async def test_list_for_job_by_other_recruiter_forbidden(self, service, posting, make_actor):
        recruiter, seeker, job = posting
        other = await make_actor(Role.RECRUITER)
        await service.apply(seeker, job.id, RESUME)

        with pytest.raises(Forbidden):
            await service.list_for_job(other, job.id, 1, 10)

    @pytest.mark.asyncio
    async def test_list_for_job_by_admin(self, service, posting, make_actor):
        recruiter, seeker, job = posting
        admin = await make_actor(Role.ADMIN)
        await service.apply(seeker, job.id, RESUME)

        _, meta = await service.list_for_job(admin, job.id, 1, 10)
        assert meta.total == 1


class TestUpdateStatus:
    @pytest.mark.asyncio
    async def test_accept_notifies_applicant(self, session, service, posting):
        recruiter, seeker, job = posting
        application = await service.apply(seeker, job.id, RESUME)

        updated = await service.update_status(recruiter, application.id, "accepted", notes="Great fit")

        assert updated.status == "accepted"
        assert updated.notes == "Great fit"

        items, unread = await NotificationSink(session=session).list(seeker)
        assert unread == 1
        assert items[0].title == "Application Update"
        assert "accepted" in items[0].message
        assert "Platform Engineer" in items[0].message

    @pytest.mark.asyncio
    async def test_notes_untouched_when_omitted(self, service, posting):
        recruiter, seeker, job = posting
        application = await service.apply(seeker, job.id, RESUME)
        await service.update_status(recruiter, application.id, "reviewing", notes="Phone screen")

        updated = await service.update_status(recruiter, application.id, "shortlisted")

        assert updated.notes == "Phone screen"

    @pytest.mark.asyncio
    async def test_other_recruiter_forbidden(self, service, posting, make_actor):
        recruiter, seeker, job = posting
        other = await make_actor(Role.RECRUITER)
        application = await service.apply(seeker, job.id, RESUME)

        with pytest.raises(Forbidden):
            await service.update_status(other, application.id, "accepted")

    @pytest.mark.asyncio
    async def test_invalid_status(self, service, posting):
        recruiter, seeker, job = posting
        application = await service.apply(seeker, job.id, RESUME)

        with pytest.raises(ValidationError):
            await service.update_status(recruiter, application.id, "hired")

    @pytest.mark.asyncio
    async def test_missing_application(self, service, posting):
        recruiter, _, _ = posting
        with pytest.raises(NotFound):
            await service.update_status(recruiter, "missing", "accepted")

    @pytest.mark.asyncio
    async def test_any_status_allowed_by_default(self, service, posting):
        recruiter, seeker, job = posting
        application = await service.apply(seeker, job.id, RESUME)
        await service.update_status(recruiter, application.id, "accepted")

        reopened = await service.update_status(recruiter, application.id, "pending")
        assert reopened.status == "pending"

    @pytest.mark.asyncio
    async def test_enforced_transitions(self, session, notifications, posting):
        recruiter, seeker, job = posting
        service = ApplicationService(session, notifications, enforce_transitions=True)
        application = await service.apply(seeker, job.id, RESUME)
        await service.update_status(recruiter, application.id, "rejected")

        with pytest.raises(ValidationError):
            await service.update_status(recruiter, application.id, "reviewing")

    @pytest.mark.asyncio
    async def test_notification_failure_does_not_fail_update(self, session, notifications, posting):
        recruiter, seeker, job = posting
        application = await ApplicationService(session, notifications).apply(seeker, job.id, RESUME)

        broken = NotificationSink(session_factory=MagicMock(side_effect=RuntimeError("store down")))
        updated = await ApplicationService(session, broken).update_status(
            recruiter, application.id, "accepted"
        )

        assert updated.status == "accepted"


class TestWithdraw:
    @pytest.mark.asyncio
    async def test_applicant_withdraws(self, session, service, posting):
        recruiter, seeker, job = posting
        application = await service.apply(seeker, job.id, RESUME)

        await service.withdraw(seeker, application.id)

        assert await stored_applications(session, job.id) == 0
        assert await applications_count(session, job.id) == 0

    @pytest.mark.asyncio
    async def test_can_reapply_after_withdraw(self, service, posting):
        recruiter, seeker, job = posting
        first = await service.apply(seeker, job.id, RESUME)
        await service.withdraw(seeker, first.id)

        second = await service.apply(seeker, job.id, RESUME)
        assert second.id != first.id

    @pytest.mark.asyncio
    async def test_other_user_cannot_withdraw(self, session, service, posting, make_actor):
        recruiter, seeker, job = posting
        other = await make_actor(Role.JOB_SEEKER)
        application = await service.apply(seeker, job.id, RESUME)

        with pytest.raises(Forbidden):
            await service.withdraw(other, application.id)
        with pytest.raises(Forbidden):
            await service.withdraw(recruiter, application.id)

        assert await stored_applications(session, job.id) == 1

    @pytest.mark.asyncio
    async def test_missing_application(self, service, make_actor):
        seeker = await make_actor(Role.JOB_SEEKER)
        with pytest.raises(NotFound):
            await service.withdraw(seeker, "missing")
