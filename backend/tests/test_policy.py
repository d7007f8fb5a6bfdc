"""
Tests for the access policy decision table

Tests cover:
- Role gating for job creation
- Ownership checks for job and application management
- Apply rules (role + active job)
- Withdraw, saved-job and profile ownership
- Admin override
"""

from types import SimpleNamespace

import pytest

from jobboard.enums import Role
from jobboard.errors import Forbidden
from jobboard.policy import Action, authorize, check_role, is_allowed


def actor(role: Role, actor_id: str = "user-1"):
    return SimpleNamespace(id=actor_id, role=role)


def job(recruiter_id: str = "recruiter-1", is_active: bool = True):
    return SimpleNamespace(id="job-1", recruiter_id=recruiter_id, is_active=is_active)


class TestJobRules:
    """Posting and managing jobs."""

    @pytest.mark.parametrize("role", [Role.RECRUITER, Role.ADMIN])
    def test_recruiters_and_admins_can_create(self, role):
        assert is_allowed(actor(role), Action.JOB_CREATE)

    def test_job_seeker_cannot_create(self):
        with pytest.raises(Forbidden) as exc_info:
            authorize(actor(Role.JOB_SEEKER), Action.JOB_CREATE)
        assert exc_info.value.message == "Only recruiters can post jobs"

    @pytest.mark.parametrize("action", [Action.JOB_UPDATE, Action.JOB_DELETE])
    def test_owner_can_manage(self, action):
        owner = actor(Role.RECRUITER, "recruiter-1")
        assert is_allowed(owner, action, job("recruiter-1"))

    @pytest.mark.parametrize("action", [Action.JOB_UPDATE, Action.JOB_DELETE])
    def test_other_recruiter_cannot_manage(self, action):
        other = actor(Role.RECRUITER, "recruiter-2")
        assert not is_allowed(other, action, job("recruiter-1"))

    @pytest.mark.parametrize("action", [Action.JOB_UPDATE, Action.JOB_DELETE])
    def test_admin_can_manage_any_job(self, action):
        assert is_allowed(actor(Role.ADMIN, "admin-1"), action, job("recruiter-1"))

    def test_anyone_can_read(self):
        for role in Role:
            assert is_allowed(actor(role), Action.JOB_READ)


class TestApplicationRules:
    """Applying, reviewing and withdrawing."""

    def test_job_seeker_can_apply_to_active_job(self):
        assert is_allowed(actor(Role.JOB_SEEKER), Action.APPLICATION_CREATE, job())

    def test_cannot_apply_to_inactive_job(self):
        with pytest.raises(Forbidden) as exc_info:
            authorize(actor(Role.JOB_SEEKER), Action.APPLICATION_CREATE, job(is_active=False))
        assert "no longer accepting" in exc_info.value.message

    @pytest.mark.parametrize("role", [Role.RECRUITER, Role.ADMIN])
    def test_only_job_seekers_apply(self, role):
        assert not is_allowed(actor(role), Action.APPLICATION_CREATE, job())

    @pytest.mark.parametrize(
        "action", [Action.APPLICATION_LIST_FOR_JOB, Action.APPLICATION_UPDATE_STATUS]
    )
    def test_review_limited_to_job_owner(self, action):
        posting = job("recruiter-1")
        assert is_allowed(actor(Role.RECRUITER, "recruiter-1"), action, posting)
        assert not is_allowed(actor(Role.RECRUITER, "recruiter-2"), action, posting)
        assert is_allowed(actor(Role.ADMIN, "admin-1"), action, posting)

    def test_withdraw_limited_to_applicant(self):
        application = SimpleNamespace(applicant_id="seeker-1")
        assert is_allowed(actor(Role.JOB_SEEKER, "seeker-1"), Action.APPLICATION_WITHDRAW, application)
        assert not is_allowed(actor(Role.JOB_SEEKER, "seeker-2"), Action.APPLICATION_WITHDRAW, application)
        assert not is_allowed(actor(Role.ADMIN, "admin-1"), Action.APPLICATION_WITHDRAW, application)


class TestOwnershipRules:
    def test_saved_job_owner(self):
        saved = SimpleNamespace(user_id="user-1")
        assert is_allowed(actor(Role.JOB_SEEKER, "user-1"), Action.SAVED_JOB_MANAGE, saved)
        assert not is_allowed(actor(Role.JOB_SEEKER, "user-2"), Action.SAVED_JOB_MANAGE, saved)

    def test_profile_owner(self):
        profile = SimpleNamespace(id="user-1")
        assert is_allowed(actor(Role.RECRUITER, "user-1"), Action.PROFILE_UPDATE, profile)
        with pytest.raises(Forbidden):
            authorize(actor(Role.ADMIN, "user-2"), Action.PROFILE_UPDATE, profile)

    def test_admin_action(self):
        assert is_allowed(actor(Role.ADMIN), Action.ADMIN)
        with pytest.raises(Forbidden):
            authorize(actor(Role.RECRUITER), Action.ADMIN)


class TestCheckRole:
    def test_allowed_role_passes(self):
        check_role(actor(Role.RECRUITER), [Role.RECRUITER, Role.ADMIN])

    def test_other_role_rejected(self):
        with pytest.raises(Forbidden) as exc_info:
            check_role(actor(Role.JOB_SEEKER), [Role.RECRUITER, Role.ADMIN])
        assert exc_info.value.message == "Insufficient permissions"
