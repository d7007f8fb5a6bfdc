"""
Access Policy - who may do what to which resource

A pure decision table: every rule is a function of (actor, resource) and
never touches the store. Callers look the resource up first (so a missing
resource is reported as NotFound) and then call ``authorize``.

Decision table:
    job.create                 recruiter or admin
    job.read                   any authenticated actor
    job.update / job.delete    owning recruiter or admin
    application.create         job seeker, job must be active
    application.list_for_job   owner of the job or admin
    application.update_status  owner of the parent job or admin
    application.withdraw       the applicant
    saved_job.manage           the user who saved it
    profile.update             the profile owner
    admin                      admin
"""

from enum import Enum
from typing import Any, Callable, Dict, Iterable

from jobboard.enums import Role
from jobboard.errors import Forbidden


class Action(str, Enum):
    JOB_CREATE = "job.create"
    JOB_READ = "job.read"
    JOB_UPDATE = "job.update"
    JOB_DELETE = "job.delete"
    APPLICATION_CREATE = "application.create"
    APPLICATION_LIST_FOR_JOB = "application.list_for_job"
    APPLICATION_UPDATE_STATUS = "application.update_status"
    APPLICATION_WITHDRAW = "application.withdraw"
    SAVED_JOB_MANAGE = "saved_job.manage"
    PROFILE_UPDATE = "profile.update"
    ADMIN = "admin"


def is_admin(actor) -> bool:
    return actor.role == Role.ADMIN


def _owns_job_or_admin(actor, job) -> bool:
    return is_admin(actor) or (job is not None and job.recruiter_id == actor.id)


def _can_apply(actor, job) -> bool:
    return actor.role == Role.JOB_SEEKER and job is not None and bool(job.is_active)


RULES: Dict[Action, Callable[[Any, Any], bool]] = {
    Action.JOB_CREATE: lambda actor, _: actor.role in (Role.RECRUITER, Role.ADMIN),
    Action.JOB_READ: lambda actor, _: True,
    Action.JOB_UPDATE: _owns_job_or_admin,
    Action.JOB_DELETE: _owns_job_or_admin,
    Action.APPLICATION_CREATE: _can_apply,
    Action.APPLICATION_LIST_FOR_JOB: _owns_job_or_admin,
    Action.APPLICATION_UPDATE_STATUS: _owns_job_or_admin,
    Action.APPLICATION_WITHDRAW: lambda actor, app: app.applicant_id == actor.id,
    Action.SAVED_JOB_MANAGE: lambda actor, saved: saved.user_id == actor.id,
    Action.PROFILE_UPDATE: lambda actor, profile: profile.id == actor.id,
    Action.ADMIN: lambda actor, _: is_admin(actor),
}

DENIAL_MESSAGES: Dict[Action, str] = {
    Action.JOB_CREATE: "Only recruiters can post jobs",
    Action.JOB_UPDATE: "Not authorized to update this job",
    Action.JOB_DELETE: "Not authorized to delete this job",
    Action.APPLICATION_CREATE: "Job is no longer accepting applications",
    Action.APPLICATION_LIST_FOR_JOB: "Not authorized to view these applications",
    Action.APPLICATION_UPDATE_STATUS: "Not authorized to update this application",
    Action.APPLICATION_WITHDRAW: "Not authorized to withdraw this application",
    Action.SAVED_JOB_MANAGE: "Not authorized to modify this saved job",
    Action.PROFILE_UPDATE: "Cannot update other users profiles",
}


def is_allowed(actor, action: Action, resource=None) -> bool:
    return RULES[action](actor, resource)


def authorize(actor, action: Action, resource=None) -> None:
    """
    Raise Forbidden unless ``actor`` may perform ``action`` on ``resource``.

    Args:
        actor: Resolved identity with ``id`` and ``role``
        action: Entry of the decision table
        resource: The looked-up resource the rule needs (a Job for
            application.update_status and application.list_for_job)
    """
    if not is_allowed(actor, action, resource):
        raise Forbidden(DENIAL_MESSAGES.get(action, Forbidden.default_message))


def check_role(actor, allowed_roles: Iterable[Role]) -> None:
    """Allow-list check used by route guards."""
    if actor.role not in tuple(allowed_roles):
        raise Forbidden("Insufficient permissions")
