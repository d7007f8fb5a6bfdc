from jobboard.models.profile import Profile
from jobboard.models.job import Job
from jobboard.models.application import Application
from jobboard.models.saved_job import SavedJob
from jobboard.models.notification import Notification
from jobboard.models.auth_user import AuthUser, RevokedSession

__all__ = [
    "Profile",
    "Job",
    "Application",
    "SavedJob",
    "Notification",
    "AuthUser",
    "RevokedSession",
]
