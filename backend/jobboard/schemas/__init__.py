from jobboard.schemas.common import Pagination, MessageResponse
from jobboard.schemas.auth import (
    SignUpRequest,
    SignInRequest,
    SessionResponse,
    UserResponse,
    SignUpResponse,
    SignInResponse,
    CurrentUserResponse,
)
from jobboard.schemas.profile import (
    ProfileSummary,
    RecruiterSummary,
    ProfileResponse,
    ProfileUpdate,
    ResumeUpdate,
    UserStatusUpdate,
    UserListResponse,
)
from jobboard.schemas.job import (
    JobCreate,
    JobUpdate,
    JobFilters,
    JobSummary,
    JobResponse,
    JobDetailResponse,
    JobListResponse,
    OwnJobListResponse,
)
from jobboard.schemas.application import (
    ApplicationCreate,
    ApplicationStatusUpdate,
    ApplicationResponse,
    ApplicationWithJob,
    ApplicationWithApplicant,
    MyApplicationListResponse,
    JobApplicationListResponse,
)
from jobboard.schemas.saved_job import (
    SavedJobCreate,
    SavedJobResponse,
    SavedJobWithJob,
    SavedJobListResponse,
)
from jobboard.schemas.notification import (
    NotificationResponse,
    NotificationListResponse,
    MarkAllReadResponse,
)
from jobboard.schemas.admin import (
    AdminJobResponse,
    AdminJobListResponse,
    PlatformStats,
)

__all__ = [
    "Pagination",
    "MessageResponse",
    "SignUpRequest",
    "SignInRequest",
    "SessionResponse",
    "UserResponse",
    "SignUpResponse",
    "SignInResponse",
    "CurrentUserResponse",
    "ProfileSummary",
    "RecruiterSummary",
    "ProfileResponse",
    "ProfileUpdate",
    "ResumeUpdate",
    "UserStatusUpdate",
    "UserListResponse",
    "JobCreate",
    "JobUpdate",
    "JobFilters",
    "JobSummary",
    "JobResponse",
    "JobDetailResponse",
    "JobListResponse",
    "OwnJobListResponse",
    "ApplicationCreate",
    "ApplicationStatusUpdate",
    "ApplicationResponse",
    "ApplicationWithJob",
    "ApplicationWithApplicant",
    "MyApplicationListResponse",
    "JobApplicationListResponse",
    "SavedJobCreate",
    "SavedJobResponse",
    "SavedJobWithJob",
    "SavedJobListResponse",
    "NotificationResponse",
    "NotificationListResponse",
    "MarkAllReadResponse",
    "AdminJobResponse",
    "AdminJobListResponse",
    "PlatformStats",
]
