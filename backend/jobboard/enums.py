"""
Enumerations shared by models, schemas and the access policy.

Values are the strings stored in the database and exchanged over the API.
"""

from enum import Enum


class Role(str, Enum):
    JOB_SEEKER = "job_seeker"
    RECRUITER = "recruiter"
    ADMIN = "admin"


class JobType(str, Enum):
    FULL_TIME = "full_time"
    PART_TIME = "part_time"
    CONTRACT = "contract"
    INTERNSHIP = "internship"


class ExperienceLevel(str, Enum):
    ENTRY = "entry"
    MID = "mid"
    SENIOR = "senior"
    LEAD = "lead"


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    REVIEWING = "reviewing"
    SHORTLISTED = "shortlisted"
    REJECTED = "rejected"
    ACCEPTED = "accepted"


class NotificationType(str, Enum):
    APPLICATION = "application"
    JOB_UPDATE = "job_update"
    MESSAGE = "message"
    SYSTEM = "system"
