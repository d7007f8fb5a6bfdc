"""
Profile Model - identity record for every account

One row per identity-provider user (same id). Carries the role that drives
every authorization decision, plus job-seeker and recruiter details.

Roles:
    job_seeker - searches, applies to and bookmarks jobs
    recruiter  - posts jobs and reviews their applications
    admin      - moderates users and content
"""

from sqlalchemy import Column, String, Integer, Text, Boolean, DateTime, JSON

from jobboard.database import Base
from jobboard.enums import Role
from jobboard.models._common import utcnow


class Profile(Base):
    """
    User profile.

    Attributes:
        id: Identity-provider user id (primary key)
        role: job_seeker / recruiter / admin; not writable by the owner
        skills: JSON list of skill names
        experience_years: Non-negative years of experience
        company_name/company_website: Recruiter details
        is_verified/is_active: Moderation flags, admin-only
    """

    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True)
    email = Column(String(320), nullable=False, index=True)
    full_name = Column(String(200), nullable=False, default="")
    role = Column(String(20), nullable=False, default=Role.JOB_SEEKER.value, index=True)
    phone = Column(String(50), nullable=True)
    location = Column(String(200), nullable=True)
    bio = Column(Text, nullable=True)
    avatar_url = Column(String(2000), nullable=True)
    resume_url = Column(String(2000), nullable=True)
    skills = Column(JSON, nullable=False, default=list)
    experience_years = Column(Integer, nullable=False, default=0)
    company_name = Column(String(200), nullable=True)
    company_website = Column(String(2000), nullable=True)
    is_verified = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
