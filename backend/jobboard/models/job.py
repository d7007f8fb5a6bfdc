"""
Job Model - job postings owned by a recruiter

Public listings only show active jobs; owners and admins also see inactive
ones. views_count and applications_count are maintained by the server.
"""

from sqlalchemy import Column, String, Integer, Text, Boolean, DateTime, JSON, ForeignKey
from sqlalchemy.orm import relationship

from jobboard.database import Base
from jobboard.models._common import new_id, utcnow


class Job(Base):
    """
    Job posting.

    Attributes:
        recruiter_id: Owning profile; set from the actor, never from input
        job_type: full_time / part_time / contract / internship
        experience_level: entry / mid / senior / lead
        salary_min/max: Optional range, min <= max when both are set
        required_skills: JSON list used by the skills-overlap filter
        benefits: JSON list of strings
        views_count/applications_count: Server-maintained counters
    """

    __tablename__ = "jobs"

    id = Column(String(36), primary_key=True, default=new_id)
    recruiter_id = Column(
        String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=False)
    company_name = Column(String(500), nullable=False)
    location = Column(String(500), nullable=False)
    job_type = Column(String(20), nullable=False, index=True)
    experience_level = Column(String(20), nullable=False, index=True)
    salary_min = Column(Integer, nullable=True)
    salary_max = Column(Integer, nullable=True)
    salary_currency = Column(String(3), nullable=False, default="USD")
    required_skills = Column(JSON, nullable=False, default=list)
    benefits = Column(JSON, nullable=False, default=list)
    application_deadline = Column(DateTime(timezone=True), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    views_count = Column(Integer, nullable=False, default=0)
    applications_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    recruiter = relationship("Profile", lazy="raise")
