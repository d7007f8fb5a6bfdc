"""
Application Model - a job seeker's application to a job

Status Flow:
    pending → reviewing → shortlisted → accepted/rejected

(job_id, applicant_id) is unique; the constraint is the authoritative guard
against concurrent duplicate applications.
"""

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from jobboard.database import Base
from jobboard.enums import ApplicationStatus
from jobboard.models._common import new_id, utcnow


class Application(Base):
    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("job_id", "applicant_id", name="uq_applications_job_applicant"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    job_id = Column(String(36), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    applicant_id = Column(
        String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    cover_letter = Column(Text, nullable=True)
    resume_url = Column(String(2000), nullable=False)
    status = Column(String(20), nullable=False, default=ApplicationStatus.PENDING.value, index=True)
    notes = Column(Text, nullable=True)
    applied_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    job = relationship("Job", lazy="raise")
    applicant = relationship("Profile", lazy="raise")
