from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from jobboard.database import Base
from jobboard.models._common import new_id, utcnow


class SavedJob(Base):
    """Bookmark of a job by a user. (job_id, user_id) is unique."""

    __tablename__ = "saved_jobs"
    __table_args__ = (
        UniqueConstraint("job_id", "user_id", name="uq_saved_jobs_job_user"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    job_id = Column(String(36), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    job = relationship("Job", lazy="raise")
