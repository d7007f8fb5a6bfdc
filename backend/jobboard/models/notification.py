from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey

from jobboard.database import Base
from jobboard.enums import NotificationType
from jobboard.models._common import new_id, utcnow


class Notification(Base):
    """
    User-facing message written as a side effect of application workflow
    transitions. Only the recipient may read or mark it.
    """

    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(20), nullable=False, default=NotificationType.SYSTEM.value)
    is_read = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
