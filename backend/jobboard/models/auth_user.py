"""
Identity provider tables

AuthUser holds credentials; Profile.id mirrors AuthUser.id 1:1.
RevokedSession records access tokens (by jti) invalidated on sign-out.
"""

from sqlalchemy import Column, String, DateTime, JSON

from jobboard.database import Base
from jobboard.models._common import utcnow


class AuthUser(Base):
    __tablename__ = "auth_users"

    id = Column(String(36), primary_key=True)
    email = Column(String(320), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    user_metadata = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class RevokedSession(Base):
    __tablename__ = "revoked_sessions"

    jti = Column(String(64), primary_key=True)
    user_id = Column(String(36), nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    revoked_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
