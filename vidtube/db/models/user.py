# ============================================================================
# FILE: vidtube/db/models/user.py
# ============================================================================
from sqlalchemy import Column, String, DateTime
from vidtube.db.base import Base, new_id, utcnow

class User(Base):
    """Registered account; doubles as the user's channel"""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    username = Column(String(64), unique=True, index=True, nullable=False)  # stored lowercase
    email = Column(String(255), unique=True, index=True, nullable=False)  # stored lowercase
    full_name = Column(String(255), index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    avatar = Column(String(1024), nullable=False)
    cover_image = Column(String(1024), nullable=True)
    # At most one active refresh token (single session per user)
    refresh_token = Column(String(1024), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
