# ============================================================================
# FILE: vidtube/db/models/history.py
# ============================================================================
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from vidtube.db.base import Base, utcnow

class WatchHistory(Base):
    """History model to track watched videos; one row per (user, video)"""
    __tablename__ = "watch_history"
    __table_args__ = (
        UniqueConstraint("user_id", "video_id", name="uq_watch_history_entry"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    video_id = Column(String(36), ForeignKey("videos.id", ondelete="CASCADE"), index=True, nullable=False)
    watched_at = Column(DateTime, default=utcnow, index=True, nullable=False)
