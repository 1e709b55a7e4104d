# ============================================================================
# FILE: vidtube/db/models/playlist.py
# ============================================================================
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from vidtube.db.base import Base, new_id, utcnow

class Playlist(Base):
    """Playlist model for user-created playlists"""
    __tablename__ = "playlists"

    id = Column(String(36), primary_key=True, default=new_id)
    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    owner = relationship("User")
    entries = relationship(
        "PlaylistVideo",
        back_populates="playlist",
        cascade="all, delete-orphan",
        order_by="PlaylistVideo.position",
    )

class PlaylistVideo(Base):
    """Ordered playlist membership; a video appears at most once per playlist"""
    __tablename__ = "playlist_videos"
    __table_args__ = (
        UniqueConstraint("playlist_id", "video_id", name="uq_playlist_video"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    playlist_id = Column(String(36), ForeignKey("playlists.id", ondelete="CASCADE"), index=True, nullable=False)
    video_id = Column(String(36), ForeignKey("videos.id", ondelete="CASCADE"), index=True, nullable=False)
    position = Column(Integer, nullable=False)
    added_at = Column(DateTime, default=utcnow, nullable=False)

    # Relationships
    playlist = relationship("Playlist", back_populates="entries")
