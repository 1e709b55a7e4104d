# ============================================================================
# FILE: vidtube/db/models/like.py
# ============================================================================
from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
from vidtube.db.base import Base, new_id, utcnow

class Like(Base):
    """
    A like is an existence-only fact: the row being present IS the liked
    state. Exactly one target column is set, and a user can like a given
    target at most once.
    """
    __tablename__ = "likes"
    __table_args__ = (
        UniqueConstraint("liked_by_id", "video_id", name="uq_like_video"),
        UniqueConstraint("liked_by_id", "comment_id", name="uq_like_comment"),
        UniqueConstraint("liked_by_id", "tweet_id", name="uq_like_tweet"),
        CheckConstraint(
            "(CASE WHEN video_id IS NULL THEN 0 ELSE 1 END"
            " + CASE WHEN comment_id IS NULL THEN 0 ELSE 1 END"
            " + CASE WHEN tweet_id IS NULL THEN 0 ELSE 1 END) = 1",
            name="ck_like_single_target",
        ),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    liked_by_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    video_id = Column(String(36), ForeignKey("videos.id", ondelete="CASCADE"), index=True, nullable=True)
    comment_id = Column(String(36), ForeignKey("comments.id", ondelete="CASCADE"), index=True, nullable=True)
    tweet_id = Column(String(36), ForeignKey("tweets.id", ondelete="CASCADE"), index=True, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
