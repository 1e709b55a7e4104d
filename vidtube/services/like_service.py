# ============================================================================
# FILE: vidtube/services/like_service.py
# ============================================================================
from typing import List
from sqlalchemy.orm import Session
from vidtube.core.cache import RedisCache, channel_stats_key
from vidtube.db import aggregation as agg
from vidtube.db.models.like import Like
from vidtube.db.models.video import Video
from vidtube.schemas.video import VideoWithOwner
from vidtube.services.base import ensure_valid_id
from vidtube.services.toggle_service import ToggleKind, ToggleOutcome, ToggleService
import logging

logger = logging.getLogger(__name__)

class LikeService:
    """Likes on videos, comments and tweets"""

    def __init__(self, toggle_service: ToggleService, cache: RedisCache):
        self.toggles = toggle_service
        self.cache = cache

    def toggle_video_like(self, db: Session, video_id: str, user_id: str) -> ToggleOutcome:
        outcome = self.toggles.toggle(db, ToggleKind.VIDEO_LIKE, video_id, user_id)
        owner_id = db.query(Video.owner_id).filter(Video.id == video_id).scalar()
        if owner_id:
            self.cache.delete_cache(channel_stats_key(owner_id))
        return outcome

    def toggle_comment_like(self, db: Session, comment_id: str, user_id: str) -> ToggleOutcome:
        return self.toggles.toggle(db, ToggleKind.COMMENT_LIKE, comment_id, user_id)

    def toggle_tweet_like(self, db: Session, tweet_id: str, user_id: str) -> ToggleOutcome:
        return self.toggles.toggle(db, ToggleKind.TWEET_LIKE, tweet_id, user_id)

    def get_liked_videos(self, db: Session, user_id: str) -> List[VideoWithOwner]:
        """
        Videos the user liked that still exist and are still published, each
        with its owner, most recently liked first.
        """
        ensure_valid_id(user_id, "user")
        query = db.query(Video).join(Like, Like.video_id == Video.id)
        query = agg.match(query, Like.liked_by_id == user_id, Like.video_id.isnot(None))
        query = agg.match(query, Video.is_published.is_(True))
        query = agg.lookup(query, Video.owner, required=True)
        query = agg.sort(query, Like.created_at, descending=True, tiebreaker=Like.id)
        videos = agg.require_results(query.all(), "No videos found")
        return [VideoWithOwner.model_validate(video) for video in videos]
