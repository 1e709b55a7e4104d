# ============================================================================
# FILE: vidtube/services/dashboard_service.py
# ============================================================================
from typing import List, Optional
from sqlalchemy.orm import Session
from vidtube.core.cache import RedisCache, channel_stats_key
from vidtube.db import aggregation as agg
from vidtube.db.models.like import Like
from vidtube.db.models.subscription import Subscription
from vidtube.db.models.user import User
from vidtube.db.models.video import Video
from vidtube.schemas.engagement import ChannelStats
from vidtube.schemas.video import VideoWithLikes
import logging

logger = logging.getLogger(__name__)

class DashboardService:
    """Creator-facing views over the user's own channel"""

    def __init__(self, cache: RedisCache):
        self.cache = cache

    def get_channel_stats(self, db: Session, user_id: str) -> ChannelStats:
        """
        Totals for a channel: videos, views, likes received on videos,
        subscribers and subscriptions. Cached per channel when Redis is on.
        """
        cache_key = channel_stats_key(user_id)
        cached = self.cache.get_cache(cache_key)
        if cached:
            logger.info(f"Cache hit for channel stats: {user_id}")
            return ChannelStats.model_validate(cached)

        query = agg.match(db.query(User), User.id == user_id)
        query = agg.add_fields(
            query,
            agg.size_of(Video.id, Video.owner_id == User.id, label="total_videos"),
            agg.sum_of(Video.views, Video.owner_id == User.id, label="total_views"),
            agg.size_of(
                Like.id,
                Video.owner_id == User.id,
                label="total_video_likes",
                join=(Video, Like.video_id == Video.id),
            ),
            agg.size_of(Subscription.id, Subscription.channel_id == User.id, label="total_subscribers"),
            agg.size_of(Subscription.id, Subscription.subscriber_id == User.id, label="total_subscribed_to"),
        )
        user, videos, views, likes, subscribers, subscribed_to = agg.first_or_not_found(
            query.all(), "Channel stats not found"
        )

        stats = ChannelStats.model_validate(user).model_copy(update={
            "total_videos": videos or 0,
            "total_views": int(views or 0),
            "total_video_likes": likes or 0,
            "total_subscribers": subscribers or 0,
            "total_channel_subscribed_to": subscribed_to or 0,
        })
        self.cache.set_cache(cache_key, stats.model_dump())
        return stats

    def get_channel_videos(self, db: Session, user_id: str, pagination: agg.Pagination,
                           query_text: Optional[str] = None, sort_by: Optional[str] = None,
                           sort_type: Optional[str] = None) -> List[VideoWithLikes]:
        """All of the user's videos (published or not) with like counts"""
        likes = agg.size_of(Like.id, Like.video_id == Video.id, label="likes")
        sortable = {
            "createdAt": Video.created_at,
            "updatedAt": Video.updated_at,
            "title": Video.title,
            "views": Video.views,
            "duration": Video.duration,
            "likes": likes,
        }
        column, descending = agg.resolve_sort(sort_by, sort_type, sortable)

        query = agg.match(db.query(Video), Video.owner_id == user_id)
        if query_text and query_text.strip():
            query = agg.match(query, agg.text_search(query_text.strip(), Video.title, Video.description))
        query = agg.add_fields(query, likes)
        query = agg.sort(query, column, descending=descending, tiebreaker=Video.id)
        rows = agg.require_results(agg.paginate(query, pagination).all(), "No channel videos found")
        return [VideoWithLikes.from_row(video, like_count) for video, like_count in rows]
