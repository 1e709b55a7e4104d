# ============================================================================
# FILE: vidtube/schemas/engagement.py
# ============================================================================
from typing import Any, Optional
from datetime import datetime
from vidtube.schemas.common import CamelModel
from vidtube.schemas.user import UserSummary

class LikeResponse(CamelModel):
    id: str
    liked_by_id: str
    video_id: Optional[str] = None
    comment_id: Optional[str] = None
    tweet_id: Optional[str] = None
    created_at: datetime

class SubscriptionResponse(CamelModel):
    id: str
    subscriber_id: str
    channel_id: str
    created_at: datetime

class SubscriberEntry(CamelModel):
    id: str
    subscriber: Optional[UserSummary] = None

class SubscribedChannelEntry(CamelModel):
    id: str
    channel: Optional[UserSummary] = None

class ChannelStats(CamelModel):
    id: str
    username: str
    full_name: str
    avatar: str
    cover_image: Optional[str] = None
    total_videos: int = 0
    total_views: int = 0
    total_video_likes: int = 0
    total_subscribers: int = 0
    total_channel_subscribed_to: int = 0

class ToggleResult(CamelModel):
    """Outcome of a like/subscription flip; record is only set when added"""
    state: str
    record: Optional[Any] = None
