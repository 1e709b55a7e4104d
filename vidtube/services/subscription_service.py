# ============================================================================
# FILE: vidtube/services/subscription_service.py
# ============================================================================
from typing import List
from sqlalchemy.orm import Session
from vidtube.core.cache import RedisCache, channel_stats_key
from vidtube.core.exceptions import InvalidArgument, NotFound
from vidtube.db import aggregation as agg
from vidtube.db.models.subscription import Subscription
from vidtube.db.models.user import User
from vidtube.schemas.engagement import SubscribedChannelEntry, SubscriberEntry
from vidtube.services.base import ensure_valid_id
from vidtube.services.toggle_service import ToggleKind, ToggleOutcome, ToggleService
import logging

logger = logging.getLogger(__name__)

class SubscriptionService:
    """Channel subscriptions"""

    def __init__(self, toggle_service: ToggleService, cache: RedisCache):
        self.toggles = toggle_service
        self.cache = cache

    def toggle_subscription(self, db: Session, channel_id: str, subscriber_id: str) -> ToggleOutcome:
        ensure_valid_id(channel_id, "channel")
        if channel_id == subscriber_id:
            raise InvalidArgument("You cannot subscribe to your own channel")

        outcome = self.toggles.toggle(db, ToggleKind.SUBSCRIPTION, channel_id, subscriber_id)
        self.cache.delete_cache(channel_stats_key(channel_id), channel_stats_key(subscriber_id))
        return outcome

    def _ensure_channel(self, db: Session, user_id: str, label: str) -> None:
        ensure_valid_id(user_id, label)
        if db.get(User, user_id) is None:
            raise NotFound("Channel does not exist")

    def get_channel_subscribers(self, db: Session, channel_id: str) -> List[SubscriberEntry]:
        self._ensure_channel(db, channel_id, "channel")

        query = agg.match(db.query(Subscription), Subscription.channel_id == channel_id)
        query = agg.lookup(query, Subscription.subscriber)
        query = agg.sort(query, Subscription.created_at, descending=True, tiebreaker=Subscription.id)
        return [SubscriberEntry.model_validate(row) for row in query.all()]

    def get_subscribed_channels(self, db: Session, subscriber_id: str) -> List[SubscribedChannelEntry]:
        ensure_valid_id(subscriber_id, "subscriber")

        query = agg.match(db.query(Subscription), Subscription.subscriber_id == subscriber_id)
        query = agg.lookup(query, Subscription.channel)
        query = agg.sort(query, Subscription.created_at, descending=True, tiebreaker=Subscription.id)
        return [SubscribedChannelEntry.model_validate(row) for row in query.all()]
