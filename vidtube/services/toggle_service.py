# ============================================================================
# FILE: vidtube/services/toggle_service.py
# ============================================================================
"""
Create-or-delete flip for presence-only relationships (likes, subscriptions).

The (actor, target) pair is protected by a unique constraint, so two
concurrent "add" flips cannot both insert: the loser's insert fails and the
surviving row is reported instead. Removal is a single conditional DELETE,
which makes a concurrent second removal a no-op.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from vidtube.core.exceptions import NotFound
from vidtube.db.models.comment import Comment
from vidtube.db.models.like import Like
from vidtube.db.models.subscription import Subscription
from vidtube.db.models.tweet import Tweet
from vidtube.db.models.user import User
from vidtube.db.models.video import Video
from vidtube.services.base import commit, ensure_valid_id
import logging

logger = logging.getLogger(__name__)

ADDED = "added"
REMOVED = "removed"

class ToggleKind(str, Enum):
    VIDEO_LIKE = "video_like"
    COMMENT_LIKE = "comment_like"
    TWEET_LIKE = "tweet_like"
    SUBSCRIPTION = "subscription"

@dataclass(frozen=True)
class ToggleTarget:
    model: Any
    actor: Any
    target: Any
    target_model: Any
    label: str

TARGETS = {
    ToggleKind.VIDEO_LIKE: ToggleTarget(Like, Like.liked_by_id, Like.video_id, Video, "video"),
    ToggleKind.COMMENT_LIKE: ToggleTarget(Like, Like.liked_by_id, Like.comment_id, Comment, "comment"),
    ToggleKind.TWEET_LIKE: ToggleTarget(Like, Like.liked_by_id, Like.tweet_id, Tweet, "tweet"),
    ToggleKind.SUBSCRIPTION: ToggleTarget(Subscription, Subscription.subscriber_id, Subscription.channel_id, User, "channel"),
}

@dataclass(frozen=True)
class ToggleOutcome:
    state: str
    record: Optional[Any] = None

    @property
    def added(self) -> bool:
        return self.state == ADDED

class ToggleService:
    """Flips the existence of a (actor, target) record"""

    def toggle(self, db: Session, kind: ToggleKind, target_id: str, acting_user_id: str) -> ToggleOutcome:
        rule = TARGETS[kind]
        ensure_valid_id(target_id, rule.label)
        ensure_valid_id(acting_user_id, "user")

        if db.get(rule.target_model, target_id) is None:
            raise NotFound(f"{rule.label.capitalize()} not found")

        criteria = (rule.actor == acting_user_id, rule.target == target_id)
        existing = db.query(rule.model).filter(*criteria).first()

        if existing:
            deleted = db.query(rule.model).filter(rule.model.id == existing.id).delete(synchronize_session=False)
            commit(db, f"removing {kind.value}")
            if not deleted:
                logger.info(f"{kind.value} {target_id} by {acting_user_id} was already removed")
            else:
                logger.info(f"{kind.value} removed: {target_id} by {acting_user_id}")
            return ToggleOutcome(REMOVED)

        record = rule.model(**{rule.actor.key: acting_user_id, rule.target.key: target_id})
        db.add(record)
        try:
            commit(db, f"adding {kind.value}")
        except IntegrityError:
            # A concurrent flip inserted the same pair first
            record = db.query(rule.model).filter(*criteria).first()
            if record is None:
                raise NotFound(f"{rule.label.capitalize()} not found")
            logger.info(f"{kind.value} for {target_id} by {acting_user_id} already present")
            return ToggleOutcome(ADDED, record)

        logger.info(f"{kind.value} added: {target_id} by {acting_user_id}")
        return ToggleOutcome(ADDED, record)
