# ============================================================================
# FILE: vidtube/services/user_service.py
# ============================================================================
from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from vidtube.core.asset_store import AssetStore
from vidtube.core.cache import RedisCache, channel_stats_key
from vidtube.core.exceptions import Conflict, Internal, InvalidArgument, NotFound
from vidtube.core.security import get_password_hash
from vidtube.db import aggregation as agg
from vidtube.db.models.history import WatchHistory
from vidtube.db.models.subscription import Subscription
from vidtube.db.models.user import User
from vidtube.db.models.video import Video
from vidtube.schemas.user import AccountUpdate, ChannelProfile, UserCreate
from vidtube.schemas.video import VideoWithOwner
from vidtube.services.base import commit
import logging

logger = logging.getLogger(__name__)

class UserService:
    """Service layer for user operations"""

    def __init__(self, asset_store: AssetStore, cache: RedisCache):
        self.assets = asset_store
        self.cache = cache

    def _discard_assets(self, *urls: Optional[str]) -> None:
        for url in urls:
            if url and not self.assets.delete(url, "image"):
                logger.warning(f"Could not remove orphaned asset {url}")

    def get_user(self, db: Session, user_id: str) -> User:
        user = db.get(User, user_id)
        if not user:
            raise NotFound("User not found")
        return user

    def create_user(self, db: Session, user_data: UserCreate,
                    avatar_path: Optional[str], cover_image_path: Optional[str] = None) -> User:
        """Create a new user account; avatar is mandatory, cover image optional"""
        if not avatar_path:
            raise InvalidArgument("Avatar file is required")

        existing = db.query(User).filter(
            or_(User.username == user_data.username, User.email == user_data.email)
        ).first()
        if existing:
            raise Conflict("User with email or username already exists")

        password_hash = get_password_hash(user_data.password)

        avatar = self.assets.upload(avatar_path)
        if not avatar:
            raise InvalidArgument("Avatar file is required")
        cover_image = self.assets.upload(cover_image_path) if cover_image_path else None
        cover_url = cover_image.url if cover_image else None

        user = User(
            username=user_data.username,
            email=user_data.email,
            full_name=user_data.full_name,
            password_hash=password_hash,
            avatar=avatar.url,
            cover_image=cover_url,
        )
        db.add(user)
        try:
            commit(db, "registering the user")
        except IntegrityError:
            self._discard_assets(avatar.url, cover_url)
            raise Conflict("User with email or username already exists")
        except Internal:
            self._discard_assets(avatar.url, cover_url)
            raise

        logger.info(f"User created: {user.username}")
        return user

    def update_account(self, db: Session, user_id: str, data: AccountUpdate) -> User:
        user = self.get_user(db, user_id)
        taken = db.query(User).filter(User.email == data.email, User.id != user_id).first()
        if taken:
            raise Conflict("Email is already in use")

        user.full_name = data.full_name
        user.email = data.email
        try:
            commit(db, "updating account details")
        except IntegrityError:
            raise Conflict("Email is already in use")
        self.cache.delete_cache(channel_stats_key(user_id))
        logger.info(f"Account details updated: {user_id}")
        return user

    def _replace_image(self, db: Session, user_id: str, local_path: Optional[str], field: str, label: str) -> User:
        if not local_path:
            raise InvalidArgument(f"{label} file is missing")

        user = self.get_user(db, user_id)
        uploaded = self.assets.upload(local_path)
        if not uploaded:
            raise Internal(f"Error while uploading {label.lower()}")

        previous = getattr(user, field)
        setattr(user, field, uploaded.url)
        try:
            commit(db, f"updating {label.lower()}")
        except IntegrityError as e:
            self._discard_assets(uploaded.url)
            raise Internal(f"Error while updating {label.lower()}") from e
        except Internal:
            self._discard_assets(uploaded.url)
            raise

        # Old file is removed only once the new one is persisted
        if previous and previous.strip():
            self._discard_assets(previous)
        self.cache.delete_cache(channel_stats_key(user_id))
        logger.info(f"{label} updated for user {user_id}")
        return user

    def update_avatar(self, db: Session, user_id: str, local_path: Optional[str]) -> User:
        return self._replace_image(db, user_id, local_path, "avatar", "Avatar")

    def update_cover_image(self, db: Session, user_id: str, local_path: Optional[str]) -> User:
        return self._replace_image(db, user_id, local_path, "cover_image", "Cover image")

    def get_channel_profile(self, db: Session, username: str, requester_id: Optional[str]) -> ChannelProfile:
        """Channel page: profile, subscriber counts and whether the requester is subscribed"""
        if not username or not username.strip():
            raise InvalidArgument("Username is missing")

        if requester_id:
            is_subscribed = agg.is_member(
                Subscription.id,
                Subscription.channel_id == User.id,
                Subscription.subscriber_id == requester_id,
                label="is_subscribed",
            )
        else:
            is_subscribed = agg.constant_false("is_subscribed")

        query = agg.match(db.query(User), User.username == username.strip().lower())
        query = agg.add_fields(
            query,
            agg.size_of(Subscription.id, Subscription.channel_id == User.id, label="subscribers_count"),
            agg.size_of(Subscription.id, Subscription.subscriber_id == User.id, label="subscribed_to_count"),
            is_subscribed,
        )
        user, subscribers, subscribed_to, subscribed = agg.first_or_not_found(
            query.all(), "Channel does not exist"
        )
        return ChannelProfile.model_validate(user).model_copy(update={
            "subscribers_count": subscribers,
            "channel_subscribed_to_count": subscribed_to,
            "is_subscribed": bool(subscribed),
        })

    def get_watch_history(self, db: Session, user_id: str) -> List[VideoWithOwner]:
        """Watched videos, most recent first, each with its owner attached"""
        agg.first_or_not_found(agg.match(db.query(User.id), User.id == user_id).all(), "User not found")

        query = db.query(Video).join(WatchHistory, WatchHistory.video_id == Video.id)
        query = agg.match(query, WatchHistory.user_id == user_id)
        query = agg.lookup(query, Video.owner)
        query = agg.sort(query, WatchHistory.watched_at, descending=True, tiebreaker=WatchHistory.id)
        return [VideoWithOwner.model_validate(video) for video in query.all()]
