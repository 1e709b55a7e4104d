# ============================================================================
# FILE: vidtube/services/tweet_service.py
# ============================================================================
from typing import List
from sqlalchemy.orm import Session
from vidtube.core.exceptions import NotFound
from vidtube.db import aggregation as agg
from vidtube.db.models.tweet import Tweet
from vidtube.schemas.tweet import TweetCreate, TweetUpdate, TweetWithOwner
from vidtube.services.base import commit, ensure_owner, ensure_valid_id
import logging

logger = logging.getLogger(__name__)

class TweetService:
    """Service layer for tweet operations"""

    def _get_tweet(self, db: Session, tweet_id: str) -> Tweet:
        ensure_valid_id(tweet_id, "tweet")
        tweet = db.get(Tweet, tweet_id)
        if not tweet:
            raise NotFound("Tweet not found")
        return tweet

    def create_tweet(self, db: Session, user_id: str, data: TweetCreate) -> Tweet:
        tweet = Tweet(owner_id=user_id, content=data.content)
        db.add(tweet)
        commit(db, "adding tweet")
        logger.info(f"Tweet created: {tweet.id} by {user_id}")
        return tweet

    def get_user_tweets(self, db: Session, user_id: str) -> List[TweetWithOwner]:
        ensure_valid_id(user_id, "user")
        query = agg.match(db.query(Tweet), Tweet.owner_id == user_id)
        query = agg.lookup(query, Tweet.owner)
        query = agg.sort(query, Tweet.created_at, descending=True, tiebreaker=Tweet.id)
        return [TweetWithOwner.model_validate(tweet) for tweet in query.all()]

    def update_tweet(self, db: Session, tweet_id: str, user_id: str, data: TweetUpdate) -> Tweet:
        tweet = self._get_tweet(db, tweet_id)
        ensure_owner(tweet.owner_id, user_id, "You are not allowed to update this tweet")

        tweet.content = data.content
        commit(db, "updating tweet")
        logger.info(f"Tweet updated: {tweet_id}")
        return tweet

    def delete_tweet(self, db: Session, tweet_id: str, user_id: str) -> None:
        tweet = self._get_tweet(db, tweet_id)
        ensure_owner(tweet.owner_id, user_id, "You are not allowed to delete this tweet")

        db.delete(tweet)
        commit(db, "deleting tweet")
        logger.info(f"Tweet deleted: {tweet_id}")
