# ============================================================================
# FILE: vidtube/api/v1/endpoints/tweet.py
# ============================================================================
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from vidtube.api.dependencies import get_db, get_services, require_current_user
from vidtube.db.models.user import User
from vidtube.schemas.common import api_response
from vidtube.schemas.tweet import TweetCreate, TweetResponse, TweetUpdate
from vidtube.services.container import ServiceContainer

router = APIRouter()

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_tweet(
    tweet_data: TweetCreate,
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    tweet = services.tweets.create_tweet(db, current_user.id, tweet_data)
    return api_response(TweetResponse.model_validate(tweet), "Tweet created successfully", 201)

@router.get("/user/{user_id}")
async def get_user_tweets(
    user_id: str,
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    """All tweets of a user with the author attached, newest first"""
    tweets = services.tweets.get_user_tweets(db, user_id)
    return api_response(tweets, "Tweets fetched successfully")

@router.patch("/{tweet_id}")
async def update_tweet(
    tweet_id: str,
    tweet_data: TweetUpdate,
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    """
    Edit a tweet
    Requires authentication and ownership
    """
    tweet = services.tweets.update_tweet(db, tweet_id, current_user.id, tweet_data)
    return api_response(TweetResponse.model_validate(tweet), "Tweet updated successfully")

@router.delete("/{tweet_id}")
async def delete_tweet(
    tweet_id: str,
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    services.tweets.delete_tweet(db, tweet_id, current_user.id)
    return api_response({}, "Tweet deleted successfully")
