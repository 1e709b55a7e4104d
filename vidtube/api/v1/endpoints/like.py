# ============================================================================
# FILE: vidtube/api/v1/endpoints/like.py
# ============================================================================
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from vidtube.api.dependencies import get_db, get_services, require_current_user
from vidtube.db.models.user import User
from vidtube.schemas.common import api_response
from vidtube.schemas.engagement import LikeResponse, ToggleResult
from vidtube.services.container import ServiceContainer
from vidtube.services.toggle_service import ToggleOutcome

router = APIRouter()

def like_toggle_response(outcome: ToggleOutcome, response: Response, label: str):
    if outcome.added:
        response.status_code = status.HTTP_201_CREATED
        data = ToggleResult(state=outcome.state, record=LikeResponse.model_validate(outcome.record))
        return api_response(data, f"{label} liked successfully", 201)
    return api_response(ToggleResult(state=outcome.state), f"{label} unliked successfully")

@router.post("/video/{video_id}")
async def toggle_video_like(
    video_id: str,
    response: Response,
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    """
    Like the video, or remove the like if it is already there
    Returns 201 when a like was added and 200 when it was removed
    """
    outcome = services.likes.toggle_video_like(db, video_id, current_user.id)
    return like_toggle_response(outcome, response, "Video")

@router.post("/comment/{comment_id}")
async def toggle_comment_like(
    comment_id: str,
    response: Response,
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    outcome = services.likes.toggle_comment_like(db, comment_id, current_user.id)
    return like_toggle_response(outcome, response, "Comment")

@router.post("/tweet/{tweet_id}")
async def toggle_tweet_like(
    tweet_id: str,
    response: Response,
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    outcome = services.likes.toggle_tweet_like(db, tweet_id, current_user.id)
    return like_toggle_response(outcome, response, "Tweet")

@router.get("/videos")
async def get_liked_videos(
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    """
    Published videos the current user liked, most recent like first
    Requires authentication
    """
    videos = services.likes.get_liked_videos(db, current_user.id)
    return api_response(videos, "Liked videos fetched successfully")
