# ============================================================================
# FILE: vidtube/api/v1/endpoints/subscription.py
# ============================================================================
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from vidtube.api.dependencies import get_db, get_services, require_current_user
from vidtube.db.models.user import User
from vidtube.schemas.common import api_response
from vidtube.schemas.engagement import SubscriptionResponse, ToggleResult
from vidtube.services.container import ServiceContainer

router = APIRouter()

@router.post("/{channel_id}")
async def toggle_subscription(
    channel_id: str,
    response: Response,
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    """
    Subscribe to a channel, or unsubscribe if already subscribed
    Returns 201 when subscribed and 200 when unsubscribed
    """
    outcome = services.subscriptions.toggle_subscription(db, channel_id, current_user.id)
    if outcome.added:
        response.status_code = status.HTTP_201_CREATED
        data = ToggleResult(state=outcome.state, record=SubscriptionResponse.model_validate(outcome.record))
        return api_response(data, "Subscribed successfully", 201)
    return api_response(ToggleResult(state=outcome.state), "Unsubscribed successfully")

@router.get("/subscribers/{channel_id}")
async def get_channel_subscribers(
    channel_id: str,
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    subscribers = services.subscriptions.get_channel_subscribers(db, channel_id)
    return api_response(subscribers, "Subscribers fetched successfully")

@router.get("/channels/{subscriber_id}")
async def get_subscribed_channels(
    subscriber_id: str,
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    """Channels a user is subscribed to"""
    channels = services.subscriptions.get_subscribed_channels(db, subscriber_id)
    return api_response(channels, "Subscribed channels fetched successfully")
