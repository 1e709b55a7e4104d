# ============================================================================
# FILE: vidtube/api/v1/endpoints/dashboard.py
# ============================================================================
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from vidtube.api.dependencies import get_db, get_pagination, get_services, require_current_user
from vidtube.db import aggregation as agg
from vidtube.db.models.user import User
from vidtube.schemas.common import api_response
from vidtube.services.container import ServiceContainer

router = APIRouter()

@router.get("/stats")
async def get_channel_stats(
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    """
    Totals for the current user's channel: videos, views, likes, subscribers
    Requires authentication
    """
    stats = services.dashboard.get_channel_stats(db, current_user.id)
    return api_response(stats, "Channel stats fetched successfully")

@router.get("/videos")
async def get_channel_videos(
    query: Optional[str] = Query(None),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_type: Optional[str] = Query(None, alias="sortType"),
    pagination: agg.Pagination = Depends(get_pagination),
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    """
    All of the current user's videos (published or not) with like counts
    An empty result is reported as 404
    """
    videos = services.dashboard.get_channel_videos(db, current_user.id, pagination, query, sort_by, sort_type)
    return api_response(videos, "Channel videos fetched successfully")
