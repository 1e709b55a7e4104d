# ============================================================================
# FILE: vidtube/api/v1/endpoints/video.py
# ============================================================================
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session
from typing import Optional
from vidtube.api.dependencies import (
    get_current_user,
    get_db,
    get_pagination,
    get_services,
    get_settings,
    require_current_user,
)
from vidtube.config import Settings
from vidtube.core.uploads import staged_uploads
from vidtube.db import aggregation as agg
from vidtube.db.models.user import User
from vidtube.schemas.common import api_response
from vidtube.schemas.video import VideoCreate, VideoResponse, VideoUpdate
from vidtube.services.container import ServiceContainer
import logging

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("")
async def get_all_videos(
    query: Optional[str] = Query(None),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_type: Optional[str] = Query(None, alias="sortType"),
    user_id: Optional[str] = Query(None, alias="userId"),
    pagination: agg.Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    """
    List published videos with their owners
    Supports search on title/description, sorting and page/limit
    """
    videos = services.videos.get_all_videos(db, pagination, query, sort_by, sort_type, user_id)
    return api_response(videos, "Videos fetched successfully")

@router.post("", status_code=status.HTTP_201_CREATED)
def publish_video(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    video_file: Optional[UploadFile] = File(None, alias="videoFile"),
    thumbnail: Optional[UploadFile] = File(None),
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
    settings: Settings = Depends(get_settings),
):
    """
    Upload a video with its thumbnail
    Requires authentication
    """
    video_data = VideoCreate(title=title, description=description)
    with staged_uploads(settings.UPLOAD_TEMP_DIR, video_file, thumbnail) as (video_path, thumbnail_path):
        video = services.videos.publish_video(db, current_user.id, video_data, video_path, thumbnail_path)
    return api_response(VideoResponse.model_validate(video), "Video published successfully", 201)

@router.get("/{video_id}")
async def get_video_by_id(
    video_id: str,
    current_user: Optional[User] = Depends(get_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    """
    Get a video with its owner
    Signed-in viewers get the view counted and added to their watch history
    """
    viewer_id = current_user.id if current_user else None
    video = services.videos.get_video_by_id(db, video_id, viewer_id)
    return api_response(video, "Video fetched successfully")

@router.patch("/{video_id}")
def update_video(
    video_id: str,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    thumbnail: Optional[UploadFile] = File(None),
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
    settings: Settings = Depends(get_settings),
):
    """
    Update title, description and/or thumbnail
    Requires authentication and ownership
    """
    update_data = VideoUpdate(title=title, description=description)
    with staged_uploads(settings.UPLOAD_TEMP_DIR, thumbnail) as (thumbnail_path,):
        video = services.videos.update_video(db, video_id, current_user.id, update_data, thumbnail_path)
    return api_response(VideoResponse.model_validate(video), "Video updated successfully")

@router.delete("/{video_id}")
def delete_video(
    video_id: str,
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    services.videos.delete_video(db, video_id, current_user.id)
    return api_response({}, "Video deleted successfully")

@router.patch("/toggle/publish/{video_id}")
async def toggle_publish_status(
    video_id: str,
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    """Flip a video between published and unpublished"""
    video = services.videos.toggle_publish_status(db, video_id, current_user.id)
    return api_response({"isPublished": video.is_published}, "Publish status updated")
