# ============================================================================
# FILE: vidtube/api/v1/endpoints/comment.py
# ============================================================================
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from vidtube.api.dependencies import get_db, get_pagination, get_services, require_current_user
from vidtube.db import aggregation as agg
from vidtube.db.models.user import User
from vidtube.schemas.comment import CommentCreate, CommentResponse, CommentUpdate
from vidtube.schemas.common import api_response
from vidtube.services.container import ServiceContainer

router = APIRouter()

@router.get("/{video_id}")
async def get_video_comments(
    video_id: str,
    pagination: agg.Pagination = Depends(get_pagination),
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    """Comments of a video with their authors, newest first"""
    comments = services.comments.get_video_comments(db, video_id, pagination)
    return api_response(comments, "Comments fetched successfully")

@router.post("/{video_id}", status_code=status.HTTP_201_CREATED)
async def add_comment(
    video_id: str,
    comment_data: CommentCreate,
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    comment = services.comments.add_comment(db, video_id, current_user.id, comment_data)
    return api_response(CommentResponse.model_validate(comment), "Comment added successfully", 201)

@router.patch("/c/{comment_id}")
async def update_comment(
    comment_id: str,
    comment_data: CommentUpdate,
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    """
    Edit a comment
    Requires authentication and ownership
    """
    comment = services.comments.update_comment(db, comment_id, current_user.id, comment_data)
    return api_response(CommentResponse.model_validate(comment), "Comment updated successfully")

@router.delete("/c/{comment_id}")
async def delete_comment(
    comment_id: str,
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    services.comments.delete_comment(db, comment_id, current_user.id)
    return api_response({}, "Comment deleted successfully")
