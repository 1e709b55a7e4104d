# ============================================================================
# FILE: vidtube/services/comment_service.py
# ============================================================================
from typing import List
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from vidtube.core.exceptions import NotFound
from vidtube.db import aggregation as agg
from vidtube.db.models.comment import Comment
from vidtube.db.models.video import Video
from vidtube.schemas.comment import CommentCreate, CommentUpdate, CommentWithOwner
from vidtube.services.base import commit, ensure_owner, ensure_valid_id
import logging

logger = logging.getLogger(__name__)

class CommentService:
    """Service layer for comment operations"""

    def _get_comment(self, db: Session, comment_id: str) -> Comment:
        ensure_valid_id(comment_id, "comment")
        comment = db.get(Comment, comment_id)
        if not comment:
            raise NotFound("Comment not found")
        return comment

    def get_video_comments(self, db: Session, video_id: str, pagination: agg.Pagination) -> List[CommentWithOwner]:
        """Page of a video's comments, newest first, each with its owner"""
        ensure_valid_id(video_id, "video")
        query = agg.match(db.query(Comment), Comment.video_id == video_id)
        query = agg.lookup(query, Comment.owner, required=True)
        query = agg.sort(query, Comment.created_at, descending=True, tiebreaker=Comment.id)
        comments = agg.paginate(query, pagination).all()
        return [CommentWithOwner.model_validate(comment) for comment in comments]

    def add_comment(self, db: Session, video_id: str, user_id: str, data: CommentCreate) -> Comment:
        ensure_valid_id(video_id, "video")
        if db.get(Video, video_id) is None:
            raise NotFound("Video not found")

        comment = Comment(video_id=video_id, owner_id=user_id, content=data.content)
        db.add(comment)
        try:
            commit(db, "adding comment")
        except IntegrityError:
            # Video removed between the check and the insert
            raise NotFound("Video not found")
        logger.info(f"Comment added: {comment.id} on video {video_id}")
        return comment

    def update_comment(self, db: Session, comment_id: str, user_id: str, data: CommentUpdate) -> Comment:
        comment = self._get_comment(db, comment_id)
        ensure_owner(comment.owner_id, user_id, "You are not allowed to update this comment")

        comment.content = data.content
        commit(db, "updating comment")
        logger.info(f"Comment updated: {comment_id}")
        return comment

    def delete_comment(self, db: Session, comment_id: str, user_id: str) -> None:
        comment = self._get_comment(db, comment_id)
        ensure_owner(comment.owner_id, user_id, "You are not allowed to delete this comment")

        db.delete(comment)
        commit(db, "deleting comment")
        logger.info(f"Comment deleted: {comment_id}")
