# ============================================================================
# FILE: vidtube/services/video_service.py
# ============================================================================
from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from vidtube.core.asset_store import AssetStore
from vidtube.core.cache import RedisCache, channel_stats_key
from vidtube.core.exceptions import Internal, InvalidArgument, NotFound
from vidtube.db import aggregation as agg
from vidtube.db.base import utcnow
from vidtube.db.models.history import WatchHistory
from vidtube.db.models.video import Video
from vidtube.schemas.video import VideoCreate, VideoUpdate, VideoWithOwner
from vidtube.services.base import commit, ensure_owner, ensure_valid_id
import logging

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {
    "createdAt": Video.created_at,
    "updatedAt": Video.updated_at,
    "title": Video.title,
    "views": Video.views,
    "duration": Video.duration,
}

class VideoService:
    """Service layer for video operations"""

    def __init__(self, asset_store: AssetStore, cache: RedisCache):
        self.assets = asset_store
        self.cache = cache

    def _get_video(self, db: Session, video_id: str) -> Video:
        ensure_valid_id(video_id, "video")
        video = db.get(Video, video_id)
        if not video:
            raise NotFound("Video does not exist")
        return video

    def _invalidate_stats(self, owner_id: str) -> None:
        self.cache.delete_cache(channel_stats_key(owner_id))

    def get_all_videos(self, db: Session, pagination: agg.Pagination, query_text: Optional[str] = None,
                       sort_by: Optional[str] = None, sort_type: Optional[str] = None,
                       user_id: Optional[str] = None) -> List[VideoWithOwner]:
        """Published videos, optionally filtered by owner and searched by title/description"""
        column, descending = agg.resolve_sort(sort_by, sort_type, SORTABLE_FIELDS)

        query = agg.match(db.query(Video), Video.is_published.is_(True))
        if user_id:
            ensure_valid_id(user_id, "user")
            query = agg.match(query, Video.owner_id == user_id)
        if query_text and query_text.strip():
            query = agg.match(query, agg.text_search(query_text.strip(), Video.title, Video.description))

        query = agg.lookup(query, Video.owner)
        query = agg.sort(query, column, descending=descending, tiebreaker=Video.id)
        videos = agg.paginate(query, pagination).all()
        return [VideoWithOwner.model_validate(video) for video in videos]

    def publish_video(self, db: Session, owner_id: str, data: VideoCreate,
                      video_path: Optional[str], thumbnail_path: Optional[str]) -> Video:
        if not video_path or not thumbnail_path:
            raise InvalidArgument("Video and thumbnail both are required")

        video_file = self.assets.upload(video_path)
        thumbnail = self.assets.upload(thumbnail_path)
        if not video_file or not thumbnail:
            # Do not leave a half-uploaded pair behind
            if video_file:
                self.assets.delete(video_file.url, "video")
            if thumbnail:
                self.assets.delete(thumbnail.url, "image")
            raise Internal("Error while uploading video or thumbnail")

        video = Video(
            owner_id=owner_id,
            title=data.title,
            description=data.description,
            video_file=video_file.url,
            thumbnail=thumbnail.url,
            duration=video_file.duration or 0,
        )
        db.add(video)
        try:
            commit(db, "publishing video")
        except (IntegrityError, Internal) as e:
            self.assets.delete(video_file.url, "video")
            self.assets.delete(thumbnail.url, "image")
            raise Internal("Something went wrong while publishing video") from e

        self._invalidate_stats(owner_id)
        logger.info(f"Video published: {video.id} by {owner_id}")
        return video

    def get_video_by_id(self, db: Session, video_id: str, viewer_id: Optional[str] = None) -> VideoWithOwner:
        """Fetch a video with its owner; a viewer's visit counts as a view"""
        ensure_valid_id(video_id, "video")
        query = agg.lookup(agg.match(db.query(Video), Video.id == video_id), Video.owner)
        video = agg.first_or_not_found(query.all(), "Video not found")

        if not video.is_published and video.owner_id != viewer_id:
            raise NotFound("Video not found")

        if viewer_id:
            self.record_view(db, video, viewer_id)
        return VideoWithOwner.model_validate(video)

    def _count_view(self, db: Session, video_id: str) -> None:
        db.query(Video).filter(Video.id == video_id).update(
            {Video.views: Video.views + 1}, synchronize_session=False
        )

    def _history_entry(self, db: Session, video_id: str, viewer_id: str) -> Optional[WatchHistory]:
        return db.query(WatchHistory).filter(
            WatchHistory.user_id == viewer_id, WatchHistory.video_id == video_id
        ).first()

    def record_view(self, db: Session, video: Video, viewer_id: str) -> None:
        """Bump the view counter and move the video to the top of the viewer's history"""
        self._count_view(db, video.id)
        entry = self._history_entry(db, video.id, viewer_id)
        if entry:
            entry.watched_at = utcnow()
        else:
            db.add(WatchHistory(user_id=viewer_id, video_id=video.id))
        try:
            commit(db, "recording video view")
        except IntegrityError:
            # A concurrent first view inserted the entry; the rollback also undid our increment
            logger.info(f"Watch history entry for {video.id} already recorded")
            self._count_view(db, video.id)
            entry = self._history_entry(db, video.id, viewer_id)
            if entry:
                entry.watched_at = utcnow()
            commit(db, "recording video view")
        db.refresh(video)
        self._invalidate_stats(video.owner_id)

    def update_video(self, db: Session, video_id: str, user_id: str, data: VideoUpdate,
                     thumbnail_path: Optional[str] = None) -> Video:
        video = self._get_video(db, video_id)
        ensure_owner(video.owner_id, user_id, "You are not the owner of this video")

        if data.title is None and data.description is None and not thumbnail_path:
            raise InvalidArgument("Nothing to update")

        if data.title is not None:
            video.title = data.title
        if data.description is not None:
            video.description = data.description

        old_thumbnail = None
        if thumbnail_path:
            thumbnail = self.assets.upload(thumbnail_path)
            if not thumbnail:
                db.rollback()
                raise Internal("Error while uploading thumbnail")
            old_thumbnail = video.thumbnail
            video.thumbnail = thumbnail.url

        commit(db, "updating video")
        if old_thumbnail and not self.assets.delete(old_thumbnail, "image"):
            logger.warning(f"Old thumbnail of video {video_id} could not be removed")
        logger.info(f"Video updated: {video_id}")
        return video

    def delete_video(self, db: Session, video_id: str, user_id: str) -> None:
        video = self._get_video(db, video_id)
        ensure_owner(video.owner_id, user_id, "You are not the owner of this video")

        files = [(video.thumbnail, "image"), (video.video_file, "video")]
        db.delete(video)
        commit(db, "deleting video")

        for url, kind in files:
            if not self.assets.delete(url, kind):
                logger.warning(f"Asset {url} of deleted video {video_id} could not be removed")
        self._invalidate_stats(user_id)
        logger.info(f"Video deleted: {video_id}")

    def toggle_publish_status(self, db: Session, video_id: str, user_id: str) -> Video:
        video = self._get_video(db, video_id)
        ensure_owner(video.owner_id, user_id, "You are not the owner of this video")

        video.is_published = not video.is_published
        commit(db, "updating publish status")
        self._invalidate_stats(user_id)
        logger.info(f"Video {video_id} published={video.is_published}")
        return video
