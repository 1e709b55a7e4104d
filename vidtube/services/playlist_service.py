# ============================================================================
# FILE: vidtube/services/playlist_service.py
# ============================================================================
from typing import List
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from vidtube.core.exceptions import InvalidArgument, NotFound
from vidtube.db import aggregation as agg
from vidtube.db.models.playlist import Playlist, PlaylistVideo
from vidtube.db.models.video import Video
from vidtube.schemas.playlist import (
    PlaylistCreate,
    PlaylistDetail,
    PlaylistResponse,
    PlaylistSummary,
    PlaylistUpdate,
)
from vidtube.schemas.user import UserSummary
from vidtube.schemas.video import VideoWithOwner
from vidtube.services.base import commit, ensure_owner, ensure_valid_id
import logging

logger = logging.getLogger(__name__)

def to_response(playlist: Playlist) -> PlaylistResponse:
    return PlaylistResponse(
        id=playlist.id,
        owner_id=playlist.owner_id,
        name=playlist.name,
        description=playlist.description,
        videos=[entry.video_id for entry in playlist.entries],
        created_at=playlist.created_at,
        updated_at=playlist.updated_at,
    )

class PlaylistService:
    """Service layer for playlist operations"""

    def _get_playlist(self, db: Session, playlist_id: str) -> Playlist:
        ensure_valid_id(playlist_id, "playlist")
        playlist = db.get(Playlist, playlist_id)
        if not playlist:
            raise NotFound("Playlist not found")
        return playlist

    def create_playlist(self, db: Session, user_id: str, playlist_data: PlaylistCreate) -> PlaylistResponse:
        """Create a new playlist for a user"""
        playlist = Playlist(
            owner_id=user_id,
            name=playlist_data.name,
            description=playlist_data.description,
        )
        db.add(playlist)
        commit(db, "creating playlist")
        logger.info(f"Playlist created: {playlist.id} for user {user_id}")
        return to_response(playlist)

    def get_user_playlists(self, db: Session, user_id: str) -> List[PlaylistSummary]:
        """All playlists of a user with their video counts, newest first"""
        ensure_valid_id(user_id, "user")
        query = agg.match(db.query(Playlist), Playlist.owner_id == user_id)
        query = agg.add_fields(
            query,
            agg.size_of(PlaylistVideo.id, PlaylistVideo.playlist_id == Playlist.id, label="video_count"),
        )
        query = agg.sort(query, Playlist.created_at, descending=True, tiebreaker=Playlist.id)
        rows = agg.require_results(query.all(), "No playlists found")
        return [
            PlaylistSummary.model_validate(playlist).model_copy(update={"video_count": count})
            for playlist, count in rows
        ]

    def get_playlist_by_id(self, db: Session, playlist_id: str) -> PlaylistDetail:
        """Playlist with its owner and its published videos (each with owner) in order"""
        ensure_valid_id(playlist_id, "playlist")
        query = agg.match(db.query(Playlist), Playlist.id == playlist_id)
        query = agg.lookup(query, Playlist.owner, required=True)
        playlist = agg.first_or_not_found(query.all(), "Playlist not found")

        videos = db.query(Video).join(PlaylistVideo, PlaylistVideo.video_id == Video.id)
        videos = agg.match(videos, PlaylistVideo.playlist_id == playlist_id, Video.is_published.is_(True))
        videos = agg.lookup(videos, Video.owner, required=True)
        videos = videos.order_by(PlaylistVideo.position.asc())

        return PlaylistDetail(
            id=playlist.id,
            name=playlist.name,
            description=playlist.description,
            owner=UserSummary.model_validate(playlist.owner),
            videos=[VideoWithOwner.model_validate(video) for video in videos.all()],
            created_at=playlist.created_at,
            updated_at=playlist.updated_at,
        )

    def update_playlist(self, db: Session, playlist_id: str, user_id: str, update_data: PlaylistUpdate) -> PlaylistResponse:
        """Update playlist details"""
        playlist = self._get_playlist(db, playlist_id)
        ensure_owner(playlist.owner_id, user_id, "You are not allowed to update this playlist")

        playlist.name = update_data.name
        playlist.description = update_data.description
        commit(db, "updating playlist")
        logger.info(f"Playlist updated: {playlist_id}")
        return to_response(playlist)

    def delete_playlist(self, db: Session, playlist_id: str, user_id: str) -> None:
        """Delete a playlist"""
        playlist = self._get_playlist(db, playlist_id)
        ensure_owner(playlist.owner_id, user_id, "You are not allowed to delete this playlist")

        db.delete(playlist)
        commit(db, "deleting playlist")
        logger.info(f"Playlist deleted: {playlist_id}")

    def add_video_to_playlist(self, db: Session, playlist_id: str, video_id: str, user_id: str) -> PlaylistResponse:
        """Append a video to a playlist"""
        ensure_valid_id(playlist_id, "playlist")
        ensure_valid_id(video_id, "video")
        if db.get(Video, video_id) is None:
            raise NotFound("Video not found")

        playlist = self._get_playlist(db, playlist_id)
        ensure_owner(playlist.owner_id, user_id, "You are not allowed to add videos to this playlist")

        # Check if video already exists in playlist
        if any(entry.video_id == video_id for entry in playlist.entries):
            raise InvalidArgument("Video already exists in playlist")

        position = max((entry.position for entry in playlist.entries), default=0) + 1
        playlist.entries.append(PlaylistVideo(video_id=video_id, position=position))
        try:
            commit(db, "adding video to playlist")
        except IntegrityError:
            raise InvalidArgument("Video already exists in playlist")

        db.refresh(playlist)
        logger.info(f"Video added to playlist {playlist_id}: {video_id}")
        return to_response(playlist)

    def remove_video_from_playlist(self, db: Session, playlist_id: str, video_id: str, user_id: str) -> PlaylistResponse:
        """Remove a video from a playlist"""
        ensure_valid_id(playlist_id, "playlist")
        ensure_valid_id(video_id, "video")
        if db.get(Video, video_id) is None:
            raise NotFound("Video not found")

        playlist = self._get_playlist(db, playlist_id)
        ensure_owner(playlist.owner_id, user_id, "You are not allowed to remove videos from this playlist")

        entry = next((e for e in playlist.entries if e.video_id == video_id), None)
        if entry is None:
            raise InvalidArgument("Video does not exist in playlist")

        playlist.entries.remove(entry)
        commit(db, "removing video from playlist")
        logger.info(f"Video removed from playlist {playlist_id}: {video_id}")
        return to_response(playlist)
