# ============================================================================
# FILE: vidtube/api/v1/endpoints/playlist.py
# ============================================================================
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from vidtube.api.dependencies import get_db, get_services, require_current_user
from vidtube.db.models.user import User
from vidtube.schemas.common import api_response
from vidtube.schemas.playlist import PlaylistCreate, PlaylistUpdate
from vidtube.services.container import ServiceContainer
import logging

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_playlist(
    playlist_data: PlaylistCreate,
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    """
    Create a new playlist
    Requires authentication
    """
    playlist = services.playlists.create_playlist(db, current_user.id, playlist_data)
    return api_response(playlist, "Playlist created successfully", 201)

@router.get("/user/{user_id}")
async def get_user_playlists(
    user_id: str,
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    """
    Get all playlists of a user with their video counts
    Requires authentication
    """
    playlists = services.playlists.get_user_playlists(db, user_id)
    return api_response(playlists, "Playlists fetched successfully")

@router.get("/{playlist_id}")
async def get_playlist(
    playlist_id: str,
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    """
    Get a specific playlist with its owner and published videos
    Requires authentication
    """
    playlist = services.playlists.get_playlist_by_id(db, playlist_id)
    return api_response(playlist, "Playlist fetched successfully")

@router.patch("/add/{video_id}/{playlist_id}")
async def add_video_to_playlist(
    video_id: str,
    playlist_id: str,
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    """
    Add a video to a playlist
    Requires authentication and ownership
    """
    playlist = services.playlists.add_video_to_playlist(db, playlist_id, video_id, current_user.id)
    return api_response(playlist, "Video added to playlist")

@router.patch("/remove/{video_id}/{playlist_id}")
async def remove_video_from_playlist(
    video_id: str,
    playlist_id: str,
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    """
    Remove a video from a playlist
    Requires authentication and ownership
    """
    playlist = services.playlists.remove_video_from_playlist(db, playlist_id, video_id, current_user.id)
    return api_response(playlist, "Video removed from playlist")

@router.patch("/{playlist_id}")
async def update_playlist(
    playlist_id: str,
    update_data: PlaylistUpdate,
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    """
    Update playlist details (name, description)
    Requires authentication and ownership
    """
    playlist = services.playlists.update_playlist(db, playlist_id, current_user.id, update_data)
    return api_response(playlist, "Playlist updated successfully")

@router.delete("/{playlist_id}")
async def delete_playlist(
    playlist_id: str,
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    """
    Delete a playlist
    Requires authentication and ownership
    """
    services.playlists.delete_playlist(db, playlist_id, current_user.id)
    logger.info(f"Playlist {playlist_id} deleted by {current_user.id}")
    return api_response({}, "Playlist deleted successfully")
