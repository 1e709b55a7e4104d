# ============================================================================
# FILE: vidtube/schemas/playlist.py
# ============================================================================
from typing import List
from datetime import datetime
from vidtube.schemas.common import CamelModel, NonEmptyStr
from vidtube.schemas.user import UserSummary
from vidtube.schemas.video import VideoWithOwner

class PlaylistCreate(CamelModel):
    """Schema for creating a playlist"""
    name: NonEmptyStr
    description: NonEmptyStr

class PlaylistUpdate(CamelModel):
    """Schema for updating a playlist"""
    name: NonEmptyStr
    description: NonEmptyStr

class PlaylistResponse(CamelModel):
    """Schema for playlist response; videos are ids in playlist order"""
    id: str
    owner_id: str
    name: str
    description: str
    videos: List[str] = []
    created_at: datetime
    updated_at: datetime

class PlaylistSummary(CamelModel):
    id: str
    name: str
    description: str
    video_count: int = 0
    created_at: datetime

class PlaylistDetail(CamelModel):
    id: str
    name: str
    description: str
    owner: UserSummary
    videos: List[VideoWithOwner] = []
    created_at: datetime
    updated_at: datetime
