# ============================================================================
# FILE: vidtube/schemas/video.py
# ============================================================================
from typing import Optional
from datetime import datetime
from vidtube.schemas.common import CamelModel, NonEmptyStr
from vidtube.schemas.user import UserSummary

class VideoCreate(CamelModel):
    title: NonEmptyStr
    description: NonEmptyStr

class VideoUpdate(CamelModel):
    title: Optional[NonEmptyStr] = None
    description: Optional[NonEmptyStr] = None

class VideoResponse(CamelModel):
    id: str
    owner_id: str
    title: str
    description: str
    video_file: str
    thumbnail: str
    duration: float
    views: int
    is_published: bool
    created_at: datetime
    updated_at: datetime

class VideoWithOwner(VideoResponse):
    owner: Optional[UserSummary] = None

class VideoWithLikes(VideoResponse):
    likes: int = 0

    @classmethod
    def from_row(cls, video, likes: int) -> "VideoWithLikes":
        return cls.model_validate(video).model_copy(update={"likes": likes or 0})
