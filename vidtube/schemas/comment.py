# ============================================================================
# FILE: vidtube/schemas/comment.py
# ============================================================================
from datetime import datetime
from vidtube.schemas.common import CamelModel, NonEmptyStr
from vidtube.schemas.user import UserSummary

class CommentCreate(CamelModel):
    content: NonEmptyStr

class CommentUpdate(CamelModel):
    content: NonEmptyStr

class CommentResponse(CamelModel):
    id: str
    video_id: str
    owner_id: str
    content: str
    created_at: datetime
    updated_at: datetime

class CommentWithOwner(CommentResponse):
    owner: UserSummary
