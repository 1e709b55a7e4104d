# ============================================================================
# FILE: vidtube/schemas/tweet.py
# ============================================================================
from typing import Optional
from datetime import datetime
from vidtube.schemas.common import CamelModel, NonEmptyStr
from vidtube.schemas.user import UserSummary

class TweetCreate(CamelModel):
    content: NonEmptyStr

class TweetUpdate(CamelModel):
    content: NonEmptyStr

class TweetResponse(CamelModel):
    id: str
    owner_id: str
    content: str
    created_at: datetime
    updated_at: datetime

class TweetWithOwner(TweetResponse):
    owner: Optional[UserSummary] = None
