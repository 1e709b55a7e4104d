# ============================================================================
# FILE: vidtube/schemas/user.py
# ============================================================================
from pydantic import EmailStr, field_validator, model_validator
from typing import Optional
from datetime import datetime
from vidtube.schemas.common import CamelModel, NonEmptyStr

class UserCreate(CamelModel):
    """Schema for user registration (files travel separately as multipart parts)"""
    full_name: NonEmptyStr
    email: EmailStr
    username: NonEmptyStr
    password: NonEmptyStr

    @field_validator("username", "email")
    @classmethod
    def lowercase(cls, value: str) -> str:
        return value.lower()

class UserLogin(CamelModel):
    """Schema for user login (username or email)"""
    username: Optional[str] = None
    email: Optional[str] = None
    password: NonEmptyStr

    @model_validator(mode="after")
    def require_identifier(self):
        self.username = (self.username or "").strip().lower() or None
        self.email = (self.email or "").strip().lower() or None
        if not self.username and not self.email:
            raise ValueError("Username or Email is required")
        return self

class RefreshTokenRequest(CamelModel):
    refresh_token: Optional[str] = None

class PasswordChange(CamelModel):
    old_password: NonEmptyStr
    new_password: NonEmptyStr

class AccountUpdate(CamelModel):
    full_name: NonEmptyStr
    email: EmailStr

    @field_validator("email")
    @classmethod
    def lowercase(cls, value: str) -> str:
        return value.lower()

class UserSummary(CamelModel):
    """Public owner details attached to videos, comments, tweets..."""
    id: str
    username: str
    full_name: str
    avatar: str

class UserResponse(CamelModel):
    """Sanitized user: never carries the password hash or refresh token"""
    id: str
    username: str
    email: str
    full_name: str
    avatar: str
    cover_image: Optional[str] = None
    created_at: datetime
    updated_at: datetime

class TokenPairResponse(CamelModel):
    access_token: str
    refresh_token: str

class LoginResponse(TokenPairResponse):
    user: UserResponse

class ChannelProfile(CamelModel):
    id: str
    username: str
    full_name: str
    email: str
    avatar: str
    cover_image: Optional[str] = None
    subscribers_count: int = 0
    channel_subscribed_to_count: int = 0
    is_subscribed: bool = False
