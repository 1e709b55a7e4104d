# ============================================================================
# FILE: vidtube/api/v1/endpoints/user.py
# ============================================================================
from fastapi import APIRouter, Body, Depends, File, Form, Request, Response, UploadFile, status
from sqlalchemy.orm import Session
from typing import Optional
from vidtube.api.dependencies import (
    ACCESS_COOKIE,
    REFRESH_COOKIE,
    get_db,
    get_services,
    get_settings,
    require_current_user,
)
from vidtube.config import Settings
from vidtube.core.uploads import staged_uploads
from vidtube.db.models.user import User
from vidtube.schemas.common import api_response
from vidtube.schemas.user import (
    AccountUpdate,
    LoginResponse,
    PasswordChange,
    RefreshTokenRequest,
    TokenPairResponse,
    UserCreate,
    UserLogin,
    UserResponse,
)
from vidtube.services.container import ServiceContainer
import logging

logger = logging.getLogger(__name__)
router = APIRouter()

def _set_session_cookies(response: Response, settings: Settings, access_token: str, refresh_token: str) -> None:
    options = {"httponly": True, "secure": settings.COOKIE_SECURE}
    response.set_cookie(ACCESS_COOKIE, access_token, **options)
    response.set_cookie(REFRESH_COOKIE, refresh_token, **options)

def _clear_session_cookies(response: Response, settings: Settings) -> None:
    options = {"httponly": True, "secure": settings.COOKIE_SECURE}
    response.delete_cookie(ACCESS_COOKIE, **options)
    response.delete_cookie(REFRESH_COOKIE, **options)

@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    full_name: Optional[str] = Form(None, alias="fullName"),
    email: Optional[str] = Form(None),
    username: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    avatar: Optional[UploadFile] = File(None),
    cover_image: Optional[UploadFile] = File(None, alias="coverImage"),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
    settings: Settings = Depends(get_settings),
):
    """
    Register a new user account
    Avatar image is required, cover image is optional
    """
    user_data = UserCreate(full_name=full_name, email=email, username=username, password=password)
    with staged_uploads(settings.UPLOAD_TEMP_DIR, avatar, cover_image) as (avatar_path, cover_path):
        user = services.users.create_user(db, user_data, avatar_path, cover_path)
    return api_response(UserResponse.model_validate(user), "User registered successfully", 201)

@router.post("/login")
def login(
    credentials: UserLogin,
    response: Response,
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
    settings: Settings = Depends(get_settings),
):
    """
    Login with username or email and password
    Sets accessToken/refreshToken cookies and returns them in the body
    """
    user, pair = services.sessions.login(db, credentials.username, credentials.email, credentials.password)
    _set_session_cookies(response, settings, pair.access_token, pair.refresh_token)
    data = LoginResponse(
        user=UserResponse.model_validate(user),
        access_token=pair.access_token,
        refresh_token=pair.refresh_token,
    )
    return api_response(data, "User logged in successfully")

@router.post("/logout")
async def logout(
    response: Response,
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
    settings: Settings = Depends(get_settings),
):
    """Log out: forget the refresh token and clear both cookies"""
    services.sessions.logout(db, current_user.id)
    _clear_session_cookies(response, settings)
    return api_response({}, "User logged out")

@router.post("/refresh-token")
async def refresh_access_token(
    request: Request,
    response: Response,
    payload: Optional[RefreshTokenRequest] = Body(None),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
    settings: Settings = Depends(get_settings),
):
    """
    Exchange the refresh token (cookie or body) for a new token pair
    The presented refresh token cannot be used again
    """
    incoming = request.cookies.get(REFRESH_COOKIE) or (payload.refresh_token if payload else None)
    pair = services.sessions.refresh(db, incoming)
    _set_session_cookies(response, settings, pair.access_token, pair.refresh_token)
    data = TokenPairResponse(access_token=pair.access_token, refresh_token=pair.refresh_token)
    return api_response(data, "Access token refreshed")

@router.patch("/password")
def change_password(
    passwords: PasswordChange,
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    services.sessions.change_password(db, current_user.id, passwords.old_password, passwords.new_password)
    return api_response({}, "Password changed successfully")

@router.get("/current-user")
async def get_current_user_info(current_user: User = Depends(require_current_user)):
    """
    Get current user information
    Requires authentication
    """
    return api_response(UserResponse.model_validate(current_user), "Current user fetched successfully")

@router.patch("/account")
async def update_account_details(
    details: AccountUpdate,
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    user = services.users.update_account(db, current_user.id, details)
    return api_response(UserResponse.model_validate(user), "Account details updated successfully")

@router.patch("/avatar")
def update_avatar(
    avatar: Optional[UploadFile] = File(None),
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
    settings: Settings = Depends(get_settings),
):
    with staged_uploads(settings.UPLOAD_TEMP_DIR, avatar) as (avatar_path,):
        user = services.users.update_avatar(db, current_user.id, avatar_path)
    return api_response(UserResponse.model_validate(user), "Avatar image updated successfully")

@router.patch("/cover-image")
def update_cover_image(
    cover_image: Optional[UploadFile] = File(None, alias="coverImage"),
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
    settings: Settings = Depends(get_settings),
):
    with staged_uploads(settings.UPLOAD_TEMP_DIR, cover_image) as (cover_path,):
        user = services.users.update_cover_image(db, current_user.id, cover_path)
    return api_response(UserResponse.model_validate(user), "Cover image updated successfully")

@router.get("/channel/{username}")
async def get_user_channel_profile(
    username: str,
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    """Channel profile with subscriber counts and the caller's subscription state"""
    profile = services.users.get_channel_profile(db, username, current_user.id)
    return api_response(profile, "User channel fetched successfully")

@router.get("/history")
async def get_watch_history(
    current_user: User = Depends(require_current_user),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    """
    Get user's watch history
    Requires authentication
    """
    history = services.users.get_watch_history(db, current_user.id)
    return api_response(history, "Watch history fetched successfully")
