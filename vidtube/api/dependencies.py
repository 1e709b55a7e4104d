# ============================================================================
# FILE: vidtube/api/dependencies.py
# ============================================================================
from typing import Iterator, Optional
from fastapi import Depends, Request
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from vidtube.config import Settings
from vidtube.core.exceptions import ApiError
from vidtube.db import aggregation as agg
from vidtube.db.models.user import User
from vidtube.services.container import ServiceContainer

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"

access_cookie_scheme = APIKeyCookie(name=ACCESS_COOKIE, auto_error=False)
bearer_scheme = HTTPBearer(auto_error=False)

def get_db(request: Request) -> Iterator[Session]:
    """One session per request, closed when the response is done"""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()

def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services

def get_access_token(
    cookie_token: Optional[str] = Depends(access_cookie_scheme),
    bearer: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    """Access token from the cookie, falling back to the Authorization header"""
    if cookie_token:
        return cookie_token
    if bearer and bearer.credentials:
        return bearer.credentials
    return None

def require_current_user(
    token: Optional[str] = Depends(get_access_token),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
) -> User:
    """
    Require authenticated user (raises 401 if not authenticated)
    Use this dependency for protected endpoints
    """
    return services.sessions.resolve_identity(db, token)

def get_current_user(
    token: Optional[str] = Depends(get_access_token),
    db: Session = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
) -> Optional[User]:
    """
    Get current authenticated user from JWT token
    Returns None if no token or invalid token (allows anonymous access)
    """
    if not token:
        return None
    try:
        return services.sessions.resolve_identity(db, token)
    except ApiError:
        return None

def get_pagination(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> agg.Pagination:
    """page/limit query params coerced to positive integers"""
    return agg.parse_pagination(
        request.query_params.get("page"),
        request.query_params.get("limit"),
        default_limit=settings.DEFAULT_PAGE_LIMIT,
        max_limit=settings.MAX_PAGE_LIMIT,
    )
