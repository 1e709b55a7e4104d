# ============================================================================
# FILE: vidtube/services/session_service.py
# ============================================================================
"""
Login, logout, refresh-token rotation, password change and resolution of the
authenticated identity for protected requests.

Session states per user: anonymous -> authenticated -> authenticated
(rotated) -> logged out. A user has at most one live refresh token; logging
in again from elsewhere replaces it.
"""
from typing import Optional, Tuple
from sqlalchemy import or_
from sqlalchemy.orm import Session
from vidtube.core.exceptions import (
    InvalidCredentials,
    NotFound,
    TokenExpiredOrReused,
    TokenInvalid,
    Unauthorized,
)
from vidtube.core.security import TokenPair, TokenService, get_password_hash, verify_password
from vidtube.db.models.user import User
from vidtube.services.base import commit
import logging

logger = logging.getLogger(__name__)

class SessionService:
    """Service layer for session lifecycle"""

    def __init__(self, token_service: TokenService):
        self.tokens = token_service

    def _find_by_identifier(self, db: Session, username: Optional[str], email: Optional[str]) -> Optional[User]:
        criteria = []
        if username:
            criteria.append(User.username == username.lower())
        if email:
            criteria.append(User.email == email.lower())
        if not criteria:
            return None
        return db.query(User).filter(or_(*criteria)).first()

    def login(self, db: Session, username: Optional[str], email: Optional[str], password: str) -> Tuple[User, TokenPair]:
        """Authenticate with username or email and open a new session"""
        user = self._find_by_identifier(db, username, email)
        if not user:
            raise NotFound("User does not exist")

        if not verify_password(password, user.password_hash):
            logger.warning(f"Failed login for user {user.id}")
            raise InvalidCredentials("Invalid user credentials")

        pair = self.tokens.issue_pair(user)
        # Overwrites any previous session
        user.refresh_token = pair.refresh_token
        commit(db, "generating access and refresh tokens")
        logger.info(f"User logged in: {user.username}")
        return user, pair

    def refresh(self, db: Session, incoming_refresh_token: Optional[str]) -> TokenPair:
        """Exchange a refresh token for a new pair; the old token stops working"""
        if not incoming_refresh_token:
            raise Unauthorized("Unauthorized request")

        claims = self.tokens.verify_refresh_token(incoming_refresh_token)
        user = db.get(User, claims["sub"])
        if not user:
            raise TokenInvalid("Invalid refresh token")

        if user.refresh_token != incoming_refresh_token:
            logger.warning(f"Stale refresh token presented for user {user.id}")
            raise TokenExpiredOrReused("Refresh token is expired or used")

        pair = self.tokens.issue_pair(user)
        # Compare-and-swap: only replace the token we just validated
        swapped = (
            db.query(User)
            .filter(User.id == user.id, User.refresh_token == incoming_refresh_token)
            .update({User.refresh_token: pair.refresh_token}, synchronize_session=False)
        )
        commit(db, "rotating refresh token")
        if not swapped:
            logger.warning(f"Refresh token for user {user.id} was rotated concurrently")
            raise TokenExpiredOrReused("Refresh token is expired or used")

        logger.info(f"Refresh token rotated for user {user.id}")
        return pair

    def logout(self, db: Session, user_id: str) -> None:
        """Forget the stored refresh token (idempotent)"""
        db.query(User).filter(User.id == user_id).update(
            {User.refresh_token: None}, synchronize_session=False
        )
        commit(db, "logging out")
        logger.info(f"User logged out: {user_id}")

    def change_password(self, db: Session, user_id: str, old_password: str, new_password: str) -> None:
        # The stored refresh token is left alone, existing sessions stay valid
        user = db.get(User, user_id)
        if not user:
            raise NotFound("User not found")

        if not verify_password(old_password, user.password_hash):
            raise InvalidCredentials("Invalid old password")

        user.password_hash = get_password_hash(new_password)
        commit(db, "changing password")
        logger.info(f"Password changed for user {user_id}")

    def resolve_identity(self, db: Session, access_token: Optional[str]) -> User:
        """Map an access token to the user it was issued for"""
        if not access_token:
            raise Unauthorized("Unauthorized request")

        try:
            claims = self.tokens.verify_access_token(access_token)
        except TokenInvalid as e:
            raise TokenInvalid(f"Invalid access token: {e.message}")

        user = db.get(User, claims["sub"])
        if not user:
            raise TokenInvalid("Invalid access token")
        return user
