# ============================================================================
# FILE: vidtube/core/security.py
# ============================================================================
"""
Password hashing and signed-token primitives.

Access tokens are short lived and carry the public identity of the user.
Refresh tokens are long lived, carry only the user id, are signed with a
separate secret and are stored server-side so they can be revoked and
rotated. Every token gets a random ``jti`` so two tokens issued in the same
second for the same user are still distinct values.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import bcrypt
import jwt

from vidtube.config import Settings
from vidtube.core.exceptions import InvalidArgument, TokenInvalid

# bcrypt only looks at the first 72 bytes of the input
MAX_PASSWORD_BYTES = 72


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt with a fresh salt"""
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise InvalidArgument(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(encoded, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash"""
    if not plain_password or not hashed_password:
        return False
    encoded = plain_password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(encoded, hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


class TokenService:
    """Issues and verifies access and refresh JWTs"""

    ACCESS = "access"
    REFRESH = "refresh"

    def __init__(self, settings: Settings):
        self.algorithm = settings.JWT_ALGORITHM
        self.access_secret = settings.ACCESS_TOKEN_SECRET
        self.refresh_secret = settings.REFRESH_TOKEN_SECRET
        self.access_ttl = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        self.refresh_ttl = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)

    def _encode(self, claims: Dict[str, Any], secret: str, ttl: timedelta, token_type: str) -> str:
        now = datetime.now(timezone.utc)
        payload = dict(claims)
        payload.update({
            "type": token_type,
            "iat": now,
            "exp": now + ttl,
            "jti": uuid.uuid4().hex,
        })
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def issue_access_token(self, user) -> str:
        return self._encode(
            {
                "sub": user.id,
                "email": user.email,
                "username": user.username,
                "full_name": user.full_name,
            },
            self.access_secret,
            self.access_ttl,
            self.ACCESS,
        )

    def issue_refresh_token(self, user) -> str:
        return self._encode({"sub": user.id}, self.refresh_secret, self.refresh_ttl, self.REFRESH)

    def issue_pair(self, user) -> TokenPair:
        return TokenPair(
            access_token=self.issue_access_token(user),
            refresh_token=self.issue_refresh_token(user),
        )

    def verify(self, token: str, secret: str, token_type: str) -> Dict[str, Any]:
        """
        Decode and validate a token.

        Raises:
            TokenInvalid: bad signature, expired, wrong type or missing subject
        """
        try:
            payload = jwt.decode(token, secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise TokenInvalid("Token has expired")
        except jwt.PyJWTError:
            raise TokenInvalid("Invalid token")

        if payload.get("type") != token_type or not payload.get("sub"):
            raise TokenInvalid("Invalid token")
        return payload

    def verify_access_token(self, token: str) -> Dict[str, Any]:
        return self.verify(token, self.access_secret, self.ACCESS)

    def verify_refresh_token(self, token: str) -> Dict[str, Any]:
        return self.verify(token, self.refresh_secret, self.REFRESH)
