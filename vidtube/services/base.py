# ============================================================================
# FILE: vidtube/services/base.py
# ============================================================================
"""Checks and persistence helpers shared by the service layer"""
import uuid
from typing import Any, Optional
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from vidtube.core.exceptions import Forbidden, Internal, InvalidArgument
import logging

logger = logging.getLogger(__name__)

def is_valid_id(value: Any) -> bool:
    if not isinstance(value, str) or not value.strip():
        return False
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True

def ensure_valid_id(value: Optional[str], label: str) -> str:
    """Fail fast (before any I/O) on a missing or malformed id"""
    if not is_valid_id(value):
        raise InvalidArgument(f"Invalid {label} id or {label} id is missing")
    return value

def ensure_owner(owner_id: str, user_id: str, message: str) -> None:
    if owner_id != user_id:
        raise Forbidden(message)

def commit(db: Session, action: str) -> None:
    """
    Commit the unit of work.

    Integrity errors are re-raised for the caller to translate; any other
    persistence failure is rolled back and surfaced as Internal.
    """
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error {action}: {e}")
        raise Internal(f"Something went wrong while {action}") from e
