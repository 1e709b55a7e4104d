# ============================================================================
# FILE: vidtube/db/base.py
# ============================================================================
import uuid
from datetime import datetime, timezone
from sqlalchemy.orm import declarative_base

Base = declarative_base()

def new_id() -> str:
    """Primary keys are UUID4 strings"""
    return str(uuid.uuid4())

def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)
