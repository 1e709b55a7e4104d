# ============================================================================
# FILE: vidtube/db/session.py
# ============================================================================
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from vidtube.db.base import Base
import logging

logger = logging.getLogger(__name__)

def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """Create the engine; SQLite gets foreign keys switched on"""
    kwargs = {"echo": echo}
    is_sqlite = database_url.startswith("sqlite")
    if is_sqlite:
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # One shared in-memory database for every session
            kwargs["poolclass"] = StaticPool
    engine = create_engine(database_url, **kwargs)

    if is_sqlite:
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine

def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

def init_db(engine: Engine) -> None:
    """Create all tables (imports every model so the metadata is complete)"""
    from vidtube.db.models import user, video, tweet, comment, like, subscription, playlist, history  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready")
