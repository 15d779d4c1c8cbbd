"""
Database configuration and session management.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from app.config import settings

logger = logging.getLogger("nutricoach.database")

# Create SQLAlchemy Base
Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp used as default for all models"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # Required for SQLite when used with FastAPI in threaded servers.
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # one shared connection, otherwise every checkout sees an empty database
            kwargs["poolclass"] = StaticPool
        return kwargs
    return {"pool_pre_ping": True}


# Create engine
engine = create_engine(
    settings.database_url,
    echo=settings.db_echo,
    future=True,
    **_engine_kwargs(settings.database_url),
)

# Create session factory
SessionLocal = sessionmaker(bind=engine, future=True, expire_on_commit=False)


def init_database():
    """Initialize database schema"""
    # Import model modules so every table is registered on Base.metadata
    from domain.models import user, dish, menu, journal, chat  # noqa: F401

    with engine.begin() as conn:
        Base.metadata.create_all(bind=conn)
    logger.info("Database tables created successfully")


def get_db_session():
    """Get database session (for FastAPI dependency injection)"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
