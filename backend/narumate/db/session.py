"""
Database session management.

The engine only exists when persistence is configured; in local mode
``engine`` and ``SessionLocal`` are None and callers skip persistence.
"""
import logging
from typing import Optional
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker
from narumate.core.config import Settings, settings
from narumate.db.base import Base

logger = logging.getLogger(__name__)


def build_engine(config: Settings = settings) -> Optional[Engine]:
    """Create the SQLAlchemy engine, or None when running in local mode."""
    if not config.persistence_enabled:
        logger.warning("Database URL or access key missing, running in local mode")
        return None

    url = make_url(config.DATABASE_URL)
    # SQLite has no credentials; networked backends take the access key as password
    if url.get_backend_name() != "sqlite":
        url = url.set(password=config.DATABASE_ACCESS_KEY)

    return create_engine(
        url,
        echo=config.DB_ECHO,
        pool_pre_ping=True,
        pool_recycle=3600
    )


engine = build_engine()

# Rows are handed back to callers after the session closes
SessionLocal = sessionmaker(
    autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
) if engine is not None else None


def init_db(bind: Optional[Engine] = None) -> bool:
    """Initialize database tables. Returns False in local mode."""
    target = bind if bind is not None else engine
    if target is None:
        return False
    # Import models so they are registered on the metadata
    import narumate.models  # noqa: F401
    Base.metadata.create_all(bind=target)
    return True
