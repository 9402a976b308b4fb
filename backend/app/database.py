"""
VideoAPI - Database Configuration
Async SQLAlchemy engine shared by the storage drivers. SQLite for development,
PostgreSQL (asyncpg) or Oracle (oracledb) in production.
"""
import logging
from pathlib import Path

from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from app.config import get_settings
from app.store.driver import SQLAlchemyExecutor, SQLAlchemyQuerier, limiter_for

logger = logging.getLogger(__name__)

settings = get_settings()

# Determine database type and configure appropriately
is_sqlite = "sqlite" in settings.database_url

if is_sqlite:
    # SQLite: one connection per use, no pooling across event loops
    engine = create_async_engine(
        settings.database_url,
        echo=settings.debug,
        poolclass=NullPool,
        connect_args={"check_same_thread": False}
    )
else:
    engine = create_async_engine(
        settings.database_url,
        echo=settings.debug,
        pool_size=10,           # Concurrent connections
        max_overflow=20,        # Extra connections under load
        pool_pre_ping=True,     # Verify connections before use
        pool_recycle=300,       # Recycle connections every 5 minutes
    )

querier = SQLAlchemyQuerier(engine)
executor = SQLAlchemyExecutor(engine)
limiter = limiter_for(settings.database_url)


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


async def init_db():
    """Initialize database tables."""
    import app.models  # noqa: F401  registers every table on Base.metadata

    if is_sqlite:
        database = make_url(settings.database_url).database
        if database and database != ":memory:":
            Path(database).parent.mkdir(parents=True, exist_ok=True)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ready")
