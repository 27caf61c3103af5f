import asyncio
import logging
import os
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from .config import get_settings
from .models import Base

logger = logging.getLogger(__name__)

engine: Optional[AsyncEngine] = None


def _engine_options(database_url: str) -> dict:
    if not database_url.startswith("postgresql+asyncpg://"):
        return {}

    # Railway PostgreSQL can handle more connections
    if os.getenv("RAILWAY_ENVIRONMENT") is not None:
        pool_settings = {
            "pool_size": 10,
            "max_overflow": 20,
            "pool_timeout": 30,
            "pool_recycle": 3600,  # 1 hour
        }
    else:
        # Conservative settings for hosted databases like Supabase
        pool_settings = {
            "pool_size": 5,
            "max_overflow": 10,
            "pool_timeout": 20,
            "pool_recycle": 300,  # 5 minutes
        }
    return {
        "connect_args": {"server_settings": {"application_name": "taskdash"}},
        **pool_settings,
    }


def configure_engine(database_url: Optional[str] = None) -> async_sessionmaker:
    """Create the async engine and session factory"""
    global engine

    database_url = database_url or get_settings().database_url
    logger.info("Database URL: %s...", database_url[:30])

    engine = create_async_engine(
        database_url,
        echo=False,
        future=True,
        pool_pre_ping=True,  # Verify connections before use
        **_engine_options(database_url),
    )
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db(max_retries: int = 3, retry_delay: float = 5):
    """Initialize the database by creating all tables"""
    if engine is None:
        configure_engine()

    for attempt in range(max_retries):
        try:
            logger.info("Database connection attempt %d/%d", attempt + 1, max_retries)
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables created successfully")
            return
        except Exception as e:
            logger.warning("Database connection attempt %d failed: %s", attempt + 1, e)
            if attempt < max_retries - 1:
                logger.info("Retrying in %s seconds...", retry_delay)
                await asyncio.sleep(retry_delay)
            else:
                logger.error("All database connection attempts failed")
                raise


async def close_db():
    """Close database connections"""
    global engine
    if engine is not None:
        await engine.dispose()
        logger.info("Database connections closed")
    engine = None
