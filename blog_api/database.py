"""
Database connection and session management for SQLAlchemy 2.0.
Configured for async operations against MySQL, PostgreSQL or SQLite.
"""
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy import text
from sqlalchemy.engine import make_url
from fastapi import Request
import logging

from blog_api.config import Settings

logger = logging.getLogger(__name__)

# Create declarative base for models
Base = declarative_base()

SUPPORTED_DRIVERS = ("mysql+aiomysql", "postgresql+asyncpg", "sqlite+aiosqlite")


def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine for the configured database.
    Pool settings only apply to server databases (not SQLite).
    """
    url = settings.database_url
    engine_args = {
        "echo": False,  # Set to True for SQL query logging in development
    }

    if not url.startswith("sqlite"):
        engine_args.update({
            "pool_size": settings.DB_POOL_SIZE,
            "max_overflow": settings.DB_MAX_OVERFLOW,
            "pool_pre_ping": True,  # Verify connections before using (handles stale connections)
            "pool_recycle": 3600,  # Recycle connections after 1 hour
        })

    return create_async_engine(url, **engine_args)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Create the async session factory bound to engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


async def get_db(request: Request) -> AsyncSession:
    """
    FastAPI dependency for database sessions.
    Takes the session factory from the service context built at startup.

    Usage:
        @router.get("/endpoint")
        async def my_endpoint(db: AsyncSession = Depends(get_db)):
            # Use db session here
            pass
    """
    session_factory = request.app.state.context.session_factory
    async with session_factory() as session:
        try:
            yield session
        except Exception as e:
            await session.rollback()
            logger.debug(f"Rolled back session after {type(e).__name__}: {str(e)}")
            raise


def _validate_database_url(url: str) -> tuple[bool, str]:
    """
    Validate database URL and provide diagnostic information.
    Returns (is_valid, diagnostic_message)
    """
    if not url:
        return False, "Database URL is empty"

    try:
        parsed = make_url(url)
    except Exception as e:
        return False, f"Error parsing database URL: {str(e)}"

    if parsed.drivername not in SUPPORTED_DRIVERS:
        return False, (
            f"Unsupported driver '{parsed.drivername}'. "
            f"Expected one of: {', '.join(SUPPORTED_DRIVERS)}"
        )

    if parsed.drivername.startswith("sqlite"):
        return True, f"SQLite database: {parsed.database or ':memory:'}"

    if not parsed.host:
        return False, "No hostname found in database URL"

    return True, f"Host: {parsed.host}, Port: {parsed.port or 'default'}, Database: {parsed.database}"


async def init_db(engine: AsyncEngine, create_tables: bool = False):
    """
    Verify the database connection and optionally create missing tables.
    Used by the startup hook.
    """
    url = engine.url.render_as_string(hide_password=False)
    is_valid, diagnostic = _validate_database_url(url)
    if not is_valid:
        logger.error(f"Invalid database URL: {diagnostic}")
        raise ValueError(f"Invalid database URL: {diagnostic}")

    logger.info(f"Database URL validation: {diagnostic}")

    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            if create_tables:
                # Models must be imported so their tables are registered on Base
                from blog_api import models  # noqa: F401

                await conn.run_sync(Base.metadata.create_all)
                logger.info("Database tables verified")
        logger.info("Database connection initialized successfully")
    except Exception as e:
        error_msg = str(e)
        if "connection refused" in error_msg.lower() or "can't connect" in error_msg.lower():
            logger.error(
                f"Database connection failed - Connection refused: {error_msg}\n"
                f"Check that the database server is running and reachable.\n"
                f"Diagnostic: {diagnostic}"
            )
        elif "access denied" in error_msg.lower() or "authentication failed" in error_msg.lower():
            logger.error(
                f"Database connection failed - Authentication error: {error_msg}\n"
                f"Check DB_USER / DB_PASSWORD (or DATABASE_URL).\n"
                f"Diagnostic: {diagnostic}"
            )
        else:
            logger.error(
                f"Database connection failed ({type(e).__name__}): {error_msg}\n"
                f"Diagnostic: {diagnostic}"
            )
        raise


async def close_db(engine: AsyncEngine):
    """
    Close database connections.
    Used by the shutdown hook.
    """
    await engine.dispose()
    logger.info("Database connections closed")
