"""
Database configuration and session management.
Supports SQLite (default) and PostgreSQL.
"""
import logging
from inspect import isawaitable

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session
from sqlmodel.ext.asyncio.session import AsyncSession

from dashboard.core.config import settings
from dashboard.core.logging_config import _sanitize_data

logger = logging.getLogger(__name__)

database_url = settings.database_url
database_type = settings.database_type

logger.info(f"Using {database_type} database: {_sanitize_data(database_url)}")


def _is_sqlite_memory(url: str) -> bool:
    return make_url(url).database in (None, "", ":memory:")


if database_type == "sqlite":
    is_sqlite_memory = _is_sqlite_memory(database_url)

    engine_kwargs = {
        "echo": False,
        "connect_args": {"check_same_thread": False},
    }
    if is_sqlite_memory:
        engine_kwargs["poolclass"] = StaticPool

    engine = create_engine(database_url, **engine_kwargs)
    logger.info(f"Configured SQLite engine ({'in-memory' if is_sqlite_memory else 'file-based'})")

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        """Set SQLite-specific pragma settings."""
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        if not is_sqlite_memory:
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.close()

else:
    engine = create_engine(
        database_url,
        echo=False,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=5,
        pool_recycle=3600,  # Recycle connections every hour
    )
    logger.info("Configured PostgreSQL engine with connection pooling")


def build_async_database_url(url: str = database_url) -> str:
    """Swap the sync driver for its asyncio counterpart (aiosqlite / asyncpg)."""
    parsed = make_url(url)
    if parsed.drivername.startswith("sqlite"):
        drivername = "sqlite+aiosqlite"
    elif parsed.drivername.startswith("postgres"):
        drivername = "postgresql+asyncpg"
    else:
        drivername = parsed.drivername
    return parsed.set(drivername=drivername).render_as_string(hide_password=False)


def create_task_engine(url: str = database_url) -> AsyncEngine:
    """
    Build an async engine for a background task.

    Each Celery task runs its own event loop, so tasks create and dispose a
    fresh engine instead of sharing one across loops.
    """
    return create_async_engine(build_async_database_url(url), echo=False)


def create_async_session_factory(async_engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


def create_db_and_tables():
    """Create all tables registered on the SQLModel metadata."""
    # Import models so they register on the metadata
    import dashboard.models  # noqa: F401

    logger.info("Creating database tables...")
    SQLModel.metadata.create_all(engine)
    logger.info("Database tables ready")


def get_session():
    """Get database session."""
    with Session(engine) as session:
        yield session


def get_session_context():
    """
    Get database session as context manager.

    Use this for CLI commands and other non-request contexts.

    Example:
        with get_session_context() as session:
            # use session
            pass
    """
    return Session(engine)


def init_db():
    """Initialize database tables."""
    logger.info("Initializing database...")
    create_db_and_tables()
    logger.info("Database initialization completed")


# ================================================================================
# SESSION COMPAT HELPERS
# ================================================================================
# Pipeline code runs with a sync Session (CLI, tests) or an AsyncSession
# (Celery tasks). These helpers await the call only when it returns an awaitable.

async def session_exec(session: Session | AsyncSession, statement):
    result = session.exec(statement)
    if isawaitable(result):
        return await result
    return result


async def session_commit(session: Session | AsyncSession) -> None:
    result = session.commit()
    if isawaitable(result):
        await result


async def session_rollback(session: Session | AsyncSession) -> None:
    result = session.rollback()
    if isawaitable(result):
        await result
