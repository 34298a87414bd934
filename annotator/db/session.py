"""Database engine and session factory."""

from typing import Tuple
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine


def create_session_factory(database_url: str, echo: bool = False) -> Tuple[AsyncEngine, async_sessionmaker]:
    """Build an async engine and a session factory bound to it.

    Args:
        database_url: SQLAlchemy URL, e.g. ``sqlite+aiosqlite:///annotations.db``
        echo: Log every SQL statement

    Returns:
        (engine, sessionmaker) tuple; the caller owns disposal of the engine
    """
    engine = create_async_engine(
        database_url,
        echo=echo,
        # SQLite specific args for concurrency
        connect_args={"check_same_thread": False} if "sqlite" in database_url else {}
    )

    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    return engine, session_factory
