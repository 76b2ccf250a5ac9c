"""
DSM Gateway — Relational Store Session Management
===================================================

What:  Async SQLAlchemy engine factory, declarative base and session helpers.
How:   The lifespan builds one engine (fixed pool of connections) and one
       session factory; the request dependency opens a session per request
       that commits on success and rolls back on error.
Who:   Bootstrap calls create_engine_from_settings(); routes receive sessions
       through gateway.dependencies.get_db_session.

Connection Pooling Strategy:
    pool_size=10:      Fixed number of connections shared by all requests
    max_overflow=0:    Never opens connections beyond the pool
    pool_timeout=None: Requests beyond the pool wait in an unbounded queue
    pool_pre_ping:     Validates connections before use
    pool_recycle=3600: Recycles connections before MySQL's wait_timeout drops them
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from gateway.config import Settings


class Base(DeclarativeBase):
    """Base class for the relational store's ORM models."""
    pass


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """
    Build the process-wide async engine.

    Called once from the application lifespan. The engine owns the pool;
    nothing else in the application opens connections.
    """
    return create_async_engine(
        settings.sqlalchemy_url,
        pool_size=settings.db_pool_size,
        max_overflow=0,
        pool_timeout=settings.db_pool_timeout,
        pool_pre_ping=True,
        pool_recycle=3600,
        # SQL echo only when debugging
        echo=settings.log_level == "DEBUG",
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory bound to `engine`.

    expire_on_commit=False keeps attribute access valid after commit, which
    the services rely on when they serialize a freshly inserted row.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@asynccontextmanager
async def session_scope(
    factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """
    Yield one session, commit on success, roll back on error, always close.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the caller (the route handler performs queries)
        3. On success: commits the transaction
        4. On error: rolls back and re-raises for the global error handler
        5. Always: closes the session (returns the connection to the pool)
    """
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def dispose_engine(engine: AsyncEngine) -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
