"""
FastAPI dependencies for dependency injection.

The store handles are built once by the application lifespan and kept on
`app.state`; these providers hand them to route handlers per request.
Tests replace them through `app.dependency_overrides`.
"""

from typing import AsyncGenerator

from fastapi import Request
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from gateway.database import session_scope
from gateway.services.bucket_service import BucketService


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Provide a relational session for the duration of one request.

    Commits when the handler returns, rolls back when it raises; the
    connection goes back to the pool either way.
    """
    async with session_scope(request.app.state.session_factory) as session:
        yield session


def get_engine(request: Request) -> AsyncEngine:
    return request.app.state.engine


def get_mongo_database(request: Request) -> AsyncDatabase:
    return request.app.state.mongo_db


def get_users_collection(request: Request) -> AsyncCollection:
    """The `usuarios` collection of the configured database."""
    return request.app.state.mongo_db[request.app.state.settings.mongo_collection]


def get_bucket_service(request: Request) -> BucketService:
    return request.app.state.bucket_service
