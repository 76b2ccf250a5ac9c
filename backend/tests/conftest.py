"""
DSM Gateway — Test Configuration (conftest.py)
================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.
Who:   Used by all test files in the tests/ directory.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── test_settings: Settings with a fixed replication prefix
    ├── mock_collection: MagicMock standing in for the users collection
    ├── sqlite_engine / session_factory: Products table on a temp SQLite file
    ├── s3_client: boto3 client backed by moto (source/destination buckets created)
    ├── bucket_service: BucketService over s3_client
    ├── app: create_app() with every store dependency overridden
    └── test_client: HTTPX AsyncClient for API endpoint testing

ASGITransport does not run the lifespan, so nothing here connects to MongoDB,
MySQL or S3; the handlers receive the fixtures through dependency_overrides.
"""

import os
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import boto3
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from moto import mock_aws
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Set before any gateway import so the settings singleton never sees real values
os.environ["RA"] = "ra123"
os.environ["MONGO_URI"] = "mongodb://localhost:27017/dsm_test"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
os.environ["AWS_SECURITY_TOKEN"] = "testing"
os.environ["AWS_SESSION_TOKEN"] = "testing"
os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
os.environ.pop("AWS_ENDPOINT_URL", None)

from gateway.config import Settings  # noqa: E402
from gateway.database import Base, create_session_factory, session_scope  # noqa: E402
from gateway.dependencies import (  # noqa: E402
    get_bucket_service,
    get_db_session,
    get_engine,
    get_mongo_database,
    get_users_collection,
)
from gateway.main import create_app  # noqa: E402
from gateway.models.product import Product  # noqa: E402,F401
from gateway.services.bucket_service import BucketService  # noqa: E402

SOURCE_BUCKET = "ra123-dsm-vot-prod"
DESTINATION_BUCKET = "ra123-dsm-vot-hml"


@pytest.fixture
def test_settings():
    return Settings(
        RA="ra123",
        mongo_uri="mongodb://localhost:27017/dsm_test",
        region="us-east-1",
        log_level="WARNING",
    )


# ══════════════════════════════════════════════════════════════════════════
# Document Store (users)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_collection():
    """
    Provides a mock pymongo AsyncCollection.

    Query methods are AsyncMocks; find() is synchronous and returns a cursor
    whose to_list() is awaited, matching the async driver API.

    Usage:
        async def test_get(mock_collection):
            mock_collection.find_one.return_value = {"_id": oid, "nome": "Ana"}
    """
    collection = MagicMock()
    collection.insert_one = AsyncMock()
    collection.find_one = AsyncMock(return_value=None)
    collection.find_one_and_update = AsyncMock(return_value=None)
    collection.delete_one = AsyncMock()

    cursor = MagicMock()
    cursor.to_list = AsyncMock(return_value=[])
    collection.find = MagicMock(return_value=cursor)
    return collection


@pytest.fixture
def mock_mongo_db():
    database = MagicMock()
    database.command = AsyncMock(return_value={"ok": 1.0})
    return database


# ══════════════════════════════════════════════════════════════════════════
# Relational Store (products)
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def sqlite_engine(tmp_path):
    """
    Async engine on a throwaway SQLite file with the products table created.

    Update/delete row counts behave like MySQL's matched-row counts here,
    which is what the not-found checks rely on.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/test.db")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(sqlite_engine):
    return create_session_factory(sqlite_engine)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session for direct service tests; committed on exit like a request."""
    async with session_scope(session_factory) as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# Object Storage (buckets)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def s3_client():
    """
    boto3 S3 client served by moto, with the replication buckets created.

    moto patches botocore process-wide, so the client also works from the
    threadpool FastAPI runs the bucket handlers in.
    """
    with mock_aws():
        client = boto3.client("s3", region_name="us-east-1")
        client.create_bucket(Bucket=SOURCE_BUCKET)
        client.create_bucket(Bucket=DESTINATION_BUCKET)
        yield client


@pytest.fixture
def bucket_service(s3_client):
    return BucketService(
        client=s3_client,
        source_bucket=SOURCE_BUCKET,
        destination_bucket=DESTINATION_BUCKET,
    )


# ══════════════════════════════════════════════════════════════════════════
# Application
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def app(test_settings, mock_collection, mock_mongo_db, sqlite_engine, session_factory, bucket_service):
    """
    Application with every store dependency replaced by a test double.

    Individual tests may replace an override again, e.g. to inject a
    MagicMock BucketService.
    """
    application = create_app(test_settings)

    async def override_db_session():
        async with session_scope(session_factory) as session:
            yield session

    application.dependency_overrides[get_users_collection] = lambda: mock_collection
    application.dependency_overrides[get_mongo_database] = lambda: mock_mongo_db
    application.dependency_overrides[get_db_session] = override_db_session
    application.dependency_overrides[get_engine] = lambda: sqlite_engine
    application.dependency_overrides[get_bucket_service] = lambda: bucket_service
    return application


@pytest_asyncio.fixture
async def test_client(app):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
