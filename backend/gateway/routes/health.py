"""
DSM Gateway — Health Check Route
==================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Runs one lightweight probe per database (SELECT 1 on MySQL, `ping` on
       MongoDB) and reports an aggregate status.

Status levels:
    - healthy:   Both databases reachable (HTTP 200)
    - unhealthy: Either database unreachable (HTTP 503)

Object storage is not probed: list_buckets needs account-level permission
the deployment's credentials may not have.
"""

import logging
import time

from fastapi import APIRouter, Depends, Response
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from gateway import __version__
from gateway.dependencies import get_engine, get_mongo_database
from gateway.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "A database is unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(
    response: Response,
    engine: AsyncEngine = Depends(get_engine),
    mongo_db: AsyncDatabase = Depends(get_mongo_database),
) -> HealthResponse:
    db_status = "connected"
    mongo_status = "connected"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        db_status = "disconnected"
        logger.warning("Health check: MySQL unreachable: %s", str(e))

    try:
        await mongo_db.command("ping")
    except PyMongoError as e:
        mongo_status = "disconnected"
        logger.warning("Health check: MongoDB unreachable: %s", str(e))

    overall = "healthy"
    if db_status != "connected" or mongo_status != "connected":
        overall = "unhealthy"
        response.status_code = 503

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        mongodb=mongo_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
