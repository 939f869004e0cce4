"""
Dependency injection for FastAPI endpoints.

The connection pool and Redis client are process-wide, created on first
use and released by ``cleanup_dependencies`` at shutdown. Repositories and
services are cheap wrappers built per request.
"""

import asyncpg
import redis.asyncio as redis
import structlog
from fastapi import Depends

from mulaboard.config.settings import get_settings
from mulaboard.eligibility.config import EligibilityConfig
from mulaboard.eligibility.gate import EligibilityGate
from mulaboard.eligibility.rate_limiter import WindowRateLimiter
from mulaboard.eligibility.repository import AttemptRepository
from mulaboard.feedback.config import FeedbackConfig
from mulaboard.feedback.repository import FeedbackRepository
from mulaboard.feedback.service import FeedbackService, SubmissionService
from mulaboard.periods.repository import ReviewPeriodRepository
from mulaboard.storage.database import Database
from mulaboard.users.repository import UserRepository

logger = structlog.get_logger(__name__)

# Global resources (initialized on first request)
_redis_client: redis.Redis | None = None
_database: Database | None = None

_eligibility_config = EligibilityConfig()
_feedback_config = FeedbackConfig()


def get_eligibility_config() -> EligibilityConfig:
    return _eligibility_config


def get_feedback_config() -> FeedbackConfig:
    return _feedback_config


async def get_database() -> Database:
    """Get the shared database, connecting on first use.

    A failed connect leaves the pool closed rather than failing the
    request: queries then raise inside the eligibility gate, which denies
    with reason ``error``, and /health reports the database unhealthy.
    The next request retries the connect.
    """
    global _database

    if _database is None:
        _database = Database()
    if not _database.is_connected:
        try:
            await _database.connect()
        except (OSError, asyncpg.PostgresError) as e:
            logger.error("Database unavailable", error=str(e))

    return _database


async def get_redis_client() -> redis.Redis:
    """Get the shared Redis client for window counters."""
    global _redis_client

    if _redis_client is None:
        settings = get_settings()
        _redis_client = redis.from_url(
            str(settings.redis_url),
            encoding="utf-8",
            decode_responses=True,
        )

    return _redis_client


async def get_attempt_repository(
    database: Database = Depends(get_database),
) -> AttemptRepository:
    return AttemptRepository(database)


async def get_feedback_repository(
    database: Database = Depends(get_database),
) -> FeedbackRepository:
    return FeedbackRepository(database)


async def get_user_repository(
    database: Database = Depends(get_database),
) -> UserRepository:
    return UserRepository(database)


async def get_period_repository(
    database: Database = Depends(get_database),
) -> ReviewPeriodRepository:
    return ReviewPeriodRepository(database)


async def get_eligibility_gate(
    attempt_repo: AttemptRepository = Depends(get_attempt_repository),
    redis_client: redis.Redis = Depends(get_redis_client),
    config: EligibilityConfig = Depends(get_eligibility_config),
) -> EligibilityGate:
    limiter = WindowRateLimiter(redis_client, prefix=config.key_prefix)
    return EligibilityGate(attempt_repo, limiter, config=config)


async def get_submission_service(
    gate: EligibilityGate = Depends(get_eligibility_gate),
    feedback_repo: FeedbackRepository = Depends(get_feedback_repository),
    user_repo: UserRepository = Depends(get_user_repository),
    period_repo: ReviewPeriodRepository = Depends(get_period_repository),
    eligibility_config: EligibilityConfig = Depends(get_eligibility_config),
    feedback_config: FeedbackConfig = Depends(get_feedback_config),
) -> SubmissionService:
    return SubmissionService(
        gate,
        feedback_repo,
        user_repo,
        period_repo,
        eligibility_config=eligibility_config,
        feedback_config=feedback_config,
    )


async def get_feedback_service(
    feedback_repo: FeedbackRepository = Depends(get_feedback_repository),
    config: FeedbackConfig = Depends(get_feedback_config),
) -> FeedbackService:
    return FeedbackService(feedback_repo, config=config)


async def cleanup_dependencies() -> None:
    """Clean up global dependencies on shutdown."""
    global _redis_client, _database

    if _database is not None:
        await _database.close()
        _database = None

    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None
