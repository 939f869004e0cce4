"""
Database schema for MulaBoard.

Tables:
- users: colleagues who can receive feedback (managed by the web app)
- review_periods: admin-defined windows in which submissions are accepted
- feedback: anonymous feedback records with their derived Mula rating
- submission_attempts: audit trail of every submission try
"""

import logging

from mulaboard.storage.database import Database

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS users (
    user_id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    slug TEXT NOT NULL UNIQUE,
    email TEXT,
    is_active BOOLEAN NOT NULL DEFAULT TRUE,
    is_approved BOOLEAN NOT NULL DEFAULT FALSE,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS review_periods (
    period_id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    slug TEXT NOT NULL UNIQUE,
    start_date TIMESTAMPTZ NOT NULL,
    end_date TIMESTAMPTZ NOT NULL,
    is_active BOOLEAN NOT NULL DEFAULT FALSE,
    theme_name TEXT NOT NULL DEFAULT 'The Mula Season',
    theme_emoji TEXT NOT NULL DEFAULT '🌿',
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    CONSTRAINT ck_review_periods_dates CHECK (end_date > start_date)
);

CREATE INDEX IF NOT EXISTS idx_review_periods_dates
    ON review_periods(start_date, end_date);

CREATE TABLE IF NOT EXISTS feedback (
    feedback_id TEXT PRIMARY KEY,
    target_user_id TEXT NOT NULL REFERENCES users(user_id) ON DELETE CASCADE,
    review_period_id TEXT NOT NULL REFERENCES review_periods(period_id) ON DELETE CASCADE,
    reviewer_fingerprint TEXT NOT NULL,
    reviewer_ip_hash TEXT NOT NULL,
    ratings JSONB NOT NULL,
    strengths TEXT NOT NULL,
    improvements TEXT NOT NULL,
    mula_rating TEXT NOT NULL,
    visibility TEXT NOT NULL DEFAULT 'private',
    moderation JSONB NOT NULL DEFAULT '{"status": "approved"}',
    employee_reaction TEXT,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    CONSTRAINT ck_feedback_mula_rating
        CHECK (mula_rating IN ('golden_mula', 'fresh_carrot', 'rotten_tomato')),
    CONSTRAINT ck_feedback_visibility CHECK (visibility IN ('private', 'public')),
    CONSTRAINT uq_feedback_reviewer
        UNIQUE (reviewer_fingerprint, target_user_id, review_period_id)
);

CREATE INDEX IF NOT EXISTS idx_feedback_target_period
    ON feedback(target_user_id, review_period_id);
CREATE INDEX IF NOT EXISTS idx_feedback_moderation_status
    ON feedback((moderation->>'status'));
CREATE INDEX IF NOT EXISTS idx_feedback_visibility
    ON feedback(visibility);
CREATE INDEX IF NOT EXISTS idx_feedback_created_at
    ON feedback(created_at DESC);

CREATE TABLE IF NOT EXISTS submission_attempts (
    attempt_id TEXT PRIMARY KEY,
    fingerprint TEXT NOT NULL,
    ip_hash TEXT NOT NULL,
    target_user_id TEXT NOT NULL,
    review_period_id TEXT NOT NULL,
    status TEXT NOT NULL,
    block_reason VARCHAR(200),
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    CONSTRAINT ck_submission_attempts_status
        CHECK (status IN ('submitted', 'blocked', 'rate_limited'))
);

-- At most one submitted attempt per (fingerprint, target user, period)
CREATE UNIQUE INDEX IF NOT EXISTS uq_submission_attempts_submitted
    ON submission_attempts(fingerprint, target_user_id, review_period_id)
    WHERE status = 'submitted';
CREATE INDEX IF NOT EXISTS idx_submission_attempts_ip_created
    ON submission_attempts(ip_hash, created_at);
CREATE INDEX IF NOT EXISTS idx_submission_attempts_fingerprint_created
    ON submission_attempts(fingerprint, created_at);
CREATE INDEX IF NOT EXISTS idx_submission_attempts_created_at
    ON submission_attempts(created_at);
"""


async def create_tables(database: Database) -> None:
    """Create all tables and indexes if they don't exist."""
    await database.execute(SCHEMA_SQL)
    logger.info("Database schema initialized")
