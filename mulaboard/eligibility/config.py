"""Eligibility gate configuration.

Controls the per-IP and per-fingerprint submission windows, the minimum
time a reviewer must spend on the form, and how long submission attempts
are retained. All settings can be overridden via ``ELIGIBILITY_*``
environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EligibilityConfig(BaseSettings):
    """Configuration for anonymous submission eligibility checks."""

    model_config = SettingsConfigDict(
        env_prefix="ELIGIBILITY_",
        case_sensitive=False,
        extra="ignore",
    )

    ip_limit: int = Field(
        default=5,
        ge=1,
        description="Completed submissions allowed per hashed IP within the window",
    )
    fingerprint_limit: int = Field(
        default=10,
        ge=1,
        description="Completed submissions allowed per fingerprint within the window",
    )
    window_seconds: int = Field(
        default=3600,
        ge=1,
        description="Length of the rate-limit window in seconds",
    )
    min_submit_seconds: float = Field(
        default=30.0,
        ge=0.0,
        description="Minimum seconds between form load and submission",
    )
    attempt_retention_days: int = Field(
        default=365,
        ge=1,
        description="Days to keep submission attempts before purging",
    )
    key_prefix: str = Field(
        default="feedback",
        description="Redis key prefix for window counters",
    )
