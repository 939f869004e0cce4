"""Feedback configuration.

Text length limits for submitted feedback and pagination defaults for
public listings. Override via ``FEEDBACK_*`` environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FeedbackConfig(BaseSettings):
    """Configuration for feedback submission and listing."""

    model_config = SettingsConfigDict(
        env_prefix="FEEDBACK_",
        case_sensitive=False,
        extra="ignore",
    )

    text_min_length: int = Field(
        default=20,
        ge=0,
        description="Minimum characters for strengths and improvements",
    )
    text_max_length: int = Field(
        default=500,
        ge=1,
        description="Maximum characters for strengths and improvements",
    )
    comment_max_length: int = Field(
        default=500,
        ge=0,
        description="Maximum characters for a category comment",
    )
    moderation_note_max_length: int = Field(
        default=500,
        ge=0,
        description="Maximum characters for an admin moderation note",
    )
    public_page_size: int = Field(
        default=10,
        ge=1,
        description="Default page size for public feedback",
    )
    public_page_size_max: int = Field(
        default=50,
        ge=1,
        description="Largest page size accepted for public feedback",
    )
    admin_page_size: int = Field(
        default=20,
        ge=1,
        description="Default page size for the admin moderation list",
    )
