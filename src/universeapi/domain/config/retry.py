"""Retry configuration model."""

from pydantic import BaseModel, Field


class RetryConfig(BaseModel):
    """Configuration for retry logic.

    Attributes:
        max_attempts: Maximum number of attempts (including the first one)
        backoff_base: Seconds multiplied by the attempt number between retries
    """

    max_attempts: int = Field(3, gt=0, le=10)
    backoff_base: int = Field(2, ge=0)  # Allow 0 for tests
