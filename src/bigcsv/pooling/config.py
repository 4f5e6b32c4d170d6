# src/bigcsv/pooling/config.py
"""Worker pool configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field


class PoolConfig(BaseModel):
    """Pool configuration for concurrent row processing.

    Attributes:
        workers: Number of worker slots (must be >= 1)
        cancel_poll_interval_ms: How often a blocked slot acquisition
            re-checks the cancellation signal
    """

    model_config = {"extra": "forbid", "frozen": True}

    workers: int = Field(1, ge=1, description="Number of concurrent workers")
    cancel_poll_interval_ms: int = Field(
        50,
        gt=0,
        description="Cancellation poll interval while waiting for a worker slot",
    )
