"""Bounded worker pool used by the dispatch engine."""

from bigcsv.pooling.config import PoolConfig
from bigcsv.pooling.executor import WorkerPool

__all__ = [
    "PoolConfig",
    "WorkerPool",
]
