# src/bigcsv/contracts/results.py
"""Run outcome returned by Parser.run()."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class RunResult:
    """Summary of a completed run.

    A run that returns a RunResult succeeded, even if individual rows failed.
    Row failures are counted here and delivered to on_error.

    Attributes:
        rows_read: Records successfully read and dispatched to a worker
        read_errors: Read attempts that failed in the tokenizer
        rows_succeeded: Dispatched rows that completed every configured stage
        rows_failed: Dispatched rows that failed in on_row, parse or on_data
        cancelled: True if the cancellation signal stopped intake
        max_concurrent: Peak number of rows simultaneously in a worker
        elapsed_seconds: Wall time from first read to last worker finishing
    """

    rows_read: int
    read_errors: int
    rows_succeeded: int
    rows_failed: int
    cancelled: bool
    max_concurrent: int
    elapsed_seconds: float

    @property
    def error_count(self) -> int:
        """Total row-level errors (read and processing)."""
        return self.read_errors + self.rows_failed

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
