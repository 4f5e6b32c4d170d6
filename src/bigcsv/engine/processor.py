# src/bigcsv/engine/processor.py
"""Per-row worker: on_row -> parse -> on_data, with error routing.

Each stage short-circuits the rest of the row on failure. Failures are
wrapped in the RowError subclass for their stage, chained to the original
exception, and delivered to on_error exactly once. They never propagate
to the caller of process() and never affect other rows.

The one exception that does propagate is an exception raised by on_error
itself: that is a bug in the error handler, and the engine re-raises it
from Parser.run() once all workers have finished.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from threading import Lock
from typing import Any, Generic, TypeVar

import structlog

from bigcsv.contracts import HandlerError, ParseError, PreParseError, RowError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RowCallbacks(Generic[T]):
    """Caller-supplied row processing functions. All are optional.

    Callbacks signal failure by raising. With more than one worker they are
    called concurrently from worker threads and must be thread-safe.

    Attributes:
        on_row: Receives the raw fields before parsing
        parse: Converts raw fields to a typed row
        on_data: Receives each typed row (requires parse)
        on_error: Receives every RowError; without it row errors are dropped
    """

    on_row: Callable[[list[str]], Any] | None = None
    parse: Callable[[list[str]], T] | None = None
    on_data: Callable[[T], Any] | None = None
    on_error: Callable[[RowError], Any] | None = None


class RowProcessor(Generic[T]):
    """Runs the configured callbacks for one row at a time, thread-safely counted."""

    def __init__(self, callbacks: RowCallbacks[T]) -> None:
        self._callbacks = callbacks
        self._lock = Lock()
        self._succeeded = 0
        self._failed = 0

    @property
    def succeeded(self) -> int:
        with self._lock:
            return self._succeeded

    @property
    def failed(self) -> int:
        with self._lock:
            return self._failed

    def report(self, error: RowError) -> None:
        """Deliver a row error to on_error, or drop it if none is configured."""
        on_error = self._callbacks.on_error
        if on_error is None:
            logger.debug(
                "row_error_dropped",
                line=error.line,
                stage=str(error.stage),
                error=str(error.cause),
            )
            return
        on_error(error)

    def _fail(self, error: RowError) -> bool:
        with self._lock:
            self._failed += 1
        self.report(error)
        return False

    def _succeed(self) -> bool:
        with self._lock:
            self._succeeded += 1
        return True

    def process(self, line: int, fields: list[str]) -> bool:
        """Process one row.

        Args:
            line: 1-based row ordinal
            fields: Raw fields; owned by this call until it returns

        Returns:
            True if every configured stage succeeded.
        """
        callbacks = self._callbacks

        if callbacks.on_row is not None:
            try:
                callbacks.on_row(fields)
            except Exception as exc:
                return self._fail(PreParseError(line, exc))

        # Raw-row mode: nothing else to do
        if callbacks.parse is None:
            return self._succeed()

        try:
            data = callbacks.parse(fields)
        except Exception as exc:
            return self._fail(ParseError(line, exc))

        if callbacks.on_data is None:
            return self._succeed()

        try:
            callbacks.on_data(data)
        except Exception as exc:
            return self._fail(HandlerError(line, exc))

        return self._succeed()
