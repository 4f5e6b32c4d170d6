# src/bigcsv/engine/parser.py
"""Streaming CSV dispatch engine.

Parser owns three things:
- the open byte stream (closed exactly once, when run() returns),
- the tokenizer over it, read ONLY by the thread calling run(),
- the worker pool that runs one RowProcessor.process() per record.

Read loop ordering (the single-worker reuse fast path depends on it):

    check cancel -> acquire slot -> read record -> submit worker

The slot is acquired BEFORE the read. With one worker the only slot is
held until the previous row's worker has returned, so a read that
overwrites the reused record buffer can never race a worker still using it.
"""

from __future__ import annotations

import csv
import threading
import time
from types import TracebackType
from typing import Generic, TypeVar

import structlog

from bigcsv.contracts import ConfigError, ParserState, ReadError, RunResult
from bigcsv.engine.processor import RowCallbacks, RowProcessor
from bigcsv.parsing import CSVTokenizer, ReaderConfig
from bigcsv.pooling import PoolConfig, WorkerPool
from bigcsv.streams import Stream

logger = structlog.get_logger(__name__)

T = TypeVar("T")

# Errors that leave the underlying stream unable to make progress.
# csv.Error is per-record and the loop carries on after it.
_STREAM_FAILURES: tuple[type[BaseException], ...] = (OSError, EOFError, UnicodeDecodeError)


def _report_read_error(processor: RowProcessor[T], error: ReadError) -> Exception | None:
    """Report a read error; return the exception on_error raised, if any."""
    try:
        processor.report(error)
    except Exception as exc:
        return exc
    return None


class Parser(Generic[T]):
    """Streams CSV records from a source to row callbacks on a worker pool.

    Example:
        parser: Parser[Place] = Parser(
            FileStream("places.csv.gz"),
            callbacks=RowCallbacks(parse=parse_place, on_data=store, on_error=log_error),
        )
        parser.reader.read()  # skip header
        result = parser.run(cancel=threading.Event(), workers=8)

    Attributes:
        reader: Tokenizer over the opened stream. May be read directly
            (e.g. headers) before run(); must not be touched during run().
        callbacks: Row callbacks used by run(). May be replaced before run().
    """

    def __init__(
        self,
        stream: Stream,
        *,
        callbacks: RowCallbacks[T] | None = None,
        reader_config: ReaderConfig | None = None,
    ) -> None:
        """Open the stream and prepare the tokenizer.

        Raises:
            SourceOpenError: If the stream cannot be opened.
        """
        self._source = stream.open()
        try:
            self.reader = CSVTokenizer(self._source, reader_config)
        except Exception:
            self._source.close()
            raise
        self.callbacks: RowCallbacks[T] = callbacks if callbacks is not None else RowCallbacks()
        self._state = ParserState.IDLE
        self._closed = False
        logger.debug("parser_opened", stream=repr(stream))

    @property
    def state(self) -> ParserState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Close the underlying stream. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._source.close()

    def __enter__(self) -> Parser[T]:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def _check_preconditions(self, workers: int) -> None:
        if self._state is not ParserState.IDLE:
            raise ConfigError(f"parser cannot run in state '{self._state}'")
        if self._closed:
            raise ConfigError("parser is closed")

        problem: str | None = None
        if self.callbacks.on_data is not None and self.callbacks.parse is None:
            problem = "cannot use on_data without parse"
        elif workers < 1:
            problem = f"invalid number of workers: {workers}"

        if problem is not None:
            self._state = ParserState.CONFIG_ERROR
            raise ConfigError(problem)

    def run(self, cancel: threading.Event | None = None, workers: int = 1) -> RunResult:
        """Read every record and process it on up to `workers` threads.

        Blocks until the stream is exhausted (or cancel is observed) AND every
        dispatched row has finished. Rows already dispatched when cancel is
        set still run to completion. The stream is closed before returning,
        whatever the outcome.

        With workers > 1, callbacks run concurrently and may complete out of
        document order.

        Args:
            cancel: Optional signal; once set, no further records are read
            workers: Maximum rows processed concurrently (>= 1)

        Returns:
            RunResult summary. Row-level failures are counted there and sent
            to on_error; they never make run() fail.

        Raises:
            ConfigError: on_data without parse, workers < 1, or the parser
                has already run. Raised before any record is read.
            Exception: The first exception raised by on_error itself, re-raised
                once every row has been attempted and the workers have drained.
        """
        try:
            self._check_preconditions(workers)
            return self._run(cancel, workers)
        finally:
            self.close()

    def _run(self, cancel: threading.Event | None, workers: int) -> RunResult:
        self._state = ParserState.RUNNING
        # Reusing the record buffer is only safe with one row in flight
        self.reader.reuse_record = workers == 1

        pool = WorkerPool(PoolConfig(workers=workers))
        processor: RowProcessor[T] = RowProcessor(self.callbacks)
        log = logger.bind(workers=workers)
        log.info("run_started", reuse_record=self.reader.reuse_record)

        rows_read = 0
        read_errors = 0
        cancelled = False
        handler_error: Exception | None = None
        line = 1
        started = time.perf_counter()

        try:
            while True:
                if cancel is not None and cancel.is_set():
                    cancelled = True
                    break
                if not pool.acquire(cancel):
                    cancelled = True
                    break

                try:
                    fields = self.reader.read()
                except csv.Error as exc:
                    pool.release()
                    read_errors += 1
                    log.debug("read_error", line=line, error=str(exc))
                    failure = _report_read_error(processor, ReadError(line, exc))
                    handler_error = handler_error if handler_error is not None else failure
                    line += 1
                    continue
                except _STREAM_FAILURES as exc:
                    pool.release()
                    read_errors += 1
                    log.warning("stream_failed", line=line, error=str(exc), error_type=type(exc).__name__)
                    failure = _report_read_error(processor, ReadError(line, exc))
                    handler_error = handler_error if handler_error is not None else failure
                    break

                if fields is None:
                    pool.release()
                    break

                pool.submit(processor.process, line, fields)
                rows_read += 1
                line += 1
        finally:
            task_error = pool.drain()
            self._state = ParserState.COMPLETED

        if cancelled:
            log.info("run_cancelled", next_line=line)
        # on_error failures: read path first, then the first from a worker
        if handler_error is not None:
            raise handler_error
        if task_error is not None:
            raise task_error

        stats = pool.get_stats()
        result = RunResult(
            rows_read=rows_read,
            read_errors=read_errors,
            rows_succeeded=processor.succeeded,
            rows_failed=processor.failed,
            cancelled=cancelled,
            max_concurrent=stats["max_concurrent_reached"],
            elapsed_seconds=time.perf_counter() - started,
        )
        log.info("run_completed", **result.to_dict())
        return result
