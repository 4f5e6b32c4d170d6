# src/bigcsv/pooling/executor.py
"""Bounded worker pool for per-row processing.

Manages concurrent row workers while:
- Limiting rows in flight with a semaphore (one permit per worker slot)
- Letting the dispatcher acquire a slot BEFORE it reads the next record
- Releasing the slot unconditionally when a worker finishes
- Tracking peak concurrency for the run summary

Slot ownership: the dispatcher acquires a slot, then either hands it to a
submitted task (which releases it in its finally block) or gives it back
with release() when it has nothing to dispatch.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, wait
from threading import Lock, Semaphore
from typing import Any

from bigcsv.pooling.config import PoolConfig


class WorkerPool:
    """Semaphore-gated thread pool.

    Usage:
        pool = WorkerPool(PoolConfig(workers=4))
        while pool.acquire(cancel):
            record = reader.read()
            if record is None:
                pool.release()
                break
            pool.submit(process, record)
        error = pool.drain()
    """

    def __init__(self, config: PoolConfig) -> None:
        self._config = config
        self._workers = config.workers
        self._poll_seconds = config.cancel_poll_interval_ms / 1000

        self._thread_pool = ThreadPoolExecutor(
            max_workers=config.workers,
            thread_name_prefix="bigcsv-worker",
        )
        self._semaphore = Semaphore(config.workers)
        self._futures: set[Future[Any]] = set()
        self._futures_lock = Lock()

        # Concurrency tracking for the run summary
        self._stats_lock = Lock()
        self._active_workers = 0
        self._max_concurrent = 0
        self._submitted = 0

    @property
    def workers(self) -> int:
        """Number of worker slots."""
        return self._workers

    @property
    def active_workers(self) -> int:
        with self._stats_lock:
            return self._active_workers

    def _increment_active_workers(self) -> None:
        with self._stats_lock:
            self._active_workers += 1
            if self._active_workers > self._max_concurrent:
                self._max_concurrent = self._active_workers

    def _decrement_active_workers(self) -> None:
        with self._stats_lock:
            self._active_workers -= 1

    def acquire(self, cancel: threading.Event | None = None) -> bool:
        """Block until a worker slot is free.

        Args:
            cancel: Optional cancellation signal, polled while waiting

        Returns:
            True if a slot is now held, False if cancel was set first
            (no slot is held in that case).
        """
        if cancel is None:
            self._semaphore.acquire()
            return True
        while not cancel.is_set():
            if self._semaphore.acquire(timeout=self._poll_seconds):
                # The worker that freed this slot may have set cancel just
                # before releasing it; that must win over the next read.
                if cancel.is_set():
                    self._semaphore.release()
                    return False
                return True
        return False

    def release(self) -> None:
        """Return a slot that was acquired but not handed to a task."""
        self._semaphore.release()

    def submit(self, fn: Callable[..., Any], *args: Any) -> Future[Any]:
        """Run fn(*args) on a pool thread, using the slot already acquired.

        The slot is released when fn returns or raises.
        """
        try:
            future = self._thread_pool.submit(self._run_in_slot, fn, *args)
        except RuntimeError:
            self._semaphore.release()
            raise
        with self._futures_lock:
            self._futures.add(future)
        with self._stats_lock:
            self._submitted += 1
        future.add_done_callback(self._forget)
        return future

    def _forget(self, future: Future[Any]) -> None:
        # Completed futures with exceptions are kept for drain()
        if future.exception() is None:
            with self._futures_lock:
                self._futures.discard(future)

    def _run_in_slot(self, fn: Callable[..., Any], *args: Any) -> Any:
        self._increment_active_workers()
        try:
            return fn(*args)
        finally:
            self._decrement_active_workers()
            self._semaphore.release()

    def drain(self) -> BaseException | None:
        """Wait for every submitted task, then shut the thread pool down.

        Returns:
            The first exception raised by a task, or None.
        """
        with self._futures_lock:
            pending = list(self._futures)
        wait(pending)
        self._thread_pool.shutdown(wait=True)

        with self._futures_lock:
            failed = [f for f in self._futures if f.done() and f.exception() is not None]
            self._futures.clear()
        return failed[0].exception() if failed else None

    def get_stats(self) -> dict[str, int]:
        """Pool statistics for the run summary."""
        with self._stats_lock:
            return {
                "workers": self._workers,
                "submitted": self._submitted,
                "max_concurrent_reached": self._max_concurrent,
            }
