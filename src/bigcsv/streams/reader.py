# src/bigcsv/streams/reader.py
"""Adapter for streams the caller has already opened."""

from __future__ import annotations

from typing import IO, Any

from bigcsv.streams.base import NopCloser


class ReadStream:
    """Stream over an already-open reader (bytes or text).

    The reader is handed to the engine as-is when it has a close() method,
    so the engine closes it after the run. Readers without close(), or any
    reader when close=False, are wrapped in NopCloser and stay open.

    Example:
        parser = Parser(ReadStream(io.BytesIO(b"1,one\\n2,two\\n")))
        parser = Parser(ReadStream(sys.stdin.buffer, close=False))
    """

    def __init__(self, reader: Any, *, close: bool = True) -> None:
        self._reader = reader
        self._close = close

    def open(self) -> IO[Any]:
        if self._close and callable(getattr(self._reader, "close", None)):
            return self._reader  # type: ignore[no-any-return]
        return NopCloser(self._reader)
