# src/bigcsv/streams/base.py
"""Stream protocol and shared byte-stream helpers.

A Stream is a logical location (path, URL, open reader) that can be opened
into a closable byte stream. Opening is where failures are fatal: every
implementation raises SourceOpenError, chained to the underlying cause,
and leaves nothing open when it does.
"""

from __future__ import annotations

import gzip
import io
from typing import IO, Any, Protocol, runtime_checkable

from bigcsv.contracts import SourceOpenError


@runtime_checkable
class Stream(Protocol):
    """A source of CSV bytes.

    open() transfers ownership of the returned stream to the caller, which
    must close it exactly once.
    """

    def open(self) -> IO[Any]: ...


class NopCloser(io.BufferedIOBase):
    """Read-only view of a stream whose close() leaves the stream open.

    Used for caller-supplied readers that bigcsv must not close.
    """

    def __init__(self, wrapped: Any) -> None:
        super().__init__()
        self.wrapped = wrapped

    def readable(self) -> bool:
        return True

    def read(self, size: int | None = -1) -> bytes:
        if self.closed:
            raise ValueError("I/O operation on closed stream")
        return self.wrapped.read(-1 if size is None else size)

    def read1(self, size: int = -1) -> bytes:
        if self.closed:
            raise ValueError("I/O operation on closed stream")
        read1 = getattr(self.wrapped, "read1", None)
        if read1 is not None:
            return read1(size)
        return self.wrapped.read(size)


class _GzipStream(gzip.GzipFile):
    """GzipFile that also closes the stream it decodes.

    gzip.GzipFile(fileobj=...) never closes fileobj; the engine only holds
    the outermost stream, so closing it must release everything beneath.
    """

    def __init__(self, source: IO[bytes]) -> None:
        # Set before GzipFile.__init__ so close() from IOBase.__del__ is safe
        # even if construction fails.
        self._source = source
        super().__init__(fileobj=source, mode="rb")

    def close(self) -> None:
        try:
            super().close()
        finally:
            self._source.close()


def open_gzip(source: IO[bytes], name: str) -> IO[bytes]:
    """Wrap source in a gzip decoder, reading the header eagerly.

    gzip.GzipFile is lazy; peeking forces the member header to be parsed so
    a corrupt archive fails here rather than on the first row.

    Raises:
        SourceOpenError: If the gzip header is invalid. source is closed.
    """
    stream = _GzipStream(source)
    try:
        stream.peek(1)
    except (OSError, EOFError) as exc:
        stream.close()
        raise SourceOpenError(f"gzip failed for '{name}': {exc}") from exc
    return stream
