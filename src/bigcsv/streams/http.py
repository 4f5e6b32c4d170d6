# src/bigcsv/streams/http.py
"""HTTP(S) stream backed by httpx.

The response body is streamed, never buffered whole: ResponseBody adapts
httpx's chunk iterator to a raw byte stream, which is wrapped in
io.BufferedReader (and a gzip decoder when the content-type says gzip).
Content-Encoding is already decoded by httpx.iter_bytes().
"""

from __future__ import annotations

import io
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import IO

import httpx
import structlog

from bigcsv.contracts import SourceOpenError
from bigcsv.streams.base import open_gzip

logger = structlog.get_logger(__name__)


class ResponseBody(io.RawIOBase):
    """Raw, read-only byte stream over a streaming httpx response.

    Closing the body closes the response and, when given, the client that
    was created for it.
    """

    def __init__(self, response: httpx.Response, client: httpx.Client | None = None) -> None:
        super().__init__()
        self._response = response
        self._client = client
        self._chunks: Iterator[bytes] = response.iter_bytes()
        self._pending = b""

    def readable(self) -> bool:
        return True

    def readinto(self, buffer: memoryview) -> int:  # type: ignore[override]
        while not self._pending:
            try:
                self._pending = next(self._chunks)
            except StopIteration:
                return 0
            except httpx.HTTPError as exc:
                # Surface transport failures as I/O errors so the tokenizer
                # reports them like any other broken stream.
                raise OSError(f"error reading response body from {self._response.url}: {exc}") from exc
        size = min(len(buffer), len(self._pending))
        buffer[:size] = self._pending[:size]
        self._pending = self._pending[size:]
        return size

    def close(self) -> None:
        if not self.closed:
            try:
                self._response.close()
            finally:
                if self._client is not None:
                    self._client.close()
        super().close()


@dataclass(frozen=True)
class HTTPStream:
    """CSV fetched with an HTTP GET.

    Attributes:
        url: Absolute http:// or https:// URL
        timeout: Request timeout in seconds (ignored when client is given)
        headers: Extra request headers
        client: Optional shared httpx.Client. When None, a client is created
            per open() and closed with the stream.

    Transport errors and non-2xx responses raise SourceOpenError. A
    content-type containing "gzip" (application/gzip, application/x-gzip)
    makes the body be decompressed.
    """

    url: str
    timeout: float = 30.0
    headers: Mapping[str, str] | None = None
    client: httpx.Client | None = field(default=None, compare=False, repr=False)

    def open(self) -> IO[bytes]:
        owns_client = self.client is None
        client = httpx.Client(timeout=self.timeout, follow_redirects=True) if self.client is None else self.client

        try:
            request = client.build_request("GET", self.url, headers=dict(self.headers or {}))
            response = client.send(request, stream=True)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            if owns_client:
                client.close()
            raise SourceOpenError(f"could not request '{self.url}': {exc}") from exc

        if response.is_error:
            response.close()
            if owns_client:
                client.close()
            raise SourceOpenError(f"could not request '{self.url}': HTTP {response.status_code} {response.reason_phrase}")

        stream: IO[bytes] = io.BufferedReader(ResponseBody(response, client if owns_client else None))
        is_gzip = "gzip" in response.headers.get("content-type", "").lower()
        if is_gzip:
            stream = open_gzip(stream, self.url)

        logger.debug(
            "stream_opened",
            kind="http",
            url=self.url,
            status_code=response.status_code,
            gzip=is_gzip,
        )
        return stream
