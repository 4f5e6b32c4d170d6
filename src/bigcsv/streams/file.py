# src/bigcsv/streams/file.py
"""Filesystem stream with transparent gzip decompression."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import IO

import structlog

from bigcsv.contracts import SourceOpenError
from bigcsv.streams.base import open_gzip

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class FileStream:
    """CSV file on the local filesystem.

    Files ending in .gz (case-insensitive) are decompressed as gzip.
    Everything else is read as plain CSV.
    """

    path: str | os.PathLike[str]

    def open(self) -> IO[bytes]:
        path = Path(self.path)
        try:
            stream: IO[bytes] = open(path, "rb")  # noqa: SIM115 - ownership passes to the caller
        except OSError as exc:
            raise SourceOpenError(f"could not open file '{path}': {exc}") from exc

        is_gzip = path.suffix.lower() == ".gz"
        if is_gzip:
            stream = open_gzip(stream, str(path))

        logger.debug("stream_opened", kind="file", path=str(path), gzip=is_gzip)
        return stream
