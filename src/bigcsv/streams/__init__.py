"""Byte sources for the parser: files, HTTP and already-open readers."""

from bigcsv.streams.base import NopCloser, Stream, open_gzip
from bigcsv.streams.file import FileStream
from bigcsv.streams.http import HTTPStream, ResponseBody
from bigcsv.streams.reader import ReadStream

__all__ = [
    "FileStream",
    "HTTPStream",
    "NopCloser",
    "ReadStream",
    "ResponseBody",
    "Stream",
    "open_gzip",
]
