# tests/streams/test_read_stream.py
"""Tests for ReadStream and NopCloser."""

from __future__ import annotations

import io

import pytest

from bigcsv.streams import NopCloser, ReadStream, Stream


class _ReadOnly:
    """Reader with no close() method."""

    def __init__(self, data: bytes) -> None:
        self._buffer = io.BytesIO(data)

    def read(self, size: int = -1) -> bytes:
        return self._buffer.read(size)


class TestReadStream:
    """ReadStream hands over closable readers and protects the rest."""

    def test_implements_stream_protocol(self) -> None:
        assert isinstance(ReadStream(io.BytesIO()), Stream)

    def test_closable_reader_is_returned_as_is(self) -> None:
        reader = io.BytesIO(b"1,one\n")

        assert ReadStream(reader).open() is reader

    def test_reader_without_close_is_wrapped(self) -> None:
        stream = ReadStream(_ReadOnly(b"1,one\n")).open()

        assert isinstance(stream, NopCloser)
        assert stream.read() == b"1,one\n"

    def test_close_false_keeps_reader_open(self) -> None:
        reader = io.BytesIO(b"1,one\n")
        stream = ReadStream(reader, close=False).open()

        stream.close()

        assert stream.closed
        assert not reader.closed

    def test_text_reader_is_accepted(self) -> None:
        reader = io.StringIO("1,one\n")

        assert ReadStream(reader).open() is reader


class TestNopCloser:
    """NopCloser behaves like a read-only buffered stream."""

    def test_read1_falls_back_to_read(self) -> None:
        stream = NopCloser(_ReadOnly(b"abc"))

        assert stream.read1(2) == b"ab"

    def test_read_after_close_raises(self) -> None:
        stream = NopCloser(io.BytesIO(b"abc"))
        stream.close()

        with pytest.raises(ValueError, match="closed"):
            stream.read()

    def test_is_readable(self) -> None:
        assert NopCloser(io.BytesIO()).readable()

    def test_usable_with_text_wrapper(self) -> None:
        wrapped = io.BytesIO("é,ü\n".encode())
        text = io.TextIOWrapper(NopCloser(wrapped), encoding="utf-8", newline="")

        assert text.read() == "é,ü\n"
