# src/bigcsv/parsing/tokenizer.py
"""Record tokenizer over a byte stream.

Wraps csv.reader with the pieces the engine needs: an explicit
end-of-stream value, field-count enforcement, and record reuse.

Record reuse: with reuse_record=True every read() overwrites and returns
the same list. This is only safe when a single row is in flight at a time;
Parser.run() enables it for exactly one worker and guarantees the previous
row's worker has finished before the next read.

The tokenizer is not thread-safe. Only the engine's read loop calls read().
"""

from __future__ import annotations

import csv
import io
from typing import IO, Any

from bigcsv.parsing.config import ReaderConfig
from bigcsv.streams.base import NopCloser


class FieldCountError(csv.Error):
    """A record had the wrong number of fields.

    line is the physical line where the record ended, which differs from the
    engine's record ordinal after header rows or multi-line quoted fields.
    """

    def __init__(self, line: int, expected: int, got: int) -> None:
        super().__init__(f"record ending on physical line {line}: wrong number of fields (expected {expected}, got {got})")
        self.line = line
        self.expected = expected
        self.got = got


def _as_text(stream: IO[Any], encoding: str) -> IO[str]:
    """Return a text view of stream, decoding bytes when needed."""
    inner = stream.wrapped if isinstance(stream, NopCloser) else stream
    if isinstance(inner, io.TextIOBase):
        return inner  # type: ignore[return-value]
    # newline="" lets csv.reader handle embedded newlines in quoted fields
    return io.TextIOWrapper(stream, encoding=encoding, newline="")  # type: ignore[arg-type]


class CSVTokenizer:
    """Reads one CSV record per call.

    Example:
        tokenizer = CSVTokenizer(stream, ReaderConfig(delimiter=";"))
        header = tokenizer.read()
        while (record := tokenizer.read()) is not None:
            ...
    """

    def __init__(self, stream: IO[Any], config: ReaderConfig | None = None) -> None:
        self._config = config or ReaderConfig()
        self._text = _as_text(stream, self._config.encoding)
        self._reader = csv.reader(
            self._text,
            delimiter=self._config.delimiter,
            quotechar=self._config.quotechar,
            skipinitialspace=self._config.skip_initial_space,
            strict=self._config.strict,
        )
        self._fields_per_record = self._config.fields_per_record
        self._record: list[str] = []
        self.reuse_record = False
        self.records_read = 0

    @property
    def config(self) -> ReaderConfig:
        return self._config

    @property
    def line_num(self) -> int:
        """Physical line number of the last line consumed."""
        return self._reader.line_num

    @property
    def fields_per_record(self) -> int:
        """Current field-count rule (set from the first record when configured as 0)."""
        return self._fields_per_record

    def read(self) -> list[str] | None:
        """Read the next record.

        Blank lines are skipped.

        Returns:
            The record's fields, or None at end of stream.

        Raises:
            csv.Error: Malformed record (FieldCountError for a wrong field count).
                The tokenizer stays usable and the next read continues after it.
            OSError, EOFError, UnicodeDecodeError: The stream itself failed.
        """
        # The csv module's field limit is process-wide, so it is applied per read
        csv.field_size_limit(self._config.field_size_limit)
        while True:
            try:
                values = next(self._reader)
            except StopIteration:
                return None
            if values:
                break

        if self._fields_per_record > 0:
            if len(values) != self._fields_per_record:
                raise FieldCountError(self._reader.line_num, self._fields_per_record, len(values))
        elif self._fields_per_record == 0:
            self._fields_per_record = len(values)

        self.records_read += 1
        if self.reuse_record:
            self._record[:] = values
            return self._record
        return values
