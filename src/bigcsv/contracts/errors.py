# src/bigcsv/contracts/errors.py
"""Error taxonomy for bigcsv.

Two families:

- Fatal errors (ConfigError, SourceOpenError) are raised directly from
  Parser construction or Parser.run() before any row is processed.
- Row errors (RowError and its subclasses) are never raised out of run().
  They are delivered to the on_error callback, tagged with the 1-based line
  ordinal and the stage that failed. The original exception is chained as
  __cause__.
"""

from __future__ import annotations

from typing import TypedDict

from bigcsv.contracts.enums import RowStage


class RowErrorPayload(TypedDict):
    """Serializable shape of a RowError (CLI JSON output, log events)."""

    line: int
    stage: str
    error: str
    error_type: str


class BigCSVError(Exception):
    """Base class for all bigcsv errors."""


class ConfigError(BigCSVError):
    """Raised by Parser.run() when the run is misconfigured.

    Detected before the first read: on_data without parse, a worker count
    below 1, or a parser that has already run.
    """


class SourceOpenError(BigCSVError):
    """Raised when a stream cannot be opened or its decoder initialized."""


class RowError(BigCSVError):
    """A failure scoped to a single row.

    Attributes:
        line: 1-based ordinal of the row in read order
        stage: Processing stage that failed
    """

    stage: RowStage = RowStage.READ

    def __init__(self, line: int, cause: BaseException) -> None:
        super().__init__(f"{self.stage.description}: line {line}: {cause}")
        self.line = line
        self.__cause__ = cause

    @property
    def cause(self) -> BaseException | None:
        """The underlying exception (same as __cause__)."""
        return self.__cause__

    def to_payload(self) -> RowErrorPayload:
        cause = self.__cause__
        return {
            "line": self.line,
            "stage": str(self.stage),
            "error": str(cause) if cause is not None else str(self),
            "error_type": type(cause).__name__ if cause is not None else type(self).__name__,
        }


class ReadError(RowError):
    """The tokenizer could not produce a record (malformed line, I/O failure)."""

    stage = RowStage.READ


class PreParseError(RowError):
    """The on_row hook raised."""

    stage = RowStage.ON_ROW


class ParseError(RowError):
    """The parse function raised."""

    stage = RowStage.PARSE


class HandlerError(RowError):
    """The on_data handler raised."""

    stage = RowStage.ON_DATA
