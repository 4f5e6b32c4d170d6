"""Shared contracts: enums, errors and results.

This package is a leaf module with no dependencies on the rest of bigcsv,
so streams, the tokenizer and the engine can all import from it.
"""

from bigcsv.contracts.enums import ParserState, RowStage
from bigcsv.contracts.errors import (
    BigCSVError,
    ConfigError,
    HandlerError,
    ParseError,
    PreParseError,
    ReadError,
    RowError,
    RowErrorPayload,
    SourceOpenError,
)
from bigcsv.contracts.results import RunResult

__all__ = [
    "BigCSVError",
    "ConfigError",
    "HandlerError",
    "ParseError",
    "ParserState",
    "PreParseError",
    "ReadError",
    "RowError",
    "RowErrorPayload",
    "RowStage",
    "RunResult",
    "SourceOpenError",
]
