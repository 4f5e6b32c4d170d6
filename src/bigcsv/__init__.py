"""
bigcsv: streaming CSV processing with bounded concurrent workers.

Records are read one at a time from a file, URL or open reader, optionally
parsed into a typed value, and handed to caller callbacks on a bounded
thread pool. Suitable for CSV files too large to hold in memory.

    from bigcsv import FileStream, Parser, RowCallbacks

    parser = Parser(FileStream("data.csv.gz"), callbacks=RowCallbacks(parse=..., on_data=...))
    parser.reader.read()  # header
    result = parser.run(workers=4)
"""

__version__ = "0.1.0"

from bigcsv.contracts import (
    BigCSVError,
    ConfigError,
    HandlerError,
    ParseError,
    ParserState,
    PreParseError,
    ReadError,
    RowError,
    RowStage,
    RunResult,
    SourceOpenError,
)
from bigcsv.engine import Parser, RowCallbacks
from bigcsv.parsing import CSVTokenizer, FieldCountError, ReaderConfig
from bigcsv.streams import FileStream, HTTPStream, NopCloser, ReadStream, Stream

__all__ = [
    "BigCSVError",
    "CSVTokenizer",
    "ConfigError",
    "FieldCountError",
    "FileStream",
    "HTTPStream",
    "HandlerError",
    "NopCloser",
    "ParseError",
    "Parser",
    "ParserState",
    "PreParseError",
    "ReadError",
    "ReadStream",
    "RowCallbacks",
    "RowError",
    "RowStage",
    "RunResult",
    "SourceOpenError",
    "Stream",
    "__version__",
]
