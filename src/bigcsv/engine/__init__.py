"""Dispatch engine: the read loop and per-row workers."""

from bigcsv.engine.parser import Parser
from bigcsv.engine.processor import RowCallbacks, RowProcessor

__all__ = [
    "Parser",
    "RowCallbacks",
    "RowProcessor",
]
