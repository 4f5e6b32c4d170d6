"""CSV tokenization: dialect configuration and the record tokenizer."""

from bigcsv.parsing.config import ReaderConfig
from bigcsv.parsing.tokenizer import CSVTokenizer, FieldCountError

__all__ = [
    "CSVTokenizer",
    "FieldCountError",
    "ReaderConfig",
]
