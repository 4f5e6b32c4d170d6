# src/bigcsv/parsing/config.py
"""CSV dialect configuration for the tokenizer."""

from __future__ import annotations

import codecs
from typing import Self

from pydantic import BaseModel, Field, field_validator, model_validator

_LINE_BREAKS = frozenset({"\r", "\n"})

# csv.field_size_limit takes a C long, which is 32 bits on Windows
MAX_FIELD_SIZE = 2**31 - 1


class ReaderConfig(BaseModel):
    """CSV reading options.

    Attributes:
        delimiter: Field separator (single character)
        quotechar: Quote character (single character)
        skip_initial_space: Ignore whitespace immediately after a delimiter
        strict: Treat data after a closing quote, or a quote left open at
            end of stream, as a read error. A quote inside an unquoted field
            (1,a"b) is kept as a literal character either way.
        fields_per_record: 0 fixes the count from the first record read,
            a positive value requires exactly that many fields, a negative
            value allows any number
        encoding: Text encoding of the byte stream
        field_size_limit: Largest field, in characters, the reader accepts
    """

    model_config = {"extra": "forbid", "frozen": True}

    delimiter: str = Field(",", min_length=1, max_length=1, description="Field separator")
    quotechar: str = Field('"', min_length=1, max_length=1, description="Quote character")
    skip_initial_space: bool = Field(False, description="Ignore whitespace after delimiters")
    strict: bool = Field(True, description="Raise on malformed quoting")
    fields_per_record: int = Field(0, description="Expected fields per record (0: from first record, <0: any)")
    encoding: str = Field("utf-8", description="Text encoding of the source")
    field_size_limit: int = Field(
        MAX_FIELD_SIZE,
        ge=1,
        le=MAX_FIELD_SIZE,
        description="Maximum characters per field",
    )

    @field_validator("encoding")
    @classmethod
    def _validate_encoding(cls, v: str) -> str:
        try:
            codecs.lookup(v)
        except LookupError as exc:
            raise ValueError(f"unknown encoding: {v}") from exc
        return v

    @model_validator(mode="after")
    def _validate_dialect(self) -> Self:
        if self.delimiter in _LINE_BREAKS or self.quotechar in _LINE_BREAKS:
            raise ValueError("delimiter and quotechar cannot be line breaks")
        if self.delimiter == self.quotechar:
            raise ValueError(f"delimiter and quotechar must differ (both {self.delimiter!r})")
        return self
