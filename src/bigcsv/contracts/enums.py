# src/bigcsv/contracts/enums.py
"""Status codes and stage names shared across the engine and its callers."""

from enum import StrEnum


class ParserState(StrEnum):
    """Lifecycle of a Parser.

    IDLE is the only state in which run() may be called. A parser runs once.
    """

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CONFIG_ERROR = "config_error"


class RowStage(StrEnum):
    """Stage of row processing that produced a row error."""

    READ = "read"
    ON_ROW = "on_row"
    PARSE = "parse"
    ON_DATA = "on_data"

    @property
    def description(self) -> str:
        """Human-readable prefix used in error messages."""
        return _STAGE_DESCRIPTIONS[self]


_STAGE_DESCRIPTIONS: dict[RowStage, str] = {
    RowStage.READ: "read error",
    RowStage.ON_ROW: "on_row error",
    RowStage.PARSE: "parse error",
    RowStage.ON_DATA: "on_data error",
}
