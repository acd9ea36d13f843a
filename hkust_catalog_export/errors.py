"""
Parse errors raised by the catalog page parsers.

Every error names the structural unit that failed and the raw string that
could not be parsed, so a caller can skip the unit and keep going.
"""
from __future__ import annotations


class CatalogParseError(ValueError):
    """A structural unit of a catalog page did not match its grammar."""

    unit = "unit"

    def __init__(self, raw: str, message: str | None = None) -> None:
        self.raw = raw
        super().__init__(message or f"Invalid {self.unit} string format: {raw!r}.")


class HeadingFormatError(CatalogParseError):
    unit = "course heading"


class SectionFormatError(CatalogParseError):
    unit = "section"

    def __init__(self, raw: str, row: int | None = None, message: str | None = None) -> None:
        self.row = row
        if message is None and row is not None:
            message = f"Invalid {self.unit} string format in row {row}: {raw!r}."
        super().__init__(raw, message)


class CellFormatError(CatalogParseError):
    """An occupancy cell (quota, enrol, avail, wait) is not an integer."""

    unit = "count"

    def __init__(self, raw: str, column: str) -> None:
        self.column = column
        super().__init__(raw, f"Invalid {column} count: {raw!r}.")


class ScheduleFormatError(CatalogParseError):
    unit = "schedule"
