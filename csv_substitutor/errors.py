from __future__ import annotations


class EmptyDocumentError(ValueError):
    """The input file has no lines, so there is no header to look in."""


class RowTooShortError(IndexError):
    def __init__(self, field_index: int, field_count: int, line: str, row: int | None = None):
        self.field_index = field_index
        self.field_count = field_count
        self.line = line
        self.row = row
        where = f"row {row}" if row is not None else "row"
        super().__init__(
            f"{where} has {field_count} field(s), column index {field_index} is out of range: {line!r}"
        )
