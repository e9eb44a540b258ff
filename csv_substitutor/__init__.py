from .substitute import (
    index_of_column,
    read_document,
    read_lines,
    replace_within_line,
    substitute,
    write_lines,
)

__all__ = [
    "index_of_column",
    "read_document",
    "read_lines",
    "replace_within_line",
    "substitute",
    "write_lines",
]
