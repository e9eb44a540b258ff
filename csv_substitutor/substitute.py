"""
Core substitution logic.

Pipeline (fixed order, single pass over an in-memory document):
- read the file into lines
- locate the named column in the header line
- rewrite the matching field of every data row
- write the header plus rewritten rows

Fields are split on a bare comma. Quoted fields containing commas are NOT
supported; a comma inside a value is treated as a field boundary.
"""

from __future__ import annotations

import io
import logging
from typing import Iterable, List, Optional, Tuple

from charset_normalizer import from_bytes

from .errors import EmptyDocumentError, RowTooShortError
from .models import Outcome, ReportItem, SubstitutionResult
from .rules import (
    DEFAULT_ENCODING,
    DELIMITER,
    SHORT_ROW_POLICIES,
    SHORT_ROWS_ERROR,
)

logger = logging.getLogger(__name__)

_UTF8_BOM = b"\xef\xbb\xbf"


def detect_encoding(raw: bytes) -> str:
    """
    Best-effort encoding detection via charset-normalizer.

    - ASCII is widened to UTF-8 so non-ASCII replacement values can be written.
    - UTF-8 with a BOM becomes utf-8-sig so the BOM is written back, not read
      into the first header name.
    - Nothing detected falls back to DEFAULT_ENCODING.
    """
    match = from_bytes(raw).best()
    detected = match.encoding if match is not None else DEFAULT_ENCODING

    if detected.lower().replace("-", "_") in ("ascii", "utf_8", "utf8"):
        detected = "utf-8"
    if raw.startswith(_UTF8_BOM) and detected == "utf-8":
        detected = "utf-8-sig"

    return detected


def _split_lines(text: str) -> List[str]:
    # newline=None recognises \n, \r\n and \r, like the text-mode reader does
    return [line.rstrip("\n") for line in io.StringIO(text, newline=None)]


def read_document(path, encoding: Optional[str] = DEFAULT_ENCODING) -> Tuple[List[str], str]:
    """
    Read a file into its lines, in file order, without line terminators.

    A final terminator does not produce a trailing empty line. Content is not
    trimmed. If encoding is None it is detected from the bytes.

    Returns (lines, encoding_used).
    Raises FileNotFoundError for a missing path, OSError for other read failures.
    """
    with open(path, "rb") as f:
        raw = f.read()

    if encoding is None:
        encoding = detect_encoding(raw)
        logger.debug("detected encoding %s for %s", encoding, path)

    return _split_lines(raw.decode(encoding)), encoding


def read_lines(path, encoding: Optional[str] = DEFAULT_ENCODING) -> List[str]:
    lines, _ = read_document(path, encoding)
    return lines


def index_of_column(column_heading: str, header: str) -> Optional[int]:
    """
    Zero-based position of column_heading in the header line, or None.

    Header parts are compared after trimming, exactly and case-sensitively.
    """
    for index, heading in enumerate(header.split(DELIMITER)):
        if heading.strip() == column_heading:
            return index

    return None


def field_at(fields: List[str], index: int) -> Optional[str]:
    """Checked field access: None when the row has no field at index."""
    if 0 <= index < len(fields):
        return fields[index]
    return None


def replace_within_line(field_index: int, value_to_replace: str, new_value: str, line: str) -> str:
    """
    Set the field at field_index to new_value if its trimmed value equals
    value_to_replace. The replacement is inserted verbatim; all other fields
    are re-joined exactly as they were.

    Raises RowTooShortError if the line has no field at field_index.
    """
    fields = line.split(DELIMITER)
    _replace_field(fields, field_index, value_to_replace, new_value)
    return DELIMITER.join(fields)


def _replace_field(fields: List[str], field_index: int, value_to_replace: str, new_value: str) -> bool:
    # mutates fields in place, True when the field was replaced
    current = field_at(fields, field_index)

    if current is None:
        raise RowTooShortError(field_index, len(fields), DELIMITER.join(fields))

    if current.strip() != value_to_replace:
        return False

    fields[field_index] = new_value
    return True


def write_lines(lines: Iterable[str], path, encoding: str = DEFAULT_ENCODING) -> None:
    """
    Create (or truncate) path and write each line followed by the platform
    line terminator, including after the last line.
    """
    with open(path, "w", encoding=encoding) as f:
        for line in lines:
            f.write(line)
            f.write("\n")


def substitute(
    input_path,
    column_heading: str,
    value_to_replace: str,
    new_value: str,
    output_path,
    encoding: Optional[str] = DEFAULT_ENCODING,
    short_rows: str = SHORT_ROWS_ERROR,
) -> SubstitutionResult:
    """
    Replace value_to_replace with new_value in the column named column_heading
    and write the result to output_path.

    If the column is not in the header nothing is written (no output file is
    created) and the result outcome is COLUMN_NOT_FOUND.
    """
    if short_rows not in SHORT_ROW_POLICIES:
        raise ValueError(f"short_rows must be one of {SHORT_ROW_POLICIES}, got {short_rows!r}")

    lines, encoding_used = read_document(input_path, encoding)
    if not lines:
        raise EmptyDocumentError(f"{input_path} is empty, no header row")

    header = lines[0]
    index = index_of_column(column_heading, header)

    if index is None:
        logger.warning("column %r not found in header of %s, nothing written", column_heading, input_path)
        return SubstitutionResult(
            outcome=Outcome.COLUMN_NOT_FOUND,
            column_heading=column_heading,
            encoding=encoding_used,
            rows=len(lines) - 1,
        )

    warnings: list[ReportItem] = []
    substitutions = 0
    output_lines = [header]

    # row numbers are 1-based file lines, the header is row 1
    for row, line in enumerate(lines[1:], start=2):
        fields = line.split(DELIMITER)

        try:
            replaced = _replace_field(fields, index, value_to_replace, new_value)
        except RowTooShortError as e:
            if short_rows == SHORT_ROWS_ERROR:
                raise RowTooShortError(e.field_index, e.field_count, line, row=row) from e

            logger.warning("row %d has %d field(s), kept unchanged", row, e.field_count)
            warnings.append(ReportItem(
                row=row,
                column=column_heading,
                issue="row_too_short",
                value=str(e.field_count),
                action="kept",
            ))
            output_lines.append(line)
            continue

        if replaced:
            substitutions += 1
        output_lines.append(DELIMITER.join(fields))

    if substitutions:
        # fail before the output is opened, not halfway through writing it
        new_value.encode(encoding_used)

    write_lines(output_lines, output_path, encoding_used)

    logger.info(
        "substituted %d of %d row(s) in column %r (index %d) -> %s",
        substitutions, len(lines) - 1, column_heading, index, output_path,
    )

    return SubstitutionResult(
        outcome=Outcome.SUBSTITUTED,
        column_heading=column_heading,
        column_index=index,
        encoding=encoding_used,
        rows=len(lines) - 1,
        substitutions=substitutions,
        output_written=True,
        warnings=warnings,
    )
