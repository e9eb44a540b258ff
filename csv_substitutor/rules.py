"""
Deterministic substitution rules.

This file exists to make non-goals explicit and enforceable.
Fields are split on a bare comma; quoted fields are NOT supported.
"""

DELIMITER = ","
DEFAULT_ENCODING = "utf-8"

# What to do with a data row that has fewer fields than the column index needs.
SHORT_ROWS_ERROR = "error"  # abort the whole run, nothing is written
SHORT_ROWS_KEEP = "keep"    # pass the row through unchanged and warn
SHORT_ROW_POLICIES = (SHORT_ROWS_ERROR, SHORT_ROWS_KEEP)
