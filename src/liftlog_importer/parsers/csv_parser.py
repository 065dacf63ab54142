"""
CSV Parser

Tokenizes workout CSV exports and detects which app produced them:
- Hevy exports (dialect A)
- Strong App exports (dialect B)
- Generic files, detected by loose header names

The tokenizer is deliberately lenient: quotes only toggle quoted mode, and
malformed quoting degrades to best-effort field boundaries instead of raising.
"""

import logging
from enum import Enum
from typing import List, Sequence

logger = logging.getLogger(__name__)

# Header markers
HEVY_MARKERS = ("exercise_template_id", "superset_id")
STRONG_MARKERS = ("workout name", "set order")


class CSVDialect(str, Enum):
    """Known CSV layouts"""
    HEVY = "hevy_csv"        # Dialect A
    STRONG = "strong_csv"    # Dialect B
    GENERIC = "generic_csv"


def decode_content(content: bytes) -> str:
    """Decode bytes to string, trying multiple encodings"""
    encodings = ['utf-8-sig', 'utf-8', 'latin-1', 'cp1252']

    for encoding in encodings:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue

    # Fallback with error replacement
    return content.decode('utf-8', errors='replace')


def tokenize_csv(text: str) -> List[List[str]]:
    """
    Split CSV text into rows of trimmed fields.

    A double quote toggles quoted mode and is dropped from the output; commas
    and newlines inside quotes are kept. Rows whose fields are all empty are
    dropped. The final row is flushed even without a trailing newline.
    """
    rows: List[List[str]] = []
    row: List[str] = []
    field: List[str] = []
    in_quotes = False

    def end_field():
        row.append("".join(field).strip(" \t"))
        field.clear()

    def end_row():
        end_field()
        if any(value for value in row):
            rows.append(list(row))
        row.clear()

    for char in text:
        if char == '"':
            in_quotes = not in_quotes
        elif char == ',' and not in_quotes:
            end_field()
        elif char == '\n' and not in_quotes:
            # CRLF line endings
            if field and field[-1] == '\r':
                field.pop()
            end_row()
        else:
            field.append(char)

    if field or row:
        if field and field[-1] == '\r':
            field.pop()
        end_row()

    return rows


def detect_dialect(headers: Sequence[str]) -> CSVDialect:
    """
    Classify a header row. Hevy is checked before Strong before Generic, so a
    header row carrying a Hevy marker is Hevy whatever else it contains.
    """
    lowered = {h.strip().lower() for h in headers}

    if any(marker in lowered for marker in HEVY_MARKERS):
        return CSVDialect.HEVY
    if all(marker in lowered for marker in STRONG_MARKERS):
        return CSVDialect.STRONG
    return CSVDialect.GENERIC


def find_column(headers: Sequence[str], *names: str, default: int) -> int:
    """Index of the first exact header match among ``names``, else ``default``."""
    for name in names:
        if name in headers:
            return list(headers).index(name)
    return default


def find_column_ci(headers: Sequence[str], name: str, default: int) -> int:
    """Case-insensitive exact header lookup."""
    target = name.lower()
    for i, header in enumerate(headers):
        if header.lower() == target:
            return i
    return default


def find_column_containing(headers: Sequence[str], fragment: str, default: int) -> int:
    """Index of the first header containing ``fragment`` (case-insensitive)."""
    target = fragment.lower()
    for i, header in enumerate(headers):
        if target in header.lower():
            return i
    return default
