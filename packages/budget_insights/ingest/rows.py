"""Line splitting and quote-aware field parsing for delimited exports.

Parsing follows RFC 4180 quoting via the stdlib :mod:`csv` module: a field
may be wrapped in double quotes, may contain the delimiter inside quotes, and
``""`` inside a quoted field is a literal quote. Fields are trimmed.
"""

from __future__ import annotations

import csv
import re
from collections.abc import Iterator

# Records end at LF, CRLF or a bare CR only; other Unicode line breaks are data.
_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def parse_line(line: str, *, delimiter: str = ",") -> list[str]:
    """Split one delimited line into trimmed fields.

    An empty or whitespace-only line yields an empty list.
    """

    if not line.strip():
        return []
    # A single line never spans records; strip the terminator so csv does not
    # report an empty trailing row.
    reader = csv.reader([line.rstrip("\r\n")], delimiter=delimiter, skipinitialspace=True)
    fields = next(reader, [])
    return [f.strip() for f in fields]


def iter_data_lines(content: str) -> Iterator[tuple[int, str]]:
    """Yield ``(line_number, line)`` for non-blank lines, 1-based."""

    for number, line in enumerate(_LINE_BREAK_RE.split(content), start=1):
        if line.strip():
            yield number, line


__all__ = ["iter_data_lines", "parse_line"]
