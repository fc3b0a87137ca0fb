"""Line scanner for OpenAPI YAML documents.

Turns raw document text into :class:`LineRecord` triples without parsing
the YAML. Everything up to and including the ``paths:`` root marker is
skipped, blank lines are dropped, and indentation is the number of leading
space characters (tabs are not counted).

The scanner is a generator: each call to :func:`scan_lines` produces a
fresh, independent sequence, so re-scanning the same text always yields the
same records.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

PATHS_MARKER = "paths:"


@dataclass(frozen=True)
class LineRecord:
    """One non-blank line beneath the ``paths:`` marker.

    Attributes:
        indent: Count of leading space characters in ``raw``.
        trimmed: ``raw`` with surrounding whitespace removed.
        raw: The original line, without its line terminator.
    """

    indent: int
    trimmed: str
    raw: str

    @property
    def is_bare_key(self) -> bool:
        """True for a structural key line such as ``/users:`` or ``get:``.

        A bare key ends with a colon and contains no space, so
        ``summary: List users`` is not one while ``'200':`` is. Comment
        lines never are.
        """
        return (
            self.trimmed.endswith(":")
            and " " not in self.trimmed
            and not self.is_comment
        )

    @property
    def is_comment(self) -> bool:
        """True for a YAML comment line (``# ...``)."""
        return self.trimmed.startswith("#")

    @property
    def key(self) -> str:
        """``trimmed`` without its trailing colon."""
        if self.trimmed.endswith(":"):
            return self.trimmed[:-1]
        return self.trimmed


def measure_indent(line: str) -> int:
    """Return the number of leading space characters in *line*."""
    return len(line) - len(line.lstrip(" "))


def scan_lines(text: str) -> Iterator[LineRecord]:
    """Yield a :class:`LineRecord` for every non-blank line after ``paths:``.

    Args:
        text: Full document text.

    Yields:
        Records in document order. Nothing is yielded when the document
        has no line that trims to exactly ``paths:``.
    """
    in_paths = False
    for raw in text.splitlines():
        trimmed = raw.strip()
        if not in_paths:
            if trimmed == PATHS_MARKER:
                in_paths = True
            continue
        if not trimmed:
            continue
        yield LineRecord(indent=measure_indent(raw), trimmed=trimmed, raw=raw)
