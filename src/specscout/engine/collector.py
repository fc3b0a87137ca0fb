"""Collect detail lines for a matched method block.

A :class:`DetailCollector` is owned by a single method block. It keeps the
raw lines whose trimmed text contains one of :data:`DETAIL_MARKERS` (or the
configured sensitive marker), and after a ``responses:`` line it captures
the following lines verbatim -- markers or not -- so that status codes and
their nested schemas come along.
"""

from __future__ import annotations

from specscout.engine.scanner import LineRecord

RESPONSES_MARKER = "responses:"

DETAIL_MARKERS = (
    "summary:",
    "description:",
    RESPONSES_MARKER,
    "requestBody:",
    "parameters:",
    "schema:",
    "$ref:",
    "type:",
    "properties:",
    "example:",
)

RESPONSES_LOOKAHEAD = 19
"""Default number of lines captured verbatim after a ``responses:`` line."""

DEFAULT_SENSITIVE_MARKER = "blocked_reason"


def is_detail_line(trimmed: str, sensitive_marker: str = DEFAULT_SENSITIVE_MARKER) -> bool:
    """Return whether a trimmed line carries one of the detail markers."""
    if sensitive_marker and sensitive_marker in trimmed:
        return True
    return any(marker in trimmed for marker in DETAIL_MARKERS)


class DetailCollector:
    """Append-only buffer of raw lines for one method block.

    Lookahead capture is tracked as state rather than by reading ahead:
    after a ``responses:`` line, :meth:`capture` keeps accepting records
    until the budget runs out or a bare key at the same or shallower
    indentation shows up. Records it accepts are not examined again.

    Args:
        sensitive_marker: Extra substring that makes a line worth keeping.
        lookahead: Maximum number of lines captured after ``responses:``.
    """

    def __init__(
        self,
        sensitive_marker: str = DEFAULT_SENSITIVE_MARKER,
        lookahead: int = RESPONSES_LOOKAHEAD,
    ) -> None:
        self._sensitive_marker = sensitive_marker
        self._lookahead = lookahead
        self._lines: list[str] = []
        self._capture_left = 0
        self._capture_indent = 0

    @property
    def lines(self) -> tuple[str, ...]:
        return tuple(self._lines)

    @property
    def capturing(self) -> bool:
        """True while a ``responses:`` lookahead window is open."""
        return self._capture_left > 0

    def __len__(self) -> int:
        return len(self._lines)

    def capture(self, record: LineRecord) -> bool:
        """Take *record* verbatim if a lookahead window is open.

        Returns:
            ``True`` when the record was consumed. ``False`` closes the
            window (if one was open) and leaves the record to the caller.
        """
        if self._capture_left <= 0:
            return False
        if record.indent <= self._capture_indent and record.is_bare_key:
            self._capture_left = 0
            return False
        self._lines.append(record.raw)
        self._capture_left -= 1
        return True

    def feed(self, record: LineRecord) -> None:
        """Keep *record* if it carries a detail marker.

        A ``responses:`` line additionally opens a lookahead window of
        ``lookahead`` lines anchored at its indentation.
        """
        if is_detail_line(record.trimmed, self._sensitive_marker):
            self._lines.append(record.raw)

        if RESPONSES_MARKER in record.trimmed:
            self._capture_left = self._lookahead
            self._capture_indent = record.indent
