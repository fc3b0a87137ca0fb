"""Find matching endpoint blocks in one YAML document.

The extractor walks the records produced by
:func:`~specscout.engine.scanner.scan_lines` with a small state machine:

* a bare key at the shallowest key indentation seen so far is a **path key**
  (comment and value lines never move that depth);
* a bare key deeper than the current path key, naming an HTTP verb, is a
  **method key** (only looked for while the path matches the query);
* any other line inside a matching method block goes to that block's
  :class:`~specscout.engine.collector.DetailCollector`.

A matching method block is finalized into an
:class:`~specscout.models.EndpointMatch` when the next path key or method
key starts, or when the document ends.

Every :func:`find_endpoints` call builds its own :class:`EndpointScan`, so
scans of different documents share no state and may run in parallel.
"""

from __future__ import annotations

import logging
from typing import Optional

from specscout.engine.collector import DEFAULT_SENSITIVE_MARKER, RESPONSES_LOOKAHEAD, DetailCollector
from specscout.engine.matcher import ScanState, is_http_method, method_matches, path_matches
from specscout.engine.scanner import LineRecord, scan_lines
from specscout.models import EndpointMatch, EndpointQuery, ScanConfig

logger = logging.getLogger(__name__)


class EndpointScan:
    """Scan context for a single document and query.

    Args:
        query: Path (and optional method) being searched for.
        label: Name of the document, copied onto every match.
        sensitive_marker: Extra detail marker, see :class:`DetailCollector`.
        lookahead: Lines captured verbatim after ``responses:``.
    """

    def __init__(
        self,
        query: EndpointQuery,
        label: str = "",
        sensitive_marker: str = DEFAULT_SENSITIVE_MARKER,
        lookahead: int = RESPONSES_LOOKAHEAD,
    ) -> None:
        self.query = query
        self.label = label
        self._sensitive_marker = sensitive_marker
        self._lookahead = lookahead

        self.state = ScanState.SEEKING
        self.matches: list[EndpointMatch] = []

        self._root_indent: Optional[int] = None
        self._path: Optional[str] = None
        self._path_indent = 0
        self._path_ok = False
        self._method: Optional[str] = None
        self._method_ok = False
        self._collector: Optional[DetailCollector] = None

    def run(self, text: str) -> list[EndpointMatch]:
        """Scan *text* and return the matches in document order."""
        for record in scan_lines(text):
            self._step(record)
        self._finalize()
        return self.matches

    def _step(self, record: LineRecord) -> None:
        if self._collector is not None and self._collector.capture(record):
            return

        if record.is_bare_key and self._is_path_key(record):
            self._open_path(record)
        elif self.state is ScanState.SEEKING:
            return
        elif self._is_method_key(record):
            self._open_method(record)
        elif self.state is ScanState.IN_METHOD and self._collector is not None:
            self._collector.feed(record)

    def _is_path_key(self, record: LineRecord) -> bool:
        """Track the shallowest bare-key indentation and test *record* against it."""
        if self._root_indent is None or record.indent < self._root_indent:
            self._root_indent = record.indent
        return record.indent <= self._root_indent

    def _is_method_key(self, record: LineRecord) -> bool:
        return (
            self._path_ok
            and record.is_bare_key
            and record.indent > self._path_indent
            and is_http_method(record.key)
        )

    def _open_path(self, record: LineRecord) -> None:
        self._finalize()
        self._path = record.key
        self._path_indent = record.indent
        self._path_ok = path_matches(self._path, self.query.path)
        self.state = ScanState.IN_PATH

    def _open_method(self, record: LineRecord) -> None:
        self._finalize()
        self._method = record.key.upper()
        self._method_ok = method_matches(self._method, self.query.method)
        if self._method_ok:
            self._collector = DetailCollector(self._sensitive_marker, self._lookahead)
        self.state = ScanState.IN_METHOD

    def _finalize(self) -> None:
        """Emit the open method block if it matched, then close it."""
        if (
            self._collector is not None
            and self._method is not None
            and self._path is not None
            and self._path_ok
            and self._method_ok
        ):
            match = EndpointMatch(
                method=self._method,
                path=self._path,
                lines=self._collector.lines,
                document=self.label,
            )
            logger.debug(
                "Matched %s %s in %s (%d lines)",
                match.method, match.path, self.label or "<document>", len(match.lines),
            )
            self.matches.append(match)
        self._method = None
        self._method_ok = False
        self._collector = None
        if self._path is not None:
            self.state = ScanState.IN_PATH


def find_endpoints(
    text: str,
    label: str,
    query: EndpointQuery,
    options: Optional[ScanConfig] = None,
) -> list[EndpointMatch]:
    """Return every method block in *text* matching *query*.

    Args:
        text: Full YAML document text.
        label: Document name recorded on each match.
        query: Path and optional method to look for.
        options: Scan tuning; defaults to :class:`~specscout.models.ScanConfig`.

    Returns:
        Matches in document order; empty when nothing matches or the
        document has no ``paths:`` section.
    """
    options = options or ScanConfig()
    scan = EndpointScan(
        query,
        label=label,
        sensitive_marker=options.sensitive_marker,
        lookahead=options.responses_lookahead,
    )
    return scan.run(text)
