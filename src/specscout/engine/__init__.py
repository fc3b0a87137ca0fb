"""Endpoint extraction engine -- find and render path/method blocks in YAML text.

The engine never parses YAML. It reads the document line by line after the
``paths:`` marker and relies on indentation to tell path keys, method keys
and detail lines apart, returning the raw matched text.

Typical usage::

    from specscout.engine import EndpointQuery, find_endpoints, render_report

    query = EndpointQuery(path="/cards", method="get")
    matches = find_endpoints(text, "cards.yaml", query)
    print(render_report(query, matches))

Sub-modules:

* :mod:`~specscout.engine.scanner` -- lazy ``(indent, trimmed, raw)`` records.
* :mod:`~specscout.engine.matcher` -- path and method predicates.
* :mod:`~specscout.engine.collector` -- per-block detail buffer with
  ``responses:`` lookahead.
* :mod:`~specscout.engine.extractor` -- the scan state machine.
* :mod:`~specscout.engine.formatter` -- section classification and rendering.
"""

from __future__ import annotations

from typing import Optional

from specscout.engine.extractor import EndpointScan, find_endpoints
from specscout.engine.formatter import render_endpoint, render_no_results, render_report
from specscout.engine.matcher import path_matches
from specscout.models import EndpointMatch, EndpointQuery, ScanConfig


def scan(
    document_text: str,
    document_label: str,
    query: EndpointQuery,
    options: Optional[ScanConfig] = None,
) -> str:
    """Find and render the endpoints of a single document.

    Equivalent to :func:`render_report` over :func:`find_endpoints` for one
    document. Multi-document callers should gather matches first and render
    once (see :func:`specscout.search.search_endpoints`).
    """
    options = options or ScanConfig()
    matches = find_endpoints(document_text, document_label, query, options)
    return render_report(query, matches, options.sensitive_marker)


__all__ = [
    "EndpointMatch",
    "EndpointQuery",
    "EndpointScan",
    "find_endpoints",
    "path_matches",
    "render_endpoint",
    "render_no_results",
    "render_report",
    "scan",
]
