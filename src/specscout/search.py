"""Endpoint search across every document in a store.

:func:`search_endpoints` is the multi-document driver around the engine:
it lists the store, fetches each YAML document, runs
:func:`~specscout.engine.find_endpoints` on it and renders one aggregate
report. A document that cannot be fetched is logged and skipped; the
remaining documents still contribute their matches.
"""

from __future__ import annotations

import logging
from typing import Optional

from specscout.engine import find_endpoints, render_report
from specscout.exceptions import DocumentSourceError, InvalidUsageError, NotFoundError
from specscout.models import EndpointMatch, EndpointQuery, ScanConfig
from specscout.sources import DocumentSource

logger = logging.getLogger(__name__)


def build_query(path: object, method: object = None) -> EndpointQuery:
    """Validate raw caller input and build an :class:`EndpointQuery`.

    Args:
        path: Required, non-empty string.
        method: Optional string; any case.

    Raises:
        InvalidUsageError: If *path* is missing, empty or not a string, or
            *method* is not a string.
    """
    if not isinstance(path, str) or not path:
        raise InvalidUsageError("Path parameter is required and must be a string")
    if method is not None and not isinstance(method, str):
        raise InvalidUsageError("Method parameter must be a string")
    return EndpointQuery(path=path, method=method)


def collect_matches(
    source: DocumentSource,
    query: EndpointQuery,
    options: Optional[ScanConfig] = None,
) -> list[EndpointMatch]:
    """Scan every YAML document in *source* and return all matches.

    Documents are scanned one after another in listing order. Each match
    is labelled with its document key, so same-named files in different
    folders stay apart in the report.

    Raises:
        DocumentSourceError: If the store cannot be listed at all.
    """
    matches: list[EndpointMatch] = []
    for info in source.list_documents():
        try:
            document = source.get_document(info.key)
        except (DocumentSourceError, NotFoundError) as exc:
            logger.warning("Failed to read file %s: %s", info.key, exc)
            continue
        found = find_endpoints(document.content, info.key, query, options)
        logger.debug("%s: %d match(es)", info.key, len(found))
        matches.extend(found)
    return matches


def search_endpoints(
    source: DocumentSource,
    query: EndpointQuery,
    options: Optional[ScanConfig] = None,
) -> str:
    """Search *source* for *query* and render the aggregate report.

    Returns:
        The report text; a "no endpoints found" message when nothing
        matched in any document.

    Raises:
        DocumentSourceError: If the store cannot be listed at all.
    """
    options = options or ScanConfig()
    matches = collect_matches(source, query, options)
    logger.debug(
        "Endpoint search for %s%s: %d match(es)",
        query.path, f" {query.method}" if query.method else "", len(matches),
    )
    return render_report(query, matches, options.sensitive_marker)
