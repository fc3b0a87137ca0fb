"""Render endpoint matches as human-readable text.

Each :class:`~specscout.models.EndpointMatch` becomes a block headed by
``<METHOD> <path>`` with up to five sections -- Summary, Description,
Parameters, Request Body and Responses -- always in that order. The
aggregate report adds a count header and groups blocks by document.

The text is meant for display (chat clients, terminals); it has no schema
of its own.
"""

from __future__ import annotations

import enum
from typing import Iterable, Sequence

from specscout.engine.collector import DEFAULT_SENSITIVE_MARKER, RESPONSES_MARKER
from specscout.models import EndpointMatch, EndpointQuery

NO_DETAILS = "   No detailed information found.\n"
SEARCH_TIP = "Tip: Try searching with a partial path like '/cards' or '/users'"
SENSITIVE_FLAG = "\U0001f534"  # red circle


class Section(str, enum.Enum):
    """Report sections in display order."""

    SUMMARY = "Summary"
    DESCRIPTION = "Description"
    PARAMETERS = "Parameters"
    REQUEST_BODY = "Request Body"
    RESPONSES = "Responses"

    @property
    def icon(self) -> str:
        return _SECTION_ICONS[self]


_SECTION_ICONS = {
    Section.SUMMARY: "\U0001f4dd",
    Section.DESCRIPTION: "\U0001f4d6",
    Section.PARAMETERS: "\U0001f527",
    Section.REQUEST_BODY: "\U0001f4e4",
    Section.RESPONSES: "\U0001f4e5",
}


def classify_lines(lines: Iterable[str]) -> dict[Section, list[str]]:
    """Split collected lines into sections, preserving document order.

    Once a ``responses:`` line is seen every later line belongs to
    Responses. Before that, ``summary:`` and ``description:`` lines are
    filed under their own section, ``parameters:`` and ``requestBody:``
    lines open their section, and any other line joins whichever of those
    two is open. Lines seen before any section is open are left out.
    """
    sections: dict[Section, list[str]] = {section: [] for section in Section}
    in_responses = False
    current: Section | None = None

    for line in lines:
        trimmed = line.strip()
        if in_responses:
            sections[Section.RESPONSES].append(line)
            continue
        if RESPONSES_MARKER in trimmed:
            in_responses = True
            sections[Section.RESPONSES].append(line)
        elif "summary:" in trimmed:
            sections[Section.SUMMARY].append(line)
        elif "description:" in trimmed:
            sections[Section.DESCRIPTION].append(line)
        elif "parameters:" in trimmed:
            current = Section.PARAMETERS
            sections[current].append(line)
        elif "requestBody:" in trimmed:
            current = Section.REQUEST_BODY
            sections[current].append(line)
        elif current is not None:
            sections[current].append(line)

    return sections


def render_endpoint(
    match: EndpointMatch, sensitive_marker: str = DEFAULT_SENSITIVE_MARKER
) -> str:
    """Render one match as a header plus its non-empty sections."""
    out = [f"\U0001f50d **{match.method} {match.path}**\n"]

    if not match.lines:
        out.append(NO_DETAILS)
        return "".join(out)

    marker = sensitive_marker.lower()
    for section, lines in classify_lines(match.lines).items():
        if not lines:
            continue
        out.append(f"   {section.icon} {section.value}:\n")
        for line in lines:
            if section is Section.RESPONSES and marker and marker in line.lower():
                out.append(f"   {SENSITIVE_FLAG} {line}\n")
            else:
                out.append(f"   {line}\n")

    return "".join(out)


def _query_suffix(query: EndpointQuery) -> str:
    return f" with method {query.method}" if query.method else ""


def render_no_results(query: EndpointQuery) -> str:
    """The report returned when no document had a matching endpoint."""
    return (
        f"\u274c No endpoints found matching path '{query.path}'{_query_suffix(query)}"
        f"\n\n{SEARCH_TIP}"
    )


def render_report(
    query: EndpointQuery,
    matches: Sequence[EndpointMatch],
    sensitive_marker: str = DEFAULT_SENSITIVE_MARKER,
) -> str:
    """Render the aggregate report for *matches* gathered across documents.

    Matches are grouped under the document they came from, in order of
    first appearance.
    """
    if not matches:
        return render_no_results(query)

    grouped: dict[str, list[EndpointMatch]] = {}
    for match in matches:
        grouped.setdefault(match.document, []).append(match)

    out = [
        f"\U0001f3af Found {len(matches)} endpoint(s) matching path "
        f"'{query.path}'{_query_suffix(query)}:\n\n"
    ]
    for document, doc_matches in grouped.items():
        body = "".join(render_endpoint(m, sensitive_marker) for m in doc_matches)
        out.append(f"\U0001f4c4 **Found in {document}**:\n{body}\n\n")
    return "".join(out)
