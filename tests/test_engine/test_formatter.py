"""Tests for specscout.engine.formatter and the engine's scan() entry point."""

from __future__ import annotations

from specscout.engine import scan
from specscout.engine.formatter import (
    NO_DETAILS,
    Section,
    classify_lines,
    render_endpoint,
    render_no_results,
    render_report,
)
from specscout.models import EndpointMatch, EndpointQuery


def _match(method: str = "GET", path: str = "/users", lines=(), document: str = "a.yaml"):
    return EndpointMatch(method=method, path=path, lines=tuple(lines), document=document)


# ---------------------------------------------------------------------------
# Section classification
# ---------------------------------------------------------------------------


class TestClassifyLines:
    def test_sections_by_marker(self) -> None:
        sections = classify_lines(
            [
                "  summary: S",
                "  description: D",
                "  parameters:",
                "    schema:",
                "  requestBody:",
                "    $ref: '#/x'",
                "  responses:",
                "    '200':",
            ]
        )
        assert sections[Section.SUMMARY] == ["  summary: S"]
        assert sections[Section.DESCRIPTION] == ["  description: D"]
        assert sections[Section.PARAMETERS] == ["  parameters:", "    schema:"]
        assert sections[Section.REQUEST_BODY] == ["  requestBody:", "    $ref: '#/x'"]
        assert sections[Section.RESPONSES] == ["  responses:", "    '200':"]

    def test_responses_is_sticky(self) -> None:
        sections = classify_lines(
            ["  responses:", "    description: OK", "    summary: nested", "  parameters:"]
        )
        assert sections[Section.RESPONSES] == [
            "  responses:",
            "    description: OK",
            "    summary: nested",
            "  parameters:",
        ]
        assert sections[Section.SUMMARY] == []
        assert sections[Section.PARAMETERS] == []

    def test_unsectioned_lines_are_dropped(self) -> None:
        sections = classify_lines(["  type: string", "  summary: S"])
        assert sections[Section.SUMMARY] == ["  summary: S"]
        assert sum(len(v) for v in sections.values()) == 1

    def test_description_inside_parameters_goes_to_description(self) -> None:
        sections = classify_lines(["  parameters:", "    description: the id", "    schema:"])
        assert sections[Section.DESCRIPTION] == ["    description: the id"]
        assert sections[Section.PARAMETERS] == ["  parameters:", "    schema:"]


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


class TestRenderEndpoint:
    def test_header_and_sections_in_order(self) -> None:
        text = render_endpoint(
            _match(lines=["  responses:", "  summary: S", "  parameters:"])
        )
        assert text.startswith("\U0001f50d **GET /users**\n")
        # summary arrives after responses: and is therefore a response line
        assert "Summary:" not in text
        assert text.index("Responses:") > 0

    def test_section_order_is_fixed(self) -> None:
        text = render_endpoint(
            _match(lines=["  requestBody:", "  parameters:", "  description: D", "  summary: S"])
        )
        positions = [
            text.index(name)
            for name in ("Summary:", "Description:", "Parameters:", "Request Body:")
        ]
        assert positions == sorted(positions)

    def test_empty_sections_are_omitted(self) -> None:
        text = render_endpoint(_match(lines=["  summary: S"]))
        assert text == "\U0001f50d **GET /users**\n   \U0001f4dd Summary:\n     summary: S\n"

    def test_no_details(self) -> None:
        assert render_endpoint(_match()) == "\U0001f50d **GET /users**\n" + NO_DETAILS

    def test_sensitive_lines_flagged_in_responses(self) -> None:
        text = render_endpoint(
            _match(lines=["  responses:", "    Blocked_Reason:", "    status:"])
        )
        assert "   \U0001f534     Blocked_Reason:\n" in text
        assert "       status:\n" in text
        assert text.count("\U0001f534") == 1

    def test_sensitive_marker_outside_responses_not_flagged(self) -> None:
        text = render_endpoint(_match(lines=["  parameters:", "    blocked_reason:"]))
        assert "\U0001f534" not in text

    def test_custom_sensitive_marker(self) -> None:
        text = render_endpoint(_match(lines=["  responses:", "    pan:"]), "PAN")
        assert "\U0001f534" in text


class TestRenderReport:
    def test_users_scenario(self, users_yaml: str) -> None:
        text = scan(users_yaml, "users.yaml", EndpointQuery(path="/users"))
        assert text == (
            "\U0001f3af Found 1 endpoint(s) matching path '/users':\n\n"
            "\U0001f4c4 **Found in users.yaml**:\n"
            "\U0001f50d **GET /users**\n"
            "   \U0001f4dd Summary:\n"
            "         summary: List users\n"
            "   \U0001f4e5 Responses:\n"
            "         responses:\n"
            "           '200':\n"
            "             description: OK\n"
            "\n\n"
        )

    def test_missing_scenario(self, users_yaml: str) -> None:
        query = EndpointQuery(path="/missing")
        assert scan(users_yaml, "users.yaml", query) == render_no_results(query)
        assert render_no_results(query) == (
            "❌ No endpoints found matching path '/missing'\n\n"
            "Tip: Try searching with a partial path like '/cards' or '/users'"
        )

    def test_method_suffix(self) -> None:
        query = EndpointQuery(path="/x", method="delete")
        assert "with method DELETE" in render_no_results(query)
        text = render_report(query, [_match(method="DELETE", path="/x")])
        assert "matching path '/x' with method DELETE:" in text

    def test_grouped_by_document(self) -> None:
        matches = [
            _match(path="/a", document="one.yaml"),
            _match(path="/b", document="two.yaml"),
            _match(path="/c", document="one.yaml"),
        ]
        text = render_report(EndpointQuery(path="/"), matches)
        assert "Found 3 endpoint(s)" in text
        assert text.count("Found in one.yaml") == 1
        assert text.index("/c**") < text.index("Found in two.yaml")

    def test_byte_identical_across_scans(self, cards_yaml: str) -> None:
        query = EndpointQuery(path="/cards")
        assert scan(cards_yaml, "cards.yaml", query) == scan(cards_yaml, "cards.yaml", query)

    def test_no_paths_section(self) -> None:
        query = EndpointQuery(path="/users")
        assert scan("openapi: 3.0.0\n", "x.yaml", query) == render_no_results(query)

    def test_cards_report_flags_blocked_reason(self, cards_yaml: str) -> None:
        text = scan(cards_yaml, "cards.yaml", EndpointQuery(path="/cards/{card_id}", method="GET"))
        flagged = [line for line in text.splitlines() if "blocked_reason" in line]
        assert flagged and all(line.startswith("   \U0001f534 ") for line in flagged)
