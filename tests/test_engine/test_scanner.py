"""Tests for specscout.engine.scanner -- root marker, indentation, blank lines."""

from __future__ import annotations

from specscout.engine.scanner import LineRecord, measure_indent, scan_lines


class TestMeasureIndent:
    def test_counts_leading_spaces(self) -> None:
        assert measure_indent("    get:") == 4

    def test_no_indent(self) -> None:
        assert measure_indent("paths:") == 0

    def test_tabs_are_not_counted(self) -> None:
        assert measure_indent("\tget:") == 0


class TestLineRecord:
    def test_bare_key(self) -> None:
        assert LineRecord(4, "get:", "    get:").is_bare_key

    def test_quoted_status_code_is_bare_key(self) -> None:
        assert LineRecord(8, "'200':", "        '200':").is_bare_key

    def test_key_with_value_is_not_bare(self) -> None:
        record = LineRecord(6, "summary: List users", "      summary: List users")
        assert not record.is_bare_key

    def test_comment_is_never_a_bare_key(self) -> None:
        record = LineRecord(0, "#cards:", "#cards:")
        assert record.is_comment
        assert not record.is_bare_key

    def test_key_strips_trailing_colon(self) -> None:
        assert LineRecord(2, "/users:", "  /users:").key == "/users"

    def test_key_without_colon(self) -> None:
        assert LineRecord(10, "- name: id", "          - name: id").key == "- name: id"


class TestScanLines:
    def test_skips_everything_before_paths(self) -> None:
        text = "openapi: 3.0.0\ninfo:\n  title: x\npaths:\n  /a:\n"
        records = list(scan_lines(text))
        assert [r.trimmed for r in records] == ["/a:"]

    def test_no_paths_marker_yields_nothing(self) -> None:
        text = "openapi: 3.0.0\ninfo:\n  title: x\n  /users:\n    get:\n"
        assert list(scan_lines(text)) == []

    def test_marker_must_trim_to_exactly_paths(self) -> None:
        text = "x-paths:\n  /a:\npaths: {}\n  /b:\n"
        assert list(scan_lines(text)) == []

    def test_indented_marker_is_accepted(self) -> None:
        text = "  paths:  \n    /a:\n"
        records = list(scan_lines(text))
        assert records == [LineRecord(4, "/a:", "    /a:")]

    def test_blank_lines_are_dropped(self) -> None:
        text = "paths:\n\n  /a:\n   \n    get:\n"
        records = list(scan_lines(text))
        assert [r.trimmed for r in records] == ["/a:", "get:"]

    def test_raw_keeps_original_line(self) -> None:
        text = "paths:\n  /a:   \n"
        (record,) = scan_lines(text)
        assert record.raw == "  /a:   "
        assert record.trimmed == "/a:"
        assert record.indent == 2

    def test_crlf_line_endings(self) -> None:
        text = "paths:\r\n  /a:\r\n    get:\r\n"
        records = list(scan_lines(text))
        assert [(r.indent, r.raw) for r in records] == [(2, "  /a:"), (4, "    get:")]

    def test_each_call_is_independent(self) -> None:
        text = "paths:\n  /a:\n    get:\n"
        assert list(scan_lines(text)) == list(scan_lines(text))
