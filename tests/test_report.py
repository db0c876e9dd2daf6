"""Tests for report generation and rendering."""

from __future__ import annotations

import json

from handbook_lint.report import (
    build_report,
    fatal_report,
    has_blocking_findings,
    render_json,
    render_text,
    sort_findings,
    summarize,
)
from handbook_lint.schemas import Finding, Location, Severity


def make(severity: Severity, line: int, kind: str = "k", message: str = "m") -> Finding:
    return Finding(severity=severity, kind=kind, location=Location.line(line), message=message)


class TestOrdering:
    """Findings are ordered by severity, then line."""

    def test_severity_then_line(self) -> None:
        findings = [
            make(Severity.INFO, 1),
            make(Severity.WARNING, 9),
            make(Severity.ERROR, 5),
            make(Severity.WARNING, 2),
            make(Severity.ERROR, 3),
        ]

        ordered = sort_findings(findings)

        assert [(f.severity.value, f.location.start_line) for f in ordered] == [
            ("error", 3),
            ("error", 5),
            ("warning", 2),
            ("warning", 9),
            ("info", 1),
        ]

    def test_ties_break_on_kind_and_message(self) -> None:
        findings = [make(Severity.ERROR, 1, "b", "x"), make(Severity.ERROR, 1, "a", "y"), make(Severity.ERROR, 1, "a", "x")]
        assert [(f.kind, f.message) for f in sort_findings(findings)] == [("a", "x"), ("a", "y"), ("b", "x")]

    def test_input_order_does_not_matter(self) -> None:
        findings = [make(Severity.INFO, 4), make(Severity.ERROR, 2), make(Severity.WARNING, 1)]
        assert sort_findings(findings) == sort_findings(reversed(findings))


class TestSummary:
    """Tests for severity counts and the exit-status policy."""

    def test_counts(self) -> None:
        summary = summarize([make(Severity.ERROR, 1), make(Severity.INFO, 2), make(Severity.INFO, 3)])
        assert (summary.errors, summary.warnings, summary.infos) == (1, 0, 2)

    def test_blocking_only_on_errors(self) -> None:
        assert has_blocking_findings([make(Severity.WARNING, 1), make(Severity.ERROR, 2)])
        assert not has_blocking_findings([make(Severity.WARNING, 1), make(Severity.INFO, 2)])
        assert not has_blocking_findings([])

    def test_build_report_merges_groups(self) -> None:
        report = build_report("doc.md", [make(Severity.INFO, 1)], [make(Severity.ERROR, 7)])
        assert [f.severity for f in report.findings] == [Severity.ERROR, Severity.INFO]
        assert report.summary.errors == 1

    def test_fatal_report(self) -> None:
        report = fatal_report("bad.md", "input is not valid UTF-8", line=4)
        assert [f.kind for f in report.findings] == ["parse-fatal"]
        assert report.findings[0].location.start_line == 4
        assert has_blocking_findings(report.findings)


class TestRendering:
    """Tests for text and JSON rendering."""

    def test_render_text_table(self) -> None:
        finding = Finding(
            severity=Severity.ERROR,
            kind="broken-anchor",
            location=Location(start_line=3, end_line=4),
            message="#x not found",
        )
        text = render_text(build_report("doc.md", [finding]))

        lines = text.splitlines()
        assert lines[0] == "doc.md: 1 error(s), 0 warning(s), 0 info(s)"
        assert lines[1].split() == ["LINES", "SEVERITY", "KIND", "MESSAGE"]
        assert lines[2].split()[:3] == ["3-4", "error", "broken-anchor"]
        assert lines[2].endswith("#x not found")

    def test_render_text_with_tree(self) -> None:
        report = build_report("doc.md", [], sections_tree="Sections:\nA (#a)")
        assert render_text(report, include_tree=True).endswith("Sections:\nA (#a)")
        assert "Sections" not in render_text(report)

    def test_render_json_single_and_list(self) -> None:
        report = build_report("doc.md", [make(Severity.WARNING, 2, "heading-level-skip")])

        single = json.loads(render_json(report))
        assert single["document_id"] == "doc.md"
        assert single["findings"][0]["severity"] == "warning"
        assert single["findings"][0]["location"] == {"start_line": 2, "end_line": 2}
        assert single["summary"] == {"errors": 0, "warnings": 1, "infos": 0}

        many = json.loads(render_json([report, report], indent=None))
        assert [item["document_id"] for item in many] == ["doc.md", "doc.md"]
