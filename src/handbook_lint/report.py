"""Merge findings into a ranked report and render it."""

from __future__ import annotations

from typing import Iterable

from pydantic import TypeAdapter

from handbook_lint.schemas import Finding, LintReport, LintStats, LintSummary, Location, Severity

_TEXT_HEADER = ("LINES", "SEVERITY", "KIND", "MESSAGE")
_REPORT_LIST = TypeAdapter(list[LintReport])


def sort_findings(findings: Iterable[Finding]) -> list[Finding]:
    """Order by severity (error first), then line, then kind and message."""
    return sorted(findings, key=Finding.sort_key)


def summarize(findings: Iterable[Finding]) -> LintSummary:
    """Count findings per severity."""
    summary = LintSummary()
    for finding in findings:
        if finding.severity is Severity.ERROR:
            summary.errors += 1
        elif finding.severity is Severity.WARNING:
            summary.warnings += 1
        else:
            summary.infos += 1
    return summary


def has_blocking_findings(findings: Iterable[Finding]) -> bool:
    """Return True when any finding is an error (non-zero exit status)."""
    return any(finding.severity is Severity.ERROR for finding in findings)


def build_report(
    document_id: str,
    *finding_groups: Iterable[Finding],
    stats: LintStats | None = None,
    sections_tree: str = "",
) -> LintReport:
    """Merge finding groups from every stage into one ordered report."""
    merged = sort_findings(finding for group in finding_groups for finding in group)
    return LintReport(
        document_id=document_id,
        findings=merged,
        summary=summarize(merged),
        stats=stats or LintStats(),
        sections_tree=sections_tree,
    )


def fatal_report(document_id: str, message: str, line: int = 1) -> LintReport:
    """Report for a document that could not be tokenized at all."""
    finding = Finding(
        severity=Severity.ERROR,
        kind="parse-fatal",
        location=Location.line(max(line, 1)),
        message=message,
    )
    return build_report(document_id, [finding])


def format_summary(summary: LintSummary) -> str:
    return f"{summary.errors} error(s), {summary.warnings} warning(s), {summary.infos} info(s)"


def render_text(report: LintReport, *, include_tree: bool = False) -> str:
    """Render a report as a console table."""
    lines = [f"{report.document_id}: {format_summary(report.summary)}"]
    if report.findings:
        rows = [
            (
                _format_lines(finding.location),
                finding.severity.value,
                finding.kind,
                finding.message,
            )
            for finding in report.findings
        ]
        widths = [max(len(row[column]) for row in [_TEXT_HEADER, *rows]) for column in range(3)]
        for row in [_TEXT_HEADER, *rows]:
            cells = [row[column].ljust(widths[column]) for column in range(3)]
            lines.append("  " + "  ".join([*cells, row[3]]).rstrip())
    if include_tree and report.sections_tree:
        lines.append("")
        lines.append(report.sections_tree)
    return "\n".join(lines)


def render_json(reports: LintReport | list[LintReport], *, indent: int | None = 2) -> str:
    """Render one report, or a list of reports, as JSON."""
    if isinstance(reports, LintReport):
        return reports.model_dump_json(indent=indent)
    return _REPORT_LIST.dump_json(reports, indent=indent).decode("utf-8")


def _format_lines(location: Location) -> str:
    if location.start_line == location.end_line:
        return str(location.start_line)
    return f"{location.start_line}-{location.end_line}"
