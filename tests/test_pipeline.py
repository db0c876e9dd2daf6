"""Tests for the lint pipeline."""

from __future__ import annotations

import pytest

from handbook_lint.pipeline import LintOptions, SourceDocument, lint_document, lint_documents, lint_text
from handbook_lint.schemas import Severity
from handbook_lint.snippets import default_registry


def kinds(report) -> list[str]:
    return [finding.kind for finding in report.findings]


class TestLintText:
    """End-to-end tests of the synchronous pipeline."""

    def test_handbook_report(self, handbook_text: str) -> None:
        report = lint_text("handbook.md", handbook_text)

        assert report.document_id == "handbook.md"
        assert kinds(report) == ["broken-anchor", "unlabeled-snippet"]
        assert report.findings[0].message == "#ci-cd not found"
        assert report.findings[0].location.start_line == 32
        assert (report.summary.errors, report.summary.warnings, report.summary.infos) == (1, 0, 1)
        assert report.stats.sections == 6
        assert report.stats.snippets == 2
        assert report.stats.links == 5
        assert report.stats.checklist_items == 2
        assert report.sections_tree.startswith("Sections:\nEngineering Handbook (#engineering-handbook)")

    def test_idempotent(self, handbook_text: str) -> None:
        first = lint_text("handbook.md", handbook_text + "\n# A\n### B\n- [?] x\n")
        second = lint_text("handbook.md", handbook_text + "\n# A\n### B\n- [?] x\n")
        assert first.model_dump_json() == second.model_dump_json()

    def test_heading_skip_scenario(self) -> None:
        report = lint_text("doc", "# A\n### B\n")
        assert kinds(report) == ["heading-level-skip"]
        assert report.findings[0].location.start_line == 2

    def test_unterminated_fence_scenario(self) -> None:
        report = lint_text("doc", "# Title\n\n```python\nprint(\n")

        assert kinds(report) == ["unterminated-fence"]
        assert report.stats.snippets == 0

    def test_recoverable_errors_do_not_stop_later_stages(self) -> None:
        report = lint_text("doc", "# A\n# A\n[x](#b)\n```python\n(\n```\n")
        assert kinds(report) == ["duplicate-anchor", "broken-anchor", "unbalanced-brackets"]

    def test_parse_fatal_short_circuits(self) -> None:
        report = lint_text("bad.md", b"# ok\n\xff\n")

        assert kinds(report) == ["parse-fatal"]
        assert report.findings[0].severity is Severity.ERROR
        assert report.findings[0].location.start_line == 2
        assert report.stats.blocks == 0

    def test_options_flow_through(self) -> None:
        options = LintOptions(max_heading_skip=2, min_examples_per_section=1, include_tree=False)
        report = lint_text("doc", "# A\n### B\n", options)

        assert kinds(report) == ["missing-code-example"]
        assert report.sections_tree == ""

    def test_heading_skip_severity_option(self) -> None:
        report = lint_text("doc", "# A\n### B\n", LintOptions(heading_skip_severity="error"))
        assert report.findings[0].severity is Severity.ERROR

    def test_invalid_options(self) -> None:
        with pytest.raises(ValueError):
            LintOptions(max_heading_skip=0)
        with pytest.raises(ValueError):
            LintOptions(heading_skip_severity="fatal")

    def test_custom_registry(self) -> None:
        registry = default_registry()
        registry.unregister("python")
        report = lint_text("doc", "```python\n(\n```\n", LintOptions(registry=registry))
        assert kinds(report) == ["unlabeled-snippet"]


class TestAsyncPipeline:
    """Tests for the concurrent pipeline."""

    @pytest.mark.asyncio
    async def test_lint_document_matches_sync(self, handbook_text: str) -> None:
        report = await lint_document("handbook.md", handbook_text)
        assert report == lint_text("handbook.md", handbook_text)

    @pytest.mark.asyncio
    async def test_documents_are_isolated_and_ordered(self) -> None:
        sources = [
            SourceDocument(id="good.md", content="# A\n"),
            ("bad.md", b"\xff"),
            ("other.md", "# B\n[x](#nope)\n"),
        ]

        reports = await lint_documents(sources, max_concurrency=2)

        assert [report.document_id for report in reports] == ["good.md", "bad.md", "other.md"]
        assert reports[0].findings == []
        assert kinds(reports[1]) == ["parse-fatal"]
        assert kinds(reports[2]) == ["broken-anchor"]

    @pytest.mark.asyncio
    async def test_failing_checker_does_not_sink_the_batch(self) -> None:
        def explode(body: str) -> list:
            raise RuntimeError("boom")

        registry = default_registry()
        registry.register("toml", explode)
        sources = [("good.md", "# A\n"), ("bad.md", "# B\n```toml\nx = 1\n```\n")]

        reports = await lint_documents(sources, LintOptions(registry=registry))

        assert [report.document_id for report in reports] == ["good.md", "bad.md"]
        assert reports[0].findings == []
        assert kinds(reports[1]) == ["checker-failed"]

    @pytest.mark.asyncio
    async def test_empty_input(self) -> None:
        assert await lint_documents([]) == []
