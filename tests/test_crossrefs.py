"""Tests for the cross-reference checker."""

from __future__ import annotations

from handbook_lint.crossrefs import check_cross_references, extract_anchor_links
from handbook_lint.outline import build_outline
from handbook_lint.schemas import Severity
from handbook_lint.snippets import validate_snippets
from handbook_lint.tokenizer import tokenize

TOC_TITLES = ("table of contents", "contents", "toc")


def check(text: str, **kwargs):
    document = tokenize(text).document
    outline = build_outline(document)
    snippets = validate_snippets(document)
    kwargs.setdefault("toc_titles", TOC_TITLES)
    return check_cross_references(document, outline, snippets, **kwargs)


def kinds(report) -> list[str]:
    return [finding.kind for finding in report.findings]


class TestBrokenAnchors:
    """Tests for internal link resolution."""

    def test_broken_link_scenario(self) -> None:
        report = check("# Intro\n[See Setup](#setup)\n")

        assert kinds(report) == ["broken-anchor"]
        finding = report.findings[0]
        assert finding.severity is Severity.ERROR
        assert finding.message == "#setup not found"
        assert finding.location.start_line == 2

    def test_links_resolve_case_insensitively_and_unquoted(self) -> None:
        report = check("# Hello World\n# Café\n[a](#Hello-World) [b](#caf%C3%A9)\n")
        assert report.findings == []

    def test_link_lines_inside_multiline_paragraph(self) -> None:
        report = check("# A\nfirst line\nsecond [x](#nope)\n")
        assert report.findings[0].location.start_line == 3

    def test_links_in_code_are_ignored(self) -> None:
        text = "# A\nUse `[x](#nope)` literally.\n\n```md\n[y](#nope)\n```\n"
        report = check(text)
        assert report.findings == []
        assert report.links == []

    def test_links_in_lists_tables_and_headings(self) -> None:
        text = "# A\n- [x](#one)\n| [y](#two) |\n## See [z](#three)\n"
        links = extract_anchor_links(tokenize(text).document)
        assert [link.target for link in links] == ["one", "two", "three"]

    def test_bare_hash_link_is_ignored(self) -> None:
        assert check("# A\n[top](#)\n").findings == []

    def test_table_links_report_their_own_row(self) -> None:
        text = "# A\n\n| Name | Link |\n|------|------|\n| one | [a](#a) |\n| two | [x](#nope) |\n"
        report = check(text)

        assert kinds(report) == ["broken-anchor"]
        assert report.findings[0].location.start_line == 6

    def test_list_continuation_links_report_their_own_line(self) -> None:
        report = check("# A\n- see the\n  [guide](#nope) for details\n")
        assert [finding.location.start_line for finding in report.findings] == [3]


class TestDuplicateAnchors:
    """Each duplicated slug yields exactly one error."""

    def test_three_occurrences_one_error(self) -> None:
        report = check("# Setup\n## Setup\n# Setup\n")

        assert kinds(report) == ["duplicate-anchor"]
        finding = report.findings[0]
        assert finding.location.start_line == 2
        assert finding.message == "anchor #setup is defined 3 times (lines 1, 2, 3)"

    def test_slug_collision_from_punctuation(self) -> None:
        report = check("# A\n# A!\n# B\n# B?\n")
        assert kinds(report) == ["duplicate-anchor", "duplicate-anchor"]


class TestChecklists:
    """Tests for checklist item states."""

    def test_checklist_scenario(self) -> None:
        report = check("- [x] done\n- [ ] pending\n- [?] bad\n")

        assert report.checklist_items == 3
        assert kinds(report) == ["malformed-checklist-item"]
        finding = report.findings[0]
        assert finding.severity is Severity.WARNING
        assert finding.location.start_line == 3
        assert "'[?]'" in finding.message

    def test_empty_box_is_malformed(self) -> None:
        assert kinds(check("- [] nothing\n")) == ["malformed-checklist-item"]

    def test_reference_labels_are_not_checklists(self) -> None:
        report = check("# Refs\n\n[1] Martin, Clean Code.\n- [2] Fowler, Refactoring.\n")

        assert report.findings == []
        assert report.checklist_items == 0


class TestTableOfContents:
    """Tests for table-of-contents consistency."""

    def test_consistent_toc(self, handbook_text: str) -> None:
        report = check(handbook_text)
        assert "toc-level-mismatch" not in kinds(report)
        assert "toc-missing-entry" not in kinds(report)
        assert "toc-entry-unresolved" not in kinds(report)

    def test_level_mismatch(self) -> None:
        text = "# Guide\n## Contents\n- [Deep](#deep)\n- [Top](#top)\n## Top\n### Deep\n"
        report = check(text)

        assert kinds(report) == ["toc-level-mismatch"]
        assert report.findings[0].location.start_line == 3
        assert "level-3" in report.findings[0].message

    def test_plain_text_entry_resolves_by_slug(self) -> None:
        text = "# Guide\n## Table of Contents\n- Overview\n- Missing Part\n## Overview\n"
        report = check(text)

        assert kinds(report) == ["toc-entry-unresolved"]
        assert report.findings[0].location.start_line == 4

    def test_numbered_plain_entries(self) -> None:
        text = "## TOC\n1. Alpha\n2. Beta\n## Alpha\n## Beta\n"
        assert check(text).findings == []

    def test_missing_entry(self) -> None:
        text = "# Guide\n## Contents\n- [Alpha](#alpha)\n## Alpha\n## Beta\n"
        report = check(text)

        assert kinds(report) == ["toc-missing-entry"]
        assert report.findings[0].severity is Severity.WARNING
        assert report.findings[0].location.start_line == 5

    def test_nested_entries_are_not_level_checked(self) -> None:
        text = "## Contents\n- [Alpha](#alpha)\n  - [Alpha Detail](#alpha-detail)\n## Alpha\n### Alpha Detail\n"
        assert check(text).findings == []

    def test_broken_toc_link_is_reported_once(self) -> None:
        text = "## Contents\n- [Gone](#gone)\n"
        assert kinds(check(text)) == ["broken-anchor"]

    def test_empty_toc(self) -> None:
        report = check("## Contents\n\nNothing here.\n## A\n")
        assert kinds(report) == ["empty-toc"]

    def test_toc_detection_can_be_disabled(self) -> None:
        text = "# Guide\n## Contents\n- [Alpha](#alpha)\n## Alpha\n## Beta\n"
        assert check(text, toc_titles=()).findings == []


class TestExampleCoverage:
    """Tests for the optional code-example coverage check."""

    def test_leaf_sections_without_examples(self) -> None:
        text = "# Guide\n## With Example\n```python\nx = 1\n```\n## Without Example\n"
        report = check(text, min_examples_per_section=1)

        assert kinds(report) == ["missing-code-example"]
        assert report.findings[0].severity is Severity.INFO
        assert report.findings[0].location.start_line == 6

    def test_disabled_by_default(self) -> None:
        assert check("# Guide\n## Empty\n").findings == []
