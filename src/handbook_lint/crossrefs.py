"""Check internal links, anchors, checklists and the table of contents."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable
from urllib.parse import unquote

from handbook_lint.outline import OutlineResult
from handbook_lint.schemas import (
    CodeFenceBlock,
    Document,
    Finding,
    HeadingBlock,
    ListItemBlock,
    Location,
    ParagraphBlock,
    Section,
    Severity,
    TableBlock,
)
from handbook_lint.sections import find_sections, slugify_heading
from handbook_lint.snippets import SnippetReport

_ANCHOR_LINK_RE = re.compile(r"(?<!\\)!?\[(?P<text>[^\]]*)\]\(\s*#(?P<target>[^)\s]*)(?:\s+\"[^\"]*\")?\s*\)")
_ANY_LINK_RE = re.compile(r"(?<!\\)!?\[[^\]]*\]\([^)]*\)")
_CODE_SPAN_RE = re.compile(r"(`+)(?!`).*?(?<!`)\1(?!`)", re.DOTALL)
_ENTRY_NUMBER_RE = re.compile(r"^(?:\d+[.)]?)+\s*")


@dataclass(frozen=True)
class AnchorLink:
    """An in-document ``[text](#target)`` link."""

    text: str
    target: str
    line: int

    @property
    def normalized(self) -> str:
        return unquote(self.target).lower()


@dataclass
class CrossRefReport:
    """Cross-reference checker output."""

    links: list[AnchorLink] = field(default_factory=list)
    checklist_items: int = 0
    findings: list[Finding] = field(default_factory=list)


def extract_anchor_links(document: Document) -> list[AnchorLink]:
    """Collect ``[text](#anchor)`` links outside code fences and code spans."""
    links: list[AnchorLink] = []
    for block in document.blocks:
        if isinstance(block, HeadingBlock):
            links.extend(_links_in(block.text, block.start_line, multiline=False))
        elif isinstance(block, (ParagraphBlock, ListItemBlock)):
            links.extend(_links_in(block.text, block.start_line, multiline=True))
        elif isinstance(block, TableBlock):
            row_lines = block.row_lines or [block.start_line] * len(block.rows)
            for row, line in zip(block.rows, row_lines):
                links.extend(_links_in(" | ".join(row), line, multiline=False))
    return links


def _links_in(text: str, first_line: int, *, multiline: bool) -> list[AnchorLink]:
    # Blank out code spans while keeping offsets, so line numbers stay exact.
    masked = _CODE_SPAN_RE.sub(lambda match: re.sub(r"[^\n]", " ", match.group(0)), text)
    links = []
    for match in _ANCHOR_LINK_RE.finditer(masked):
        line = first_line + (masked.count("\n", 0, match.start()) if multiline else 0)
        links.append(AnchorLink(text=match.group("text").strip(), target=match.group("target"), line=line))
    return links


def check_cross_references(
    document: Document,
    outline: OutlineResult,
    snippets: SnippetReport,
    *,
    toc_titles: Iterable[str] = (),
    min_examples_per_section: int = 0,
) -> CrossRefReport:
    """Validate references between the outline, links, checklists and snippets."""
    report = CrossRefReport()
    report.findings.extend(_duplicate_anchor_findings(outline))

    report.links = extract_anchor_links(document)
    for link in report.links:
        if not link.target:
            continue
        if link.normalized not in outline.anchors:
            report.findings.append(
                Finding(
                    severity=Severity.ERROR,
                    kind="broken-anchor",
                    location=Location.line(link.line),
                    message=f"#{link.target} not found",
                )
            )

    for block in document.blocks:
        if not isinstance(block, ListItemBlock) or not block.checklist:
            continue
        report.checklist_items += 1
        if block.indeterminate:
            report.findings.append(
                Finding(
                    severity=Severity.WARNING,
                    kind="malformed-checklist-item",
                    location=block.location,
                    message=f"checklist marker '[{block.box}]' is neither '[ ]' nor '[x]'",
                )
            )

    toc_sections = find_sections(outline.root.children, toc_titles)
    for toc in toc_sections:
        report.findings.extend(_check_toc(toc, outline))

    if min_examples_per_section > 0:
        skip = {id(section) for section in toc_sections}
        report.findings.extend(_example_coverage(outline, snippets, min_examples_per_section, skip))

    return report


def _duplicate_anchor_findings(outline: OutlineResult) -> list[Finding]:
    findings = []
    for slug, sections in outline.anchors.items():
        if len(sections) < 2:
            continue
        lines = ", ".join(str(section.line) for section in sections)
        findings.append(
            Finding(
                severity=Severity.ERROR,
                kind="duplicate-anchor",
                location=sections[1].heading.location,
                message=f"anchor #{slug} is defined {len(sections)} times (lines {lines})",
            )
        )
    return findings


def _check_toc(toc: Section, outline: OutlineResult) -> list[Finding]:
    entries = [block for block in toc.blocks if isinstance(block, ListItemBlock)]
    if not entries:
        return [
            Finding(
                severity=Severity.WARNING,
                kind="empty-toc",
                location=toc.heading.location,
                message=f"'{toc.title}' section lists no entries",
            )
        ]

    findings: list[Finding] = []
    expected_level = toc.level
    top_indent = min(entry.indent for entry in entries)
    referenced: set[str] = set()

    for entry in entries:
        if entry.indent != top_indent:
            continue
        text = " ".join(entry.text.split())
        links = _links_in(text, entry.start_line, multiline=False)
        if links:
            target = links[0].normalized
            section = outline.resolve(target)
            # Unresolvable link targets are reported as broken anchors.
            if section is None:
                continue
        elif _ANY_LINK_RE.search(text):
            continue
        else:
            target = slugify_heading(_ENTRY_NUMBER_RE.sub("", text))
            section = outline.resolve(target)
            if section is None:
                findings.append(
                    Finding(
                        severity=Severity.ERROR,
                        kind="toc-entry-unresolved",
                        location=entry.location,
                        message=f"table of contents entry '{text}' does not match any section",
                    )
                )
                continue

        referenced.add(target)
        if section.level != expected_level:
            findings.append(
                Finding(
                    severity=Severity.ERROR,
                    kind="toc-level-mismatch",
                    location=entry.location,
                    message=(
                        f"table of contents entry '#{target}' points to a level-{section.level} "
                        f"section; expected level {expected_level}"
                    ),
                )
            )

    parent = _parent_of(outline.root, toc)
    siblings = parent.children if parent is not None else []
    position = next((index for index, sibling in enumerate(siblings) if sibling is toc), len(siblings))
    for sibling in siblings[position + 1 :]:
        if sibling.level != expected_level or not sibling.anchor or sibling.anchor in referenced:
            continue
        findings.append(
            Finding(
                severity=Severity.WARNING,
                kind="toc-missing-entry",
                location=sibling.heading.location,
                message=f"section '{sibling.title}' is not listed in the table of contents",
            )
        )
    return findings


def _parent_of(root: Section, target: Section) -> Section | None:
    for node in [root, *root.walk()]:
        if any(child is target for child in node.children):
            return node
    return None


def _example_coverage(
    outline: OutlineResult,
    snippets: SnippetReport,
    minimum: int,
    skip: set[int],
) -> list[Finding]:
    snippet_lines = {record.start_line for record in snippets.records}
    findings = []
    for section in outline.iter_sections():
        if section.children or id(section) in skip or section.heading is None:
            continue
        count = sum(
            1
            for block in section.blocks
            if isinstance(block, CodeFenceBlock) and block.start_line in snippet_lines
        )
        if count < minimum:
            findings.append(
                Finding(
                    severity=Severity.INFO,
                    kind="missing-code-example",
                    location=section.heading.location,
                    message=f"section '{section.title}' has {count} code example(s); expected at least {minimum}",
                )
            )
    return findings
