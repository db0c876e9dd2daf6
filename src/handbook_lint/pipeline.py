"""Lint pipeline: Parse -> Outline -> Validate (snippets, cross-refs) -> Report."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field, replace
from typing import Iterable

from handbook_lint.config import (
    HANDBOOK_LINT_HEADING_SKIP_SEVERITY,
    HANDBOOK_LINT_MAX_CONCURRENCY,
    HANDBOOK_LINT_MAX_HEADING_SKIP,
    HANDBOOK_LINT_MIN_EXAMPLES,
    HANDBOOK_LINT_TOC_TITLES,
)
from handbook_lint.crossrefs import check_cross_references
from handbook_lint.exceptions import ParseFatalError
from handbook_lint.outline import OutlineResult, build_outline, count_sections
from handbook_lint.report import build_report, fatal_report
from handbook_lint.schemas import Document, LintReport, LintStats, Severity
from handbook_lint.snippets import CheckerRegistry, SnippetReport, default_registry, validate_snippets
from handbook_lint.tokenizer import TokenizeResult, decode_source, tokenize
from handbook_lint.utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class LintOptions:
    """Options for a lint run.

    Attributes:
        max_heading_skip: Largest tolerated jump between a heading and its
            parent heading; larger jumps are reported.
        heading_skip_severity: Severity used for heading-level skips.
        toc_titles: Heading titles that mark a table of contents section.
        min_examples_per_section: When positive, leaf sections with fewer
            code fences get a ``missing-code-example`` finding.
        registry: Snippet checker registry. Uses the built-in checkers if None.
        include_tree: If True, the report carries a rendered section tree.
    """

    max_heading_skip: int = HANDBOOK_LINT_MAX_HEADING_SKIP
    heading_skip_severity: str = HANDBOOK_LINT_HEADING_SKIP_SEVERITY
    toc_titles: list[str] = field(default_factory=lambda: list(HANDBOOK_LINT_TOC_TITLES))
    min_examples_per_section: int = HANDBOOK_LINT_MIN_EXAMPLES
    registry: CheckerRegistry | None = None
    include_tree: bool = True

    def __post_init__(self) -> None:
        if self.max_heading_skip < 1:
            raise ValueError("max_heading_skip must be at least 1")
        Severity(self.heading_skip_severity)

    @property
    def skip_severity(self) -> Severity:
        return Severity(self.heading_skip_severity)


@dataclass(frozen=True)
class SourceDocument:
    """An input buffer handed to the pipeline by a loader."""

    id: str
    content: str | bytes


def lint_text(document_id: str, source: str | bytes, options: LintOptions | None = None) -> LintReport:
    """Lint a single document in one synchronous forward pass."""
    opts = options or LintOptions()
    try:
        parsed = _parse(document_id, source)
    except ParseFatalError as exc:
        return _fatal(document_id, exc)

    outline = _build_outline(parsed.document, opts)
    snippets = validate_snippets(parsed.document, _registry(opts))
    return _finish(parsed, outline, snippets, opts)


async def lint_document(document_id: str, source: str | bytes, options: LintOptions | None = None) -> LintReport:
    """Lint a single document, building the outline and checking snippets concurrently."""
    opts = options or LintOptions()
    try:
        parsed = _parse(document_id, source)
    except ParseFatalError as exc:
        return _fatal(document_id, exc)

    outline, snippets = await asyncio.gather(
        asyncio.to_thread(_build_outline, parsed.document, opts),
        asyncio.to_thread(validate_snippets, parsed.document, _registry(opts)),
    )
    return _finish(parsed, outline, snippets, opts)


async def lint_documents(
    sources: Iterable[SourceDocument | tuple[str, str | bytes]],
    options: LintOptions | None = None,
    *,
    max_concurrency: int = HANDBOOK_LINT_MAX_CONCURRENCY,
) -> list[LintReport]:
    """Lint many documents concurrently; reports come back in input order.

    Each document runs its own pipeline; a fatal parse in one document only
    yields a fatal report for that document.
    """
    opts = options or LintOptions()
    if opts.registry is None:
        opts = replace(opts, registry=default_registry())
    documents = [source if isinstance(source, SourceDocument) else SourceDocument(*source) for source in sources]
    semaphore = asyncio.Semaphore(max(1, max_concurrency))

    async def run(document: SourceDocument) -> LintReport:
        async with semaphore:
            return await lint_document(document.id, document.content, opts)

    reports = await asyncio.gather(*(run(document) for document in documents))
    return list(reports)


def _parse(document_id: str, source: str | bytes) -> TokenizeResult:
    text = decode_source(source)
    parsed = tokenize(text, document_id=document_id)
    logger.debug(
        "Tokenized document",
        extra={"document_id": document_id, "blocks": len(parsed.document.blocks), "lines": parsed.document.line_count},
    )
    return parsed


def _registry(opts: LintOptions) -> CheckerRegistry:
    return opts.registry if opts.registry is not None else default_registry()


def _build_outline(document: Document, opts: LintOptions) -> OutlineResult:
    return build_outline(document, max_heading_skip=opts.max_heading_skip, skip_severity=opts.skip_severity)


def _finish(parsed: TokenizeResult, outline: OutlineResult, snippets: SnippetReport, opts: LintOptions) -> LintReport:
    document = parsed.document
    crossrefs = check_cross_references(
        document,
        outline,
        snippets,
        toc_titles=opts.toc_titles,
        min_examples_per_section=opts.min_examples_per_section,
    )
    stats = LintStats(
        blocks=len(document.blocks),
        sections=count_sections(outline.root.children),
        snippets=len(snippets.records),
        links=len(crossrefs.links),
        checklist_items=crossrefs.checklist_items,
    )
    report = build_report(
        document.id,
        parsed.findings,
        outline.findings,
        snippets.findings,
        crossrefs.findings,
        stats=stats,
        sections_tree=outline.render_tree() if opts.include_tree else "",
    )
    logger.info(
        "Linted document",
        extra={
            "document_id": document.id,
            "errors": report.summary.errors,
            "warnings": report.summary.warnings,
            "infos": report.summary.infos,
        },
    )
    return report


def _fatal(document_id: str, exc: ParseFatalError) -> LintReport:
    logger.warning("Document could not be parsed", extra={"document_id": document_id, "error": str(exc)})
    return fatal_report(document_id, str(exc), exc.line)
