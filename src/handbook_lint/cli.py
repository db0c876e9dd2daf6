"""Command-line entry point for linting Markdown handbooks."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from handbook_lint.config import (
    HANDBOOK_LINT_HEADING_SKIP_SEVERITY,
    HANDBOOK_LINT_LOG_LEVEL,
    HANDBOOK_LINT_MAX_CONCURRENCY,
    HANDBOOK_LINT_MAX_HEADING_SKIP,
    HANDBOOK_LINT_MIN_EXAMPLES,
    HANDBOOK_LINT_TOC_TITLES,
)
from handbook_lint.exceptions import LoaderError
from handbook_lint.loader import load_sources
from handbook_lint.pipeline import LintOptions, lint_documents
from handbook_lint.report import format_summary, has_blocking_findings, render_json, render_text, summarize
from handbook_lint.utils.logging_config import configure_logging, get_logger

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="handbook-lint",
        description="Check the structure, snippets and cross-references of Markdown handbooks.",
    )
    parser.add_argument("paths", nargs="+", type=Path, help="Markdown files or directories to lint")
    parser.add_argument("--format", choices=("text", "json"), default="text", help="Output format")
    parser.add_argument(
        "--max-heading-skip",
        type=int,
        default=HANDBOOK_LINT_MAX_HEADING_SKIP,
        help="Largest tolerated heading-level jump (default: %(default)s)",
    )
    parser.add_argument(
        "--heading-skip-severity",
        choices=("error", "warning", "info"),
        default=HANDBOOK_LINT_HEADING_SKIP_SEVERITY,
        help="Severity of heading-level skips (default: %(default)s)",
    )
    parser.add_argument(
        "--toc-title",
        action="append",
        dest="toc_titles",
        help="Heading title that marks a table of contents (repeatable)",
    )
    parser.add_argument(
        "--min-examples",
        type=int,
        default=HANDBOOK_LINT_MIN_EXAMPLES,
        help="Minimum code examples per leaf section; 0 disables the check",
    )
    parser.add_argument(
        "--max-concurrency",
        type=int,
        default=HANDBOOK_LINT_MAX_CONCURRENCY,
        help="Documents linted concurrently (default: %(default)s)",
    )
    parser.add_argument("--tree", action="store_true", help="Print the section tree after each text report")
    parser.add_argument("--log-level", default=HANDBOOK_LINT_LOG_LEVEL, help="Logging level (default: %(default)s)")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level.upper())

    try:
        options = LintOptions(
            max_heading_skip=args.max_heading_skip,
            heading_skip_severity=args.heading_skip_severity,
            toc_titles=args.toc_titles or list(HANDBOOK_LINT_TOC_TITLES),
            min_examples_per_section=args.min_examples,
            include_tree=args.tree or args.format == "json",
        )
    except ValueError as exc:
        parser.error(str(exc))

    try:
        reports = asyncio.run(_run(args.paths, options, args.max_concurrency))
    except LoaderError as exc:
        logger.error("Failed to load documents", extra={"error": str(exc)})
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_USAGE

    if args.format == "json":
        print(render_json(reports))
    else:
        for report in reports:
            print(render_text(report, include_tree=args.tree))
        if len(reports) > 1:
            findings = [finding for report in reports for finding in report.findings]
            print(f"\nTotal: {len(reports)} document(s), {format_summary(summarize(findings))}")

    blocking = any(has_blocking_findings(report.findings) for report in reports)
    return EXIT_FINDINGS if blocking else EXIT_OK


async def _run(paths: list[Path], options: LintOptions, max_concurrency: int):
    sources = await load_sources(paths)
    return await lint_documents(sources, options, max_concurrency=max_concurrency)


if __name__ == "__main__":
    raise SystemExit(main())
