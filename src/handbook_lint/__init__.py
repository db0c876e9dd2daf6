"""handbook_lint: structural lint for Markdown best-practice handbooks."""

from handbook_lint.exceptions import (
    CheckerRegistryError,
    HandbookLintError,
    LoaderError,
    ParseError,
    ParseFatalError,
)
from handbook_lint.pipeline import LintOptions, SourceDocument, lint_document, lint_documents, lint_text
from handbook_lint.report import has_blocking_findings
from handbook_lint.schemas import Finding, LintReport, Severity
from handbook_lint.snippets import CheckerRegistry, SnippetChecker, default_registry

__all__ = [
    "CheckerRegistry",
    "CheckerRegistryError",
    "Finding",
    "HandbookLintError",
    "LintOptions",
    "LintReport",
    "LoaderError",
    "ParseError",
    "ParseFatalError",
    "Severity",
    "SnippetChecker",
    "SourceDocument",
    "default_registry",
    "has_blocking_findings",
    "lint_document",
    "lint_documents",
    "lint_text",
]
