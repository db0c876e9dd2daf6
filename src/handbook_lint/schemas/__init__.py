"""Shared schemas for handbook_lint."""

from handbook_lint.schemas.blocks import (
    BlankBlock,
    Block,
    CodeFenceBlock,
    Document,
    HeadingBlock,
    ListItemBlock,
    ParagraphBlock,
    RawBlock,
    TableBlock,
)
from handbook_lint.schemas.findings import Finding, Location, Severity
from handbook_lint.schemas.report import LintReport, LintStats, LintSummary
from handbook_lint.schemas.sections import Section
from handbook_lint.schemas.snippets import SnippetRecord

__all__ = [
    "BlankBlock",
    "Block",
    "CodeFenceBlock",
    "Document",
    "Finding",
    "HeadingBlock",
    "LintReport",
    "LintStats",
    "LintSummary",
    "ListItemBlock",
    "Location",
    "ParagraphBlock",
    "RawBlock",
    "Section",
    "Severity",
    "SnippetRecord",
    "TableBlock",
]
