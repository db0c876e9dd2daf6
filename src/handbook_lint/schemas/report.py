"""Lint report models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from handbook_lint.schemas.findings import Finding


class LintSummary(BaseModel):
    """Finding counts per severity."""

    errors: int = 0
    warnings: int = 0
    infos: int = 0


class LintStats(BaseModel):
    """Document inventory counts."""

    blocks: int = 0
    sections: int = 0
    snippets: int = 0
    links: int = 0
    checklist_items: int = 0


class LintReport(BaseModel):
    """Final lint output for a single document."""

    document_id: str
    findings: list[Finding] = Field(default_factory=list)
    summary: LintSummary = Field(default_factory=LintSummary)
    stats: LintStats = Field(default_factory=LintStats)
    sections_tree: str = ""
