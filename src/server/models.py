"""Pydantic models for the lint API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from handbook_lint.config import (
    HANDBOOK_LINT_HEADING_SKIP_SEVERITY,
    HANDBOOK_LINT_MAX_HEADING_SKIP,
    HANDBOOK_LINT_MIN_EXAMPLES,
    HANDBOOK_LINT_TOC_TITLES,
)
from handbook_lint.pipeline import LintOptions
from handbook_lint.schemas import LintReport, Severity
from server.server_config import MAX_DOCUMENT_CHARS


class LintOptionsModel(BaseModel):
    """Per-request lint options.

    Attributes
    ----------
    max_heading_skip : int
        Largest tolerated jump between a heading and its parent heading.
    heading_skip_severity : Severity
        Severity used for heading-level skips.
    toc_titles : list[str]
        Heading titles that mark a table of contents section.
    min_examples_per_section : int
        Minimum code examples per leaf section; 0 disables the check.

    """

    model_config = ConfigDict(extra="forbid")

    max_heading_skip: int = Field(default=HANDBOOK_LINT_MAX_HEADING_SKIP, ge=1, le=5)
    heading_skip_severity: Severity = Field(default=Severity(HANDBOOK_LINT_HEADING_SKIP_SEVERITY))
    toc_titles: list[str] = Field(default_factory=lambda: list(HANDBOOK_LINT_TOC_TITLES))
    min_examples_per_section: int = Field(default=HANDBOOK_LINT_MIN_EXAMPLES, ge=0)

    @field_validator("toc_titles", mode="before")
    @classmethod
    def normalize_toc_titles(cls, v: str | list[str] | None) -> list[str]:
        """Normalize titles from comma-separated strings or lists."""
        if not v:
            return []
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return [item.strip() for item in v if item.strip()]

    def to_options(self) -> LintOptions:
        return LintOptions(
            max_heading_skip=self.max_heading_skip,
            heading_skip_severity=self.heading_skip_severity.value,
            toc_titles=self.toc_titles,
            min_examples_per_section=self.min_examples_per_section,
        )


class LintRequest(BaseModel):
    """Request model for the /api/lint endpoint.

    Attributes
    ----------
    document_id : str
        Identifier echoed back in the report.
    text : str
        Markdown source to lint.
    options : LintOptionsModel
        Lint options; defaults come from the environment.

    """

    document_id: str = Field(default="<request>", min_length=1, description="Document identifier")
    text: str = Field(..., max_length=MAX_DOCUMENT_CHARS, description="Markdown source")
    options: LintOptionsModel = Field(default_factory=LintOptionsModel)

    @field_validator("document_id")
    @classmethod
    def validate_document_id(cls, v: str) -> str:
        """Validate that ``document_id`` is not blank."""
        if not v.strip():
            err = "document_id cannot be blank"
            raise ValueError(err)
        return v.strip()


class LintResponse(BaseModel):
    """Response model wrapping a lint report with the blocking verdict."""

    blocking: bool = Field(..., description="True when any finding is an error")
    report: LintReport = Field(..., description="Structured lint report")
