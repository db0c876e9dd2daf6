"""Snippet inventory model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class SnippetRecord(BaseModel):
    """One fenced code block seen by the snippet validator.

    ``section_anchor`` is the anchor of the nearest heading above the fence.
    """

    model_config = ConfigDict(frozen=True)

    language: str | None
    start_line: int
    end_line: int
    section_anchor: str | None = None
    checked: bool
