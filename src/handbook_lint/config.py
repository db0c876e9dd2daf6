"""Local configuration for handbook_lint."""

from __future__ import annotations

import os


DEFAULT_MAX_HEADING_SKIP = 1
DEFAULT_HEADING_SKIP_SEVERITY = "warning"
DEFAULT_TOC_TITLES = "table of contents,contents,toc"
DEFAULT_MIN_EXAMPLES = 0
DEFAULT_MAX_CONCURRENCY = 8
DEFAULT_LOG_LEVEL = "WARNING"


def _split_csv(value: str) -> tuple[str, ...]:
    return tuple(item.strip().lower() for item in value.split(",") if item.strip())


# Largest tolerated jump between a heading and its parent heading.
HANDBOOK_LINT_MAX_HEADING_SKIP = int(os.getenv("HANDBOOK_LINT_MAX_HEADING_SKIP", str(DEFAULT_MAX_HEADING_SKIP)))
HANDBOOK_LINT_HEADING_SKIP_SEVERITY = os.getenv(
    "HANDBOOK_LINT_HEADING_SKIP_SEVERITY", DEFAULT_HEADING_SKIP_SEVERITY
).lower()
HANDBOOK_LINT_TOC_TITLES = _split_csv(os.getenv("HANDBOOK_LINT_TOC_TITLES", DEFAULT_TOC_TITLES))
HANDBOOK_LINT_MIN_EXAMPLES = int(os.getenv("HANDBOOK_LINT_MIN_EXAMPLES", str(DEFAULT_MIN_EXAMPLES)))
HANDBOOK_LINT_MAX_CONCURRENCY = int(os.getenv("HANDBOOK_LINT_MAX_CONCURRENCY", str(DEFAULT_MAX_CONCURRENCY)))
HANDBOOK_LINT_LOG_LEVEL = os.getenv("HANDBOOK_LINT_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
