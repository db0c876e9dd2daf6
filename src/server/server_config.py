"""Configuration for the lint server."""

from __future__ import annotations

import os

DEFAULT_MAX_DOCUMENT_SIZE_KB = 2048

MAX_DOCUMENT_SIZE_KB = int(os.getenv("HANDBOOK_LINT_MAX_DOCUMENT_SIZE_KB", str(DEFAULT_MAX_DOCUMENT_SIZE_KB)))
MAX_DOCUMENT_CHARS = MAX_DOCUMENT_SIZE_KB * 1024
