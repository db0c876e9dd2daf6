"""FastAPI application for handbook_lint."""

from __future__ import annotations

from fastapi import FastAPI

from handbook_lint.config import HANDBOOK_LINT_LOG_LEVEL
from handbook_lint.utils.logging_config import configure_logging
from server.routers.lint import router as lint_router

configure_logging(HANDBOOK_LINT_LOG_LEVEL)

app = FastAPI(title="handbook-lint", description="Structural lint for Markdown handbooks.")
app.include_router(lint_router)
