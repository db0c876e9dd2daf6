"""Lint endpoint for the API."""

from fastapi import APIRouter, HTTPException

from handbook_lint.pipeline import lint_document
from handbook_lint.report import has_blocking_findings
from handbook_lint.utils.logging_config import get_logger
from server.models import LintRequest, LintResponse

router = APIRouter()
logger = get_logger(__name__)


@router.post("/api/lint", response_model=LintResponse)
async def api_lint(lint_request: LintRequest) -> LintResponse:
    """Lint a Markdown document and return its report.

    **Parameters**

    - **lint_request** (`LintRequest`): document id, Markdown text and options

    **Returns**

    - **LintResponse**: the structured report plus ``blocking``, which is
      true when any finding has severity ``error``

    **Raises**

    - **HTTPException**: **422** - the options are inconsistent
    """
    try:
        options = lint_request.options.to_options()
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    report = await lint_document(lint_request.document_id, lint_request.text, options)
    logger.info(
        "Lint request completed",
        extra={"document_id": report.document_id, "errors": report.summary.errors},
    )
    return LintResponse(blocking=has_blocking_findings(report.findings), report=report)


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness check."""
    return {"status": "ok"}
