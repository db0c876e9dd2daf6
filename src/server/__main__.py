"""Server module entry point for running with python -m server."""

import os

import uvicorn

from handbook_lint.config import HANDBOOK_LINT_LOG_LEVEL
from handbook_lint.utils.logging_config import configure_logging, get_logger

logger = get_logger(__name__)

if __name__ == "__main__":
    configure_logging(HANDBOOK_LINT_LOG_LEVEL)

    # Get configuration from environment variables
    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "8000"))
    reload = os.getenv("RELOAD", "false").lower() == "true"

    logger.info(
        "Starting handbook-lint server",
        extra={
            "host": host,
            "port": port,
        },
    )

    uvicorn.run(
        "server.main:app",
        host=host,
        port=port,
        reload=reload,
        log_config=None,  # Disable uvicorn's default logging config
    )
