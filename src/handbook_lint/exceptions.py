"""Custom exceptions for handbook_lint."""


class HandbookLintError(Exception):
    """Base exception for handbook_lint operations."""


class ParseError(HandbookLintError):
    """Error during document parsing."""


class ParseFatalError(ParseError):
    """Document cannot be tokenized at all.

    Only this error aborts the pipeline for a document; every other problem
    is reported as a finding.
    """

    def __init__(self, message: str, *, line: int = 1) -> None:
        super().__init__(message)
        self.line = line


class LoaderError(HandbookLintError):
    """Error while discovering or reading input documents."""


class CheckerRegistryError(HandbookLintError):
    """Invalid snippet checker registration."""
