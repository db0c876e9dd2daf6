"""Validate fenced code snippets through a pluggable checker registry."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Protocol, Union, runtime_checkable

from handbook_lint.checkers import (
    BUILTIN_PROFILES,
    JSON_TAGS,
    PLAIN_TEXT_TAGS,
    PlainTextChecker,
    ProfileChecker,
    check_json,
)
from handbook_lint.exceptions import CheckerRegistryError
from handbook_lint.schemas import CodeFenceBlock, Document, Finding, HeadingBlock, Severity, SnippetRecord
from handbook_lint.utils.logging_config import get_logger

logger = get_logger(__name__)


@runtime_checkable
class SnippetChecker(Protocol):
    """Anything that can check a snippet body."""

    def check(self, body: str) -> list[Finding]: ...


CheckerLike = Union[SnippetChecker, Callable[[str], list[Finding]]]


class _FunctionChecker:
    def __init__(self, func: Callable[[str], list[Finding]]) -> None:
        self.func = func

    def check(self, body: str) -> list[Finding]:
        return list(self.func(body))

    def __repr__(self) -> str:
        return f"_FunctionChecker({getattr(self.func, '__name__', self.func)!r})"


class CheckerRegistry:
    """Maps language tags to snippet checkers.

    Tags are matched case-insensitively. New languages are added by
    registering a checker; the validator never changes.
    """

    def __init__(self) -> None:
        self._checkers: dict[str, SnippetChecker] = {}

    def register(self, tags: str | Iterable[str], checker: CheckerLike, *, replace: bool = False) -> None:
        """Register ``checker`` for one or more language tags.

        Raises:
            CheckerRegistryError: If a tag is empty, the checker has no
                ``check`` method and is not callable, or a tag is already
                registered and ``replace`` is False.
        """
        names = [tags] if isinstance(tags, str) else list(tags)
        resolved = _as_checker(checker)
        normalized = [name.strip().lower() for name in names]
        if not normalized or any(not name for name in normalized):
            raise CheckerRegistryError("language tags must be non-empty strings")
        if not replace:
            taken = sorted(name for name in normalized if name in self._checkers)
            if taken:
                raise CheckerRegistryError(f"checker already registered for: {', '.join(taken)}")
        for name in normalized:
            self._checkers[name] = resolved

    def unregister(self, tag: str) -> None:
        self._checkers.pop(tag.strip().lower(), None)

    def get(self, tag: str | None) -> SnippetChecker | None:
        if not tag:
            return None
        return self._checkers.get(tag.strip().lower())

    def languages(self) -> list[str]:
        return sorted(self._checkers)

    def copy(self) -> "CheckerRegistry":
        clone = CheckerRegistry()
        clone._checkers = dict(self._checkers)
        return clone

    def __contains__(self, tag: object) -> bool:
        return isinstance(tag, str) and tag.strip().lower() in self._checkers

    def __len__(self) -> int:
        return len(self._checkers)


def _as_checker(checker: CheckerLike) -> SnippetChecker:
    if isinstance(checker, SnippetChecker):
        return checker
    if callable(checker):
        return _FunctionChecker(checker)
    raise CheckerRegistryError(f"not a snippet checker: {checker!r}")


def default_registry() -> CheckerRegistry:
    """Build a fresh registry holding the built-in checkers."""
    registry = CheckerRegistry()
    for profile, tags in BUILTIN_PROFILES:
        registry.register(tags, ProfileChecker(profile))
    registry.register(JSON_TAGS, check_json)
    registry.register(PLAIN_TEXT_TAGS, PlainTextChecker())
    return registry


@dataclass
class SnippetReport:
    """Snippet validator output."""

    records: list[SnippetRecord] = field(default_factory=list)
    findings: list[Finding] = field(default_factory=list)


def validate_snippets(document: Document, registry: CheckerRegistry | None = None) -> SnippetReport:
    """Run the registered checker for each code fence in ``document``.

    Snippets without a language tag, or with a tag no checker is registered
    for, are allowed but reported as ``unlabeled-snippet`` info findings. A
    checker that raises yields a ``checker-failed`` error for its snippet.
    """
    registry = registry if registry is not None else default_registry()
    report = SnippetReport()
    section_anchor: str | None = None

    for block in document.blocks:
        if isinstance(block, HeadingBlock):
            section_anchor = block.slug or None
            continue
        if not isinstance(block, CodeFenceBlock):
            continue
        checker = registry.get(block.language)
        report.records.append(
            SnippetRecord(
                language=block.language,
                start_line=block.start_line,
                end_line=block.end_line,
                section_anchor=section_anchor,
                checked=checker is not None,
            )
        )
        if checker is None:
            report.findings.append(_unlabeled(block))
            continue
        try:
            findings = list(checker.check(block.body))
        except Exception as exc:
            logger.warning(
                "Snippet checker failed",
                extra={"language": block.language, "line": block.start_line, "error": repr(exc)},
            )
            report.findings.append(_checker_failed(block, exc))
            continue
        # Body line 1 sits right after the opening fence.
        report.findings.extend(finding.shifted(block.start_line) for finding in findings)

    return report


def _checker_failed(block: CodeFenceBlock, exc: Exception) -> Finding:
    return Finding(
        severity=Severity.ERROR,
        kind="checker-failed",
        location=block.location,
        message=f"checker for language '{block.language}' failed: {type(exc).__name__}: {exc}",
    )


def _unlabeled(block: CodeFenceBlock) -> Finding:
    if block.language:
        message = f"no checker registered for language '{block.language}'; snippet not validated"
    else:
        message = "code fence has no language tag; snippet not validated"
    return Finding(severity=Severity.INFO, kind="unlabeled-snippet", location=block.location, message=message)
