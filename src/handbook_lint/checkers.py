"""Built-in well-formedness checkers for fenced code snippets.

Most checkers share one lexical scanner that skips comments and string
literals while matching bracket pairs by depth. Each language supplies a
:class:`LexicalProfile` describing its comments and string delimiters.
Checkers report lines relative to the snippet body (line 1 is the first
line after the opening fence).
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field

from handbook_lint.schemas import Finding, Location, Severity


@dataclass(frozen=True)
class StringRule:
    """A string literal delimiter."""

    delimiter: str
    multiline: bool = False
    escapes: bool = True


@dataclass(frozen=True)
class LexicalProfile:
    """Lexical conventions needed to balance brackets in a language."""

    name: str
    brackets: str = "(){}[]"
    line_comments: tuple[str, ...] = ()
    block_comments: tuple[tuple[str, str], ...] = ()
    strings: tuple[StringRule, ...] = ()
    # Shell only treats '#' as a comment at the start of a word.
    comment_at_word_start: bool = False
    escape_outside_strings: bool = False
    # Rust: 'x' and '\n' are char literals, a lone ' starts a lifetime.
    char_literals: bool = False
    # Shell: the lines after `<<WORD` up to a line holding only WORD are data.
    heredocs: bool = False
    _pairs: dict[str, str] = field(init=False, repr=False, compare=False, default_factory=dict)

    def __post_init__(self) -> None:
        pairs = {self.brackets[i + 1]: self.brackets[i] for i in range(0, len(self.brackets), 2)}
        object.__setattr__(self, "_pairs", pairs)

    @property
    def openers(self) -> str:
        return self.brackets[0::2]

    @property
    def closers(self) -> dict[str, str]:
        return self._pairs


_CHAR_LITERAL_RE = re.compile(r"'(?:\\(?:u\{[0-9a-fA-F]{1,6}\}|x[0-9a-fA-F]{2}|.)|[^\\'\n])'")
_HEREDOC_RE = re.compile(r"""<<(?P<strip>-?)[ \t]*(?P<quote>['"]?)(?P<word>[A-Za-z_][A-Za-z0-9_]*)(?P=quote)""")


def _finding(kind: str, start: int, end: int, message: str) -> Finding:
    return Finding(
        severity=Severity.ERROR,
        kind=kind,
        location=Location(start_line=start, end_line=max(start, end)),
        message=message,
    )


def _match_any(text: str, position: int, candidates: tuple[str, ...]) -> str | None:
    for candidate in candidates:
        if text.startswith(candidate, position):
            return candidate
    return None


def scan_balance(body: str, profile: LexicalProfile) -> list[Finding]:
    """Check bracket balance and literal termination for ``body``."""
    findings: list[Finding] = []
    stack: list[tuple[str, int]] = []
    strings = sorted(profile.strings, key=lambda rule: len(rule.delimiter), reverse=True)
    closers = profile.closers
    length = len(body)
    pending_heredocs: list[tuple[str, bool]] = []
    line = 1
    i = 0

    while i < length:
        char = body[i]

        if char == "\n":
            line += 1
            i += 1
            if pending_heredocs:
                i, line = _skip_heredocs(body, i, line, pending_heredocs)
                pending_heredocs.clear()
            continue

        if profile.heredocs and body.startswith("<<", i):
            if body.startswith("<<<", i):
                i += 3
                continue
            heredoc = _HEREDOC_RE.match(body, i)
            if heredoc:
                pending_heredocs.append((heredoc.group("word"), bool(heredoc.group("strip"))))
                i = heredoc.end()
                continue

        if profile.char_literals and char == "'":
            literal = _CHAR_LITERAL_RE.match(body, i)
            i = literal.end() if literal else i + 1
            continue

        if profile.escape_outside_strings and char == "\\":
            if i + 1 < length and body[i + 1] == "\n":
                line += 1
            i += 2
            continue

        comment = _match_any(body, i, profile.line_comments)
        if comment and (not profile.comment_at_word_start or i == 0 or body[i - 1] in " \t\n"):
            newline = body.find("\n", i)
            i = length if newline == -1 else newline
            continue

        block = next((pair for pair in profile.block_comments if body.startswith(pair[0], i)), None)
        if block:
            opener, closer = block
            end = body.find(closer, i + len(opener))
            if end == -1:
                findings.append(
                    _finding(
                        "unterminated-comment",
                        line,
                        line + body.count("\n", i),
                        f"block comment '{opener}' opened at line {line} is never closed",
                    )
                )
                return findings
            line += body.count("\n", i, end)
            i = end + len(closer)
            continue

        rule = next((rule for rule in strings if body.startswith(rule.delimiter, i)), None)
        if rule:
            start_line = line
            j = i + len(rule.delimiter)
            closed = False
            while j < length:
                current = body[j]
                if rule.escapes and current == "\\":
                    if j + 1 < length and body[j + 1] == "\n":
                        line += 1
                    j += 2
                    continue
                if body.startswith(rule.delimiter, j):
                    closed = True
                    j += len(rule.delimiter)
                    break
                if current == "\n":
                    if not rule.multiline:
                        break
                    line += 1
                j += 1
            if not closed:
                findings.append(
                    _finding(
                        "unterminated-string",
                        start_line,
                        line,
                        f"string literal {rule.delimiter} opened at line {start_line} is never closed",
                    )
                )
                if rule.multiline:
                    return findings
            i = j
            continue

        if char in profile.openers:
            stack.append((char, line))
        elif char in closers:
            expected = closers[char]
            if not stack:
                findings.append(_finding("unbalanced-brackets", line, line, f"unexpected closing '{char}'"))
            else:
                opener, opened_at = stack.pop()
                if opener != expected:
                    findings.append(
                        _finding(
                            "unbalanced-brackets",
                            opened_at,
                            line,
                            f"'{char}' does not match '{opener}' opened at line {opened_at}",
                        )
                    )
        i += 1

    for opener, opened_at in stack:
        findings.append(
            _finding(
                "unbalanced-brackets",
                opened_at,
                line,
                f"'{opener}' opened at line {opened_at} is never closed",
            )
        )
    return findings


def _skip_heredocs(body: str, i: int, line: int, heredocs: list[tuple[str, bool]]) -> tuple[int, int]:
    """Skip heredoc bodies starting at ``i``; returns the new position and line."""
    length = len(body)
    for word, strip_tabs in heredocs:
        while i < length:
            newline = body.find("\n", i)
            end = length if newline == -1 else newline
            current = body[i:end]
            if strip_tabs:
                current = current.lstrip("\t")
            if newline == -1:
                i = length
            else:
                i = newline + 1
                line += 1
            if current == word:
                break
    return i, line


class ProfileChecker:
    """Snippet checker backed by a :class:`LexicalProfile`."""

    def __init__(self, profile: LexicalProfile) -> None:
        self.profile = profile

    def check(self, body: str) -> list[Finding]:
        return scan_balance(body, self.profile)

    def __repr__(self) -> str:
        return f"ProfileChecker({self.profile.name!r})"


class PlainTextChecker:
    """Accepts any body; used for tags that label prose or program output."""

    def check(self, body: str) -> list[Finding]:
        return []


def check_json(body: str) -> list[Finding]:
    """Strict JSON well-formedness."""
    if not body.strip():
        return []
    try:
        json.loads(body)
    except json.JSONDecodeError as exc:
        return [_finding("invalid-json", exc.lineno, exc.lineno, f"invalid JSON: {exc.msg} (column {exc.colno})")]
    return []


_C_STRINGS = (
    StringRule('"""', multiline=True),
    StringRule('"'),
    StringRule("'"),
)
_C_COMMENTS = {"line_comments": ("//",), "block_comments": (("/*", "*/"),)}

C_FAMILY = LexicalProfile(name="c-family", strings=_C_STRINGS, **_C_COMMENTS)
JAVASCRIPT = LexicalProfile(
    name="javascript",
    strings=(StringRule('"'), StringRule("'"), StringRule("`", multiline=True)),
    **_C_COMMENTS,
)
GO = LexicalProfile(
    name="go",
    strings=(StringRule('"'), StringRule("'"), StringRule("`", multiline=True, escapes=False)),
    **_C_COMMENTS,
)
RUST = LexicalProfile(
    name="rust",
    strings=(StringRule('"', multiline=True),),
    char_literals=True,
    **_C_COMMENTS,
)
PYTHON = LexicalProfile(
    name="python",
    line_comments=("#",),
    strings=(
        StringRule('"""', multiline=True),
        StringRule("'''", multiline=True),
        StringRule('"'),
        StringRule("'"),
    ),
)
# `case` patterns close with a lone ')', so parentheses are not balanced.
SHELL = LexicalProfile(
    name="shell",
    brackets="{}[]",
    line_comments=("#",),
    strings=(StringRule('"', multiline=True), StringRule("'", multiline=True, escapes=False)),
    comment_at_word_start=True,
    escape_outside_strings=True,
    heredocs=True,
)
SQL = LexicalProfile(
    name="sql",
    brackets="()",
    line_comments=("--",),
    block_comments=(("/*", "*/"),),
    strings=(StringRule("'", multiline=True, escapes=False), StringRule('"', escapes=False)),
)

BUILTIN_PROFILES: tuple[tuple[LexicalProfile, tuple[str, ...]], ...] = (
    (
        C_FAMILY,
        (
            "c", "h", "cpp", "c++", "cc", "hpp", "cs", "csharp", "c#", "java", "kotlin", "kt",
            "swift", "scala", "php", "dart", "jsonc", "json5",
        ),
    ),
    (JAVASCRIPT, ("javascript", "js", "jsx", "mjs", "typescript", "ts", "tsx")),
    (GO, ("go", "golang")),
    (RUST, ("rust", "rs")),
    (PYTHON, ("python", "py", "python3")),
    (SHELL, ("bash", "sh", "shell", "zsh")),
    (SQL, ("sql", "postgresql", "mysql")),
)

PLAIN_TEXT_TAGS: tuple[str, ...] = (
    "text", "plaintext", "txt", "markdown", "md", "console", "output", "diff", "mermaid", "log",
)

JSON_TAGS: tuple[str, ...] = ("json",)
