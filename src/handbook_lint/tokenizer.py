"""Split Markdown text into an ordered sequence of typed blocks."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from handbook_lint.exceptions import ParseFatalError
from handbook_lint.schemas import (
    BlankBlock,
    Block,
    CodeFenceBlock,
    Document,
    Finding,
    HeadingBlock,
    ListItemBlock,
    Location,
    ParagraphBlock,
    RawBlock,
    Severity,
    TableBlock,
)
from handbook_lint.sections import slugify_heading

_FENCE_OPEN_RE = re.compile(r"^(?P<indent>[ \t]*)(?P<fence>`{3,}|~{3,})(?P<info>.*)$")
_FENCE_CLOSE_RE = re.compile(r"^[ \t]*(?P<fence>`{3,}|~{3,})[ \t]*$")
_HEADING_RE = re.compile(r"^ {0,3}(?P<hashes>#{1,6})(?:[ \t]+(?P<text>.*?))?[ \t]*$")
_HEADING_CLOSE_RE = re.compile(r"(?:^|[ \t]+)#+[ \t]*$")
_LIST_ITEM_RE = re.compile(r"^(?P<indent>[ \t]*)(?P<marker>[-*+]|\d{1,9}[.)])(?:[ \t]+(?P<rest>.*))?$")
_BARE_BOX_RE = re.compile(r"^(?P<indent>[ \t]*)\[(?P<box>[ xX])\](?:[ \t]+(?P<rest>.*))?$")
_BOX_RE = re.compile(r"^\[(?P<box>[^\]\w]?|[xX])\](?=[ \t]|$)[ \t]*(?P<rest>.*)$")
_TABLE_DELIMITER_CELL_RE = re.compile(r"^:?-+:?$")
_CELL_SPLIT_RE = re.compile(r"(?<!\\)\|")


@dataclass
class TokenizeResult:
    """Tokenizer output: the parsed document plus tokenizer findings."""

    document: Document
    findings: list[Finding] = field(default_factory=list)


def decode_source(source: str | bytes) -> str:
    """Decode raw input into text.

    Raises:
        ParseFatalError: If the bytes are not valid UTF-8 or the text holds
            NUL characters (binary content).
    """
    if isinstance(source, bytes):
        try:
            text = source.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            line = source[: exc.start].count(b"\n") + 1
            raise ParseFatalError(f"input is not valid UTF-8 (byte offset {exc.start})", line=line) from exc
    else:
        text = source.removeprefix("\ufeff")

    nul = text.find("\x00")
    if nul != -1:
        line = text.count("\n", 0, nul) + 1
        raise ParseFatalError("input contains NUL characters; binary content is not Markdown", line=line)
    return text


def split_lines(text: str) -> list[str]:
    """Split text into lines, normalizing CR and CRLF endings."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return lines


def tokenize(text: str, *, document_id: str = "<buffer>") -> TokenizeResult:
    """Parse text into blocks that cover every line exactly once.

    An opening fence that is never closed produces a single
    ``unterminated-fence`` error and the rest of the input becomes one
    :class:`RawBlock`.
    """
    lines = split_lines(text)
    blocks: list[Block] = []
    findings: list[Finding] = []
    index = 0
    total = len(lines)

    while index < total:
        line = lines[index]
        number = index + 1

        if not line.strip():
            end = index
            while end + 1 < total and not lines[end + 1].strip():
                end += 1
            blocks.append(BlankBlock(start_line=number, end_line=end + 1))
            index = end + 1
            continue

        fence = _match_fence_open(line)
        if fence is not None:
            indent, marker, info = fence
            close = _find_fence_close(lines, index + 1, marker)
            if close is None:
                findings.append(
                    Finding(
                        severity=Severity.ERROR,
                        kind="unterminated-fence",
                        location=Location(start_line=number, end_line=total),
                        message=f"code fence opened at line {number} is never closed",
                    )
                )
                blocks.append(RawBlock(start_line=number, end_line=total, text="\n".join(lines[index:])))
                break
            body = [_dedent(body_line, indent) for body_line in lines[index + 1 : close]]
            blocks.append(
                CodeFenceBlock(
                    start_line=number,
                    end_line=close + 1,
                    language=_language_from_info(info),
                    info=info,
                    body="\n".join(body),
                    fence=marker,
                )
            )
            index = close + 1
            continue

        heading = _HEADING_RE.match(line)
        if heading:
            heading_text = _HEADING_CLOSE_RE.sub("", heading.group("text") or "").strip()
            blocks.append(
                HeadingBlock(
                    start_line=number,
                    end_line=number,
                    level=len(heading.group("hashes")),
                    text=heading_text,
                    slug=slugify_heading(heading_text),
                )
            )
            index += 1
            continue

        if _is_table_row(line):
            end = index
            while end + 1 < total and _is_table_row(lines[end + 1]):
                end += 1
            rows: list[list[str]] = []
            row_lines: list[int] = []
            for position in range(index, end + 1):
                row = _split_row(lines[position])
                if not _is_delimiter_row(row):
                    rows.append(row)
                    row_lines.append(position + 1)
            blocks.append(TableBlock(start_line=number, end_line=end + 1, rows=rows, row_lines=row_lines))
            index = end + 1
            continue

        item = _parse_list_item(line, number)
        if item is not None:
            end = index
            continuation: list[str] = []
            while end + 1 < total and _is_continuation(lines[end + 1]):
                end += 1
                continuation.append(lines[end].strip())
            if continuation:
                item_text = "\n".join([item.text, *continuation])
                item = item.model_copy(update={"end_line": end + 1, "text": item_text})
            blocks.append(item)
            index = end + 1
            continue

        end = index
        while end + 1 < total and _continues_paragraph(lines[end + 1]):
            end += 1
        paragraph = "\n".join(part.strip() for part in lines[index : end + 1])
        blocks.append(ParagraphBlock(start_line=number, end_line=end + 1, text=paragraph))
        index = end + 1

    document = Document(id=document_id, blocks=tuple(blocks), line_count=total)
    return TokenizeResult(document=document, findings=findings)


def _match_fence_open(line: str) -> tuple[str, str, str] | None:
    match = _FENCE_OPEN_RE.match(line)
    if not match:
        return None
    marker = match.group("fence")
    info = match.group("info").strip()
    # Backtick fences cannot carry backticks in their info string.
    if marker[0] == "`" and "`" in info:
        return None
    return match.group("indent"), marker, info


def _find_fence_close(lines: list[str], start: int, marker: str) -> int | None:
    for position in range(start, len(lines)):
        match = _FENCE_CLOSE_RE.match(lines[position])
        if not match:
            continue
        candidate = match.group("fence")
        if candidate[0] == marker[0] and len(candidate) >= len(marker):
            return position
    return None


def _language_from_info(info: str) -> str | None:
    if not info:
        return None
    word = info.split()[0].strip("{}.").lower()
    return word or None


def _dedent(line: str, indent: str) -> str:
    leading = len(line) - len(line.lstrip(" \t"))
    return line[min(len(indent), leading) :]


def _is_table_row(line: str) -> bool:
    return line.lstrip().startswith("|")


def _split_row(line: str) -> list[str]:
    stripped = line.strip()
    if stripped.startswith("|"):
        stripped = stripped[1:]
    if stripped.endswith("|") and not stripped.endswith("\\|"):
        stripped = stripped[:-1]
    return [cell.strip() for cell in _CELL_SPLIT_RE.split(stripped)]


def _is_delimiter_row(cells: list[str]) -> bool:
    return bool(cells) and all(_TABLE_DELIMITER_CELL_RE.match(cell.replace(" ", "")) for cell in cells)


def _indent_width(prefix: str) -> int:
    return len(prefix.expandtabs(4))


def _parse_list_item(line: str, number: int) -> ListItemBlock | None:
    match = _LIST_ITEM_RE.match(line)
    if match:
        rest = match.group("rest") or ""
        item = ListItemBlock(
            start_line=number,
            end_line=number,
            text=rest.strip(),
            indent=_indent_width(match.group("indent")),
            marker=match.group("marker"),
        )
        box = _BOX_RE.match(rest)
        if box:
            return item.model_copy(update={"text": box.group("rest").strip(), **_box_state(box.group("box"))})
        return item

    bare = _BARE_BOX_RE.match(line)
    if bare:
        return ListItemBlock(
            start_line=number,
            end_line=number,
            text=(bare.group("rest") or "").strip(),
            indent=_indent_width(bare.group("indent")),
            marker=None,
            **_box_state(bare.group("box")),
        )
    return None


def _box_state(box: str) -> dict:
    if box == " ":
        checked = False
    elif box in ("x", "X"):
        checked = True
    else:
        checked = None
    return {"checklist": True, "checked": checked, "box": box}


def _starts_block(line: str) -> bool:
    return (
        _match_fence_open(line) is not None
        or _HEADING_RE.match(line) is not None
        or _is_table_row(line)
        or _LIST_ITEM_RE.match(line) is not None
        or _BARE_BOX_RE.match(line) is not None
    )


def _is_continuation(line: str) -> bool:
    return bool(line.strip()) and line[:1] in (" ", "\t") and not _starts_block(line)


def _continues_paragraph(line: str) -> bool:
    return bool(line.strip()) and not _starts_block(line)
