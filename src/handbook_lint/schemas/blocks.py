"""Block and document models produced by the tokenizer."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from handbook_lint.schemas.findings import Location


class _BlockBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    start_line: int = Field(..., ge=1)
    end_line: int = Field(..., ge=1)

    @property
    def location(self) -> Location:
        return Location(start_line=self.start_line, end_line=self.end_line)


class HeadingBlock(_BlockBase):
    """An ATX heading."""

    kind: Literal["heading"] = "heading"
    level: int = Field(..., ge=1, le=6)
    text: str
    slug: str


class ParagraphBlock(_BlockBase):
    kind: Literal["paragraph"] = "paragraph"
    text: str


class ListItemBlock(_BlockBase):
    """A bullet, numbered or checklist item.

    Attributes:
        text: Item text without marker or checkbox; continuation lines are
            joined with newlines so line offsets are kept.
        indent: Columns of indentation before the marker.
        marker: The list marker (``-``, ``*``, ``+``, ``1.``) or ``None`` for a
            bare checkbox line.
        checklist: True when the item carries a ``[...]`` box.
        checked: True for ``[x]``, False for ``[ ]``, None otherwise. A
            checklist item with ``checked`` None is indeterminate.
        box: Raw box contents, e.g. ``" "``, ``"x"`` or ``"?"``.
    """

    kind: Literal["list_item"] = "list_item"
    text: str
    indent: int = 0
    marker: str | None = None
    checklist: bool = False
    checked: bool | None = None
    box: str | None = None

    @property
    def indeterminate(self) -> bool:
        return self.checklist and self.checked is None


class CodeFenceBlock(_BlockBase):
    """A terminated fenced code block; ``body`` excludes the fence lines."""

    kind: Literal["code_fence"] = "code_fence"
    language: str | None = None
    info: str = ""
    body: str = ""
    fence: str = "```"


class TableBlock(_BlockBase):
    """A pipe table; ``row_lines[i]`` is the source line of ``rows[i]``."""

    kind: Literal["table"] = "table"
    rows: list[list[str]] = Field(default_factory=list)
    row_lines: list[int] = Field(default_factory=list)


class BlankBlock(_BlockBase):
    kind: Literal["blank"] = "blank"


class RawBlock(_BlockBase):
    """Text swallowed by an unterminated fence."""

    kind: Literal["raw"] = "raw"
    text: str = ""


Block = Annotated[
    Union[HeadingBlock, ParagraphBlock, ListItemBlock, CodeFenceBlock, TableBlock, BlankBlock, RawBlock],
    Field(discriminator="kind"),
]


class Document(BaseModel):
    """An ordered, immutable sequence of blocks."""

    model_config = ConfigDict(frozen=True)

    id: str
    blocks: tuple[Block, ...] = ()
    line_count: int = 0

    def blocks_of(self, kind: type[_BlockBase]) -> list:
        return [block for block in self.blocks if isinstance(block, kind)]
