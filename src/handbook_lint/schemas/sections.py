"""Section tree models."""

from __future__ import annotations

from typing import Iterator

from pydantic import BaseModel, Field

from handbook_lint.schemas.blocks import Block, HeadingBlock


class Section(BaseModel):
    """A hierarchical section node; level 0 is the synthetic document root.

    ``number`` is the dotted position in the tree, e.g. ``"2.1"`` for the
    first child of the second top-level section.
    """

    title: str
    level: int = Field(..., ge=0, le=6)
    anchor: str | None = None
    number: str = ""
    heading: HeadingBlock | None = None
    blocks: list[Block] = Field(default_factory=list)
    children: list["Section"] = Field(default_factory=list)

    @property
    def line(self) -> int:
        return self.heading.start_line if self.heading else 1

    def walk(self) -> Iterator["Section"]:
        """Yield descendants depth-first in document order, excluding self."""
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))
