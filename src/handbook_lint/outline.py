"""Build the section tree of a document from its heading levels."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator

from handbook_lint.schemas import BlankBlock, Document, Finding, HeadingBlock, Location, Section, Severity

ROOT_TITLE = "<document>"


@dataclass
class OutlineResult:
    """Section tree plus the anchors it defines.

    Attributes:
        root: Synthetic level-0 section holding the top-level sections and
            any blocks that precede the first heading.
        anchors: Slug -> sections defining it, in document order. A list with
            more than one entry is a duplicate anchor.
        findings: Structural findings raised while building the tree.
    """

    root: Section
    anchors: dict[str, list[Section]] = field(default_factory=dict)
    findings: list[Finding] = field(default_factory=list)

    def iter_sections(self) -> Iterator[Section]:
        return self.root.walk()

    def resolve(self, anchor: str) -> Section | None:
        sections = self.anchors.get(anchor)
        return sections[0] if sections else None

    def render_tree(self) -> str:
        return "Sections:\n" + _create_sections_tree(self.root.children)


def build_outline(
    document: Document,
    *,
    max_heading_skip: int = 1,
    skip_severity: Severity = Severity.WARNING,
) -> OutlineResult:
    """Nest sections under the nearest heading of a lower level.

    A stack of open sections is kept; on a heading of level L the stack is
    popped until its top has a level below L and the new section becomes a
    child of that top. A jump of more than ``max_heading_skip`` levels below
    the parent heading is reported, but the section is still nested under
    the parent.
    """
    root = Section(title=ROOT_TITLE, level=0)
    result = OutlineResult(root=root)
    stack: list[Section] = [root]

    for block in document.blocks:
        if isinstance(block, BlankBlock):
            continue
        if not isinstance(block, HeadingBlock):
            stack[-1].blocks.append(block)
            continue

        while stack[-1].level >= block.level:
            stack.pop()
        parent = stack[-1]

        if parent.level > 0 and block.level - parent.level > max_heading_skip:
            result.findings.append(
                Finding(
                    severity=skip_severity,
                    kind="heading-level-skip",
                    location=block.location,
                    message=(
                        f"heading level jumps from {parent.level} to {block.level} "
                        f"under '{parent.title}'"
                    ),
                )
            )

        section = Section(
            title=block.text,
            level=block.level,
            anchor=block.slug or None,
            number=_child_number(parent),
            heading=block,
        )
        if block.slug:
            result.anchors.setdefault(block.slug, []).append(section)
        else:
            result.findings.append(
                Finding(
                    severity=Severity.WARNING,
                    kind="empty-heading",
                    location=block.location,
                    message=(
                        "heading has no text and defines no anchor"
                        if not block.text
                        else f"heading '{block.text}' produces an empty anchor"
                    ),
                )
            )

        parent.children.append(section)
        stack.append(section)

    return result


def _child_number(parent: Section) -> str:
    position = str(len(parent.children) + 1)
    return f"{parent.number}.{position}" if parent.number else position


def count_sections(sections: Iterable[Section]) -> int:
    """Count total sections in the tree."""
    total = 0
    for section in sections:
        total += 1
        total += count_sections(section.children)
    return total


def _create_sections_tree(sections: list[Section], indent: int = 0) -> str:
    lines: list[str] = []
    for section in sections:
        label = section.title or "(untitled)"
        if section.anchor:
            label += f" (#{section.anchor})"
        lines.append(" " * (indent * 4) + label)
        if section.children:
            lines.append(_create_sections_tree(section.children, indent + 1))
    return "\n".join(lines)
