"""Heading anchors and section lookups."""

from __future__ import annotations

import re
from typing import Iterable

from handbook_lint.schemas import Section

_INLINE_LINK_RE = re.compile(r"!?\[([^\]]*)\]\([^)]*\)")
_NUMBER_PREFIX_RE = re.compile(r"^(?:\d+[.)]?)+\s+")


def strip_inline_markup(text: str) -> str:
    """Reduce inline links and images to their text."""
    return _INLINE_LINK_RE.sub(r"\1", text)


def slugify_heading(text: str) -> str:
    """Derive a GitHub-style anchor from heading text.

    Lower-cases, drops punctuation (anything but word characters, spaces and
    hyphens) and turns every space into a hyphen.
    """
    text = strip_inline_markup(text).strip().lower()
    text = re.sub(r"[^\w\s-]", "", text)
    return re.sub(r"\s", "-", text)


def normalize_section_title(title: str) -> str:
    """Normalize section titles for comparison."""
    title = strip_inline_markup(title).strip().lower()
    title = _NUMBER_PREFIX_RE.sub("", title)
    title = re.sub(r"[^\w\s]", " ", title)
    return re.sub(r"\s+", " ", title).strip()


def find_sections(sections: Iterable[Section], titles: Iterable[str]) -> list[Section]:
    """Return sections, searched depth-first, whose title matches one of ``titles``."""
    wanted = {normalize_section_title(title) for title in titles if title.strip()}
    if not wanted:
        return []

    found: list[Section] = []
    for section in sections:
        if normalize_section_title(section.title) in wanted:
            found.append(section)
        found.extend(find_sections(section.children, wanted))
    return found
