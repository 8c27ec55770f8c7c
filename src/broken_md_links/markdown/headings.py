"""Heading extraction.

Recognises ATX headings (``## Title``) and Setext headings (a paragraph
underlined with ``===`` or ``---``), strips their inline markup and assigns
each one a slug that is unique within the document: the first occurrence of a
slug is kept bare, later duplicates get ``-1``, ``-2``, ... appended.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Set

from broken_md_links.markdown.blocks import (
    classify_lines,
    indent_width,
    is_blank,
    is_list_item,
)
from broken_md_links.markdown.inline import (
    ASCII_PUNCTUATION,
    code_span,
    find_closing_bracket,
    match_html,
    parse_inline_destination,
)
from broken_md_links.markdown.slugs import slugify

logger = logging.getLogger(__name__)

_ATX_RE = re.compile(r"^ {0,3}(?P<marks>#{1,6})(?:[ \t]+(?P<text>.*?))?[ \t]*$")
_ATX_CLOSING_RE = re.compile(r"(?:^|[ \t]+)#+[ \t]*$")
_SETEXT_RE = re.compile(r"^ {0,3}(?P<underline>=+|-+)[ \t]*$")
_QUOTE_MARKER_RE = re.compile(r"^ {0,3}>[ \t]?")
_LIST_MARKER_RE = re.compile(r"^ {0,3}(?:[-+*]|\d{1,9}[.)])[ \t]+")
_EMPHASIS_MARKERS = frozenset("*_~")


@dataclass(frozen=True)
class Heading:
    """A heading found in a Markdown document."""

    text: str
    level: int
    slug: str
    occurrence_index: int
    line: int


def strip_inline_markup(text: str) -> str:
    """Return the visible text of a heading's inline Markdown.

    Code span delimiters, emphasis markers, HTML tags and backslash escapes are
    removed; links and images keep their label and lose their destination.
    """
    out: List[str] = []
    index = 0
    length = len(text)
    while index < length:
        char = text[index]

        if char == "\\" and index + 1 < length and text[index + 1] in ASCII_PUNCTUATION:
            out.append(text[index + 1])
            index += 2
            continue

        if char == "`":
            span = code_span(text, index)
            if span is not None:
                out.append(text[span[0] : span[1]].strip())
                index = span[2]
                continue
            while index < length and text[index] == "`":
                index += 1
            continue

        if char == "!" and index + 1 < length and text[index + 1] == "[":
            index += 1
            continue

        if char == "[":
            close = find_closing_bracket(text, index)
            if close is not None:
                label = strip_inline_markup(text[index + 1 : close])
                after = close + 1
                if after < length and text[after] == "(":
                    parsed = parse_inline_destination(text, after)
                    if parsed is not None:
                        out.append(label)
                        index = parsed[1]
                        continue
                if after < length and text[after] == "[":
                    reference_end = text.find("]", after)
                    if reference_end >= 0:
                        out.append(label)
                        index = reference_end + 1
                        continue
                out.append(label)
                index = after
                continue

        if char == "<":
            html = match_html(text, index)
            if html is not None:
                out.append(html[0])
                index = html[1]
                continue

        if char in _EMPHASIS_MARKERS:
            index += 1
            continue

        out.append(char)
        index += 1

    return "".join(out).strip()


def _atx_heading(line: str) -> Optional[tuple[int, str]]:
    match = _ATX_RE.match(line)
    if not match:
        return None
    text = match.group("text") or ""
    text = _ATX_CLOSING_RE.sub("", text).strip()
    return len(match.group("marks")), text


def _strip_block_quotes(line: str) -> tuple[int, str]:
    """Remove leading ``>`` markers, returning the quote depth and the content."""
    depth = 0
    while True:
        match = _QUOTE_MARKER_RE.match(line)
        if not match:
            return depth, line
        depth += 1
        line = line[match.end() :]


def _strip_list_markers(line: str) -> str:
    while True:
        match = _LIST_MARKER_RE.match(line)
        if not match:
            return line
        line = line[match.end() :]


class _SlugRegistry:
    """Running per-document duplicate counter."""

    def __init__(self) -> None:
        self._used: Set[str] = set()
        self._seen: Dict[str, int] = {}

    def assign(self, base: str) -> tuple[str, int]:
        occurrence = self._seen.get(base, 0)
        self._seen[base] = occurrence + 1
        slug = base if occurrence == 0 else f"{base}-{occurrence}"
        suffix = occurrence
        while slug in self._used:
            suffix += 1
            slug = f"{base}-{suffix}"
        self._used.add(slug)
        return slug, occurrence


def extract_headings(document_text: str) -> List[Heading]:
    """Return the headings of a document in order of appearance."""

    headings: List[Heading] = []
    registry = _SlugRegistry()

    def add(raw_text: str, level: int, line: int) -> None:
        text = strip_inline_markup(raw_text)
        slug, occurrence = registry.assign(slugify(text))
        logger.debug("Found header at line %d: #%s", line, slug)
        headings.append(
            Heading(text=text, level=level, slug=slug, occurrence_index=occurrence, line=line)
        )

    # Consecutive prose lines that could still be turned into a Setext heading.
    paragraph: List[str] = []
    paragraph_start = 0
    paragraph_eligible = False
    paragraph_depth = 0

    for source_line in classify_lines(document_text):
        if source_line.verbatim:
            paragraph = []
            continue

        # Headings may sit inside block quotes and list items.
        depth, line = _strip_block_quotes(source_line.text)
        if is_blank(line):
            paragraph = []
            continue

        atx = _atx_heading(_strip_list_markers(line))
        if atx is not None:
            paragraph = []
            level, text = atx
            if text:
                add(text, level, source_line.number)
            else:
                logger.debug("Skipping empty heading at line %d", source_line.number)
            continue

        setext = _SETEXT_RE.match(line)
        if setext and paragraph and paragraph_eligible and depth == paragraph_depth:
            level = 1 if setext.group("underline").startswith("=") else 2
            add(" ".join(part.strip() for part in paragraph), level, paragraph_start)
            paragraph = []
            continue

        if not paragraph:
            paragraph_start = source_line.number
            paragraph_depth = depth
            paragraph_eligible = indent_width(line) < 4 and not is_list_item(line)
            if setext and setext.group("underline").startswith("-"):
                # A dash line opening a block is a thematic break, not text.
                continue
        paragraph.append(line)

    return headings
