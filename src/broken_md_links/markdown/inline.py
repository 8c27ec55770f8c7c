"""Low-level scanning helpers for inline Markdown syntax.

These functions work on offsets into a document (or a heading's text) and are
shared by the heading and link extractors. None of them raise: when the syntax
at a given offset is not what was expected they return ``None`` and the caller
treats the characters as plain text.
"""

from __future__ import annotations

import re
import string
from typing import Optional, Tuple

ASCII_PUNCTUATION = frozenset(string.punctuation)

_HTML_TAG_RE = re.compile(
    r"<(?:/?[A-Za-z][A-Za-z0-9-]*(?:\s+[^<>]*?)?\s*/?|!--.*?--)>", re.DOTALL
)
_AUTOLINK_RE = re.compile(r"<([A-Za-z][A-Za-z0-9+.-]{1,31}:[^\s<>]*|[^\s<>@]+@[^\s<>@]+)>")


def unescape(text: str) -> str:
    """Remove backslash escapes in front of ASCII punctuation."""
    if "\\" not in text:
        return text
    out: list[str] = []
    index = 0
    while index < len(text):
        char = text[index]
        if char == "\\" and index + 1 < len(text) and text[index + 1] in ASCII_PUNCTUATION:
            out.append(text[index + 1])
            index += 2
            continue
        out.append(char)
        index += 1
    return "".join(out)


def find_unescaped(text: str, char: str) -> int:
    """Index of the first ``char`` not preceded by a backslash escape, or -1."""
    index = 0
    while index < len(text):
        current = text[index]
        if current == "\\":
            index += 2
            continue
        if current == char:
            return index
        index += 1
    return -1


def _backtick_run(text: str, start: int) -> int:
    end = start
    while end < len(text) and text[end] == "`":
        end += 1
    return end - start


def code_span(text: str, start: int) -> Optional[Tuple[int, int, int]]:
    """Match a code span opening at ``start``.

    Returns ``(content_start, content_end, end)`` or ``None`` when the backtick
    run has no closing run of the same length.
    """
    width = _backtick_run(text, start)
    search = start + width
    while True:
        candidate = text.find("`", search)
        if candidate < 0:
            return None
        run = _backtick_run(text, candidate)
        if run == width:
            return start + width, candidate, candidate + width
        search = candidate + run


def skip_code_span(text: str, start: int) -> int:
    """Offset just past the code span (or bare backtick run) at ``start``."""
    span = code_span(text, start)
    if span is None:
        return start + _backtick_run(text, start)
    return span[2]


def match_html(text: str, start: int) -> Optional[Tuple[str, int]]:
    """Match an autolink or inline HTML tag at ``start``.

    Returns ``(visible_text, end)``: the URL for an autolink, an empty string
    for a tag or comment.
    """
    autolink = _AUTOLINK_RE.match(text, start)
    if autolink:
        return autolink.group(1), autolink.end()
    tag = _HTML_TAG_RE.match(text, start)
    if tag:
        return "", tag.end()
    return None


def find_closing_bracket(text: str, start: int) -> Optional[int]:
    """Offset of the ``]`` balancing the ``[`` at ``start``.

    Escapes and code spans are skipped. A blank line ends the search since a
    link label cannot span paragraphs.
    """
    depth = 0
    index = start
    length = len(text)
    while index < length:
        char = text[index]
        if char == "\\":
            index += 2
            continue
        if char == "`":
            index = skip_code_span(text, index)
            continue
        if char == "\n" and _blank_line_follows(text, index):
            return None
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            if depth == 0:
                return index
        index += 1
    return None


def _blank_line_follows(text: str, newline: int) -> bool:
    end = text.find("\n", newline + 1)
    if end < 0:
        end = len(text)
    return not text[newline + 1 : end].strip()


def _skip_spaces(text: str, index: int, allow_newline: bool = True) -> int:
    seen_newline = False
    while index < len(text):
        char = text[index]
        if char in " \t":
            index += 1
        elif char == "\n" and allow_newline and not seen_newline:
            seen_newline = True
            index += 1
        else:
            break
    return index


def _parse_title(text: str, index: int) -> Optional[int]:
    opener = text[index]
    closer = ")" if opener == "(" else opener
    index += 1
    while index < len(text):
        char = text[index]
        if char == "\\":
            index += 2
            continue
        if char == "\n" and _blank_line_follows(text, index):
            return None
        if char == closer:
            return index + 1
        if opener == "(" and char == "(":
            return None
        index += 1
    return None


def parse_inline_destination(text: str, open_paren: int) -> Optional[Tuple[str, int]]:
    """Parse ``(destination "title")`` starting at the ``(`` at ``open_paren``.

    Returns the raw destination (escapes preserved, angle brackets removed) and
    the offset just past the closing ``)``.
    """
    length = len(text)
    index = _skip_spaces(text, open_paren + 1)
    if index >= length:
        return None

    if text[index] == "<":
        close = index + 1
        while close < length and text[close] not in "<>\n":
            if text[close] == "\\":
                close += 1
            close += 1
        if close >= length or text[close] != ">":
            return None
        destination = text[index + 1 : close]
        index = close + 1
    else:
        start = index
        depth = 0
        while index < length:
            char = text[index]
            if char == "\\":
                index += 2
                continue
            if char in " \t\n" or ord(char) < 0x20:
                break
            if char == "(":
                depth += 1
            elif char == ")":
                if depth == 0:
                    break
                depth -= 1
            index += 1
        if depth != 0:
            return None
        index = min(index, length)
        destination = text[start:index]

    before_title = index
    index = _skip_spaces(text, index)
    if index < length and text[index] in "\"'(" and index > before_title:
        title_end = _parse_title(text, index)
        if title_end is None:
            return None
        index = _skip_spaces(text, title_end)

    if index < length and text[index] == ")":
        return destination, index + 1
    return None
