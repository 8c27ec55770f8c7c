"""Block-level line classification for Markdown documents.

Headings and links are only meaningful in prose. This module walks a document
line by line and flags the lines whose content must be taken literally:

* fenced code blocks (```` ``` ```` or ``~~~``, closed by a fence of the same
  character that is at least as long, unclosed fences run to the end),
* indented code blocks (four columns of indentation after a blank line, outside
  of list items),
* YAML front matter delimited by ``---`` on the very first line,
* block-level HTML comments (``<!-- ... -->``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

_FENCE_OPEN_RE = re.compile(r"^ {0,3}(?P<fence>`{3,}|~{3,})(?P<info>.*)$")
_LIST_ITEM_RE = re.compile(r"^ {0,3}(?:[-+*]|\d{1,9}[.)])(?:[ \t]|$)")
_BLOCK_QUOTE_RE = re.compile(r"^ {0,3}>")
_FRONT_MATTER_END = ("---", "...")


@dataclass(frozen=True)
class SourceLine:
    """One physical line of a document and whether it is verbatim content."""

    number: int
    text: str
    verbatim: bool


def split_lines(text: str) -> List[str]:
    """Split on ``\\n`` only, dropping a trailing ``\\r`` from each line."""
    return [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]


def is_blank(line: str) -> bool:
    return not line.strip()


def indent_width(line: str) -> int:
    """Columns of leading whitespace, with tabs advancing to the next multiple of 4."""
    width = 0
    for char in line:
        if char == " ":
            width += 1
        elif char == "\t":
            width += 4 - (width % 4)
        else:
            break
    return width


def is_list_item(line: str) -> bool:
    return bool(_LIST_ITEM_RE.match(line))


def is_block_quote(line: str) -> bool:
    return bool(_BLOCK_QUOTE_RE.match(line))


def _front_matter_end(lines: List[str]) -> Optional[int]:
    if not lines or lines[0].rstrip() != "---":
        return None
    for index in range(1, len(lines)):
        if lines[index].rstrip() in _FRONT_MATTER_END:
            return index
    return None


def classify_lines(text: str) -> List[SourceLine]:
    """Return every line of ``text`` tagged as prose or verbatim content."""

    lines = split_lines(text)
    verbatim = [False] * len(lines)

    start = 0
    front_matter_end = _front_matter_end(lines)
    if front_matter_end is not None:
        for index in range(front_matter_end + 1):
            verbatim[index] = True
        start = front_matter_end + 1

    fence: Optional[str] = None
    in_comment = False
    in_indented_code = False
    in_list = False
    previous_blank = True

    for index in range(start, len(lines)):
        line = lines[index]
        blank = is_blank(line)

        if fence is not None:
            verbatim[index] = True
            stripped = line.strip()
            if (
                indent_width(line) < 4
                and stripped.startswith(fence)
                and set(stripped) == {fence[0]}
            ):
                fence = None
            previous_blank = False
            continue

        if in_comment:
            verbatim[index] = True
            if "-->" in line:
                in_comment = False
            previous_blank = False
            continue

        if in_indented_code:
            if blank or indent_width(line) >= 4:
                verbatim[index] = True
                previous_blank = blank
                continue
            in_indented_code = False

        if blank:
            previous_blank = True
            continue

        indent = indent_width(line)
        if indent >= 4 and previous_blank and not in_list:
            in_indented_code = True
            verbatim[index] = True
            previous_blank = False
            continue

        match = _FENCE_OPEN_RE.match(line)
        if match and not (match.group("fence")[0] == "`" and "`" in match.group("info")):
            fence = match.group("fence")
            verbatim[index] = True
            previous_blank = False
            continue

        if indent < 4 and line.lstrip().startswith("<!--"):
            verbatim[index] = True
            in_comment = "-->" not in line.split("<!--", 1)[1]
            previous_blank = False
            continue

        if is_list_item(line):
            in_list = True
        elif indent == 0 and previous_blank:
            in_list = False
        previous_blank = False

    return [
        SourceLine(number=index + 1, text=line, verbatim=verbatim[index])
        for index, line in enumerate(lines)
    ]


def mask_verbatim(text: str) -> str:
    """Blank out verbatim lines while keeping the document's line numbering."""
    return "\n".join(
        "" if line.verbatim else line.text for line in classify_lines(text)
    )
