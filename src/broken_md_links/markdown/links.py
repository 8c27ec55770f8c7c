"""Link extraction.

Scans a Markdown document for link targets:

* inline links ``[label](target "title")``,
* reference links ``[label][id]``, ``[label][]`` and ``[label]`` resolved
  through ``[id]: target "title"`` definitions placed anywhere in the document,
* images ``![alt](src)`` when ``include_images`` is set.

Code blocks, code spans, front matter, HTML comments and autolinks are never
scanned. Unparseable link-like text is treated as plain text.
"""

from __future__ import annotations

import bisect
import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
from urllib.parse import unquote

from broken_md_links.core.enums import LinkStyle
from broken_md_links.markdown.blocks import mask_verbatim, split_lines
from broken_md_links.markdown.inline import (
    find_closing_bracket,
    find_unescaped,
    match_html,
    parse_inline_destination,
    skip_code_span,
    unescape,
)

logger = logging.getLogger(__name__)

_DEFINITION_RE = re.compile(
    r"^ {0,3}\[(?P<label>(?:[^\[\]\\]|\\.){1,999})\]:[ \t]*"
    r"(?:<(?P<angle>[^<>\n]*)>|(?P<bare>\S+))"
    r"(?:[ \t]+(?:\"[^\"]*\"|'[^']*'|\([^()]*\)))?[ \t]*$"
)
# A scheme needs at least two characters so Windows drive letters stay paths.
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]+:")
# "[ ]" and "[x]" open task list items.
_TASK_MARKERS = frozenset({"", "x"})


@dataclass(frozen=True)
class LinkReference:
    """A link target found in a document, split into path and fragment.

    ``path`` is the unresolved path portion (``None`` for a pure ``#fragment``
    link); resolving it against the source document's directory is left to the
    validator.
    """

    raw_target: str
    path: Optional[str]
    fragment: Optional[str]
    source_line: int
    style: LinkStyle = LinkStyle.INLINE
    label: str = ""
    is_image: bool = False
    is_external: bool = False


def normalize_label(label: str) -> str:
    """Case-fold a reference label and collapse its inner whitespace."""
    return " ".join(label.split()).casefold()


def is_external_target(target: str) -> bool:
    """Whether a raw target is a URL (``https:``, ``mailto:``, ``//host``...)."""
    return bool(_SCHEME_RE.match(target)) or target.startswith("//")


def split_target(raw_target: str) -> Tuple[Optional[str], Optional[str]]:
    """Split a raw link target on its first unescaped ``#``.

    Returns ``(path, fragment)``. The path loses any ``?query`` part; both
    pieces are unescaped and percent-decoded. A target starting with ``#``
    has no path.
    """
    hash_index = find_unescaped(raw_target, "#")
    if hash_index < 0:
        path_part, fragment = raw_target, None
    else:
        path_part = raw_target[:hash_index]
        fragment = unquote(unescape(raw_target[hash_index + 1 :]))

    query_index = find_unescaped(path_part, "?")
    if query_index >= 0:
        path_part = path_part[:query_index]

    path = unquote(unescape(path_part)) if path_part else None
    return path, fragment


def _collect_definitions(lines: List[str]) -> Tuple[Dict[str, str], List[int]]:
    definitions: Dict[str, str] = {}
    definition_lines: List[int] = []
    for index, line in enumerate(lines):
        match = _DEFINITION_RE.match(line)
        if not match or match.group("label").startswith("^"):
            continue
        destination = match.group("angle")
        if destination is None:
            destination = match.group("bare")
        definitions.setdefault(normalize_label(match.group("label")), destination)
        definition_lines.append(index)
    return definitions, definition_lines


class _LinkScanner:
    """Single pass over a masked document emitting :class:`LinkReference` objects."""

    def __init__(self, text: str, definitions: Dict[str, str], include_images: bool):
        self.text = text
        self.definitions = definitions
        self.include_images = include_images
        self.links: List[LinkReference] = []
        self._line_starts = [0] + [i + 1 for i, char in enumerate(text) if char == "\n"]

    def line_of(self, offset: int) -> int:
        return bisect.bisect_right(self._line_starts, offset)

    def missing(self, label: str, offset: int) -> None:
        logger.warning("Missing target for link '%s' at line %d", label, self.line_of(offset))

    def emit(
        self,
        raw_target: str,
        offset: int,
        style: LinkStyle,
        label: str,
        is_image: bool,
    ) -> None:
        target = raw_target.strip()
        if not target:
            logger.debug("Ignoring link with an empty target at line %d", self.line_of(offset))
            return
        if is_image and not self.include_images:
            return
        path, fragment = split_target(target)
        self.links.append(
            LinkReference(
                raw_target=target,
                path=path,
                fragment=fragment,
                source_line=self.line_of(offset),
                style=style,
                label=label,
                is_image=is_image,
                is_external=is_external_target(target),
            )
        )

    def scan(self, start: int, end: int, images_only: bool = False) -> None:
        text = self.text
        index = start
        while index < end:
            char = text[index]

            if char == "\\":
                index += 2
                continue
            if char == "`":
                index = skip_code_span(text, index)
                continue
            if char == "<":
                html = match_html(text, index)
                index = html[1] if html is not None else index + 1
                continue

            is_image = char == "!" and index + 1 < end and text[index + 1] == "["
            opening = index + 1 if is_image else index
            if text[opening] != "[":
                index += 1
                continue

            consumed = self._bracket(opening, end, is_image, images_only)
            index = consumed if consumed is not None else opening + 1

    def _bracket(
        self, opening: int, end: int, is_image: bool, images_only: bool
    ) -> Optional[int]:
        """Handle the ``[`` at ``opening``; return the offset to resume from."""
        text = self.text
        close = find_closing_bracket(text, opening)
        if close is None or close >= end:
            return None
        label = text[opening + 1 : close]
        start = opening - 1 if is_image else opening
        after = close + 1
        may_emit = is_image or not images_only

        if after < end and text[after] == "(":
            parsed = parse_inline_destination(text, after)
            if parsed is not None and parsed[1] <= end:
                if may_emit:
                    self.emit(parsed[0], start, LinkStyle.INLINE, label, is_image)
                # Images inside a link label (badges) are links of their own.
                self.scan(opening + 1, close, images_only=True)
                return parsed[1]

        if after < end and text[after] == "[":
            reference_close = text.find("]", after + 1)
            reference = text[after + 1 : reference_close] if reference_close >= 0 else None
            if reference is not None and "[" not in reference and reference_close < end:
                style = LinkStyle.REFERENCE if reference.strip() else LinkStyle.COLLAPSED
                key = normalize_label(reference if reference.strip() else label)
                destination = self.definitions.get(key)
                if destination is None:
                    self.missing(key, start)
                    return reference_close + 1
                if may_emit:
                    self.emit(destination, start, style, label, is_image)
                self.scan(opening + 1, close, images_only=True)
                return reference_close + 1

        if not label.startswith("^"):
            destination = self.definitions.get(normalize_label(label))
            if destination is not None:
                if may_emit:
                    self.emit(destination, start, LinkStyle.SHORTCUT, label, is_image)
                self.scan(opening + 1, close, images_only=True)
                return after
            if not images_only and normalize_label(label) not in _TASK_MARKERS:
                self.missing(normalize_label(label), start)
        return None


def extract_links(document_text: str, include_images: bool = False) -> List[LinkReference]:
    """Return the link targets of a document in order of appearance."""

    lines = split_lines(mask_verbatim(document_text))
    definitions, definition_lines = _collect_definitions(lines)
    for index in definition_lines:
        lines[index] = ""

    text = "\n".join(lines)
    scanner = _LinkScanner(text, definitions, include_images)
    scanner.scan(0, len(text))
    return scanner.links
