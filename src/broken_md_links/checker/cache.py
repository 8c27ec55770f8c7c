"""Per-run cache of heading slugs, keyed by canonical file path."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, Tuple, Union

from broken_md_links.core.exceptions import ReadError
from broken_md_links.markdown.headings import Heading, extract_headings
from broken_md_links.utils.logger import TRACE
from broken_md_links.utils.paths import display_path

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass(frozen=True)
class DocumentSlugSet:
    """Heading slugs of one document."""

    file_path: Path
    slugs: frozenset[str]
    headings: Tuple[Heading, ...] = ()

    def __contains__(self, slug: object) -> bool:
        return slug in self.slugs


def canonicalize(path: PathLike) -> Path:
    """Resolve ``.``/``..`` components and symlinks into a cache key."""
    return Path(path).resolve()


def read_markdown(path: Path) -> str:
    """Read a document as UTF-8 text, wrapping failures in :class:`ReadError`."""
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ReadError(path, exc) from exc
    logger.log(
        TRACE, "In '%s': just read file, which is %d bytes long.", display_path(path), len(content)
    )
    return content


class DocumentCache:
    """Caller-owned memo of parsed heading slugs.

    Entries are add-only: once a document has been parsed it is never re-read
    during the cache's lifetime, so a directory-wide run parses each link
    target at most once however many documents point at it. The cache assumes
    files are not modified while it is alive.
    """

    def __init__(self) -> None:
        self._entries: Dict[Path, DocumentSlugSet] = {}
        self.hits = 0
        self.misses = 0

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, Path)):
            return False
        return canonicalize(path) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Path]:
        return iter(self._entries)

    def _store(self, key: Path, text: str) -> DocumentSlugSet:
        logger.debug("Generating slugs for file: %s", display_path(key))
        headings = tuple(extract_headings(text))
        entry = DocumentSlugSet(
            file_path=key,
            slugs=frozenset(heading.slug for heading in headings),
            headings=headings,
        )
        self._entries[key] = entry
        return entry

    def get_slugs(self, path: PathLike) -> DocumentSlugSet:
        """Return the slug set of ``path``, reading and parsing it on first use.

        Raises:
            ReadError: if the file cannot be read as UTF-8 text.
        """
        key = canonicalize(path)
        entry = self._entries.get(key)
        if entry is not None:
            self.hits += 1
            return entry
        self.misses += 1
        return self._store(key, read_markdown(key))

    def seed(self, path: PathLike, text: str) -> DocumentSlugSet:
        """Register a document whose text is already in memory.

        An existing entry is kept and returned unchanged.
        """
        key = canonicalize(path)
        entry = self._entries.get(key)
        if entry is not None:
            return entry
        return self._store(key, text)
