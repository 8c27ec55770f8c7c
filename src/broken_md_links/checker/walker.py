"""Deterministic discovery of Markdown files below a directory."""

from __future__ import annotations

import logging
from fnmatch import fnmatch
from pathlib import Path
from typing import Iterable, Iterator

from broken_md_links.core.exceptions import ReadError
from broken_md_links.utils.paths import display_path

logger = logging.getLogger(__name__)


def iter_markdown_files(
    root: Path,
    extensions: Iterable[str] = (".md",),
    exclude: Iterable[str] = (".git",),
) -> Iterator[Path]:
    """Yield Markdown files below ``root`` depth-first, in name order.

    Entries whose name matches one of the ``exclude`` glob patterns are
    skipped, as are symbolic links to directories (they could loop).

    Raises:
        ReadError: if a directory cannot be listed.
    """
    suffixes = {extension.lower() for extension in extensions}
    patterns = tuple(exclude)
    try:
        entries = sorted(root.iterdir(), key=lambda entry: entry.name)
    except OSError as exc:
        raise ReadError(root, exc) from exc

    for entry in entries:
        if any(fnmatch(entry.name, pattern) for pattern in patterns):
            logger.debug("Skipping excluded item: %s", display_path(entry))
            continue
        if entry.is_dir():
            if entry.is_symlink():
                logger.warning(
                    "Item at path '%s' is a symbolic link to a directory so it will be ignored",
                    display_path(entry),
                )
                continue
            yield from iter_markdown_files(entry, suffixes, patterns)
        elif entry.is_file():
            if entry.suffix.lower() in suffixes:
                yield entry
        else:
            logger.warning(
                "Item at path '%s' is neither a file nor a directory so it will be ignored",
                display_path(entry),
            )
