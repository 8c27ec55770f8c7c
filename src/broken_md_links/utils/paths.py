"""Path helpers for log and report output."""

from __future__ import annotations

from pathlib import Path, PurePath
from typing import List, Union


def display_path(path: Union[str, PurePath]) -> str:
    """Lexically normalise a path for display, without touching the filesystem.

    ``.`` components are dropped and ``..`` removes the previous normal
    component. When there is nothing left to remove, a relative path keeps its
    ``..`` so it stays relative; an absolute one drops it.

    Examples:
        >>> display_path("../a/b/../c")
        '../a/c'
    """
    pure = PurePath(path)
    anchor = pure.anchor
    parts: List[str] = []
    for part in pure.parts[1:] if anchor else pure.parts:
        if part == ".":
            continue
        if part == "..":
            if parts and parts[-1] != "..":
                parts.pop()
            elif not anchor:
                parts.append(part)
            continue
        parts.append(part)
    if not anchor and not parts:
        return "."
    return str(PurePath(anchor, *parts))


def relative_to_cwd(path: Path) -> str:
    """Show ``path`` relative to the working directory when it lies below it."""
    try:
        return display_path(path.relative_to(Path.cwd()))
    except ValueError:
        return display_path(path)
