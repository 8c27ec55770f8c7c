"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import logging
import sys
import textwrap
from pathlib import Path
from typing import Callable, Dict, Iterator

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

for candidate in (ROOT, SRC):
    if candidate.exists() and str(candidate) not in sys.path:  # pragma: no cover
        sys.path.insert(0, str(candidate))

import pytest


@pytest.fixture
def write_docs(tmp_path: Path) -> Callable[[Dict[str, str]], Path]:
    """Write a tree of Markdown documents under ``tmp_path`` and return the root.

    Keys are paths relative to the root, values are dedented file contents.
    """

    def factory(files: Dict[str, str]) -> Path:
        for relative, content in files.items():
            path = tmp_path / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
        return tmp_path

    return factory


@pytest.fixture(autouse=True)
def reset_package_logger() -> Iterator[None]:
    """Undo ``setup_logger`` side effects so tests do not leak handlers or levels."""

    yield
    logger = logging.getLogger("broken_md_links")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
