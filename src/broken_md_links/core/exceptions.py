"""Fatal errors raised by the link checker.

Broken links are *findings* and are reported as
:class:`~broken_md_links.checker.validator.ValidationError` records. The
exceptions below are reserved for conditions that stop a run: an input path
that does not exist, an input of the wrong type for the requested mode, or an
entry document that cannot be read.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class CheckerError(Exception):
    """Base class for errors that abort a link check."""


class InputNotFoundError(CheckerError):
    """Raised when the entry path does not exist."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Input path not found: {path}")


class NotAFileError(CheckerError):
    """Raised when a directory is given without recursive mode."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(
            f"Input is not a file: {path} - if you want to check a folder, "
            "use the '-r' / '--recursive' option"
        )


class NotAFolderError(CheckerError):
    """Raised when recursive mode is requested for something that is not a directory."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(
            f"Input is not a directory: {path} but '-r' / '--recursive' option was supplied"
        )


class ReadError(CheckerError):
    """Raised when a Markdown document cannot be read as UTF-8 text."""

    def __init__(self, path: Path, reason: Optional[BaseException] = None):
        self.path = path
        self.reason = reason
        message = f"Failed to read file at '{path}'"
        if reason is not None:
            message = f"{message}: {reason}"
        super().__init__(message)
