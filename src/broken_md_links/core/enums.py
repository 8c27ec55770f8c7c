"""Shared enum definitions for link findings, link syntax and verbosity."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Categories of broken links reported by the validator."""

    MISSING_FILE = "missing_file"
    MISSING_HEADING = "missing_heading"
    NOT_A_FILE = "not_a_file"


class LinkStyle(str, Enum):
    """Markdown syntax a link target was written with."""

    INLINE = "inline"
    REFERENCE = "reference"
    COLLAPSED = "collapsed"
    SHORTCUT = "shortcut"


class Verbosity(str, Enum):
    """Ordered output levels accepted by the command line."""

    SILENT = "silent"
    ERRORS = "errors"
    WARN = "warn"
    INFO = "info"
    VERBOSE = "verbose"
    TRACE = "trace"
