"""Helpers bridging the Typer command with the link checker."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Union

from broken_md_links.checker.validator import CheckOptions, ValidationError
from broken_md_links.core.enums import Verbosity
from broken_md_links.utils.paths import relative_to_cwd


def merge_options(
    configured: CheckOptions,
    *,
    ignore_header_links: bool,
    disallow_dir_links: bool,
    include_images: bool,
) -> CheckOptions:
    """Apply command-line switches on top of the configured options.

    Flags can only turn a behaviour on; leaving a flag out keeps the
    configured value.
    """
    return replace(
        configured,
        ignore_header_links=configured.ignore_header_links or ignore_header_links,
        disallow_dir_links=configured.disallow_dir_links or disallow_dir_links,
        include_images=configured.include_images or include_images,
    )


def summary_message(error_count: int) -> str:
    return f"Found {error_count} broken or invalid link{'s' if error_count > 1 else ''}!"


def format_error(error: ValidationError) -> str:
    """One report line, e.g. ``* In docs/a.md:12: Broken link found: ...``."""
    return f"* In {relative_to_cwd(Path(error.source_file))}:{error.line}: {error.message}"


def exit_code_for(error_count: int, verbosity: Union[Verbosity, str], no_error: bool) -> int:
    """Process exit code for a finished run.

    Broken links fail the run unless ``--no-error`` downgraded them to a
    warning or the output is silenced.
    """
    if error_count == 0 or no_error or Verbosity(verbosity) is Verbosity.SILENT:
        return 0
    return 1
