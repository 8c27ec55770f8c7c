"""Typer-based CLI that checks Markdown files for broken links."""

from pathlib import Path
from typing import Annotated, Optional

import typer
import yaml  # type: ignore[import-untyped]

from broken_md_links.checker.cache import DocumentCache
from broken_md_links.checker.validator import collect_broken_links
from broken_md_links.cli import exit_code_for, format_error, merge_options, summary_message
from broken_md_links.core.enums import Verbosity
from broken_md_links.core.exceptions import CheckerError
from broken_md_links.utils.config import ConfigManager
from broken_md_links.utils.logger import setup_logger

app = typer.Typer(help="Detect broken links in Markdown files", add_completion=False)


@app.command()
def check(
    input_path: Annotated[
        Path, typer.Argument(metavar="INPUT", help="Input file or directory")
    ],
    recursive: Annotated[
        bool,
        typer.Option("--recursive", "-r", help="Check all files in the input directory"),
    ] = False,
    verbosity: Annotated[
        Optional[Verbosity],
        typer.Option(
            "--verbosity",
            "-v",
            case_sensitive=False,
            help="Verbosity level (default: warn, or the configured one)",
            show_default=False,
        ),
    ] = None,
    ignore_header_links: Annotated[
        bool,
        typer.Option(
            "--ignore-header-links",
            help="Do not check if headers are valid in links (e.g. 'document.md#some-header')",
        ),
    ] = False,
    disallow_dir_links: Annotated[
        bool, typer.Option("--disallow-dir-links", help="Only accept links to files")
    ] = False,
    include_images: Annotated[
        bool, typer.Option("--include-images", help="Also check image sources")
    ] = False,
    no_error: Annotated[
        bool,
        typer.Option("--no-error", help="Convert all broken/invalid links errors to warnings"),
    ] = False,
    config: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            help="Path to a YAML config (default: nearest .broken-md-links.yaml)",
            show_default=False,
        ),
    ] = None,
    log_dir: Annotated[
        Optional[Path],
        typer.Option("--log-dir", help="Also write logs to a file in this directory"),
    ] = None,
) -> None:
    """Check links (and the headers they point to) in Markdown files."""
    try:
        cfg = ConfigManager(config_path=str(config) if config else None)
        output = cfg.output_config
        configured_options = cfg.check_options
    except (OSError, yaml.YAMLError, ValueError) as exc:
        raise typer.BadParameter(f"Invalid configuration: {exc}", param_hint="--config")

    level = verbosity or output.verbosity
    logger = setup_logger(
        "broken_md_links",
        verbosity=level,
        log_dir=str(log_dir) if log_dir else output.log_dir,
    )
    options = merge_options(
        configured_options,
        ignore_header_links=ignore_header_links,
        disallow_dir_links=disallow_dir_links,
        include_images=include_images,
    )

    try:
        report = collect_broken_links(input_path, recursive, options, DocumentCache())
    except CheckerError as exc:
        logger.error("%s", exc)
        raise typer.Exit(code=1)

    if report.error_count == 0:
        logger.info("OK. Checked %d file(s).", report.files_checked)
        return

    message = "\n".join(
        [summary_message(report.error_count)] + [format_error(error) for error in report.errors]
    )
    if no_error:
        logger.warning(message)
    else:
        logger.error(message)
    raise typer.Exit(code=exit_code_for(report.error_count, level, no_error))


if __name__ == "__main__":
    app()
