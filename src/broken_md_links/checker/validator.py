"""Link resolution and validation.

For every link of a Markdown document the validator:

1. skips external URLs,
2. resolves the path portion against the *source document's* directory (a
   pure ``#fragment`` link targets the source document itself),
3. reports a missing target as :attr:`ErrorKind.MISSING_FILE`,
4. for links with a fragment, looks the target's heading slugs up in the
   caller's :class:`DocumentCache` and reports
   :attr:`ErrorKind.MISSING_HEADING` when no heading matches.

Findings are accumulated and returned; only problems with the entry path
itself are raised (see :mod:`broken_md_links.core.exceptions`).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from broken_md_links.checker.cache import DocumentCache, canonicalize, read_markdown
from broken_md_links.checker.walker import iter_markdown_files
from broken_md_links.core.enums import ErrorKind
from broken_md_links.core.exceptions import (
    InputNotFoundError,
    NotAFileError,
    NotAFolderError,
    ReadError,
)
from broken_md_links.markdown.links import LinkReference, extract_links
from broken_md_links.markdown.slugs import slugify
from broken_md_links.utils.logger import TRACE
from broken_md_links.utils.paths import display_path

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass(frozen=True)
class CheckOptions:
    """Behavioural switches of a check run."""

    ignore_header_links: bool = False
    disallow_dir_links: bool = False
    include_images: bool = False
    markdown_extensions: Tuple[str, ...] = (".md",)
    # Base directory for links starting with "/"; None keeps them filesystem-absolute.
    root_dir: Optional[Path] = None
    exclude: Tuple[str, ...] = (".git",)

    def is_markdown(self, path: Path) -> bool:
        return path.suffix.lower() in {ext.lower() for ext in self.markdown_extensions}


@dataclass(frozen=True)
class ValidationError:
    """A broken link found in a source document."""

    source_file: Path
    link: LinkReference
    kind: ErrorKind
    message: str
    target: Optional[Path] = None

    @property
    def line(self) -> int:
        return self.link.source_line


@dataclass
class CheckReport:
    """Accumulated findings of a run, in discovery order."""

    errors: List[ValidationError] = field(default_factory=list)
    files_checked: int = 0

    @property
    def error_count(self) -> int:
        return len(self.errors)

    def extend(self, errors: Iterable[ValidationError]) -> None:
        self.errors.extend(errors)
        self.files_checked += 1


def resolve_target(source: Path, link: LinkReference, options: CheckOptions) -> Path:
    """Canonical path a link points to, relative to its source document."""
    if link.path is None:
        return canonicalize(source)
    if link.path.startswith("/") and options.root_dir is not None:
        return canonicalize(Path(options.root_dir) / link.path.lstrip("/"))
    return canonicalize(source.parent / link.path)


class _FileChecker:
    """Checks the links of one source document."""

    def __init__(self, source: Path, text: str, options: CheckOptions, cache: DocumentCache):
        self.source = source
        self.text = text
        self.options = options
        self.cache = cache
        self.shown = display_path(source)

    def error(
        self, link: LinkReference, kind: ErrorKind, message: str, target: Optional[Path]
    ) -> ValidationError:
        logger.error("In '%s' (line %d): %s", self.shown, link.source_line, message)
        return ValidationError(
            source_file=self.source, link=link, kind=kind, message=message, target=target
        )

    def check(self, link: LinkReference) -> Optional[ValidationError]:
        if link.is_external:
            logger.log(TRACE, "In '%s': skipping external link '%s'", self.shown, link.raw_target)
            return None

        try:
            target = resolve_target(self.source, link, self.options)
            exists = link.path is None or target.exists()
            is_dir = exists and link.path is not None and target.is_dir()
        except (OSError, ValueError) as exc:
            # Null bytes, over-long names and the like cannot name a file.
            return self.error(
                link,
                ErrorKind.MISSING_FILE,
                f"Broken link found: path '{link.raw_target}' cannot be resolved ({exc})",
                None,
            )
        target_shown = display_path(target)

        if link.path is not None:
            if not exists:
                return self.error(
                    link,
                    ErrorKind.MISSING_FILE,
                    f"Broken link found: path '{target_shown}' does not exist",
                    target,
                )
            if is_dir:
                if self.options.disallow_dir_links:
                    return self.error(
                        link,
                        ErrorKind.NOT_A_FILE,
                        f"Invalid link found: path '{target_shown}' is a directory",
                        target,
                    )
                if link.fragment and not self.options.ignore_header_links:
                    return self.error(
                        link,
                        ErrorKind.NOT_A_FILE,
                        f"Invalid header link found: path '{target_shown}' exists but is not a file",
                        target,
                    )
                logger.log(TRACE, "In '%s': valid link found: %s", self.shown, target_shown)
                return None

        if not link.fragment or self.options.ignore_header_links:
            logger.log(TRACE, "In '%s': valid link found: %s", self.shown, target_shown)
            return None

        if link.path is not None and not self.options.is_markdown(target):
            logger.debug(
                "In '%s': not checking header '%s' of non-Markdown file '%s'",
                self.shown,
                link.fragment,
                target_shown,
            )
            return None

        logger.debug(
            "In '%s': now checking link '%s' from file '%s'", self.shown, link.fragment, target_shown
        )
        try:
            if link.path is None:
                slugs = self.cache.seed(self.source, self.text)
            else:
                slugs = self.cache.get_slugs(target)
        except ReadError as exc:
            return self.error(
                link,
                ErrorKind.MISSING_FILE,
                f"Broken link found: path '{target_shown}' could not be read ({exc.reason})",
                target,
            )

        # Generated suffixes such as "-1" are matched verbatim since slugify would trim them.
        if link.fragment not in slugs and slugify(link.fragment) not in slugs:
            return self.error(
                link,
                ErrorKind.MISSING_HEADING,
                f"Broken link found: header '{link.fragment}' not found in '{target_shown}'",
                target,
            )

        logger.log(TRACE, "In '%s': valid header link found: %s", self.shown, link.fragment)
        return None


def check_file(
    path: PathLike,
    options: Optional[CheckOptions] = None,
    cache: Optional[DocumentCache] = None,
) -> List[ValidationError]:
    """Check every link of one Markdown document.

    Raises:
        ReadError: if the document itself cannot be read.
    """
    options = options or CheckOptions()
    cache = cache if cache is not None else DocumentCache()
    source = canonicalize(path)

    logger.info("Analyzing: %s", display_path(path))
    text = read_markdown(source)

    checker = _FileChecker(source, text, options, cache)
    errors: List[ValidationError] = []
    for link in extract_links(text, include_images=options.include_images):
        error = checker.check(link)
        if error is not None:
            errors.append(error)
    return errors


def collect_broken_links(
    path: PathLike,
    recursive: bool = False,
    options: Optional[CheckOptions] = None,
    cache: Optional[DocumentCache] = None,
) -> CheckReport:
    """Check a file, or every Markdown file below a directory when ``recursive``.

    The ``cache`` is shared by all checked documents and may be reused by the
    caller across calls.

    Raises:
        InputNotFoundError: if ``path`` does not exist.
        NotAFileError: if ``path`` is a directory and ``recursive`` is off.
        NotAFolderError: if ``recursive`` is on and ``path`` is not a directory.
        ReadError: if a checked document or directory cannot be read.
    """
    options = options or CheckOptions()
    cache = cache if cache is not None else DocumentCache()
    entry = Path(path)

    if not entry.exists():
        raise InputNotFoundError(entry)

    if recursive:
        if not entry.is_dir():
            raise NotAFolderError(entry)
        logger.debug("Analyzing directory: %s", display_path(entry))
        files: Iterable[Path] = iter_markdown_files(
            entry, options.markdown_extensions, options.exclude
        )
    else:
        if not entry.is_file():
            raise NotAFileError(entry)
        files = [entry]

    report = CheckReport()
    for markdown_file in files:
        report.extend(check_file(markdown_file, options, cache))
    return report


def check_broken_links(
    path: PathLike,
    recursive: bool = False,
    options: Optional[CheckOptions] = None,
    cache: Optional[DocumentCache] = None,
) -> int:
    """Check broken links in a Markdown file or directory.

    Returns the number of broken and invalid links; see
    :func:`collect_broken_links` for the per-error detail and the raised errors.

    Examples:
        >>> cache = DocumentCache()
        >>> check_broken_links("docs", recursive=True, cache=cache)  # doctest: +SKIP
        0
    """
    return collect_broken_links(path, recursive, options, cache).error_count
