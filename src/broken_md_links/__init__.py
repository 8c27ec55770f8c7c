"""Detect broken links in Markdown files.

Library usage::

    from broken_md_links import DocumentCache, check_broken_links

    cache = DocumentCache()
    errors = check_broken_links("docs", recursive=True, cache=cache)

The cache is owned by the caller and can be reused across calls so that a
document referenced from many places is parsed only once.
"""

from broken_md_links.checker.cache import DocumentCache, DocumentSlugSet
from broken_md_links.checker.validator import (
    CheckOptions,
    CheckReport,
    ValidationError,
    check_broken_links,
    check_file,
    collect_broken_links,
)
from broken_md_links.core.enums import ErrorKind, LinkStyle, Verbosity
from broken_md_links.core.exceptions import (
    CheckerError,
    InputNotFoundError,
    NotAFileError,
    NotAFolderError,
    ReadError,
)
from broken_md_links.markdown.headings import Heading, extract_headings
from broken_md_links.markdown.links import LinkReference, extract_links
from broken_md_links.markdown.slugs import slugify

__version__ = "0.1.0"

__all__ = [
    "CheckOptions",
    "CheckReport",
    "CheckerError",
    "DocumentCache",
    "DocumentSlugSet",
    "ErrorKind",
    "Heading",
    "InputNotFoundError",
    "LinkReference",
    "LinkStyle",
    "NotAFileError",
    "NotAFolderError",
    "ReadError",
    "ValidationError",
    "Verbosity",
    "check_broken_links",
    "check_file",
    "collect_broken_links",
    "extract_headings",
    "extract_links",
    "slugify",
]
