"""Heading slug generation.

Slug convention used throughout the package:

1. Unicode text is NFKD-normalised and combining marks are dropped, so
   ``Café`` becomes ``Cafe``.
2. The text is lowercased.
3. Only ASCII letters, digits, ``-`` and whitespace are kept; every other
   character (punctuation, symbols, emoji, ``_``) is removed.
4. Each run of whitespace becomes a single ``-``. Hyphens already present are
   kept as they are, so ``A - B`` gives ``a---b`` like common renderers do.
5. Leading and trailing hyphens are trimmed.

The function is idempotent on its own output.
"""

from __future__ import annotations

import string
import unicodedata

_SLUG_CHARS = frozenset(string.ascii_lowercase + string.digits + "-")


def slugify(heading_text: str) -> str:
    """Slugify a Markdown heading.

    Examples:
        >>> slugify("My super header")
        'my-super-header'
        >>> slugify("I love headers!")
        'i-love-headers'
    """
    normalized = unicodedata.normalize("NFKD", heading_text)

    parts: list[str] = []
    pending_space = False
    # str.lower() may expand one character into several (e.g. "İ").
    for char in normalized.lower():
        if char.isspace():
            pending_space = True
            continue
        if char not in _SLUG_CHARS:
            continue
        if pending_space:
            parts.append("-")
            pending_space = False
        parts.append(char)

    return "".join(parts).strip("-")
