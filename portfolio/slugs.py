"""
URL slug derivation for project titles.
"""

from __future__ import annotations

import re

_DISALLOWED = re.compile(r"[^\w\s-]")
_SEPARATORS = re.compile(r"[\s_-]+")

# Path segments under /projects/ that are not project slugs.
RESERVED_SLUGS = frozenset({"featured"})


def derive_slug(text: str) -> str:
    """Lowercase, drop punctuation, join words with single hyphens."""
    slug = _DISALLOWED.sub("", (text or "").lower())
    slug = _SEPARATORS.sub("-", slug)
    return slug.strip("-")
