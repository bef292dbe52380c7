"""
Slug generation.

Slugs are URL-safe alternate keys for articles: the lowercased title with
every run of non-alphanumerics collapsed to a hyphen, plus a short random
suffix. The suffix makes collisions unlikely; the store still enforces
uniqueness and callers retry on a clash.
"""

from __future__ import annotations

import re
import secrets
import string

SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
DEFAULT_SUFFIX_LENGTH = 6

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(title: str) -> str:
    """Lowercase the title and hyphenate it, without a suffix."""
    return _NON_ALNUM.sub("-", title.lower()).strip("-")


def random_suffix(length: int = DEFAULT_SUFFIX_LENGTH) -> str:
    return "".join(secrets.choice(SUFFIX_ALPHABET) for _ in range(length))


def generate_slug(title: str, suffix_length: int = DEFAULT_SUFFIX_LENGTH) -> str:
    """
    Derive a slug from a title.
    
    >>> generate_slug("Hi there!")  # doctest: +SKIP
    'hi-there-k3x9qa'
    
    A title with no alphanumerics at all yields just the suffix.
    """
    base = slugify(title)
    suffix = random_suffix(suffix_length)
    return f"{base}-{suffix}" if base else suffix
