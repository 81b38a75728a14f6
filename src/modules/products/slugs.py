"""Product slug generation.

``generate_slug`` turns a display name into a URL-safe candidate and
``make_unique_slug`` suffixes it (``-1``, ``-2``, ...) until the
supplied ``exists`` look-up reports it free.  Both are pure: all
persistence goes through the ``exists`` callable, so collisions caused
by concurrent writers are handled by the caller (see
``ProductService``).

Characters outside ``[a-z0-9]`` are dropped after lowercasing, so
accented letters disappear rather than being transliterated::

    >>> generate_slug("Café Table")
    'caf-table'
"""

from __future__ import annotations

import re
from typing import Any, Callable, Optional

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")

SlugExists = Callable[[str, Optional[Any]], bool]


def generate_slug(name: str) -> str:
    """Return the URL-safe slug candidate for ``name`` (possibly empty)."""
    slug = _DISALLOWED.sub("", name.lower())
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHENS.sub("-", slug)
    return slug.strip("-")


def make_unique_slug(candidate: str, exclude_id: Optional[Any], exists: SlugExists) -> str:
    """Return ``candidate`` or the first ``candidate-N`` not taken.

    ``exclude_id`` is the product being saved, so re-saving a product
    with its own slug does not count as a collision.
    """
    slug = candidate
    counter = 1
    while exists(slug, exclude_id):
        slug = f"{candidate}-{counter}"
        counter += 1
    return slug
