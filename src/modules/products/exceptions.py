"""Product domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations


class ProductNotFound(Exception):
    """The requested product does not exist or has been soft-deleted."""


class SlugConflict(Exception):
    """A unique slug could not be persisted.

    Raised when the database rejected the resolved slug twice in a row,
    i.e. concurrent writers kept claiming the same value.
    """

    def __init__(self, slug: str) -> None:
        super().__init__(f"Slug '{slug}' is already taken.")
        self.slug = slug


class InvalidProductData(Exception):
    """An update would leave the product in an invalid state."""


class ProductAccessDenied(Exception):
    """The acting user neither owns the product nor is staff."""
