"""Product repository interface.

Extends ``IRepository[Product]`` with the look-ups slug assignment
relies on: an existence check that can exclude the product being
saved, and the set of products still missing a slug.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List["Product"]:
        """List live (not soft-deleted) products with optional filters."""

    @abstractmethod
    def get_by_slug(self, slug: str) -> Optional["Product"]:
        """Retrieve a live product by slug."""

    @abstractmethod
    def slug_exists(self, slug: str, exclude_id: Optional[Any] = None) -> bool:
        """Return ``True`` if another product already holds ``slug``.

        Soft-deleted products count: the unique index covers them too.
        """

    @abstractmethod
    def list_missing_slug(self) -> List["Product"]:
        """Products whose slug is NULL or empty."""
