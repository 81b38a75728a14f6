"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Look-ups follow the Null Object pattern: methods return ``None``
instead of raising, and the Service Layer decides how to translate a
missing entity into an API response.

``save`` runs inside ``transaction.atomic`` so that, when called from an
outer transaction, a duplicate-slug ``IntegrityError`` only rolls back to
its own savepoint and the caller can retry with a fresh slug.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q

from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: Any) -> Optional[Product]:
        """Retrieve a live product by primary key.

        Returns ``None`` for non-existent, soft-deleted or invalid IDs.
        """
        try:
            return Product.objects.alive().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_slug(self, slug: str) -> Optional[Product]:
        return Product.objects.alive().filter(slug=slug.strip().lower()).first()

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Product]:
        """List live products with optional Django ORM look-ups.

        Examples of valid filters::

            {"category": "Electronics"}
            {"name__icontains": "mouse"}
        """
        queryset = Product.objects.alive()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def slug_exists(self, slug: str, exclude_id: Optional[Any] = None) -> bool:
        queryset = Product.objects.filter(slug=slug)
        if exclude_id is not None:
            queryset = queryset.exclude(id=exclude_id)
        return queryset.exists()

    def list_missing_slug(self) -> List[Product]:
        return list(
            Product.objects.filter(Q(slug__isnull=True) | Q(slug="")).order_by("created_at")
        )

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        """Persist (create or update) a product.

        Raises:
            django.db.IntegrityError: if the slug is already held by
                another row.
        """
        entity.save()
        logger.info(
            "product.saved",
            product_id=str(entity.id),
            slug=entity.slug,
        )
        return entity

    @transaction.atomic
    def delete(self, id: Any) -> bool:
        """Soft-delete a product by ID.

        Returns ``True`` if the product was found and soft-deleted,
        ``False`` if no live product exists with the given ID.
        """
        product = self.get_by_id(id)
        if not product:
            return False
        product.delete()
        logger.info("product.soft_deleted", product_id=str(id))
        return True
