"""Product service layer (Use Cases).

Orchestrates business logic for the Product aggregate, delegating
persistence to the injected ``IProductRepository``.

Slug assignment
---------------
A product gets its slug the first time it is persisted with a ``name``
and no ``slug``; afterwards the slug never changes, even on rename.

The uniqueness check (``make_unique_slug``) and the INSERT are two
separate statements, so two requests creating "Mouse" at the same time
can both resolve ``mouse``.  The UNIQUE index on ``products.slug``
rejects the loser; ``_save_with_slug`` then resolves again (now seeing
the winner's row) and retries once.  A second rejection is surfaced as
``SlugConflict`` rather than saving the product without a slug.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction

from modules.products.exceptions import (
    InvalidProductData,
    ProductAccessDenied,
    ProductNotFound,
    SlugConflict,
)
from modules.products.models import Product, ProductCategory
from modules.products.slugs import generate_slug, make_unique_slug

if TYPE_CHECKING:
    from django.contrib.auth.models import AbstractUser

    from modules.products.dtos import CreateProductDTO, UpdateProductDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

SLUG_SAVE_ATTEMPTS = 2


@dataclass(frozen=True)
class BackfillResult:
    updated: int
    errors: int

    def as_dict(self) -> Dict[str, int]:
        return {"updated": self.updated, "errors": self.errors}


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` via constructor injection.
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO, seller: AbstractUser) -> Product:
        """Create a new product owned by ``seller`` and assign its slug.

        Raises:
            SlugConflict: if the slug kept colliding with concurrent writes.
        """
        product = Product(
            seller=seller,
            name=dto.name,
            price=dto.price,
            discount_price=dto.discount_price,
            description=dto.description,
            category=dto.category,
            subcategory=dto.subcategory,
            brand=dto.brand,
            stock_quantity=dto.stock_quantity,
            is_active=dto.is_active,
            is_featured=dto.is_featured,
        )
        product = self._save(product)
        logger.info("product.created", product_id=str(product.id), slug=product.slug)
        return product

    @transaction.atomic
    def update_product(
        self, id: Any, dto: UpdateProductDTO, user: AbstractUser
    ) -> Product:
        """Update an existing product with the supplied fields.

        Raises:
            ProductNotFound: if the product does not exist.
            ProductAccessDenied: if ``user`` is neither the seller nor staff.
            InvalidProductData: if the discount would exceed the price.
            SlugConflict: see ``create_product``.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        self._check_can_modify(product, user)

        for field, value in dto.changes().items():
            setattr(product, field, value)

        if product.discount_price is not None and product.discount_price > product.price:
            raise InvalidProductData("Discount price cannot exceed price.")

        product = self._save(product)
        logger.info("product.updated", product_id=str(id))
        return product

    @transaction.atomic
    def delete_product(self, id: Any, user: AbstractUser) -> None:
        """Soft-delete a product.  Its slug stays reserved.

        Raises:
            ProductNotFound: if the product does not exist.
            ProductAccessDenied: if ``user`` is neither the seller nor staff.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        self._check_can_modify(product, user)

        if not self._repo.delete(product.id):
            raise ProductNotFound(f"Product {id} not found.")
        logger.info("product.deleted", product_id=str(id))

    def backfill_slugs(self) -> BackfillResult:
        """Assign slugs to every product that is missing one.

        Each product is saved in its own transaction; a failure is
        logged and counted so one bad row does not stop the batch.
        """
        products = self._repo.list_missing_slug()
        logger.info("product.slug_backfill_started", pending=len(products))

        updated = errors = 0
        for product in products:
            if not product.name:
                continue
            product.slug = None
            try:
                with transaction.atomic():
                    self._save(product)
            except (SlugConflict, DatabaseError) as exc:
                errors += 1
                logger.error(
                    "product.slug_backfill_failed",
                    product_id=str(product.id),
                    error=str(exc),
                )
                continue
            updated += 1

        result = BackfillResult(updated=updated, errors=errors)
        logger.info("product.slug_backfill_finished", **result.as_dict())
        return result

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self, filters: Optional[Dict[str, Any]] = None) -> List[Product]:
        """Return a list of live products, optionally filtered."""
        return self._repo.list(filters)

    def get_product(self, id: Any) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product

    def get_product_by_slug(self, slug: str) -> Product:
        """Retrieve a single product by its slug.

        Raises:
            ProductNotFound: if no live product has that slug.
        """
        product = self._repo.get_by_slug(slug)
        if not product:
            raise ProductNotFound(f"Product '{slug}' not found.")
        return product

    def list_categories(self) -> List[str]:
        return list(ProductCategory.values)

    # ------------------------------------------------------------------
    # Ownership
    # ------------------------------------------------------------------

    def _check_can_modify(self, product: Product, user: AbstractUser) -> None:
        if user.is_staff or product.seller_id == user.pk:
            return
        logger.warning(
            "product.access_denied",
            product_id=str(product.id),
            user_id=str(user.pk),
        )
        raise ProductAccessDenied("You can only modify your own products.")

    # ------------------------------------------------------------------
    # Slug assignment
    # ------------------------------------------------------------------

    def _save(self, product: Product) -> Product:
        if product.slug or not product.name:
            return self._repo.save(product)
        return self._save_with_slug(product)

    def _base_slug(self, name: str) -> str:
        fallback = getattr(settings, "PRODUCT_SLUG_FALLBACK", "product")
        return generate_slug(name) or generate_slug(fallback) or "product"

    def _save_with_slug(self, product: Product) -> Product:
        base = self._base_slug(product.name)
        log = logger.bind(product_id=str(product.id), base_slug=base)

        for attempt in range(1, SLUG_SAVE_ATTEMPTS + 1):
            product.slug = make_unique_slug(base, product.id, self._repo.slug_exists)
            try:
                saved = self._repo.save(product)
            except IntegrityError:
                if not self._repo.slug_exists(product.slug, product.id):
                    raise
                log.warning(
                    "product.slug_collision_retry",
                    slug=product.slug,
                    attempt=attempt,
                )
                continue
            log.info("product.slug_assigned", slug=saved.slug)
            return saved

        log.error("product.slug_conflict", slug=product.slug)
        raise SlugConflict(product.slug)
