"""Product catalog model.

Business rules implemented here:
- Slug is unique across every product row, soft-deleted ones included
  (UNIQUE INDEX on ``slug``; NULL means "not assigned yet").
- Price must be greater than zero; discount price cannot exceed price.
- Stock quantity cannot be negative.
- Every product belongs to a seller (the user who listed it).
- Soft delete via ``deleted_at`` (inherited from SoftDeleteModel).

Slug assignment itself lives in the service layer
(``ProductService``), which owns the collision handling.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import SoftDeleteModel

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 2000
SLUG_MAX_LENGTH = 120


class ProductCategory(models.TextChoices):
    ELECTRONICS = "Electronics", "Electronics"
    FASHION = "Fashion", "Fashion"
    HOME_GARDEN = "Home & Garden", "Home & Garden"
    SPORTS = "Sports", "Sports"
    BOOKS = "Books", "Books"
    BEAUTY = "Beauty", "Beauty"
    TOYS = "Toys", "Toys"
    AUTOMOTIVE = "Automotive", "Automotive"
    HEALTH = "Health", "Health"
    FOOD_BEVERAGES = "Food & Beverages", "Food & Beverages"
    OTHER = "Other", "Other"


class Product(SoftDeleteModel):
    """Catalog product listed by a seller.

    ``slug`` is nullable so rows created before slug assignment (or
    imported in bulk) do not collide on the unique index; every product
    saved through ``ProductService`` gets a non-empty one.
    """

    seller = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="products",
    )
    name = models.CharField(max_length=NAME_MAX_LENGTH)
    slug = models.SlugField(
        max_length=SLUG_MAX_LENGTH,
        unique=True,
        null=True,
        blank=True,
        default=None,
    )
    description = models.TextField(max_length=DESCRIPTION_MAX_LENGTH, blank=True, default="")
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    discount_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        default=None,
        validators=[MinValueValidator(Decimal("0"))],
    )
    category = models.CharField(
        max_length=32,
        choices=ProductCategory.choices,
        default=ProductCategory.OTHER,
    )
    subcategory = models.CharField(max_length=100)
    brand = models.CharField(max_length=100, blank=True, default="")
    stock_quantity = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)
    is_featured = models.BooleanField(default=False)

    class Meta:
        db_table = "products"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["category", "subcategory"], name="products_category_idx"),
            models.Index(fields=["price"], name="products_price_idx"),
            models.Index(fields=["is_featured"], name="products_featured_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gt=0),
                name="products_price_positive",
            ),
        ]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.name:
            self.name = self.name.strip()
        if self.price is not None and self.price <= 0:
            raise ValidationError({"price": "Price must be greater than zero."})
        if (
            self.discount_price is not None
            and self.price is not None
            and self.discount_price > self.price
        ):
            raise ValidationError(
                {"discount_price": "Discount price cannot exceed price."}
            )

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args, **kwargs) -> None:
        if self.name:
            self.name = self.name.strip()
        if self.slug == "":
            self.slug = None
        super().save(*args, **kwargs)

    @property
    def effective_price(self) -> Decimal:
        """Price a customer pays: the discount price when one is set."""
        if self.discount_price is not None:
            return self.discount_price
        return self.price

    def __str__(self) -> str:
        return f"{self.name} ({self.slug or 'no slug'})"
