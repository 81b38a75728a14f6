"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF views) and the
Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateProductDTO``: input for product creation.
- ``UpdateProductDTO``: input for partial product updates.
- ``ProductOutputDTO``: output with all product fields.

``slug`` is deliberately absent from the input DTOs: it is always
derived from ``name`` by the service.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from modules.products.models import (
    DESCRIPTION_MAX_LENGTH,
    NAME_MAX_LENGTH,
    ProductCategory,
)

if TYPE_CHECKING:
    from modules.products.models import Product


def _check_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Name must not be empty.")
    if len(v) > NAME_MAX_LENGTH:
        raise ValueError(f"Name cannot exceed {NAME_MAX_LENGTH} characters.")
    return v


def _check_category(v: str) -> str:
    if v not in ProductCategory.values:
        raise ValueError(f"Unknown category '{v}'.")
    return v


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests."""

    model_config = ConfigDict(frozen=True)

    name: str
    price: Decimal
    category: str
    subcategory: str
    description: str = ""
    discount_price: Decimal | None = None
    brand: str = ""
    stock_quantity: int = 0
    is_active: bool = True
    is_featured: bool = False

    @field_validator("name")
    @classmethod
    def name_must_be_valid(cls, v: str) -> str:
        return _check_name(v)

    @field_validator("category")
    @classmethod
    def category_must_be_known(cls, v: str) -> str:
        return _check_category(v)

    @field_validator("subcategory")
    @classmethod
    def subcategory_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Subcategory must not be empty.")
        return v.strip()

    @field_validator("description")
    @classmethod
    def description_length(cls, v: str) -> str:
        if len(v) > DESCRIPTION_MAX_LENGTH:
            raise ValueError(
                f"Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters."
            )
        return v

    @field_validator("price")
    @classmethod
    def price_must_be_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("Price must be greater than zero.")
        return v

    @field_validator("stock_quantity")
    @classmethod
    def stock_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Stock quantity cannot be negative.")
        return v

    @model_validator(mode="after")
    def discount_not_above_price(self) -> CreateProductDTO:
        if self.discount_price is not None:
            if self.discount_price < 0:
                raise ValueError("Discount price cannot be negative.")
            if self.discount_price > self.price:
                raise ValueError("Discount price cannot exceed price.")
        return self


class UpdateProductDTO(BaseModel):
    """Immutable DTO for product update requests.

    All fields are optional; only supplied fields will be updated.
    ``discount_price`` is the only field that accepts an explicit
    ``None`` (removes the discount).  Renaming a product never changes
    an already-assigned slug.
    """

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    price: Decimal | None = None
    discount_price: Decimal | None = None
    description: str | None = None
    category: str | None = None
    subcategory: str | None = None
    brand: str | None = None
    stock_quantity: int | None = None
    is_active: bool | None = None
    is_featured: bool | None = None

    @field_validator(
        "name",
        "price",
        "description",
        "category",
        "subcategory",
        "brand",
        "stock_quantity",
        "is_active",
        "is_featured",
        mode="before",
    )
    @classmethod
    def must_not_be_null(cls, v):
        if v is None:
            raise ValueError("This field may not be null.")
        return v

    @field_validator("name")
    @classmethod
    def name_must_be_valid(cls, v: str) -> str:
        return _check_name(v)

    @field_validator("category")
    @classmethod
    def category_must_be_known(cls, v: str) -> str:
        return _check_category(v)

    @field_validator("subcategory")
    @classmethod
    def subcategory_must_not_be_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Subcategory must not be empty.")
        return v.strip()

    @field_validator("description")
    @classmethod
    def description_length(cls, v: str) -> str:
        if len(v) > DESCRIPTION_MAX_LENGTH:
            raise ValueError(
                f"Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters."
            )
        return v

    @field_validator("price")
    @classmethod
    def price_must_be_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("Price must be greater than zero.")
        return v

    @field_validator("discount_price")
    @classmethod
    def discount_must_be_non_negative(cls, v: Decimal | None) -> Decimal | None:
        if v is not None and v < 0:
            raise ValueError("Discount price cannot be negative.")
        return v

    @field_validator("stock_quantity")
    @classmethod
    def stock_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Stock quantity cannot be negative.")
        return v

    def changes(self) -> dict:
        """Fields explicitly supplied by the caller, ``None`` included."""
        return self.model_dump(exclude_unset=True)


# ---------------------------------------------------------------------------
# Output DTO
# ---------------------------------------------------------------------------


class ProductOutputDTO(BaseModel):
    """Immutable DTO for product API responses."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    seller_id: int | None
    name: str
    slug: str | None
    description: str
    price: Decimal
    discount_price: Decimal | None
    category: str
    subcategory: str
    brand: str
    stock_quantity: int
    is_active: bool
    is_featured: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, product: Product) -> ProductOutputDTO:
        """Build an output DTO from a Product model instance."""
        return cls(
            id=product.id,
            seller_id=product.seller_id,
            name=product.name,
            slug=product.slug,
            description=product.description,
            price=product.price,
            discount_price=product.discount_price,
            category=product.category,
            subcategory=product.subcategory,
            brand=product.brand,
            stock_quantity=product.stock_quantity,
            is_active=product.is_active,
            is_featured=product.is_featured,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )
