"""Product DRF serializers for API output.

Input is validated by the Pydantic DTOs in ``dtos.py``; the serializer
only shapes responses and feeds the OpenAPI schema.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    """Read serializer for the Product resource."""

    effective_price = serializers.DecimalField(
        max_digits=10, decimal_places=2, read_only=True
    )

    class Meta:
        model = Product
        fields = [
            "id",
            "seller",
            "name",
            "slug",
            "description",
            "price",
            "discount_price",
            "effective_price",
            "category",
            "subcategory",
            "brand",
            "stock_quantity",
            "is_active",
            "is_featured",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "seller", "slug", "created_at", "updated_at"]
