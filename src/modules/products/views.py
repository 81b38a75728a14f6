"""Product API views.

Exposes the ``ProductService`` via HTTP using a DRF ViewSet.  Domain
exceptions are translated into DRF exceptions here and rendered by
``modules.core.exceptions.api_exception_handler``; the view never
swallows generic exceptions.

Reads are public (storefront); writes require an authenticated token,
and only the product's seller or a staff user may change or delete it.
"""

from __future__ import annotations

from typing import Any, Dict

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import Conflict, pydantic_errors_to_detail
from modules.products.dtos import CreateProductDTO, UpdateProductDTO
from modules.products.exceptions import (
    InvalidProductData,
    ProductAccessDenied,
    ProductNotFound,
    SlugConflict,
)
from modules.products.filters import ProductFilter
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import ProductSerializer
from modules.products.services import ProductService

PUBLIC_ACTIONS = {"list", "retrieve", "by_slug", "categories"}

CREATE_FIELDS = (
    "name",
    "price",
    "discount_price",
    "category",
    "subcategory",
    "description",
    "brand",
    "stock_quantity",
    "is_active",
    "is_featured",
)


def _build_dto(dto_class, data: Dict[str, Any]):
    payload = {field: data[field] for field in CREATE_FIELDS if field in data}
    try:
        return dto_class(**payload)
    except PydanticValidationError as exc:
        raise ValidationError(pydantic_errors_to_detail(exc)) from exc


class ProductViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for the product catalog.

    Does **not** extend ``ModelViewSet``: writes go through
    ``ProductService`` so slug assignment always runs.
    """

    filterset_class = ProductFilter
    search_fields = ["name", "slug", "description", "brand"]
    ordering_fields = ["name", "price", "created_at", "stock_quantity"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    serializer_class = ProductSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductDjangoRepository())

    def get_permissions(self):
        if self.action in PUBLIC_ACTIONS:
            return [AllowAny()]
        return [IsAuthenticated()]

    def get_throttles(self):
        if self.action not in PUBLIC_ACTIONS:
            self.throttle_scope = "catalog_write"
        return super().get_throttles()

    def get_queryset(self):
        return Product.objects.alive().filter(is_active=True)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        try:
            product = self._service.get_product(pk)
        except ProductNotFound as exc:
            raise NotFound("Product not found.") from exc
        return Response(ProductSerializer(product).data)

    @action(detail=False, methods=["get"], url_path=r"slug/(?P<slug>[-a-zA-Z0-9_]+)")
    def by_slug(self, request: Request, slug: str | None = None) -> Response:
        """GET /api/v1/products/slug/{slug}/"""
        try:
            product = self._service.get_product_by_slug(slug or "")
        except ProductNotFound as exc:
            raise NotFound("Product not found.") from exc
        return Response(ProductSerializer(product).data)

    @action(detail=False, methods=["get"])
    def categories(self, request: Request) -> Response:
        """GET /api/v1/products/categories/"""
        categories = self._service.list_categories()
        return Response({"count": len(categories), "results": categories})

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        dto = _build_dto(CreateProductDTO, request.data)
        try:
            product = self._service.create_product(dto, seller=request.user)
        except SlugConflict as exc:
            raise Conflict(str(exc)) from exc
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/products/{pk}/

        Replaces every writable field; omitted optional fields are reset
        to their defaults.
        """
        full = _build_dto(CreateProductDTO, request.data)
        return self._apply_update(request, pk, UpdateProductDTO(**full.model_dump()))

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/"""
        return self._apply_update(request, pk, _build_dto(UpdateProductDTO, request.data))

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/"""
        try:
            self._service.delete_product(pk, user=request.user)
        except ProductNotFound as exc:
            raise NotFound("Product not found.") from exc
        except ProductAccessDenied as exc:
            raise PermissionDenied(str(exc)) from exc
        return Response(status=status.HTTP_204_NO_CONTENT)

    def _apply_update(self, request: Request, pk: str | None, dto: UpdateProductDTO) -> Response:
        try:
            product = self._service.update_product(pk, dto, user=request.user)
        except ProductNotFound as exc:
            raise NotFound("Product not found.") from exc
        except ProductAccessDenied as exc:
            raise PermissionDenied(str(exc)) from exc
        except InvalidProductData as exc:
            raise ValidationError({"discount_price": [str(exc)]}) from exc
        except SlugConflict as exc:
            raise Conflict(str(exc)) from exc
        return Response(ProductSerializer(product).data)
