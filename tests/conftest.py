from decimal import Decimal

import pytest

from django.contrib.auth import get_user_model

from rest_framework.test import APIClient

from modules.products.models import Product, ProductCategory


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def seller():
    """Seller account owning the products built by ``make_product``."""
    return get_user_model().objects.create_user(username="seller", password="testpass123")


@pytest.fixture()
def other_seller():
    return get_user_model().objects.create_user(username="other-seller", password="testpass123")


@pytest.fixture()
def auth_client(seller):
    """APIClient force-authenticated as ``seller``."""
    client = APIClient()
    client.force_authenticate(user=seller)
    return client


@pytest.fixture()
def other_client(other_seller):
    """APIClient force-authenticated as a seller who owns nothing."""
    client = APIClient()
    client.force_authenticate(user=other_seller)
    return client


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def make_product(seller):
    """Factory persisting a Product straight through the ORM.

    Bypasses the service, so the slug is whatever the caller passes
    (``None`` by default).  Products belong to ``seller`` unless told
    otherwise.
    """

    def _make(**overrides) -> Product:
        defaults = {
            "seller": seller,
            "name": "Wireless Mouse",
            "price": Decimal("19.99"),
            "category": ProductCategory.ELECTRONICS,
            "subcategory": "Accessories",
            "stock_quantity": 10,
        }
        defaults.update(overrides)
        return Product.objects.create(**defaults)

    return _make
