"""Integration tests for Product API endpoints.

Covers:
- Public reads (list, retrieve, by slug, categories) and filtering.
- Authenticated writes with server-assigned slugs.
- PUT as full replacement, PATCH as partial update (null clears the discount).
- Ownership: only the seller or staff may modify or delete.
- Domain exception mapping (400, 403, 404, 409).
"""

from __future__ import annotations

import logging
from decimal import Decimal
from unittest.mock import patch

import pytest

from modules.products.exceptions import SlugConflict
from modules.products.models import Product, ProductCategory

pytestmark = pytest.mark.integration

URL = "/api/v1/products/"


def _payload(**overrides):
    data = {
        "name": "Wireless Mouse",
        "price": "19.99",
        "category": "Electronics",
        "subcategory": "Accessories",
        "stock_quantity": 5,
    }
    data.update(overrides)
    return data


@pytest.fixture()
def sample_product(make_product):
    return make_product(name="Wireless Mouse", slug="wireless-mouse", description="2.4GHz")


# ===========================================================================
# Authentication
# ===========================================================================


class TestProductAPIAuth:
    def test_list_is_public(self, api_client):
        assert api_client.get(URL).status_code == 200

    def test_create_requires_auth(self, api_client):
        response = api_client.post(URL, _payload(), format="json")
        assert response.status_code == 401

    def test_delete_requires_auth(self, api_client, sample_product):
        response = api_client.delete(f"{URL}{sample_product.id}/")
        assert response.status_code == 401


# ===========================================================================
# Reads
# ===========================================================================


class TestProductList:
    def test_list_empty(self, api_client):
        response = api_client.get(URL)
        assert response.status_code == 200
        assert response.data["results"] == []

    def test_list_returns_products(self, api_client, sample_product):
        response = api_client.get(URL)
        assert [p["slug"] for p in response.data["results"]] == ["wireless-mouse"]

    def test_list_hides_inactive_and_deleted(self, api_client, make_product):
        make_product(name="Visible", slug="visible")
        make_product(name="Hidden", slug="hidden", is_active=False)
        make_product(name="Gone", slug="gone").delete()

        response = api_client.get(URL)

        assert [p["name"] for p in response.data["results"]] == ["Visible"]

    def test_filter_by_category(self, api_client, make_product):
        make_product(name="Mouse", slug="mouse")
        make_product(
            name="Novel", slug="novel", category=ProductCategory.BOOKS, subcategory="Fiction"
        )

        response = api_client.get(URL, {"category": "Books"})

        assert [p["name"] for p in response.data["results"]] == ["Novel"]

    def test_filter_by_price_range(self, api_client, make_product):
        make_product(name="Cheap", slug="cheap", price=Decimal("5.00"))
        make_product(name="Pricey", slug="pricey", price=Decimal("500.00"))

        response = api_client.get(URL, {"min_price": "10", "max_price": "1000"})

        assert [p["name"] for p in response.data["results"]] == ["Pricey"]

    def test_search_by_name(self, api_client, make_product):
        make_product(name="Wireless Mouse", slug="wireless-mouse")
        make_product(name="Keyboard", slug="keyboard")

        response = api_client.get(URL, {"search": "mouse"})

        assert len(response.data["results"]) == 1

    def test_ordering_by_price(self, api_client, make_product):
        make_product(name="B", slug="b", price=Decimal("20.00"))
        make_product(name="A", slug="a", price=Decimal("10.00"))

        response = api_client.get(URL, {"ordering": "price"})

        assert [p["name"] for p in response.data["results"]] == ["A", "B"]


class TestProductRetrieve:
    def test_retrieve_by_id(self, api_client, sample_product):
        response = api_client.get(f"{URL}{sample_product.id}/")
        assert response.status_code == 200
        assert response.data["slug"] == "wireless-mouse"
        assert response.data["effective_price"] == "19.99"

    def test_retrieve_by_slug(self, api_client, sample_product):
        response = api_client.get(f"{URL}slug/wireless-mouse/")
        assert response.status_code == 200
        assert response.data["id"] == str(sample_product.id)

    def test_retrieve_unknown_slug_returns_404(self, api_client):
        response = api_client.get(f"{URL}slug/nothing-here/")
        assert response.status_code == 404
        assert response.data["errors"][0]["code"] == "not_found"

    def test_retrieve_unknown_id_returns_404(self, api_client):
        response = api_client.get(f"{URL}00000000-0000-0000-0000-000000000000/")
        assert response.status_code == 404

    def test_retrieve_invalid_id_returns_404(self, api_client):
        response = api_client.get(f"{URL}not-a-uuid/")
        assert response.status_code == 404

    def test_categories(self, api_client):
        response = api_client.get(f"{URL}categories/")
        assert response.status_code == 200
        assert response.data["count"] == 11
        assert "Home & Garden" in response.data["results"]


# ===========================================================================
# Writes
# ===========================================================================


class TestProductCreate:
    def test_create_assigns_slug(self, auth_client):
        response = auth_client.post(URL, _payload(name="Wireless Mouse!! 2.4GHz"), format="json")

        assert response.status_code == 201
        assert response.data["slug"] == "wireless-mouse-24ghz"
        assert Product.objects.filter(slug="wireless-mouse-24ghz").exists()

    def test_client_supplied_slug_is_ignored(self, auth_client):
        response = auth_client.post(URL, _payload(slug="my-own-slug"), format="json")

        assert response.status_code == 201
        assert response.data["slug"] == "wireless-mouse"

    def test_same_name_twice_gets_suffix(self, auth_client):
        auth_client.post(URL, _payload(), format="json")
        response = auth_client.post(URL, _payload(), format="json")

        assert response.data["slug"] == "wireless-mouse-1"

    def test_invalid_payload_returns_400(self, auth_client):
        response = auth_client.post(URL, _payload(price="0"), format="json")

        assert response.status_code == 400
        assert response.data["type"] == "validation_error"
        assert response.data["errors"][0]["attr"] == "price"

    def test_missing_name_returns_400(self, auth_client):
        payload = _payload()
        del payload["name"]

        response = auth_client.post(URL, payload, format="json")

        assert response.status_code == 400

    def test_slug_conflict_returns_409(self, auth_client):
        with patch(
            "modules.products.views.ProductService.create_product",
            side_effect=SlugConflict("wireless-mouse"),
        ):
            response = auth_client.post(URL, _payload(), format="json")

        assert response.status_code == 409
        assert response.data["errors"][0]["code"] == "conflict"

    def test_create_logs_dotted_events_once(self, auth_client, caplog):
        with caplog.at_level(logging.INFO):
            auth_client.post(URL, _payload(), format="json")

        events = [r.msg["event"] for r in caplog.records if isinstance(r.msg, dict)]
        assert events.count("product.created") == 1
        assert events.count("product.saved") == 1
        assert "product_created" not in events


class TestProductUpdate:
    def test_patch_updates_fields(self, auth_client, sample_product):
        response = auth_client.patch(
            f"{URL}{sample_product.id}/", {"price": "24.50"}, format="json"
        )

        assert response.status_code == 200
        assert response.data["price"] == "24.50"

    def test_rename_keeps_slug(self, auth_client, sample_product):
        response = auth_client.patch(
            f"{URL}{sample_product.id}/", {"name": "Trackball"}, format="json"
        )

        assert response.data["name"] == "Trackball"
        assert response.data["slug"] == "wireless-mouse"

    def test_discount_above_price_returns_400(self, auth_client, sample_product):
        response = auth_client.patch(
            f"{URL}{sample_product.id}/", {"discount_price": "99.00"}, format="json"
        )

        assert response.status_code == 400
        assert response.data["errors"][0]["attr"] == "discount_price"

    def test_null_discount_removes_it(self, auth_client, make_product):
        product = make_product(slug="mouse", discount_price=Decimal("15.00"))

        response = auth_client.patch(
            f"{URL}{product.id}/", {"discount_price": None}, format="json"
        )

        assert response.status_code == 200
        assert response.data["discount_price"] is None
        assert response.data["effective_price"] == "19.99"
        product.refresh_from_db()
        assert product.discount_price is None

    def test_null_name_returns_400(self, auth_client, sample_product):
        response = auth_client.patch(
            f"{URL}{sample_product.id}/", {"name": None}, format="json"
        )

        assert response.status_code == 400
        assert response.data["errors"][0]["attr"] == "name"
        sample_product.refresh_from_db()
        assert sample_product.name == "Wireless Mouse"

    def test_update_unknown_returns_404(self, auth_client):
        response = auth_client.patch(
            f"{URL}00000000-0000-0000-0000-000000000000/", {"name": "X"}, format="json"
        )

        assert response.status_code == 404


class TestProductReplace:
    def test_put_requires_full_payload(self, auth_client, sample_product):
        response = auth_client.put(
            f"{URL}{sample_product.id}/", {"name": "Trackball"}, format="json"
        )

        assert response.status_code == 400
        attrs = {e["attr"] for e in response.data["errors"]}
        assert {"price", "category", "subcategory"} <= attrs
        sample_product.refresh_from_db()
        assert sample_product.name == "Wireless Mouse"

    def test_put_replaces_omitted_optional_fields(self, auth_client, sample_product):
        response = auth_client.put(
            f"{URL}{sample_product.id}/", _payload(name="Trackball"), format="json"
        )

        assert response.status_code == 200
        assert response.data["name"] == "Trackball"
        assert response.data["description"] == ""
        assert response.data["slug"] == "wireless-mouse"

    def test_put_unknown_returns_404(self, auth_client):
        response = auth_client.put(
            f"{URL}00000000-0000-0000-0000-000000000000/", _payload(), format="json"
        )

        assert response.status_code == 404


# ===========================================================================
# Ownership
# ===========================================================================


class TestProductOwnership:
    def test_create_records_authenticated_seller(self, auth_client, seller):
        response = auth_client.post(URL, _payload(), format="json")

        assert response.data["seller"] == seller.pk
        assert Product.objects.get(id=response.data["id"]).seller == seller

    def test_other_seller_cannot_patch(self, other_client, sample_product):
        response = other_client.patch(
            f"{URL}{sample_product.id}/", {"price": "1.00"}, format="json"
        )

        assert response.status_code == 403
        assert response.data["errors"][0]["code"] == "permission_denied"
        sample_product.refresh_from_db()
        assert sample_product.price == Decimal("19.99")

    def test_other_seller_cannot_put(self, other_client, sample_product):
        response = other_client.put(
            f"{URL}{sample_product.id}/", _payload(name="Hijacked"), format="json"
        )

        assert response.status_code == 403

    def test_other_seller_cannot_delete(self, other_client, sample_product):
        response = other_client.delete(f"{URL}{sample_product.id}/")

        assert response.status_code == 403
        sample_product.refresh_from_db()
        assert not sample_product.is_deleted

    def test_staff_can_edit_any_product(self, api_client, other_seller, sample_product):
        other_seller.is_staff = True
        other_seller.save()
        api_client.force_authenticate(user=other_seller)

        response = api_client.patch(
            f"{URL}{sample_product.id}/", {"is_featured": True}, format="json"
        )

        assert response.status_code == 200
        assert response.data["is_featured"] is True

    def test_filter_by_seller(self, api_client, make_product, other_seller):
        make_product(name="Mine", slug="mine")
        make_product(name="Theirs", slug="theirs", seller=other_seller)

        response = api_client.get(URL, {"seller": other_seller.pk})

        assert [p["name"] for p in response.data["results"]] == ["Theirs"]


class TestProductDelete:
    def test_delete_soft_deletes(self, auth_client, sample_product):
        response = auth_client.delete(f"{URL}{sample_product.id}/")

        assert response.status_code == 204
        sample_product.refresh_from_db()
        assert sample_product.is_deleted

    def test_deleted_product_no_longer_retrievable_by_slug(self, auth_client, sample_product):
        auth_client.delete(f"{URL}{sample_product.id}/")

        response = auth_client.get(f"{URL}slug/wireless-mouse/")

        assert response.status_code == 404

    def test_delete_unknown_returns_404(self, auth_client):
        response = auth_client.delete(f"{URL}00000000-0000-0000-0000-000000000000/")

        assert response.status_code == 404
