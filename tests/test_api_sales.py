from decimal import Decimal

import pytest
from django.utils import timezone

from bakery.models import Product, Sale, SaleItem
from tests.factories import CategoryFactory, ProductFactory


SALES = "/api/sales/"


@pytest.mark.django_db
def test_sale_decrements_stock_and_returns_change(employee_api_client):
    bread = ProductFactory(price=Decimal("3000"), stock=10)
    decorating = ProductFactory(price=Decimal("5000"), stock=0, is_service=True)

    resp = employee_api_client.post(SALES, {
        "items": [
            {"product_id": bread.id, "quantity": 3},
            {"product_id": decorating.id, "quantity": 1},
        ],
        "payment_method": {"type": "CASH", "amount": 20000},
        "discount": "10",
        "amount_received": "20000",
    }, format="json")

    assert resp.status_code == 201
    body = resp.json()
    assert Decimal(str(body["subtotal"])) == Decimal("14000")
    assert Decimal(str(body["discountAmount"])) == Decimal("1400")
    assert Decimal(str(body["total"])) == Decimal("12600")
    assert Decimal(str(body["change"])) == Decimal("7400")
    assert body["sale"]["sale_number"] == f"DISPLAY-{timezone.localdate().year}-000001"
    assert body["sale"]["payment_type"] == "CASH"

    bread.refresh_from_db()
    decorating.refresh_from_db()
    assert bread.stock == 7
    # services never touch stock
    assert decorating.stock == 0


@pytest.mark.django_db
def test_insufficient_stock_rejects_whole_sale(employee_api_client):
    plenty = ProductFactory(stock=10)
    scarce = ProductFactory(name="Croissant", stock=1)

    resp = employee_api_client.post(SALES, {
        "items": [
            {"product_id": plenty.id, "quantity": 2},
            {"product_id": scarce.id, "quantity": 2},
        ],
        "payment_method": "CARD",
    }, format="json")

    assert resp.status_code == 400
    assert resp.json()["code"] == "insufficient_stock"
    assert "Croissant" in resp.json()["error"]
    assert Sale.objects.count() == 0
    assert SaleItem.objects.count() == 0
    assert Product.objects.get(pk=plenty.pk).stock == 10


@pytest.mark.django_db
def test_repeated_product_lines_are_checked_together(employee_api_client):
    p = ProductFactory(stock=3)

    resp = employee_api_client.post(SALES, {
        "items": [{"product_id": p.id, "quantity": 2}, {"product_id": p.id, "quantity": 2}],
    }, format="json")

    assert resp.status_code == 400
    assert Product.objects.get(pk=p.pk).stock == 3


@pytest.mark.django_db
def test_unknown_product(employee_api_client):
    resp = employee_api_client.post(SALES, {"items": [{"product_id": 424242, "quantity": 1}]}, format="json")

    assert resp.status_code == 404
    assert Sale.objects.count() == 0


@pytest.mark.django_db
def test_empty_sale_is_invalid(employee_api_client):
    resp = employee_api_client.post(SALES, {"items": []}, format="json")

    assert resp.status_code == 400
    assert resp.json()["code"] == "invalid"


@pytest.mark.django_db
def test_card_sale_has_no_change(employee_api_client):
    p = ProductFactory(price=Decimal("1000"))

    resp = employee_api_client.post(SALES, {
        "items": [{"product_id": p.id, "quantity": 1}],
        "payment_method": "CARD",
        "amount_received": "5000",
    }, format="json")

    assert Decimal(str(resp.json()["change"])) == Decimal("0")
    assert Decimal(str(resp.json()["amountReceived"])) == Decimal("1000")


@pytest.mark.django_db
def test_sales_list(employee_api_client):
    p = ProductFactory()
    employee_api_client.post(SALES, {"items": [{"product_id": p.id, "quantity": 1}]}, format="json")

    resp = employee_api_client.get(SALES)

    assert resp.status_code == 200
    assert len(resp.json()) == 1
    assert resp.json()[0]["items"][0]["product_name"] == p.name


# ---------- catalog ----------
@pytest.mark.django_db
def test_product_filters(employee_api_client):
    cakes = CategoryFactory(name="Cakes")
    ProductFactory(name="Chocolate cake", category=cakes, product_type="CAKE_BAR", stock=2, min_stock=5)
    ProductFactory(name="Baguette", stock=50)
    ProductFactory(name="Old roll", is_active=False)

    def names(resp):
        return sorted(p["name"] for p in resp.json())

    assert names(employee_api_client.get("/api/products/", {"type": "cake_bar"})) == ["Chocolate cake"]
    assert names(employee_api_client.get("/api/products/", {"category": cakes.id})) == ["Chocolate cake"]
    assert names(employee_api_client.get("/api/products/", {"search": "bague"})) == ["Baguette"]
    assert names(employee_api_client.get("/api/products/", {"active": "false"})) == ["Old roll"]
    assert "Chocolate cake" in names(employee_api_client.get("/api/products/", {"low_stock": "true"}))


@pytest.mark.django_db
def test_only_managers_write_catalog(employee_api_client, manager_api_client):
    payload = {"name": "Cookies", "description": ""}

    assert employee_api_client.post("/api/categories/", payload, format="json").status_code == 403
    resp = manager_api_client.post("/api/categories/", payload, format="json")
    assert resp.status_code == 201
    assert resp.json()["name"] == "Cookies"
