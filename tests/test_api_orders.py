from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from bakery.models import CakeBarOrder, CustomOrder, CustomOrderPayment
from tests.factories import CakeBarOptionFactory, CakeBarOrderFactory, CustomOrderFactory, ProductFactory


def _delivery():
    return (timezone.now() + timedelta(days=5)).isoformat()


# ---------- cake bar ----------
@pytest.mark.django_db
def test_cake_bar_order_prices_size_and_options(employee_api_client):
    product = ProductFactory(price=Decimal("10000"), product_type="CAKE_BAR")
    topping = CakeBarOptionFactory(option_type="TOPPING", price_add=Decimal("2000"))

    resp = employee_api_client.post("/api/cake-bar/orders/", {
        "product_id": product.id,
        "size": "20",
        "customizations": [{"option_id": topping.id}, {"option_id": 987654}],
        "customer_name": "Ana",
    }, format="json")

    assert resp.status_code == 201
    body = resp.json()
    assert body["order_number"] == "CB0001"
    assert body["base_price"] == "15000.00"
    assert body["total_price"] == "17000.00"
    assert body["remaining_amount"] == "17000.00"
    # the unknown option is skipped
    assert len(body["customizations"]) == 1


@pytest.mark.django_db
def test_cake_bar_rejects_unknown_size(employee_api_client):
    product = ProductFactory(product_type="CAKE_BAR")

    resp = employee_api_client.post("/api/cake-bar/orders/", {"product_id": product.id, "size": "25"}, format="json")

    assert resp.status_code == 400
    assert "size" in resp.json()["details"]


@pytest.mark.django_db
def test_cake_bar_partial_payment_then_overpayment(employee_api_client):
    order = CakeBarOrderFactory(total_price=Decimal("17000"), remaining_amount=Decimal("17000"))

    resp = employee_api_client.post("/api/cake-bar/orders/payments/", {
        "order_id": order.id, "amount": "10000", "payment_type": "CARD",
    }, format="json")
    assert resp.status_code == 201
    assert resp.json()["payment"]["payment_type"] == "CARD"
    assert resp.json()["payment"]["description"] == "Payment CARD"
    assert resp.json()["order"]["remaining_amount"] == "7000.00"

    resp = employee_api_client.post("/api/cake-bar/payments/", {
        "order_id": order.id, "amount": "8000", "payment_type": "CASH",
    }, format="json")
    assert resp.status_code == 400
    assert resp.json()["code"] == "payment_exceeds_balance"

    order.refresh_from_db()
    assert order.amount_paid == Decimal("10000")
    assert order.payments.count() == 1


@pytest.mark.django_db
def test_cake_bar_payment_for_unknown_order(employee_api_client):
    resp = employee_api_client.post("/api/cake-bar/payments/", {
        "order_id": 4040, "amount": "100", "payment_type": "CASH",
    }, format="json")

    assert resp.status_code == 404


@pytest.mark.django_db
def test_cake_bar_today_filter(employee_api_client):
    CakeBarOrderFactory()
    CakeBarOrderFactory(created_at=timezone.now() - timedelta(days=2))

    resp = employee_api_client.get("/api/cake-bar/orders/", {"today": "true"})

    assert resp.status_code == 200
    assert len(resp.json()) == 1
    assert CakeBarOrder.objects.count() == 2


@pytest.mark.django_db
def test_cake_bar_options_hide_inactive(employee_api_client):
    CakeBarOptionFactory(name="Vanilla")
    CakeBarOptionFactory(name="Mango", is_active=False)

    names = [o["name"] for o in employee_api_client.get("/api/cake-bar/options/").json()]
    assert names == ["Vanilla"]

    every = employee_api_client.get("/api/cake-bar/options/", {"all": "1"}).json()
    assert len(every) == 2


# ---------- custom orders ----------
@pytest.mark.django_db
def test_custom_order_deposit_must_cover_half(employee_api_client):
    resp = employee_api_client.post("/api/custom-orders/", {
        "customer_name": "Luis",
        "description": "Birthday cake",
        "delivery_date": _delivery(),
        "estimated_price": "100000",
        "advance_amount": "40000",
    }, format="json")

    assert resp.status_code == 400
    assert resp.json()["code"] == "deposit_too_low"
    assert CustomOrder.objects.count() == 0


@pytest.mark.django_db
def test_custom_order_deposit_cannot_exceed_estimate(employee_api_client):
    resp = employee_api_client.post("/api/custom-orders/", {
        "customer_name": "Luis",
        "description": "Birthday cake",
        "delivery_date": _delivery(),
        "estimated_price": "100000",
        "advance_amount": "120000",
    }, format="json")

    assert resp.status_code == 400
    assert resp.json()["code"] == "payment_exceeds_balance"


@pytest.mark.django_db
def test_custom_order_records_deposit(employee_api_client):
    resp = employee_api_client.post("/api/custom-orders/", {
        "customer_name": "Luis",
        "description": "Birthday cake",
        "delivery_date": _delivery(),
        "estimated_price": "100000",
        "advance_amount": "50000",
        "payment_type": {"type": "TRANSFER"},
    }, format="json")

    assert resp.status_code == 201
    body = resp.json()
    assert body["order_number"] == f"CUSTOM-{timezone.localdate().year}-0001"
    assert body["total_paid"] == "50000.00"
    assert body["balance_due"] == "50000.00"
    assert body["status"] == "PENDING"

    payment = CustomOrderPayment.objects.get()
    assert payment.installment == CustomOrderPayment.Installment.DEPOSIT
    assert payment.payment_type == "TRANSFER"


@pytest.mark.django_db
def test_custom_order_settlement_and_overpayment(employee_api_client):
    order = CustomOrderFactory(estimated_price=Decimal("100000"), total_paid=Decimal("50000"))

    resp = employee_api_client.post("/api/custom-orders/payments/", {
        "custom_order_id": order.id, "amount": "60000", "payment_type": "CASH",
    }, format="json")
    assert resp.status_code == 400
    assert resp.json()["code"] == "payment_exceeds_balance"

    resp = employee_api_client.post("/api/custom-orders/payments/", {
        "custom_order_id": order.id, "amount": "50000", "payment_type": "CASH", "installment": "SETTLEMENT",
    }, format="json")
    assert resp.status_code == 201
    assert resp.json()["installment"] == "SETTLEMENT"

    order.refresh_from_db()
    assert order.total_paid == Decimal("100000")
    assert order.balance_due == Decimal("0")


@pytest.mark.django_db
def test_custom_order_status_update_and_filter(employee_api_client):
    order = CustomOrderFactory()
    CustomOrderFactory()

    resp = employee_api_client.patch(f"/api/custom-orders/{order.id}/status/", {"status": "READY"}, format="json")
    assert resp.status_code == 200
    assert resp.json()["status"] == "READY"

    resp = employee_api_client.patch(f"/api/custom-orders/{order.id}/status/", {"status": "LOST"}, format="json")
    assert resp.status_code == 400

    ready = employee_api_client.get("/api/custom-orders/", {"status": "ready"}).json()
    assert [o["id"] for o in ready] == [order.id]
