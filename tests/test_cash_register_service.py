from datetime import timedelta
from decimal import Decimal

import pytest
from django.db import IntegrityError, transaction

from bakery.exceptions import NoOpenRegister, RegisterAlreadyOpen
from bakery.models import CakeBarPayment, Sale
from bakery.models_cash import CashRegister, RegisterStatus
from bakery.services import cash_register_service as cash
from tests.factories import (
    CakeBarPaymentFactory,
    CustomOrderPaymentFactory,
    ExpenseFactory,
    SaleFactory,
)


@pytest.fixture
def register(manager, at):
    return cash.open_register(manager, Decimal("100000"), now=at(7, 0))


@pytest.fixture
def business_day(register, at):
    """One cash sale, one card cake-bar payment, one cash custom-order payment, one expense."""
    SaleFactory(cash_register=register, total=Decimal("20000"), payment_type="CASH", created_at=at(9, 0))
    CakeBarPaymentFactory(amount=Decimal("15000"), payment_type="CARD", created_at=at(10, 0))
    CustomOrderPaymentFactory(amount=Decimal("30000"), payment_type="CASH", created_at=at(11, 0))
    ExpenseFactory(cash_register=register, amount=Decimal("5000"), created_at=at(12, 0))
    return register


# ---------- open ----------
@pytest.mark.django_db
def test_open_register(register, manager, at):
    assert register.status == RegisterStatus.OPEN
    assert register.opening_cash == Decimal("100000")
    assert register.opened_by == manager
    assert register.date == at(7, 0)


@pytest.mark.django_db
def test_second_open_is_rejected(register, manager, at):
    with pytest.raises(RegisterAlreadyOpen):
        cash.open_register(manager, Decimal("5000"), now=at(8, 0))

    assert CashRegister.objects.count() == 1


@pytest.mark.django_db
def test_open_index_rejects_a_second_open_row(register, at):
    with pytest.raises(IntegrityError):
        with transaction.atomic():
            CashRegister.objects.create(date=at(9, 0), status=RegisterStatus.OPEN)


@pytest.mark.django_db
def test_open_losing_the_race_gets_typed_error(register, manager, at, monkeypatch):
    monkeypatch.setattr(cash, "find_open_register", lambda *args, **kwargs: None)

    with pytest.raises(RegisterAlreadyOpen):
        cash.open_register(manager, Decimal("5000"), now=at(8, 0))

    assert CashRegister.objects.count() == 1


@pytest.mark.django_db
def test_close_without_open_register(manager, at):
    with pytest.raises(NoOpenRegister):
        cash.close_register(manager, Decimal("0"), now=at(20, 0))


# ---------- totals ----------
@pytest.mark.django_db
def test_totals_across_all_payment_streams(business_day):
    totals = cash.compute_totals(business_day)

    assert totals.cash_sales == Decimal("50000")
    assert totals.card_sales == Decimal("15000")
    assert totals.transfer_sales == Decimal("0")
    assert totals.total_sales == Decimal("65000")
    assert totals.total_expenses == Decimal("5000")
    assert totals.expected_cash == Decimal("145000")
    assert totals.sales_by_payment["CASH"]["count"] == 2
    assert totals.sales_by_payment["CARD"] == {"total": Decimal("15000"), "count": 1}


@pytest.mark.django_db
def test_close_balanced_register(business_day, manager, at):
    register, totals, difference = cash.close_register(manager, Decimal("145000"), notes="all good", now=at(20, 0))

    assert difference == Decimal("0")
    register.refresh_from_db()
    assert register.status == RegisterStatus.CLOSED
    assert register.closing_cash == Decimal("145000")
    assert register.total_sales == Decimal("65000")
    assert register.total_expenses == Decimal("5000")
    assert register.expected_cash == Decimal("145000")
    assert register.cash_difference == Decimal("0")
    assert register.closed_by == manager
    assert register.closed_at == at(20, 0)
    assert register.notes == "all good"


@pytest.mark.django_db
def test_close_short_register_reports_negative_difference(business_day, manager, at):
    _, _, difference = cash.close_register(manager, Decimal("140000"), now=at(20, 0))

    assert difference == Decimal("-5000")


@pytest.mark.django_db
def test_snapshot_and_close_agree_on_expected_cash(business_day, manager, at):
    register, before = cash.register_snapshot(now=at(18, 0))
    assert register.pk == business_day.pk

    _, after, _ = cash.close_register(manager, Decimal("0"), now=at(18, 0))

    assert before.expected_cash == after.expected_cash
    assert before.total_sales == after.total_sales


@pytest.mark.django_db
def test_snapshot_without_register_today(at):
    assert cash.register_snapshot(now=at(10, 0)) == (None, None)


@pytest.mark.django_db
def test_snapshot_ignores_yesterdays_open_register(manager, at):
    cash.open_register(manager, Decimal("100"), now=at(7, 0) - timedelta(days=1))

    assert cash.register_snapshot(now=at(10, 0)) == (None, None)


@pytest.mark.django_db
def test_register_left_open_yesterday_is_reported_as_stale(manager, at):
    left_open = cash.open_register(manager, Decimal("100"), now=at(7, 0) - timedelta(days=1))

    assert cash.stale_open_register(now=at(10, 0)) == left_open

    # the close is not limited to today, so the stale drawer can be settled
    closed, _, _ = cash.close_register(manager, Decimal("100"), now=at(10, 0))
    assert closed.pk == left_open.pk
    assert cash.stale_open_register(now=at(10, 0)) is None


@pytest.mark.django_db
def test_todays_register_is_not_stale(register, at):
    assert cash.stale_open_register(now=at(18, 0)) is None


@pytest.mark.django_db
def test_only_register_sales_of_the_day_are_counted(register, at):
    SaleFactory(cash_register=register, total=Decimal("1000"), created_at=at(9, 0))
    # not attributed to this register
    SaleFactory(cash_register=None, total=Decimal("7000"), created_at=at(9, 0))
    # previous day
    SaleFactory(cash_register=register, total=Decimal("3000"), created_at=at(9, 0) - timedelta(days=1))
    # cancelled
    SaleFactory(cash_register=register, total=Decimal("9000"), created_at=at(9, 30), status="CANCELLED")
    CakeBarPaymentFactory(amount=Decimal("4000"), created_at=at(9, 0) - timedelta(days=1))

    totals = cash.compute_totals(register)

    assert totals.total_sales == Decimal("1000")
    assert totals.cash_sales == Decimal("1000")


@pytest.mark.django_db
def test_legacy_json_payment_types_are_normalized(register, at):
    SaleFactory(cash_register=register, total=Decimal("8000"), payment_type='{"type": "CARD"}', created_at=at(9, 0))
    SaleFactory(cash_register=register, total=Decimal("2000"), payment_type="EFECTIVO", created_at=at(9, 5))

    totals = cash.compute_totals(register)

    assert totals.card_sales == Decimal("8000")
    # unparseable values count as cash
    assert totals.cash_sales == Decimal("2000")


@pytest.mark.django_db
def test_recent_transactions_are_newest_first_and_capped(register, at):
    for minute in range(12):
        SaleFactory(cash_register=register, total=Decimal("100"), created_at=at(9, minute))
    CakeBarPaymentFactory(amount=Decimal("500"), created_at=at(10, 0))

    recent = cash.recent_transactions(cash.compute_totals(register).entries)

    assert len(recent) == 10
    assert recent[0].source == "CAKE_BAR"
    assert recent[1].created_at == at(9, 11)
    assert all(a.created_at >= b.created_at for a, b in zip(recent, recent[1:]))


# ---------- maintenance ----------
@pytest.mark.django_db
def test_clean_payment_types_rewrites_legacy_values():
    SaleFactory(payment_type='{"type": "TRANSFER", "amount": 100}')
    SaleFactory(payment_type="CARD")
    CakeBarPaymentFactory(payment_type="tarjeta")

    result = cash.clean_payment_types()

    assert result["sales"] == {"total": 2, "cleaned": 1}
    assert result["cake_bar_payments"] == {"total": 1, "cleaned": 1}
    assert result["custom_order_payments"] == {"total": 0, "cleaned": 0}
    assert set(Sale.objects.values_list("payment_type", flat=True)) == {"TRANSFER", "CARD"}
    assert CakeBarPayment.objects.get().payment_type == "CASH"
