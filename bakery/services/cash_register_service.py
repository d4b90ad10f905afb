import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from bakery.exceptions import NoOpenRegister, RegisterAlreadyOpen
from bakery.models import CakeBarPayment, CustomOrderPayment, Expense, PaymentType, Sale
from bakery.models_cash import CashRegister, RegisterStatus
from bakery.services.dates import day_range, local_day
from bakery.services.payment_types import normalize_payment_type

logger = logging.getLogger(__name__)

DEC0 = Decimal("0.00")

SOURCE_SALE = "SALE"
SOURCE_CAKE_BAR = "CAKE_BAR"
SOURCE_CUSTOM_ORDER = "CUSTOM_ORDER"


@dataclass
class PaymentEntry:
    source: str
    id: str
    amount: Decimal
    payment_type: str  # normalized
    raw_payment_type: str
    created_at: datetime
    extra: dict = field(default_factory=dict)


@dataclass
class RegisterTotals:
    opening_cash: Decimal
    total_sales: Decimal
    cash_sales: Decimal
    card_sales: Decimal
    transfer_sales: Decimal
    total_expenses: Decimal
    expected_cash: Decimal
    sales_by_payment: dict
    entries: list
    expenses: list


def _dec(v) -> Decimal:
    if v is None:
        return DEC0
    return Decimal(str(v))


# =========================================================
# LOOKUPS
# =========================================================
def find_open_register(day=None, lock: bool = False) -> Optional[CashRegister]:
    """
    The open register, optionally restricted to one local day.
    The store allows at most one open register at a time.
    """
    qs = CashRegister.objects.filter(status=RegisterStatus.OPEN)
    if day is not None:
        dr = day_range(day)
        qs = qs.filter(date__gte=dr.start, date__lt=dr.end)
    if lock:
        qs = qs.select_for_update()
    return qs.order_by("-date", "-id").first()


def collect_payments(register: CashRegister) -> list:
    """
    Every payment of the register's day from the three sale sources,
    each tagged with its source and normalized payment type.
    """
    dr = day_range(local_day(register.date))

    entries = []

    sales = Sale.objects.filter(
        cash_register=register,
        status=Sale.Status.COMPLETED,
        created_at__gte=dr.start,
        created_at__lt=dr.end,
    )
    for s in sales:
        entries.append(PaymentEntry(
            source=SOURCE_SALE,
            id=f"sale_{s.id}",
            amount=_dec(s.total),
            payment_type=normalize_payment_type(s.payment_type),
            raw_payment_type=s.payment_type,
            created_at=s.created_at,
            extra={"sale_number": s.sale_number, "sale_type": s.sale_type},
        ))

    cake_bar = (
        CakeBarPayment.objects
        .filter(created_at__gte=dr.start, created_at__lt=dr.end)
        .select_related("order")
    )
    for p in cake_bar:
        entries.append(PaymentEntry(
            source=SOURCE_CAKE_BAR,
            id=f"cakebar_{p.id}",
            amount=_dec(p.amount),
            payment_type=normalize_payment_type(p.payment_type),
            raw_payment_type=p.payment_type,
            created_at=p.created_at,
            extra={"order_number": p.order.order_number},
        ))

    custom = (
        CustomOrderPayment.objects
        .filter(created_at__gte=dr.start, created_at__lt=dr.end)
        .select_related("custom_order")
    )
    for p in custom:
        entries.append(PaymentEntry(
            source=SOURCE_CUSTOM_ORDER,
            id=f"custom_{p.id}",
            amount=_dec(p.amount),
            payment_type=normalize_payment_type(p.payment_type),
            raw_payment_type=p.payment_type,
            created_at=p.created_at,
            extra={"customer_name": p.custom_order.customer_name},
        ))

    return entries


def _register_expenses(register: CashRegister) -> list:
    dr = day_range(local_day(register.date))
    return list(
        Expense.objects
        .filter(cash_register=register, created_at__gte=dr.start, created_at__lt=dr.end)
        .order_by("-created_at", "-id")
    )


def compute_totals(register: CashRegister) -> RegisterTotals:
    """
    expected_cash = opening_cash + cash payments (all sources) - expenses.
    Snapshot and close both go through here.
    """
    entries = collect_payments(register)
    expenses = _register_expenses(register)

    by_payment = {}
    for e in entries:
        bucket = by_payment.setdefault(e.payment_type, {"total": DEC0, "count": 0})
        bucket["total"] += e.amount
        bucket["count"] += 1

    def _total_for(pt):
        return by_payment.get(pt, {}).get("total", DEC0)

    total_sales = sum((e.amount for e in entries), DEC0)
    cash_sales = _total_for(PaymentType.CASH)
    total_expenses = sum((_dec(x.amount) for x in expenses), DEC0)
    opening = _dec(register.opening_cash)

    return RegisterTotals(
        opening_cash=opening,
        total_sales=total_sales,
        cash_sales=cash_sales,
        card_sales=_total_for(PaymentType.CARD),
        transfer_sales=_total_for(PaymentType.TRANSFER),
        total_expenses=total_expenses,
        expected_cash=opening + cash_sales - total_expenses,
        sales_by_payment=by_payment,
        entries=entries,
        expenses=expenses,
    )


def recent_transactions(entries: list, limit: Optional[int] = None) -> list:
    limit = limit or settings.BAKERY_RECENT_TRANSACTIONS
    return sorted(entries, key=lambda e: e.created_at, reverse=True)[:limit]


# =========================================================
# OPERATIONS
# =========================================================
@transaction.atomic
def open_register(user, opening_cash, notes: str = "", now: Optional[datetime] = None) -> CashRegister:
    now = now or timezone.now()

    # any open register blocks, not only today's: the store keeps one open drawer
    if find_open_register(lock=True) is not None:
        raise RegisterAlreadyOpen()

    try:
        with transaction.atomic():
            register = CashRegister.objects.create(
                date=now,
                status=RegisterStatus.OPEN,
                opening_cash=_dec(opening_cash),
                opened_by=user,
                notes=notes or "",
            )
    except IntegrityError:
        raise RegisterAlreadyOpen()

    logger.info("Cash register %s opened by %s with %s", register.id, getattr(user, "pk", None), register.opening_cash)
    return register


def stale_open_register(now: Optional[datetime] = None) -> Optional[CashRegister]:
    """An open register left over from an earlier day; it blocks open_register until closed."""
    now = now or timezone.now()
    register = find_open_register()
    if register is None or local_day(register.date) >= local_day(now):
        return None
    return register


def register_snapshot(now: Optional[datetime] = None):
    """(register, totals) for today's open register, or (None, None)."""
    now = now or timezone.now()
    register = find_open_register(day=local_day(now))
    if register is None:
        return None, None
    return register, compute_totals(register)


@transaction.atomic
def close_register(user, actual_cash, notes: str = "", now: Optional[datetime] = None):
    """
    Close the open register with the counted cash.
    Returns (register, totals, difference).
    """
    now = now or timezone.now()
    register = find_open_register(lock=True)
    if register is None:
        raise NoOpenRegister()

    totals = compute_totals(register)
    actual = _dec(actual_cash)
    difference = actual - totals.expected_cash

    register.status = RegisterStatus.CLOSED
    register.closed_at = now
    register.closed_by = user
    register.closing_cash = actual
    register.total_sales = totals.total_sales
    register.total_expenses = totals.total_expenses
    register.expected_cash = totals.expected_cash
    register.cash_difference = difference
    if notes:
        register.notes = notes
    register.save(update_fields=[
        "status",
        "closed_at",
        "closed_by",
        "closing_cash",
        "total_sales",
        "total_expenses",
        "expected_cash",
        "cash_difference",
        "notes",
    ])

    logger.info(
        "Cash register %s closed: expected=%s actual=%s difference=%s",
        register.id, totals.expected_cash, actual, difference,
    )
    return register, totals, difference


@transaction.atomic
def clean_payment_types() -> dict:
    """Rewrite legacy stored payment types to their normalized enum value."""
    result = {}
    for label, model in (
        ("sales", Sale),
        ("cake_bar_payments", CakeBarPayment),
        ("custom_order_payments", CustomOrderPayment),
    ):
        cleaned = 0
        rows = model.objects.only("id", "payment_type")
        for row in rows:
            normalized = normalize_payment_type(row.payment_type)
            if row.payment_type != normalized:
                model.objects.filter(pk=row.pk).update(payment_type=normalized)
                cleaned += 1
                logger.info("%s %s payment type %r -> %s", model.__name__, row.pk, row.payment_type, normalized)
        result[label] = {"total": rows.count(), "cleaned": cleaned}
    return result
