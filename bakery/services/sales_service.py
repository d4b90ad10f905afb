import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from django.db import transaction
from django.db.models import F
from django.utils import timezone
from rest_framework.exceptions import NotFound

from bakery.exceptions import InsufficientStock
from bakery.models import Expense, PaymentType, Product, Sale, SaleItem
from bakery.services.cash_register_service import find_open_register
from bakery.services.payment_types import normalize_payment_type

logger = logging.getLogger(__name__)

DEC0 = Decimal("0.00")
MONEY_Q = Decimal("0.01")


@dataclass
class SaleResult:
    sale: Sale
    subtotal: Decimal
    discount_amount: Decimal
    total: Decimal
    change: Decimal
    amount_received: Decimal


def _money(v) -> Decimal:
    return Decimal(str(v or 0)).quantize(MONEY_Q, rounding=ROUND_HALF_UP)


def next_sale_number(sale_type: str, year: int) -> str:
    n = Sale.objects.count() + 1
    while True:
        number = f"{sale_type}-{year}-{n:06d}"
        if not Sale.objects.filter(sale_number=number).exists():
            return number
        n += 1


@transaction.atomic
def create_sale(
    user,
    items,
    payment_type,
    sale_type: str = Sale.SaleType.DISPLAY,
    discount_percent=0,
    amount_received=0,
    now=None,
) -> SaleResult:
    """
    items: [{"product_id": int, "quantity": int, "unit_price": Decimal | None}]

    Stock is checked for every non-service product before anything is
    written; a failing line rejects the whole sale.
    """
    now = now or timezone.now()
    pt = normalize_payment_type(payment_type)

    # lock in a stable order so two sales of the same products cannot deadlock
    product_ids = sorted({int(it["product_id"]) for it in items})
    products = {p.id: p for p in Product.objects.select_for_update().filter(pk__in=product_ids)}

    needed = {}
    for it in items:
        pid = int(it["product_id"])
        if pid not in products:
            raise NotFound(f"Product not found: {pid}")
        needed[pid] = needed.get(pid, 0) + int(it["quantity"])

    for pid, qty in needed.items():
        product = products[pid]
        if not product.is_service and product.stock < qty:
            raise InsufficientStock(f"Insufficient stock for {product.name}. Available: {product.stock}")

    lines = []
    subtotal = DEC0
    for it in items:
        product = products[int(it["product_id"])]
        qty = int(it["quantity"])
        unit_price = it.get("unit_price")
        unit_price = _money(product.price if unit_price is None else unit_price)
        line_total = _money(unit_price * qty)
        subtotal += line_total
        lines.append((product, qty, unit_price, line_total))

    discount_amount = _money(subtotal * Decimal(str(discount_percent or 0)) / 100)
    total = subtotal - discount_amount

    sale = Sale.objects.create(
        sale_number=next_sale_number(sale_type, timezone.localtime(now).year),
        user=user,
        cash_register=find_open_register(),
        subtotal=subtotal,
        discount_amount=discount_amount,
        total=total,
        payment_type=pt,
        sale_type=sale_type,
        status=Sale.Status.COMPLETED,
        created_at=now,
    )

    for product, qty, unit_price, line_total in lines:
        SaleItem.objects.create(
            sale=sale,
            product=product,
            quantity=qty,
            unit_price=unit_price,
            subtotal=line_total,
        )

    for pid, qty in needed.items():
        if not products[pid].is_service:
            Product.objects.filter(pk=pid).update(stock=F("stock") - qty)

    received = _money(amount_received)
    if pt == PaymentType.CASH:
        change = max(DEC0, received - total)
    else:
        change = DEC0
        received = total

    logger.info(
        "Sale %s created by %s: total=%s payment=%s register=%s",
        sale.sale_number, getattr(user, "pk", None), total, pt, sale.cash_register_id,
    )
    return SaleResult(
        sale=sale,
        subtotal=subtotal,
        discount_amount=discount_amount,
        total=total,
        change=change,
        amount_received=received,
    )


def record_expense(user, description: str, amount, category: str = "GENERAL", now=None) -> Expense:
    """New expenses are attributed to the currently open register, if any."""
    now = now or timezone.now()
    expense = Expense.objects.create(
        description=description,
        category=category or "GENERAL",
        amount=_money(amount),
        cash_register=find_open_register(),
        created_by=user,
        created_at=now,
    )
    logger.info("Expense %s recorded: %s (%s)", expense.id, expense.amount, expense.category)
    return expense


def recent_sales(limit: Optional[int] = 50):
    return (
        Sale.objects
        .filter(status=Sale.Status.COMPLETED)
        .select_related("user")
        .prefetch_related("items__product")
        .order_by("-created_at", "-id")[:limit]
    )
