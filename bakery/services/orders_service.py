"""
Cake bar orders (sized, customizable cakes paid at the counter) and custom
orders (made to order, paid with a deposit plus installments).
"""
import logging
from decimal import Decimal, ROUND_HALF_UP

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound

from bakery.exceptions import BakeryError, DepositTooLow, PaymentExceedsBalance
from bakery.models import (
    CakeBarCustomization,
    CakeBarOption,
    CakeBarOrder,
    CakeBarPayment,
    CustomOrder,
    CustomOrderPayment,
    Product,
)
from bakery.services.payment_types import normalize_payment_type

logger = logging.getLogger(__name__)

DEC0 = Decimal("0.00")
MONEY_Q = Decimal("0.01")

SIZE_FACTORS = {
    CakeBarOrder.Size.SMALL: Decimal("1"),
    CakeBarOrder.Size.MEDIUM: Decimal("1.5"),
    CakeBarOrder.Size.LARGE: Decimal("2"),
}

MIN_DEPOSIT_RATIO = Decimal("0.5")


def _money(v) -> Decimal:
    return Decimal(str(v or 0)).quantize(MONEY_Q, rounding=ROUND_HALF_UP)


# =========================================================
# CAKE BAR
# =========================================================
def next_cake_bar_number() -> str:
    n = CakeBarOrder.objects.count() + 1
    while CakeBarOrder.objects.filter(order_number=f"CB{n:04d}").exists():
        n += 1
    return f"CB{n:04d}"


@transaction.atomic
def create_cake_bar_order(user, product_id, size, customizations=None, customer_name="",
                          customer_phone="", notes="", now=None) -> CakeBarOrder:
    now = now or timezone.now()
    product = Product.objects.filter(pk=product_id).first()
    if product is None:
        raise NotFound("Product not found.")

    size = str(size)
    if size not in SIZE_FACTORS:
        raise BakeryError(f"Invalid size. Use: {', '.join(CakeBarOrder.Size.values)}")

    base_price = _money(product.price * SIZE_FACTORS[size])
    total = base_price

    rows = []
    customizations = customizations or []
    option_ids = [int(c["option_id"]) for c in customizations]
    options = {o.id: o for o in CakeBarOption.objects.filter(pk__in=option_ids)}
    for c in customizations:
        option = options.get(int(c["option_id"]))
        if option is None:
            # unknown options are skipped, the order still goes through
            logger.warning("Cake bar option %s not found, skipped", c["option_id"])
            continue
        qty = int(c.get("quantity") or 1)
        line = _money(option.price_add * qty)
        total += line
        rows.append((option, qty, line))

    order = CakeBarOrder.objects.create(
        order_number=next_cake_bar_number(),
        product=product,
        size=size,
        customer_name=customer_name or "",
        customer_phone=customer_phone or "",
        notes=notes or "",
        base_price=base_price,
        total_price=total,
        remaining_amount=total,
        created_by=user,
        created_at=now,
    )
    for option, qty, line in rows:
        CakeBarCustomization.objects.create(
            order=order,
            option=option,
            quantity=qty,
            unit_price=option.price_add,
            total_price=line,
        )

    logger.info("Cake bar order %s created: total=%s", order.order_number, order.total_price)
    return order


@transaction.atomic
def add_cake_bar_payment(user, order_id, amount, payment_type, description="", now=None):
    now = now or timezone.now()
    order = CakeBarOrder.objects.select_for_update().filter(pk=order_id).first()
    if order is None:
        raise NotFound("Order not found.")

    amount = _money(amount)
    new_paid = order.amount_paid + amount
    if new_paid > order.total_price:
        raise PaymentExceedsBalance("The amount exceeds the order total.")

    pt = normalize_payment_type(payment_type)
    payment = CakeBarPayment.objects.create(
        order=order,
        amount=amount,
        payment_type=pt,
        description=description or f"Payment {pt}",
        paid_by=user,
        created_at=now,
    )

    order.amount_paid = new_paid
    order.remaining_amount = order.total_price - new_paid
    order.save(update_fields=["amount_paid", "remaining_amount"])

    logger.info("Cake bar order %s paid %s (%s), remaining %s", order.order_number, amount, pt, order.remaining_amount)
    return payment, order


# =========================================================
# CUSTOM ORDERS
# =========================================================
def next_custom_order_number(year: int) -> str:
    n = CustomOrder.objects.count() + 1
    while CustomOrder.objects.filter(order_number=f"CUSTOM-{year}-{n:04d}").exists():
        n += 1
    return f"CUSTOM-{year}-{n:04d}"


@transaction.atomic
def create_custom_order(user, customer_name, description, delivery_date, estimated_price, deposit,
                        payment_type="CASH", customer_phone="", customer_email="", notes="", now=None):
    now = now or timezone.now()
    price = _money(estimated_price)
    deposit = _money(deposit)

    if deposit < price * MIN_DEPOSIT_RATIO:
        raise DepositTooLow()
    if deposit > price:
        raise PaymentExceedsBalance("The deposit cannot exceed the estimated price.")

    order = CustomOrder.objects.create(
        order_number=next_custom_order_number(timezone.localtime(now).year),
        customer_name=customer_name,
        customer_phone=customer_phone or "",
        customer_email=customer_email or "",
        description=description,
        notes=notes or "",
        estimated_price=price,
        total_paid=deposit,
        delivery_date=delivery_date,
        user=user,
        created_at=now,
    )
    CustomOrderPayment.objects.create(
        custom_order=order,
        amount=deposit,
        payment_type=normalize_payment_type(payment_type),
        installment=CustomOrderPayment.Installment.DEPOSIT,
        description="Initial order deposit",
        user=user,
        created_at=now,
    )

    logger.info("Custom order %s created: estimate=%s deposit=%s", order.order_number, price, deposit)
    return order


@transaction.atomic
def add_custom_order_payment(user, order_id, amount, payment_type,
                             installment=CustomOrderPayment.Installment.PARTIAL, description="", now=None):
    now = now or timezone.now()
    order = CustomOrder.objects.select_for_update().filter(pk=order_id).first()
    if order is None:
        raise NotFound("Order not found.")

    amount = _money(amount)
    new_total = order.total_paid + amount
    if new_total > order.estimated_price:
        raise PaymentExceedsBalance("Total payments cannot exceed the estimated price.")

    if installment not in CustomOrderPayment.Installment.values:
        raise BakeryError(f"Invalid installment. Use: {', '.join(CustomOrderPayment.Installment.values)}")

    payment = CustomOrderPayment.objects.create(
        custom_order=order,
        amount=amount,
        payment_type=normalize_payment_type(payment_type),
        installment=installment,
        description=description or "",
        user=user,
        created_at=now,
    )
    order.total_paid = new_total
    order.save(update_fields=["total_paid"])

    logger.info("Custom order %s paid %s, balance %s", order.order_number, amount, order.balance_due)
    return payment, order


def set_custom_order_status(order: CustomOrder, status: str) -> CustomOrder:
    if status not in CustomOrder.Status.values:
        raise BakeryError(f"Invalid status. Use: {', '.join(CustomOrder.Status.values)}")
    order.status = status
    order.save(update_fields=["status"])
    logger.info("Custom order %s -> %s", order.order_number, status)
    return order
