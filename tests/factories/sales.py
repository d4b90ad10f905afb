import factory
from decimal import Decimal
from django.utils import timezone

from bakery import models as bakery_models
from .accounts import UserFactory


class SaleFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = bakery_models.Sale

    sale_number = factory.Sequence(lambda n: f"DISPLAY-2024-{n + 1:06d}")
    user = factory.SubFactory(UserFactory)
    cash_register = None
    subtotal = factory.LazyAttribute(lambda o: o.total)
    total = Decimal("10000.00")
    payment_type = "CASH"
    sale_type = "DISPLAY"
    status = "COMPLETED"
    created_at = factory.LazyFunction(timezone.now)


class ExpenseFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = bakery_models.Expense

    description = factory.Sequence(lambda n: f"Expense {n}")
    category = "SUPPLIES"
    amount = Decimal("1000.00")
    cash_register = None
    created_at = factory.LazyFunction(timezone.now)
