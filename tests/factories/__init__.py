from .accounts import UserFactory
from .catalog import CategoryFactory, ProductFactory
from .sales import SaleFactory, ExpenseFactory
from .orders import (
    CakeBarOptionFactory,
    CakeBarOrderFactory,
    CakeBarPaymentFactory,
    CustomOrderFactory,
    CustomOrderPaymentFactory,
)

__all__ = [
    "UserFactory",
    "CategoryFactory",
    "ProductFactory",
    "SaleFactory",
    "ExpenseFactory",
    "CakeBarOptionFactory",
    "CakeBarOrderFactory",
    "CakeBarPaymentFactory",
    "CustomOrderFactory",
    "CustomOrderPaymentFactory",
]
