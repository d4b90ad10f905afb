import factory
from decimal import Decimal

from bakery import models as bakery_models


class CategoryFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = bakery_models.Category
        django_get_or_create = ("name",)

    name = factory.Sequence(lambda n: f"Category {n}")


class ProductFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = bakery_models.Product

    name = factory.Sequence(lambda n: f"Bread {n}")
    category = factory.SubFactory(CategoryFactory)
    product_type = "DISPLAY"
    price = Decimal("5000.00")
    cost = Decimal("2000.00")
    stock = 20
    min_stock = 5
    is_service = False
    is_active = True
