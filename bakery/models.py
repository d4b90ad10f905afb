from decimal import Decimal

from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone
from cloudinary.models import CloudinaryField

from bakery.models_attendance import WorkSession, BreakSession  # noqa: F401
from bakery.models_cash import CashRegister  # noqa: F401

DEC0 = Decimal("0.00")


class PaymentType(models.TextChoices):
    CASH = "CASH", "Cash"
    CARD = "CARD", "Card"
    TRANSFER = "TRANSFER", "Transfer"
    MIXED = "MIXED", "Mixed"


# ========== USER ==========
class User(AbstractUser):
    class Role(models.TextChoices):
        ADMIN = "ADMIN", "Admin"
        MANAGER = "MANAGER", "Manager"
        EMPLOYEE = "EMPLOYEE", "Employee"

    email = models.EmailField(unique=True)
    display_name = models.CharField(max_length=120, blank=True, default="")
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.EMPLOYEE, db_index=True)

    @property
    def name(self):
        return self.display_name or self.get_full_name() or self.username

    def save(self, *args, **kwargs):
        """
        HARD POLICY:
        - ADMIN => is_superuser=True and is_staff=True
        - MANAGER => is_staff=True (admin site), never superuser
        - EMPLOYEE => no admin site access
        """
        r = (self.role or self.Role.EMPLOYEE).upper().strip()
        self.role = r

        if r == self.Role.ADMIN:
            self.is_superuser = True
            self.is_staff = True
        elif r == self.Role.MANAGER:
            self.is_superuser = False
            self.is_staff = True
        else:
            self.is_superuser = False
            self.is_staff = False

        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.name} ({self.role})"


# ========== CATEGORY ==========
class Category(models.Model):
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True, default="")
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ("name",)
        verbose_name_plural = "Categories"

    def __str__(self):
        return self.name


# ========== PRODUCT ==========
class Product(models.Model):
    class ProductType(models.TextChoices):
        DISPLAY = "DISPLAY", "Display case"
        CAKE_BAR = "CAKE_BAR", "Cake bar"

    name = models.CharField(max_length=150)
    description = models.TextField(blank=True, default="")
    category = models.ForeignKey(Category, on_delete=models.SET_NULL, null=True, blank=True, related_name="products")
    product_type = models.CharField(
        max_length=20, choices=ProductType.choices, default=ProductType.DISPLAY, db_index=True
    )

    # barcode is optional, but unique when present
    barcode = models.CharField(max_length=64, unique=True, null=True, blank=True)

    price = models.DecimalField(max_digits=18, decimal_places=2, default=DEC0)
    cost = models.DecimalField(max_digits=18, decimal_places=2, default=DEC0)
    stock = models.IntegerField(default=0)
    min_stock = models.IntegerField(default=5)

    # services (e.g. decorating) never touch stock
    is_service = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)

    image = CloudinaryField("product_image", blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-is_active", "name")

    @property
    def is_low_stock(self) -> bool:
        return not self.is_service and self.stock <= self.min_stock

    def __str__(self):
        return self.name


# ========== SALE ==========
class Sale(models.Model):
    class SaleType(models.TextChoices):
        DISPLAY = "DISPLAY", "Display case"
        CAKE_BAR = "CAKE_BAR", "Cake bar"

    class Status(models.TextChoices):
        COMPLETED = "COMPLETED", "Completed"
        CANCELLED = "CANCELLED", "Cancelled"

    sale_number = models.CharField(max_length=40, unique=True, db_index=True)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, related_name="sales")
    cash_register = models.ForeignKey(
        "bakery.CashRegister", on_delete=models.SET_NULL, null=True, blank=True, related_name="sales"
    )

    subtotal = models.DecimalField(max_digits=18, decimal_places=2, default=DEC0)
    discount_amount = models.DecimalField(max_digits=18, decimal_places=2, default=DEC0)
    total = models.DecimalField(max_digits=18, decimal_places=2, default=DEC0)

    # raw value: legacy rows may hold a JSON object, see services.payment_types
    payment_type = models.CharField(max_length=255, default=PaymentType.CASH)
    sale_type = models.CharField(max_length=20, choices=SaleType.choices, default=SaleType.DISPLAY, db_index=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.COMPLETED, db_index=True)

    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ("-created_at", "-id")

    def __str__(self):
        return self.sale_number


class SaleItem(models.Model):
    sale = models.ForeignKey(Sale, related_name="items", on_delete=models.CASCADE)
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name="sale_items")
    quantity = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=18, decimal_places=2)
    subtotal = models.DecimalField(max_digits=18, decimal_places=2)

    def __str__(self):
        return f"{self.product.name} x{self.quantity}"


# ========== EXPENSE ==========
class Expense(models.Model):
    description = models.CharField(max_length=255)
    category = models.CharField(max_length=60, blank=True, default="GENERAL")
    amount = models.DecimalField(max_digits=18, decimal_places=2)
    cash_register = models.ForeignKey(
        "bakery.CashRegister", on_delete=models.SET_NULL, null=True, blank=True, related_name="expenses"
    )
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ("-created_at", "-id")

    def __str__(self):
        return self.description


# ==========================================================
# CAKE BAR (customizable cakes)
# ==========================================================
class CakeBarOption(models.Model):
    class OptionType(models.TextChoices):
        FLAVOR = "FLAVOR", "Flavor"
        FILLING = "FILLING", "Filling"
        TOPPING = "TOPPING", "Topping"
        DECORATION = "DECORATION", "Decoration"

    option_type = models.CharField(max_length=20, choices=OptionType.choices, db_index=True)
    name = models.CharField(max_length=100)
    price_add = models.DecimalField(max_digits=18, decimal_places=2, default=DEC0)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ("option_type", "name")

    def __str__(self):
        return f"{self.get_option_type_display()}: {self.name}"


class CakeBarOrder(models.Model):
    class Size(models.TextChoices):
        SMALL = "15", "15 servings"
        MEDIUM = "20", "20 servings"
        LARGE = "30", "30 servings"

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        IN_PROGRESS = "in_progress", "In progress"
        READY = "ready", "Ready"
        DELIVERED = "delivered", "Delivered"
        CANCELLED = "cancelled", "Cancelled"

    order_number = models.CharField(max_length=20, unique=True, db_index=True)
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name="cake_bar_orders")
    size = models.CharField(max_length=5, choices=Size.choices, default=Size.SMALL)

    customer_name = models.CharField(max_length=120, blank=True, default="")
    customer_phone = models.CharField(max_length=30, blank=True, default="")
    notes = models.TextField(blank=True, default="")

    base_price = models.DecimalField(max_digits=18, decimal_places=2, default=DEC0)
    total_price = models.DecimalField(max_digits=18, decimal_places=2, default=DEC0)
    amount_paid = models.DecimalField(max_digits=18, decimal_places=2, default=DEC0)
    remaining_amount = models.DecimalField(max_digits=18, decimal_places=2, default=DEC0)

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING, db_index=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ("-created_at", "-id")

    def __str__(self):
        return self.order_number


class CakeBarCustomization(models.Model):
    order = models.ForeignKey(CakeBarOrder, on_delete=models.CASCADE, related_name="customizations")
    option = models.ForeignKey(CakeBarOption, on_delete=models.PROTECT)
    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.DecimalField(max_digits=18, decimal_places=2)
    total_price = models.DecimalField(max_digits=18, decimal_places=2)


class CakeBarPayment(models.Model):
    order = models.ForeignKey(CakeBarOrder, on_delete=models.CASCADE, related_name="payments")
    amount = models.DecimalField(max_digits=18, decimal_places=2)
    payment_type = models.CharField(max_length=255, default=PaymentType.CASH)
    description = models.CharField(max_length=255, blank=True, default="")
    paid_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ("-created_at", "-id")


# ==========================================================
# CUSTOM ORDERS (made to order, paid in installments)
# ==========================================================
class CustomOrder(models.Model):
    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        IN_PROGRESS = "IN_PROGRESS", "In progress"
        READY = "READY", "Ready"
        DELIVERED = "DELIVERED", "Delivered"
        CANCELLED = "CANCELLED", "Cancelled"

    order_number = models.CharField(max_length=30, unique=True, db_index=True)
    customer_name = models.CharField(max_length=120)
    customer_phone = models.CharField(max_length=30, blank=True, default="")
    customer_email = models.EmailField(blank=True, default="")
    description = models.TextField()
    notes = models.TextField(blank=True, default="")

    estimated_price = models.DecimalField(max_digits=18, decimal_places=2)
    total_paid = models.DecimalField(max_digits=18, decimal_places=2, default=DEC0)
    delivery_date = models.DateTimeField()

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING, db_index=True)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ("-created_at", "-id")

    @property
    def balance_due(self):
        return self.estimated_price - self.total_paid

    def __str__(self):
        return f"{self.order_number} - {self.customer_name}"


class CustomOrderPayment(models.Model):
    class Installment(models.TextChoices):
        DEPOSIT = "DEPOSIT", "Deposit"
        PARTIAL = "PARTIAL", "Partial"
        SETTLEMENT = "SETTLEMENT", "Settlement"

    custom_order = models.ForeignKey(CustomOrder, on_delete=models.CASCADE, related_name="payments")
    amount = models.DecimalField(max_digits=18, decimal_places=2)
    payment_type = models.CharField(max_length=255, default=PaymentType.CASH)
    installment = models.CharField(max_length=20, choices=Installment.choices, default=Installment.PARTIAL)
    description = models.CharField(max_length=255, blank=True, default="")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ("-created_at", "-id")


# ==========================================================
# SYSTEM CONFIGURATION (typed key/value store)
# ==========================================================
class SystemConfig(models.Model):
    class DataType(models.TextChoices):
        STRING = "string", "String"
        NUMBER = "number", "Number"
        BOOLEAN = "boolean", "Boolean"

    key = models.CharField(max_length=100, unique=True)
    value = models.TextField(blank=True, default="")
    data_type = models.CharField(max_length=10, choices=DataType.choices, default=DataType.STRING)
    category = models.CharField(max_length=40, blank=True, default="general")
    description = models.CharField(max_length=255, blank=True, default="")
    updated_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("category", "key")

    def typed_value(self):
        if self.data_type == self.DataType.BOOLEAN:
            return self.value == "true"
        if self.data_type == self.DataType.NUMBER:
            try:
                return float(self.value)
            except ValueError:
                return 0.0
        return self.value

    def __str__(self):
        return self.key
