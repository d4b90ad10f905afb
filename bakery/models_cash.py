from decimal import Decimal
from django.conf import settings
from django.db import models
from django.db.models import Q


class RegisterStatus(models.TextChoices):
    OPEN = "open", "Open"
    CLOSED = "closed", "Closed"


class CashRegister(models.Model):
    date = models.DateTimeField(db_index=True)
    status = models.CharField(max_length=10, choices=RegisterStatus.choices, default=RegisterStatus.OPEN)

    opened_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="registers_opened"
    )
    closed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="registers_closed"
    )
    closed_at = models.DateTimeField(null=True, blank=True)

    opening_cash = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal("0.00"))
    closing_cash = models.DecimalField(max_digits=18, decimal_places=2, null=True, blank=True)

    # Totals (snapshot taken on close)
    total_sales = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal("0.00"))
    total_expenses = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal("0.00"))
    expected_cash = models.DecimalField(max_digits=18, decimal_places=2, null=True, blank=True)
    cash_difference = models.DecimalField(max_digits=18, decimal_places=2, null=True, blank=True)

    notes = models.TextField(blank=True, default="")

    class Meta:
        ordering = ["-date", "-id"]
        indexes = [
            models.Index(fields=["status", "date"], name="cashreg_status_date_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["status"],
                condition=Q(status="open"),
                name="single_open_cash_register",
            ),
        ]

    @property
    def is_open(self) -> bool:
        return self.status == RegisterStatus.OPEN

    def __str__(self):
        return f"Register#{self.id} {self.date:%Y-%m-%d} {self.status}"
