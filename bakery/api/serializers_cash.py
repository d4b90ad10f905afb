from decimal import Decimal

from rest_framework import serializers

from bakery.models_cash import CashRegister


class CashRegisterSerializer(serializers.ModelSerializer):
    opened_by_name = serializers.SerializerMethodField()
    closed_by_name = serializers.SerializerMethodField()

    class Meta:
        model = CashRegister
        fields = [
            "id", "date", "status", "is_open",
            "opened_by", "opened_by_name", "closed_by", "closed_by_name", "closed_at",
            "opening_cash", "closing_cash",
            "total_sales", "total_expenses",
            "expected_cash", "cash_difference",
            "notes",
        ]
        read_only_fields = fields

    def _name(self, u):
        if u is None:
            return None
        return getattr(u, "name", None) or getattr(u, "username", "")

    def get_opened_by_name(self, obj):
        return self._name(obj.opened_by)

    def get_closed_by_name(self, obj):
        return self._name(obj.closed_by)


class PaymentEntrySerializer(serializers.Serializer):
    id = serializers.CharField()
    source = serializers.CharField()
    amount = serializers.DecimalField(max_digits=18, decimal_places=2)
    payment_type = serializers.CharField()
    created_at = serializers.DateTimeField()
    extra = serializers.DictField()


class CashClosureActionSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=("open", "close"))
    openingCash = serializers.DecimalField(
        max_digits=18, decimal_places=2, min_value=Decimal("0"), required=False, default=Decimal("0")
    )
    actualCash = serializers.DecimalField(max_digits=18, decimal_places=2, min_value=Decimal("0"), required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):
        if attrs["action"] == "close" and attrs.get("actualCash") is None:
            raise serializers.ValidationError({"actualCash": "This field is required to close the register."})
        return attrs
