from decimal import Decimal

from django.contrib.auth import get_user_model
from rest_framework import serializers

from .models import (
    CakeBarCustomization,
    CakeBarOption,
    CakeBarOrder,
    CakeBarPayment,
    Category,
    CustomOrder,
    CustomOrderPayment,
    Expense,
    PaymentType,
    Product,
    Sale,
    SaleItem,
)

User = get_user_model()


# ========== USERS ==========
class UserSerializer(serializers.ModelSerializer):
    name = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = ["id", "username", "email", "name", "display_name", "role", "is_active", "date_joined"]
        read_only_fields = ["id", "date_joined"]


class UserWriteSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, required=False, min_length=6)

    class Meta:
        model = User
        fields = ["id", "username", "email", "display_name", "role", "is_active", "password"]

    def validate(self, attrs):
        if self.instance is None and not attrs.get("password"):
            raise serializers.ValidationError({"password": "This field is required."})
        return attrs

    def create(self, validated_data):
        password = validated_data.pop("password")
        user = User(**validated_data)
        user.set_password(password)
        user.save()
        return user

    def update(self, instance, validated_data):
        password = validated_data.pop("password", None)
        for k, v in validated_data.items():
            setattr(instance, k, v)
        if password:
            instance.set_password(password)
        instance.save()
        return instance


# ========== CATALOG ==========
class CategorySerializer(serializers.ModelSerializer):
    product_count = serializers.IntegerField(read_only=True, required=False)

    class Meta:
        model = Category
        fields = ["id", "name", "description", "is_active", "product_count"]


class ProductSerializer(serializers.ModelSerializer):
    image_url = serializers.SerializerMethodField()
    category = CategorySerializer(read_only=True)
    category_id = serializers.PrimaryKeyRelatedField(
        queryset=Category.objects.all(), source="category", write_only=True, required=False, allow_null=True
    )
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id", "name", "description", "product_type", "barcode",
            "price", "cost", "stock", "min_stock", "is_service", "is_active", "is_low_stock",
            "image", "image_url", "category", "category_id",
            "created_at", "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]
        extra_kwargs = {"image": {"write_only": True, "required": False}}

    def get_image_url(self, obj):
        if obj.image:
            return obj.image.url
        return None

    def validate_barcode(self, value):
        # blank barcodes are stored as NULL so the unique index ignores them
        return (value or "").strip() or None


# ========== SALES ==========
class SaleItemSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source="product.name", read_only=True)

    class Meta:
        model = SaleItem
        fields = ["id", "product", "product_name", "quantity", "unit_price", "subtotal"]


class SaleSerializer(serializers.ModelSerializer):
    items = SaleItemSerializer(many=True, read_only=True)
    user_name = serializers.SerializerMethodField()

    class Meta:
        model = Sale
        fields = [
            "id", "sale_number", "sale_type", "status",
            "subtotal", "discount_amount", "total", "payment_type",
            "user", "user_name", "cash_register", "created_at", "items",
        ]

    def get_user_name(self, obj):
        return obj.user.name if obj.user else None


class SaleItemInputSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)
    unit_price = serializers.DecimalField(max_digits=18, decimal_places=2, required=False, allow_null=True)


class SaleCreateSerializer(serializers.Serializer):
    items = SaleItemInputSerializer(many=True)
    # a plain enum string or a {"type": ..., ...} object
    payment_method = serializers.JSONField(required=False, default=PaymentType.CASH)
    sale_type = serializers.ChoiceField(choices=Sale.SaleType.choices, default=Sale.SaleType.DISPLAY)
    discount = serializers.DecimalField(max_digits=5, decimal_places=2, min_value=0, max_value=100, default=0)
    amount_received = serializers.DecimalField(max_digits=18, decimal_places=2, min_value=0, default=0)

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError("At least 1 item is required")
        return value


# ========== EXPENSES ==========
class ExpenseSerializer(serializers.ModelSerializer):
    class Meta:
        model = Expense
        fields = ["id", "description", "category", "amount", "cash_register", "created_by", "created_at"]
        read_only_fields = ["id", "cash_register", "created_by", "created_at"]

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("Amount must be positive")
        return value


# ========== CAKE BAR ==========
class CakeBarOptionSerializer(serializers.ModelSerializer):
    class Meta:
        model = CakeBarOption
        fields = ["id", "option_type", "name", "price_add", "is_active"]


class CakeBarCustomizationSerializer(serializers.ModelSerializer):
    option_name = serializers.CharField(source="option.name", read_only=True)
    option_type = serializers.CharField(source="option.option_type", read_only=True)

    class Meta:
        model = CakeBarCustomization
        fields = ["id", "option", "option_name", "option_type", "quantity", "unit_price", "total_price"]


class CakeBarPaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = CakeBarPayment
        fields = ["id", "order", "amount", "payment_type", "description", "paid_by", "created_at"]


class CakeBarOrderSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source="product.name", read_only=True)
    customizations = CakeBarCustomizationSerializer(many=True, read_only=True)
    payments = CakeBarPaymentSerializer(many=True, read_only=True)

    class Meta:
        model = CakeBarOrder
        fields = [
            "id", "order_number", "product", "product_name", "size",
            "customer_name", "customer_phone", "notes",
            "base_price", "total_price", "amount_paid", "remaining_amount",
            "status", "created_by", "created_at", "customizations", "payments",
        ]
        read_only_fields = [
            "id", "order_number", "product", "size", "base_price", "total_price",
            "amount_paid", "remaining_amount", "created_by", "created_at",
        ]


class CustomizationInputSerializer(serializers.Serializer):
    option_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1, default=1)


class CakeBarOrderCreateSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    size = serializers.ChoiceField(choices=CakeBarOrder.Size.choices)
    customizations = CustomizationInputSerializer(many=True, required=False, default=list)
    customer_name = serializers.CharField(required=False, allow_blank=True, default="")
    customer_phone = serializers.CharField(required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class CakeBarPaymentCreateSerializer(serializers.Serializer):
    order_id = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=18, decimal_places=2, min_value=Decimal("0.01"))
    payment_type = serializers.JSONField()
    description = serializers.CharField(required=False, allow_blank=True, default="")


# ========== CUSTOM ORDERS ==========
class CustomOrderPaymentSerializer(serializers.ModelSerializer):
    user_name = serializers.SerializerMethodField()

    class Meta:
        model = CustomOrderPayment
        fields = [
            "id", "custom_order", "amount", "payment_type", "installment",
            "description", "user", "user_name", "created_at",
        ]

    def get_user_name(self, obj):
        return obj.user.name if obj.user else None


class CustomOrderSerializer(serializers.ModelSerializer):
    payments = CustomOrderPaymentSerializer(many=True, read_only=True)
    balance_due = serializers.DecimalField(max_digits=18, decimal_places=2, read_only=True)
    user_name = serializers.SerializerMethodField()

    class Meta:
        model = CustomOrder
        fields = [
            "id", "order_number", "customer_name", "customer_phone", "customer_email",
            "description", "notes", "estimated_price", "total_paid", "balance_due",
            "delivery_date", "status", "user", "user_name", "created_at", "payments",
        ]
        read_only_fields = ["id", "order_number", "total_paid", "status", "user", "created_at"]

    def get_user_name(self, obj):
        return obj.user.name if obj.user else None


class CustomOrderCreateSerializer(serializers.Serializer):
    customer_name = serializers.CharField()
    customer_phone = serializers.CharField(required=False, allow_blank=True, default="")
    customer_email = serializers.EmailField(required=False, allow_blank=True, default="")
    description = serializers.CharField()
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    delivery_date = serializers.DateTimeField()
    estimated_price = serializers.DecimalField(max_digits=18, decimal_places=2, min_value=Decimal("0.01"))
    advance_amount = serializers.DecimalField(max_digits=18, decimal_places=2, min_value=Decimal("0.01"))
    payment_type = serializers.JSONField(required=False, default=PaymentType.CASH)


class CustomOrderPaymentCreateSerializer(serializers.Serializer):
    custom_order_id = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=18, decimal_places=2, min_value=Decimal("0.01"))
    payment_type = serializers.JSONField()
    installment = serializers.ChoiceField(
        choices=CustomOrderPayment.Installment.choices, default=CustomOrderPayment.Installment.PARTIAL
    )
    description = serializers.CharField(required=False, allow_blank=True, default="")


class CustomOrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=CustomOrder.Status.choices)
