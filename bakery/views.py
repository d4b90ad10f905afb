from django.db.models import Count, F, Q
from django.utils import timezone
from django.utils.dateparse import parse_date
from rest_framework import mixins, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .models import CakeBarOption, CakeBarOrder, Category, CustomOrder, Expense, Product, Sale, User
from .permissions import AdminOrManagerWriteOrRead, IsAdminRole
from .serializers import (
    CakeBarOptionSerializer,
    CakeBarOrderCreateSerializer,
    CakeBarOrderSerializer,
    CakeBarPaymentCreateSerializer,
    CakeBarPaymentSerializer,
    CategorySerializer,
    CustomOrderCreateSerializer,
    CustomOrderPaymentCreateSerializer,
    CustomOrderPaymentSerializer,
    CustomOrderSerializer,
    CustomOrderStatusSerializer,
    ExpenseSerializer,
    ProductSerializer,
    SaleCreateSerializer,
    SaleSerializer,
    UserSerializer,
    UserWriteSerializer,
)
from .services import orders_service, sales_service
from .services.dates import day_range


def _truthy(v) -> bool:
    return (v or "").strip().lower() in ("1", "true", "yes")


# ========== CATALOG ==========
class CategoryViewSet(viewsets.ModelViewSet):
    serializer_class = CategorySerializer
    permission_classes = [AdminOrManagerWriteOrRead]

    def get_queryset(self):
        return Category.objects.annotate(product_count=Count("products")).order_by("name")


class ProductViewSet(viewsets.ModelViewSet):
    """
    Filters: ?type=DISPLAY|CAKE_BAR &category=<id> &search=<name/barcode>
             &active=true|false &low_stock=true
    """
    serializer_class = ProductSerializer
    permission_classes = [AdminOrManagerWriteOrRead]

    def get_queryset(self):
        qs = Product.objects.select_related("category").order_by("name")
        p = self.request.query_params

        if p.get("type"):
            qs = qs.filter(product_type=p["type"].upper())
        if p.get("category"):
            qs = qs.filter(category_id=p["category"])
        if p.get("search"):
            term = p["search"].strip()
            qs = qs.filter(Q(name__icontains=term) | Q(barcode__iexact=term) | Q(description__icontains=term))
        if p.get("active"):
            qs = qs.filter(is_active=_truthy(p["active"]))
        if _truthy(p.get("low_stock")):
            qs = qs.filter(is_service=False, stock__lte=F("min_stock"))
        return qs


# ========== SALES ==========
class SaleViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, mixins.CreateModelMixin, viewsets.GenericViewSet):
    serializer_class = SaleSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        return Sale.objects.select_related("user").prefetch_related("items__product")

    def list(self, request, *args, **kwargs):
        return Response(SaleSerializer(sales_service.recent_sales(50), many=True).data)

    def create(self, request, *args, **kwargs):
        s = SaleCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        d = s.validated_data

        result = sales_service.create_sale(
            request.user,
            items=d["items"],
            payment_type=d["payment_method"],
            sale_type=d["sale_type"],
            discount_percent=d["discount"],
            amount_received=d["amount_received"],
        )
        return Response({
            "sale": SaleSerializer(result.sale).data,
            "subtotal": result.subtotal,
            "discountAmount": result.discount_amount,
            "total": result.total,
            "change": result.change,
            "amountReceived": result.amount_received,
            "paymentDetails": d["payment_method"],
        }, status=201)


class ExpenseViewSet(viewsets.ModelViewSet):
    serializer_class = ExpenseSerializer
    permission_classes = [AdminOrManagerWriteOrRead]

    def get_queryset(self):
        qs = Expense.objects.select_related("created_by").order_by("-created_at", "-id")
        day = self.request.query_params.get("date")
        if day:
            try:
                d = parse_date(day)
            except ValueError:
                d = None
            if d is None:
                raise ValidationError({"date": "Use YYYY-MM-DD."})
            dr = day_range(d)
            qs = qs.filter(created_at__gte=dr.start, created_at__lt=dr.end)
        return qs

    def create(self, request, *args, **kwargs):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        expense = sales_service.record_expense(
            request.user,
            description=s.validated_data["description"],
            amount=s.validated_data["amount"],
            category=s.validated_data.get("category", "GENERAL"),
        )
        return Response(ExpenseSerializer(expense).data, status=201)


# ========== CAKE BAR ==========
class CakeBarOptionViewSet(viewsets.ModelViewSet):
    serializer_class = CakeBarOptionSerializer
    permission_classes = [AdminOrManagerWriteOrRead]

    def get_queryset(self):
        qs = CakeBarOption.objects.all()
        t = self.request.query_params.get("type")
        if t:
            qs = qs.filter(option_type=t.upper())
        if not _truthy(self.request.query_params.get("all")):
            qs = qs.filter(is_active=True)
        return qs


class CakeBarOrderViewSet(viewsets.ModelViewSet):
    serializer_class = CakeBarOrderSerializer
    permission_classes = [IsAuthenticated]
    http_method_names = ["get", "post", "patch", "head", "options"]

    def get_queryset(self):
        qs = CakeBarOrder.objects.select_related("product").prefetch_related("customizations__option", "payments")
        if _truthy(self.request.query_params.get("today")):
            dr = day_range(timezone.localdate())
            qs = qs.filter(created_at__gte=dr.start, created_at__lt=dr.end)
        return qs

    def create(self, request, *args, **kwargs):
        s = CakeBarOrderCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        d = s.validated_data
        order = orders_service.create_cake_bar_order(
            request.user,
            product_id=d["product_id"],
            size=d["size"],
            customizations=d["customizations"],
            customer_name=d["customer_name"],
            customer_phone=d["customer_phone"],
            notes=d["notes"],
        )
        return Response(CakeBarOrderSerializer(order).data, status=201)

    @action(detail=False, methods=["post"], url_path="payments")
    def payments(self, request):
        s = CakeBarPaymentCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        d = s.validated_data
        payment, order = orders_service.add_cake_bar_payment(
            request.user, d["order_id"], d["amount"], d["payment_type"], description=d["description"],
        )
        return Response({
            "payment": CakeBarPaymentSerializer(payment).data,
            "order": CakeBarOrderSerializer(order).data,
        }, status=201)


# ========== CUSTOM ORDERS ==========
class CustomOrderViewSet(viewsets.ModelViewSet):
    serializer_class = CustomOrderSerializer
    permission_classes = [IsAuthenticated]
    http_method_names = ["get", "post", "patch", "head", "options"]

    def get_queryset(self):
        qs = CustomOrder.objects.select_related("user").prefetch_related("payments__user")
        st = self.request.query_params.get("status")
        if st:
            qs = qs.filter(status=st.upper())
        return qs

    def create(self, request, *args, **kwargs):
        s = CustomOrderCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        d = s.validated_data
        order = orders_service.create_custom_order(
            request.user,
            customer_name=d["customer_name"],
            description=d["description"],
            delivery_date=d["delivery_date"],
            estimated_price=d["estimated_price"],
            deposit=d["advance_amount"],
            payment_type=d["payment_type"],
            customer_phone=d["customer_phone"],
            customer_email=d["customer_email"],
            notes=d["notes"],
        )
        return Response(CustomOrderSerializer(order).data, status=201)

    @action(detail=True, methods=["patch"], url_path="status")
    def set_status(self, request, pk=None):
        order = self.get_object()
        s = CustomOrderStatusSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        orders_service.set_custom_order_status(order, s.validated_data["status"])
        return Response(CustomOrderSerializer(order).data)

    @action(detail=False, methods=["post"], url_path="payments")
    def payments(self, request):
        s = CustomOrderPaymentCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        d = s.validated_data
        payment, _order = orders_service.add_custom_order_payment(
            request.user,
            d["custom_order_id"],
            d["amount"],
            d["payment_type"],
            installment=d["installment"],
            description=d["description"],
        )
        return Response(CustomOrderPaymentSerializer(payment).data, status=201)


# ========== USERS (ADMIN) ==========
class UserViewSet(viewsets.ModelViewSet):
    permission_classes = [IsAdminRole]
    http_method_names = ["get", "post", "patch", "put", "delete", "head", "options"]

    def get_queryset(self):
        qs = User.objects.all().order_by("username")
        role = self.request.query_params.get("role")
        if role:
            qs = qs.filter(role=role.upper())
        return qs

    def get_serializer_class(self):
        if self.action in ("create", "update", "partial_update"):
            return UserWriteSerializer
        return UserSerializer

    def create(self, request, *args, **kwargs):
        s = UserWriteSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        user = s.save()
        return Response(UserSerializer(user).data, status=201)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        s = UserWriteSerializer(self.get_object(), data=request.data, partial=partial)
        s.is_valid(raise_exception=True)
        user = s.save()
        return Response(UserSerializer(user).data)

    def perform_destroy(self, instance):
        # deactivate instead of deleting: sessions and sales keep their owner
        instance.is_active = False
        instance.save(update_fields=["is_active"])
