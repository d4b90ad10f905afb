from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import (
    BreakSession,
    CakeBarCustomization,
    CakeBarOption,
    CakeBarOrder,
    CakeBarPayment,
    CashRegister,
    Category,
    CustomOrder,
    CustomOrderPayment,
    Expense,
    Product,
    Sale,
    SaleItem,
    SystemConfig,
    User,
    WorkSession,
)


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'product_type', 'category', 'price', 'stock', 'min_stock', 'is_service', 'is_active')
    search_fields = ('name', 'barcode')
    list_filter = ('product_type', 'category', 'is_active', 'is_service')
    ordering = ('name',)


class SaleItemInline(admin.TabularInline):
    model = SaleItem
    extra = 0
    readonly_fields = ('product', 'quantity', 'unit_price', 'subtotal')


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = ('sale_number', 'sale_type', 'total', 'payment_type', 'status', 'served_by', 'created_at_formatted')
    search_fields = ('sale_number', 'user__username')
    list_filter = ('sale_type', 'status')
    ordering = ('-created_at',)
    inlines = [SaleItemInline]

    def created_at_formatted(self, obj):
        return obj.created_at.strftime("%I:%M %p, %d %B, %Y")
    created_at_formatted.short_description = 'Time'

    def served_by(self, obj):
        return obj.user.username if obj.user else "-"
    served_by.short_description = 'Served By'


class BreakSessionInline(admin.TabularInline):
    model = BreakSession
    extra = 0


@admin.register(WorkSession)
class WorkSessionAdmin(admin.ModelAdmin):
    list_display = (
        'id', 'user', 'day_date', 'session_number', 'status', 'exit_type',
        'is_on_time', 'minutes_late', 'hours_worked', 'net_hours_worked',
    )
    list_filter = ('status', 'is_on_time', 'day_date')
    search_fields = ('user__username', 'user__email')
    date_hierarchy = 'day_date'
    inlines = [BreakSessionInline]


@admin.register(CashRegister)
class CashRegisterAdmin(admin.ModelAdmin):
    list_display = (
        'id', 'date', 'status', 'opening_cash', 'closing_cash',
        'total_sales', 'total_expenses', 'expected_cash', 'cash_difference', 'opened_by', 'closed_by',
    )
    list_filter = ('status',)
    ordering = ('-date',)


class CakeBarCustomizationInline(admin.TabularInline):
    model = CakeBarCustomization
    extra = 0


@admin.register(CakeBarOrder)
class CakeBarOrderAdmin(admin.ModelAdmin):
    list_display = ('order_number', 'product', 'size', 'total_price', 'amount_paid', 'remaining_amount', 'status')
    list_filter = ('status', 'size')
    search_fields = ('order_number', 'customer_name')
    inlines = [CakeBarCustomizationInline]


class CustomOrderPaymentInline(admin.TabularInline):
    model = CustomOrderPayment
    extra = 0


@admin.register(CustomOrder)
class CustomOrderAdmin(admin.ModelAdmin):
    list_display = ('order_number', 'customer_name', 'estimated_price', 'total_paid', 'delivery_date', 'status')
    list_filter = ('status',)
    search_fields = ('order_number', 'customer_name', 'customer_phone')
    inlines = [CustomOrderPaymentInline]


@admin.register(SystemConfig)
class SystemConfigAdmin(admin.ModelAdmin):
    list_display = ('key', 'value', 'data_type', 'category', 'updated_at')
    list_filter = ('category', 'data_type')
    search_fields = ('key',)


admin.site.register(Category)
admin.site.register(Expense)
admin.site.register(CakeBarOption)
admin.site.register(CakeBarPayment)


class BakeryUserAdmin(UserAdmin):
    model = User
    list_display = ['username', 'email', 'display_name', 'role', 'is_active', 'is_staff']
    list_filter = ['role', 'is_active']
    fieldsets = UserAdmin.fieldsets + (
        (None, {'fields': ('role', 'display_name')}),
    )

admin.site.register(User, BakeryUserAdmin)
