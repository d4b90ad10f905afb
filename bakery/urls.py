from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    CakeBarOptionViewSet,
    CakeBarOrderViewSet,
    CategoryViewSet,
    CustomOrderViewSet,
    ExpenseViewSet,
    ProductViewSet,
    SaleViewSet,
    UserViewSet,
)

router = DefaultRouter()
router.register(r'categories', CategoryViewSet, basename='category')
router.register(r'products', ProductViewSet, basename='product')
router.register(r'sales', SaleViewSet, basename='sale')
router.register(r'expenses', ExpenseViewSet, basename='expense')
router.register(r'cake-bar/options', CakeBarOptionViewSet, basename='cakebar-option')
router.register(r'cake-bar/orders', CakeBarOrderViewSet, basename='cakebar-order')
router.register(r'custom-orders', CustomOrderViewSet, basename='custom-order')
router.register(r'admin/users', UserViewSet, basename='user')

cake_bar_payments = CakeBarOrderViewSet.as_view({'post': 'payments'})
custom_order_payments = CustomOrderViewSet.as_view({'post': 'payments'})

urlpatterns = [
    path('', include('bakery.api.urls')),
    path('cake-bar/payments/', cake_bar_payments, name='cakebar-payments'),
    path('custom-orders/payments/', custom_order_payments, name='custom-order-payments'),
    path('', include(router.urls)),
]
