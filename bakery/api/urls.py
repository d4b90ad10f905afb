from django.urls import path

from bakery.api.views_attendance import (
    AdminAlertsView, AdminWorkSessionsView, EmployeeBreakView, EmployeeClockView, EmployeeStatusView,
)
from bakery.api.views_auth import LoginView, LogoutView, MeView
from bakery.api.views_cash import CashClosureView, CleanPaymentTypesView
from bakery.api.views_config import PublicSystemConfigView, SystemConfigView

urlpatterns = [
    path("auth/login/", LoginView.as_view(), name="auth-login"),
    path("auth/logout/", LogoutView.as_view(), name="auth-logout"),
    path("auth/me/", MeView.as_view(), name="auth-me"),

    path("employee/clock/", EmployeeClockView.as_view(), name="employee-clock"),
    path("employee/break/", EmployeeBreakView.as_view(), name="employee-break"),
    path("employee/status/", EmployeeStatusView.as_view(), name="employee-status"),

    path("admin/work-sessions/", AdminWorkSessionsView.as_view(), name="admin-work-sessions"),
    path("admin/alerts/", AdminAlertsView.as_view(), name="admin-alerts"),
    path("admin/cash-closure/", CashClosureView.as_view(), name="admin-cash-closure"),
    path("admin/clean-payment-types/", CleanPaymentTypesView.as_view(), name="admin-clean-payment-types"),
    path("admin/system-config/", SystemConfigView.as_view(), name="admin-system-config"),

    path("public/system-config/", PublicSystemConfigView.as_view(), name="public-system-config"),
]
