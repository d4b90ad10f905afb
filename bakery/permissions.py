# bakery/permissions.py
from rest_framework.permissions import BasePermission, SAFE_METHODS

from .models import User

STAFF_ROLES = (User.Role.ADMIN, User.Role.MANAGER)


def has_role(user, roles) -> bool:
    """Superusers pass every role check; everyone else is judged by `role`."""
    if not user or not user.is_authenticated:
        return False
    if user.is_superuser:
        return True
    return (getattr(user, "role", "") or "").upper().strip() in roles


class IsAdminRole(BasePermission):
    """System configuration, user management and data maintenance."""
    message = "Admin only."

    def has_permission(self, request, view):
        return has_role(getattr(request, "user", None), (User.Role.ADMIN,))


class IsAdminOrManager(BasePermission):
    """Cash closure and the attendance board."""
    message = "Admin or manager only."

    def has_permission(self, request, view):
        return has_role(getattr(request, "user", None), STAFF_ROLES)


class AdminOrManagerWriteOrRead(BasePermission):
    """
    Any signed-in user can read (the counter needs the catalog);
    only admin or manager can change it.
    """
    message = "Write access is admin/manager only."

    def has_permission(self, request, view):
        user = getattr(request, "user", None)
        if request.method in SAFE_METHODS:
            return bool(user and user.is_authenticated)
        return has_role(user, STAFF_ROLES)
