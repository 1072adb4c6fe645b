"""
Role-based permission classes shared by every app.

Roles form a hierarchy (admin > manager > user); a permission that requires
``manager`` is granted to admins too.

Usage:
    class ResidentViewSet(viewsets.ModelViewSet):
        def get_permissions(self):
            if self.action in ['list', 'retrieve']:
                return [IsAuthenticated()]
            return [IsAuthenticated(), IsManager()]
"""
from rest_framework.permissions import BasePermission, SAFE_METHODS

from .models import Role


class HasRole(BasePermission):
    """Grant access when the user's role ranks at or above ``required_role``."""

    required_role = Role.USER
    message = 'You do not have permission to perform this action.'

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return user.has_role(self.required_role)


class IsManager(HasRole):
    required_role = Role.MANAGER
    message = 'Manager access required.'


class IsAdmin(HasRole):
    required_role = Role.ADMIN
    message = 'Admin access required.'


class IsManagerOrReadOnly(IsManager):
    """Any authenticated user may read; writes require manager."""

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return bool(request.user and request.user.is_authenticated)
        return super().has_permission(request, view)
