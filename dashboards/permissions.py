"""
Dashboard-specific permissions for role-based access control.
"""

from rest_framework import permissions

from accounts.models import User
from .exceptions import UNAUTHORIZED_CODE


class HasDashboardRole(permissions.BasePermission):
    """
    Base permission: the user must be authenticated and hold ``role``.
    """
    role = None
    message = 'You are not allowed to view these statistics'
    code = UNAUTHORIZED_CODE

    def has_permission(self, request, view):
        return bool(
            request.user and
            request.user.is_authenticated and
            request.user.role == self.role
        )


class IsPlatformAdmin(HasDashboardRole):
    """
    Permission for the admin statistics dashboard.
    """
    role = User.UserRole.ADMIN


class IsSeller(HasDashboardRole):
    """
    Permission for the seller statistics dashboard.
    """
    role = User.UserRole.SELLER


class IsSupplier(HasDashboardRole):
    """
    Permission for the supplier statistics dashboard.
    """
    role = User.UserRole.SUPPLIER
