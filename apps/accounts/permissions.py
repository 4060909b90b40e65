"""
Custom permission classes built on apps.accounts.policy.

This module defines the role checks reused by every app's views.
"""
from rest_framework.permissions import BasePermission, SAFE_METHODS

from . import policy


class IsSystemAdmin(BasePermission):
    """
    Allows access only to system admins.

    Usage:
        @permission_classes([IsAuthenticated, IsSystemAdmin])
        def system_statistics(request):
            ...
    """

    message = 'Only system administrators can perform this action.'

    def has_permission(self, request, view):
        return policy.is_system_admin(request.user)


class IsAdminRole(BasePermission):
    """
    Allows access to system admins and apartment admins.
    """

    message = 'Only administrators can perform this action.'

    def has_permission(self, request, view):
        return policy.is_admin(request.user)


class CanManageUser(BasePermission):
    """
    Permission to manage a user account.

    Allows if:
    - User is a system admin
    - Target is a non-system user of the admin's own apartment
    """

    message = 'You do not have permission to manage this user.'

    def has_object_permission(self, request, view, obj):
        return policy.can_manage_user(request.user, obj)


class IsCatalogManagerOrReadOnly(BasePermission):
    """Any authenticated user reads vendors/items; only admins write them."""

    message = 'Only administrators can manage vendors and items.'

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return policy.can_manage_catalog(request.user)

