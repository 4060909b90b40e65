"""
Custom permission classes for purchases app.

Both classes defer to apps.accounts.policy so purchase visibility follows
the same apartment rules as reports, trash and backups.
"""
from rest_framework.permissions import BasePermission

from apps.accounts import policy


class IsApartmentMemberForPurchase(BasePermission):
    """
    Permission to view a purchase.

    Allows access if:
    - User is a system admin
    - Purchase belongs to the user's apartment

    Usage:
        @permission_classes([IsAuthenticated, IsApartmentMemberForPurchase])
        class PurchaseViewSet(viewsets.ModelViewSet):
            ...
    """

    message = 'You must belong to this apartment to view this purchase.'

    def has_permission(self, request, view):
        """Check the target apartment for create action."""
        if getattr(view, 'action', None) == 'create':
            apartment_id = request.data.get('apartment_id')
            if apartment_id and not policy.can_access_apartment(request.user, apartment_id):
                self.message = 'You can only add purchases to your own apartment.'
                return False
        return True

    def has_object_permission(self, request, view, obj):
        return policy.can_access_apartment(request.user, obj.apartment_id)


class CanManagePurchase(BasePermission):
    """
    Permission to manage (update/delete) a purchase.

    Allows if:
    - User added the purchase
    - User is an admin of the purchase's apartment
    - User is a system admin

    Usage:
        def get_permissions(self):
            if self.action in ['update', 'partial_update', 'destroy']:
                return [IsAuthenticated(), CanManagePurchase()]
            return super().get_permissions()
    """

    message = 'You do not have permission to manage this purchase.'

    def has_object_permission(self, request, view, obj):
        return policy.can_manage_purchase(request.user, obj)
