"""
Domain exceptions for purchases app.

This module defines the exception hierarchy for purchase-related errors.
Service errors are plain exceptions translated by the views; the
APIException subclasses are raised directly from the HTTP layer.
"""
from rest_framework.exceptions import APIException


class PurchaseServiceError(Exception):
    """Base exception for purchase service errors."""
    pass


class InactiveCatalogRecordError(PurchaseServiceError):
    """Raised when a purchase points at a trashed or missing vendor/item."""
    pass


class ApartmentScopeError(PurchaseServiceError):
    """Raised when the actor books a purchase outside its apartment."""
    pass


class PurchaseNotFoundError(APIException):
    """Purchase not found."""
    status_code = 404
    default_detail = 'Purchase not found.'
    default_code = 'purchase_not_found'


class InsufficientPermissionsError(APIException):
    """User doesn't have permission for operation."""
    status_code = 403
    default_detail = 'You do not have permission to perform this action.'
    default_code = 'insufficient_permissions'
