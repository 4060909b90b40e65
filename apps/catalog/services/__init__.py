"""Services for vendor and item management."""

from .exceptions import (
    CatalogServiceError,
    VendorNotFoundError,
    ItemNotFoundError,
    RecordInUseError,
    CatalogPermissionError,
)
from .vendor_management import (
    get_vendor_by_id,
    create_vendor,
    update_vendor,
    delete_vendor,
)
from .item_management import (
    get_item_by_id,
    list_items,
    list_categories,
    create_item,
    update_item,
    delete_item,
)

__all__ = [
    # Exceptions
    'CatalogServiceError',
    'VendorNotFoundError',
    'ItemNotFoundError',
    'RecordInUseError',
    'CatalogPermissionError',
    # Vendors
    'get_vendor_by_id',
    'create_vendor',
    'update_vendor',
    'delete_vendor',
    # Items
    'get_item_by_id',
    'list_items',
    'list_categories',
    'create_item',
    'update_item',
    'delete_item',
]
