"""Domain-specific exceptions for catalog services."""


class CatalogServiceError(Exception):
    """Base exception for catalog services."""
    pass


class VendorNotFoundError(CatalogServiceError):
    """Raised when vendor does not exist (or is in the trash)."""
    pass


class ItemNotFoundError(CatalogServiceError):
    """Raised when item does not exist (or is in the trash)."""
    pass


class RecordInUseError(CatalogServiceError):
    """Raised when deleting a vendor/item still referenced by active purchases."""
    pass


class CatalogPermissionError(CatalogServiceError):
    """Raised when the actor may not manage vendors or items."""
    pass
