"""Domain-specific exceptions for trash services."""


class TrashServiceError(Exception):
    """Base exception for trash services."""
    pass


class InvalidTrashTypeError(TrashServiceError):
    """Raised for an unknown record type."""
    pass


class TrashRecordNotFoundError(TrashServiceError):
    """Raised when the record is not in the trash (or not visible)."""
    pass


class PurgeBlockedError(TrashServiceError):
    """Raised when a vendor/item is still referenced by purchase rows."""
    pass


class TrashPermissionError(TrashServiceError):
    """Raised when the actor may not restore or purge the record."""
    pass
