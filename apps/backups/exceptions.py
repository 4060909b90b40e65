"""Domain-specific exceptions for backup and restore."""


class BackupServiceError(Exception):
    """Base exception for backup services."""
    pass


class BackupPermissionError(BackupServiceError):
    """Raised when the actor may not back up or restore the requested scope."""
    pass


class InvalidBackupError(BackupServiceError):
    """Raised when an uploaded file is not a usable backup."""
    pass


class DecryptionError(InvalidBackupError):
    """Raised for a wrong password or a tampered encrypted backup."""
    pass


class RestoreFailedError(BackupServiceError):
    """Raised when writing a collection fails part-way through a restore."""
    pass
