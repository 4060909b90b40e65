"""Domain-specific exceptions for accounts services."""


class AccountsServiceError(Exception):
    """Base exception for accounts services."""
    pass


class UserRegistrationError(AccountsServiceError):
    """Raised when user registration fails."""
    pass


class InvalidCredentialsError(AccountsServiceError):
    """Raised when authentication credentials are invalid."""
    pass


class InactiveAccountError(AccountsServiceError):
    """Raised when account is deactivated."""
    pass


class CorruptCredentialError(AccountsServiceError):
    """Raised when a stored credential is malformed (not a wrong password)."""
    pass


class WeakPasswordError(AccountsServiceError):
    """Raised when a new password fails the strength check."""
    pass


class UserNotFoundError(AccountsServiceError):
    """Raised when user does not exist."""
    pass


class UserPermissionError(AccountsServiceError):
    """Raised when the actor may not manage the target user or role."""
    pass
