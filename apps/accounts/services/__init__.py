"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    CorruptCredentialError,
    WeakPasswordError,
    UserNotFoundError,
    UserPermissionError,
)
from .user_registration import register_user
from .user_authentication import authenticate_user, logout_user
from .password_management import change_password, reset_user_password
from .profile import update_profile
from .user_management import (
    list_users,
    create_user,
    update_user,
    toggle_user_status,
)

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'CorruptCredentialError',
    'WeakPasswordError',
    'UserNotFoundError',
    'UserPermissionError',
    # Services
    'register_user',
    'authenticate_user',
    'logout_user',
    'change_password',
    'reset_user_password',
    'update_profile',
    'list_users',
    'create_user',
    'update_user',
    'toggle_user_status',
]
