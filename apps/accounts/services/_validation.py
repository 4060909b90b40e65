"""Password gate shared by registration, creation and password changes."""

from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError

from .exceptions import WeakPasswordError


def ensure_password_allowed(password, user=None):
    """
    Run AUTH_PASSWORD_VALIDATORS (including the strength score gate).

    Raises:
        WeakPasswordError: With the validator messages joined
    """
    try:
        validate_password(password, user=user)
    except ValidationError as e:
        raise WeakPasswordError(' '.join(e.messages))
