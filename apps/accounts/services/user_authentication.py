"""User authentication service."""

from django.db import transaction
from django.contrib.auth import get_user_model
from django.utils import timezone
import logging

from apps.audit.models import AuditAction
from apps.audit.services import log_action
from ..passwords import InvalidHashFormatError
from .exceptions import (
    InvalidCredentialsError,
    InactiveAccountError,
    CorruptCredentialError,
)

User = get_user_model()
logger = logging.getLogger(__name__)


def _log_failure(user, username, reason, ip_address):
    log_action(
        action=AuditAction.LOGIN_FAILED,
        target_table='users',
        target_id=user.id if user else '',
        performed_by=user,
        new_data={'username': username, 'reason': reason},
        ip_address=ip_address,
    )


def authenticate_user(*, username: str, password: str, ip_address: str = None) -> User:
    """
    Authenticate user with username and password.

    Failed attempts are audited even though the error propagates, so the
    lookup and the failure entry are committed before raising.

    Args:
        username: Login name
        password: Plain text password
        ip_address: Client address for the audit entry

    Returns:
        Authenticated User instance

    Raises:
        InvalidCredentialsError: If credentials are invalid
        InactiveAccountError: If account is deactivated
        CorruptCredentialError: If the stored credential is malformed
    """
    with transaction.atomic():
        # Get user with lock to prevent race conditions on last_login
        try:
            user = (
                User.objects
                .select_for_update()
                .get(username__iexact=username)
            )
        except User.DoesNotExist:
            user = None

        if user is None:
            _log_failure(None, username, 'unknown user', ip_address)
            error = InvalidCredentialsError("Invalid username or password")
        else:
            try:
                valid = user.check_password(password)
            except InvalidHashFormatError:
                logger.error("Stored credential for user %s is malformed", user.username)
                _log_failure(user, username, 'malformed credential', ip_address)
                error = CorruptCredentialError(
                    "Stored credential is invalid; ask an administrator to reset the password"
                )
            else:
                if not valid:
                    _log_failure(user, username, 'wrong password', ip_address)
                    error = InvalidCredentialsError("Invalid username or password")
                elif not user.is_active:
                    _log_failure(user, username, 'inactive', ip_address)
                    error = InactiveAccountError("Account is deactivated")
                else:
                    error = None
                    user.last_login = timezone.now()
                    user.save(update_fields=['last_login'])
                    log_action(
                        action=AuditAction.USER_LOGIN,
                        target_table='users',
                        target_id=user.id,
                        performed_by=user,
                        ip_address=ip_address,
                    )

    if error is not None:
        logger.warning("Login failed for %s: %s", username, error)
        raise error

    return user


@transaction.atomic
def logout_user(*, user: User, ip_address: str = None) -> None:
    """Record a logout for the audit trail."""
    log_action(
        action=AuditAction.USER_LOGOUT,
        target_table='users',
        target_id=user.id,
        performed_by=user,
        ip_address=ip_address,
    )
