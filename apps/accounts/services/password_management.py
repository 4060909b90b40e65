"""Password change and admin reset services."""

from django.db import transaction
from django.contrib.auth import get_user_model
from django.utils import timezone
from typing import Tuple
from uuid import UUID
import logging

from apps.audit.models import AuditAction
from apps.audit.services import log_action
from .. import policy
from ..passwords import InvalidHashFormatError, generate_password
from ._validation import ensure_password_allowed
from .exceptions import (
    InvalidCredentialsError,
    CorruptCredentialError,
    UserNotFoundError,
    UserPermissionError,
)

User = get_user_model()
logger = logging.getLogger(__name__)

RESET_PASSWORD_LENGTH = 10


@transaction.atomic
def change_password(
    *,
    user: User,
    current_password: str,
    new_password: str,
    ip_address: str = None
) -> User:
    """
    Change the user's own password.

    Args:
        user: User changing the password
        current_password: Existing password for confirmation
        new_password: Replacement, must pass the strength gate
        ip_address: Client address for the audit entry

    Returns:
        Updated User instance

    Raises:
        InvalidCredentialsError: If current password is wrong
        CorruptCredentialError: If the stored credential is malformed
        WeakPasswordError: If the new password is too weak
    """
    user = User.objects.select_for_update().get(pk=user.pk)

    try:
        valid = user.check_password(current_password)
    except InvalidHashFormatError:
        logger.error("Stored credential for user %s is malformed", user.username)
        raise CorruptCredentialError(
            "Stored credential is invalid; ask an administrator to reset the password"
        )
    if not valid:
        raise InvalidCredentialsError("Current password is incorrect")

    ensure_password_allowed(new_password, user=user)

    user.set_password(new_password)
    user.password_changed_at = timezone.now()
    user.save(update_fields=['password', 'password_changed_at'])

    log_action(
        action=AuditAction.PASSWORD_CHANGED,
        target_table='users',
        target_id=user.id,
        performed_by=user,
        ip_address=ip_address,
    )
    return user


@transaction.atomic
def reset_user_password(*, actor: User, user_id: UUID) -> Tuple[User, str]:
    """
    Replace a user's password with a generated one.

    Args:
        actor: Admin performing the reset
        user_id: Target user UUID

    Returns:
        Tuple of (user, new plain text password) to hand over once

    Raises:
        UserNotFoundError: If the user doesn't exist
        UserPermissionError: If the actor may not manage the user
    """
    try:
        user = User.objects.select_for_update().get(pk=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError(f"User {user_id} not found")

    if not policy.can_manage_user(actor, user):
        raise UserPermissionError("You can only reset passwords for users in your apartment")

    new_password = generate_password(RESET_PASSWORD_LENGTH)
    user.set_password(new_password)
    user.password_changed_at = timezone.now()
    user.save(update_fields=['password', 'password_changed_at'])

    log_action(
        action=AuditAction.PASSWORD_RESET,
        target_table='users',
        target_id=user.id,
        performed_by=actor,
        new_data={'username': user.username},
    )
    logger.info("Password reset for %s by %s", user.username, actor.username)

    return user, new_password
