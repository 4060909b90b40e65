"""User registration service."""

from django.db import transaction
from django.contrib.auth import get_user_model
import logging

from apps.audit.models import AuditAction
from apps.audit.services import log_action, snapshot
from ..models import UserRole
from ._validation import ensure_password_allowed
from .exceptions import UserRegistrationError, WeakPasswordError

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def register_user(
    *,
    username: str,
    password: str,
    apartment_id: str,
    english_name: str = "",
    arabic_name: str = "",
    email: str = "",
    preferred_language: str = "en",
    ip_address: str = None
) -> User:
    """
    Register a new apartment user.

    Args:
        username: Unique login name (letters, digits, underscore)
        password: Plain text password, must pass the strength gate
        apartment_id: Apartment the user belongs to
        english_name: Display name in English
        arabic_name: Display name in Arabic
        email: Optional contact email
        preferred_language: 'en' or 'ar'
        ip_address: Client address for the audit entry

    Returns:
        Created User instance

    Raises:
        UserRegistrationError: If the username is taken or the password is too weak
    """
    if User.objects.filter(username__iexact=username).exists():
        raise UserRegistrationError("Username already exists")

    try:
        ensure_password_allowed(password, user=User(username=username, email=email))
    except WeakPasswordError as e:
        raise UserRegistrationError(str(e))

    user = User.objects.create_user(
        username=username,
        password=password,
        email=email,
        english_name=english_name,
        arabic_name=arabic_name,
        apartment_id=apartment_id,
        preferred_language=preferred_language,
        role=UserRole.APARTMENT_USER,
    )

    log_action(
        action=AuditAction.USER_REGISTERED,
        target_table='users',
        target_id=user.id,
        performed_by=user,
        new_data=snapshot(user),
        ip_address=ip_address,
    )
    logger.info("Registered user %s in apartment %s", user.username, apartment_id)

    return user
