"""Administrative user management, scoped by the access policy."""

from django.db import transaction
from django.contrib.auth import get_user_model
from django.db.models import Q, QuerySet
from typing import Any, Dict, Optional
from uuid import UUID

from apps.audit.models import AuditAction
from apps.audit.services import log_action, snapshot
from .. import policy
from ..models import UserRole
from ._validation import ensure_password_allowed
from .exceptions import (
    UserNotFoundError,
    UserPermissionError,
    UserRegistrationError,
)

User = get_user_model()

MANAGED_FIELDS = [
    'english_name', 'arabic_name', 'email', 'apartment_id',
    'role', 'preferred_language', 'is_active',
]


def list_users(
    *,
    actor: User,
    role: Optional[str] = None,
    apartment_id: Optional[str] = None,
    search: Optional[str] = None
) -> QuerySet:
    """Users visible to the actor, optionally filtered."""
    queryset = policy.scope_queryset(actor, User.objects.all())
    if not policy.is_system_admin(actor):
        queryset = queryset.exclude(role=UserRole.SYSTEM_ADMIN)

    if role:
        queryset = queryset.filter(role=role)
    if apartment_id:
        queryset = queryset.filter(apartment_id=apartment_id)
    if search:
        queryset = queryset.filter(
            Q(username__icontains=search) |
            Q(english_name__icontains=search) |
            Q(arabic_name__icontains=search)
        )
    return queryset


def _get_managed_user(actor: User, user_id: UUID) -> User:
    try:
        user = User.objects.select_for_update().get(pk=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError(f"User {user_id} not found")

    if not policy.can_manage_user(actor, user):
        raise UserPermissionError("You do not have permission to manage this user")
    return user


def _check_assignment(actor: User, role: str, apartment_id: str) -> None:
    if not policy.can_assign_role(actor, role):
        raise UserPermissionError(f"You cannot assign the role '{role}'")
    if role != UserRole.SYSTEM_ADMIN and not apartment_id:
        raise UserRegistrationError("Apartment is required for apartment roles")
    if not policy.can_access_apartment(actor, apartment_id) and role != UserRole.SYSTEM_ADMIN:
        raise UserPermissionError("You can only manage users in your apartment")


@transaction.atomic
def create_user(
    *,
    actor: User,
    username: str,
    password: str,
    role: str = UserRole.APARTMENT_USER,
    apartment_id: str = "",
    english_name: str = "",
    arabic_name: str = "",
    email: str = "",
    preferred_language: str = "en"
) -> User:
    """
    Create a user on behalf of an admin.

    Apartment admins default new users into their own apartment and cannot
    create system admins.

    Raises:
        UserPermissionError: If the role/apartment is outside the actor's scope
        UserRegistrationError: If the username is taken
        WeakPasswordError: If the password is too weak
    """
    if not apartment_id and not policy.is_system_admin(actor):
        apartment_id = actor.apartment_id
    _check_assignment(actor, role, apartment_id)

    if User.objects.filter(username__iexact=username).exists():
        raise UserRegistrationError("Username already exists")

    ensure_password_allowed(password, user=User(username=username, email=email))

    user = User.objects.create_user(
        username=username,
        password=password,
        role=role,
        apartment_id=apartment_id,
        english_name=english_name,
        arabic_name=arabic_name,
        email=email,
        preferred_language=preferred_language,
    )

    log_action(
        action=AuditAction.CREATE_USER,
        target_table='users',
        target_id=user.id,
        performed_by=actor,
        new_data=snapshot(user),
    )
    return user


@transaction.atomic
def update_user(*, actor: User, user_id: UUID, data: Dict[str, Any]) -> User:
    """
    Update another user's managed fields.

    Raises:
        UserNotFoundError: If the user doesn't exist
        UserPermissionError: If the change leaves the actor's scope
    """
    user = _get_managed_user(actor, user_id)
    old_data = snapshot(user)

    role = data.get('role', user.role)
    apartment_id = data.get('apartment_id', user.apartment_id)
    if role != user.role or apartment_id != user.apartment_id:
        _check_assignment(actor, role, apartment_id)

    if user.pk == actor.pk and data.get('is_active') is False:
        raise UserPermissionError("You cannot deactivate your own account")

    for field, value in data.items():
        if field in MANAGED_FIELDS:
            setattr(user, field, value)
    user.save()

    log_action(
        action=AuditAction.UPDATE_USER,
        target_table='users',
        target_id=user.id,
        performed_by=actor,
        old_data=old_data,
        new_data=snapshot(user),
    )
    return user


@transaction.atomic
def toggle_user_status(*, actor: User, user_id: UUID) -> User:
    """
    Activate or deactivate a user.

    Raises:
        UserNotFoundError: If the user doesn't exist
        UserPermissionError: If the actor targets itself or a user outside its scope
    """
    user = _get_managed_user(actor, user_id)
    if user.pk == actor.pk:
        raise UserPermissionError("You cannot deactivate your own account")

    user.is_active = not user.is_active
    user.save(update_fields=['is_active'])

    log_action(
        action=AuditAction.TOGGLE_USER_STATUS,
        target_table='users',
        target_id=user.id,
        performed_by=actor,
        old_data={'is_active': not user.is_active},
        new_data={'is_active': user.is_active},
    )
    return user
