"""
Access policy shared by every data-access path.

System admins see every apartment. Apartment admins and apartment users
are scoped to their own ``apartment_id``. Views, services, reports and
backups all go through these helpers instead of checking roles inline.

The request-scoped ``AccessContext`` carries the acting user and the
display language explicitly into services.
"""

from dataclasses import dataclass

from .models import Language, UserRole


@dataclass(frozen=True)
class AccessContext:
    """Acting user plus display language for one request or command."""

    user: object
    language: str = Language.ENGLISH

    @classmethod
    def from_request(cls, request):
        """Build from request.user and an optional ?lang= parameter."""
        user = request.user
        language = request.query_params.get('lang') if hasattr(request, 'query_params') else None
        if language not in Language.values:
            language = getattr(user, 'preferred_language', None) or Language.ENGLISH
        return cls(user=user, language=language)

    @property
    def apartment_id(self):
        return getattr(self.user, 'apartment_id', '') or ''


def is_system_admin(user) -> bool:
    return bool(user and user.is_authenticated and user.role == UserRole.SYSTEM_ADMIN)


def is_admin(user) -> bool:
    """System admin or apartment admin."""
    return bool(
        user and user.is_authenticated
        and user.role in (UserRole.SYSTEM_ADMIN, UserRole.APARTMENT_ADMIN)
    )


def can_access_apartment(user, apartment_id) -> bool:
    if is_system_admin(user):
        return True
    if not user or not user.is_authenticated or not user.apartment_id:
        return False
    return user.apartment_id == apartment_id


def can_manage_catalog(user) -> bool:
    """Vendors and items are shared; only admins write them."""
    return is_admin(user)


def can_manage_user(actor, target) -> bool:
    """
    System admins manage everyone. Apartment admins manage non-system
    users of their own apartment.
    """
    if is_system_admin(actor):
        return True
    if not is_admin(actor):
        return False
    return (
        target.role != UserRole.SYSTEM_ADMIN
        and can_access_apartment(actor, target.apartment_id)
    )


def can_assign_role(actor, role) -> bool:
    if is_system_admin(actor):
        return True
    return is_admin(actor) and role in (UserRole.APARTMENT_ADMIN, UserRole.APARTMENT_USER)


def can_manage_purchase(user, purchase) -> bool:
    """The user who added it, an admin of its apartment, or a system admin."""
    if is_system_admin(user):
        return True
    if not can_access_apartment(user, purchase.apartment_id):
        return False
    return is_admin(user) or purchase.added_by_id == user.id


def scope_queryset(user, queryset, field='apartment_id'):
    """Restrict a queryset to the apartments the user may see."""
    if is_system_admin(user):
        return queryset
    if not user or not user.is_authenticated or not user.apartment_id:
        return queryset.none()
    return queryset.filter(**{field: user.apartment_id})
