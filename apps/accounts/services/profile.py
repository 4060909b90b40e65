"""Own-profile service."""

from django.db import transaction
from django.contrib.auth import get_user_model
from typing import Any, Dict

from apps.audit.models import AuditAction
from apps.audit.services import log_action, snapshot

User = get_user_model()

PROFILE_FIELDS = ['english_name', 'arabic_name', 'email', 'preferred_language']


@transaction.atomic
def update_profile(*, user: User, data: Dict[str, Any]) -> User:
    """
    Update the user's own names, email and language.

    Fields outside PROFILE_FIELDS (role, apartment, active flag) are ignored.
    """
    user = User.objects.select_for_update().get(pk=user.pk)
    old_data = snapshot(user, fields=PROFILE_FIELDS)

    changed = []
    for field, value in data.items():
        if field in PROFILE_FIELDS and getattr(user, field) != value:
            setattr(user, field, value)
            changed.append(field)

    if changed:
        user.save(update_fields=changed)
        log_action(
            action=AuditAction.UPDATE_PROFILE,
            target_table='users',
            target_id=user.id,
            performed_by=user,
            old_data=old_data,
            new_data=snapshot(user, fields=PROFILE_FIELDS),
        )

    return user
