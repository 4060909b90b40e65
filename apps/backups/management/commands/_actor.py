from django.contrib.auth import get_user_model
from django.core.management.base import CommandError

from apps.accounts.policy import AccessContext


def context_for(username):
    """AccessContext for the ``--user`` a command acts as."""
    User = get_user_model()
    try:
        user = User.objects.get(username__iexact=username, is_active=True)
    except User.DoesNotExist:
        raise CommandError(f"No active user '{username}'")
    return AccessContext(user=user, language=user.preferred_language)
