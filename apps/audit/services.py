"""Audit log service."""

import logging
from typing import Any, Dict, Iterable, Optional

from apps.accounts import policy
from apps.accounts.models import UserRole
from .models import AuditLogEntry

logger = logging.getLogger(__name__)

SENSITIVE_FIELDS = ('password',)


def snapshot(instance, fields: Optional[Iterable[str]] = None) -> Dict[str, Any]:
    """
    Return a dict of a model row's concrete field values.

    Foreign keys are stored by id; credential columns are never included.
    """
    data = {}
    for model_field in instance._meta.concrete_fields:
        if model_field.name in SENSITIVE_FIELDS:
            continue
        if fields is not None and model_field.name not in fields:
            continue
        data[model_field.attname] = getattr(instance, model_field.attname)
    return data


def log_action(
    *,
    action: str,
    target_table: str,
    target_id: Any = '',
    performed_by=None,
    old_data: Optional[Dict[str, Any]] = None,
    new_data: Optional[Dict[str, Any]] = None,
    ip_address: Optional[str] = None
) -> AuditLogEntry:
    """
    Write one audit entry in the caller's transaction.

    Args:
        action: AuditAction value
        target_table: Logical collection name ('purchases', 'vendors', ...)
        target_id: Primary key of the affected row, if any
        performed_by: Acting user (None for anonymous failures)
        old_data: Snapshot before the change
        new_data: Snapshot after the change
        ip_address: Client address for authentication events

    Returns:
        Created AuditLogEntry
    """
    if performed_by is not None and not performed_by.is_authenticated:
        performed_by = None

    entry = AuditLogEntry.objects.create(
        action=action,
        target_table=target_table,
        target_id=str(target_id) if target_id else '',
        performed_by=performed_by,
        old_data=old_data,
        new_data=new_data,
        ip_address=ip_address,
    )
    logger.info(
        "%s %s/%s by %s",
        action, target_table, entry.target_id,
        performed_by.username if performed_by else 'anonymous',
    )
    return entry


def recent_activity(*, actor, performed_by=None, action=None, target_table=None, limit=None):
    """
    Audit entries visible to the actor, newest first.

    System admins see everything, apartment admins see entries performed by
    users of their apartment, everyone else only their own entries.
    """
    queryset = AuditLogEntry.objects.select_related('performed_by')

    if policy.is_system_admin(actor):
        pass
    elif actor.role == UserRole.APARTMENT_ADMIN:
        queryset = policy.scope_queryset(actor, queryset, field='performed_by__apartment_id')
    else:
        queryset = queryset.filter(performed_by=actor)

    if performed_by:
        queryset = queryset.filter(performed_by_id=performed_by)
    if action:
        queryset = queryset.filter(action=action)
    if target_table:
        queryset = queryset.filter(target_table=target_table)

    if limit:
        return queryset[:limit]
    return queryset


def get_client_ip(request) -> Optional[str]:
    """Client address, honouring the first X-Forwarded-For hop."""
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')
