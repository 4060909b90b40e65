"""
Trash services: list, restore and purge soft-deleted records.

Purchases are scoped by apartment through apps.accounts.policy; vendors
and items are shared and only visible to catalog managers. Purging is
always an explicit action (API call or the ``purge_trash`` command).
"""

from django.db import transaction
from django.contrib.auth import get_user_model
from typing import Any, Dict, List
from uuid import UUID
import logging

from apps.accounts import policy
from apps.audit.models import AuditAction
from apps.audit.services import log_action, snapshot
from apps.catalog.models import Item, Vendor
from apps.purchases.models import Purchase
from .exceptions import (
    InvalidTrashTypeError,
    PurgeBlockedError,
    TrashPermissionError,
    TrashRecordNotFoundError,
)

User = get_user_model()
logger = logging.getLogger(__name__)

TRASH_MODELS = {
    'purchases': Purchase,
    'vendors': Vendor,
    'items': Item,
}

RESTORE_ACTIONS = {
    'purchases': AuditAction.RESTORE_PURCHASE,
    'vendors': AuditAction.RESTORE_VENDOR,
    'items': AuditAction.RESTORE_ITEM,
}

TRASH_TYPES = list(TRASH_MODELS) + ['all']


def _model_for(kind: str):
    try:
        return TRASH_MODELS[kind]
    except KeyError:
        raise InvalidTrashTypeError(f"Unknown record type '{kind}'")


def trashed_queryset(*, actor: User, kind: str):
    """Trashed rows of one type that the actor may see."""
    model = _model_for(kind)
    queryset = model.all_objects.trashed().select_related('deleted_by')

    if kind == 'purchases':
        return policy.scope_queryset(actor, queryset.select_related('vendor', 'item'))
    if not policy.can_manage_catalog(actor):
        return queryset.none()
    return queryset


def _describe(kind: str, record) -> Dict[str, Any]:
    entry = {
        'type': kind,
        'id': record.id,
        'deleted_at': record.deleted_at,
        'deleted_by': record.deleted_by.username if record.deleted_by else None,
        'retention': record.retention.as_dict() if record.retention else None,
    }
    if kind == 'purchases':
        entry.update({
            'name': record.item.english_name,
            'details': f"{record.vendor.english_name} - {record.quantity} x {record.unit_price}",
            'apartment_id': record.apartment_id,
            'amount': record.total_price,
        })
    else:
        entry.update({
            'name': record.english_name,
            'details': record.arabic_name,
            'apartment_id': None,
            'amount': getattr(record, 'unit_price', None),
        })
    return entry


def list_trash(*, actor: User, kind: str = 'all') -> List[Dict[str, Any]]:
    """
    Trashed records with their retention status, newest deletion first.

    Args:
        actor: Requesting user
        kind: 'purchases', 'vendors', 'items' or 'all'

    Raises:
        InvalidTrashTypeError: If kind is unknown
    """
    kinds = list(TRASH_MODELS) if kind == 'all' else [kind]
    for k in kinds:
        _model_for(k)

    entries = []
    for k in kinds:
        entries.extend(_describe(k, record) for record in trashed_queryset(actor=actor, kind=k))

    entries.sort(key=lambda e: e['deleted_at'], reverse=True)
    return entries


def _get_trashed(actor: User, kind: str, record_id: UUID):
    queryset = trashed_queryset(actor=actor, kind=kind).select_for_update(of=('self',))
    try:
        return queryset.get(id=record_id)
    except queryset.model.DoesNotExist:
        raise TrashRecordNotFoundError(f"No {kind} record {record_id} in the trash")


def _check_can_restore(actor: User, kind: str, record) -> None:
    if kind == 'purchases':
        allowed = policy.can_manage_purchase(actor, record)
    else:
        allowed = policy.can_manage_catalog(actor)
    if not allowed:
        raise TrashPermissionError("You do not have permission to restore this record")


def _check_can_purge(actor: User) -> None:
    if not policy.is_admin(actor):
        raise TrashPermissionError("Only administrators can permanently delete records")


def _ensure_unreferenced(kind: str, record) -> None:
    if kind == 'vendors':
        referenced = Purchase.all_objects.filter(vendor=record).exists()
    elif kind == 'items':
        referenced = Purchase.all_objects.filter(item=record).exists()
    else:
        return
    if referenced:
        raise PurgeBlockedError(
            f"Cannot permanently delete {record}: it is still referenced by purchases"
        )


@transaction.atomic
def restore_record(*, actor: User, kind: str, record_id: UUID):
    """
    Move a trashed record back to active.

    Raises:
        InvalidTrashTypeError: If kind is unknown
        TrashRecordNotFoundError: If the record is not in the visible trash
        TrashPermissionError: If the actor may not restore it
    """
    record = _get_trashed(actor, kind, record_id)
    _check_can_restore(actor, kind, record)

    record.restore(actor)

    log_action(
        action=RESTORE_ACTIONS[kind],
        target_table=kind,
        target_id=record.id,
        performed_by=actor,
        new_data={'is_deleted': False, 'restored_at': record.restored_at},
    )
    return record


@transaction.atomic
def delete_permanently(*, actor: User, kind: str, record_id: UUID) -> None:
    """
    Purge one trashed record.

    Raises:
        InvalidTrashTypeError: If kind is unknown
        TrashRecordNotFoundError: If the record is not in the visible trash
        TrashPermissionError: If the actor is not an administrator
        PurgeBlockedError: If a vendor/item is still referenced by purchases
    """
    _check_can_purge(actor)
    record = _get_trashed(actor, kind, record_id)
    _ensure_unreferenced(kind, record)

    old_data = snapshot(record)
    record.delete()

    log_action(
        action=AuditAction.DELETE_PERMANENTLY,
        target_table=kind,
        target_id=record_id,
        performed_by=actor,
        old_data=old_data,
    )


def purge_queryset(kind: str, queryset) -> Dict[str, Any]:
    """
    Hard-delete trashed rows, skipping vendors/items still referenced.

    Purchases must be purged before catalog rows so that catalog rows
    referenced only by trashed purchases can go in the same pass.
    """
    deleted = 0
    skipped = []
    for record in queryset:
        try:
            _ensure_unreferenced(kind, record)
        except PurgeBlockedError:
            skipped.append(str(record.id))
            continue
        record.delete()
        deleted += 1
    return {'deleted': deleted, 'skipped': skipped}


@transaction.atomic
def empty_trash(*, actor: User) -> Dict[str, Any]:
    """
    Purge every trashed record visible to the actor.

    Returns:
        Dict with ``items_deleted`` (total rows removed) and ``skipped``
        (ids of vendors/items still referenced by purchases)

    Raises:
        TrashPermissionError: If the actor is not an administrator
    """
    _check_can_purge(actor)

    total = 0
    skipped = []
    for kind in TRASH_MODELS:
        result = purge_queryset(kind, trashed_queryset(actor=actor, kind=kind))
        total += result['deleted']
        skipped.extend(result['skipped'])

    log_action(
        action=AuditAction.EMPTY_TRASH,
        target_table='trash',
        performed_by=actor,
        new_data={'items_deleted': total, 'skipped': skipped},
    )
    logger.info("Trash emptied by %s: %d deleted, %d skipped", actor.username, total, len(skipped))

    return {'items_deleted': total, 'skipped': skipped}
