"""
Backup and restore of users, purchases, vendors and items.

A backup is a JSON envelope::

    {
        "metadata": {"version": "1.0", "scope": "apartment", ...},
        "data": {"purchases": {"<uuid>": {<fields>}}, ...}
    }

Rows are dumped and loaded with Django's ``python`` serializer, so field
values round-trip through the model fields' own ``to_python``. Restore
overwrites rows by primary key (update when the row exists, insert
otherwise) and never deletes rows missing from the backup.
"""

from dataclasses import dataclass, field
from django.contrib.auth import get_user_model
from django.core import serializers
from django.core.exceptions import ValidationError
from django.core.serializers.base import DeserializationError
from django.core.serializers.json import DjangoJSONEncoder
from django.db import IntegrityError, transaction
from django.utils import timezone
from typing import Dict, Iterable, List, Optional, Union
import datetime
import json
import logging

from apps.accounts import policy
from apps.accounts.models import UserRole
from apps.accounts.policy import AccessContext
from apps.audit.models import AuditAction
from apps.audit.services import log_action
from apps.catalog.models import Item, Vendor
from apps.purchases.models import Purchase
from .crypto import decrypt_payload, encrypt_payload
from .exceptions import (
    BackupPermissionError,
    BackupServiceError,
    InvalidBackupError,
    RestoreFailedError,
)
from .models import BackupRecord, BackupScope

User = get_user_model()
logger = logging.getLogger(__name__)

BACKUP_VERSION = '1.0'
ENCRYPTED_EXTENSION = '.enc'

COLLECTIONS = {
    'users': User,
    'purchases': Purchase,
    'vendors': Vendor,
    'items': Item,
}


class BackupJSONEncoder(DjangoJSONEncoder):
    """DjangoJSONEncoder without the millisecond truncation of datetimes."""

    def default(self, o):
        if isinstance(o, datetime.datetime):
            return o.isoformat()
        return super().default(o)


# Referenced rows are written before the rows pointing at them.
RESTORE_ORDER = ('users', 'vendors', 'items', 'purchases')
APARTMENT_COLLECTIONS = ('users', 'purchases')
PRIVILEGED_USER_FIELDS = ('is_superuser', 'is_staff')


@dataclass
class BackupFile:
    filename: str
    content: str
    record: BackupRecord

    @property
    def content_type(self):
        if self.filename.endswith(ENCRYPTED_EXTENSION):
            return 'application/octet-stream'
        return 'application/json'


@dataclass
class RestoreResult:
    restored: Dict[str, int] = field(default_factory=dict)
    skipped: Dict[str, int] = field(default_factory=dict)

    def as_dict(self):
        return {'restored': self.restored, 'skipped': self.skipped}


# =============================================================================
# Snapshot
# =============================================================================

def _field_names(model) -> List[str]:
    """Concrete, non-m2m fields; the primary key travels as the row key."""
    return [f.name for f in model._meta.concrete_fields if not f.primary_key]


def dump_queryset(queryset) -> Dict[str, dict]:
    """``{str(pk): fields}`` for every row of the queryset."""
    rows = serializers.serialize('python', queryset, fields=_field_names(queryset.model))
    return {str(row['pk']): row['fields'] for row in rows}


def _active(model, include_deleted):
    return model.all_objects.all() if include_deleted else model.objects.all()


def snapshot_all(include_deleted: bool) -> Dict[str, dict]:
    return {
        'users': dump_queryset(User.objects.all()),
        'purchases': dump_queryset(_active(Purchase, include_deleted)),
        'vendors': dump_queryset(_active(Vendor, include_deleted)),
        'items': dump_queryset(_active(Item, include_deleted)),
    }


def snapshot_apartment(apartment_id: str, include_deleted: bool) -> Dict[str, dict]:
    """
    Users and purchases of one apartment, plus the vendors and items those
    purchases reference (whether or not the catalog rows are trashed).
    """
    purchases = _active(Purchase, include_deleted).filter(apartment_id=apartment_id)
    vendor_ids = set(purchases.values_list('vendor_id', flat=True))
    item_ids = set(purchases.values_list('item_id', flat=True))

    return {
        'users': dump_queryset(User.objects.filter(apartment_id=apartment_id)),
        'purchases': dump_queryset(purchases),
        'vendors': dump_queryset(Vendor.all_objects.filter(id__in=vendor_ids)),
        'items': dump_queryset(Item.all_objects.filter(id__in=item_ids)),
    }


def _resolve_apartment(actor, scope: str, apartment_id: Optional[str]) -> Optional[str]:
    if scope == BackupScope.ALL:
        if not policy.is_system_admin(actor):
            raise BackupPermissionError('Only system administrators can back up all apartments')
        return None

    if scope != BackupScope.APARTMENT:
        raise BackupServiceError(f"Unknown backup scope '{scope}'")

    if policy.is_system_admin(actor):
        if not apartment_id:
            raise BackupServiceError('Please select an apartment')
        return apartment_id

    if not actor.apartment_id:
        raise BackupPermissionError('You are not assigned to an apartment')
    if apartment_id and apartment_id != actor.apartment_id:
        raise BackupPermissionError('You can only back up your own apartment')
    return actor.apartment_id


@transaction.atomic
def create_backup(
    *,
    context: AccessContext,
    scope: str = BackupScope.APARTMENT,
    apartment_id: Optional[str] = None,
    include_deleted: bool = False,
    password: Optional[str] = None
) -> BackupFile:
    """
    Snapshot the requested scope into a (optionally encrypted) backup file.

    Args:
        context: Acting user and language
        scope: 'apartment' or 'all' (system admins only)
        apartment_id: Apartment to back up; system admins must pass one,
            everyone else is limited to their own
        include_deleted: Keep trashed purchases/vendors/items
        password: Encrypt the file when given

    Returns:
        BackupFile with filename, text content and the history record

    Raises:
        BackupPermissionError: If the scope is not allowed for the actor
        BackupServiceError: If the scope or apartment is missing/unknown
    """
    actor = context.user
    apartment_id = _resolve_apartment(actor, scope, apartment_id)

    if scope == BackupScope.ALL:
        data = snapshot_all(include_deleted)
    else:
        data = snapshot_apartment(apartment_id, include_deleted)

    encrypted = bool(password)
    metadata = {
        'version': BACKUP_VERSION,
        'timestamp': timezone.now().isoformat(),
        'scope': scope,
        'apartment_id': apartment_id,
        'created_by': actor.username,
        'created_by_id': str(actor.id),
        'include_deleted': include_deleted,
        'encrypted': encrypted,
        'collections': list(data),
    }

    content = json.dumps({'metadata': metadata, 'data': data}, cls=BackupJSONEncoder, indent=2)
    extension = ENCRYPTED_EXTENSION if encrypted else '.json'
    if encrypted:
        content = encrypt_payload(content, password)

    filename = f"backup_{scope}_{timezone.localdate().isoformat()}{extension}"

    record = BackupRecord.objects.create(
        filename=filename,
        scope=scope,
        apartment_id=apartment_id or '',
        include_deleted=include_deleted,
        encrypted=encrypted,
        collections=metadata['collections'],
        size=len(content.encode('utf-8')),
        created_by=actor,
        created_by_username=actor.username,
    )

    log_action(
        action=AuditAction.CREATE_BACKUP,
        target_table='backups',
        target_id=record.id,
        performed_by=actor,
        new_data=metadata,
    )
    logger.info(
        "Backup %s created by %s (%s rows)",
        filename, actor.username, sum(len(rows) for rows in data.values()),
    )

    return BackupFile(filename=filename, content=content, record=record)


# =============================================================================
# Parse
# =============================================================================

def parse_backup(
    content: Union[str, bytes],
    filename: str,
    password: Optional[str] = None
) -> dict:
    """
    Decode an uploaded backup into its envelope.

    Files named ``*.enc`` are decrypted first and need the password.

    Raises:
        InvalidBackupError: If the file is not a ``{metadata, data}`` envelope
        DecryptionError: If decryption fails
    """
    if isinstance(content, bytes):
        try:
            content = content.decode('utf-8')
        except UnicodeDecodeError:
            raise InvalidBackupError('Invalid backup file format')

    if filename.endswith(ENCRYPTED_EXTENSION):
        if not password:
            raise InvalidBackupError('Password required for encrypted backup')
        content = decrypt_payload(content.strip(), password)

    try:
        envelope = json.loads(content)
    except ValueError:
        raise InvalidBackupError('Invalid backup file format')

    if (
        not isinstance(envelope, dict)
        or not isinstance(envelope.get('metadata'), dict)
        or not isinstance(envelope.get('data'), dict)
    ):
        raise InvalidBackupError('Invalid backup file format')

    for name, rows in envelope['data'].items():
        if name not in COLLECTIONS:
            continue
        if not isinstance(rows, dict):
            raise InvalidBackupError(f"Invalid backup file format: '{name}' is not a mapping")
        if not all(isinstance(fields, dict) for fields in rows.values()):
            raise InvalidBackupError(f"Invalid backup file format: '{name}' has malformed rows")

    return envelope


# =============================================================================
# Restore
# =============================================================================

def _allowed_collections(actor, metadata: dict, collections: Optional[Iterable[str]]) -> List[str]:
    if not policy.is_admin(actor):
        raise BackupPermissionError('You do not have permission to restore backups')

    if not policy.is_system_admin(actor):
        if metadata.get('apartment_id') != actor.apartment_id:
            raise BackupPermissionError('You can only restore backups for your apartment')
        return list(RESTORE_ORDER)

    selected = list(collections) if collections else list(RESTORE_ORDER)
    unknown = [name for name in selected if name not in COLLECTIONS]
    if unknown:
        raise InvalidBackupError(f"Unknown collections: {', '.join(unknown)}")
    return [name for name in RESTORE_ORDER if name in selected]


def _existing_rows(name: str, rows: Dict[str, dict]) -> dict:
    """Map each backup pk to the row it would overwrite, or None."""
    model = COLLECTIONS[name]
    manager = getattr(model, 'all_objects', model._default_manager)
    try:
        keys = {pk: model._meta.pk.to_python(pk) for pk in rows}
    except ValidationError:
        raise InvalidBackupError(f"Invalid backup file format: bad id in '{name}'")

    current = manager.in_bulk(list(keys.values()))
    return {pk: current.get(key) for pk, key in keys.items()}


def _row_in_scope(actor, name: str, fields: dict, current=None) -> bool:
    """
    Apartment admins only overwrite rows of their own apartment.

    Both the backup row and the stored row it replaces must belong to the
    actor's apartment, and neither may be a system admin.
    """
    if name not in APARTMENT_COLLECTIONS:
        return True
    if fields.get('apartment_id') != actor.apartment_id:
        return False
    if current is not None and current.apartment_id != actor.apartment_id:
        return False
    if name == 'users':
        if fields.get('role') == UserRole.SYSTEM_ADMIN:
            return False
        if current is not None and current.role == UserRole.SYSTEM_ADMIN:
            return False
    return True


def _scoped_rows(actor, name: str, rows: Dict[str, dict]) -> Dict[str, dict]:
    """
    Rows the actor may write.

    Apartment admins cannot grant staff or superuser flags; those keep
    their stored values, or False for new users.
    """
    if policy.is_system_admin(actor):
        return dict(rows)

    existing = _existing_rows(name, rows)
    in_scope = {}
    for pk, fields in rows.items():
        current = existing[pk]
        if not _row_in_scope(actor, name, fields, current):
            continue
        if name == 'users':
            fields = dict(fields)
            for flag in PRIVILEGED_USER_FIELDS:
                fields[flag] = getattr(current, flag) if current is not None else False
        in_scope[pk] = fields
    return in_scope


def restore_collection(model, rows: Dict[str, dict]) -> int:
    """Overwrite rows by primary key in one transaction; returns rows written."""
    label = model._meta.label_lower
    objects = [{'model': label, 'pk': pk, 'fields': fields} for pk, fields in rows.items()]

    count = 0
    with transaction.atomic():
        for deserialized in serializers.deserialize('python', objects, ignorenonexistent=True):
            deserialized.save()
            count += 1
    return count


def restore_backup(
    *,
    context: AccessContext,
    envelope: dict,
    collections: Optional[Iterable[str]] = None
) -> RestoreResult:
    """
    Overwrite current data with the rows of a parsed backup.

    Each collection is written in its own transaction. A failure stops the
    restore, but collections written before it stay restored.

    Args:
        context: Acting user and language
        envelope: Result of parse_backup
        collections: Collections to restore (system admins only; apartment
            admins always restore all of them)

    Returns:
        RestoreResult with per-collection written and skipped counts

    Raises:
        BackupPermissionError: For apartment users, or an apartment admin
            restoring another apartment's backup
        InvalidBackupError: For unknown collection names or malformed row ids
        RestoreFailedError: If a collection could not be written
    """
    actor = context.user
    metadata = envelope['metadata']
    data = envelope['data']
    selected = _allowed_collections(actor, metadata, collections)

    result = RestoreResult()
    for name in selected:
        rows = data.get(name) or {}
        in_scope = _scoped_rows(actor, name, rows)
        result.skipped[name] = len(rows) - len(in_scope)

        try:
            result.restored[name] = restore_collection(COLLECTIONS[name], in_scope)
        except (DeserializationError, IntegrityError) as e:
            logger.error("Restore of %s failed for %s: %s", name, actor.username, e)
            raise RestoreFailedError(f"Restore failed while writing {name}: {e}")

    log_action(
        action=AuditAction.RESTORE_BACKUP,
        target_table='backups',
        performed_by=actor,
        old_data={},
        new_data={**metadata, **result.as_dict()},
    )
    logger.info("Backup restored by %s: %s", actor.username, result.restored)

    return result


def backup_history(*, actor, limit: Optional[int] = None):
    """
    Backup records visible to the actor, newest first.

    System admins see every record, apartment admins their apartment's,
    apartment users only the backups they created.
    """
    queryset = BackupRecord.objects.select_related('created_by')

    if policy.is_system_admin(actor):
        pass
    elif policy.is_admin(actor):
        queryset = policy.scope_queryset(actor, queryset)
    else:
        queryset = policy.scope_queryset(actor, queryset).filter(created_by=actor)

    if limit:
        return queryset[:limit]
    return queryset
