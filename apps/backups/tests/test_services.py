import json

import pytest
from decimal import Decimal

from apps.accounts.models import User, UserRole
from apps.accounts.policy import AccessContext
from apps.audit.models import AuditAction, AuditLogEntry
from apps.backups.exceptions import (
    BackupPermissionError,
    BackupServiceError,
    DecryptionError,
    InvalidBackupError,
    RestoreFailedError,
)
from apps.backups.models import BackupRecord, BackupScope
from apps.backups.services import (
    backup_history,
    create_backup,
    parse_backup,
    restore_backup,
)
from apps.catalog.models import Vendor
from apps.purchases.models import Purchase


def backup_envelope(user, **kwargs):
    backup = create_backup(context=AccessContext(user=user), **kwargs)
    return parse_backup(backup.content, backup.filename, password=kwargs.get('password'))


# =============================================================================
# Create
# =============================================================================

@pytest.mark.django_db
class TestCreateBackup:

    def test_apartment_backup_contents(self, apartment_admin, resident, neighbour, purchase, neighbour_purchase):
        envelope = backup_envelope(apartment_admin)

        metadata = envelope['metadata']
        assert metadata['version'] == '1.0'
        assert metadata['scope'] == BackupScope.APARTMENT
        assert metadata['apartment_id'] == 'A101'
        assert metadata['created_by'] == 'admin_a101'
        assert metadata['encrypted'] is False
        assert set(metadata['collections']) == {'users', 'purchases', 'vendors', 'items'}

        data = envelope['data']
        assert list(data['purchases']) == [str(purchase.id)]
        assert set(data['users']) == {str(apartment_admin.id), str(resident.id)}
        assert list(data['vendors']) == [str(purchase.vendor_id)]

    def test_rows_keep_field_values(self, apartment_admin, purchase):
        row = backup_envelope(apartment_admin)['data']['purchases'][str(purchase.id)]

        assert Decimal(row['total_price']) == Decimal('11.00')
        assert row['vendor'] == str(purchase.vendor_id)
        assert row['added_by'] == str(purchase.added_by_id)
        assert 'id' not in row

    def test_user_rows_carry_credentials(self, apartment_admin):
        row = backup_envelope(apartment_admin)['data']['users'][str(apartment_admin.id)]
        assert row['password'] == apartment_admin.password

    def test_trashed_rows_excluded_by_default(self, apartment_admin, purchase, resident):
        purchase.soft_delete(resident)

        assert backup_envelope(apartment_admin)['data']['purchases'] == {}
        included = backup_envelope(apartment_admin, include_deleted=True)
        assert list(included['data']['purchases']) == [str(purchase.id)]

    def test_trashed_vendor_of_purchase_is_included(self, apartment_admin, purchase, vendor, system_admin):
        Vendor.objects.filter(pk=vendor.pk).update(is_deleted=True)

        envelope = backup_envelope(apartment_admin)
        assert list(envelope['data']['vendors']) == [str(vendor.id)]

    def test_full_backup_requires_system_admin(self, apartment_admin):
        with pytest.raises(BackupPermissionError):
            create_backup(context=AccessContext(user=apartment_admin), scope=BackupScope.ALL)

    def test_system_admin_full_backup(self, system_admin, purchase, neighbour_purchase, other_vendor):
        backup = create_backup(context=AccessContext(user=system_admin), scope=BackupScope.ALL)
        envelope = parse_backup(backup.content, backup.filename)

        assert backup.filename.startswith('backup_all_')
        assert backup.filename.endswith('.json')
        assert envelope['metadata']['apartment_id'] is None
        assert len(envelope['data']['purchases']) == 2
        assert len(envelope['data']['vendors']) == 2

    def test_system_admin_must_pick_apartment(self, system_admin):
        with pytest.raises(BackupServiceError, match='select an apartment'):
            create_backup(context=AccessContext(user=system_admin))

    def test_resident_cannot_back_up_other_apartment(self, resident):
        with pytest.raises(BackupPermissionError):
            create_backup(context=AccessContext(user=resident), apartment_id='B202')

    def test_history_record_and_audit(self, resident):
        backup = create_backup(context=AccessContext(user=resident))

        record = BackupRecord.objects.get()
        assert record == backup.record
        assert record.apartment_id == 'A101'
        assert record.size == len(backup.content.encode('utf-8'))
        assert record.created_by_username == 'resident_a101'
        assert AuditLogEntry.objects.filter(
            action=AuditAction.CREATE_BACKUP, target_id=str(record.id)
        ).exists()

    def test_encrypted_backup(self, apartment_admin, purchase):
        backup = create_backup(context=AccessContext(user=apartment_admin), password='backup-pass')

        assert backup.filename.endswith('.enc')
        assert backup.content_type == 'application/octet-stream'
        assert backup.record.encrypted is True
        with pytest.raises(ValueError):
            json.loads(backup.content)

        envelope = parse_backup(backup.content, backup.filename, password='backup-pass')
        assert envelope['metadata']['encrypted'] is True
        assert list(envelope['data']['purchases']) == [str(purchase.id)]


# =============================================================================
# Parse
# =============================================================================

class TestParseBackup:

    def test_bytes_are_accepted(self):
        envelope = parse_backup(b'{"metadata": {}, "data": {}}', 'backup.json')
        assert envelope == {'metadata': {}, 'data': {}}

    @pytest.mark.parametrize('content', [
        'not json',
        '[]',
        '{"data": {}}',
        '{"metadata": {}, "data": []}',
        '{"metadata": {}, "data": {"purchases": []}}',
        '{"metadata": {}, "data": {"users": {"5b0c7a3e-0d6f-4c0e-9a51-3f6f2c1d8e90": "row"}}}',
        '{"metadata": {}, "data": {"vendors": {"5b0c7a3e-0d6f-4c0e-9a51-3f6f2c1d8e90": ["row"]}}}',
    ])
    def test_invalid_envelope(self, content):
        with pytest.raises(InvalidBackupError):
            parse_backup(content, 'backup.json')

    def test_encrypted_without_password(self):
        with pytest.raises(InvalidBackupError, match='Password required'):
            parse_backup('abcd', 'backup.enc')

    @pytest.mark.django_db
    def test_wrong_password(self, apartment_admin):
        backup = create_backup(context=AccessContext(user=apartment_admin), password='backup-pass')

        with pytest.raises(DecryptionError):
            parse_backup(backup.content, backup.filename, password='nope')


# =============================================================================
# Restore
# =============================================================================

@pytest.mark.django_db
class TestRestoreBackup:

    def test_round_trip_restores_changed_and_purged_rows(self, system_admin, purchase, vendor):
        envelope = backup_envelope(system_admin, scope=BackupScope.ALL)
        original_created_at = purchase.created_at

        Vendor.objects.filter(pk=vendor.pk).update(english_name='Renamed Market')
        Purchase.all_objects.filter(pk=purchase.pk).delete()

        result = restore_backup(context=AccessContext(user=system_admin), envelope=envelope)

        assert result.restored['purchases'] == 1
        vendor.refresh_from_db()
        assert vendor.english_name == 'Fresh Market'
        restored = Purchase.objects.get(pk=purchase.pk)
        assert restored.total_price == Decimal('11.00')
        assert restored.created_at == original_created_at

    def test_rows_missing_from_backup_are_kept(self, system_admin, vendor, other_vendor):
        envelope = backup_envelope(system_admin, scope=BackupScope.ALL)
        added = Vendor.objects.create(english_name='Late Addition')

        restore_backup(context=AccessContext(user=system_admin), envelope=envelope)

        assert Vendor.objects.filter(pk=added.pk).exists()

    def test_selected_collections_only(self, system_admin, purchase, vendor, item):
        envelope = backup_envelope(system_admin, scope=BackupScope.ALL)
        Vendor.objects.filter(pk=vendor.pk).update(english_name='Renamed Market')

        result = restore_backup(
            context=AccessContext(user=system_admin),
            envelope=envelope,
            collections=['items'],
        )

        assert list(result.restored) == ['items']
        vendor.refresh_from_db()
        assert vendor.english_name == 'Renamed Market'

    def test_unknown_collection(self, system_admin):
        envelope = backup_envelope(system_admin, scope=BackupScope.ALL)

        with pytest.raises(InvalidBackupError):
            restore_backup(
                context=AccessContext(user=system_admin),
                envelope=envelope,
                collections=['system'],
            )

    def test_resident_cannot_restore(self, resident):
        envelope = backup_envelope(resident)

        with pytest.raises(BackupPermissionError):
            restore_backup(context=AccessContext(user=resident), envelope=envelope)

    def test_apartment_admin_cannot_restore_other_apartment(self, other_admin, apartment_admin):
        envelope = backup_envelope(apartment_admin)

        with pytest.raises(BackupPermissionError):
            restore_backup(context=AccessContext(user=other_admin), envelope=envelope)

    def test_apartment_admin_skips_foreign_rows(
        self, apartment_admin, resident, neighbour, system_admin, purchase, neighbour_purchase
    ):
        envelope = backup_envelope(system_admin, scope=BackupScope.ALL)
        envelope['metadata']['apartment_id'] = 'A101'

        result = restore_backup(context=AccessContext(user=apartment_admin), envelope=envelope)

        assert result.restored == {'users': 2, 'vendors': 1, 'items': 1, 'purchases': 1}
        assert result.skipped == {'users': 2, 'vendors': 0, 'items': 0, 'purchases': 1}

    def test_apartment_admin_cannot_overwrite_system_admin(self, apartment_admin, system_admin):
        envelope = backup_envelope(apartment_admin)
        users = envelope['data']['users']
        forged = dict(users[str(apartment_admin.id)], username='sysadmin', is_superuser=True)
        users[str(system_admin.id)] = forged
        original_password = system_admin.password

        result = restore_backup(context=AccessContext(user=apartment_admin), envelope=envelope)

        assert result.skipped['users'] == 1
        system_admin.refresh_from_db()
        assert system_admin.role == UserRole.SYSTEM_ADMIN
        assert system_admin.apartment_id == ''
        assert system_admin.password == original_password

    def test_apartment_admin_cannot_overwrite_foreign_purchase(
        self, apartment_admin, purchase, neighbour_purchase
    ):
        envelope = backup_envelope(apartment_admin)
        purchases = envelope['data']['purchases']
        purchases[str(neighbour_purchase.id)] = dict(purchases[str(purchase.id)])

        result = restore_backup(context=AccessContext(user=apartment_admin), envelope=envelope)

        assert result.restored['purchases'] == 1
        assert result.skipped['purchases'] == 1
        neighbour_purchase.refresh_from_db()
        assert neighbour_purchase.apartment_id == 'B202'
        assert neighbour_purchase.total_price == Decimal('5.50')

    def test_apartment_admin_cannot_grant_staff_flags(self, apartment_admin, resident):
        envelope = backup_envelope(apartment_admin)
        row = envelope['data']['users'][str(resident.id)]
        row.update(is_superuser=True, is_staff=True)
        envelope['data']['users']['0f3c2b8e-6a1d-4f7e-b9c2-5d4e3a2b1c0f'] = dict(
            row, username='new_a101', is_superuser=True, is_staff=True
        )

        restore_backup(context=AccessContext(user=apartment_admin), envelope=envelope)

        resident.refresh_from_db()
        assert resident.is_superuser is False
        assert resident.is_staff is False
        created = User.objects.get(username='new_a101')
        assert created.is_superuser is False
        assert created.is_staff is False

    def test_apartment_admin_bad_row_id(self, apartment_admin, purchase):
        envelope = backup_envelope(apartment_admin)
        purchases = envelope['data']['purchases']
        purchases['not-a-uuid'] = dict(purchases[str(purchase.id)])

        with pytest.raises(InvalidBackupError, match='bad id'):
            restore_backup(context=AccessContext(user=apartment_admin), envelope=envelope)

    def test_invalid_row_fails_restore(self, system_admin, purchase):
        envelope = backup_envelope(system_admin, scope=BackupScope.ALL)
        envelope['data']['purchases'][str(purchase.id)]['quantity'] = 'lots'

        with pytest.raises(RestoreFailedError, match='purchases'):
            restore_backup(context=AccessContext(user=system_admin), envelope=envelope)

    def test_restore_is_audited(self, system_admin):
        envelope = backup_envelope(system_admin, scope=BackupScope.ALL)

        restore_backup(context=AccessContext(user=system_admin), envelope=envelope)

        entry = AuditLogEntry.objects.get(action=AuditAction.RESTORE_BACKUP)
        assert entry.new_data['restored']['users'] == 1


# =============================================================================
# History
# =============================================================================

@pytest.mark.django_db
class TestBackupHistory:

    def test_visibility(self, system_admin, apartment_admin, resident, roommate, other_admin):
        for user in (apartment_admin, resident, roommate, other_admin):
            create_backup(context=AccessContext(user=user))

        assert backup_history(actor=system_admin).count() == 4
        assert backup_history(actor=apartment_admin).count() == 3
        assert [r.created_by for r in backup_history(actor=resident)] == [resident]

    def test_limit(self, resident):
        for _ in range(3):
            create_backup(context=AccessContext(user=resident))

        assert len(backup_history(actor=resident, limit=2)) == 2
