import pytest
from io import StringIO
from django.core.files.uploadedfile import SimpleUploadedFile
from django.core.management import call_command
from django.core.management.base import CommandError
from django.urls import reverse
from rest_framework import status

from apps.accounts.policy import AccessContext
from apps.backups.models import BackupScope
from apps.backups.services import create_backup
from apps.catalog.models import Vendor


def upload_for(backup):
    return SimpleUploadedFile(
        backup.filename,
        backup.content.encode('utf-8'),
        content_type=backup.content_type,
    )


# =============================================================================
# API
# =============================================================================

@pytest.mark.django_db
class TestBackupEndpoints:

    def test_create_returns_attachment(self, apartment_admin_client, purchase):
        response = apartment_admin_client.post(reverse('backups:create'), {})

        assert response.status_code == status.HTTP_200_OK
        assert response['Content-Type'] == 'application/json'
        assert 'attachment; filename="backup_apartment_' in response['Content-Disposition']
        assert b'"apartment_id": "A101"' in response.content

    def test_create_encrypted(self, apartment_admin_client):
        response = apartment_admin_client.post(reverse('backups:create'), {'password': 'backup-pass'})

        assert response.status_code == status.HTTP_200_OK
        assert response['Content-Type'] == 'application/octet-stream'
        assert '.enc"' in response['Content-Disposition']

    def test_full_backup_forbidden_for_apartment_admin(self, apartment_admin_client):
        response = apartment_admin_client.post(reverse('backups:create'), {'scope': BackupScope.ALL})
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_restore(self, system_admin_client, system_admin, vendor):
        backup = create_backup(context=AccessContext(user=system_admin), scope=BackupScope.ALL)
        Vendor.objects.filter(pk=vendor.pk).update(english_name='Renamed Market')

        response = system_admin_client.post(
            reverse('backups:restore'),
            {'file': upload_for(backup)},
            format='multipart',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['restored']['vendors'] == 1
        vendor.refresh_from_db()
        assert vendor.english_name == 'Fresh Market'

    def test_restore_encrypted_with_wrong_password(self, system_admin_client, system_admin):
        backup = create_backup(
            context=AccessContext(user=system_admin),
            scope=BackupScope.ALL,
            password='backup-pass',
        )

        response = system_admin_client.post(
            reverse('backups:restore'),
            {'file': upload_for(backup), 'password': 'nope'},
            format='multipart',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'Decryption failed' in response.data['error']

    def test_restore_rejects_other_extensions(self, system_admin_client):
        upload = SimpleUploadedFile('backup.txt', b'{}', content_type='text/plain')

        response = system_admin_client.post(
            reverse('backups:restore'), {'file': upload}, format='multipart'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'file' in response.data

    def test_restore_rejects_malformed_rows(self, system_admin_client):
        content = b'{"metadata": {}, "data": {"users": {"5b0c7a3e-0d6f-4c0e-9a51-3f6f2c1d8e90": "row"}}}'
        upload = SimpleUploadedFile('backup.json', content, content_type='application/json')

        response = system_admin_client.post(
            reverse('backups:restore'), {'file': upload}, format='multipart'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'Invalid backup file format' in response.data['error']

    def test_restore_forbidden_for_resident(self, resident_client, resident):
        backup = create_backup(context=AccessContext(user=resident))

        response = resident_client.post(
            reverse('backups:restore'), {'file': upload_for(backup)}, format='multipart'
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_history(self, resident_client, resident, apartment_admin):
        create_backup(context=AccessContext(user=resident))
        create_backup(context=AccessContext(user=apartment_admin))

        response = resident_client.get(reverse('backups:history'))

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        assert response.data[0]['created_by_username'] == 'resident_a101'
        assert response.data[0]['size_formatted'].endswith(('Bytes', 'KB'))


# =============================================================================
# Commands
# =============================================================================

@pytest.mark.django_db
class TestBackupCommands:

    def test_create_and_restore_round_trip(self, tmp_path, system_admin, vendor):
        out = StringIO()
        call_command(
            'create_backup', '--user', 'sysadmin', '--scope', 'all',
            '--output-dir', str(tmp_path), stdout=out,
        )
        assert 'Backup written to' in out.getvalue()
        path = next(tmp_path.glob('backup_all_*.json'))

        Vendor.objects.filter(pk=vendor.pk).update(english_name='Renamed Market')
        out = StringIO()
        call_command('restore_backup', str(path), '--user', 'sysadmin', stdout=out)

        assert 'Restored 1 vendors' in out.getvalue()
        vendor.refresh_from_db()
        assert vendor.english_name == 'Fresh Market'

    def test_restore_dry_run(self, tmp_path, system_admin, vendor):
        call_command(
            'create_backup', '--user', 'sysadmin', '--scope', 'all',
            '--output-dir', str(tmp_path), stdout=StringIO(),
        )
        path = next(tmp_path.glob('backup_all_*.json'))
        Vendor.objects.filter(pk=vendor.pk).update(english_name='Renamed Market')

        out = StringIO()
        call_command('restore_backup', str(path), '--user', 'sysadmin', '--dry-run', stdout=out)

        assert 'vendors: 1' in out.getvalue()
        vendor.refresh_from_db()
        assert vendor.english_name == 'Renamed Market'

    def test_unknown_user(self, tmp_path):
        with pytest.raises(CommandError, match='No active user'):
            call_command('create_backup', '--user', 'ghost', '--output-dir', str(tmp_path))

    def test_permission_error_becomes_command_error(self, tmp_path, resident):
        with pytest.raises(CommandError):
            call_command(
                'create_backup', '--user', 'resident_a101', '--scope', 'all',
                '--output-dir', str(tmp_path),
            )
