"""
Management command to restore a backup file.

Usage:
    python manage.py restore_backup backup_all_2025-01-31.json --user admin
    python manage.py restore_backup backup_all_2025-01-31.enc --user admin \
        --password secret --collections vendors,items --dry-run
"""

from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from apps.backups.exceptions import BackupServiceError
from apps.backups.services import parse_backup, restore_backup
from ._actor import context_for


class Command(BaseCommand):
    help = 'Restore users, purchases, vendors and items from a backup file'

    def add_arguments(self, parser):
        parser.add_argument('path', help='Backup file (.json or .enc)')
        parser.add_argument('--user', required=True, help='Username the restore is made as')
        parser.add_argument('--password', help='Password of an encrypted backup')
        parser.add_argument(
            '--collections',
            help='Comma separated collections to restore (system admins only)',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Validate the file and show what would be restored',
        )

    def handle(self, *args, **options):
        path = Path(options['path'])
        if not path.is_file():
            raise CommandError(f'Backup file {path} does not exist')

        context = context_for(options['user'])
        collections = None
        if options['collections']:
            collections = [c.strip() for c in options['collections'].split(',') if c.strip()]

        try:
            envelope = parse_backup(path.read_bytes(), path.name, password=options['password'])
        except BackupServiceError as e:
            raise CommandError(str(e))

        metadata = envelope['metadata']
        self.stdout.write(
            f"\nBackup {metadata.get('version')} ({metadata.get('scope')}) "
            f"created {metadata.get('timestamp')} by {metadata.get('created_by')}:\n"
        )
        for name, rows in envelope['data'].items():
            self.stdout.write(f'  - {name}: {len(rows)}')

        if options['dry_run']:
            self.stdout.write(self.style.WARNING('\n--dry-run mode: No changes made.'))
            return

        try:
            result = restore_backup(context=context, envelope=envelope, collections=collections)
        except BackupServiceError as e:
            raise CommandError(str(e))

        for name, count in result.restored.items():
            skipped = result.skipped.get(name, 0)
            line = f'Restored {count} {name}'
            if skipped:
                line += f' (skipped {skipped} outside your apartment)'
            self.stdout.write(self.style.SUCCESS(line))
