"""
Management command to write a backup file.

Usage:
    python manage.py create_backup --user admin --scope all
    python manage.py create_backup --user admin --apartment A-101 --password secret
"""

from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from apps.backups.exceptions import BackupServiceError
from apps.backups.models import BackupScope
from apps.backups.services import create_backup
from ._actor import context_for


class Command(BaseCommand):
    help = 'Create a backup of users, purchases, vendors and items'

    def add_arguments(self, parser):
        parser.add_argument('--user', required=True, help='Username the backup is made as')
        parser.add_argument(
            '--scope',
            choices=BackupScope.values,
            default=BackupScope.APARTMENT,
        )
        parser.add_argument('--apartment', help='Apartment to back up')
        parser.add_argument(
            '--include-deleted',
            action='store_true',
            help='Keep records that are in the trash',
        )
        parser.add_argument('--password', help='Encrypt the backup with this password')
        parser.add_argument('--output-dir', default='.', help='Directory to write the file to')

    def handle(self, *args, **options):
        context = context_for(options['user'])

        try:
            backup = create_backup(
                context=context,
                scope=options['scope'],
                apartment_id=options['apartment'],
                include_deleted=options['include_deleted'],
                password=options['password'],
            )
        except BackupServiceError as e:
            raise CommandError(str(e))

        path = Path(options['output_dir']) / backup.filename
        path.write_text(backup.content, encoding='utf-8')

        self.stdout.write(self.style.SUCCESS(
            f'Backup written to {path} ({backup.record.size_formatted})'
        ))
