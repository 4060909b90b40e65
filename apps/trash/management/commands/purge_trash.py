"""
Management command to permanently delete trashed records.

Nothing is purged automatically when the retention window runs out; run
this from cron (or by hand) to clear the trash.

Usage:
    python manage.py purge_trash --expired-only
    python manage.py purge_trash --expired-only --dry-run
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.trash.retention import purge_cutoff, retention_days
from apps.trash.services import TRASH_MODELS, purge_queryset


class Command(BaseCommand):
    help = 'Permanently delete trashed purchases, vendors and items'

    def add_arguments(self, parser):
        parser.add_argument(
            '--expired-only',
            action='store_true',
            help='Only purge records older than the retention window',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be deleted without making changes',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        cutoff = purge_cutoff() if options['expired_only'] else None

        querysets = {}
        for kind, model in TRASH_MODELS.items():
            queryset = model.all_objects.trashed()
            if cutoff is not None:
                queryset = queryset.filter(deleted_at__lte=cutoff)
            querysets[kind] = queryset

        total = sum(qs.count() for qs in querysets.values())
        if total == 0:
            self.stdout.write(self.style.SUCCESS('Trash is empty. Nothing to purge.'))
            return

        scope = f'older than {retention_days()} days' if cutoff else 'in the trash'
        self.stdout.write(f'\nFound {total} record(s) {scope}:\n')
        for kind, queryset in querysets.items():
            self.stdout.write(f'  - {kind}: {queryset.count()}')

        if dry_run:
            self.stdout.write(self.style.WARNING('\n--dry-run mode: No changes made.'))
            return

        deleted = 0
        skipped = []
        with transaction.atomic():
            for kind, queryset in querysets.items():
                result = purge_queryset(kind, queryset)
                deleted += result['deleted']
                skipped.extend(result['skipped'])

        self.stdout.write(self.style.SUCCESS(f'\nPurged {deleted} record(s).'))
        if skipped:
            self.stdout.write(self.style.WARNING(
                f'Skipped {len(skipped)} vendor/item record(s) still referenced by purchases.'
            ))
