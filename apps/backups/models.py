from django.conf import settings
from django.db import models
import uuid

SIZE_UNITS = ['Bytes', 'KB', 'MB', 'GB']


def format_bytes(size: int) -> str:
    """Human readable size: '0 Bytes', '512 Bytes', '1.5 KB', '2 MB'."""
    if size <= 0:
        return '0 Bytes'
    exponent = 0
    while exponent < len(SIZE_UNITS) - 1 and size >= 1024 ** (exponent + 1):
        exponent += 1
    value = round(size / 1024 ** exponent, 2)
    return f"{value:g} {SIZE_UNITS[exponent]}"


class BackupScope(models.TextChoices):
    APARTMENT = 'apartment', 'Apartment'
    ALL = 'all', 'Full system'


class BackupRecord(models.Model):
    """History entry for a downloaded backup. The file itself is not kept."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    filename = models.CharField(max_length=100)
    scope = models.CharField(max_length=20, choices=BackupScope.choices)
    apartment_id = models.CharField(max_length=50, blank=True, db_index=True)
    include_deleted = models.BooleanField(default=False)
    encrypted = models.BooleanField(default=False)
    collections = models.JSONField(default=list)
    size = models.PositiveBigIntegerField(default=0)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name='backups'
    )
    created_by_username = models.CharField(max_length=50, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'backup_history'
        ordering = ['-created_at']

    def __str__(self):
        return self.filename

    @property
    def size_formatted(self):
        return format_bytes(self.size)
