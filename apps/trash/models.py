"""
Soft-delete base for purchases, vendors and items.

Rows move Active -> Trashed (``is_deleted=True``, stamped with who and
when) and from there either back to Active through ``restore`` or to
Purged through a hard ``delete()``. The default manager hides trashed
rows; ``all_objects`` sees everything.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone

from .retention import retention_status


class SoftDeleteQuerySet(models.QuerySet):

    def active(self):
        return self.filter(is_deleted=False)

    def trashed(self):
        return self.filter(is_deleted=True)


class ActiveManager(models.Manager.from_queryset(SoftDeleteQuerySet)):
    """Default manager: only rows that are not in the trash."""

    def get_queryset(self):
        return super().get_queryset().filter(is_deleted=False)


class AllObjectsManager(models.Manager.from_queryset(SoftDeleteQuerySet)):
    pass


class SoftDeleteModel(models.Model):
    is_deleted = models.BooleanField(default=False, db_index=True)
    deleted_at = models.DateTimeField(null=True, blank=True)
    deleted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    restored_at = models.DateTimeField(null=True, blank=True)
    restored_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )

    objects = ActiveManager()
    all_objects = AllObjectsManager()

    class Meta:
        abstract = True

    def soft_delete(self, user):
        self.is_deleted = True
        self.deleted_at = timezone.now()
        self.deleted_by = user
        self.save(update_fields=['is_deleted', 'deleted_at', 'deleted_by'])

    def restore(self, user):
        self.is_deleted = False
        self.deleted_at = None
        self.deleted_by = None
        self.restored_at = timezone.now()
        self.restored_by = user
        self.save(update_fields=[
            'is_deleted', 'deleted_at', 'deleted_by', 'restored_at', 'restored_by'
        ])

    @property
    def retention(self):
        if not self.is_deleted or self.deleted_at is None:
            return None
        return retention_status(self.deleted_at)
