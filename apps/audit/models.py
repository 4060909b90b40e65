from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
import uuid


class AuditAction(models.TextChoices):
    # Authentication
    USER_REGISTERED = 'USER_REGISTERED', 'User registered'
    USER_LOGIN = 'USER_LOGIN', 'User login'
    LOGIN_FAILED = 'LOGIN_FAILED', 'Login failed'
    USER_LOGOUT = 'USER_LOGOUT', 'User logout'
    PASSWORD_CHANGED = 'PASSWORD_CHANGED', 'Password changed'
    PASSWORD_RESET = 'PASSWORD_RESET', 'Password reset'
    UPDATE_PROFILE = 'UPDATE_PROFILE', 'Profile updated'

    # User management
    CREATE_USER = 'CREATE_USER', 'User created'
    UPDATE_USER = 'UPDATE_USER', 'User updated'
    TOGGLE_USER_STATUS = 'TOGGLE_USER_STATUS', 'User status toggled'

    # Catalog
    CREATE_VENDOR = 'CREATE_VENDOR', 'Vendor created'
    UPDATE_VENDOR = 'UPDATE_VENDOR', 'Vendor updated'
    DELETE_VENDOR = 'DELETE_VENDOR', 'Vendor deleted'
    CREATE_ITEM = 'CREATE_ITEM', 'Item created'
    UPDATE_ITEM = 'UPDATE_ITEM', 'Item updated'
    DELETE_ITEM = 'DELETE_ITEM', 'Item deleted'

    # Purchases
    CREATE_PURCHASE = 'CREATE_PURCHASE', 'Purchase created'
    UPDATE_PURCHASE = 'UPDATE_PURCHASE', 'Purchase updated'
    DELETE_PURCHASE = 'DELETE_PURCHASE', 'Purchase deleted'

    # Trash
    RESTORE_PURCHASE = 'RESTORE_PURCHASE', 'Purchase restored'
    RESTORE_VENDOR = 'RESTORE_VENDOR', 'Vendor restored'
    RESTORE_ITEM = 'RESTORE_ITEM', 'Item restored'
    DELETE_PERMANENTLY = 'DELETE_PERMANENTLY', 'Deleted permanently'
    EMPTY_TRASH = 'EMPTY_TRASH', 'Trash emptied'

    # Backups
    CREATE_BACKUP = 'CREATE_BACKUP', 'Backup created'
    RESTORE_BACKUP = 'RESTORE_BACKUP', 'Backup restored'


class AuditLogEntry(models.Model):
    """
    One audited write: who did what to which row, with before/after snapshots.

    Entries are append-only; nothing in the application updates or deletes them.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    action = models.CharField(max_length=32, choices=AuditAction.choices)
    target_table = models.CharField(max_length=50)
    target_id = models.CharField(max_length=64, blank=True)

    old_data = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    new_data = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)

    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='audit_entries'
    )
    performed_at = models.DateTimeField(auto_now_add=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)

    class Meta:
        db_table = 'audit_log'
        ordering = ['-performed_at']
        indexes = [
            models.Index(fields=['action', 'performed_at'], name='audit_action_date_idx'),
            models.Index(fields=['target_table', 'target_id'], name='audit_target_idx'),
            models.Index(fields=['performed_by', 'performed_at'], name='audit_actor_date_idx'),
        ]
        verbose_name_plural = 'Audit log entries'

    def __str__(self):
        return f"{self.action} {self.target_table}/{self.target_id}"
