from django.contrib import admin

from .models import AuditLogEntry


@admin.register(AuditLogEntry)
class AuditLogEntryAdmin(admin.ModelAdmin):
    """Read-only browser for the audit trail."""

    list_display = ['action', 'target_table', 'target_id', 'performed_by', 'performed_at', 'ip_address']
    list_filter = ['action', 'target_table', 'performed_at']
    search_fields = ['target_id', 'performed_by__username']
    date_hierarchy = 'performed_at'
    readonly_fields = [f.name for f in AuditLogEntry._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
