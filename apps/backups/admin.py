from django.contrib import admin

from .models import BackupRecord


@admin.register(BackupRecord)
class BackupRecordAdmin(admin.ModelAdmin):
    list_display = [
        'filename',
        'scope',
        'apartment_id',
        'encrypted',
        'size_formatted',
        'created_by_username',
        'created_at',
    ]
    list_filter = ['scope', 'encrypted', 'include_deleted']
    search_fields = ['filename', 'apartment_id', 'created_by_username']
    date_hierarchy = 'created_at'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
