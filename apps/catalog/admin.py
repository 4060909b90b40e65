from django.contrib import admin

from .models import Vendor, Item


class SoftDeleteAdmin(admin.ModelAdmin):
    """Shows trashed rows too, so admins can inspect them."""

    def get_queryset(self, request):
        return self.model.all_objects.all()


@admin.register(Vendor)
class VendorAdmin(SoftDeleteAdmin):
    list_display = ['english_name', 'arabic_name', 'contact_person', 'phone', 'is_deleted', 'created_at']
    list_filter = ['is_deleted', 'created_at']
    search_fields = ['english_name', 'arabic_name', 'contact_person', 'phone', 'email']
    readonly_fields = ['created_at', 'updated_at', 'deleted_at', 'deleted_by', 'restored_at', 'restored_by']


@admin.register(Item)
class ItemAdmin(SoftDeleteAdmin):
    list_display = ['english_name', 'arabic_name', 'category', 'unit_price', 'is_deleted', 'created_at']
    list_filter = ['category', 'is_deleted', 'created_at']
    search_fields = ['english_name', 'arabic_name', 'category']
    readonly_fields = ['created_at', 'updated_at', 'deleted_at', 'deleted_by', 'restored_at', 'restored_by']
