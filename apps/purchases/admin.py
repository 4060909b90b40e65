from django.contrib import admin
from django.utils.html import format_html

from .models import Purchase


@admin.register(Purchase)
class PurchaseAdmin(admin.ModelAdmin):
    """Admin for purchases, including rows in the trash."""

    list_display = [
        'purchased_at',
        'apartment_id',
        'item',
        'vendor',
        'quantity',
        'unit_price',
        'total_price',
        'added_by',
        'status_badge',
    ]
    list_filter = ['is_deleted', 'apartment_id', 'purchased_at']
    search_fields = [
        'apartment_id',
        'item__english_name',
        'vendor__english_name',
        'added_by__username',
    ]
    date_hierarchy = 'purchased_at'
    list_select_related = ['item', 'vendor', 'added_by']
    readonly_fields = [
        'total_price', 'created_at', 'updated_at',
        'deleted_at', 'deleted_by', 'restored_at', 'restored_by',
    ]

    def get_queryset(self, request):
        return Purchase.all_objects.select_related('item', 'vendor', 'added_by')

    def status_badge(self, obj):
        """Display trash status as colored badge."""
        color, label = ('#B85C5C', 'Trashed') if obj.is_deleted else ('#6B8E5E', 'Active')
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            color,
            label,
        )
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'is_deleted'
