from decimal import Decimal

from rest_framework import serializers

from apps.accounts.serializers import UserMinimalSerializer
from apps.catalog.models import Item, Vendor
from apps.catalog.serializers import ItemMinimalSerializer, VendorMinimalSerializer
from .models import Purchase


# =============================================================================
# Input Serializers
# =============================================================================

class PurchaseFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for purchase filtering.

    Query Parameters:
        apartment (str): Filter by apartment (system admins only)
        vendor (UUID): Filter by vendor ID
        item (UUID): Filter by item ID
        category (str): Filter by item category
        date_from (date): Filter purchases from this date
        date_to (date): Filter purchases to this date
    """

    apartment = serializers.CharField(max_length=50, required=False)
    vendor = serializers.UUIDField(required=False)
    item = serializers.UUIDField(required=False)
    category = serializers.CharField(max_length=100, required=False)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)

    def validate(self, attrs):
        """Validate date range."""
        date_from = attrs.get('date_from')
        date_to = attrs.get('date_to')

        if date_from and date_to:
            if date_from > date_to:
                raise serializers.ValidationError({
                    'date_to': 'End date must be after start date'
                })

        return attrs


class PurchaseCreateSerializer(serializers.Serializer):
    """Input for booking a purchase; unit_price defaults to the item price."""

    vendor = serializers.PrimaryKeyRelatedField(queryset=Vendor.objects.all())
    item = serializers.PrimaryKeyRelatedField(queryset=Item.objects.all())
    quantity = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.01'))
    unit_price = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=Decimal('0'),
        required=False
    )
    purchased_at = serializers.DateTimeField(required=False)
    apartment_id = serializers.CharField(max_length=50, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)


class PurchaseUpdateSerializer(serializers.Serializer):
    vendor = serializers.PrimaryKeyRelatedField(queryset=Vendor.objects.all(), required=False)
    item = serializers.PrimaryKeyRelatedField(queryset=Item.objects.all(), required=False)
    quantity = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.01'), required=False)
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0'), required=False)
    purchased_at = serializers.DateTimeField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True)


# =============================================================================
# Output Serializers
# =============================================================================

class PurchaseSerializer(serializers.ModelSerializer):
    """Main serializer for purchases."""

    vendor = VendorMinimalSerializer(read_only=True)
    item = ItemMinimalSerializer(read_only=True)
    added_by = UserMinimalSerializer(read_only=True)

    class Meta:
        model = Purchase
        fields = [
            'id',
            'apartment_id',
            'vendor',
            'item',
            'quantity',
            'unit_price',
            'total_price',
            'purchased_at',
            'notes',
            'added_by',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class PurchaseListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for purchase lists."""

    vendor_name = serializers.CharField(source='vendor.english_name', read_only=True)
    item_name = serializers.CharField(source='item.english_name', read_only=True)
    category = serializers.CharField(source='item.category', read_only=True)
    added_by_username = serializers.CharField(source='added_by.username', read_only=True, default=None)

    class Meta:
        model = Purchase
        fields = [
            'id',
            'apartment_id',
            'vendor',
            'vendor_name',
            'item',
            'item_name',
            'category',
            'quantity',
            'unit_price',
            'total_price',
            'purchased_at',
            'added_by_username',
        ]
        read_only_fields = fields
