from rest_framework import serializers

from .models import Vendor, Item


# =============================================================================
# Input Serializers
# =============================================================================

class ItemFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for item filtering.

    Query Parameters:
        category (str): Filter by category (case-insensitive)
        search (str): Match English or Arabic name
    """

    category = serializers.CharField(max_length=100, required=False)
    search = serializers.CharField(max_length=100, required=False)


class VendorFilterSerializer(serializers.Serializer):
    search = serializers.CharField(max_length=100, required=False)


# =============================================================================
# Output Serializers
# =============================================================================

class VendorSerializer(serializers.ModelSerializer):
    """Vendor serializer used for reads and writes."""

    class Meta:
        model = Vendor
        fields = [
            'id',
            'english_name',
            'arabic_name',
            'contact_person',
            'phone',
            'email',
            'created_by',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_by', 'created_at', 'updated_at']

    def validate_phone(self, value):
        allowed = set('0123456789 -+()')
        if value and not set(value) <= allowed:
            raise serializers.ValidationError('Please enter a valid phone number')
        return value


class ItemSerializer(serializers.ModelSerializer):
    """Item serializer; ``last_purchased_at`` is present on list results."""

    last_purchased_at = serializers.DateTimeField(read_only=True, required=False)

    class Meta:
        model = Item
        fields = [
            'id',
            'english_name',
            'arabic_name',
            'category',
            'unit_price',
            'description',
            'last_purchased_at',
            'created_by',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_by', 'created_at', 'updated_at']


class VendorMinimalSerializer(serializers.ModelSerializer):
    """Minimal vendor info for nested serialization."""

    class Meta:
        model = Vendor
        fields = ['id', 'english_name', 'arabic_name']
        read_only_fields = fields


class ItemMinimalSerializer(serializers.ModelSerializer):
    """Minimal item info for nested serialization."""

    class Meta:
        model = Item
        fields = ['id', 'english_name', 'arabic_name', 'category']
        read_only_fields = fields
