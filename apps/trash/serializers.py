from rest_framework import serializers

from .services import TRASH_TYPES


class TrashFilterSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=TRASH_TYPES, required=False, default='all')


class RetentionSerializer(serializers.Serializer):
    days_left = serializers.IntegerField()
    eligible_for_purge = serializers.BooleanField()
    label = serializers.CharField()


class TrashEntrySerializer(serializers.Serializer):
    """One trashed record with its retention status."""

    type = serializers.CharField()
    id = serializers.UUIDField()
    name = serializers.CharField()
    details = serializers.CharField(allow_blank=True)
    apartment_id = serializers.CharField(allow_null=True)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, allow_null=True)
    deleted_at = serializers.DateTimeField()
    deleted_by = serializers.CharField(allow_null=True)
    retention = RetentionSerializer(allow_null=True)


class EmptyTrashResultSerializer(serializers.Serializer):
    items_deleted = serializers.IntegerField()
    skipped = serializers.ListField(child=serializers.CharField())
