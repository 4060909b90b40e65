from rest_framework import serializers

from .models import AuditAction, AuditLogEntry


class AuditFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for audit log filtering.

    Query Parameters:
        action (str): AuditAction value
        target_table (str): Collection name
        performed_by (UUID): Acting user ID
    """

    action = serializers.ChoiceField(choices=AuditAction.choices, required=False)
    target_table = serializers.CharField(max_length=50, required=False)
    performed_by = serializers.UUIDField(required=False)


class AuditLogEntrySerializer(serializers.ModelSerializer):
    performed_by_username = serializers.CharField(
        source='performed_by.username',
        read_only=True,
        default=None
    )

    class Meta:
        model = AuditLogEntry
        fields = [
            'id',
            'action',
            'target_table',
            'target_id',
            'old_data',
            'new_data',
            'performed_by',
            'performed_by_username',
            'performed_at',
            'ip_address',
        ]
        read_only_fields = fields
