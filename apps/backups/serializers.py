from django.conf import settings
from rest_framework import serializers

from .models import BackupRecord, BackupScope
from .services import RESTORE_ORDER


class BackupCreateSerializer(serializers.Serializer):
    scope = serializers.ChoiceField(choices=BackupScope.choices, default=BackupScope.APARTMENT)
    apartment_id = serializers.CharField(max_length=50, required=False, allow_blank=True)
    include_deleted = serializers.BooleanField(default=False)
    password = serializers.CharField(
        required=False,
        allow_blank=True,
        write_only=True,
        style={'input_type': 'password'},
        help_text='Encrypt the backup with this password'
    )


class BackupRestoreSerializer(serializers.Serializer):
    file = serializers.FileField()
    password = serializers.CharField(
        required=False,
        allow_blank=True,
        write_only=True,
        style={'input_type': 'password'}
    )
    collections = serializers.MultipleChoiceField(choices=RESTORE_ORDER, required=False)

    def validate_file(self, value):
        max_size = getattr(settings, 'BACKUP_MAX_UPLOAD_SIZE', 50 * 1024 * 1024)
        if value.size > max_size:
            raise serializers.ValidationError('Backup file is too large')
        if not value.name.endswith(('.json', '.enc')):
            raise serializers.ValidationError('Backup file must be a .json or .enc file')
        return value


class BackupRecordSerializer(serializers.ModelSerializer):
    size_formatted = serializers.CharField(read_only=True)

    class Meta:
        model = BackupRecord
        fields = [
            'id',
            'filename',
            'scope',
            'apartment_id',
            'include_deleted',
            'encrypted',
            'collections',
            'size',
            'size_formatted',
            'created_by_username',
            'created_at',
        ]
        read_only_fields = fields


class RestoreResultSerializer(serializers.Serializer):
    message = serializers.CharField()
    restored = serializers.DictField(child=serializers.IntegerField())
    skipped = serializers.DictField(child=serializers.IntegerField())
