from django.http import HttpResponse
from rest_framework import status
from rest_framework.decorators import api_view, parser_classes, permission_classes
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiResponse
import logging

from apps.accounts.permissions import IsAdminRole
from apps.accounts.policy import AccessContext
from .exceptions import (
    BackupPermissionError,
    BackupServiceError,
    InvalidBackupError,
    RestoreFailedError,
)
from .serializers import (
    BackupCreateSerializer,
    BackupRecordSerializer,
    BackupRestoreSerializer,
    RestoreResultSerializer,
)
from .services import backup_history, create_backup, parse_backup, restore_backup

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 20


def error_response(error):
    if isinstance(error, BackupPermissionError):
        code = status.HTTP_403_FORBIDDEN
    elif isinstance(error, RestoreFailedError):
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    else:
        code = status.HTTP_400_BAD_REQUEST
    return Response({'error': str(error)}, status=code)


@extend_schema(
    request=BackupCreateSerializer,
    responses={200: OpenApiResponse(description='Backup file (.json or .enc) as attachment')},
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def backup_create(request):
    """
    Create a backup and return it as a download.

    POST /api/backups/create/
    """
    serializer = BackupCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        backup = create_backup(
            context=AccessContext.from_request(request),
            scope=data['scope'],
            apartment_id=data.get('apartment_id') or None,
            include_deleted=data['include_deleted'],
            password=data.get('password') or None,
        )
    except BackupServiceError as e:
        logger.warning("Backup by %s refused: %s", request.user.username, e)
        return error_response(e)

    response = HttpResponse(backup.content, content_type=backup.content_type)
    response['Content-Disposition'] = f'attachment; filename="{backup.filename}"'
    return response


@extend_schema(request=BackupRestoreSerializer, responses={200: RestoreResultSerializer})
@api_view(['POST'])
@parser_classes([MultiPartParser, FormParser])
@permission_classes([IsAuthenticated, IsAdminRole])
def backup_restore(request):
    """
    Restore an uploaded backup file.

    POST /api/backups/restore/ (multipart: file, password, collections)
    """
    serializer = BackupRestoreSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data
    upload = data['file']

    try:
        envelope = parse_backup(upload.read(), upload.name, password=data.get('password') or None)
        result = restore_backup(
            context=AccessContext.from_request(request),
            envelope=envelope,
            collections=data.get('collections'),
        )
    except InvalidBackupError as e:
        logger.warning("Rejected backup upload %s: %s", upload.name, e)
        return error_response(e)
    except BackupServiceError as e:
        return error_response(e)

    return Response({'message': 'Backup restored successfully', **result.as_dict()})


@extend_schema(responses={200: BackupRecordSerializer(many=True)})
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def backup_history_list(request):
    """
    Most recent backups visible to the user.

    GET /api/backups/history/
    """
    records = backup_history(actor=request.user, limit=HISTORY_LIMIT)
    return Response(BackupRecordSerializer(records, many=True).data)
