from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.accounts.permissions import IsAdminRole
from .exceptions import (
    InvalidTrashTypeError,
    PurgeBlockedError,
    TrashPermissionError,
    TrashRecordNotFoundError,
)
from .serializers import (
    EmptyTrashResultSerializer,
    TrashEntrySerializer,
    TrashFilterSerializer,
)
from .services import delete_permanently, empty_trash, list_trash, restore_record


ERROR_STATUS = {
    InvalidTrashTypeError: status.HTTP_400_BAD_REQUEST,
    TrashRecordNotFoundError: status.HTTP_404_NOT_FOUND,
    TrashPermissionError: status.HTTP_403_FORBIDDEN,
    PurgeBlockedError: status.HTTP_409_CONFLICT,
}


def error_response(error):
    code = ERROR_STATUS.get(type(error), status.HTTP_400_BAD_REQUEST)
    return Response({'error': str(error)}, status=code)


@extend_schema(
    parameters=[OpenApiParameter('type', str, description='purchases, vendors, items or all')],
    responses={200: TrashEntrySerializer(many=True)},
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def trash_list(request):
    """
    List trashed records visible to the user.

    GET /api/trash/?type=purchases
    """
    filter_serializer = TrashFilterSerializer(data=request.query_params)
    filter_serializer.is_valid(raise_exception=True)

    entries = list_trash(actor=request.user, kind=filter_serializer.validated_data['type'])
    return Response(TrashEntrySerializer(entries, many=True).data)


@extend_schema(request=None, responses={200: TrashEntrySerializer})
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def trash_restore(request, kind, record_id):
    """
    Restore a trashed record.

    POST /api/trash/{kind}/{id}/restore/
    """
    try:
        record = restore_record(actor=request.user, kind=kind, record_id=record_id)
    except (InvalidTrashTypeError, TrashRecordNotFoundError, TrashPermissionError) as e:
        return error_response(e)

    return Response({
        'message': 'Record restored successfully',
        'type': kind,
        'id': str(record.id),
    })


@extend_schema(responses={204: None})
@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
def trash_delete(request, kind, record_id):
    """
    Permanently delete a trashed record.

    DELETE /api/trash/{kind}/{id}/
    """
    try:
        delete_permanently(actor=request.user, kind=kind, record_id=record_id)
    except (
        InvalidTrashTypeError,
        TrashRecordNotFoundError,
        TrashPermissionError,
        PurgeBlockedError,
    ) as e:
        return error_response(e)

    return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(request=None, responses={200: EmptyTrashResultSerializer})
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def trash_empty(request):
    """
    Permanently delete every trashed record visible to the admin.

    POST /api/trash/empty/
    """
    try:
        result = empty_trash(actor=request.user)
    except TrashPermissionError as e:
        return error_response(e)

    return Response(EmptyTrashResultSerializer(result).data)
