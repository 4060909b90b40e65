from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, renderer_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.renderers import BrowsableAPIRenderer, JSONRenderer
from rest_framework.response import Response
from django.utils import timezone
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from apps.accounts import policy
from apps.accounts.permissions import IsSystemAdmin
from apps.accounts.policy import AccessContext
from .exceptions import ReportServiceError
from .renderers import CSVRenderer
from .reports import REPORT_TYPES, ReportQueries
from .serializers import ErrorSerializer, PeriodQuerySerializer


@extend_schema(
    parameters=[
        OpenApiParameter('lang', OpenApiTypes.STR, description="Language: 'en' or 'ar'"),
    ],
    responses={200: OpenApiTypes.OBJECT},
    description="Current month purchases and spend, catalog counts, recent purchases and spend by category.",
    tags=['reports'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard(request):
    """Dashboard figures for the current user - thin HTTP handler."""
    return Response(ReportQueries.dashboard(AccessContext.from_request(request)))


@extend_schema(
    parameters=[
        OpenApiParameter('period', OpenApiTypes.STR, description='Month period (YYYY-MM)'),
        OpenApiParameter('lang', OpenApiTypes.STR, description="Language: 'en' or 'ar'"),
        OpenApiParameter('apartment', OpenApiTypes.STR, description='Apartment (system admins)'),
    ],
    responses={
        200: OpenApiTypes.OBJECT,
        400: ErrorSerializer,
    },
    description=f"Generate a report. Types: {', '.join(REPORT_TYPES)}.",
    tags=['reports'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def report(request, report_type):
    """Build one report for the requested period - thin HTTP handler."""
    query_serializer = PeriodQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    apartment_id = params.get('apartment') or None
    if apartment_id and not policy.is_system_admin(request.user):
        apartment_id = None

    try:
        data = ReportQueries.build(
            AccessContext.from_request(request),
            report_type,
            params['year'],
            params['month'],
            apartment_id=apartment_id,
        )
    except ReportServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response({
        'type': report_type,
        'period': f"{params['year']:04d}-{params['month']:02d}",
        'data': data,
    })


@extend_schema(
    parameters=[
        OpenApiParameter('format', OpenApiTypes.STR, description="'json' (default) or 'csv'"),
    ],
    responses={200: OpenApiTypes.OBJECT},
    description="System-wide counts. ``?format=csv`` downloads them as a CSV file.",
    tags=['reports'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsSystemAdmin])
@renderer_classes([JSONRenderer, BrowsableAPIRenderer, CSVRenderer])
def system_statistics(request):
    """System statistics as JSON or CSV - thin HTTP handler."""
    statistics = ReportQueries.system_statistics()

    if request.accepted_renderer.format == CSVRenderer.format:
        filename = f"statistics_{timezone.localdate().isoformat()}.csv"
        return Response(
            ReportQueries.statistics_rows(statistics),
            headers={'Content-Disposition': f'attachment; filename="{filename}"'},
        )

    return Response(statistics)


@extend_schema(
    responses={200: OpenApiTypes.OBJECT},
    description="Apartments with user and purchase counts.",
    tags=['reports'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsSystemAdmin])
def apartments(request):
    """Known apartments - thin HTTP handler."""
    return Response({'apartments': ReportQueries.apartments()})
