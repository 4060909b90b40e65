from rest_framework import viewsets
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated

from apps.accounts.permissions import IsAdminRole
from .models import AuditLogEntry
from .serializers import AuditFilterSerializer, AuditLogEntrySerializer
from .services import recent_activity


class AuditPagination(PageNumberPagination):
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


class AuditLogViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Read-only audit log for administrators.

    list: Entries visible to the admin, filterable by action/table/user
    retrieve: A single entry
    """

    queryset = AuditLogEntry.objects.none()
    serializer_class = AuditLogEntrySerializer
    permission_classes = [IsAuthenticated, IsAdminRole]
    pagination_class = AuditPagination

    def get_queryset(self):
        filter_serializer = AuditFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        return recent_activity(
            actor=self.request.user,
            performed_by=params.get('performed_by'),
            action=params.get('action'),
            target_table=params.get('target_table'),
        )
