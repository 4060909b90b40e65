from rest_framework import serializers, status, viewsets
from rest_framework.decorators import action
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from django.db.models import Q
from drf_spectacular.utils import extend_schema, inline_serializer

from apps.accounts.permissions import IsCatalogManagerOrReadOnly
from .models import Vendor
from .serializers import (
    VendorSerializer,
    ItemSerializer,
    VendorFilterSerializer,
    ItemFilterSerializer,
)
from .services import (
    CatalogServiceError,
    CatalogPermissionError,
    RecordInUseError,
    create_vendor,
    update_vendor,
    delete_vendor,
    list_items,
    list_categories,
    create_item,
    update_item,
    delete_item,
)


def error_response(error):
    if isinstance(error, RecordInUseError):
        code = status.HTTP_409_CONFLICT
    elif isinstance(error, CatalogPermissionError):
        code = status.HTTP_403_FORBIDDEN
    else:
        code = status.HTTP_400_BAD_REQUEST
    return Response({'error': str(error)}, status=code)


class CatalogPagination(PageNumberPagination):
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


class VendorViewSet(viewsets.ModelViewSet):
    """
    ViewSet for vendors.

    list/retrieve: Any authenticated user
    create/update/destroy: Administrators; destroy moves the vendor to the trash
    """

    serializer_class = VendorSerializer
    permission_classes = [IsAuthenticated, IsCatalogManagerOrReadOnly]
    pagination_class = CatalogPagination

    def get_queryset(self):
        filter_serializer = VendorFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        search = filter_serializer.validated_data.get('search')

        queryset = Vendor.objects.all()
        if search:
            queryset = queryset.filter(
                Q(english_name__icontains=search) | Q(arabic_name__icontains=search)
            )
        return queryset

    def perform_create(self, serializer):
        serializer.instance = create_vendor(actor=self.request.user, **serializer.validated_data)

    def perform_update(self, serializer):
        serializer.instance = update_vendor(
            actor=self.request.user,
            vendor_id=serializer.instance.id,
            data=serializer.validated_data,
        )

    def destroy(self, request, *args, **kwargs):
        vendor = self.get_object()
        try:
            delete_vendor(actor=request.user, vendor_id=vendor.id)
        except CatalogServiceError as e:
            return error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)


class ItemViewSet(viewsets.ModelViewSet):
    """
    ViewSet for items.

    list: Active items with last purchase date (filter by category, search)
    categories: Distinct item categories
    create/update/destroy: Administrators; destroy moves the item to the trash
    """

    serializer_class = ItemSerializer
    permission_classes = [IsAuthenticated, IsCatalogManagerOrReadOnly]
    pagination_class = CatalogPagination

    def get_queryset(self):
        filter_serializer = ItemFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        return list_items(category=params.get('category'), search=params.get('search'))

    def perform_create(self, serializer):
        serializer.instance = create_item(actor=self.request.user, **serializer.validated_data)

    def perform_update(self, serializer):
        serializer.instance = update_item(
            actor=self.request.user,
            item_id=serializer.instance.id,
            data=serializer.validated_data,
        )

    def destroy(self, request, *args, **kwargs):
        item = self.get_object()
        try:
            delete_item(actor=request.user, item_id=item.id)
        except CatalogServiceError as e:
            return error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        responses={200: inline_serializer(
            name='ItemCategories',
            fields={'categories': serializers.ListField(child=serializers.CharField())}
        )},
    )
    @action(detail=False, methods=['get'])
    def categories(self, request):
        """
        Distinct categories of active items.

        GET /api/catalog/items/categories/
        """
        return Response({'categories': list_categories()})
