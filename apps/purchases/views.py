from rest_framework import viewsets, status
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.accounts import policy
from .exceptions import PurchaseServiceError, ApartmentScopeError
from .models import Purchase
from .permissions import IsApartmentMemberForPurchase, CanManagePurchase
from .serializers import (
    PurchaseSerializer,
    PurchaseListSerializer,
    PurchaseCreateSerializer,
    PurchaseUpdateSerializer,
    PurchaseFilterSerializer,
)
from .services import PurchaseService


class PurchasePagination(PageNumberPagination):
    """Custom pagination for purchases."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class PurchaseViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Purchase CRUD operations.

    list: Purchases of the user's apartment (all apartments for system admins)
    create: Book a new purchase
    retrieve: Get a specific purchase
    update: Update a purchase and recompute its total
    destroy: Move a purchase to the trash
    """

    queryset = Purchase.objects.select_related('vendor', 'item', 'added_by')
    serializer_class = PurchaseSerializer
    permission_classes = [IsAuthenticated, IsApartmentMemberForPurchase]
    pagination_class = PurchasePagination

    def get_permissions(self):
        """Use different permissions for different actions."""
        if self.action in ['update', 'partial_update', 'destroy']:
            return [IsAuthenticated(), IsApartmentMemberForPurchase(), CanManagePurchase()]
        return super().get_permissions()

    def get_queryset(self):
        """Scope by apartment, then apply validated filters."""
        queryset = policy.scope_queryset(self.request.user, super().get_queryset())

        filter_serializer = PurchaseFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if params.get('apartment'):
            queryset = queryset.filter(apartment_id=params['apartment'])
        if params.get('vendor'):
            queryset = queryset.filter(vendor_id=params['vendor'])
        if params.get('item'):
            queryset = queryset.filter(item_id=params['item'])
        if params.get('category'):
            queryset = queryset.filter(item__category__iexact=params['category'])
        if 'date_from' in params:
            queryset = queryset.filter(purchased_at__date__gte=params['date_from'])
        if 'date_to' in params:
            queryset = queryset.filter(purchased_at__date__lte=params['date_to'])

        return queryset

    def get_serializer_class(self):
        """Use different serializers for different actions."""
        if self.action == 'list':
            return PurchaseListSerializer
        elif self.action == 'create':
            return PurchaseCreateSerializer
        elif self.action in ['update', 'partial_update']:
            return PurchaseUpdateSerializer
        return PurchaseSerializer

    @extend_schema(request=PurchaseCreateSerializer, responses={201: PurchaseSerializer})
    def create(self, request, *args, **kwargs):
        serializer = PurchaseCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            purchase = PurchaseService.create_purchase(
                actor=request.user,
                vendor_id=data['vendor'].id,
                item_id=data['item'].id,
                quantity=data['quantity'],
                unit_price=data.get('unit_price'),
                purchased_at=data.get('purchased_at'),
                apartment_id=data.get('apartment_id'),
                notes=data.get('notes', ''),
            )
        except ApartmentScopeError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except PurchaseServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(PurchaseSerializer(purchase).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=PurchaseUpdateSerializer, responses={200: PurchaseSerializer})
    def update(self, request, *args, **kwargs):
        purchase = self.get_object()
        serializer = PurchaseUpdateSerializer(
            data=request.data,
            partial=kwargs.pop('partial', False)
        )
        serializer.is_valid(raise_exception=True)

        try:
            purchase = PurchaseService.update_purchase(
                actor=request.user,
                purchase_id=purchase.id,
                data=serializer.validated_data,
            )
        except PurchaseServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(PurchaseSerializer(purchase).data)

    def destroy(self, request, *args, **kwargs):
        purchase = self.get_object()
        PurchaseService.delete_purchase(actor=request.user, purchase_id=purchase.id)
        return Response(status=status.HTTP_204_NO_CONTENT)
