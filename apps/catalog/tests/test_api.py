import pytest
from decimal import Decimal
from django.urls import reverse
from rest_framework import status

from apps.audit.models import AuditAction, AuditLogEntry
from apps.catalog.models import Item, Vendor
from apps.catalog.services import (
    CatalogPermissionError,
    RecordInUseError,
    delete_item,
    delete_vendor,
    list_categories,
    list_items,
)


# =============================================================================
# Vendors
# =============================================================================

@pytest.mark.django_db
class TestVendorEndpoints:

    def test_resident_can_list_vendors(self, resident_client, vendor, other_vendor):
        response = resident_client.get(reverse('catalog:vendor-list'))

        assert response.status_code == status.HTTP_200_OK
        names = [v['english_name'] for v in response.data['results']]
        assert names == ['Corner Bakery', 'Fresh Market']

    def test_search_matches_arabic_name(self, resident_client, vendor, other_vendor):
        response = resident_client.get(reverse('catalog:vendor-list'), {'search': 'الطازج'})

        assert [v['english_name'] for v in response.data['results']] == ['Fresh Market']

    def test_resident_cannot_create_vendor(self, resident_client):
        response = resident_client.post(reverse('catalog:vendor-list'), {
            'english_name': 'Sneaky Shop',
        })

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert not Vendor.objects.filter(english_name='Sneaky Shop').exists()

    def test_admin_creates_vendor(self, apartment_admin_client, apartment_admin):
        response = apartment_admin_client.post(reverse('catalog:vendor-list'), {
            'english_name': 'Spice House',
            'phone': '+966 (11) 555-0101',
        })

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['created_by'] == apartment_admin.id
        assert AuditLogEntry.objects.filter(
            action=AuditAction.CREATE_VENDOR, target_id=response.data['id']
        ).exists()

    def test_invalid_phone(self, apartment_admin_client):
        response = apartment_admin_client.post(reverse('catalog:vendor-list'), {
            'english_name': 'Spice House',
            'phone': 'call me',
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'phone' in response.data

    def test_update_vendor_is_audited(self, apartment_admin_client, vendor):
        response = apartment_admin_client.patch(
            reverse('catalog:vendor-detail', args=[vendor.id]),
            {'contact_person': 'Khalid'},
        )

        assert response.status_code == status.HTTP_200_OK
        entry = AuditLogEntry.objects.get(action=AuditAction.UPDATE_VENDOR)
        assert entry.old_data['contact_person'] == 'Omar'
        assert entry.new_data['contact_person'] == 'Khalid'

    def test_delete_referenced_vendor_conflicts(self, apartment_admin_client, purchase, vendor):
        response = apartment_admin_client.delete(reverse('catalog:vendor-detail', args=[vendor.id]))

        assert response.status_code == status.HTTP_409_CONFLICT
        vendor.refresh_from_db()
        assert vendor.is_deleted is False

    def test_delete_moves_vendor_to_trash(self, apartment_admin_client, other_vendor, apartment_admin):
        response = apartment_admin_client.delete(
            reverse('catalog:vendor-detail', args=[other_vendor.id])
        )

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Vendor.objects.filter(pk=other_vendor.pk).exists()
        trashed = Vendor.all_objects.get(pk=other_vendor.pk)
        assert trashed.is_deleted is True
        assert trashed.deleted_by == apartment_admin

    def test_trashed_vendor_is_not_found(self, resident_client, other_vendor, system_admin):
        other_vendor.soft_delete(system_admin)

        response = resident_client.get(reverse('catalog:vendor-detail', args=[other_vendor.id]))
        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# Items
# =============================================================================

@pytest.mark.django_db
class TestItemEndpoints:

    def test_list_items_includes_last_purchase(self, resident_client, purchase, other_item):
        response = resident_client.get(reverse('catalog:item-list'))

        by_name = {i['english_name']: i for i in response.data['results']}
        assert by_name['Milk']['last_purchased_at'] is not None
        assert by_name['Bread']['last_purchased_at'] is None

    def test_filter_by_category(self, resident_client, item, other_item):
        response = resident_client.get(reverse('catalog:item-list'), {'category': 'DAIRY'})

        assert [i['english_name'] for i in response.data['results']] == ['Milk']

    def test_categories(self, resident_client, item, other_item):
        response = resident_client.get(reverse('catalog:item-categories'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['categories'] == ['bakery', 'dairy']

    def test_admin_creates_item(self, system_admin_client):
        response = system_admin_client.post(reverse('catalog:item-list'), {
            'english_name': 'Rice',
            'arabic_name': 'أرز',
            'category': 'grains',
            'unit_price': '12.75',
        })

        assert response.status_code == status.HTTP_201_CREATED
        assert Item.objects.get(english_name='Rice').unit_price == Decimal('12.75')

    def test_negative_price_rejected(self, system_admin_client):
        response = system_admin_client.post(reverse('catalog:item-list'), {
            'english_name': 'Rice',
            'unit_price': '-1.00',
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_price_change_keeps_purchase_price(self, system_admin_client, purchase, item):
        system_admin_client.patch(
            reverse('catalog:item-detail', args=[item.id]), {'unit_price': '9.99'}
        )

        purchase.refresh_from_db()
        assert purchase.unit_price == Decimal('5.50')


# =============================================================================
# Services
# =============================================================================

@pytest.mark.django_db
class TestCatalogServices:

    def test_trashed_purchase_does_not_block_delete(self, purchase, item, resident, apartment_admin):
        purchase.soft_delete(resident)

        delete_item(actor=apartment_admin, item_id=item.id)

        assert Item.all_objects.get(pk=item.pk).is_deleted is True

    def test_active_purchase_blocks_delete(self, purchase, item, apartment_admin):
        with pytest.raises(RecordInUseError):
            delete_item(actor=apartment_admin, item_id=item.id)

    def test_resident_cannot_delete(self, other_vendor, resident):
        with pytest.raises(CatalogPermissionError):
            delete_vendor(actor=resident, vendor_id=other_vendor.id)

    def test_trashed_items_are_hidden(self, item, other_item, system_admin):
        other_item.soft_delete(system_admin)

        assert list(list_items()) == [item]
        assert list_categories() == ['dairy']

    def test_last_purchase_ignores_trashed_purchases(self, purchase, item, resident):
        purchase.soft_delete(resident)

        assert list_items().get(pk=item.pk).last_purchased_at is None
