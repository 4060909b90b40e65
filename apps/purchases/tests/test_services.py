import pytest
from datetime import timedelta
from decimal import Decimal
from django.utils import timezone

from apps.audit.models import AuditAction, AuditLogEntry
from apps.purchases.exceptions import (
    ApartmentScopeError,
    InactiveCatalogRecordError,
    InsufficientPermissionsError,
    PurchaseNotFoundError,
)
from apps.purchases.models import Purchase
from apps.purchases.services import PurchaseService


# =============================================================================
# Create
# =============================================================================

@pytest.mark.django_db
class TestCreatePurchase:
    """Tests for PurchaseService.create_purchase()"""

    def test_total_is_quantity_times_unit_price(self, resident, vendor, item):
        purchase = PurchaseService.create_purchase(
            actor=resident,
            vendor_id=vendor.id,
            item_id=item.id,
            quantity=Decimal('3'),
            unit_price=Decimal('4.25'),
        )

        assert purchase.total_price == Decimal('12.75')
        assert purchase.apartment_id == 'A101'
        assert purchase.added_by == resident

    def test_unit_price_defaults_to_item_price(self, resident, vendor, item):
        purchase = PurchaseService.create_purchase(
            actor=resident,
            vendor_id=vendor.id,
            item_id=item.id,
            quantity=Decimal('2'),
        )

        assert purchase.unit_price == Decimal('5.50')
        assert purchase.total_price == Decimal('11.00')

    def test_fractional_quantity_is_rounded_to_cents(self, resident, vendor, item):
        purchase = PurchaseService.create_purchase(
            actor=resident,
            vendor_id=vendor.id,
            item_id=item.id,
            quantity=Decimal('0.33'),
            unit_price=Decimal('3.33'),
        )

        assert purchase.total_price == Decimal('1.10')

    def test_audit_entry_written(self, resident, vendor, item):
        purchase = PurchaseService.create_purchase(
            actor=resident, vendor_id=vendor.id, item_id=item.id, quantity=Decimal('1')
        )

        entry = AuditLogEntry.objects.get(action=AuditAction.CREATE_PURCHASE)
        assert entry.target_id == str(purchase.id)
        assert entry.new_data['apartment_id'] == 'A101'

    def test_cannot_book_for_other_apartment(self, resident, vendor, item):
        with pytest.raises(ApartmentScopeError):
            PurchaseService.create_purchase(
                actor=resident,
                vendor_id=vendor.id,
                item_id=item.id,
                quantity=Decimal('1'),
                apartment_id='B202',
            )

    def test_system_admin_books_for_any_apartment(self, system_admin, vendor, item):
        purchase = PurchaseService.create_purchase(
            actor=system_admin,
            vendor_id=vendor.id,
            item_id=item.id,
            quantity=Decimal('1'),
            apartment_id='B202',
        )
        assert purchase.apartment_id == 'B202'

    def test_system_admin_needs_an_apartment(self, system_admin, vendor, item):
        with pytest.raises(ApartmentScopeError):
            PurchaseService.create_purchase(
                actor=system_admin, vendor_id=vendor.id, item_id=item.id, quantity=Decimal('1')
            )

    def test_trashed_vendor_is_rejected(self, resident, vendor, item, system_admin):
        vendor.soft_delete(system_admin)

        with pytest.raises(InactiveCatalogRecordError):
            PurchaseService.create_purchase(
                actor=resident, vendor_id=vendor.id, item_id=item.id, quantity=Decimal('1')
            )


# =============================================================================
# Update / delete
# =============================================================================

@pytest.mark.django_db
class TestUpdatePurchase:
    """Tests for PurchaseService.update_purchase()"""

    def test_update_recomputes_total(self, purchase, resident):
        updated = PurchaseService.update_purchase(
            actor=resident,
            purchase_id=purchase.id,
            data={'quantity': Decimal('4')},
        )

        assert updated.total_price == Decimal('22.00')
        purchase.refresh_from_db()
        assert purchase.total_price == Decimal('22.00')

    def test_update_records_old_and_new_total(self, purchase, resident):
        PurchaseService.update_purchase(
            actor=resident, purchase_id=purchase.id, data={'unit_price': Decimal('6.00')}
        )

        entry = AuditLogEntry.objects.get(action=AuditAction.UPDATE_PURCHASE)
        assert Decimal(entry.old_data['total_price']) == Decimal('11.00')
        assert Decimal(entry.new_data['total_price']) == Decimal('12.00')

    def test_change_item_keeps_unit_price(self, purchase, resident, other_item):
        updated = PurchaseService.update_purchase(
            actor=resident, purchase_id=purchase.id, data={'item': other_item}
        )

        assert updated.item == other_item
        assert updated.unit_price == Decimal('5.50')

    def test_roommate_cannot_update(self, purchase, roommate):
        with pytest.raises(InsufficientPermissionsError):
            PurchaseService.update_purchase(
                actor=roommate, purchase_id=purchase.id, data={'notes': 'mine now'}
            )

    def test_apartment_admin_can_update(self, purchase, apartment_admin):
        updated = PurchaseService.update_purchase(
            actor=apartment_admin, purchase_id=purchase.id, data={'notes': 'checked'}
        )
        assert updated.notes == 'checked'

    def test_trashed_purchase_is_not_found(self, purchase, resident):
        purchase.soft_delete(resident)

        with pytest.raises(PurchaseNotFoundError):
            PurchaseService.update_purchase(
                actor=resident, purchase_id=purchase.id, data={'notes': 'x'}
            )


@pytest.mark.django_db
class TestDeletePurchase:
    """Tests for PurchaseService.delete_purchase()"""

    def test_delete_is_soft(self, purchase, resident):
        PurchaseService.delete_purchase(actor=resident, purchase_id=purchase.id)

        assert not Purchase.objects.filter(pk=purchase.pk).exists()
        trashed = Purchase.all_objects.get(pk=purchase.pk)
        assert trashed.is_deleted is True
        assert trashed.deleted_by == resident
        assert trashed.deleted_at is not None

    def test_neighbour_cannot_delete(self, purchase, neighbour):
        with pytest.raises(InsufficientPermissionsError):
            PurchaseService.delete_purchase(actor=neighbour, purchase_id=purchase.id)

    def test_delete_twice_is_not_found(self, purchase, resident):
        PurchaseService.delete_purchase(actor=resident, purchase_id=purchase.id)

        with pytest.raises(PurchaseNotFoundError):
            PurchaseService.delete_purchase(actor=resident, purchase_id=purchase.id)


@pytest.mark.django_db
class TestPurchaseModel:

    def test_total_follows_update_fields(self, purchase):
        purchase.quantity = Decimal('10')
        purchase.save(update_fields=['quantity'])

        purchase.refresh_from_db()
        assert purchase.total_price == Decimal('55.00')

    def test_default_ordering_is_newest_first(self, make_purchase, resident):
        older = make_purchase(resident, purchased_at=timezone.now() - timedelta(days=3))
        newer = make_purchase(resident)

        assert list(Purchase.objects.all()) == [newer, older]
