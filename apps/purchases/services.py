"""
Purchase Services Module
=========================

This module provides business logic for booking purchases against an
apartment.

Classes:
    PurchaseService: Create, update and soft-delete purchases.

Example:
    Booking a purchase at the item's current price::

        from apps.purchases.services import PurchaseService
        from decimal import Decimal

        purchase = PurchaseService.create_purchase(
            actor=request.user,
            vendor_id=vendor.id,
            item_id=item.id,
            quantity=Decimal('2'),
        )
        print(purchase.total_price)  # 2 x item.unit_price
"""

from decimal import Decimal
import logging

from django.db import transaction
from django.utils import timezone

from apps.accounts import policy
from apps.audit.models import AuditAction
from apps.audit.services import log_action, snapshot
from apps.catalog.models import Item, Vendor
from .exceptions import (
    ApartmentScopeError,
    InactiveCatalogRecordError,
    InsufficientPermissionsError,
    PurchaseNotFoundError,
)
from .models import Purchase

logger = logging.getLogger(__name__)

PURCHASE_FIELDS = [
    'apartment_id', 'vendor', 'item', 'quantity', 'unit_price',
    'total_price', 'purchased_at', 'notes', 'added_by',
]
EDITABLE_FIELDS = ['vendor', 'item', 'quantity', 'unit_price', 'purchased_at', 'notes']


class PurchaseService:
    """
    Service for the purchase lifecycle.

    Every write is scoped by ``apps.accounts.policy`` and produces an audit
    entry in the same transaction. Deletion is a soft delete; restoring and
    purging are handled by ``apps.trash``.

    Methods:
        create_purchase: Book a new purchase.
        update_purchase: Change a purchase and recompute its total.
        delete_purchase: Move a purchase to the trash.
    """

    @staticmethod
    def _active_vendor(vendor_id):
        try:
            return Vendor.objects.get(id=vendor_id)
        except Vendor.DoesNotExist:
            raise InactiveCatalogRecordError(f"Vendor {vendor_id} is not available")

    @staticmethod
    def _active_item(item_id):
        try:
            return Item.objects.get(id=item_id)
        except Item.DoesNotExist:
            raise InactiveCatalogRecordError(f"Item {item_id} is not available")

    @staticmethod
    @transaction.atomic
    def create_purchase(
        actor,
        vendor_id,
        item_id,
        quantity,
        unit_price=None,
        purchased_at=None,
        apartment_id=None,
        notes=''
    ):
        """
        Create a purchase for the actor's apartment.

        Args:
            actor (User): The user booking the purchase.
            vendor_id (UUID): Active vendor to buy from.
            item_id (UUID): Active item being bought.
            quantity (Decimal): Amount bought, greater than zero.
            unit_price (Decimal, optional): Price per unit. Defaults to the
                item's current ``unit_price``.
            purchased_at (datetime, optional): When the purchase happened.
                Defaults to now.
            apartment_id (str, optional): Target apartment. Only system admins
                may book for an apartment other than their own.
            notes (str, optional): Free text.

        Returns:
            Purchase: The created purchase with ``total_price`` computed.

        Raises:
            InactiveCatalogRecordError: If the vendor or item is trashed or missing.
            ApartmentScopeError: If the target apartment is outside the actor's scope.

        Example:
            System admin booking for another apartment::

                PurchaseService.create_purchase(
                    actor=sysadmin,
                    vendor_id=vendor.id,
                    item_id=item.id,
                    quantity=Decimal('1'),
                    apartment_id='B-204',
                )
        """
        apartment_id = apartment_id or actor.apartment_id
        if not apartment_id:
            raise ApartmentScopeError("An apartment is required for purchases")
        if not policy.can_access_apartment(actor, apartment_id):
            raise ApartmentScopeError("You can only add purchases to your own apartment")

        vendor = PurchaseService._active_vendor(vendor_id)
        item = PurchaseService._active_item(item_id)

        purchase = Purchase.objects.create(
            apartment_id=apartment_id,
            vendor=vendor,
            item=item,
            quantity=Decimal(str(quantity)),
            unit_price=item.unit_price if unit_price is None else Decimal(str(unit_price)),
            purchased_at=purchased_at or timezone.now(),
            notes=notes,
            added_by=actor,
        )

        log_action(
            action=AuditAction.CREATE_PURCHASE,
            target_table='purchases',
            target_id=purchase.id,
            performed_by=actor,
            new_data=snapshot(purchase, fields=PURCHASE_FIELDS),
        )
        logger.info(
            "Purchase %s created in apartment %s (total %s)",
            purchase.id, apartment_id, purchase.total_price,
        )
        return purchase

    @staticmethod
    @transaction.atomic
    def update_purchase(actor, purchase_id, data):
        """
        Update an active purchase.

        Args:
            actor (User): The user making the change.
            purchase_id (UUID): Purchase to update.
            data (dict): Any of vendor, item, quantity, unit_price,
                purchased_at, notes. Vendor/item may be instances or IDs.

        Returns:
            Purchase: The updated purchase.

        Raises:
            PurchaseNotFoundError: If the purchase is missing or trashed.
            InsufficientPermissionsError: If the actor may not manage it.
            InactiveCatalogRecordError: If a new vendor/item is not active.
        """
        try:
            purchase = Purchase.objects.select_for_update().get(id=purchase_id)
        except Purchase.DoesNotExist:
            raise PurchaseNotFoundError()

        if not policy.can_manage_purchase(actor, purchase):
            raise InsufficientPermissionsError()

        old_data = snapshot(purchase, fields=PURCHASE_FIELDS)

        for field, value in data.items():
            if field not in EDITABLE_FIELDS:
                continue
            if field == 'vendor':
                value = PurchaseService._active_vendor(getattr(value, 'id', value))
            elif field == 'item':
                value = PurchaseService._active_item(getattr(value, 'id', value))
            setattr(purchase, field, value)

        purchase.save()

        log_action(
            action=AuditAction.UPDATE_PURCHASE,
            target_table='purchases',
            target_id=purchase.id,
            performed_by=actor,
            old_data=old_data,
            new_data=snapshot(purchase, fields=PURCHASE_FIELDS),
        )
        return purchase

    @staticmethod
    @transaction.atomic
    def delete_purchase(actor, purchase_id):
        """
        Move a purchase to the trash.

        Args:
            actor (User): The user deleting the purchase.
            purchase_id (UUID): Purchase to delete.

        Raises:
            PurchaseNotFoundError: If the purchase is missing or already trashed.
            InsufficientPermissionsError: If the actor may not manage it.

        Note:
            The row stays in the database with ``is_deleted=True`` until it is
            restored or purged from the trash.
        """
        try:
            purchase = Purchase.objects.select_for_update().get(id=purchase_id)
        except Purchase.DoesNotExist:
            raise PurchaseNotFoundError()

        if not policy.can_manage_purchase(actor, purchase):
            raise InsufficientPermissionsError()

        old_data = snapshot(purchase, fields=PURCHASE_FIELDS)
        purchase.soft_delete(actor)

        log_action(
            action=AuditAction.DELETE_PURCHASE,
            target_table='purchases',
            target_id=purchase.id,
            performed_by=actor,
            old_data=old_data,
        )
