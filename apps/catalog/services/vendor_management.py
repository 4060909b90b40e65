"""Vendor CRUD operations service."""

from django.db import transaction
from django.contrib.auth import get_user_model
from typing import Any, Dict
from uuid import UUID
import logging

from apps.accounts import policy
from apps.audit.models import AuditAction
from apps.audit.services import log_action, snapshot
from apps.purchases.models import Purchase
from ..models import Vendor
from .exceptions import VendorNotFoundError, RecordInUseError, CatalogPermissionError

User = get_user_model()
logger = logging.getLogger(__name__)

VENDOR_FIELDS = ['english_name', 'arabic_name', 'contact_person', 'phone', 'email']


def _ensure_manager(actor: User) -> None:
    if not policy.can_manage_catalog(actor):
        raise CatalogPermissionError("Only administrators can manage vendors")


def get_vendor_by_id(*, vendor_id: UUID, include_deleted: bool = False) -> Vendor:
    """
    Get a vendor by ID.

    Raises:
        VendorNotFoundError: If vendor doesn't exist
    """
    manager = Vendor.all_objects if include_deleted else Vendor.objects
    try:
        return manager.get(id=vendor_id)
    except Vendor.DoesNotExist:
        raise VendorNotFoundError(f"Vendor {vendor_id} not found")


@transaction.atomic
def create_vendor(*, actor: User, english_name: str, **fields) -> Vendor:
    """
    Create a vendor.

    Args:
        actor: Admin creating the vendor
        english_name: Name in English
        **fields: arabic_name, contact_person, phone, email

    Returns:
        Created Vendor instance
    """
    _ensure_manager(actor)

    data = {k: v for k, v in fields.items() if k in VENDOR_FIELDS}
    vendor = Vendor.objects.create(english_name=english_name, created_by=actor, **data)

    log_action(
        action=AuditAction.CREATE_VENDOR,
        target_table='vendors',
        target_id=vendor.id,
        performed_by=actor,
        new_data=snapshot(vendor, fields=VENDOR_FIELDS),
    )
    return vendor


@transaction.atomic
def update_vendor(*, actor: User, vendor_id: UUID, data: Dict[str, Any]) -> Vendor:
    """
    Update vendor fields.

    Raises:
        VendorNotFoundError: If vendor doesn't exist
    """
    _ensure_manager(actor)
    try:
        vendor = Vendor.objects.select_for_update().get(id=vendor_id)
    except Vendor.DoesNotExist:
        raise VendorNotFoundError(f"Vendor {vendor_id} not found")

    old_data = snapshot(vendor, fields=VENDOR_FIELDS)
    for field, value in data.items():
        if field in VENDOR_FIELDS:
            setattr(vendor, field, value)
    vendor.save()

    log_action(
        action=AuditAction.UPDATE_VENDOR,
        target_table='vendors',
        target_id=vendor.id,
        performed_by=actor,
        old_data=old_data,
        new_data=snapshot(vendor, fields=VENDOR_FIELDS),
    )
    return vendor


@transaction.atomic
def delete_vendor(*, actor: User, vendor_id: UUID) -> None:
    """
    Move a vendor to the trash.

    Raises:
        VendorNotFoundError: If vendor doesn't exist
        RecordInUseError: If any non-deleted purchase references the vendor
    """
    _ensure_manager(actor)
    try:
        vendor = Vendor.objects.select_for_update().get(id=vendor_id)
    except Vendor.DoesNotExist:
        raise VendorNotFoundError(f"Vendor {vendor_id} not found")

    if Purchase.objects.filter(vendor=vendor).exists():
        logger.warning("Refused to delete vendor %s: referenced by purchases", vendor.id)
        raise RecordInUseError("Cannot delete vendor: vendor is used in purchases")

    old_data = snapshot(vendor, fields=VENDOR_FIELDS)
    vendor.soft_delete(actor)

    log_action(
        action=AuditAction.DELETE_VENDOR,
        target_table='vendors',
        target_id=vendor.id,
        performed_by=actor,
        old_data=old_data,
    )
