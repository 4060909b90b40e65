"""Item CRUD operations service."""

from django.db import transaction
from django.db.models import Max, Q
from django.contrib.auth import get_user_model
from typing import Any, Dict, List, Optional
from uuid import UUID
import logging

from apps.accounts import policy
from apps.audit.models import AuditAction
from apps.audit.services import log_action, snapshot
from apps.purchases.models import Purchase
from ..models import Item
from .exceptions import ItemNotFoundError, RecordInUseError, CatalogPermissionError

User = get_user_model()
logger = logging.getLogger(__name__)

ITEM_FIELDS = ['english_name', 'arabic_name', 'category', 'unit_price', 'description']


def _ensure_manager(actor: User) -> None:
    if not policy.can_manage_catalog(actor):
        raise CatalogPermissionError("Only administrators can manage items")


def get_item_by_id(*, item_id: UUID, include_deleted: bool = False) -> Item:
    """
    Get an item by ID.

    Raises:
        ItemNotFoundError: If item doesn't exist
    """
    manager = Item.all_objects if include_deleted else Item.objects
    try:
        return manager.get(id=item_id)
    except Item.DoesNotExist:
        raise ItemNotFoundError(f"Item {item_id} not found")


def list_items(*, category: Optional[str] = None, search: Optional[str] = None):
    """
    Active items annotated with ``last_purchased_at``.

    Only non-deleted purchases count towards the last purchase date.
    """
    queryset = Item.objects.annotate(
        last_purchased_at=Max(
            'purchases__purchased_at',
            filter=Q(purchases__is_deleted=False)
        )
    )
    if category:
        queryset = queryset.filter(category__iexact=category)
    if search:
        queryset = queryset.filter(
            Q(english_name__icontains=search) | Q(arabic_name__icontains=search)
        )
    return queryset


def list_categories() -> List[str]:
    """Distinct non-empty categories of active items."""
    return list(
        Item.objects
        .exclude(category='')
        .order_by('category')
        .values_list('category', flat=True)
        .distinct()
    )


@transaction.atomic
def create_item(*, actor: User, english_name: str, **fields) -> Item:
    """
    Create an item.

    Args:
        actor: Admin creating the item
        english_name: Name in English
        **fields: arabic_name, category, unit_price, description

    Returns:
        Created Item instance
    """
    _ensure_manager(actor)

    data = {k: v for k, v in fields.items() if k in ITEM_FIELDS}
    item = Item.objects.create(english_name=english_name, created_by=actor, **data)

    log_action(
        action=AuditAction.CREATE_ITEM,
        target_table='items',
        target_id=item.id,
        performed_by=actor,
        new_data=snapshot(item, fields=ITEM_FIELDS),
    )
    return item


@transaction.atomic
def update_item(*, actor: User, item_id: UUID, data: Dict[str, Any]) -> Item:
    """
    Update item fields. Existing purchases keep their own unit price.

    Raises:
        ItemNotFoundError: If item doesn't exist
    """
    _ensure_manager(actor)
    try:
        item = Item.objects.select_for_update().get(id=item_id)
    except Item.DoesNotExist:
        raise ItemNotFoundError(f"Item {item_id} not found")

    old_data = snapshot(item, fields=ITEM_FIELDS)
    for field, value in data.items():
        if field in ITEM_FIELDS:
            setattr(item, field, value)
    item.save()

    log_action(
        action=AuditAction.UPDATE_ITEM,
        target_table='items',
        target_id=item.id,
        performed_by=actor,
        old_data=old_data,
        new_data=snapshot(item, fields=ITEM_FIELDS),
    )
    return item


@transaction.atomic
def delete_item(*, actor: User, item_id: UUID) -> None:
    """
    Move an item to the trash.

    Raises:
        ItemNotFoundError: If item doesn't exist
        RecordInUseError: If any non-deleted purchase references the item
    """
    _ensure_manager(actor)
    try:
        item = Item.objects.select_for_update().get(id=item_id)
    except Item.DoesNotExist:
        raise ItemNotFoundError(f"Item {item_id} not found")

    if Purchase.objects.filter(item=item).exists():
        logger.warning("Refused to delete item %s: referenced by purchases", item.id)
        raise RecordInUseError("Cannot delete item: item is used in purchases")

    old_data = snapshot(item, fields=ITEM_FIELDS)
    item.soft_delete(actor)

    log_action(
        action=AuditAction.DELETE_ITEM,
        target_table='items',
        target_id=item.id,
        performed_by=actor,
        old_data=old_data,
    )
