from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from decimal import Decimal
import uuid

from apps.catalog.models import Item, Vendor
from apps.trash.models import SoftDeleteModel


class Purchase(SoftDeleteModel):
    """
    One purchase of an item from a vendor, booked against an apartment.

    ``unit_price`` freezes the item price at the time of purchase, so later
    catalog price changes never rewrite history. ``total_price`` is always
    ``quantity * unit_price``.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    apartment_id = models.CharField(max_length=50, db_index=True)

    vendor = models.ForeignKey(
        Vendor,
        on_delete=models.PROTECT,
        related_name='purchases'
    )
    item = models.ForeignKey(
        Item,
        on_delete=models.PROTECT,
        related_name='purchases'
    )

    quantity = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    unit_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text="Item price at the time of purchase"
    )
    total_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        editable=False
    )

    purchased_at = models.DateTimeField(default=timezone.now, db_index=True)
    notes = models.TextField(blank=True)

    added_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name='purchases'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'purchases'
        ordering = ['-purchased_at', '-created_at']
        indexes = [
            models.Index(fields=['apartment_id', 'purchased_at'], name='purchases_apartment_date_idx'),
            models.Index(fields=['vendor', 'purchased_at'], name='purchases_vendor_date_idx'),
            models.Index(fields=['item', 'purchased_at'], name='purchases_item_date_idx'),
            models.Index(fields=['is_deleted', 'deleted_at'], name='purchases_trash_idx'),
        ]

    def __str__(self):
        return f"{self.item} x{self.quantity} @ {self.vendor} ({self.apartment_id})"

    def save(self, *args, **kwargs):
        total = Decimal(str(self.quantity)) * Decimal(str(self.unit_price))
        self.total_price = total.quantize(Decimal('0.01'))
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and (
            'quantity' in update_fields or 'unit_price' in update_fields
        ):
            kwargs['update_fields'] = set(update_fields) | {'total_price'}
        super().save(*args, **kwargs)
