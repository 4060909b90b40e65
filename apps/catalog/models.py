from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from decimal import Decimal
import uuid

from apps.trash.models import SoftDeleteModel


class Vendor(SoftDeleteModel):
    """A shop or supplier purchases are made from."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    english_name = models.CharField(max_length=200)
    arabic_name = models.CharField(max_length=200, blank=True)
    contact_person = models.CharField(max_length=200, blank=True)
    phone = models.CharField(max_length=50, blank=True)
    email = models.EmailField(blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_vendors'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'vendors'
        ordering = ['english_name']
        indexes = [
            models.Index(fields=['english_name'], name='vendors_english_name_idx'),
            models.Index(fields=['is_deleted', 'deleted_at'], name='vendors_trash_idx'),
        ]

    def __str__(self):
        return self.english_name

    def get_name(self, language='en'):
        if language == 'ar' and self.arabic_name:
            return self.arabic_name
        return self.english_name


class Item(SoftDeleteModel):
    """A catalog item with its current unit price."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    english_name = models.CharField(max_length=200)
    arabic_name = models.CharField(max_length=200, blank=True)
    category = models.CharField(max_length=100, blank=True, db_index=True)
    unit_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    description = models.TextField(blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_items'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'items'
        ordering = ['english_name']
        indexes = [
            models.Index(fields=['category', 'english_name'], name='items_category_name_idx'),
            models.Index(fields=['is_deleted', 'deleted_at'], name='items_trash_idx'),
        ]

    def __str__(self):
        return self.english_name

    def get_name(self, language='en'):
        if language == 'ar' and self.arabic_name:
            return self.arabic_name
        return self.english_name
