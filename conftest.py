import pytest
from decimal import Decimal
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, UserRole
from apps.catalog.models import Item, Vendor
from apps.purchases.models import Purchase

TEST_PASSWORD = 'TestPass123!'


def client_for(user):
    """Return an API client authenticated as ``user`` using JWT."""
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


# =============================================================================
# Users per role
# =============================================================================

@pytest.fixture
def system_admin(db):
    """System admin, not tied to any apartment."""
    return User.objects.create_user(
        username='sysadmin',
        password=TEST_PASSWORD,
        role=UserRole.SYSTEM_ADMIN,
        english_name='System Admin',
    )


@pytest.fixture
def apartment_admin(db):
    """Admin of apartment A101."""
    return User.objects.create_user(
        username='admin_a101',
        password=TEST_PASSWORD,
        role=UserRole.APARTMENT_ADMIN,
        apartment_id='A101',
        english_name='Apartment Admin',
        arabic_name='مدير الشقة',
    )


@pytest.fixture
def resident(db):
    """Regular user of apartment A101."""
    return User.objects.create_user(
        username='resident_a101',
        password=TEST_PASSWORD,
        role=UserRole.APARTMENT_USER,
        apartment_id='A101',
        english_name='Resident',
    )


@pytest.fixture
def roommate(db):
    """Second regular user of apartment A101."""
    return User.objects.create_user(
        username='roommate_a101',
        password=TEST_PASSWORD,
        role=UserRole.APARTMENT_USER,
        apartment_id='A101',
        english_name='Roommate',
    )


@pytest.fixture
def neighbour(db):
    """Regular user of apartment B202."""
    return User.objects.create_user(
        username='resident_b202',
        password=TEST_PASSWORD,
        role=UserRole.APARTMENT_USER,
        apartment_id='B202',
        english_name='Neighbour',
    )


@pytest.fixture
def other_admin(db):
    """Admin of apartment B202."""
    return User.objects.create_user(
        username='admin_b202',
        password=TEST_PASSWORD,
        role=UserRole.APARTMENT_ADMIN,
        apartment_id='B202',
        english_name='Other Admin',
    )


@pytest.fixture
def system_admin_client(system_admin):
    return client_for(system_admin)


@pytest.fixture
def apartment_admin_client(apartment_admin):
    return client_for(apartment_admin)


@pytest.fixture
def resident_client(resident):
    return client_for(resident)


@pytest.fixture
def roommate_client(roommate):
    return client_for(roommate)


@pytest.fixture
def neighbour_client(neighbour):
    return client_for(neighbour)


# =============================================================================
# Catalog and purchases
# =============================================================================

@pytest.fixture
def vendor(db, system_admin):
    return Vendor.objects.create(
        english_name='Fresh Market',
        arabic_name='السوق الطازج',
        contact_person='Omar',
        phone='+966500000000',
        email='orders@freshmarket.example',
        created_by=system_admin,
    )


@pytest.fixture
def other_vendor(db, system_admin):
    return Vendor.objects.create(
        english_name='Corner Bakery',
        arabic_name='مخبز الزاوية',
        created_by=system_admin,
    )


@pytest.fixture
def item(db, system_admin):
    return Item.objects.create(
        english_name='Milk',
        arabic_name='حليب',
        category='dairy',
        unit_price=Decimal('5.50'),
        created_by=system_admin,
    )


@pytest.fixture
def other_item(db, system_admin):
    return Item.objects.create(
        english_name='Bread',
        arabic_name='خبز',
        category='bakery',
        unit_price=Decimal('3.00'),
        created_by=system_admin,
    )


@pytest.fixture
def make_purchase(vendor, item):
    """Factory creating purchases directly, bypassing the service layer."""

    def _make(added_by, quantity='2', unit_price=None, apartment_id=None, purchased_at=None, **kwargs):
        purchase_item = kwargs.pop('item', item)
        return Purchase.objects.create(
            apartment_id=apartment_id or added_by.apartment_id,
            vendor=kwargs.pop('vendor', vendor),
            item=purchase_item,
            quantity=Decimal(quantity),
            unit_price=Decimal(unit_price) if unit_price is not None else purchase_item.unit_price,
            purchased_at=purchased_at or timezone.now(),
            added_by=added_by,
            **kwargs
        )

    return _make


@pytest.fixture
def purchase(make_purchase, resident):
    """Two units of milk bought by the A101 resident."""
    return make_purchase(resident)
