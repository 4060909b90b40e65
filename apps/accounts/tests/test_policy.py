import pytest
from django.contrib.auth.models import AnonymousUser

from apps.accounts import policy
from apps.accounts.models import User


@pytest.mark.django_db
class TestAccessPolicy:

    def test_system_admin_reaches_every_apartment(self, system_admin):
        assert policy.can_access_apartment(system_admin, 'A101')
        assert policy.can_access_apartment(system_admin, 'B202')

    def test_apartment_user_is_scoped(self, resident):
        assert policy.can_access_apartment(resident, 'A101')
        assert not policy.can_access_apartment(resident, 'B202')

    def test_anonymous_user_has_no_access(self):
        anonymous = AnonymousUser()
        assert not policy.is_admin(anonymous)
        assert not policy.can_access_apartment(anonymous, 'A101')

    def test_catalog_is_managed_by_admins(self, system_admin, apartment_admin, resident):
        assert policy.can_manage_catalog(system_admin)
        assert policy.can_manage_catalog(apartment_admin)
        assert not policy.can_manage_catalog(resident)

    def test_apartment_admin_cannot_manage_system_admin(self, apartment_admin, system_admin):
        assert not policy.can_manage_user(apartment_admin, system_admin)

    def test_purchase_management(self, purchase, resident, roommate, apartment_admin, other_admin):
        assert policy.can_manage_purchase(resident, purchase)
        assert policy.can_manage_purchase(apartment_admin, purchase)
        assert not policy.can_manage_purchase(roommate, purchase)
        assert not policy.can_manage_purchase(other_admin, purchase)

    def test_scope_queryset(self, resident, neighbour, system_admin):
        assert set(policy.scope_queryset(resident, User.objects.all())) == {resident}
        assert policy.scope_queryset(system_admin, User.objects.all()).count() == 3

    def test_user_without_apartment_sees_nothing(self, db):
        orphan = User.objects.create_user(username='orphan', password='TestPass123!')
        assert not policy.scope_queryset(orphan, User.objects.all()).exists()
