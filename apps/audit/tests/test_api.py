import pytest
from django.urls import reverse
from rest_framework import status

from apps.audit.models import AuditAction, AuditLogEntry
from apps.audit.services import log_action, snapshot


@pytest.fixture
def audit_entries(resident, neighbour, apartment_admin):
    """One entry per user across two apartments."""
    for user in (resident, neighbour, apartment_admin):
        log_action(
            action=AuditAction.USER_LOGIN,
            target_table='users',
            target_id=user.id,
            performed_by=user,
        )


# =============================================================================
# Service
# =============================================================================

@pytest.mark.django_db
class TestAuditService:

    def test_snapshot_never_contains_password(self, resident):
        data = snapshot(resident)

        assert 'password' not in data
        assert data['username'] == 'resident_a101'

    def test_snapshot_stores_foreign_keys_by_id(self, purchase):
        data = snapshot(purchase)
        assert data['vendor_id'] == purchase.vendor_id

    def test_anonymous_actor_is_stored_as_null(self, db):
        entry = log_action(action=AuditAction.LOGIN_FAILED, target_table='users')

        assert entry.performed_by is None
        assert entry.target_id == ''


# =============================================================================
# API
# =============================================================================

@pytest.mark.django_db
class TestAuditLogEndpoint:

    def test_resident_is_forbidden(self, resident_client):
        response = resident_client.get(reverse('audit:entry-list'))
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_system_admin_sees_everything(self, system_admin_client, audit_entries):
        response = system_admin_client.get(reverse('audit:entry-list'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 3

    def test_apartment_admin_sees_own_apartment(self, apartment_admin_client, audit_entries):
        response = apartment_admin_client.get(reverse('audit:entry-list'))

        usernames = {e['performed_by_username'] for e in response.data['results']}
        assert usernames == {'resident_a101', 'admin_a101'}

    def test_filter_by_action(self, system_admin_client, audit_entries):
        log_action(action=AuditAction.EMPTY_TRASH, target_table='trash')

        response = system_admin_client.get(
            reverse('audit:entry-list'), {'action': AuditAction.EMPTY_TRASH}
        )

        assert response.data['count'] == 1
        assert response.data['results'][0]['target_table'] == 'trash'

    def test_unknown_action_is_rejected(self, system_admin_client):
        response = system_admin_client.get(reverse('audit:entry-list'), {'action': 'NOPE'})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_entries_are_read_only(self, system_admin_client, audit_entries):
        entry = AuditLogEntry.objects.first()

        response = system_admin_client.delete(reverse('audit:entry-detail', args=[entry.id]))

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
        assert AuditLogEntry.objects.count() == 3
