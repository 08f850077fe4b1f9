"""
Tests for Stores Module.
Tests for: Store model, store provisioning (superadmin) and store settings (owner).
"""
import pytest
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status

from stores.exceptions import StoreNotFound
from stores.models import Store
from stores.utils import get_active_store
from users.models import User


@pytest.mark.django_db
class TestStoreModel:
    """Test cases for Store model"""

    def test_store_str_representation(self, store):
        assert str(store) == 'Green Market (green-market)'

    def test_slug_format_validated(self, db):
        store = Store(slug='Bad Slug!', name='Bad')
        with pytest.raises(DjangoValidationError):
            store.full_clean()

    def test_get_active_store(self, store):
        assert get_active_store('green-market') == store

    def test_get_active_store_inactive(self, inactive_store):
        with pytest.raises(StoreNotFound):
            get_active_store(inactive_store.slug)

    def test_get_active_store_unknown(self, db):
        with pytest.raises(StoreNotFound):
            get_active_store('nowhere')


@pytest.mark.django_db
class TestStoreProvisioningAPI:
    """Test cases for /api/admin/stores/"""

    url = '/api/admin/stores/'

    def payload(self, **overrides):
        data = {
            'slug': 'fresh-corner',
            'name': 'Fresh Corner',
            'owner_username': 'fresh_owner',
            'owner_email': 'fresh@test.com',
            'owner_password': 'secret123',
        }
        data.update(overrides)
        return data

    def test_create_store_with_owner(self, super_admin_client):
        response = super_admin_client.post(self.url, self.payload(), format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['slug'] == 'fresh-corner'
        assert 'owner_password' not in response.data

        store = Store.objects.get(slug='fresh-corner')
        owner = User.objects.get(username='fresh_owner')
        assert owner.store == store
        assert owner.role == User.Role.STORE_OWNER
        assert owner.check_password('secret123')

    @pytest.mark.parametrize('slug', ['admin', 'auth', 'health'])
    def test_reserved_slug_rejected(self, super_admin_client, slug):
        response = super_admin_client.post(self.url, self.payload(slug=slug), format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not Store.objects.filter(slug=slug).exists()

    def test_duplicate_slug_rejected(self, super_admin_client, store):
        response = super_admin_client.post(self.url, self.payload(slug=store.slug), format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_duplicate_owner_username_rejected(self, super_admin_client, store_owner):
        response = super_admin_client.post(self.url, self.payload(owner_username='owner'), format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not Store.objects.filter(slug='fresh-corner').exists()

    def test_list_stores_filter_active(self, super_admin_client, store, inactive_store):
        response = super_admin_client.get(self.url, {'is_active': 'false'})
        assert response.status_code == status.HTTP_200_OK
        assert [s['slug'] for s in response.data] == [inactive_store.slug]

    def test_deactivate_store(self, super_admin_client, store):
        response = super_admin_client.patch(f'{self.url}{store.id}/', {'is_active': False}, format='json')
        assert response.status_code == status.HTTP_200_OK
        store.refresh_from_db()
        assert not store.is_active

    def test_delete_not_allowed(self, super_admin_client, store):
        response = super_admin_client.delete(f'{self.url}{store.id}/')
        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED

    def test_store_owner_denied(self, owner_client):
        response = owner_client.get(self.url)
        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestStoreSettingsAPI:
    """Test cases for /api/<store_slug>/admin/store/"""

    def test_get_settings(self, owner_client, store):
        response = owner_client.get(f'/api/{store.slug}/admin/store/')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['name'] == store.name

    def test_rename_store(self, owner_client, store):
        response = owner_client.patch(
            f'/api/{store.slug}/admin/store/', {'name': '  Green Market Plus  '}, format='json'
        )
        assert response.status_code == status.HTTP_200_OK
        store.refresh_from_db()
        assert store.name == 'Green Market Plus'

    def test_slug_is_read_only(self, owner_client, store):
        owner_client.patch(f'/api/{store.slug}/admin/store/', {'slug': 'hijacked'}, format='json')
        store.refresh_from_db()
        assert store.slug == 'green-market'

    def test_blank_name_rejected(self, owner_client, store):
        response = owner_client.patch(f'/api/{store.slug}/admin/store/', {'name': '   '}, format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_other_store_denied(self, store2_owner_client, store):
        response = store2_owner_client.get(f'/api/{store.slug}/admin/store/')
        assert response.status_code == status.HTTP_403_FORBIDDEN
