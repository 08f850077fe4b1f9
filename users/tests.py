"""
Tests for Users Module.
Tests for: User model, permissions, auth context and the authentication endpoints.
"""
import pytest
from types import SimpleNamespace
from django.contrib.auth.models import AnonymousUser
from oauth2_provider.models import AccessToken, RefreshToken
from rest_framework import status

from stores.exceptions import StoreAccessDenied, StoreNotFound
from users.mixins import ANONYMOUS, AuthContext, get_auth_context, require_store_for_request
from users.models import User
from users.permissions import IsSuperAdmin, IsStoreOwner


# ============== User Model Tests ==============

@pytest.mark.django_db
class TestUserModel:
    """Test cases for User model"""

    def test_super_admin_role(self, super_admin):
        assert super_admin.is_super_admin
        assert not super_admin.is_store_owner
        assert super_admin.store is None

    def test_store_owner_role(self, store_owner, store):
        assert store_owner.is_store_owner
        assert not store_owner.is_super_admin
        assert store_owner.store == store

    def test_default_role_is_store_owner(self, store):
        user = User.objects.create_user(username='new_owner', password='testpass123', store=store)
        assert user.role == User.Role.STORE_OWNER

    def test_user_str_representation(self, store_owner):
        assert str(store_owner) == 'owner (Store Owner)'


# ============== Permission Tests ==============

@pytest.mark.django_db
class TestPermissions:
    """Test cases for IsSuperAdmin and IsStoreOwner"""

    def request_for(self, user):
        return SimpleNamespace(user=user)

    def test_is_super_admin(self, super_admin, store_owner):
        permission = IsSuperAdmin()
        assert permission.has_permission(self.request_for(super_admin), None)
        assert not permission.has_permission(self.request_for(store_owner), None)
        assert not permission.has_permission(self.request_for(AnonymousUser()), None)

    def test_is_store_owner(self, super_admin, store_owner):
        permission = IsStoreOwner()
        assert permission.has_permission(self.request_for(store_owner), None)
        assert not permission.has_permission(self.request_for(super_admin), None)

    def test_store_owner_without_store(self, db):
        orphan = User.objects.create_user(username='orphan', password='testpass123', role=User.Role.STORE_OWNER)
        assert not IsStoreOwner().has_permission(self.request_for(orphan), None)


# ============== Auth Context Tests ==============

@pytest.mark.django_db
class TestAuthContext:
    """Test cases for get_auth_context and require_store_for_request"""

    def test_anonymous_context(self):
        context = get_auth_context(SimpleNamespace(user=AnonymousUser()))
        assert context == ANONYMOUS
        assert not context.is_store_owner
        assert not context.is_super_admin

    def test_store_owner_context(self, store_owner, store, store2):
        context = get_auth_context(SimpleNamespace(user=store_owner))
        assert context == AuthContext(role=User.Role.STORE_OWNER, store_id=store.id)
        assert context.owns_store(store)
        assert not context.owns_store(store2)

    def test_super_admin_context_owns_no_store(self, super_admin, store):
        context = get_auth_context(SimpleNamespace(user=super_admin))
        assert context.is_super_admin
        assert context.store_id is None
        assert not context.owns_store(store)

    def test_require_own_store(self, store_owner, store):
        assert require_store_for_request(SimpleNamespace(user=store_owner), store.slug) == store

    def test_require_other_store_denied(self, store_owner, store2):
        with pytest.raises(StoreAccessDenied):
            require_store_for_request(SimpleNamespace(user=store_owner), store2.slug)

    def test_require_unknown_store_denied(self, store_owner):
        with pytest.raises(StoreAccessDenied):
            require_store_for_request(SimpleNamespace(user=store_owner), 'no-such-store')

    def test_require_inactive_store_not_found(self, inactive_store_owner, inactive_store):
        with pytest.raises(StoreNotFound):
            require_store_for_request(SimpleNamespace(user=inactive_store_owner), inactive_store.slug)

    def test_require_anonymous_denied(self, store):
        with pytest.raises(StoreAccessDenied):
            require_store_for_request(SimpleNamespace(user=AnonymousUser()), store.slug)


# ============== Authentication API Tests ==============

@pytest.mark.django_db
class TestLoginAPI:
    """Test cases for POST /api/auth/login/"""

    url = '/api/auth/login/'

    def test_super_admin_login(self, api_client, super_admin):
        response = api_client.post(self.url, {'username': 'superadmin', 'password': 'testpass123'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['token_type'] == 'Bearer'
        assert response.data['user']['role'] == User.Role.SUPERADMIN
        assert AccessToken.objects.filter(token=response.data['access_token'], user=super_admin).exists()
        assert RefreshToken.objects.filter(token=response.data['refresh_token']).exists()

    def test_store_owner_login(self, api_client, store_owner, store):
        response = api_client.post(self.url, {
            'username': 'owner',
            'password': 'testpass123',
            'store_slug': store.slug,
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['user']['store']['slug'] == store.slug

    def test_store_owner_login_without_store(self, api_client, store_owner):
        response = api_client.post(self.url, {'username': 'owner', 'password': 'testpass123'}, format='json')
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_store_owner_login_through_other_store(self, api_client, store_owner, store2):
        response = api_client.post(self.url, {
            'username': 'owner',
            'password': 'testpass123',
            'store_slug': store2.slug,
        }, format='json')
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_inactive_store_login(self, api_client, inactive_store_owner, inactive_store):
        response = api_client.post(self.url, {
            'username': 'closed_owner',
            'password': 'testpass123',
            'store_slug': inactive_store.slug,
        }, format='json')
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_invalid_password(self, api_client, super_admin):
        response = api_client.post(self.url, {'username': 'superadmin', 'password': 'wrong'}, format='json')
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_missing_fields(self, api_client):
        response = api_client.post(self.url, {'username': 'superadmin'}, format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestSessionAPI:
    """Test cases for me, logout and change-password"""

    def test_current_user(self, owner_client, store_owner):
        response = owner_client.get('/api/auth/me/')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['username'] == store_owner.username

    def test_current_user_unauthenticated(self, api_client):
        response = api_client.get('/api/auth/me/')
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_logout_revokes_token(self, owner_client, owner_token):
        response = owner_client.post('/api/auth/logout/')
        assert response.status_code == status.HTTP_200_OK
        assert not AccessToken.objects.filter(pk=owner_token.pk).exists()

        response = owner_client.get('/api/auth/me/')
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_change_password(self, owner_client, store_owner):
        response = owner_client.post('/api/auth/change-password/', {
            'old_password': 'testpass123',
            'new_password': 'newpass456',
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        store_owner.refresh_from_db()
        assert store_owner.check_password('newpass456')

    def test_change_password_wrong_old(self, owner_client):
        response = owner_client.post('/api/auth/change-password/', {
            'old_password': 'wrong',
            'new_password': 'newpass456',
        }, format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_change_password_too_short(self, owner_client):
        response = owner_client.post('/api/auth/change-password/', {
            'old_password': 'testpass123',
            'new_password': '123',
        }, format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST
