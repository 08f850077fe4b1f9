"""
Store scoping helpers for multi-tenant data isolation.
"""
from dataclasses import dataclass
from typing import Optional

from stores.exceptions import StoreAccessDenied, StoreNotFound
from stores.models import Store
from users.models import User


@dataclass(frozen=True)
class AuthContext:
    """
    Who is acting: passed explicitly into every order operation.

    role is None for anonymous callers; store_id is only set for store owners.
    """
    role: Optional[str] = None
    store_id: Optional[int] = None

    @property
    def is_super_admin(self):
        return self.role == User.Role.SUPERADMIN

    @property
    def is_store_owner(self):
        return self.role == User.Role.STORE_OWNER and self.store_id is not None

    def owns_store(self, store):
        return self.is_store_owner and self.store_id == store.id


ANONYMOUS = AuthContext()


def get_auth_context(request) -> AuthContext:
    """Build the authorization context for the current request."""
    user = getattr(request, 'user', None)

    if user is None or not user.is_authenticated:
        return ANONYMOUS

    if user.is_super_admin:
        return AuthContext(role=user.role)

    return AuthContext(role=user.role, store_id=user.store_id)


def require_store_for_request(request, store_slug) -> Store:
    """
    Return the store named in the URL, or raise 403 when the caller
    does not administer it.

    The slug check happens before any lookup so that owners of other stores
    cannot probe which slugs exist.
    """
    user = request.user
    store = getattr(user, 'store', None) if user.is_authenticated else None

    if store is None or not user.is_store_owner or store.slug != store_slug:
        raise StoreAccessDenied()

    if not store.is_active:
        raise StoreNotFound()

    return store


class StoreOwnerMixin:
    """
    Mixin for views nested under /api/<store_slug>/admin/.

    Usage:
        class StoreProductListView(StoreOwnerMixin, generics.ListAPIView):
            queryset = StoreProduct.objects.all()
            ...

    The mixin will:
    1. Reject requests from users that do not own the store in the URL
    2. Filter querysets to rows belonging to that store
    3. Assign the store on create operations
    """

    store_field = 'store'  # Override if the FK field has a different name
    store_url_kwarg = 'store_slug'

    def get_store(self):
        if not hasattr(self, '_store'):
            self._store = require_store_for_request(self.request, self.kwargs[self.store_url_kwarg])
        return self._store

    def get_queryset(self):
        queryset = super().get_queryset()
        return queryset.filter(**{self.store_field: self.get_store()})

    def perform_create(self, serializer):
        serializer.save(**{self.store_field: self.get_store()})
