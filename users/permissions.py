from rest_framework import permissions


class IsSuperAdmin(permissions.BasePermission):
    """Only superadmin users have access"""

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_super_admin)


class IsStoreOwner(permissions.BasePermission):
    """Only store owners attached to a store have access"""

    def has_permission(self, request, view):
        return bool(
            request.user and
            request.user.is_authenticated and
            request.user.is_store_owner and
            request.user.store_id is not None
        )
