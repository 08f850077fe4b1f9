from rest_framework.exceptions import NotFound, PermissionDenied


class StoreNotFound(NotFound):
    default_detail = 'Store not found.'
    default_code = 'store_not_found'


class StoreAccessDenied(PermissionDenied):
    default_detail = 'You do not have access to this store.'
    default_code = 'store_access_denied'
