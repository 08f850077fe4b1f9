from rest_framework import status
from rest_framework.exceptions import APIException, NotFound


class OrderNotFound(NotFound):
    default_detail = 'Order not found.'
    default_code = 'order_not_found'


class ItemNotFound(NotFound):
    default_detail = 'Order item not found.'
    default_code = 'item_not_found'


class PreconditionFailed(APIException):
    """A status transition was requested while its guard does not hold."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'The requested status change is not allowed.'
    default_code = 'precondition_failed'
