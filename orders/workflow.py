"""
Order fulfillment workflow.

Every operation that acts on behalf of a user receives an explicit
AuthContext instead of reading the request, so the rules below can be
exercised without the HTTP layer.

Item status machine:

    PENDING -> READY
    PENDING -> UNAVAILABLE
    UNAVAILABLE -> PENDING

Order status machine:

    PENDING -> READY               (no item left PENDING)
    READY -> DELIVERING            (DELIVERY orders only)
    READY -> COMPLETED             (PICKUP orders only)
    DELIVERING -> COMPLETED
    PENDING | READY | DELIVERING -> CANCELLED
"""
import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import FrozenSet, Optional, Tuple

from django.conf import settings
from django.db import transaction
from django.db.models import IntegerField, Max, Sum
from django.db.models.functions import Cast
from oauthlib.common import generate_token
from rest_framework.exceptions import ValidationError

from catalog.models import MeasurementUnit, StoreProduct
from stores.exceptions import StoreAccessDenied
from stores.models import Store
from users.mixins import AuthContext
from .exceptions import ItemNotFound, OrderNotFound, PreconditionFailed
from .models import Customer, Order, OrderItem

logger = logging.getLogger(__name__)

ItemStatus = OrderItem.ItemStatus
Status = Order.Status
DeliveryType = Order.DeliveryType

ORDER_NUMBER_WIDTH = 6

ITEM_TRANSITIONS: FrozenSet[Tuple[str, str]] = frozenset([
    (ItemStatus.PENDING, ItemStatus.READY),
    (ItemStatus.PENDING, ItemStatus.UNAVAILABLE),
    (ItemStatus.UNAVAILABLE, ItemStatus.PENDING),
])

ORDER_TRANSITIONS: FrozenSet[Tuple[str, str]] = frozenset([
    (Status.PENDING, Status.READY),
    (Status.READY, Status.DELIVERING),
    (Status.READY, Status.COMPLETED),
    (Status.DELIVERING, Status.COMPLETED),
    # Cancellation edges
    (Status.PENDING, Status.CANCELLED),
    (Status.READY, Status.CANCELLED),
    (Status.DELIVERING, Status.CANCELLED),
])

# Transitions that only exist for one delivery type
DELIVERY_TYPE_GUARDS = {
    (Status.READY, Status.DELIVERING): DeliveryType.DELIVERY,
    (Status.READY, Status.COMPLETED): DeliveryType.PICKUP,
}

TERMINAL_STATUSES = frozenset([Status.COMPLETED, Status.CANCELLED])


def is_valid_item_transition(current: str, target: str) -> bool:
    return current == target or (current, target) in ITEM_TRANSITIONS


def allowed_order_transitions(order: Order):
    """Statuses the order may move to next, ignoring the item completeness guard."""
    return [
        target for (source, target) in sorted(ORDER_TRANSITIONS)
        if source == order.status and DELIVERY_TYPE_GUARDS.get((source, target), order.delivery_type) == order.delivery_type
    ]


def require_store_owner(context: AuthContext, store: Store):
    if not context.owns_store(store):
        raise StoreAccessDenied()


def generate_access_token() -> str:
    return generate_token(length=settings.ORDER_ACCESS_TOKEN_LENGTH)


# ============== Order creation ==============

@dataclass
class OrderLine:
    store_product: StoreProduct
    measurement_unit: MeasurementUnit
    quantity: Decimal
    price: Decimal

    def build_item(self, order):
        item = OrderItem(
            order=order,
            store_product=self.store_product,
            measurement_unit=self.measurement_unit,
            quantity=self.quantity,
            price=self.price,
            item_status=ItemStatus.PENDING
        )
        item.calculate_subtotal()
        return item


def _to_decimal(value, field):
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError({field: f'"{value}" is not a valid number.'})


def resolve_line(store: Store, data: dict) -> OrderLine:
    """
    Validate one submitted item against the store catalog.

    The product must be sold by the store and currently sellable, the unit
    must carry an active price, and the submitted price must match it.
    """
    quantity = _to_decimal(data.get('quantity'), 'quantity')
    price = _to_decimal(data.get('price'), 'price')

    if quantity <= 0:
        raise ValidationError({'items': 'Quantity must be greater than zero.'})
    if price <= 0:
        raise ValidationError({'items': 'Price must be greater than zero.'})

    store_product = StoreProduct.objects.select_related('master_product').filter(
        pk=data.get('store_product_id'),
        store=store
    ).first()
    if store_product is None:
        raise ValidationError({'items': f'Product {data.get("store_product_id")} is not sold by this store.'})
    if not store_product.is_sellable:
        raise ValidationError({'items': f'{store_product.master_product.name} is not available.'})

    catalog_price = store_product.prices.select_related('measurement_unit').filter(
        measurement_unit_id=data.get('measurement_unit_id'),
        is_active=True
    ).first()
    if catalog_price is None:
        raise ValidationError(
            {'items': f'{store_product.master_product.name} is not sold in the requested unit.'}
        )
    if catalog_price.price != price:
        raise ValidationError(
            {'items': f'The price of {store_product.master_product.name} has changed. Please review your cart.'}
        )

    return OrderLine(
        store_product=store_product,
        measurement_unit=catalog_price.measurement_unit,
        quantity=quantity,
        price=catalog_price.price
    )


def upsert_customer(store: Store, name: str, phone: str, address: Optional[str] = None) -> Customer:
    """Find the customer by phone within the store, refreshing name and address."""
    customer, created = Customer.objects.get_or_create(
        store=store,
        phone=phone,
        defaults={'name': name, 'address': address or None}
    )
    if not created:
        customer.name = name
        # An empty address keeps the one on file
        if address:
            customer.address = address
        customer.save(update_fields=['name', 'address', 'updated_at'])
    return customer


def next_order_number(store: Store) -> str:
    """Previous highest order number of the store plus one, zero padded."""
    last = Order.objects.filter(store=store).aggregate(
        last=Max(Cast('order_number', IntegerField()))
    )['last']
    return str((last or 0) + 1).zfill(ORDER_NUMBER_WIDTH)


def create_order(store: Store, customer: dict, delivery_type: str, items, notes: Optional[str] = None) -> Order:
    """
    Place an order and all of its items atomically.

    The store row is locked for the duration of the transaction so that
    concurrent checkouts against the same store are numbered one at a time.
    """
    if not items:
        raise ValidationError({'items': 'The order must contain at least one product.'})
    if delivery_type not in DeliveryType.values:
        raise ValidationError({'delivery_type': f'"{delivery_type}" is not a valid delivery type.'})
    if not customer.get('name') or not customer.get('phone'):
        raise ValidationError({'customer': 'Customer name and phone are required.'})

    with transaction.atomic():
        Store.objects.select_for_update().get(pk=store.pk)

        lines = [resolve_line(store, item) for item in items]
        customer_record = upsert_customer(
            store,
            name=customer['name'],
            phone=customer['phone'],
            address=customer.get('address')
        )

        order = Order(
            store=store,
            customer=customer_record,
            order_number=next_order_number(store),
            status=Status.PENDING,
            delivery_type=delivery_type,
            notes=notes or None,
            access_token=generate_access_token()
        )
        order_items = [line.build_item(order) for line in lines]
        order.total = sum((item.subtotal for item in order_items), Decimal('0.00'))
        order.save()
        OrderItem.objects.bulk_create(order_items)

    logger.info(f"Order {order.order_number} created for store {store.slug} with total {order.total}")
    return order


# ============== Fulfillment ==============

def recalculate_total(order: Order) -> Decimal:
    """
    Recompute the order total from its items, leaving out unavailable ones.

    Callers must hold the row lock on the order.
    """
    total = order.items.exclude(
        item_status=ItemStatus.UNAVAILABLE
    ).aggregate(total=Sum('subtotal'))['total'] or Decimal('0.00')
    order.total = total
    order.save(update_fields=['total', 'updated_at'])
    return total


def update_item_status(context: AuthContext, store: Store, order_number: str, item_id, item_status: str) -> OrderItem:
    """Change the fulfillment status of one item and refresh the order total."""
    require_store_owner(context, store)

    if item_status not in ItemStatus.values:
        raise ValidationError({'item_status': f'"{item_status}" is not a valid item status.'})

    with transaction.atomic():
        order = Order.objects.select_for_update().filter(
            store=store,
            order_number=order_number
        ).first()
        if order is None:
            raise ItemNotFound()

        item = order.items.filter(pk=item_id).first()
        if item is None:
            raise ItemNotFound()

        current = item.item_status
        if not is_valid_item_transition(current, item_status):
            raise PreconditionFailed(
                f'An item cannot move from {current} to {item_status}. Undo it back to PENDING first.'
            )

        item.item_status = item_status
        item.save(update_fields=['item_status'])
        recalculate_total(order)

    logger.info(f"Order {order_number} of store {store.slug}: item {item.pk} {current} -> {item_status}, total {order.total}")
    return item


def update_order_status(context: AuthContext, store: Store, order_number: str, new_status: str) -> Order:
    """Move the order through its status machine, enforcing the guards."""
    require_store_owner(context, store)

    if new_status not in Status.values:
        raise ValidationError({'status': f'"{new_status}" is not a valid order status.'})

    with transaction.atomic():
        order = Order.objects.select_for_update().filter(
            store=store,
            order_number=order_number
        ).first()
        if order is None:
            raise OrderNotFound()

        current = order.status
        if (current, new_status) not in ORDER_TRANSITIONS:
            raise PreconditionFailed(f'An order cannot move from {current} to {new_status}.')

        required_type = DELIVERY_TYPE_GUARDS.get((current, new_status))
        if required_type is not None and order.delivery_type != required_type:
            if new_status == Status.DELIVERING:
                raise PreconditionFailed('Only delivery orders can be sent out for delivery.')
            raise PreconditionFailed('Delivery orders must be out for delivery before they are completed.')

        if new_status == Status.READY and order.has_pending_items:
            raise PreconditionFailed('Mark all products as ready or unavailable before completing the order.')

        order.status = new_status
        order.save(update_fields=['status', 'updated_at'])

    logger.info(f"Order {order_number} of store {store.slug}: {current} -> {new_status}")
    return order


# ============== Reads ==============

def order_detail_queryset():
    return Order.objects.select_related('store', 'customer').prefetch_related(
        'items__store_product__master_product',
        'items__measurement_unit'
    )


def get_customer_order(store: Store, order_number: str, access_token: Optional[str]) -> Order:
    """
    Token-gated read for anonymous customers.

    A missing token, a wrong token and an unknown order number all raise
    the same OrderNotFound.
    """
    if not access_token:
        raise OrderNotFound()

    order = order_detail_queryset().filter(
        store=store,
        order_number=order_number,
        access_token=access_token
    ).first()
    if order is None:
        raise OrderNotFound()
    return order


def list_store_orders(context: AuthContext, store: Store, status: Optional[str] = None):
    """Orders of the store, newest first, optionally filtered by status ('all' means no filter)."""
    require_store_owner(context, store)

    queryset = order_detail_queryset().filter(store=store).order_by('-created_at', '-id')
    if status and status.lower() != 'all':
        status = status.upper()
        if status not in Status.values:
            raise ValidationError({'status': f'"{status}" is not a valid order status.'})
        queryset = queryset.filter(status=status)
    return queryset
