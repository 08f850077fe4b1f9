"""
Tests for the Orders Module.
Tests for: order creation, item fulfillment, total recalculation, order status
workflow, token-gated customer reads and the staff/platform endpoints.
"""
import pytest
from decimal import Decimal
from django.core.management import call_command
from rest_framework import status
from rest_framework.exceptions import ValidationError

from catalog.models import StoreProductPrice
from orders import workflow
from orders.exceptions import ItemNotFound, OrderNotFound, PreconditionFailed
from orders.models import Customer, Order, OrderItem
from stores.exceptions import StoreAccessDenied


def order_url(store, order_number):
    return f'/api/{store.slug}/orders/{order_number}/'


def item_status_url(store, order_number, item_id):
    return f'/api/{store.slug}/admin/orders/{order_number}/items/{item_id}/'


def order_status_url(store, order_number):
    return f'/api/{store.slug}/admin/orders/{order_number}/status/'


def assert_total_invariant(order):
    order.refresh_from_db()
    expected = sum(
        (item.subtotal for item in order.items.exclude(item_status=OrderItem.ItemStatus.UNAVAILABLE)),
        Decimal('0.00')
    )
    assert order.total == expected


# ============== Model Tests ==============

@pytest.mark.django_db
class TestOrderModels:
    """Test cases for Order and OrderItem models"""

    def test_subtotal_is_price_times_quantity(self, pickup_order):
        apples = pickup_order.items.get(measurement_unit__abbreviation='kg')
        assert apples.subtotal == Decimal('5000.00')

    def test_subtotal_rounds_half_up_to_cents(self, store_apple, unit_kg):
        item = OrderItem(
            store_product=store_apple,
            measurement_unit=unit_kg,
            quantity=Decimal('0.125'),
            price=Decimal('0.10')
        )
        assert item.calculate_subtotal() == Decimal('0.01')

    def test_order_str_representation(self, pickup_order):
        assert str(pickup_order) == f"Order-{pickup_order.order_number} - {pickup_order.total}"

    def test_has_pending_items(self, pickup_order):
        assert pickup_order.has_pending_items
        pickup_order.items.update(item_status=OrderItem.ItemStatus.READY)
        assert not pickup_order.has_pending_items


# ============== Order Creation Tests ==============

@pytest.mark.django_db
class TestCreateOrder:
    """Test cases for workflow.create_order"""

    def test_first_order_of_store(self, store, store_apple, store_milk, unit_kg, unit_un, customer_data):
        """Two items at 1000 x 2 and 2000 x 1 total 4000"""
        StoreProductPrice.objects.filter(store_product=store_apple, measurement_unit=unit_kg).update(
            price=Decimal('1000.00')
        )
        StoreProductPrice.objects.filter(store_product=store_milk).update(price=Decimal('2000.00'))

        order = workflow.create_order(store, customer=customer_data, delivery_type='PICKUP', items=[
            {'store_product_id': store_apple.id, 'measurement_unit_id': unit_kg.id,
             'quantity': '2', 'price': '1000'},
            {'store_product_id': store_milk.id, 'measurement_unit_id': unit_un.id,
             'quantity': '1', 'price': '2000'},
        ])

        order.refresh_from_db()
        assert order.total == Decimal('4000.00')
        assert order.order_number == '000001'
        assert order.status == Order.Status.PENDING
        assert order.items.count() == 2
        assert set(order.items.values_list('item_status', flat=True)) == {OrderItem.ItemStatus.PENDING}

    def test_order_numbers_are_sequential_per_store(self, store, store2, order_items, customer_data,
                                                    store2_apple, unit_kg):
        first = workflow.create_order(store, customer=customer_data, delivery_type='PICKUP', items=order_items)
        second = workflow.create_order(store, customer=customer_data, delivery_type='PICKUP', items=order_items)
        other = workflow.create_order(store2, customer=customer_data, delivery_type='PICKUP', items=[
            {'store_product_id': store2_apple.id, 'measurement_unit_id': unit_kg.id,
             'quantity': '1', 'price': '2700.00'},
        ])

        assert first.order_number == '000001'
        assert second.order_number == '000002'
        assert other.order_number == '000001'

    def test_order_number_follows_highest_existing(self, store, pickup_order, order_items, customer_data):
        Order.objects.filter(pk=pickup_order.pk).update(order_number='000041')
        order = workflow.create_order(store, customer=customer_data, delivery_type='PICKUP', items=order_items)
        assert order.order_number == '000042'

    def test_access_token_is_generated(self, pickup_order, delivery_order, settings):
        assert len(pickup_order.access_token) == settings.ORDER_ACCESS_TOKEN_LENGTH
        assert pickup_order.access_token != delivery_order.access_token

    def test_price_snapshot_survives_catalog_change(self, pickup_order, store_apple, unit_kg):
        StoreProductPrice.objects.filter(store_product=store_apple, measurement_unit=unit_kg).update(
            price=Decimal('9999.00')
        )
        apples = pickup_order.items.get(measurement_unit=unit_kg)
        assert apples.price == Decimal('2500.00')

    def test_empty_items_rejected(self, store, customer_data):
        with pytest.raises(ValidationError):
            workflow.create_order(store, customer=customer_data, delivery_type='PICKUP', items=[])

    def test_invalid_delivery_type_rejected(self, store, order_items, customer_data):
        with pytest.raises(ValidationError):
            workflow.create_order(store, customer=customer_data, delivery_type='DRONE', items=order_items)

    def test_non_positive_quantity_rejected(self, store, order_items, customer_data):
        order_items[0]['quantity'] = '0'
        with pytest.raises(ValidationError):
            workflow.create_order(store, customer=customer_data, delivery_type='PICKUP', items=order_items)

    def test_non_positive_price_rejected(self, store, order_items, customer_data):
        order_items[0]['price'] = '-1'
        with pytest.raises(ValidationError):
            workflow.create_order(store, customer=customer_data, delivery_type='PICKUP', items=order_items)

    def test_product_of_other_store_rejected(self, store, store2_apple, unit_kg, customer_data):
        with pytest.raises(ValidationError):
            workflow.create_order(store, customer=customer_data, delivery_type='PICKUP', items=[
                {'store_product_id': store2_apple.id, 'measurement_unit_id': unit_kg.id,
                 'quantity': '1', 'price': '2700.00'},
            ])

    def test_unavailable_product_rejected(self, store, store_apple, order_items, customer_data):
        store_apple.is_available = False
        store_apple.save()
        with pytest.raises(ValidationError):
            workflow.create_order(store, customer=customer_data, delivery_type='PICKUP', items=order_items)

    def test_inactive_master_product_rejected(self, store, apple, order_items, customer_data):
        apple.is_active = False
        apple.save()
        with pytest.raises(ValidationError):
            workflow.create_order(store, customer=customer_data, delivery_type='PICKUP', items=order_items)

    def test_inactive_price_rejected(self, store, store_apple, unit_kg, order_items, customer_data):
        StoreProductPrice.objects.filter(store_product=store_apple, measurement_unit=unit_kg).update(is_active=False)
        with pytest.raises(ValidationError):
            workflow.create_order(store, customer=customer_data, delivery_type='PICKUP', items=order_items)

    def test_stale_price_rejected(self, store, order_items, customer_data):
        order_items[0]['price'] = '2400.00'
        with pytest.raises(ValidationError):
            workflow.create_order(store, customer=customer_data, delivery_type='PICKUP', items=order_items)

    def test_failed_checkout_persists_nothing(self, store, order_items, customer_data):
        order_items[1]['price'] = '1.00'
        with pytest.raises(ValidationError):
            workflow.create_order(store, customer=customer_data, delivery_type='PICKUP', items=order_items)

        assert Order.objects.count() == 0
        assert OrderItem.objects.count() == 0
        assert Customer.objects.count() == 0

    def test_customer_reused_by_phone(self, store, order_items, customer_data):
        workflow.create_order(store, customer=customer_data, delivery_type='PICKUP', items=order_items)
        workflow.create_order(
            store,
            customer={'name': 'Ana G.', 'phone': customer_data['phone'], 'address': ''},
            delivery_type='PICKUP',
            items=order_items
        )

        customer = Customer.objects.get(store=store, phone=customer_data['phone'])
        assert Customer.objects.filter(store=store).count() == 1
        assert customer.name == 'Ana G.'
        assert customer.address == customer_data['address']
        assert customer.orders.count() == 2

    def test_customer_address_refreshed_when_given(self, store, order_items, customer_data):
        workflow.create_order(store, customer=customer_data, delivery_type='PICKUP', items=order_items)
        workflow.create_order(
            store,
            customer={**customer_data, 'address': 'Carrera 7 # 1-1'},
            delivery_type='DELIVERY',
            items=order_items
        )
        assert Customer.objects.get(store=store).address == 'Carrera 7 # 1-1'

    def test_same_phone_in_two_stores_is_two_customers(self, store, store2, order_items, customer_data,
                                                       store2_apple, unit_kg):
        workflow.create_order(store, customer=customer_data, delivery_type='PICKUP', items=order_items)
        workflow.create_order(store2, customer=customer_data, delivery_type='PICKUP', items=[
            {'store_product_id': store2_apple.id, 'measurement_unit_id': unit_kg.id,
             'quantity': '1', 'price': '2700.00'},
        ])
        assert Customer.objects.filter(phone=customer_data['phone']).count() == 2


# ============== Item Fulfillment Tests ==============

@pytest.mark.django_db
class TestUpdateItemStatus:
    """Test cases for workflow.update_item_status and the total invariant"""

    def test_mark_ready_keeps_total(self, store, owner_context, pickup_order):
        item = pickup_order.items.first()
        updated = workflow.update_item_status(owner_context, store, pickup_order.order_number, item.id, 'READY')

        assert updated.item_status == OrderItem.ItemStatus.READY
        pickup_order.refresh_from_db()
        assert pickup_order.total == Decimal('9500.00')

    def test_mark_unavailable_drops_subtotal(self, store, owner_context, pickup_order):
        milk = pickup_order.items.get(measurement_unit__abbreviation='un')
        workflow.update_item_status(owner_context, store, pickup_order.order_number, milk.id, 'UNAVAILABLE')

        pickup_order.refresh_from_db()
        assert pickup_order.total == Decimal('5000.00')
        assert_total_invariant(pickup_order)

    def test_undo_unavailable_restores_total(self, store, owner_context, pickup_order):
        milk = pickup_order.items.get(measurement_unit__abbreviation='un')
        workflow.update_item_status(owner_context, store, pickup_order.order_number, milk.id, 'UNAVAILABLE')
        workflow.update_item_status(owner_context, store, pickup_order.order_number, milk.id, 'PENDING')

        pickup_order.refresh_from_db()
        assert pickup_order.total == Decimal('9500.00')

    def test_total_invariant_after_every_change(self, store, owner_context, pickup_order):
        apples, milk = pickup_order.items.order_by('id')
        changes = [
            (apples, 'UNAVAILABLE'),
            (milk, 'UNAVAILABLE'),
            (apples, 'PENDING'),
            (apples, 'READY'),
            (milk, 'PENDING'),
        ]
        for item, item_status in changes:
            workflow.update_item_status(owner_context, store, pickup_order.order_number, item.id, item_status)
            assert_total_invariant(pickup_order)

    def test_all_unavailable_gives_zero_total(self, store, owner_context, pickup_order):
        for item in pickup_order.items.all():
            workflow.update_item_status(owner_context, store, pickup_order.order_number, item.id, 'UNAVAILABLE')
        pickup_order.refresh_from_db()
        assert pickup_order.total == Decimal('0.00')

    def test_unavailable_to_ready_not_allowed(self, store, owner_context, pickup_order):
        item = pickup_order.items.first()
        workflow.update_item_status(owner_context, store, pickup_order.order_number, item.id, 'UNAVAILABLE')

        with pytest.raises(PreconditionFailed):
            workflow.update_item_status(owner_context, store, pickup_order.order_number, item.id, 'READY')

        item.refresh_from_db()
        assert item.item_status == OrderItem.ItemStatus.UNAVAILABLE

    def test_ready_to_unavailable_not_allowed(self, store, owner_context, pickup_order):
        item = pickup_order.items.first()
        workflow.update_item_status(owner_context, store, pickup_order.order_number, item.id, 'READY')

        with pytest.raises(PreconditionFailed):
            workflow.update_item_status(owner_context, store, pickup_order.order_number, item.id, 'UNAVAILABLE')

    def test_resubmitting_current_status_is_noop(self, store, owner_context, pickup_order):
        item = pickup_order.items.first()
        workflow.update_item_status(owner_context, store, pickup_order.order_number, item.id, 'READY')
        updated = workflow.update_item_status(owner_context, store, pickup_order.order_number, item.id, 'READY')
        assert updated.item_status == OrderItem.ItemStatus.READY

    def test_invalid_item_status_rejected(self, store, owner_context, pickup_order):
        item = pickup_order.items.first()
        with pytest.raises(ValidationError):
            workflow.update_item_status(owner_context, store, pickup_order.order_number, item.id, 'SHIPPED')

    def test_item_change_leaves_siblings_and_order_status(self, store, owner_context, pickup_order):
        apples, milk = pickup_order.items.order_by('id')
        workflow.update_item_status(owner_context, store, pickup_order.order_number, apples.id, 'READY')

        milk.refresh_from_db()
        pickup_order.refresh_from_db()
        assert milk.item_status == OrderItem.ItemStatus.PENDING
        assert pickup_order.status == Order.Status.PENDING

    def test_unknown_item_not_found(self, store, owner_context, pickup_order):
        with pytest.raises(ItemNotFound):
            workflow.update_item_status(owner_context, store, pickup_order.order_number, 999999, 'READY')

    def test_unknown_order_not_found(self, store, owner_context, pickup_order):
        item = pickup_order.items.first()
        with pytest.raises(ItemNotFound):
            workflow.update_item_status(owner_context, store, '999999', item.id, 'READY')

    def test_item_of_other_order_not_found(self, store, owner_context, pickup_order, delivery_order):
        item = delivery_order.items.first()
        with pytest.raises(ItemNotFound):
            workflow.update_item_status(owner_context, store, pickup_order.order_number, item.id, 'READY')

    def test_owner_of_other_store_denied(self, store, store2_owner_context, pickup_order):
        item = pickup_order.items.first()
        with pytest.raises(StoreAccessDenied):
            workflow.update_item_status(store2_owner_context, store, pickup_order.order_number, item.id, 'READY')

    def test_super_admin_cannot_fulfill(self, store, super_admin_context, pickup_order):
        item = pickup_order.items.first()
        with pytest.raises(StoreAccessDenied):
            workflow.update_item_status(super_admin_context, store, pickup_order.order_number, item.id, 'READY')


# ============== Order Status Workflow Tests ==============

@pytest.mark.django_db
class TestUpdateOrderStatus:
    """Test cases for workflow.update_order_status"""

    def resolve_items(self, context, store, order, item_status='READY'):
        for item in order.items.all():
            workflow.update_item_status(context, store, order.order_number, item.id, item_status)

    def test_ready_blocked_while_items_pending(self, store, owner_context, pickup_order):
        with pytest.raises(PreconditionFailed) as exc_info:
            workflow.update_order_status(owner_context, store, pickup_order.order_number, 'READY')

        assert 'Mark all products' in str(exc_info.value.detail)
        pickup_order.refresh_from_db()
        assert pickup_order.status == Order.Status.PENDING

    def test_ready_blocked_after_one_unavailable(self, store, owner_context, pickup_order):
        """One item unavailable and the other still pending"""
        apples, milk = pickup_order.items.order_by('id')
        workflow.update_item_status(owner_context, store, pickup_order.order_number, milk.id, 'UNAVAILABLE')

        pickup_order.refresh_from_db()
        assert pickup_order.total == Decimal('5000.00')
        with pytest.raises(PreconditionFailed):
            workflow.update_order_status(owner_context, store, pickup_order.order_number, 'READY')

        workflow.update_item_status(owner_context, store, pickup_order.order_number, apples.id, 'READY')
        order = workflow.update_order_status(owner_context, store, pickup_order.order_number, 'READY')
        assert order.status == Order.Status.READY

    def test_ready_allowed_when_all_unavailable(self, store, owner_context, pickup_order):
        self.resolve_items(owner_context, store, pickup_order, 'UNAVAILABLE')
        order = workflow.update_order_status(owner_context, store, pickup_order.order_number, 'READY')
        assert order.status == Order.Status.READY

    def test_pickup_completes_from_ready(self, store, owner_context, pickup_order):
        self.resolve_items(owner_context, store, pickup_order)
        workflow.update_order_status(owner_context, store, pickup_order.order_number, 'READY')
        order = workflow.update_order_status(owner_context, store, pickup_order.order_number, 'COMPLETED')
        assert order.status == Order.Status.COMPLETED

    def test_pickup_never_delivering(self, store, owner_context, pickup_order):
        self.resolve_items(owner_context, store, pickup_order)
        workflow.update_order_status(owner_context, store, pickup_order.order_number, 'READY')

        with pytest.raises(PreconditionFailed) as exc_info:
            workflow.update_order_status(owner_context, store, pickup_order.order_number, 'DELIVERING')
        assert 'Only delivery orders' in str(exc_info.value.detail)

    def test_delivery_cannot_skip_delivering(self, store, owner_context, delivery_order):
        self.resolve_items(owner_context, store, delivery_order)
        workflow.update_order_status(owner_context, store, delivery_order.order_number, 'READY')

        with pytest.raises(PreconditionFailed):
            workflow.update_order_status(owner_context, store, delivery_order.order_number, 'COMPLETED')

        delivery_order.refresh_from_db()
        assert delivery_order.status == Order.Status.READY
        assert Order.Status.COMPLETED not in workflow.allowed_order_transitions(delivery_order)

    def test_delivery_full_path(self, store, owner_context, delivery_order):
        self.resolve_items(owner_context, store, delivery_order)
        for new_status in ['READY', 'DELIVERING', 'COMPLETED']:
            order = workflow.update_order_status(owner_context, store, delivery_order.order_number, new_status)
            assert order.status == new_status

    def test_pending_cannot_jump_to_completed(self, store, owner_context, pickup_order):
        self.resolve_items(owner_context, store, pickup_order)
        with pytest.raises(PreconditionFailed):
            workflow.update_order_status(owner_context, store, pickup_order.order_number, 'COMPLETED')

    def test_cancel_from_open_statuses(self, store, owner_context, pickup_order, delivery_order):
        order = workflow.update_order_status(owner_context, store, pickup_order.order_number, 'CANCELLED')
        assert order.status == Order.Status.CANCELLED

        self.resolve_items(owner_context, store, delivery_order)
        workflow.update_order_status(owner_context, store, delivery_order.order_number, 'READY')
        workflow.update_order_status(owner_context, store, delivery_order.order_number, 'DELIVERING')
        order = workflow.update_order_status(owner_context, store, delivery_order.order_number, 'CANCELLED')
        assert order.status == Order.Status.CANCELLED

    def test_terminal_statuses_are_final(self, store, owner_context, pickup_order):
        workflow.update_order_status(owner_context, store, pickup_order.order_number, 'CANCELLED')
        for new_status in ['PENDING', 'READY', 'COMPLETED']:
            with pytest.raises(PreconditionFailed):
                workflow.update_order_status(owner_context, store, pickup_order.order_number, new_status)

    def test_status_change_leaves_other_fields(self, store, owner_context, pickup_order):
        self.resolve_items(owner_context, store, pickup_order)
        pickup_order.refresh_from_db()
        before = (pickup_order.total, pickup_order.access_token, pickup_order.delivery_type, pickup_order.notes)

        order = workflow.update_order_status(owner_context, store, pickup_order.order_number, 'READY')
        order.refresh_from_db()
        assert (order.total, order.access_token, order.delivery_type, order.notes) == before

    def test_invalid_status_rejected(self, store, owner_context, pickup_order):
        with pytest.raises(ValidationError):
            workflow.update_order_status(owner_context, store, pickup_order.order_number, 'SHIPPED')

    def test_unknown_order_not_found(self, store, owner_context):
        with pytest.raises(OrderNotFound):
            workflow.update_order_status(owner_context, store, '000404', 'CANCELLED')

    def test_owner_of_other_store_denied(self, store, store2_owner_context, pickup_order):
        with pytest.raises(StoreAccessDenied):
            workflow.update_order_status(store2_owner_context, store, pickup_order.order_number, 'CANCELLED')

    def test_allowed_transitions(self, pickup_order, delivery_order):
        assert workflow.allowed_order_transitions(pickup_order) == ['CANCELLED', 'READY']

        pickup_order.status = Order.Status.READY
        delivery_order.status = Order.Status.READY
        assert workflow.allowed_order_transitions(pickup_order) == ['CANCELLED', 'COMPLETED']
        assert workflow.allowed_order_transitions(delivery_order) == ['CANCELLED', 'DELIVERING']

        pickup_order.status = Order.Status.COMPLETED
        assert workflow.allowed_order_transitions(pickup_order) == []


# ============== Customer Read Tests ==============

@pytest.mark.django_db
class TestGetCustomerOrder:
    """Test cases for token-gated reads"""

    def test_valid_token(self, store, pickup_order):
        order = workflow.get_customer_order(store, pickup_order.order_number, pickup_order.access_token)
        assert order.pk == pickup_order.pk

    @pytest.mark.parametrize('token', [None, '', 'wrong-token'])
    def test_bad_token_not_found(self, store, pickup_order, token):
        with pytest.raises(OrderNotFound):
            workflow.get_customer_order(store, pickup_order.order_number, token)

    def test_unknown_order_not_found(self, store, pickup_order):
        with pytest.raises(OrderNotFound):
            workflow.get_customer_order(store, '999999', pickup_order.access_token)

    def test_token_bound_to_store(self, store2, pickup_order):
        with pytest.raises(OrderNotFound):
            workflow.get_customer_order(store2, pickup_order.order_number, pickup_order.access_token)


# ============== Order API Tests ==============

@pytest.mark.django_db
class TestOrderCreateAPI:
    """Test cases for POST /api/<store_slug>/orders/"""

    def payload(self, order_items, customer_data, delivery_type='DELIVERY'):
        return {
            'customer': customer_data,
            'delivery_type': delivery_type,
            'notes': 'Ring the bell',
            'items': order_items,
        }

    def test_create_order(self, api_client, store, order_items, customer_data):
        response = api_client.post(
            f'/api/{store.slug}/orders/', self.payload(order_items, customer_data), format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['order_number'] == '000001'
        assert Decimal(response.data['total']) == Decimal('9500.00')
        order = Order.objects.get(store=store, order_number='000001')
        assert response.data['access_token'] == order.access_token
        assert order.notes == 'Ring the bell'
        assert order.delivery_type == Order.DeliveryType.DELIVERY

    def test_create_order_empty_items(self, api_client, store, customer_data):
        response = api_client.post(
            f'/api/{store.slug}/orders/', self.payload([], customer_data), format='json'
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert Order.objects.count() == 0

    def test_create_order_missing_customer_phone(self, api_client, store, order_items):
        response = api_client.post(
            f'/api/{store.slug}/orders/', self.payload(order_items, {'name': 'Ana'}), format='json'
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_create_order_invalid_delivery_type(self, api_client, store, order_items, customer_data):
        response = api_client.post(
            f'/api/{store.slug}/orders/', self.payload(order_items, customer_data, 'DRONE'), format='json'
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_create_order_stale_price(self, api_client, store, order_items, customer_data):
        order_items[0]['price'] = '1.00'
        response = api_client.post(
            f'/api/{store.slug}/orders/', self.payload(order_items, customer_data), format='json'
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'items' in response.data

    def test_create_order_inactive_store(self, api_client, inactive_store, order_items, customer_data):
        response = api_client.post(
            f'/api/{inactive_store.slug}/orders/', self.payload(order_items, customer_data), format='json'
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_create_order_unknown_store(self, api_client, order_items, customer_data):
        response = api_client.post(
            '/api/no-such-store/orders/', self.payload(order_items, customer_data), format='json'
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestCustomerOrderDetailAPI:
    """Test cases for GET /api/<store_slug>/orders/<order_number>/?token="""

    def test_read_with_token(self, api_client, store, pickup_order):
        response = api_client.get(order_url(store, pickup_order.order_number), {'token': pickup_order.access_token})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['order_number'] == pickup_order.order_number
        assert response.data['status'] == 'PENDING'
        assert response.data['customer']['phone'] == '3001234567'
        assert len(response.data['items']) == 2
        assert Decimal(response.data['total']) == Decimal('9500.00')
        assert 'access_token' not in response.data

    def test_repeated_reads_identical(self, api_client, store, pickup_order):
        url = order_url(store, pickup_order.order_number)
        first = api_client.get(url, {'token': pickup_order.access_token})
        second = api_client.get(url, {'token': pickup_order.access_token})
        assert first.status_code == status.HTTP_200_OK
        assert first.json() == second.json()

    def test_wrong_token_same_as_missing_order(self, api_client, store, pickup_order):
        wrong = api_client.get(order_url(store, pickup_order.order_number), {'token': 'wrong'})
        missing_token = api_client.get(order_url(store, pickup_order.order_number))
        unknown = api_client.get(order_url(store, '999999'), {'token': pickup_order.access_token})

        assert wrong.status_code == status.HTTP_404_NOT_FOUND
        assert missing_token.status_code == status.HTTP_404_NOT_FOUND
        assert unknown.status_code == status.HTTP_404_NOT_FOUND
        assert wrong.json() == missing_token.json() == unknown.json()

    def test_read_reflects_status_changes(self, api_client, store, owner_context, pickup_order):
        milk = pickup_order.items.get(measurement_unit__abbreviation='un')
        workflow.update_item_status(owner_context, store, pickup_order.order_number, milk.id, 'UNAVAILABLE')

        response = api_client.get(order_url(store, pickup_order.order_number), {'token': pickup_order.access_token})
        assert Decimal(response.data['total']) == Decimal('5000.00')
        statuses = {item['id']: item['item_status'] for item in response.data['items']}
        assert statuses[milk.id] == 'UNAVAILABLE'


@pytest.mark.django_db
class TestStaffOrderAPI:
    """Test cases for the store owner fulfillment endpoints"""

    def test_list_orders(self, owner_client, store, pickup_order, delivery_order):
        response = owner_client.get(f'/api/{store.slug}/admin/orders/')

        assert response.status_code == status.HTTP_200_OK
        assert [o['order_number'] for o in response.data] == ['000002', '000001']
        assert response.data[0]['next_statuses'] == ['CANCELLED', 'READY']
        assert len(response.data[0]['items']) == 2

    def test_list_orders_status_filter(self, owner_client, store, owner_context, pickup_order, delivery_order):
        workflow.update_order_status(owner_context, store, delivery_order.order_number, 'CANCELLED')

        response = owner_client.get(f'/api/{store.slug}/admin/orders/', {'status': 'cancelled'})
        assert [o['order_number'] for o in response.data] == [delivery_order.order_number]

        response = owner_client.get(f'/api/{store.slug}/admin/orders/', {'status': 'all'})
        assert len(response.data) == 2

    def test_list_orders_invalid_status_filter(self, owner_client, store, pickup_order):
        response = owner_client.get(f'/api/{store.slug}/admin/orders/', {'status': 'lost'})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_list_orders_other_store_denied(self, store2_owner_client, store, pickup_order):
        response = store2_owner_client.get(f'/api/{store.slug}/admin/orders/')
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_list_orders_unauthenticated(self, api_client, store):
        response = api_client.get(f'/api/{store.slug}/admin/orders/')
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_list_orders_super_admin_denied(self, super_admin_client, store, pickup_order):
        response = super_admin_client.get(f'/api/{store.slug}/admin/orders/')
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_update_item_status(self, owner_client, store, pickup_order):
        milk = pickup_order.items.get(measurement_unit__abbreviation='un')
        response = owner_client.patch(
            item_status_url(store, pickup_order.order_number, milk.id),
            {'item_status': 'UNAVAILABLE'},
            format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['item_status'] == 'UNAVAILABLE'
        pickup_order.refresh_from_db()
        assert pickup_order.total == Decimal('5000.00')

    def test_update_item_status_invalid(self, owner_client, store, pickup_order):
        item = pickup_order.items.first()
        response = owner_client.patch(
            item_status_url(store, pickup_order.order_number, item.id),
            {'item_status': 'LOST'},
            format='json'
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.parametrize('body', [['READY'], 'READY', 42])
    def test_update_item_status_non_object_body(self, owner_client, store, pickup_order, body):
        item = pickup_order.items.first()
        response = owner_client.patch(
            item_status_url(store, pickup_order.order_number, item.id), body, format='json'
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        item.refresh_from_db()
        assert item.item_status == OrderItem.ItemStatus.PENDING

    def test_update_item_status_disallowed_transition(self, owner_client, store, pickup_order):
        item = pickup_order.items.first()
        url = item_status_url(store, pickup_order.order_number, item.id)
        owner_client.patch(url, {'item_status': 'UNAVAILABLE'}, format='json')

        response = owner_client.patch(url, {'item_status': 'READY'}, format='json')
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['detail'].code == 'precondition_failed'

    def test_update_item_status_unknown_item(self, owner_client, store, pickup_order):
        response = owner_client.patch(
            item_status_url(store, pickup_order.order_number, 999999),
            {'item_status': 'READY'},
            format='json'
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_update_item_status_other_store_denied(self, store2_owner_client, store, pickup_order):
        item = pickup_order.items.first()
        response = store2_owner_client.patch(
            item_status_url(store, pickup_order.order_number, item.id),
            {'item_status': 'READY'},
            format='json'
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN
        item.refresh_from_db()
        assert item.item_status == OrderItem.ItemStatus.PENDING

    def test_update_order_status_blocked(self, owner_client, store, pickup_order):
        response = owner_client.patch(
            order_status_url(store, pickup_order.order_number), {'status': 'READY'}, format='json'
        )
        assert response.status_code == status.HTTP_409_CONFLICT

    def test_update_order_status_pickup_flow(self, owner_client, store, pickup_order):
        for item in pickup_order.items.all():
            owner_client.patch(
                item_status_url(store, pickup_order.order_number, item.id), {'item_status': 'READY'}, format='json'
            )

        response = owner_client.patch(
            order_status_url(store, pickup_order.order_number), {'status': 'READY'}, format='json'
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'READY'
        assert response.data['next_statuses'] == ['CANCELLED', 'COMPLETED']

        response = owner_client.patch(
            order_status_url(store, pickup_order.order_number), {'status': 'COMPLETED'}, format='json'
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'COMPLETED'
        assert response.data['next_statuses'] == []

    def test_update_order_status_invalid(self, owner_client, store, pickup_order):
        response = owner_client.patch(
            order_status_url(store, pickup_order.order_number), {'status': 'LOST'}, format='json'
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.parametrize('body', [['CANCELLED'], 'CANCELLED'])
    def test_update_order_status_non_object_body(self, owner_client, store, pickup_order, body):
        response = owner_client.patch(order_status_url(store, pickup_order.order_number), body, format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        pickup_order.refresh_from_db()
        assert pickup_order.status == Order.Status.PENDING

    def test_update_order_status_unknown_order(self, owner_client, store):
        response = owner_client.patch(order_status_url(store, '999999'), {'status': 'READY'}, format='json')
        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestPlatformOrderAPI:
    """Test cases for the superadmin order endpoints"""

    def test_list_all_orders(self, super_admin_client, store, store2, pickup_order, store2_apple, unit_kg,
                             customer_data):
        workflow.create_order(store2, customer=customer_data, delivery_type='PICKUP', items=[
            {'store_product_id': store2_apple.id, 'measurement_unit_id': unit_kg.id,
             'quantity': '1', 'price': '2700.00'},
        ])

        response = super_admin_client.get('/api/admin/orders/')
        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 2
        assert {o['store_slug'] for o in response.data} == {store.slug, store2.slug}

        response = super_admin_client.get('/api/admin/orders/', {'store': store.id})
        assert len(response.data) == 1
        assert response.data[0]['item_count'] == 2

    def test_list_orders_status_filter(self, super_admin_client, pickup_order):
        response = super_admin_client.get('/api/admin/orders/', {'status': 'completed'})
        assert response.data == []

        response = super_admin_client.get('/api/admin/orders/', {'status': 'pending'})
        assert [o['order_number'] for o in response.data] == [pickup_order.order_number]

    def test_list_orders_invalid_status_filter(self, super_admin_client, pickup_order):
        response = super_admin_client.get('/api/admin/orders/', {'status': 'lost'})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.parametrize('url', ['/api/admin/orders/', '/api/admin/orders/stats/'])
    def test_non_numeric_store_filter_rejected(self, super_admin_client, pickup_order, url):
        response = super_admin_client.get(url, {'store': 'abc'})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_order_stats_for_one_store(self, super_admin_client, store, store2, pickup_order):
        response = super_admin_client.get('/api/admin/orders/stats/', {'store': store2.id})
        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_orders'] == 0
        assert response.data['total_revenue'] == '0'

    def test_store_owner_denied(self, owner_client):
        response = owner_client.get('/api/admin/orders/')
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_order_stats(self, super_admin_client, store, owner_context, pickup_order, delivery_order):
        workflow.update_order_status(owner_context, store, delivery_order.order_number, 'CANCELLED')

        response = super_admin_client.get('/api/admin/orders/stats/')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_orders'] == 2
        assert response.data['pending_orders'] == 1
        assert response.data['completed_orders'] == 0
        assert Decimal(response.data['total_revenue']) == Decimal('19000')


# ============== Management Command Tests ==============

@pytest.mark.django_db
class TestPopulateAccessTokens:
    """Test cases for the populate_access_tokens command"""

    def test_backfills_missing_tokens(self, pickup_order, delivery_order, settings):
        Order.objects.filter(pk=pickup_order.pk).update(access_token='')
        original = delivery_order.access_token

        call_command('populate_access_tokens')

        pickup_order.refresh_from_db()
        delivery_order.refresh_from_db()
        assert len(pickup_order.access_token) == settings.ORDER_ACCESS_TOKEN_LENGTH
        assert delivery_order.access_token == original
