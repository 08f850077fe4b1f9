from django.db.models import Count, Sum, Q
from rest_framework import generics, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.response import Response

from stores.utils import get_active_store
from users.mixins import get_auth_context, require_store_for_request
from users.permissions import IsSuperAdmin, IsStoreOwner
from . import workflow
from .models import Order
from .serializers import (
    OrderSerializer, StaffOrderSerializer, PlatformOrderSerializer,
    OrderItemSerializer, OrderCreateSerializer, ItemStatusUpdateSerializer,
    OrderStatusUpdateSerializer
)

OPEN_STATUSES = [Order.Status.PENDING, Order.Status.READY, Order.Status.DELIVERING]


def parse_store_filter(query_params):
    """Return the ?store= id as an int, or None when absent"""
    store_id = query_params.get('store')
    if not store_id:
        return None
    try:
        return int(store_id)
    except ValueError:
        raise ValidationError({'store': f'"{store_id}" is not a valid store id.'})


# ============== Customer ==============

@api_view(['POST'])
@permission_classes([AllowAny])
def create_order(request, store_slug):
    """Checkout: place an order with its items"""
    store = get_active_store(store_slug)
    serializer = OrderCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    order = workflow.create_order(
        store,
        customer=serializer.validated_data['customer'],
        delivery_type=serializer.validated_data['delivery_type'],
        items=serializer.validated_data['items'],
        notes=serializer.validated_data.get('notes')
    )

    return Response({
        'order_number': order.order_number,
        'access_token': order.access_token,
        'total': str(order.total),
    }, status=status.HTTP_201_CREATED)


class CustomerOrderDetailView(generics.RetrieveAPIView):
    """Order tracking for customers, authorized by the order's access token"""
    serializer_class = OrderSerializer
    permission_classes = [AllowAny]

    def get_object(self):
        store = get_active_store(self.kwargs['store_slug'])
        return workflow.get_customer_order(
            store,
            self.kwargs['order_number'],
            self.request.query_params.get('token')
        )


# ============== Store staff ==============

class StoreOrderListView(generics.ListAPIView):
    """Orders of the owner's store, newest first"""
    serializer_class = StaffOrderSerializer
    permission_classes = [IsAuthenticated, IsStoreOwner]

    def get_queryset(self):
        store = require_store_for_request(self.request, self.kwargs['store_slug'])
        return workflow.list_store_orders(
            get_auth_context(self.request),
            store,
            status=self.request.query_params.get('status')
        )


@api_view(['PATCH'])
@permission_classes([IsAuthenticated, IsStoreOwner])
def update_item_status(request, store_slug, order_number, item_id):
    """Mark an item READY or UNAVAILABLE, or undo it back to PENDING"""
    store = require_store_for_request(request, store_slug)
    serializer = ItemStatusUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    item = workflow.update_item_status(
        get_auth_context(request),
        store,
        order_number,
        item_id,
        serializer.validated_data['item_status']
    )
    return Response(OrderItemSerializer(item).data)


@api_view(['PATCH'])
@permission_classes([IsAuthenticated, IsStoreOwner])
def update_order_status(request, store_slug, order_number):
    """Advance the order through its status workflow"""
    store = require_store_for_request(request, store_slug)
    serializer = OrderStatusUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    order = workflow.update_order_status(
        get_auth_context(request),
        store,
        order_number,
        serializer.validated_data['status']
    )
    order = workflow.order_detail_queryset().get(pk=order.pk)
    return Response(StaffOrderSerializer(order).data)


# ============== Superadmin ==============

class PlatformOrderListView(generics.ListAPIView):
    """Orders across all stores"""
    serializer_class = PlatformOrderSerializer
    permission_classes = [IsAuthenticated, IsSuperAdmin]

    def get_queryset(self):
        queryset = Order.objects.select_related('store', 'customer').annotate(
            item_count=Count('items')
        ).order_by('-created_at', '-id')

        store_id = parse_store_filter(self.request.query_params)
        if store_id is not None:
            queryset = queryset.filter(store_id=store_id)

        status_filter = self.request.query_params.get('status')
        if status_filter and status_filter.lower() != 'all':
            status_filter = status_filter.upper()
            if status_filter not in Order.Status.values:
                raise ValidationError({'status': f'"{status_filter}" is not a valid order status.'})
            queryset = queryset.filter(status=status_filter)

        return queryset


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsSuperAdmin])
def order_stats(request):
    """Order statistics across all stores, or one store"""
    orders = Order.objects.all()
    store_id = parse_store_filter(request.query_params)
    if store_id is not None:
        orders = orders.filter(store_id=store_id)

    stats = orders.aggregate(
        total_orders=Count('id'),
        total_revenue=Sum('total'),
        pending_orders=Count('id', filter=Q(status__in=OPEN_STATUSES)),
        completed_orders=Count('id', filter=Q(status=Order.Status.COMPLETED)),
    )

    return Response({
        'total_orders': stats['total_orders'],
        'total_revenue': str(stats['total_revenue'] or 0),
        'pending_orders': stats['pending_orders'],
        'completed_orders': stats['completed_orders'],
    })
