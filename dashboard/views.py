# Dashboard views for store and platform statistics
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from django.db.models import Sum, Count, Q
from django.utils import timezone
from datetime import timedelta
from decimal import Decimal

from catalog.models import StoreProduct
from orders.models import Order
from stores.models import Store
from users.mixins import require_store_for_request
from users.permissions import IsSuperAdmin, IsStoreOwner

OPEN_STATUSES = [Order.Status.PENDING, Order.Status.READY, Order.Status.DELIVERING]


def summarize_orders(orders):
    """Counts and revenue for a queryset of orders. Cancelled orders bring no revenue."""
    stats = orders.aggregate(
        total_orders=Count('id'),
        total_sales=Sum('total', filter=~Q(status=Order.Status.CANCELLED)),
        pending_orders=Count('id', filter=Q(status__in=OPEN_STATUSES)),
        completed_orders=Count('id', filter=Q(status=Order.Status.COMPLETED)),
    )
    stats['total_sales'] = str(stats['total_sales'] or Decimal('0.00'))
    return stats


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStoreOwner])
def store_dashboard(request, store_slug):
    """
    Dashboard for the store owner
    """
    store = require_store_for_request(request, store_slug)
    orders = Order.objects.filter(store=store)
    today = timezone.localdate()
    week_ago = today - timedelta(days=7)

    by_status = {choice: 0 for choice in Order.Status.values}
    for row in orders.order_by().values('status').annotate(count=Count('id')):
        by_status[row['status']] = row['count']

    today_stats = orders.filter(created_at__date=today).exclude(
        status=Order.Status.CANCELLED
    ).aggregate(count=Count('id'), total=Sum('total'))

    recent_orders = [
        {
            'order_number': order.order_number,
            'customer_name': order.customer.name,
            'status': order.status,
            'delivery_type': order.delivery_type,
            'total': str(order.total),
            'created_at': order.created_at,
        }
        for order in orders.select_related('customer').order_by('-created_at', '-id')[:5]
    ]

    return Response({
        'store': {'id': store.id, 'name': store.name, 'slug': store.slug},
        **summarize_orders(orders),
        'today_orders': {
            'count': today_stats['count'],
            'total': str(today_stats['total'] or Decimal('0.00')),
        },
        'week_orders': orders.filter(created_at__date__gte=week_ago).count(),
        'orders_by_status': by_status,
        'recent_orders': recent_orders,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsSuperAdmin])
def platform_dashboard(request):
    """
    Dashboard for the superadmin: every store at a glance
    """
    stores = Store.objects.annotate(
        order_count=Count('orders'),
        sales=Sum('orders__total', filter=~Q(orders__status=Order.Status.CANCELLED)),
    ).order_by('name')
    product_counts = dict(
        StoreProduct.objects.order_by().values_list('store').annotate(count=Count('id'))
    )

    return Response({
        'total_stores': stores.count(),
        'active_stores': stores.filter(is_active=True).count(),
        **summarize_orders(Order.objects.all()),
        'stores': [
            {
                'id': store.id,
                'name': store.name,
                'slug': store.slug,
                'is_active': store.is_active,
                'order_count': store.order_count,
                'total_sales': str(store.sales or Decimal('0.00')),
                'product_count': product_counts.get(store.id, 0),
            }
            for store in stores
        ],
    })
