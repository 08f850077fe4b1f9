"""
Tests for Dashboard Module.
Tests for: store owner dashboard and superadmin platform dashboard.
"""
import pytest
from decimal import Decimal
from rest_framework import status

from orders import workflow


@pytest.mark.django_db
class TestStoreDashboard:
    """Test cases for GET /api/<store_slug>/admin/dashboard/"""

    def test_dashboard_summary(self, owner_client, store, owner_context, pickup_order, delivery_order):
        workflow.update_order_status(owner_context, store, delivery_order.order_number, 'CANCELLED')

        response = owner_client.get(f'/api/{store.slug}/admin/dashboard/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['store']['slug'] == store.slug
        assert response.data['total_orders'] == 2
        assert response.data['pending_orders'] == 1
        assert Decimal(response.data['total_sales']) == Decimal('9500')
        assert response.data['today_orders']['count'] == 1
        assert response.data['week_orders'] == 2
        assert response.data['orders_by_status']['PENDING'] == 1
        assert response.data['orders_by_status']['CANCELLED'] == 1
        assert response.data['orders_by_status']['COMPLETED'] == 0
        assert [o['order_number'] for o in response.data['recent_orders']] == ['000002', '000001']

    def test_empty_dashboard(self, owner_client, store):
        response = owner_client.get(f'/api/{store.slug}/admin/dashboard/')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_orders'] == 0
        assert response.data['total_sales'] == '0.00'
        assert response.data['recent_orders'] == []

    def test_other_store_denied(self, store2_owner_client, store):
        response = store2_owner_client.get(f'/api/{store.slug}/admin/dashboard/')
        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestPlatformDashboard:
    """Test cases for GET /api/admin/dashboard/"""

    def test_platform_summary(self, super_admin_client, store, store2, inactive_store, pickup_order, store2_apple):
        response = super_admin_client.get('/api/admin/dashboard/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_stores'] == 3
        assert response.data['active_stores'] == 2
        assert response.data['total_orders'] == 1

        stores = {s['slug']: s for s in response.data['stores']}
        assert stores[store.slug]['order_count'] == 1
        assert stores[store.slug]['product_count'] == 2
        assert Decimal(stores[store.slug]['total_sales']) == Decimal('9500')
        assert stores[store2.slug]['order_count'] == 0
        assert stores[store2.slug]['product_count'] == 1
        assert stores[inactive_store.slug]['product_count'] == 0

    def test_store_owner_denied(self, owner_client):
        response = owner_client.get('/api/admin/dashboard/')
        assert response.status_code == status.HTTP_403_FORBIDDEN
