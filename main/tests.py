"""
Tests for project level endpoints and management commands.
"""
import pytest
from django.core.management import call_command
from rest_framework import status

from catalog.models import MasterCategory, MeasurementUnit, MasterProduct, StoreProduct
from stores.models import Store
from users.models import User


def test_health_check(client):
    response = client.get('/api/health/')
    assert response.status_code == status.HTTP_200_OK
    assert response.json()['status'] == 'healthy'


@pytest.mark.django_db
class TestSeedDemoData:
    """Test cases for the seed_demo_data command"""

    def test_seed_creates_demo_store(self):
        call_command('seed_demo_data')

        store = Store.objects.get(slug='demo-store')
        owner = User.objects.get(username='owner@demo-store')
        admin = User.objects.get(username='admin')
        assert owner.store == store
        assert owner.check_password('owner123')
        assert admin.is_super_admin
        assert MasterCategory.objects.count() == 7
        assert MeasurementUnit.objects.count() == 5
        assert StoreProduct.objects.filter(store=store).count() == 6
        assert all(sp.prices.exists() for sp in StoreProduct.objects.filter(store=store))

    def test_seed_is_idempotent(self):
        call_command('seed_demo_data')
        call_command('seed_demo_data')

        assert Store.objects.filter(slug='demo-store').count() == 1
        assert MasterProduct.objects.count() == 12
        assert StoreProduct.objects.count() == 6
