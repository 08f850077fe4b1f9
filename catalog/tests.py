"""
Tests for Catalog Module.
Tests for: global catalog (superadmin), store catalog management (owner)
and the public storefront catalog.
"""
import pytest
from decimal import Decimal
from rest_framework import status

from catalog.models import (
    MasterCategory, MasterProduct, StoreProduct, StoreProductPrice
)


# ============== Model Tests ==============

@pytest.mark.django_db
class TestCatalogModels:
    """Test cases for catalog models"""

    def test_store_product_sellable(self, store_apple, apple):
        assert store_apple.is_sellable

        apple.is_active = False
        apple.save()
        store_apple.refresh_from_db()
        assert not store_apple.is_sellable

    def test_store_product_unavailable_not_sellable(self, store_apple):
        store_apple.is_available = False
        assert not store_apple.is_sellable

    def test_unit_in_use(self, unit_kg, db):
        assert not unit_kg.is_in_use
        MasterProduct.objects.create(
            name='Pear',
            slug='pear',
            category=MasterCategory.objects.create(name='Other', slug='other')
        ).measurements.create(measurement_unit=unit_kg)
        assert unit_kg.is_in_use

    def test_str_representations(self, store_apple, unit_kg):
        price = store_apple.prices.get(measurement_unit=unit_kg)
        assert str(store_apple) == 'green-market - Red Apple'
        assert str(price) == 'green-market - Red Apple - kg: 2500.00'
        assert str(unit_kg) == 'Kilogram (kg)'


# ============== Global Catalog API Tests ==============

@pytest.mark.django_db
class TestMasterCatalogAPI:
    """Test cases for /api/admin/categories|measurement-units|products/"""

    def test_create_category(self, super_admin_client):
        response = super_admin_client.post('/api/admin/categories/', {
            'name': 'Bakery',
            'slug': 'bakery',
            'display_order': 3,
        }, format='json')
        assert response.status_code == status.HTTP_201_CREATED
        assert MasterCategory.objects.filter(slug='bakery').exists()

    def test_delete_category_with_products_blocked(self, super_admin_client, category, apple):
        response = super_admin_client.delete(f'/api/admin/categories/{category.id}/')
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert MasterCategory.objects.filter(pk=category.pk).exists()

    def test_delete_empty_category(self, super_admin_client, category):
        response = super_admin_client.delete(f'/api/admin/categories/{category.id}/')
        assert response.status_code == status.HTTP_204_NO_CONTENT

    def test_filter_units_by_type(self, super_admin_client, unit_kg, unit_un):
        response = super_admin_client.get('/api/admin/measurement-units/', {'unit_type': 'WEIGHT'})
        assert response.status_code == status.HTTP_200_OK
        assert [u['abbreviation'] for u in response.data] == ['kg']

    def test_delete_unit_in_use_blocked(self, super_admin_client, apple, unit_kg):
        response = super_admin_client.delete(f'/api/admin/measurement-units/{unit_kg.id}/')
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_create_master_product(self, super_admin_client, category):
        response = super_admin_client.post('/api/admin/products/', {
            'name': 'Green Pear',
            'slug': 'green-pear',
            'category': category.id,
        }, format='json')
        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['category_name'] == 'Fruits'

    def test_delete_product_sold_by_store_blocked(self, super_admin_client, apple, store_apple):
        response = super_admin_client.delete(f'/api/admin/products/{apple.id}/')
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_add_measurement(self, super_admin_client, milk, unit_kg):
        response = super_admin_client.post(f'/api/admin/products/{milk.id}/measurements/', {
            'measurement_unit': unit_kg.id,
            'min_quantity': '0.250',
            'step_quantity': '0.250',
        }, format='json')
        assert response.status_code == status.HTTP_201_CREATED
        assert milk.measurements.count() == 2

    def test_duplicate_measurement_rejected(self, super_admin_client, milk, unit_un):
        response = super_admin_client.post(f'/api/admin/products/{milk.id}/measurements/', {
            'measurement_unit': unit_un.id,
        }, format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_store_owner_denied(self, owner_client):
        response = owner_client.get('/api/admin/categories/')
        assert response.status_code == status.HTTP_403_FORBIDDEN


# ============== Store Catalog API Tests ==============

@pytest.mark.django_db
class TestStoreCatalogAPI:
    """Test cases for /api/<store_slug>/admin/products/"""

    def test_list_store_products(self, owner_client, store, store_apple, store_milk, store2_apple):
        response = owner_client.get(f'/api/{store.slug}/admin/products/')
        assert response.status_code == status.HTTP_200_OK
        assert {p['id'] for p in response.data} == {store_apple.id, store_milk.id}

    def test_available_master_products(self, owner_client, store, store_apple, milk):
        response = owner_client.get(f'/api/{store.slug}/admin/products/available/')
        assert [p['id'] for p in response.data] == [milk.id]

    def test_available_master_products_by_category(self, owner_client, store, apple, milk, category2):
        response = owner_client.get(f'/api/{store.slug}/admin/products/available/', {'category': category2.id})
        assert response.status_code == status.HTTP_200_OK
        assert [p['id'] for p in response.data] == [milk.id]

    def test_available_master_products_bad_category(self, owner_client, store, milk):
        response = owner_client.get(f'/api/{store.slug}/admin/products/available/', {'category': 'abc'})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_add_store_product(self, owner_client, store, milk, unit_un):
        response = owner_client.post(f'/api/{store.slug}/admin/products/add/', {
            'master_product': milk.id,
            'prices': [{'measurement_unit': unit_un.id, 'price': '4200.00'}],
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        store_product = StoreProduct.objects.get(store=store, master_product=milk)
        assert store_product.prices.get().price == Decimal('4200.00')

    def test_add_store_product_twice_rejected(self, owner_client, store, store_apple, apple, unit_kg):
        response = owner_client.post(f'/api/{store.slug}/admin/products/add/', {
            'master_product': apple.id,
            'prices': [{'measurement_unit': unit_kg.id, 'price': '100.00'}],
        }, format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_add_store_product_without_prices_rejected(self, owner_client, store, milk):
        response = owner_client.post(f'/api/{store.slug}/admin/products/add/', {
            'master_product': milk.id,
            'prices': [],
        }, format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not StoreProduct.objects.filter(master_product=milk).exists()

    def test_toggle_availability(self, owner_client, store, store_apple):
        response = owner_client.patch(
            f'/api/{store.slug}/admin/products/{store_apple.id}/', {'is_available': False}, format='json'
        )
        assert response.status_code == status.HTTP_200_OK
        store_apple.refresh_from_db()
        assert not store_apple.is_available

    def test_remove_product_in_orders_blocked(self, owner_client, store, store_apple, pickup_order):
        response = owner_client.delete(f'/api/{store.slug}/admin/products/{store_apple.id}/')
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_remove_product_without_orders(self, owner_client, store, store_apple):
        response = owner_client.delete(f'/api/{store.slug}/admin/products/{store_apple.id}/')
        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not StoreProduct.objects.filter(pk=store_apple.pk).exists()

    def test_product_of_other_store_not_found(self, owner_client, store, store2_apple):
        response = owner_client.get(f'/api/{store.slug}/admin/products/{store2_apple.id}/')
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_add_duplicate_price_rejected(self, owner_client, store, store_apple, unit_kg):
        response = owner_client.post(f'/api/{store.slug}/admin/products/{store_apple.id}/prices/', {
            'measurement_unit': unit_kg.id,
            'price': '10.00',
        }, format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_update_price(self, owner_client, store, store_milk):
        price = store_milk.prices.get()
        response = owner_client.patch(
            f'/api/{store.slug}/admin/products/{store_milk.id}/prices/{price.id}/',
            {'price': '4800.00'},
            format='json'
        )
        assert response.status_code == status.HTTP_200_OK
        price.refresh_from_db()
        assert price.price == Decimal('4800.00')

    def test_other_store_owner_denied(self, store2_owner_client, store, store_apple):
        response = store2_owner_client.get(f'/api/{store.slug}/admin/products/')
        assert response.status_code == status.HTTP_403_FORBIDDEN


# ============== Public Catalog API Tests ==============

@pytest.mark.django_db
class TestPublicCatalogAPI:
    """Test cases for GET /api/<store_slug>/products/"""

    def test_catalog_grouped_by_category(self, api_client, store, store_apple, store_milk):
        response = api_client.get(f'/api/{store.slug}/products/')

        assert response.status_code == status.HTTP_200_OK
        assert [c['slug'] for c in response.data] == ['fruits', 'dairy']
        apple_entry = response.data[0]['products'][0]
        assert apple_entry['master_product']['name'] == 'Red Apple'
        kg_price = next(p for p in apple_entry['prices'] if p['unit']['abbreviation'] == 'kg')
        assert kg_price['min_quantity'] == '0.500'
        assert kg_price['step_quantity'] == '0.500'

    def test_catalog_hides_unsellable(self, api_client, store, store_apple, store_milk, milk, unit_kg):
        milk.is_active = False
        milk.save()
        StoreProductPrice.objects.filter(store_product=store_apple, measurement_unit=unit_kg).update(is_active=False)

        response = api_client.get(f'/api/{store.slug}/products/')
        assert [c['slug'] for c in response.data] == ['fruits']
        prices = response.data[0]['products'][0]['prices']
        assert [p['unit']['abbreviation'] for p in prices] == ['un']

    def test_catalog_inactive_store(self, api_client, inactive_store):
        response = api_client.get(f'/api/{inactive_store.slug}/products/')
        assert response.status_code == status.HTTP_404_NOT_FOUND
