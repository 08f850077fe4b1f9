"""
Pytest fixtures for storefront API tests.
Provides common test data and utilities for all test modules.
"""
import pytest
from decimal import Decimal
from datetime import timedelta
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from oauth2_provider.models import Application, AccessToken
from oauthlib.common import generate_token
from django.utils import timezone

User = get_user_model()


# ============== OAuth2 Application Fixture ==============

@pytest.fixture
def oauth_application(db):
    """Create OAuth2 application for testing - must match the name used in login_view"""
    return Application.objects.create(
        name='storefront-frontend',
        client_type=Application.CLIENT_PUBLIC,
        authorization_grant_type=Application.GRANT_PASSWORD,
    )


# ============== Store Fixtures ==============

@pytest.fixture
def store(db):
    """Create a test store"""
    from stores.models import Store
    return Store.objects.create(slug='green-market', name='Green Market', is_active=True)


@pytest.fixture
def store2(db):
    """Create a second test store for isolation tests"""
    from stores.models import Store
    return Store.objects.create(slug='corner-shop', name='Corner Shop', is_active=True)


@pytest.fixture
def inactive_store(db):
    """Create an inactive store"""
    from stores.models import Store
    return Store.objects.create(slug='closed-shop', name='Closed Shop', is_active=False)


# ============== User Fixtures ==============

@pytest.fixture
def super_admin(db, oauth_application):
    """Create a superadmin user (no store)"""
    return User.objects.create_user(
        username='superadmin',
        email='superadmin@test.com',
        password='testpass123',
        role=User.Role.SUPERADMIN,
        store=None
    )


@pytest.fixture
def store_owner(db, store, oauth_application):
    """Create the owner of the test store"""
    return User.objects.create_user(
        username='owner',
        email='owner@test.com',
        password='testpass123',
        role=User.Role.STORE_OWNER,
        store=store
    )


@pytest.fixture
def store2_owner(db, store2, oauth_application):
    """Create the owner of store2"""
    return User.objects.create_user(
        username='owner2',
        email='owner2@test.com',
        password='testpass123',
        role=User.Role.STORE_OWNER,
        store=store2
    )


@pytest.fixture
def inactive_store_owner(db, inactive_store, oauth_application):
    """Create the owner of the inactive store"""
    return User.objects.create_user(
        username='closed_owner',
        email='closed@test.com',
        password='testpass123',
        role=User.Role.STORE_OWNER,
        store=inactive_store
    )


# ============== Token Fixtures ==============

def create_access_token(user, application, scope='read write'):
    """Helper function to create access token"""
    expires = timezone.now() + timedelta(hours=1)
    return AccessToken.objects.create(
        user=user,
        application=application,
        token=generate_token(),
        expires=expires,
        scope=scope
    )


@pytest.fixture
def super_admin_token(super_admin, oauth_application):
    """Create access token for superadmin"""
    return create_access_token(super_admin, oauth_application)


@pytest.fixture
def owner_token(store_owner, oauth_application):
    """Create access token for the store owner"""
    return create_access_token(store_owner, oauth_application)


@pytest.fixture
def store2_owner_token(store2_owner, oauth_application):
    """Create access token for the store2 owner"""
    return create_access_token(store2_owner, oauth_application)


# ============== API Client Fixtures ==============

@pytest.fixture
def api_client():
    """Create API test client"""
    return APIClient()


@pytest.fixture
def super_admin_client(api_client, super_admin_token):
    """API client authenticated as superadmin"""
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {super_admin_token.token}')
    return api_client


@pytest.fixture
def owner_client(api_client, owner_token):
    """API client authenticated as the store owner"""
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {owner_token.token}')
    return api_client


@pytest.fixture
def store2_owner_client(api_client, store2_owner_token):
    """API client authenticated as the store2 owner"""
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {store2_owner_token.token}')
    return api_client


# ============== Auth Context Fixtures ==============

@pytest.fixture
def owner_context(store):
    """Authorization context of the test store owner"""
    from users.mixins import AuthContext
    return AuthContext(role=User.Role.STORE_OWNER, store_id=store.id)


@pytest.fixture
def store2_owner_context(store2):
    """Authorization context of the store2 owner"""
    from users.mixins import AuthContext
    return AuthContext(role=User.Role.STORE_OWNER, store_id=store2.id)


@pytest.fixture
def super_admin_context():
    from users.mixins import AuthContext
    return AuthContext(role=User.Role.SUPERADMIN)


# ============== Catalog Fixtures ==============

@pytest.fixture
def category(db):
    """Create a test category"""
    from catalog.models import MasterCategory
    return MasterCategory.objects.create(name='Fruits', slug='fruits', display_order=1)


@pytest.fixture
def category2(db):
    """Create a second test category"""
    from catalog.models import MasterCategory
    return MasterCategory.objects.create(name='Dairy', slug='dairy', display_order=2)


@pytest.fixture
def unit_kg(db):
    """Weight unit"""
    from catalog.models import MeasurementUnit
    return MeasurementUnit.objects.create(
        name='Kilogram',
        abbreviation='kg',
        unit_type=MeasurementUnit.UnitType.WEIGHT,
        base_unit='g',
        conversion_factor=Decimal('1000')
    )


@pytest.fixture
def unit_un(db):
    """Count unit"""
    from catalog.models import MeasurementUnit
    return MeasurementUnit.objects.create(
        name='Unit',
        abbreviation='un',
        unit_type=MeasurementUnit.UnitType.UNIT
    )


@pytest.fixture
def apple(db, category, unit_kg, unit_un):
    """Master product sold by weight or by unit"""
    from catalog.models import MasterProduct, ProductMeasurement
    product = MasterProduct.objects.create(
        name='Red Apple',
        slug='red-apple',
        description='Fresh red apples',
        category=category
    )
    ProductMeasurement.objects.create(
        master_product=product,
        measurement_unit=unit_kg,
        min_quantity=Decimal('0.5'),
        step_quantity=Decimal('0.5')
    )
    ProductMeasurement.objects.create(master_product=product, measurement_unit=unit_un)
    return product


@pytest.fixture
def milk(db, category2, unit_un):
    """Master product sold by unit"""
    from catalog.models import MasterProduct, ProductMeasurement
    product = MasterProduct.objects.create(
        name='Whole Milk',
        slug='whole-milk',
        category=category2
    )
    ProductMeasurement.objects.create(master_product=product, measurement_unit=unit_un)
    return product


@pytest.fixture
def store_apple(db, store, apple, unit_kg, unit_un):
    """Apple offered by the test store: 2500.00/kg and 800.00/un"""
    from catalog.models import StoreProduct, StoreProductPrice
    store_product = StoreProduct.objects.create(store=store, master_product=apple)
    StoreProductPrice.objects.create(store_product=store_product, measurement_unit=unit_kg, price=Decimal('2500.00'))
    StoreProductPrice.objects.create(store_product=store_product, measurement_unit=unit_un, price=Decimal('800.00'))
    return store_product


@pytest.fixture
def store_milk(db, store, milk, unit_un):
    """Milk offered by the test store: 4500.00/un"""
    from catalog.models import StoreProduct, StoreProductPrice
    store_product = StoreProduct.objects.create(store=store, master_product=milk)
    StoreProductPrice.objects.create(store_product=store_product, measurement_unit=unit_un, price=Decimal('4500.00'))
    return store_product


@pytest.fixture
def store2_apple(db, store2, apple, unit_kg):
    """Apple offered by store2: 2700.00/kg"""
    from catalog.models import StoreProduct, StoreProductPrice
    store_product = StoreProduct.objects.create(store=store2, master_product=apple)
    StoreProductPrice.objects.create(store_product=store_product, measurement_unit=unit_kg, price=Decimal('2700.00'))
    return store_product


# ============== Order Fixtures ==============

@pytest.fixture
def order_items(store_apple, store_milk, unit_kg, unit_un):
    """Checkout lines: 2 kg of apples and 1 milk, total 9500.00"""
    return [
        {
            'store_product_id': store_apple.id,
            'measurement_unit_id': unit_kg.id,
            'quantity': '2',
            'price': '2500.00',
        },
        {
            'store_product_id': store_milk.id,
            'measurement_unit_id': unit_un.id,
            'quantity': '1',
            'price': '4500.00',
        },
    ]


@pytest.fixture
def customer_data():
    return {'name': 'Ana Gomez', 'phone': '3001234567', 'address': 'Calle 10 # 5-20'}


@pytest.fixture
def pickup_order(db, store, order_items, customer_data):
    """Pending PICKUP order of the test store"""
    from orders.workflow import create_order
    return create_order(store, customer=customer_data, delivery_type='PICKUP', items=order_items)


@pytest.fixture
def delivery_order(db, store, order_items, customer_data):
    """Pending DELIVERY order of the test store"""
    from orders.workflow import create_order
    return create_order(store, customer=customer_data, delivery_type='DELIVERY', items=order_items)
