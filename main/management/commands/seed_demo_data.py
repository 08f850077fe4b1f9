"""
Django management command to load demo data for the storefront.
Creates the superadmin, global catalog, measurement units and a demo store
with its owner and priced products.
"""

from django.core.management.base import BaseCommand
from django.db import transaction
from decimal import Decimal
import random


CATEGORIES = [
    ('Fruits', 'fruits', 1),
    ('Vegetables', 'vegetables', 2),
    ('Meat', 'meat', 3),
    ('Dairy', 'dairy', 4),
    ('Desserts', 'desserts', 5),
    ('Beverages', 'beverages', 6),
    ('Other', 'other', 7),
]

# name, abbreviation, type, base unit, conversion factor
MEASUREMENT_UNITS = [
    ('Unit', 'un', 'UNIT', None, None),
    ('Gram', 'g', 'WEIGHT', 'g', Decimal('1')),
    ('Pound', 'lb', 'WEIGHT', 'g', Decimal('453.592')),
    ('Kilogram', 'kg', 'WEIGHT', 'g', Decimal('1000')),
    ('Ounce', 'oz', 'WEIGHT', 'g', Decimal('28.3495')),
]

# name, slug, description, category slug, unit abbreviations
MASTER_PRODUCTS = [
    ('Red Apple', 'red-apple', 'Fresh red apples', 'fruits', ['kg', 'lb']),
    ('Banana', 'banana', 'Fresh bananas', 'fruits', ['kg', 'un']),
    ('Orange', 'orange', 'Juicy oranges', 'fruits', ['kg']),
    ('Tomato', 'tomato', 'Fresh tomatoes', 'vegetables', ['kg', 'lb']),
    ('Lettuce', 'lettuce', 'Fresh lettuce', 'vegetables', ['un']),
    ('Onion', 'onion', 'Fresh onions', 'vegetables', ['kg']),
    ('Chicken Breast', 'chicken-breast', 'Fresh chicken breast', 'meat', ['kg', 'lb']),
    ('Beef', 'beef', 'Premium beef', 'meat', ['kg', 'lb']),
    ('Whole Milk', 'whole-milk', 'Whole milk 1 liter', 'dairy', ['un']),
    ('Fresh Cheese', 'fresh-cheese', 'Fresh cheese', 'dairy', ['lb', 'kg']),
    ('Cola 2L', 'cola-2l', 'Cola 2 liters', 'beverages', ['un']),
    ('Mineral Water', 'mineral-water', 'Mineral water 1.5 liters', 'beverages', ['un']),
]


class Command(BaseCommand):
    help = 'Load demo data for the storefront (superadmin, catalog, demo store)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--store-slug',
            type=str,
            default='demo-store',
            help='Slug of the demo store (default: demo-store)',
        )
        parser.add_argument(
            '--admin-password',
            type=str,
            default='admin123',
            help='Superadmin password (default: admin123)',
        )
        parser.add_argument(
            '--owner-password',
            type=str,
            default='owner123',
            help='Store owner password (default: owner123)',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        from users.models import User
        from stores.models import Store
        from catalog.models import (
            MasterCategory, MeasurementUnit, MasterProduct, ProductMeasurement,
            StoreProduct, StoreProductPrice
        )

        self.stdout.write(self.style.NOTICE('Loading demo data...'))

        # =================================================================
        # Superadmin
        # =================================================================
        admin, created = User.objects.get_or_create(
            username='admin',
            defaults={
                'email': 'admin@storefront.local',
                'first_name': 'Super',
                'last_name': 'Admin',
                'role': User.Role.SUPERADMIN,
                'is_staff': True,
            }
        )
        if created:
            admin.set_password(options['admin_password'])
            admin.save()
            self.stdout.write(self.style.SUCCESS(f'Created superadmin: {admin.username}'))
        else:
            self.stdout.write(f'Superadmin already exists: {admin.username}')

        # =================================================================
        # Global catalog
        # =================================================================
        categories = {}
        for name, slug, display_order in CATEGORIES:
            categories[slug], _ = MasterCategory.objects.get_or_create(
                slug=slug,
                defaults={'name': name, 'display_order': display_order}
            )
        self.stdout.write(self.style.SUCCESS(f'Categories ready: {len(categories)}'))

        units = {}
        for name, abbreviation, unit_type, base_unit, factor in MEASUREMENT_UNITS:
            units[abbreviation], _ = MeasurementUnit.objects.get_or_create(
                abbreviation=abbreviation,
                defaults={
                    'name': name,
                    'unit_type': unit_type,
                    'base_unit': base_unit,
                    'conversion_factor': factor,
                }
            )
        self.stdout.write(self.style.SUCCESS(f'Measurement units ready: {len(units)}'))

        products = []
        for name, slug, description, category_slug, unit_codes in MASTER_PRODUCTS:
            product, _ = MasterProduct.objects.get_or_create(
                slug=slug,
                defaults={
                    'name': name,
                    'description': description,
                    'category': categories[category_slug],
                }
            )
            for code in unit_codes:
                weight = units[code].unit_type == MeasurementUnit.UnitType.WEIGHT
                ProductMeasurement.objects.get_or_create(
                    master_product=product,
                    measurement_unit=units[code],
                    defaults={
                        'min_quantity': Decimal('0.5') if weight else Decimal('1'),
                        'step_quantity': Decimal('0.5') if weight else Decimal('1'),
                    }
                )
            products.append((product, unit_codes))
        self.stdout.write(self.style.SUCCESS(f'Master products ready: {len(products)}'))

        # =================================================================
        # Demo store and owner
        # =================================================================
        store, created = Store.objects.get_or_create(
            slug=options['store_slug'],
            defaults={'name': 'Demo Store', 'is_active': True}
        )
        if created:
            self.stdout.write(self.style.SUCCESS(f'Created store: {store.slug}'))

        owner, created = User.objects.get_or_create(
            username=f'owner@{store.slug}',
            defaults={
                'email': f'owner@{store.slug}.local',
                'first_name': 'Store',
                'last_name': 'Owner',
                'role': User.Role.STORE_OWNER,
                'store': store,
            }
        )
        if created:
            owner.set_password(options['owner_password'])
            owner.save()
            self.stdout.write(self.style.SUCCESS(f'Created store owner: {owner.username}'))

        for product, unit_codes in products[:6]:
            store_product, created = StoreProduct.objects.get_or_create(
                store=store,
                master_product=product,
            )
            if not created:
                continue
            for code in unit_codes:
                StoreProductPrice.objects.create(
                    store_product=store_product,
                    measurement_unit=units[code],
                    price=Decimal(random.randint(10, 60) * 100),
                )

        self.stdout.write(self.style.SUCCESS('Demo data loaded successfully!'))
        self.stdout.write(f'Superadmin: admin / {options["admin_password"]}')
        self.stdout.write(f'Store owner: {owner.username} / {options["owner_password"]} (store {store.slug})')
