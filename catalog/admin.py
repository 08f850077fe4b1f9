from django.contrib import admin
from .models import (
    MasterCategory, MeasurementUnit, MasterProduct, ProductMeasurement,
    StoreProduct, StoreProductPrice
)


class ProductMeasurementInline(admin.TabularInline):
    model = ProductMeasurement
    extra = 0


class StoreProductPriceInline(admin.TabularInline):
    model = StoreProductPrice
    extra = 0


@admin.register(MasterCategory)
class MasterCategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'display_order', 'created_at']
    search_fields = ['name', 'slug']
    prepopulated_fields = {'slug': ('name',)}


@admin.register(MeasurementUnit)
class MeasurementUnitAdmin(admin.ModelAdmin):
    list_display = ['name', 'abbreviation', 'unit_type', 'base_unit', 'conversion_factor']
    list_filter = ['unit_type']
    search_fields = ['name', 'abbreviation']


@admin.register(MasterProduct)
class MasterProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'is_active', 'created_at']
    list_filter = ['category', 'is_active']
    search_fields = ['name', 'slug', 'description']
    prepopulated_fields = {'slug': ('name',)}
    inlines = [ProductMeasurementInline]


@admin.register(StoreProduct)
class StoreProductAdmin(admin.ModelAdmin):
    list_display = ['master_product', 'store', 'is_available', 'created_at']
    list_filter = ['store', 'is_available']
    search_fields = ['master_product__name', 'store__name']
    inlines = [StoreProductPriceInline]
