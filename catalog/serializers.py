from decimal import Decimal

from rest_framework import serializers
from .models import (
    MasterCategory, MeasurementUnit, MasterProduct, ProductMeasurement,
    StoreProduct, StoreProductPrice
)


class MasterCategorySerializer(serializers.ModelSerializer):
    product_count = serializers.IntegerField(source='products.count', read_only=True)

    class Meta:
        model = MasterCategory
        fields = [
            'id', 'name', 'slug', 'image_url', 'display_order',
            'product_count', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class MeasurementUnitSerializer(serializers.ModelSerializer):
    class Meta:
        model = MeasurementUnit
        fields = [
            'id', 'name', 'abbreviation', 'unit_type', 'base_unit',
            'conversion_factor', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class MeasurementUnitMinimalSerializer(serializers.ModelSerializer):
    class Meta:
        model = MeasurementUnit
        fields = ['id', 'name', 'abbreviation']


class MasterProductSerializer(serializers.ModelSerializer):
    category_name = serializers.CharField(source='category.name', read_only=True)
    store_count = serializers.IntegerField(source='store_products.count', read_only=True)

    class Meta:
        model = MasterProduct
        fields = [
            'id', 'name', 'slug', 'description', 'image_url', 'category',
            'category_name', 'is_active', 'store_count', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class ProductMeasurementSerializer(serializers.ModelSerializer):
    unit = MeasurementUnitMinimalSerializer(source='measurement_unit', read_only=True)

    class Meta:
        model = ProductMeasurement
        fields = ['id', 'measurement_unit', 'unit', 'min_quantity', 'step_quantity', 'created_at']
        read_only_fields = ['id', 'created_at']


class StoreProductPriceSerializer(serializers.ModelSerializer):
    unit = MeasurementUnitMinimalSerializer(source='measurement_unit', read_only=True)

    class Meta:
        model = StoreProductPrice
        fields = ['id', 'measurement_unit', 'unit', 'price', 'is_active', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate(self, data):
        store_product = self.context.get('store_product')
        measurement_unit = data.get('measurement_unit')
        if store_product is not None and measurement_unit is not None:
            duplicates = StoreProductPrice.objects.filter(
                store_product=store_product,
                measurement_unit=measurement_unit
            )
            if self.instance is not None:
                duplicates = duplicates.exclude(pk=self.instance.pk)
            if duplicates.exists():
                raise serializers.ValidationError(
                    {'measurement_unit': 'A price for this measurement unit already exists.'}
                )
        return data


class MasterProductMinimalSerializer(serializers.ModelSerializer):
    category_name = serializers.CharField(source='category.name', read_only=True)

    class Meta:
        model = MasterProduct
        fields = ['id', 'name', 'description', 'image_url', 'category', 'category_name', 'is_active']


class StoreProductSerializer(serializers.ModelSerializer):
    master_product = MasterProductMinimalSerializer(read_only=True)
    prices = StoreProductPriceSerializer(many=True, read_only=True)

    class Meta:
        model = StoreProduct
        fields = ['id', 'master_product', 'is_available', 'prices', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']


class StoreProductUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = StoreProduct
        fields = ['is_available']


class PriceInputSerializer(serializers.Serializer):
    measurement_unit = serializers.PrimaryKeyRelatedField(queryset=MeasurementUnit.objects.all())
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.01'))


class StoreProductAddSerializer(serializers.Serializer):
    """Add a master product to a store with at least one unit price"""
    master_product = serializers.PrimaryKeyRelatedField(queryset=MasterProduct.objects.filter(is_active=True))
    prices = PriceInputSerializer(many=True)

    def validate_prices(self, value):
        if not value:
            raise serializers.ValidationError('At least one price is required.')
        units = [item['measurement_unit'].pk for item in value]
        if len(units) != len(set(units)):
            raise serializers.ValidationError('Each measurement unit may only be priced once.')
        return value

    def validate_master_product(self, value):
        store = self.context['store']
        if StoreProduct.objects.filter(store=store, master_product=value).exists():
            raise serializers.ValidationError('This product is already in your store.')
        return value


# ============== Public catalog ==============

class PublicPriceSerializer(serializers.ModelSerializer):
    """Active price enriched with the quantity constraints of its unit"""
    unit = MeasurementUnitMinimalSerializer(source='measurement_unit', read_only=True)
    min_quantity = serializers.SerializerMethodField()
    step_quantity = serializers.SerializerMethodField()

    class Meta:
        model = StoreProductPrice
        fields = ['id', 'measurement_unit', 'unit', 'price', 'min_quantity', 'step_quantity']

    def _measurement(self, obj):
        measurements = self.context.get('measurements', {})
        return measurements.get((obj.store_product.master_product_id, obj.measurement_unit_id))

    def get_min_quantity(self, obj):
        measurement = self._measurement(obj)
        return str(measurement.min_quantity) if measurement else '1'

    def get_step_quantity(self, obj):
        measurement = self._measurement(obj)
        return str(measurement.step_quantity) if measurement else '1'


class PublicStoreProductSerializer(serializers.ModelSerializer):
    master_product = MasterProductMinimalSerializer(read_only=True)
    prices = serializers.SerializerMethodField()

    class Meta:
        model = StoreProduct
        fields = ['id', 'is_available', 'master_product', 'prices']

    def get_prices(self, obj):
        prices = [price for price in obj.prices.all() if price.is_active]
        return PublicPriceSerializer(prices, many=True, context=self.context).data
