from rest_framework import serializers
from .models import Customer, Order, OrderItem


class CustomerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = ['id', 'name', 'phone', 'address']
        read_only_fields = fields


class OrderItemSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='store_product.master_product.name', read_only=True)
    product_image_url = serializers.CharField(source='store_product.master_product.image_url', read_only=True)
    unit_name = serializers.CharField(source='measurement_unit.name', read_only=True)
    unit_abbreviation = serializers.CharField(source='measurement_unit.abbreviation', read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            'id', 'store_product', 'product_name', 'product_image_url',
            'measurement_unit', 'unit_name', 'unit_abbreviation',
            'quantity', 'price', 'subtotal', 'item_status'
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Full order as seen by the customer and by store staff"""
    customer = CustomerSerializer(read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)
    store_name = serializers.CharField(source='store.name', read_only=True)
    store_slug = serializers.CharField(source='store.slug', read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'order_number', 'store_slug', 'store_name', 'status', 'delivery_type',
            'notes', 'total', 'customer', 'items', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class StaffOrderSerializer(OrderSerializer):
    """Adds the statuses staff can move the order to next"""
    next_statuses = serializers.SerializerMethodField()

    class Meta(OrderSerializer.Meta):
        fields = OrderSerializer.Meta.fields + ['next_statuses']
        read_only_fields = fields

    def get_next_statuses(self, obj):
        from .workflow import allowed_order_transitions
        return allowed_order_transitions(obj)


class PlatformOrderSerializer(serializers.ModelSerializer):
    """Order summary for the superadmin listing"""
    store_name = serializers.CharField(source='store.name', read_only=True)
    store_slug = serializers.CharField(source='store.slug', read_only=True)
    customer_name = serializers.CharField(source='customer.name', read_only=True)
    customer_phone = serializers.CharField(source='customer.phone', read_only=True)
    item_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'order_number', 'store', 'store_name', 'store_slug', 'status',
            'delivery_type', 'total', 'customer_name', 'customer_phone',
            'item_count', 'created_at'
        ]
        read_only_fields = fields


class CustomerInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    phone = serializers.CharField(max_length=30)
    address = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class OrderItemInputSerializer(serializers.Serializer):
    store_product_id = serializers.IntegerField()
    measurement_unit_id = serializers.IntegerField()
    quantity = serializers.DecimalField(max_digits=10, decimal_places=3)
    price = serializers.DecimalField(max_digits=10, decimal_places=2)


class OrderCreateSerializer(serializers.Serializer):
    """Checkout payload; catalog checks happen in the workflow"""
    customer = CustomerInputSerializer()
    delivery_type = serializers.ChoiceField(choices=Order.DeliveryType.choices)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    items = OrderItemInputSerializer(many=True)

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError('The order must contain at least one product.')
        return value


class ItemStatusUpdateSerializer(serializers.Serializer):
    item_status = serializers.ChoiceField(choices=OrderItem.ItemStatus.choices)


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.Status.choices)
