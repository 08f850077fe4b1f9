from django.contrib import admin
from .models import Customer, Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ['store_product', 'measurement_unit', 'quantity', 'price', 'subtotal']


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['order_number', 'store', 'customer', 'status', 'delivery_type', 'total', 'created_at']
    list_filter = ['store', 'status', 'delivery_type', 'created_at']
    search_fields = ['order_number', 'customer__name', 'customer__phone']
    readonly_fields = ['order_number', 'total', 'access_token', 'created_at', 'updated_at']
    inlines = [OrderItemInline]

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ['name', 'phone', 'store', 'created_at']
    list_filter = ['store']
    search_fields = ['name', 'phone']
