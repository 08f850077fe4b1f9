from decimal import Decimal, ROUND_HALF_UP

from django.core.validators import MinValueValidator
from django.db import models

CENT = Decimal('0.01')


class Customer(models.Model):
    """Purchaser of one store, identified by phone number within that store"""

    store = models.ForeignKey('stores.Store', on_delete=models.CASCADE, related_name='customers')
    name = models.CharField(max_length=255)
    phone = models.CharField(max_length=30)
    address = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'customers'
        ordering = ['name']
        constraints = [
            models.UniqueConstraint(
                fields=['store', 'phone'],
                name='unique_customer_phone_per_store'
            )
        ]

    def __str__(self):
        return f"{self.name} ({self.phone})"


class Order(models.Model):
    """Customer purchase placed through a storefront"""

    class Status(models.TextChoices):
        PENDING = 'PENDING', 'Pending'
        READY = 'READY', 'Ready'
        DELIVERING = 'DELIVERING', 'Delivering'
        COMPLETED = 'COMPLETED', 'Completed'
        CANCELLED = 'CANCELLED', 'Cancelled'

    class DeliveryType(models.TextChoices):
        PICKUP = 'PICKUP', 'Pickup'
        DELIVERY = 'DELIVERY', 'Delivery'

    store = models.ForeignKey('stores.Store', on_delete=models.PROTECT, related_name='orders')
    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name='orders')
    order_number = models.CharField(max_length=10, help_text='Sequential per store, zero padded')
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    delivery_type = models.CharField(max_length=20, choices=DeliveryType.choices)
    notes = models.TextField(blank=True, null=True)
    total = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text='Sum of subtotals of items that are not unavailable'
    )
    access_token = models.CharField(
        max_length=255,
        blank=True,
        default='',
        db_index=True,
        help_text='Opaque token that lets the customer follow the order without logging in'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'orders'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['store', 'status'], name='orders_store_status_idx'),
            models.Index(fields=['-created_at'], name='orders_created_at_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['store', 'order_number'],
                name='unique_order_number_per_store'
            )
        ]

    def __str__(self):
        return f"Order-{self.order_number} - {self.total}"

    @property
    def has_pending_items(self):
        return self.items.filter(item_status=OrderItem.ItemStatus.PENDING).exists()


class OrderItem(models.Model):
    """One product line of an order, fulfilled independently by store staff"""

    class ItemStatus(models.TextChoices):
        PENDING = 'PENDING', 'Pending'
        READY = 'READY', 'Ready'
        UNAVAILABLE = 'UNAVAILABLE', 'Unavailable'

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='items')
    store_product = models.ForeignKey(
        'catalog.StoreProduct',
        on_delete=models.PROTECT,
        related_name='order_items'
    )
    measurement_unit = models.ForeignKey(
        'catalog.MeasurementUnit',
        on_delete=models.PROTECT,
        related_name='order_items'
    )
    quantity = models.DecimalField(
        max_digits=10,
        decimal_places=3,
        validators=[MinValueValidator(Decimal('0.001'))]
    )
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
        help_text='Unit price at the time the order was placed'
    )
    subtotal = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text='price x quantity, fixed at creation'
    )
    item_status = models.CharField(max_length=20, choices=ItemStatus.choices, default=ItemStatus.PENDING)

    class Meta:
        db_table = 'order_items'
        ordering = ['id']

    def __str__(self):
        return f"{self.order.order_number} - {self.store_product.master_product.name} x {self.quantity}"

    def calculate_subtotal(self):
        """Calculate subtotal rounded to cents"""
        self.subtotal = (self.price * self.quantity).quantize(CENT, rounding=ROUND_HALF_UP)
        return self.subtotal
