from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal


class MasterCategory(models.Model):
    """Global product categories (Fruits, Vegetables, Dairy, etc.)"""

    name = models.CharField(max_length=100, unique=True)
    slug = models.SlugField(max_length=100, unique=True)
    image_url = models.URLField(max_length=500, blank=True, null=True)
    display_order = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'master_categories'
        ordering = ['display_order', 'name']
        verbose_name_plural = 'Master categories'

    def __str__(self):
        return self.name


class MeasurementUnit(models.Model):
    """Unit a product is sold in (unit, gram, kilogram, pound...)"""

    class UnitType(models.TextChoices):
        UNIT = 'UNIT', 'Unit'
        WEIGHT = 'WEIGHT', 'Weight'

    name = models.CharField(max_length=50, unique=True)
    abbreviation = models.CharField(max_length=10, unique=True)
    unit_type = models.CharField(max_length=10, choices=UnitType.choices, default=UnitType.UNIT)
    base_unit = models.CharField(
        max_length=10,
        blank=True,
        null=True,
        help_text='Abbreviation of the unit conversions are expressed in'
    )
    conversion_factor = models.DecimalField(
        max_digits=12,
        decimal_places=4,
        blank=True,
        null=True,
        validators=[MinValueValidator(Decimal('0.0001'))],
        help_text='How many base units one of this unit holds'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'measurement_units'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.abbreviation})"

    @property
    def is_in_use(self):
        return (
            self.product_measurements.exists() or
            self.store_prices.exists() or
            self.order_items.exists()
        )


class MasterProduct(models.Model):
    """Product of the global catalog that stores can choose to sell"""

    name = models.CharField(max_length=255, unique=True)
    slug = models.SlugField(max_length=255, unique=True)
    description = models.TextField(blank=True, null=True)
    image_url = models.URLField(max_length=500, blank=True, null=True)
    category = models.ForeignKey(MasterCategory, on_delete=models.PROTECT, related_name='products')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'master_products'
        ordering = ['name']
        indexes = [
            models.Index(fields=['category'], name='master_products_category_idx'),
            models.Index(fields=['is_active'], name='master_products_active_idx'),
        ]

    def __str__(self):
        return self.name


class ProductMeasurement(models.Model):
    """Units a master product may be sold in, with quantity constraints"""

    master_product = models.ForeignKey(MasterProduct, on_delete=models.CASCADE, related_name='measurements')
    measurement_unit = models.ForeignKey(
        MeasurementUnit,
        on_delete=models.PROTECT,
        related_name='product_measurements'
    )
    min_quantity = models.DecimalField(
        max_digits=10,
        decimal_places=3,
        default=Decimal('1'),
        validators=[MinValueValidator(Decimal('0.001'))]
    )
    step_quantity = models.DecimalField(
        max_digits=10,
        decimal_places=3,
        default=Decimal('1'),
        validators=[MinValueValidator(Decimal('0.001'))]
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'product_measurements'
        ordering = ['created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['master_product', 'measurement_unit'],
                name='unique_measurement_per_product'
            )
        ]

    def __str__(self):
        return f"{self.master_product.name} - {self.measurement_unit.abbreviation}"


class StoreProduct(models.Model):
    """A master product offered by one store"""

    store = models.ForeignKey('stores.Store', on_delete=models.CASCADE, related_name='products')
    master_product = models.ForeignKey(MasterProduct, on_delete=models.PROTECT, related_name='store_products')
    is_available = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'store_products'
        ordering = ['master_product__name']
        indexes = [
            models.Index(fields=['store', 'is_available'], name='store_products_available_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['store', 'master_product'],
                name='unique_product_per_store'
            )
        ]

    def __str__(self):
        return f"{self.store.slug} - {self.master_product.name}"

    @property
    def is_sellable(self):
        """Available in the store and still active in the global catalog"""
        return self.is_available and self.master_product.is_active


class StoreProductPrice(models.Model):
    """Price of a store product for one measurement unit"""

    store_product = models.ForeignKey(StoreProduct, on_delete=models.CASCADE, related_name='prices')
    measurement_unit = models.ForeignKey(MeasurementUnit, on_delete=models.PROTECT, related_name='store_prices')
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'store_product_prices'
        ordering = ['measurement_unit__name']
        constraints = [
            models.UniqueConstraint(
                fields=['store_product', 'measurement_unit'],
                name='unique_price_per_unit'
            )
        ]

    def __str__(self):
        return f"{self.store_product} - {self.measurement_unit.abbreviation}: {self.price}"
