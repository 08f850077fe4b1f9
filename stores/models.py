from django.core.validators import RegexValidator
from django.db import models


# Slugs that collide with top level API paths
RESERVED_SLUGS = frozenset(['admin', 'auth', 'health', 'schema', 'docs'])

slug_validator = RegexValidator(
    regex=r'^[a-z0-9-]+$',
    message='Slug may only contain lowercase letters, numbers and hyphens.'
)


class Store(models.Model):
    """Tenant root: one independently operated storefront"""

    slug = models.CharField(
        max_length=100,
        unique=True,
        validators=[slug_validator],
        help_text='Public identifier used in store URLs'
    )
    name = models.CharField(max_length=255)
    is_active = models.BooleanField(
        default=True,
        help_text='Inactive stores are hidden from public routes and block owner login'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'stores'
        ordering = ['name']
        indexes = [
            models.Index(fields=['is_active'], name='stores_is_active_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.slug})"
