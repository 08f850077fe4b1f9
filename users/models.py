from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Custom User model with role-based access control.
    Roles: SUPERADMIN, STORE_OWNER

    User Types:
    - Superadmin: role=SUPERADMIN, store=None (manages the global catalog and all stores)
    - Store owner: role=STORE_OWNER, store=Store (fulfills orders of one store)
    """

    class Role(models.TextChoices):
        SUPERADMIN = 'SUPERADMIN', 'Super Admin'
        STORE_OWNER = 'STORE_OWNER', 'Store Owner'

    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.STORE_OWNER,
        help_text='User role for permission management'
    )
    store = models.ForeignKey(
        'stores.Store',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='users',
        help_text='Store this user administers. Null for superadmins.'
    )

    class Meta:
        db_table = 'users'
        ordering = ['-date_joined']

    def __str__(self):
        return f"{self.username} ({self.get_role_display()})"

    @property
    def is_super_admin(self):
        return self.role == self.Role.SUPERADMIN

    @property
    def is_store_owner(self):
        return self.role == self.Role.STORE_OWNER
