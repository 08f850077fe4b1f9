from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ['username', 'email', 'role', 'store', 'is_active', 'is_staff']
    list_filter = ['role', 'store', 'is_active', 'is_staff', 'is_superuser']
    search_fields = ['username', 'email', 'first_name', 'last_name']

    fieldsets = BaseUserAdmin.fieldsets + (
        ('Store Access', {
            'fields': ('role', 'store')
        }),
    )

    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ('Store Access', {
            'fields': ('role', 'store')
        }),
    )
