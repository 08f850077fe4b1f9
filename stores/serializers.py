import logging

from django.db import transaction
from rest_framework import serializers

from .models import Store, RESERVED_SLUGS

logger = logging.getLogger(__name__)


class StoreSerializer(serializers.ModelSerializer):
    class Meta:
        model = Store
        fields = ['id', 'slug', 'name', 'is_active', 'created_at', 'updated_at']
        read_only_fields = ['id', 'slug', 'created_at', 'updated_at']


class StoreCreateSerializer(serializers.ModelSerializer):
    """Provision a store together with the account of its owner"""
    owner_username = serializers.CharField(write_only=True, max_length=150)
    owner_email = serializers.EmailField(write_only=True)
    owner_password = serializers.CharField(write_only=True, min_length=6)

    class Meta:
        model = Store
        fields = [
            'id', 'slug', 'name', 'is_active',
            'owner_username', 'owner_email', 'owner_password'
        ]
        read_only_fields = ['id']

    def validate_slug(self, value):
        if value in RESERVED_SLUGS:
            raise serializers.ValidationError(f'"{value}" is reserved and cannot be used as a store slug.')
        return value

    def validate_owner_username(self, value):
        from users.models import User
        if User.objects.filter(username=value).exists():
            raise serializers.ValidationError('A user with that username already exists.')
        return value

    def create(self, validated_data):
        from users.models import User

        username = validated_data.pop('owner_username')
        email = validated_data.pop('owner_email')
        password = validated_data.pop('owner_password')

        with transaction.atomic():
            store = Store.objects.create(**validated_data)
            User.objects.create_user(
                username=username,
                email=email,
                password=password,
                first_name='Administrator',
                role=User.Role.STORE_OWNER,
                store=store
            )

        logger.info(f"Provisioned store {store.slug} with owner {username}")
        return store


class StoreUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = Store
        fields = ['name', 'is_active']


class StoreSettingsSerializer(serializers.ModelSerializer):
    """Store owners may only rename their store"""

    class Meta:
        model = Store
        fields = ['id', 'slug', 'name']
        read_only_fields = ['id', 'slug']

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Name is required.')
        return value
