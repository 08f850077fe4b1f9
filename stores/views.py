from rest_framework import generics, mixins, viewsets, filters
from rest_framework.permissions import IsAuthenticated
from users.permissions import IsSuperAdmin, IsStoreOwner
from users.mixins import require_store_for_request
from .models import Store
from .serializers import (
    StoreSerializer, StoreCreateSerializer, StoreUpdateSerializer, StoreSettingsSerializer
)


class StoreViewSet(mixins.ListModelMixin,
                   mixins.CreateModelMixin,
                   mixins.RetrieveModelMixin,
                   mixins.UpdateModelMixin,
                   viewsets.GenericViewSet):
    """Store provisioning (superadmin). Stores are deactivated, never deleted."""
    queryset = Store.objects.all()
    permission_classes = [IsAuthenticated, IsSuperAdmin]
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['name', 'slug']
    ordering_fields = ['name', 'created_at']
    ordering = ['name']

    def get_serializer_class(self):
        if self.action == 'create':
            return StoreCreateSerializer
        if self.action in ['update', 'partial_update']:
            return StoreUpdateSerializer
        return StoreSerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        is_active = self.request.query_params.get('is_active')
        if is_active is not None:
            queryset = queryset.filter(is_active=is_active.lower() == 'true')
        return queryset


class StoreSettingsView(generics.RetrieveUpdateAPIView):
    """Read or rename the store of the authenticated owner"""
    serializer_class = StoreSettingsSerializer
    permission_classes = [IsAuthenticated, IsStoreOwner]

    def get_object(self):
        return require_store_for_request(self.request, self.kwargs['store_slug'])
