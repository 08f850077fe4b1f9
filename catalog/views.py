import logging

from django.db import transaction
from django.db.models import Prefetch
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import generics, status, viewsets, filters
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.response import Response

from stores.utils import get_active_store
from users.mixins import StoreOwnerMixin, require_store_for_request
from users.permissions import IsSuperAdmin, IsStoreOwner
from .models import (
    MasterCategory, MeasurementUnit, MasterProduct, ProductMeasurement,
    StoreProduct, StoreProductPrice
)
from .serializers import (
    MasterCategorySerializer, MeasurementUnitSerializer, MasterProductSerializer,
    MasterProductMinimalSerializer, ProductMeasurementSerializer, StoreProductSerializer,
    StoreProductUpdateSerializer, StoreProductAddSerializer, StoreProductPriceSerializer,
    PublicStoreProductSerializer
)

logger = logging.getLogger(__name__)


# ============== Global catalog (superadmin) ==============

class MasterCategoryViewSet(viewsets.ModelViewSet):
    queryset = MasterCategory.objects.all()
    serializer_class = MasterCategorySerializer
    permission_classes = [IsAuthenticated, IsSuperAdmin]
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['name', 'slug']
    ordering_fields = ['name', 'display_order']
    ordering = ['display_order', 'name']

    def perform_destroy(self, instance):
        product_count = instance.products.count()
        if product_count > 0:
            raise ValidationError(
                {'error': f'Cannot delete category with {product_count} associated product(s).'}
            )
        instance.delete()


class MeasurementUnitViewSet(viewsets.ModelViewSet):
    queryset = MeasurementUnit.objects.all()
    serializer_class = MeasurementUnitSerializer
    permission_classes = [IsAuthenticated, IsSuperAdmin]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['unit_type']
    search_fields = ['name', 'abbreviation']
    ordering = ['name']

    def perform_destroy(self, instance):
        if instance.is_in_use:
            raise ValidationError(
                {'error': 'Cannot delete a measurement unit that is used by products, prices or orders.'}
            )
        instance.delete()


class MasterProductViewSet(viewsets.ModelViewSet):
    queryset = MasterProduct.objects.select_related('category').all()
    serializer_class = MasterProductSerializer
    permission_classes = [IsAuthenticated, IsSuperAdmin]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['category', 'is_active']
    search_fields = ['name', 'slug', 'description']
    ordering_fields = ['name', 'created_at']
    ordering = ['name']

    def perform_destroy(self, instance):
        if instance.store_products.exists():
            raise ValidationError(
                {'error': 'Cannot delete a product that stores are selling. Deactivate it instead.'}
            )
        instance.delete()


class ProductMeasurementListCreateView(generics.ListCreateAPIView):
    """Measurement units configured for a master product"""
    serializer_class = ProductMeasurementSerializer
    permission_classes = [IsAuthenticated, IsSuperAdmin]

    def get_product(self):
        return get_object_or_404(MasterProduct, pk=self.kwargs['product_id'])

    def get_queryset(self):
        return ProductMeasurement.objects.filter(
            master_product_id=self.kwargs['product_id']
        ).select_related('measurement_unit')

    def perform_create(self, serializer):
        product = self.get_product()
        if product.measurements.filter(measurement_unit=serializer.validated_data['measurement_unit']).exists():
            raise ValidationError({'measurement_unit': 'This unit is already configured for the product.'})
        serializer.save(master_product=product)


class ProductMeasurementDetailView(generics.RetrieveUpdateDestroyAPIView):
    serializer_class = ProductMeasurementSerializer
    permission_classes = [IsAuthenticated, IsSuperAdmin]
    lookup_url_kwarg = 'measurement_id'

    def get_queryset(self):
        return ProductMeasurement.objects.filter(
            master_product_id=self.kwargs['product_id']
        ).select_related('measurement_unit')


# ============== Store catalog (store owner) ==============

class StoreProductListView(StoreOwnerMixin, generics.ListAPIView):
    """Products offered by the owner's store, with all their prices"""
    queryset = StoreProduct.objects.select_related(
        'master_product__category'
    ).prefetch_related('prices__measurement_unit')
    serializer_class = StoreProductSerializer
    permission_classes = [IsAuthenticated, IsStoreOwner]

    def get_queryset(self):
        queryset = super().get_queryset()
        is_available = self.request.query_params.get('is_available')
        if is_available is not None:
            queryset = queryset.filter(is_available=is_available.lower() == 'true')
        search = self.request.query_params.get('search')
        if search:
            queryset = queryset.filter(master_product__name__icontains=search)
        return queryset


class AvailableMasterProductListView(generics.ListAPIView):
    """Active master products the store does not sell yet"""
    serializer_class = MasterProductMinimalSerializer
    permission_classes = [IsAuthenticated, IsStoreOwner]
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ['category']

    def get_queryset(self):
        store = require_store_for_request(self.request, self.kwargs['store_slug'])
        return MasterProduct.objects.filter(is_active=True).exclude(
            store_products__store=store
        ).select_related('category')


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStoreOwner])
def add_store_product(request, store_slug):
    """Add a master product to the store together with its unit prices"""
    store = require_store_for_request(request, store_slug)
    serializer = StoreProductAddSerializer(data=request.data, context={'store': store})
    serializer.is_valid(raise_exception=True)

    with transaction.atomic():
        store_product = StoreProduct.objects.create(
            store=store,
            master_product=serializer.validated_data['master_product'],
            is_available=True
        )
        StoreProductPrice.objects.bulk_create([
            StoreProductPrice(
                store_product=store_product,
                measurement_unit=item['measurement_unit'],
                price=item['price'],
                is_active=True
            )
            for item in serializer.validated_data['prices']
        ])

    logger.info(f"Store {store.slug} added product {store_product.master_product.name}")
    return Response(StoreProductSerializer(store_product).data, status=status.HTTP_201_CREATED)


class StoreProductDetailView(StoreOwnerMixin, generics.RetrieveUpdateDestroyAPIView):
    queryset = StoreProduct.objects.select_related('master_product__category').prefetch_related(
        'prices__measurement_unit'
    )
    permission_classes = [IsAuthenticated, IsStoreOwner]
    lookup_url_kwarg = 'product_id'

    def get_serializer_class(self):
        if self.request.method in ['PUT', 'PATCH']:
            return StoreProductUpdateSerializer
        return StoreProductSerializer

    def perform_destroy(self, instance):
        if instance.order_items.exists():
            raise ValidationError(
                {'error': 'Cannot remove a product that appears in orders. Mark it unavailable instead.'}
            )
        instance.delete()


class StoreProductPriceCreateView(generics.CreateAPIView):
    serializer_class = StoreProductPriceSerializer
    permission_classes = [IsAuthenticated, IsStoreOwner]

    def get_store_product(self):
        store = require_store_for_request(self.request, self.kwargs['store_slug'])
        return get_object_or_404(StoreProduct, pk=self.kwargs['product_id'], store=store)

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context['store_product'] = self.get_store_product()
        return context

    def perform_create(self, serializer):
        serializer.save(store_product=serializer.context['store_product'])


class StoreProductPriceDetailView(generics.RetrieveUpdateDestroyAPIView):
    serializer_class = StoreProductPriceSerializer
    permission_classes = [IsAuthenticated, IsStoreOwner]
    lookup_url_kwarg = 'price_id'

    def get_queryset(self):
        store = require_store_for_request(self.request, self.kwargs['store_slug'])
        return StoreProductPrice.objects.filter(
            store_product_id=self.kwargs['product_id'],
            store_product__store=store
        ).select_related('measurement_unit')

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context['store_product'] = get_object_or_404(
            StoreProduct, pk=self.kwargs['product_id'], store__slug=self.kwargs['store_slug']
        )
        return context


# ============== Public catalog ==============

@api_view(['GET'])
@permission_classes([AllowAny])
def store_catalog(request, store_slug):
    """
    Categories with the store's sellable products and their active prices.
    Categories without products are omitted.
    """
    store = get_active_store(store_slug)

    store_products = StoreProduct.objects.filter(
        store=store,
        is_available=True,
        master_product__is_active=True
    ).select_related('master_product__category').prefetch_related(
        Prefetch(
            'prices',
            queryset=StoreProductPrice.objects.filter(is_active=True).select_related('measurement_unit')
        )
    ).order_by('master_product__name')

    measurements = {
        (measurement.master_product_id, measurement.measurement_unit_id): measurement
        for measurement in ProductMeasurement.objects.filter(
            master_product_id__in=[store_product.master_product_id for store_product in store_products]
        )
    }
    context = {'request': request, 'measurements': measurements}

    categories = {}
    for store_product in store_products:
        category = store_product.master_product.category
        entry = categories.setdefault(category.id, {
            'id': category.id,
            'name': category.name,
            'slug': category.slug,
            'image_url': category.image_url,
            'display_order': category.display_order,
            'products': [],
        })
        entry['products'].append(PublicStoreProductSerializer(store_product, context=context).data)

    result = sorted(categories.values(), key=lambda c: (c['display_order'], c['name']))
    return Response(result)
