from django.urls import path
from rest_framework.routers import SimpleRouter
from . import views

router = SimpleRouter()
router.register(r'categories', views.MasterCategoryViewSet, basename='master-category')
router.register(r'measurement-units', views.MeasurementUnitViewSet, basename='measurement-unit')
router.register(r'products', views.MasterProductViewSet, basename='master-product')

urlpatterns = [
    path('products/<int:product_id>/measurements/', views.ProductMeasurementListCreateView.as_view(),
         name='product-measurement-list-create'),
    path('products/<int:product_id>/measurements/<int:measurement_id>/', views.ProductMeasurementDetailView.as_view(),
         name='product-measurement-detail'),
] + router.urls
