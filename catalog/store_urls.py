from django.urls import path
from . import views

urlpatterns = [
    # Public catalog
    path('products/', views.store_catalog, name='store-catalog'),

    # Store owner catalog management
    path('admin/products/', views.StoreProductListView.as_view(), name='store-product-list'),
    path('admin/products/available/', views.AvailableMasterProductListView.as_view(),
         name='store-product-available'),
    path('admin/products/add/', views.add_store_product, name='store-product-add'),
    path('admin/products/<int:product_id>/', views.StoreProductDetailView.as_view(),
         name='store-product-detail'),
    path('admin/products/<int:product_id>/prices/', views.StoreProductPriceCreateView.as_view(),
         name='store-product-price-create'),
    path('admin/products/<int:product_id>/prices/<int:price_id>/', views.StoreProductPriceDetailView.as_view(),
         name='store-product-price-detail'),
]
