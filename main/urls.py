"""
URL configuration for the storefront API.

Platform routes (auth, superadmin) are matched before the per-store routes,
which is why their first path segments are reserved store slugs.
"""
from django.contrib import admin
from django.urls import path, include
from django.http import JsonResponse
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView


# Simple health check view - no database required
def health_check(request):
    """Health check endpoint for container orchestration.
    Returns 200 OK without database queries for fast response.
    """
    return JsonResponse({
        'status': 'healthy',
        'service': 'storefront-api'
    })


urlpatterns = [
    # Health check endpoint (no auth required, no DB queries)
    path('api/health/', health_check, name='health-check'),

    path('admin/', admin.site.urls),

    # OAuth2
    path('o/', include('oauth2_provider.urls', namespace='oauth2_provider')),

    # API Documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),

    # Platform endpoints
    path('api/auth/', include('users.urls')),
    path('api/admin/', include('stores.urls')),
    path('api/admin/', include('catalog.urls')),
    path('api/admin/orders/', include('orders.urls')),
    path('api/admin/dashboard/', include('dashboard.urls')),

    # Store endpoints
    path('api/<slug:store_slug>/', include('stores.store_urls')),
    path('api/<slug:store_slug>/', include('catalog.store_urls')),
    path('api/<slug:store_slug>/', include('orders.store_urls')),
    path('api/<slug:store_slug>/', include('dashboard.store_urls')),
]
