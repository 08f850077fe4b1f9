from django.urls import path
from . import views

urlpatterns = [
    path('', views.PlatformOrderListView.as_view(), name='platform-order-list'),
    path('stats/', views.order_stats, name='platform-order-stats'),
]
