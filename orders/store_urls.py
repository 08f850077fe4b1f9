from django.urls import path
from . import views

urlpatterns = [
    # Customer
    path('orders/', views.create_order, name='order-create'),
    path('orders/<str:order_number>/', views.CustomerOrderDetailView.as_view(), name='order-detail'),

    # Store staff
    path('admin/orders/', views.StoreOrderListView.as_view(), name='store-order-list'),
    path('admin/orders/<str:order_number>/items/<int:item_id>/', views.update_item_status,
         name='order-item-status'),
    path('admin/orders/<str:order_number>/status/', views.update_order_status, name='order-status'),
]
