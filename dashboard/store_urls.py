from django.urls import path
from . import views

urlpatterns = [
    path('admin/dashboard/', views.store_dashboard, name='store-dashboard'),
]
