from django.urls import path
from . import views

urlpatterns = [
    path('admin/store/', views.StoreSettingsView.as_view(), name='store-settings'),
]
