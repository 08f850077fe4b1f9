from django.urls import path
from . import views

urlpatterns = [
    path('', views.platform_dashboard, name='platform-dashboard'),
]
