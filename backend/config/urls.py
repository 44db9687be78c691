"""
URL configuration for the tracker backend.

Each bounded context ships its own URLConf; all of them are mounted under
the versioned API prefix.
"""
from django.urls import path, include

urlpatterns = [
    path('api/v1/', include('backend.supplies.urls')),
    path('api/v1/', include('backend.stores.urls')),
]
