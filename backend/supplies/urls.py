from django.urls import path
from .views import (
    supply_list_create, supply_detail, supply_adjust,
    supply_summary, supply_export, supply_import, supply_clear,
)

urlpatterns = [
    path('supplies/', supply_list_create, name='supply-list-create'),

    # Collection actions (before the detail route so they are not read as ids)
    path('supplies/summary/', supply_summary, name='supply-summary'),
    path('supplies/export/', supply_export, name='supply-export'),
    path('supplies/import/', supply_import, name='supply-import'),
    path('supplies/clear/', supply_clear, name='supply-clear'),

    path('supplies/<str:supply_id>/', supply_detail, name='supply-detail'),
    path('supplies/<str:supply_id>/adjust/', supply_adjust, name='supply-adjust'),
]
