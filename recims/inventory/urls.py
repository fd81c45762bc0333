from django.urls import path
from .views import (
    inventory_list_create, inventory_detail, inventory_adjust, inventory_classify,
    inventory_by_location, inventory_by_sku,
)

urlpatterns = [
    path('inventory/', inventory_list_create, name='inventory-list-create'),
    path('inventory/by-location/', inventory_by_location, name='inventory-by-location'),
    path('inventory/by-sku/', inventory_by_sku, name='inventory-by-sku'),
    path('inventory/<int:pk>/', inventory_detail, name='inventory-detail'),
    path('inventory/<int:pk>/adjust/', inventory_adjust, name='inventory-adjust'),
    path('inventory/<int:pk>/classify/', inventory_classify, name='inventory-classify'),
]
