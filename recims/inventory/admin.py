from django.contrib import admin
from .models import Inventory


@admin.register(Inventory)
class InventoryAdmin(admin.ModelAdmin):
    list_display = ['inventory_id', 'tenant_id', 'item_name', 'quantity_kg', 'quantity_lbs', 'sorting_status', 'status', 'zone', 'bin_location']
    list_filter = ['status', 'sorting_status', 'unit_of_measure', 'quality_grade']
    search_fields = ['inventory_id', 'item_name', 'sku_number', 'lot_number', 'purchase_order_number']
    raw_id_fields = ['purchase_order_item']
