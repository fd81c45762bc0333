from django.contrib import admin
from .models import InboundShipment, QCCriteria, QCInspection


@admin.register(InboundShipment)
class InboundShipmentAdmin(admin.ModelAdmin):
    list_display = ['load_id', 'tenant_id', 'supplier_name', 'product_category', 'net_weight_kg', 'status', 'arrival_time']
    list_filter = ['status', 'load_type']
    search_fields = ['load_id', 'supplier_name', 'truck_number', 'sku_number']


@admin.register(QCCriteria)
class QCCriteriaAdmin(admin.ModelAdmin):
    list_display = ['criteria_name', 'tenant_id', 'material_category', 'min_purity_percent', 'max_contamination_percent', 'status']
    list_filter = ['status']


@admin.register(QCInspection)
class QCInspectionAdmin(admin.ModelAdmin):
    list_display = ['inspection_id', 'load_id', 'tenant_id', 'overall_result', 'disposition', 'inspection_date']
    list_filter = ['overall_result', 'disposition']
    search_fields = ['inspection_id', 'load_id']
