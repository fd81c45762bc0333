from django.contrib import admin
from .models import PurchaseOrder, PurchaseOrderItem


class PurchaseOrderItemInline(admin.TabularInline):
    model = PurchaseOrderItem
    extra = 0
    fields = ['line_number', 'skid_number', 'barcode', 'category', 'expected_weight_kg', 'actual_weight_kg', 'status', 'certificate_status']
    readonly_fields = ['barcode']


@admin.register(PurchaseOrder)
class PurchaseOrderAdmin(admin.ModelAdmin):
    list_display = ['po_number', 'tenant_id', 'vendor_name', 'status', 'order_date', 'total_expected_weight_kg', 'total_received_weight_kg']
    list_filter = ['status', 'currency']
    search_fields = ['po_number', 'vendor_name']
    inlines = [PurchaseOrderItemInline]


@admin.register(PurchaseOrderItem)
class PurchaseOrderItemAdmin(admin.ModelAdmin):
    list_display = ['barcode', 'purchase_order', 'category', 'status', 'certificate_status', 'actual_weight_kg']
    list_filter = ['status', 'certificate_status']
    search_fields = ['barcode', 'skid_number', 'category']
