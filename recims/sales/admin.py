from django.contrib import admin
from .models import SalesOrder, SalesOrderItem, Carrier, Waybill, WaybillItem


class SalesOrderItemInline(admin.TabularInline):
    model = SalesOrderItem
    extra = 0


class WaybillItemInline(admin.TabularInline):
    model = WaybillItem
    extra = 0


@admin.register(SalesOrder)
class SalesOrderAdmin(admin.ModelAdmin):
    list_display = ['so_number', 'tenant_id', 'customer_name', 'status', 'total_amount', 'currency', 'created_date']
    list_filter = ['status', 'currency']
    search_fields = ['so_number', 'customer_name', 'po_number']
    inlines = [SalesOrderItemInline]


@admin.register(Carrier)
class CarrierAdmin(admin.ModelAdmin):
    list_display = ['company_name', 'carrier_code', 'tenant_id', 'carrier_type', 'status']
    list_filter = ['carrier_type', 'status']
    search_fields = ['company_name', 'carrier_code']


@admin.register(Waybill)
class WaybillAdmin(admin.ModelAdmin):
    list_display = ['waybill_number', 'tenant_id', 'so_number', 'customer_name', 'dispatch_date', 'status']
    list_filter = ['status']
    search_fields = ['waybill_number', 'so_number', 'customer_name']
    inlines = [WaybillItemInline]
