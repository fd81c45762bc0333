from django.contrib import admin
from .models import Customer, Vendor


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ['display_name', 'tenant_id', 'country', 'currency', 'primary_email', 'active', 'created_date']
    list_filter = ['country', 'currency', 'active']
    search_fields = ['display_name', 'company_name', 'primary_email', 'primary_phone']


@admin.register(Vendor)
class VendorAdmin(admin.ModelAdmin):
    list_display = ['display_name', 'tenant_id', 'country', 'currency', 'status', 'created_date']
    list_filter = ['country', 'currency', 'status']
    search_fields = ['display_name', 'company_name', 'primary_email', 'primary_phone']
