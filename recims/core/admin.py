from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User, Tenant, TenantCategory, TenantContact, AuditLog


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ['email', 'full_name', 'tenant_id', 'role', 'is_active', 'date_joined']
    list_filter = ['role', 'is_active', 'is_staff', 'date_joined']
    search_fields = ['email', 'full_name', 'tenant_id']
    ordering = ['email']
    fieldsets = BaseUserAdmin.fieldsets + (
        ('Tenant', {'fields': ('full_name', 'tenant_id', 'role', 'phone')}),
    )
    add_fieldsets = (
        (None, {'classes': ('wide',), 'fields': ('email', 'username', 'password1', 'password2')}),
        ('Tenant', {'fields': ('full_name', 'tenant_id', 'role')}),
    )


@admin.register(Tenant)
class TenantAdmin(admin.ModelAdmin):
    list_display = ['tenant_id', 'name', 'display_name', 'status', 'country_code', 'default_currency', 'created_date']
    list_filter = ['status', 'country_code', 'unit_system']
    search_fields = ['tenant_id', 'name', 'display_name', 'code']
    readonly_fields = ['created_date', 'updated_date']


@admin.register(TenantCategory)
class TenantCategoryAdmin(admin.ModelAdmin):
    list_display = ['category_name', 'tenant_id', 'load_type_mapping', 'category_type', 'sort_order', 'is_active']
    list_filter = ['category_type', 'is_active']
    search_fields = ['category_name', 'tenant_id']


@admin.register(TenantContact)
class TenantContactAdmin(admin.ModelAdmin):
    list_display = ['contact_name', 'tenant_id', 'contact_type', 'contact_email', 'job_title', 'is_active']
    list_filter = ['contact_type', 'is_active']
    search_fields = ['contact_name', 'contact_email', 'tenant_id']


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ['user', 'tenant_id', 'action', 'model_name', 'object_id', 'ip_address', 'created_at']
    list_filter = ['action', 'model_name', 'created_at']
    search_fields = ['user__email', 'model_name', 'object_id', 'object_reference']
    ordering = ['-created_at']
    readonly_fields = ['user', 'tenant_id', 'action', 'model_name', 'object_id', 'changes', 'ip_address', 'created_at']
