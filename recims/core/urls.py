from django.urls import path
from .views import (
    login, CustomTokenRefreshView, user_me, password_reset,
    tenant_list_create, tenant_detail,
    tenant_category_list_create, tenant_category_detail,
    tenant_contact_list_create, tenant_contact_detail,
    user_list_create, user_detail,
    audit_log_list, audit_log_detail,
)

urlpatterns = [
    # Auth endpoints
    path('auth/login/', login, name='login'),
    path('auth/refresh/', CustomTokenRefreshView.as_view(), name='token_refresh'),
    path('auth/me/', user_me, name='user-me'),
    path('auth/password-reset/', password_reset, name='password-reset'),

    # Tenant endpoints
    path('tenants/', tenant_list_create, name='tenant-list-create'),
    path('tenants/<int:pk>/', tenant_detail, name='tenant-detail'),
    path('tenant-categories/', tenant_category_list_create, name='tenant-category-list-create'),
    path('tenant-categories/<int:pk>/', tenant_category_detail, name='tenant-category-detail'),
    path('tenant-contacts/', tenant_contact_list_create, name='tenant-contact-list-create'),
    path('tenant-contacts/<int:pk>/', tenant_contact_detail, name='tenant-contact-detail'),

    # User endpoints
    path('users/', user_list_create, name='user-list-create'),
    path('users/<int:pk>/', user_detail, name='user-detail'),

    # AuditLog endpoints
    path('audit-logs/', audit_log_list, name='audit-log-list'),
    path('audit-logs/<int:pk>/', audit_log_detail, name='audit-log-detail'),
]
