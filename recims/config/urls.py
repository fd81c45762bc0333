"""
URL configuration for the RecIMS project.

Every app mounts its routes under ``/api/``.
"""
from django.contrib import admin
from django.urls import path, include, re_path
from django.conf import settings
from django.views.static import serve

admin.site.site_header = "RecIMS Administration"
admin.site.site_title = "RecIMS Admin Portal"
admin.site.index_title = "Recycling inventory management"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('recims.core.urls')),
    path('api/', include('recims.entities.urls')),
    path('api/', include('recims.parties.urls')),
    path('api/', include('recims.inventory.urls')),
    path('api/', include('recims.purchasing.urls')),
    path('api/', include('recims.shipments.urls')),
    path('api/', include('recims.compliance.urls')),
    path('api/', include('recims.sales.urls')),
    path('api/', include('recims.reports.urls')),
    path('api/', include('recims.integrations.urls')),
    re_path(r'^media/(?P<path>.*)$', serve, {'document_root': settings.MEDIA_ROOT}),
    re_path(r'^static/(?P<path>.*)$', serve, {'document_root': settings.STATIC_ROOT}),
]
