from django.contrib import admin
from .models import EntityRecord


@admin.register(EntityRecord)
class EntityRecordAdmin(admin.ModelAdmin):
    list_display = ['id', 'entity_name', 'tenant_id', 'created_date', 'updated_date']
    list_filter = ['entity_name']
    search_fields = ['entity_name', 'tenant_id']
