from django.db import models


class EntityRecord(models.Model):
    """Schemaless tenant-scoped record; ``payload`` is stored as the client sent it"""
    entity_name = models.CharField(max_length=100, db_index=True)
    tenant_id = models.CharField(max_length=100, null=True, blank=True, db_index=True)
    payload = models.JSONField(default=dict, blank=True)
    created_date = models.DateTimeField(auto_now_add=True)
    updated_date = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.entity_name}#{self.pk}"

    class Meta:
        db_table = 'entity_records'
        ordering = ['-created_date', '-id']
        indexes = [
            models.Index(fields=['entity_name', 'tenant_id'], name='idx_entity_name_tenant'),
        ]
