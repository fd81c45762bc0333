from rest_framework import serializers

from .models import EntityRecord


class EntityRecordSerializer(serializers.ModelSerializer):
    """Flattens a record to ``{id, **payload}``; payload keys win over the row's own columns"""

    class Meta:
        model = EntityRecord
        fields = ['id', 'entity_name', 'tenant_id', 'payload', 'created_date', 'updated_date']

    def to_representation(self, instance):
        result = {'id': instance.id}
        payload = instance.payload if isinstance(instance.payload, dict) else {}
        result.update({k: v for k, v in payload.items() if k != 'id'})
        if 'tenant_id' not in result and instance.tenant_id:
            result['tenant_id'] = instance.tenant_id
        if 'created_date' not in result and instance.created_date:
            result['created_date'] = instance.created_date.isoformat()
        if 'updated_date' not in result and instance.updated_date:
            result['updated_date'] = instance.updated_date.isoformat()
        return result
