from rest_framework import serializers

from recims.core.serializers import TenantOwnedSerializerMixin
from recims.core.tenancy import can_access_tenant
from .models import InboundShipment, QCCriteria, QCInspection


class InboundShipmentSerializer(TenantOwnedSerializerMixin, serializers.ModelSerializer):
    class Meta:
        model = InboundShipment
        fields = '__all__'
        read_only_fields = ['tenant_id', 'status', 'net_weight_lbs', 'created_date', 'updated_date']
        extra_kwargs = {'load_id': {'required': False, 'allow_blank': True}}


class ShipmentStatusSerializer(serializers.Serializer):
    status = serializers.CharField()


class QCCriteriaSerializer(TenantOwnedSerializerMixin, serializers.ModelSerializer):
    class Meta:
        model = QCCriteria
        fields = '__all__'
        read_only_fields = ['tenant_id', 'created_date', 'updated_date']
        extra_kwargs = {
            'criteria_name': {'required': False, 'allow_blank': True},
            'material_category': {'required': False, 'allow_blank': True},
        }

    def validate(self, attrs):
        name = attrs.get('criteria_name', getattr(self.instance, 'criteria_name', ''))
        category = attrs.get('material_category', getattr(self.instance, 'material_category', ''))
        if not (name or '').strip() or not (category or '').strip():
            raise serializers.ValidationError({'error': 'Criteria name and material category are required'})
        return super().validate(attrs)


class QCInspectionSerializer(serializers.ModelSerializer):
    class Meta:
        model = QCInspection
        fields = '__all__'
        read_only_fields = [
            'tenant_id', 'inspection_id', 'load_id', 'criteria', 'inspector_name', 'inspector_email',
            'inspection_date', 'material_category', 'material_type', 'sku_number',
            'overall_result', 'pass_criteria_met', 'fail_criteria', 'approved_by', 'approved_date',
            'created_date', 'updated_date',
        ]

    def validate_shipment(self, shipment):
        request = self.context.get('request')
        if request is not None and not can_access_tenant(shipment.tenant_id, request.user):
            raise serializers.ValidationError('Shipment not found')
        return shipment


class DispositionSerializer(serializers.Serializer):
    disposition = serializers.ChoiceField(choices=QCInspection.DISPOSITION_CHOICES)
    disposition_notes = serializers.CharField(required=False, allow_blank=True, default='')
    downgrade_to_grade = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
