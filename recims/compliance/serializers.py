from rest_framework import serializers

from recims.core.tenancy import can_access_tenant
from recims.parties.models import Vendor
from recims.purchasing.models import PurchaseOrder
from .models import ComplianceCertificate


class ComplianceCertificateSerializer(serializers.ModelSerializer):
    class Meta:
        model = ComplianceCertificate
        fields = '__all__'
        read_only_fields = [
            'tenant_id', 'certificate_number', 'purchase_order', 'po_number', 'is_partial', 'po_line_items',
            'weight_lbs', 'weight_kg', 'status', 'issued_by', 'issued_at', 'sent_to', 'sent_at',
            'created_date', 'updated_date',
        ]


class CertificateCreateSerializer(serializers.Serializer):
    """Input for a new certificate; ``purchase_order`` + ``item_ids`` certify PO lines"""
    tenant_id = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    purchase_order = serializers.PrimaryKeyRelatedField(queryset=PurchaseOrder.objects.all(), required=False, allow_null=True)
    item_ids = serializers.ListField(child=serializers.IntegerField(), required=False, default=list)
    vendor = serializers.PrimaryKeyRelatedField(queryset=Vendor.objects.all(), required=False, allow_null=True)
    vendor_name = serializers.CharField(required=False, allow_blank=True, default='')
    vendor_address = serializers.CharField(required=False, allow_blank=True, default='')
    certificate_date = serializers.DateField(required=False, allow_null=True)
    material_type = serializers.CharField(required=False, allow_blank=True, default='')
    material_category = serializers.CharField(required=False, allow_blank=True, default='')
    weight_lbs = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    weight_kg = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    diversion_rate = serializers.DecimalField(max_digits=5, decimal_places=2, required=False, allow_null=True,
                                              min_value=0, max_value=100)
    destruction_method = serializers.CharField(required=False, allow_blank=True, default='recycling')
    destruction_date = serializers.DateField(required=False, allow_null=True)
    destruction_location = serializers.CharField(required=False, allow_blank=True, default='')
    certificate_details = serializers.CharField(required=False, allow_blank=True, default='')
    certifying_officer = serializers.CharField(required=False, allow_blank=True, default='')
    certifying_title = serializers.CharField(required=False, allow_blank=True, default='')
    certifying_email = serializers.CharField(required=False, allow_blank=True, default='')
    certifying_phone = serializers.CharField(required=False, allow_blank=True, default='')
    contact_type = serializers.CharField(required=False, allow_blank=True, default='primary')
    status = serializers.ChoiceField(choices=[('draft', 'Draft'), ('issued', 'Issued')], required=False, default='draft')
    notes = serializers.CharField(required=False, allow_blank=True, default='')

    def _check_visible(self, obj, label):
        request = self.context.get('request')
        if obj is not None and request is not None and not can_access_tenant(obj.tenant_id, request.user):
            raise serializers.ValidationError(f'{label} not found')
        return obj

    def validate_purchase_order(self, value):
        return self._check_visible(value, 'Purchase order')

    def validate_vendor(self, value):
        return self._check_visible(value, 'Vendor')


class SendCertificateSerializer(serializers.Serializer):
    recipients = serializers.ListField(child=serializers.EmailField(), allow_empty=True)


class VoidCertificateSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default='')
