from rest_framework import serializers

from recims.core.serializers import TenantOwnedSerializerMixin
from .models import PurchaseOrder, PurchaseOrderItem

# Manual edits; receiving and certification set the remaining statuses
MANUAL_STATUS_TRANSITIONS = {
    'draft': ('sent', 'cancelled'),
    'sent': ('cancelled',),
}


class PurchaseOrderItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = PurchaseOrderItem
        fields = '__all__'
        read_only_fields = [
            'purchase_order', 'tenant_id', 'line_number', 'skid_number', 'barcode', 'status', 'line_total',
            'actual_weight_kg', 'actual_weight_lbs', 'received_date', 'received_by',
            'certificate_status', 'certificate_ids', 'certified_weight_kg', 'certified_weight_lbs',
            'created_date', 'updated_date',
        ]


class PurchaseOrderLineInputSerializer(serializers.Serializer):
    """A line as entered on the PO form; skid numbers are only grouping keys here"""
    skid_number = serializers.CharField(required=False, allow_blank=True, default='1')
    category = serializers.CharField(required=False, allow_blank=True, default='')
    sub_category = serializers.CharField(required=False, allow_blank=True, default='')
    product_type = serializers.CharField(required=False, allow_blank=True, default='')
    format = serializers.CharField(required=False, allow_blank=True, default='')
    purity = serializers.CharField(required=False, allow_blank=True, default='UNKNOWN')
    expected_weight_kg = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    expected_weight_lbs = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=4, required=False, allow_null=True)


class PurchaseOrderSerializer(TenantOwnedSerializerMixin, serializers.ModelSerializer):
    items = PurchaseOrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = PurchaseOrder
        fields = '__all__'
        read_only_fields = [
            'tenant_id', 'po_number', 'barcode_prefix', 'currency', 'created_by',
            'total_expected_weight_kg', 'total_expected_weight_lbs',
            'total_received_weight_kg', 'total_received_weight_lbs',
            'total_skids_expected', 'total_skids_received', 'total_amount',
            'created_date', 'updated_date',
        ]

    def validate_status(self, value):
        """Receiving and certification drive the later statuses"""
        current = self.instance.status if self.instance else 'draft'
        if value != current and value not in MANUAL_STATUS_TRANSITIONS.get(current, ()):
            raise serializers.ValidationError(f"Cannot change status from {current} to {value}")
        return value


class ReceiveItemSerializer(serializers.Serializer):
    actual_weight_kg = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    actual_weight_lbs = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    quality_grade = serializers.ChoiceField(choices=PurchaseOrderItem.GRADE_CHOICES, required=False, allow_blank=True)
    bin_location = serializers.CharField(required=False, allow_blank=True)
    zone = serializers.CharField(required=False, allow_blank=True)
    variance_notes = serializers.CharField(required=False, allow_blank=True)
    inspection_notes = serializers.CharField(required=False, allow_blank=True)
    sku_number = serializers.CharField(required=False, allow_blank=True)
