from rest_framework import serializers

from recims.core.serializers import TenantOwnedSerializerMixin
from recims.core.tenancy import can_access_tenant
from recims.parties.models import Customer
from .models import SalesOrder, SalesOrderItem, Carrier, Waybill, WaybillItem


class VisibleRelationMixin:
    """Reject related rows the requesting user cannot see, as if they did not exist"""

    def check_visible(self, obj, label):
        request = self.context.get('request')
        if obj is not None and request is not None and not can_access_tenant(obj.tenant_id, request.user):
            raise serializers.ValidationError(f'{label} not found')
        return obj


class SalesOrderItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = SalesOrderItem
        fields = '__all__'
        read_only_fields = [
            'sales_order', 'tenant_id', 'line_number', 'line_subtotal', 'line_tax_amount', 'line_total',
            'created_date', 'updated_date',
        ]


class SalesOrderLineInputSerializer(serializers.Serializer):
    sku_snapshot = serializers.CharField(required=False, allow_blank=True, default='')
    description = serializers.CharField(required=False, allow_blank=True, default='')
    category = serializers.CharField(required=False, allow_blank=True, default='')
    product_type = serializers.CharField(required=False, allow_blank=True, default='')
    product_tax_category = serializers.CharField(required=False, allow_blank=True, default='tangible_goods')
    hts_code = serializers.CharField(required=False, allow_blank=True, default='')
    quantity_ordered = serializers.DecimalField(max_digits=14, decimal_places=3, required=False, allow_null=True)
    uom = serializers.CharField(required=False, allow_blank=True, default='kg')
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=4, required=False, allow_null=True)
    discount_amount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    cubic_feet = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)


class SalesOrderSerializer(TenantOwnedSerializerMixin, serializers.ModelSerializer):
    items = SalesOrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = SalesOrder
        fields = '__all__'
        read_only_fields = [
            'tenant_id', 'so_number', 'customer', 'currency', 'subtotal', 'shipping_amount', 'tax_total',
            'tax_gst', 'tax_hst', 'tax_pst', 'tax_qst', 'total_amount', 'tax_breakdown',
            'waybill_number', 'waybill_created_at', 'created_by', 'created_date', 'updated_date',
        ]


class SalesOrderCreateSerializer(VisibleRelationMixin, serializers.Serializer):
    tenant_id = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    customer = serializers.PrimaryKeyRelatedField(queryset=Customer.objects.all(), required=False, allow_null=True)
    customer_name = serializers.CharField(required=False, allow_blank=True, default='')
    po_number = serializers.CharField(required=False, allow_blank=True, default='')
    ship_date = serializers.DateField(required=False, allow_null=True)
    carrier_code = serializers.CharField(required=False, allow_blank=True, default='')
    terms = serializers.CharField(required=False, allow_blank=True, default='')
    ship_method = serializers.CharField(required=False, allow_blank=True, default='')
    ship_line1 = serializers.CharField(required=False, allow_blank=True, default='')
    ship_line2 = serializers.CharField(required=False, allow_blank=True, default='')
    ship_line3 = serializers.CharField(required=False, allow_blank=True, default='')
    ship_city = serializers.CharField(required=False, allow_blank=True, default='')
    ship_region = serializers.CharField(required=False, allow_blank=True, default='')
    ship_postal_code = serializers.CharField(required=False, allow_blank=True, default='')
    ship_country = serializers.CharField(required=False, allow_blank=True, default='')
    ship_contact_person = serializers.CharField(required=False, allow_blank=True, default='')
    ship_phone = serializers.CharField(required=False, allow_blank=True, default='')
    ship_email = serializers.CharField(required=False, allow_blank=True, default='')
    shipping_amount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    total_cubic_feet = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    comments_internal = serializers.CharField(required=False, allow_blank=True, default='')
    items = SalesOrderLineInputSerializer(many=True, required=False, default=list)

    def validate_customer(self, value):
        return self.check_visible(value, 'Customer')


class TaxQuoteSerializer(VisibleRelationMixin, serializers.Serializer):
    """Tax preview for an order that has not been saved yet"""
    country = serializers.CharField(required=False, allow_blank=True, default='CA')
    province = serializers.CharField(required=False, allow_blank=True, default='')
    customer = serializers.PrimaryKeyRelatedField(queryset=Customer.objects.all(), required=False, allow_null=True)
    customer_exempt = serializers.BooleanField(required=False, default=False)
    shipping_amount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    items = SalesOrderLineInputSerializer(many=True, required=False, default=list)

    def validate_customer(self, value):
        return self.check_visible(value, 'Customer')


class USTaxSerializer(serializers.Serializer):
    subtotal = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, default=0)
    rate = serializers.DecimalField(max_digits=6, decimal_places=5, required=False, allow_null=True,
                                    min_value=0, max_value=1)


class CarrierSerializer(TenantOwnedSerializerMixin, serializers.ModelSerializer):
    class Meta:
        model = Carrier
        fields = '__all__'
        read_only_fields = ['tenant_id', 'created_date', 'updated_date']

    def validate_company_name(self, value):
        if not value or not value.strip():
            raise serializers.ValidationError('Company name is required')
        return value.strip()

    def validate_carrier_code(self, value):
        return (value or '').strip().upper()


class WaybillItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = WaybillItem
        fields = '__all__'


class WaybillSerializer(serializers.ModelSerializer):
    items = WaybillItemSerializer(many=True, read_only=True)

    class Meta:
        model = Waybill
        fields = '__all__'
        read_only_fields = [
            'tenant_id', 'waybill_number', 'sales_order', 'so_number', 'customer', 'customer_name',
            'customer_address', 'customer_country', 'carrier', 'carrier_name',
            'total_gross_weight_kg', 'total_gross_weight_lbs', 'total_net_weight_kg', 'total_net_weight_lbs',
            'total_volume_cubic_feet', 'total_volume_cubic_yards', 'total_volume_cubic_meters',
            'total_packages', 'authorized_by', 'authorized_title', 'signature_url', 'signature_date',
            'created_by', 'created_date', 'updated_date',
        ]


class WaybillCreateSerializer(VisibleRelationMixin, serializers.Serializer):
    dispatch_date = serializers.DateField(required=False, allow_null=True)
    carrier = serializers.PrimaryKeyRelatedField(queryset=Carrier.objects.all(), required=False, allow_null=True)
    vehicle_number = serializers.CharField(required=False, allow_blank=True, default='')
    driver_name = serializers.CharField(required=False, allow_blank=True, default='')
    incoterms = serializers.CharField(required=False, allow_blank=True, default='FOB')
    origin_country = serializers.CharField(required=False, allow_blank=True, default='')
    special_instructions = serializers.CharField(required=False, allow_blank=True, default='')
    tracking_number = serializers.CharField(required=False, allow_blank=True, default='')
    bol_number = serializers.CharField(required=False, allow_blank=True, default='')

    def validate_carrier(self, value):
        return self.check_visible(value, 'Carrier')
