from rest_framework import serializers

from recims.core.serializers import TenantOwnedSerializerMixin
from .models import Inventory
from .services import needs_sorting, entry_quantity, available_from, METRIC_ENTRY_UNITS
from .units import normalize_weight, kg_to_lbs, lbs_to_kg, round_weight


class InventorySerializer(TenantOwnedSerializerMixin, serializers.ModelSerializer):
    class Meta:
        model = Inventory
        fields = '__all__'
        read_only_fields = ['tenant_id', 'quantity_on_hand', 'available_quantity', 'sorting_status',
                            'created_date', 'updated_date']
        extra_kwargs = {'inventory_id': {'required': False, 'allow_blank': True}}
        # create_inventory suffixes a taken inventory_id instead of rejecting it
        validators = []

    def update(self, instance, validated_data):
        # Re-derive both weights only when a quantity was sent; stored kg is
        # already converted, so it cannot be fed back through tonnes
        if validated_data.get('quantity_kg') is not None or validated_data.get('quantity_lbs') is not None:
            unit = validated_data.get('unit_of_measure', instance.unit_of_measure)
            kg, lbs = self._weights(unit, validated_data.get('quantity_kg'), validated_data.get('quantity_lbs'))
            validated_data['quantity_kg'] = kg
            validated_data['quantity_lbs'] = lbs
            validated_data['quantity_on_hand'] = entry_quantity(unit, kg, lbs)
        instance = super().update(instance, validated_data)
        instance.available_quantity = available_from(instance.quantity_on_hand, instance.reserved_quantity)
        instance.sorting_status = 'needs_sorting' if needs_sorting(instance) else 'classified'
        instance.save(update_fields=['available_quantity', 'sorting_status', 'updated_date'])
        return instance

    @staticmethod
    def _weights(unit, kg, lbs):
        """(kg, lbs) from whichever side was sent; the entry-unit side wins"""
        entry_side = kg if unit in METRIC_ENTRY_UNITS else lbs
        if entry_side is not None:
            return normalize_weight(unit, kg, lbs)
        if kg is not None:
            return round_weight(kg), kg_to_lbs(kg)
        return lbs_to_kg(lbs), round_weight(lbs)


class InventoryAdjustSerializer(serializers.Serializer):
    quantity = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0)
    reason = serializers.CharField(required=False, allow_blank=True, default='')


class InventoryClassifySerializer(serializers.Serializer):
    category = serializers.CharField(required=False, allow_blank=True)
    sub_category = serializers.CharField(required=False, allow_blank=True)
    product_type = serializers.CharField(required=False, allow_blank=True)
    format = serializers.CharField(required=False, allow_blank=True)
    purity = serializers.CharField(required=False, allow_blank=True)
    quality_grade = serializers.ChoiceField(choices=Inventory.GRADE_CHOICES, required=False)
    bin_location = serializers.CharField(required=False, allow_blank=True)
    zone = serializers.CharField(required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)
