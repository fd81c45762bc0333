from rest_framework import serializers

from recims.core.serializers import TenantOwnedSerializerMixin
from .models import Customer, Vendor
from .validators import validate_party


class PartySerializerMixin(TenantOwnedSerializerMixin):
    party_kind = 'customer'

    def validate(self, attrs):
        # Validate the record as it will be stored, not only the submitted fields
        fields = self.Meta.model._meta.fields
        if self.instance is not None:
            values = {field.name: getattr(self.instance, field.name) for field in fields}
        else:
            values = {field.name: field.get_default() for field in fields}
        values.update(attrs)
        if self.instance is None and 'bill_country_code' not in attrs:
            attrs['bill_country_code'] = values['bill_country_code'] = values.get('country')
        errors = validate_party(values, self.party_kind)
        if errors:
            raise serializers.ValidationError(errors)
        for field in ('bill_region', 'ship_region', 'remit_region'):
            if attrs.get(field):
                attrs[field] = attrs[field].upper()
        return super().validate(attrs)


class CustomerSerializer(PartySerializerMixin, serializers.ModelSerializer):
    party_kind = 'customer'

    class Meta:
        model = Customer
        fields = '__all__'
        read_only_fields = ['tenant_id', 'created_date', 'updated_date']
        extra_kwargs = {'display_name': {'required': False, 'allow_blank': True}}


class VendorSerializer(PartySerializerMixin, serializers.ModelSerializer):
    party_kind = 'vendor'

    class Meta:
        model = Vendor
        fields = '__all__'
        read_only_fields = ['tenant_id', 'created_date', 'updated_date']
        extra_kwargs = {'display_name': {'required': False, 'allow_blank': True}}
