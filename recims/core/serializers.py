import time

from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from .models import User, Tenant, TenantCategory, TenantContact, AuditLog
from .tenancy import is_super_admin, resolve_write_tenant
from .utils import normalize_tenant_id, sanitize_code, to_boolean


class TenantOwnedSerializerMixin:
    """
    Stamps ``tenant_id`` on write: the actor's own tenant, or any tenant
    a super admin asks for. Needs ``request`` in the serializer context.
    """
    tenant_required = False

    def stamp_tenant_id(self, attrs):
        request = self.context.get('request')
        user = getattr(request, 'user', None)
        requested = self.initial_data.get('tenant_id') if hasattr(self, 'initial_data') else None
        existing = self.instance.tenant_id if self.instance is not None else None
        tenant_id = resolve_write_tenant(user, requested, existing)
        if self.tenant_required and not tenant_id:
            raise serializers.ValidationError({'tenant_id': 'Tenant identifier is required'})
        attrs['tenant_id'] = tenant_id
        return attrs

    def validate(self, attrs):
        attrs = super().validate(attrs)
        return self.stamp_tenant_id(attrs)


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'email', 'full_name', 'tenant_id', 'role', 'phone', 'is_active', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def validate_tenant_id(self, value):
        return normalize_tenant_id(value)

    def validate(self, attrs):
        request = self.context.get('request')
        actor = getattr(request, 'user', None)
        if actor is not None and not is_super_admin(actor):
            # Tenant admins only manage users inside their own tenant
            attrs['tenant_id'] = normalize_tenant_id(actor.tenant_id)
            if attrs.get('role') == User.ROLE_SUPER_ADMIN:
                raise serializers.ValidationError({'role': 'Only a super admin can grant the super_admin role'})
        return attrs


class UserCreateSerializer(UserSerializer):
    password = serializers.CharField(write_only=True, validators=[validate_password])

    class Meta(UserSerializer.Meta):
        fields = UserSerializer.Meta.fields + ['password']

    def create(self, validated_data):
        password = validated_data.pop('password')
        email = validated_data.pop('email')
        return User.objects.create_user(email=email, password=password, **validated_data)


class MeSummarySerializer(serializers.ModelSerializer):
    """Shape returned by the auth endpoints"""

    class Meta:
        model = User
        fields = ['id', 'email', 'full_name', 'tenant_id', 'role']


class TenantSerializer(serializers.ModelSerializer):
    class Meta:
        model = Tenant
        fields = '__all__'
        read_only_fields = ['created_date', 'updated_date']
        extra_kwargs = {
            'tenant_id': {'required': False},
            'name': {'required': False},
        }

    def validate(self, attrs):
        existing = self.instance
        name = attrs.get('name') or (existing.name if existing else '')
        if not name or not str(name).strip():
            raise serializers.ValidationError({'name': 'Tenant name is required'})
        name = str(name).strip().upper()
        attrs['name'] = name

        code = sanitize_code(attrs.get('code'), existing.code if existing and existing.code else name)
        attrs['code'] = code
        attrs['base_subdomain'] = sanitize_code(
            attrs.get('base_subdomain'),
            existing.base_subdomain if existing and existing.base_subdomain else code,
        )

        tenant_id = normalize_tenant_id(
            attrs.get('tenant_id') or (existing.tenant_id if existing else None) or f"TNT-{int(time.time() * 1000)}"
        )
        attrs['tenant_id'] = tenant_id

        tenant_code = attrs.get('tenant_code', existing.tenant_code if existing else None)
        attrs['tenant_code'] = (tenant_code or code).upper()

        if existing is None:
            attrs.setdefault('display_name', name)
            attrs.setdefault('address_country_code', attrs.get('country_code', 'US'))
        if 'status' in attrs:
            attrs['status'] = attrs['status'].upper()
        return attrs

    def to_internal_value(self, data):
        data = data.copy()
        for field in ('status', 'unit_system'):
            if isinstance(data.get(field), str):
                data[field] = data[field].upper()
        return super().to_internal_value(data)


class TenantCategorySerializer(TenantOwnedSerializerMixin, serializers.ModelSerializer):
    tenant_required = True

    class Meta:
        model = TenantCategory
        fields = '__all__'
        read_only_fields = ['tenant_id', 'created_date', 'updated_date']
        extra_kwargs = {
            'category_name': {'error_messages': {'required': 'Category name is required', 'blank': 'Category name is required'}},
            'load_type_mapping': {'error_messages': {'required': 'Load type mapping is required', 'blank': 'Load type mapping is required'}},
        }

    def to_internal_value(self, data):
        data = data.copy()
        if 'sort_order' in data:
            try:
                data['sort_order'] = int(float(data['sort_order']))
            except (TypeError, ValueError):
                data['sort_order'] = 0
        if 'sub_categories' in data:
            entries = data['sub_categories'] if isinstance(data['sub_categories'], list) else []
            data['sub_categories'] = [str(e).strip() for e in entries if e is not None and str(e).strip()]
        if 'is_active' in data:
            data['is_active'] = to_boolean(data['is_active'], True)
        return super().to_internal_value(data)

    def validate(self, attrs):
        for field in ('category_name', 'product_category', 'description'):
            if field in attrs:
                attrs[field] = (attrs[field] or '').strip()
        if 'category_type' in attrs:
            attrs['category_type'] = (attrs['category_type'] or 'predefined').lower()
        if 'load_type_mapping' in attrs:
            attrs['load_type_mapping'] = attrs['load_type_mapping'].strip().upper()
        return super().validate(attrs)


class TenantContactSerializer(TenantOwnedSerializerMixin, serializers.ModelSerializer):
    tenant_required = True

    class Meta:
        model = TenantContact
        fields = '__all__'
        read_only_fields = ['tenant_id', 'created_date', 'updated_date']
        extra_kwargs = {
            'contact_name': {'error_messages': {'required': 'Contact name is required', 'blank': 'Contact name is required'}},
            'contact_email': {'error_messages': {'required': 'Contact email is required', 'blank': 'Contact email is required'}},
            'job_title': {'error_messages': {'required': 'Job title is required', 'blank': 'Job title is required'}},
        }

    def to_internal_value(self, data):
        data = data.copy()
        if 'contact_type' in data:
            contact_type = str(data['contact_type'] or 'primary').lower()
            data['contact_type'] = contact_type if contact_type in ('primary', 'secondary', 'backup') else 'primary'
        if 'signature_type' in data:
            signature_type = str(data['signature_type'] or 'none').lower()
            data['signature_type'] = signature_type if signature_type in ('none', 'upload', 'generated') else 'none'
        if not data.get('signature_font') and 'signature_font' in data:
            data['signature_font'] = 'Allura'
        if 'is_active' in data:
            data['is_active'] = to_boolean(data['is_active'], True)
        return super().to_internal_value(data)

    def validate(self, attrs):
        for field in ('contact_name', 'contact_email', 'job_title', 'first_name', 'last_name',
                      'contact_phone', 'signature_url', 'signature_font'):
            if field in attrs and isinstance(attrs[field], str):
                attrs[field] = attrs[field].strip()
        return super().validate(attrs)


class AuditLogSerializer(serializers.ModelSerializer):
    user = MeSummarySerializer(read_only=True)

    class Meta:
        model = AuditLog
        fields = ['id', 'user', 'tenant_id', 'action', 'model_name', 'object_id', 'object_name',
                  'object_reference', 'changes', 'ip_address', 'created_at']
