from django.contrib.auth.models import AbstractUser, UserManager as DjangoUserManager
from django.db import models


def default_number_format():
    return {'decimal': '.', 'thousand': ','}


class UserManager(DjangoUserManager):
    """Email is the login identifier; username mirrors it when not given"""

    def _create_user(self, username, email, password, **extra_fields):
        email = self.normalize_email(email)
        if not email:
            raise ValueError('The email must be set')
        username = username or email
        return super()._create_user(username, email, password, **extra_fields)

    def create_user(self, email=None, password=None, username=None, **extra_fields):
        extra_fields.setdefault('is_staff', False)
        extra_fields.setdefault('is_superuser', False)
        return self._create_user(username, email, password, **extra_fields)

    def create_superuser(self, email=None, password=None, username=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', User.ROLE_SUPER_ADMIN)
        return self._create_user(username, email, password, **extra_fields)


class User(AbstractUser):
    """Operator account, bound to a tenant"""
    ROLE_SUPER_ADMIN = 'super_admin'
    ROLE_ADMIN = 'admin'
    ROLE_CHOICES = [
        ('super_admin', 'Super Admin'),
        ('admin', 'Admin'),
        ('manager', 'Manager'),
        ('operator', 'Operator'),
        ('user', 'User'),
    ]

    email = models.EmailField(unique=True)
    full_name = models.CharField(max_length=200, blank=True)
    tenant_id = models.CharField(max_length=100, blank=True, null=True, db_index=True)
    role = models.CharField(max_length=30, choices=ROLE_CHOICES, default='user')
    phone = models.CharField(max_length=30, blank=True, null=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['username']

    objects = UserManager()

    def __str__(self):
        return self.email

    class Meta:
        db_table = 'users'


class Tenant(models.Model):
    """Customer organization; every tenant-owned row carries its tenant_id"""
    STATUS_CHOICES = [
        ('ACTIVE', 'Active'),
        ('SUSPENDED', 'Suspended'),
        ('INACTIVE', 'Inactive'),
    ]
    UNIT_SYSTEM_CHOICES = [
        ('METRIC', 'Metric'),
        ('IMPERIAL', 'Imperial'),
    ]

    tenant_id = models.CharField(max_length=100, unique=True)
    name = models.CharField(max_length=200)
    display_name = models.CharField(max_length=200, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='ACTIVE')
    code = models.CharField(max_length=100, blank=True)
    tenant_code = models.CharField(max_length=50, blank=True)
    base_subdomain = models.CharField(max_length=100, blank=True)
    business_type = models.CharField(max_length=100, default='general_manufacturing')
    primary_contact_name = models.CharField(max_length=200, blank=True)
    primary_contact_email = models.CharField(max_length=200, blank=True)
    primary_contact_phone = models.CharField(max_length=50, blank=True)
    default_currency = models.CharField(max_length=3, default='USD')
    country_code = models.CharField(max_length=2, default='US')
    region = models.CharField(max_length=100, default='Global')
    phone_number_format = models.CharField(max_length=50, default='+1 (XXX) XXX-XXXX')
    unit_system = models.CharField(max_length=10, choices=UNIT_SYSTEM_CHOICES, default='METRIC')
    timezone = models.CharField(max_length=64, default='America/New_York')
    date_format = models.CharField(max_length=20, default='YYYY-MM-DD')
    branding_primary_color = models.CharField(max_length=20, default='#007A6E')
    branding_secondary_color = models.CharField(max_length=20, default='#005247')
    branding_logo_url = models.CharField(max_length=500, blank=True)
    address_line1 = models.CharField(max_length=200, blank=True)
    address_line2 = models.CharField(max_length=200, blank=True)
    city = models.CharField(max_length=100, blank=True)
    state_province = models.CharField(max_length=100, blank=True)
    postal_code = models.CharField(max_length=20, blank=True)
    address_country_code = models.CharField(max_length=2, blank=True)
    website = models.CharField(max_length=200, blank=True)
    description = models.TextField(blank=True)
    number_format = models.JSONField(default=default_number_format, blank=True)
    default_load_types = models.JSONField(default=list, blank=True)
    features = models.JSONField(default=dict, blank=True)
    api_keys = models.JSONField(default=dict, blank=True)
    created_date = models.DateTimeField(auto_now_add=True)
    updated_date = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.display_name or self.name

    class Meta:
        db_table = 'tenants'
        ordering = ['-created_date', '-id']


class TenantCategory(models.Model):
    """Material categories a tenant accepts, mapped to a load type"""
    tenant_id = models.CharField(max_length=100, db_index=True)
    category_name = models.CharField(max_length=200)
    product_category = models.CharField(max_length=200, blank=True)
    category_type = models.CharField(max_length=50, default='predefined')
    sub_categories = models.JSONField(default=list, blank=True)
    load_type_mapping = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    sort_order = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_date = models.DateTimeField(auto_now_add=True)
    updated_date = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.category_name

    class Meta:
        db_table = 'tenant_categories'
        ordering = ['-created_date', '-id']


class TenantContact(models.Model):
    """Signing and notification contacts of a tenant"""
    CONTACT_TYPE_CHOICES = [
        ('primary', 'Primary'),
        ('secondary', 'Secondary'),
        ('backup', 'Backup'),
    ]
    SIGNATURE_TYPE_CHOICES = [
        ('none', 'None'),
        ('upload', 'Upload'),
        ('generated', 'Generated'),
    ]

    tenant_id = models.CharField(max_length=100, db_index=True)
    contact_type = models.CharField(max_length=20, choices=CONTACT_TYPE_CHOICES, default='primary')
    contact_name = models.CharField(max_length=200)
    first_name = models.CharField(max_length=100, blank=True)
    last_name = models.CharField(max_length=100, blank=True)
    contact_email = models.CharField(max_length=200)
    contact_phone = models.CharField(max_length=50, blank=True)
    job_title = models.CharField(max_length=200)
    signature_type = models.CharField(max_length=20, choices=SIGNATURE_TYPE_CHOICES, default='none')
    signature_url = models.CharField(max_length=500, blank=True)
    signature_font = models.CharField(max_length=100, default='Allura')
    is_active = models.BooleanField(default=True)
    created_date = models.DateTimeField(auto_now_add=True)
    updated_date = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.contact_name} ({self.contact_type})"

    class Meta:
        db_table = 'tenant_contacts'
        ordering = ['-created_date', '-id']


class AuditLog(models.Model):
    """Audit trail for critical operations"""
    ACTION_CHOICES = [
        ('create', 'Create'),
        ('update', 'Update'),
        ('delete', 'Delete'),
        ('login', 'Login'),
        ('stock_adjust', 'Stock Adjustment'),
        ('po_create', 'Purchase Order Created'),
        ('po_receive', 'Purchase Order Item Received'),
        ('qc_inspect', 'QC Inspection Recorded'),
        ('qc_disposition', 'QC Disposition Updated'),
        ('certificate_issue', 'Certificate Issued'),
        ('certificate_send', 'Certificate Sent'),
        ('certificate_void', 'Certificate Voided'),
        ('so_create', 'Sales Order Created'),
        ('waybill_create', 'Waybill Created'),
    ]

    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, related_name='audit_logs')
    tenant_id = models.CharField(max_length=100, blank=True, null=True, db_index=True)
    action = models.CharField(max_length=50, choices=ACTION_CHOICES)
    model_name = models.CharField(max_length=100)
    object_id = models.CharField(max_length=100)
    object_name = models.CharField(max_length=255, blank=True, null=True, help_text="Human-readable name of the object (e.g., PO number, certificate number)")
    object_reference = models.CharField(max_length=255, blank=True, null=True, help_text="Reference identifier (e.g., skid barcode, load id)")
    changes = models.JSONField(default=dict, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'audit_logs'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['-created_at'], name='audit_created_idx'),
            models.Index(fields=['action'], name='audit_action_idx'),
            models.Index(fields=['model_name'], name='audit_model_idx'),
            models.Index(fields=['object_reference'], name='audit_reference_idx'),
        ]
