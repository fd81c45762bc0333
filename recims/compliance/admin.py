from django.contrib import admin
from .models import ComplianceCertificate, CertificateSequence


@admin.register(ComplianceCertificate)
class ComplianceCertificateAdmin(admin.ModelAdmin):
    list_display = ['certificate_number', 'tenant_id', 'vendor_name', 'po_number', 'weight_lbs', 'status', 'certificate_date']
    list_filter = ['status', 'is_partial', 'destruction_method']
    search_fields = ['certificate_number', 'vendor_name', 'po_number']


@admin.register(CertificateSequence)
class CertificateSequenceAdmin(admin.ModelAdmin):
    list_display = ['tenant_key', 'year', 'last_number']
