from decimal import Decimal

from django.db import models

from recims.parties.models import Vendor
from recims.purchasing.models import PurchaseOrder


class ComplianceCertificate(models.Model):
    """Certificate of recycling/destruction, optionally covering PO lines"""
    STATUS_CHOICES = [
        ('draft', 'Draft'),
        ('issued', 'Issued'),
        ('sent', 'Sent'),
        ('void', 'Void'),
    ]

    tenant_id = models.CharField(max_length=100, null=True, blank=True, db_index=True)
    certificate_number = models.CharField(max_length=50)
    purchase_order = models.ForeignKey(
        PurchaseOrder, on_delete=models.SET_NULL, null=True, blank=True, related_name='certificates'
    )
    po_number = models.CharField(max_length=100, blank=True)
    is_partial = models.BooleanField(default=False)
    po_line_items = models.JSONField(default=list, blank=True)
    vendor = models.ForeignKey(Vendor, on_delete=models.SET_NULL, null=True, blank=True, related_name='certificates')
    vendor_name = models.CharField(max_length=200, blank=True)
    vendor_address = models.TextField(blank=True)
    certificate_date = models.DateField(null=True, blank=True)
    material_type = models.CharField(max_length=255, blank=True)
    material_category = models.CharField(max_length=255, blank=True)
    weight_lbs = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    weight_kg = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    diversion_rate = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('95.00'))
    destruction_method = models.CharField(max_length=100, default='recycling')
    destruction_date = models.DateField(null=True, blank=True)
    destruction_location = models.CharField(max_length=255, blank=True)
    certificate_details = models.TextField(blank=True)
    certifying_officer = models.CharField(max_length=200, blank=True)
    certifying_title = models.CharField(max_length=200, blank=True)
    certifying_email = models.CharField(max_length=200, blank=True)
    certifying_phone = models.CharField(max_length=50, blank=True)
    contact_type = models.CharField(max_length=20, default='primary')
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='draft')
    issued_by = models.CharField(max_length=200, blank=True)
    issued_at = models.DateTimeField(null=True, blank=True)
    sent_to = models.TextField(blank=True)
    sent_at = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True)
    created_date = models.DateTimeField(auto_now_add=True)
    updated_date = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.certificate_number

    class Meta:
        db_table = 'compliance_certificates'
        ordering = ['-created_date', '-id']
        constraints = [
            models.UniqueConstraint(fields=['tenant_id', 'certificate_number'], name='uniq_certificate_tenant_number'),
        ]
        indexes = [
            models.Index(fields=['tenant_id', 'status'], name='idx_cert_tenant_status'),
        ]


class CertificateSequence(models.Model):
    """Last certificate number handed out per tenant and year; locked while allocating"""
    tenant_key = models.CharField(max_length=100, blank=True)
    year = models.PositiveIntegerField()
    last_number = models.PositiveIntegerField(default=0)

    def __str__(self):
        return f"{self.tenant_key or '-'} {self.year}: {self.last_number}"

    class Meta:
        db_table = 'certificate_sequences'
        constraints = [
            models.UniqueConstraint(fields=['tenant_key', 'year'], name='uniq_certificate_sequence'),
        ]
