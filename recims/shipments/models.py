from django.db import models

from recims.inventory.units import kg_to_lbs, round_weight
from recims.parties.models import Vendor
from recims.purchasing.models import PurchaseOrder


class InboundShipment(models.Model):
    """A truck load arriving at the yard"""
    STATUS_CHOICES = [
        ('arrived', 'Arrived'),
        ('pending_inspection', 'Pending Inspection'),
        ('inspecting', 'Inspecting'),
        ('approved', 'Approved'),
        ('rejected', 'Rejected'),
        ('completed', 'Completed'),
    ]

    tenant_id = models.CharField(max_length=100, null=True, blank=True, db_index=True)
    load_id = models.CharField(max_length=100, db_index=True)
    supplier_name = models.CharField(max_length=200, blank=True)
    vendor = models.ForeignKey(Vendor, on_delete=models.SET_NULL, null=True, blank=True, related_name='inbound_shipments')
    carrier_name = models.CharField(max_length=200, blank=True)
    truck_number = models.CharField(max_length=50, blank=True)
    driver_name = models.CharField(max_length=200, blank=True)
    load_type = models.CharField(max_length=50, blank=True)
    product_category = models.CharField(max_length=100, blank=True)
    product_type = models.CharField(max_length=100, blank=True)
    sku_number = models.CharField(max_length=100, blank=True)
    gross_weight_kg = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    tare_weight_kg = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    net_weight_kg = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    net_weight_lbs = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    arrival_time = models.DateTimeField(null=True, blank=True)
    status = models.CharField(max_length=30, choices=STATUS_CHOICES, default='pending_inspection')
    bin_assigned = models.CharField(max_length=100, blank=True)
    zone = models.CharField(max_length=100, blank=True)
    notes = models.TextField(blank=True)
    operator_name = models.CharField(max_length=200, blank=True)
    purchase_order = models.ForeignKey(
        PurchaseOrder, on_delete=models.SET_NULL, null=True, blank=True, related_name='inbound_shipments'
    )
    created_date = models.DateTimeField(auto_now_add=True)
    updated_date = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.load_id

    def derive_net_weight(self):
        """Net is gross minus tare (never negative) whenever both scale readings exist"""
        if self.gross_weight_kg is not None and self.tare_weight_kg is not None:
            self.net_weight_kg = round_weight(max(0, self.gross_weight_kg - self.tare_weight_kg))
            self.net_weight_lbs = kg_to_lbs(self.net_weight_kg)
        elif self.net_weight_kg is not None and self.net_weight_lbs is None:
            self.net_weight_lbs = kg_to_lbs(self.net_weight_kg)

    def save(self, *args, **kwargs):
        self.derive_net_weight()
        super().save(*args, **kwargs)

    class Meta:
        db_table = 'inbound_shipments'
        ordering = ['-created_date', '-id']
        indexes = [
            models.Index(fields=['tenant_id', 'status'], name='idx_shipment_tenant_status'),
            models.Index(fields=['arrival_time'], name='idx_shipment_arrival'),
        ]


class QCCriteria(models.Model):
    """Acceptance thresholds for one material category"""
    STATUS_CHOICES = [
        ('active', 'Active'),
        ('inactive', 'Inactive'),
    ]

    tenant_id = models.CharField(max_length=100, null=True, blank=True, db_index=True)
    criteria_name = models.CharField(max_length=200)
    material_category = models.CharField(max_length=100)
    min_purity_percent = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)
    max_contamination_percent = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)
    max_moisture_percent = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)
    visual_inspection_required = models.BooleanField(default=True)
    lab_testing_required = models.BooleanField(default=False)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active')
    created_date = models.DateTimeField(auto_now_add=True)
    updated_date = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.criteria_name} ({self.material_category})"

    class Meta:
        db_table = 'qc_criteria'
        ordering = ['-created_date', '-id']
        verbose_name_plural = 'QC criteria'


class QCInspection(models.Model):
    RESULT_CHOICES = [
        ('pass', 'Pass'),
        ('fail', 'Fail'),
    ]
    DISPOSITION_CHOICES = [
        ('approve', 'Approve'),
        ('reject', 'Reject'),
        ('downgrade', 'Downgrade'),
        ('rework', 'Rework'),
        ('pending', 'Pending'),
    ]

    tenant_id = models.CharField(max_length=100, null=True, blank=True, db_index=True)
    inspection_id = models.CharField(max_length=100, db_index=True)
    shipment = models.ForeignKey(InboundShipment, on_delete=models.CASCADE, related_name='inspections')
    load_id = models.CharField(max_length=100, blank=True)
    criteria = models.ForeignKey(QCCriteria, on_delete=models.SET_NULL, null=True, blank=True, related_name='inspections')
    inspector_name = models.CharField(max_length=200, blank=True)
    inspector_email = models.CharField(max_length=200, blank=True)
    inspection_date = models.DateTimeField(null=True, blank=True)
    material_category = models.CharField(max_length=100, blank=True)
    material_type = models.CharField(max_length=100, blank=True)
    sku_number = models.CharField(max_length=100, blank=True)
    measured_purity_percent = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)
    measured_contamination_percent = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)
    measured_moisture_percent = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)
    visual_inspection_pass = models.BooleanField(default=True)
    visual_inspection_notes = models.TextField(blank=True)
    lab_test_pass = models.BooleanField(null=True, blank=True)
    lab_test_notes = models.TextField(blank=True)
    contaminants_found = models.JSONField(default=list, blank=True)
    color_observed = models.CharField(max_length=100, blank=True)
    weight_sampled_kg = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    overall_result = models.CharField(max_length=10, choices=RESULT_CHOICES, default='pass')
    pass_criteria_met = models.JSONField(default=list, blank=True)
    fail_criteria = models.JSONField(default=list, blank=True)
    disposition = models.CharField(max_length=20, choices=DISPOSITION_CHOICES, default='pending')
    disposition_notes = models.TextField(blank=True)
    downgrade_to_grade = models.CharField(max_length=10, blank=True)
    photo_urls = models.JSONField(default=list, blank=True)
    approved_by = models.CharField(max_length=200, blank=True)
    approved_date = models.DateTimeField(null=True, blank=True)
    created_date = models.DateTimeField(auto_now_add=True)
    updated_date = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.inspection_id

    class Meta:
        db_table = 'qc_inspections'
        ordering = ['-created_date', '-id']
        indexes = [
            models.Index(fields=['tenant_id', 'disposition'], name='idx_qc_tenant_disposition'),
        ]
