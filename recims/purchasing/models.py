from decimal import Decimal

from django.db import models

from recims.parties.models import Vendor


class PurchaseOrder(models.Model):
    """Purchase order from a vendor, received skid by skid"""
    STATUS_CHOICES = [
        ('draft', 'Draft'),
        ('sent', 'Sent'),
        ('partially_received', 'Partially Received'),
        ('received', 'Received'),
        ('completed', 'Completed'),
        ('cancelled', 'Cancelled'),
    ]

    tenant_id = models.CharField(max_length=100, null=True, blank=True, db_index=True)
    po_number = models.CharField(max_length=100, unique=True)
    barcode_prefix = models.CharField(max_length=100, blank=True)
    vendor = models.ForeignKey(Vendor, on_delete=models.SET_NULL, null=True, blank=True, related_name='purchase_orders')
    vendor_name = models.CharField(max_length=200, blank=True)
    contact_person = models.CharField(max_length=200, blank=True)
    shipping_address = models.TextField(blank=True)
    payment_terms = models.CharField(max_length=50, default='Net 30')
    order_date = models.DateField(null=True, blank=True)
    expected_delivery_date = models.DateField(null=True, blank=True)
    actual_delivery_date = models.DateField(null=True, blank=True)
    status = models.CharField(max_length=30, choices=STATUS_CHOICES, default='draft')
    total_expected_weight_kg = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    total_expected_weight_lbs = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    total_received_weight_kg = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    total_received_weight_lbs = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    total_skids_expected = models.PositiveIntegerField(default=0)
    total_skids_received = models.PositiveIntegerField(default=0)
    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    currency = models.CharField(max_length=3, default='USD')
    notes = models.TextField(blank=True)
    created_by = models.CharField(max_length=200, blank=True)
    created_date = models.DateTimeField(auto_now_add=True)
    updated_date = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.po_number

    class Meta:
        db_table = 'purchase_orders'
        ordering = ['-created_date', '-id']
        indexes = [
            models.Index(fields=['tenant_id', 'status'], name='idx_po_tenant_status'),
            models.Index(fields=['order_date'], name='idx_po_order_date'),
        ]


class PurchaseOrderItem(models.Model):
    """One PO line; every line sits on a skid and carries its own barcode"""
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('received', 'Received'),
    ]
    CERTIFICATE_STATUS_CHOICES = [
        ('uncertified', 'Uncertified'),
        ('partially_certified', 'Partially Certified'),
        ('certified', 'Certified'),
    ]
    GRADE_CHOICES = [
        ('A', 'A'),
        ('B', 'B'),
        ('C', 'C'),
        ('D', 'D'),
    ]

    purchase_order = models.ForeignKey(PurchaseOrder, on_delete=models.CASCADE, related_name='items')
    tenant_id = models.CharField(max_length=100, null=True, blank=True, db_index=True)
    line_number = models.PositiveIntegerField(default=1)
    skid_number = models.CharField(max_length=150, blank=True)
    barcode = models.CharField(max_length=200, blank=True, db_index=True)
    category = models.CharField(max_length=100, blank=True)
    sub_category = models.CharField(max_length=100, blank=True)
    product_type = models.CharField(max_length=100, blank=True)
    format = models.CharField(max_length=100, blank=True)
    purity = models.CharField(max_length=50, default='UNKNOWN')
    expected_weight_kg = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    expected_weight_lbs = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    actual_weight_kg = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    actual_weight_lbs = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    unit_price = models.DecimalField(max_digits=12, decimal_places=4, default=Decimal('0'))
    line_total = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    quality_grade = models.CharField(max_length=1, choices=GRADE_CHOICES, blank=True)
    bin_location = models.CharField(max_length=100, blank=True)
    zone = models.CharField(max_length=100, blank=True)
    variance_notes = models.TextField(blank=True)
    inspection_notes = models.TextField(blank=True)
    received_date = models.DateField(null=True, blank=True)
    received_by = models.CharField(max_length=200, blank=True)
    certificate_status = models.CharField(max_length=30, choices=CERTIFICATE_STATUS_CHOICES, default='uncertified')
    certificate_ids = models.JSONField(default=list, blank=True)
    certified_weight_kg = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    certified_weight_lbs = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    created_date = models.DateTimeField(auto_now_add=True)
    updated_date = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.barcode or f"{self.purchase_order_id}-L{self.line_number}"

    def uncertified_weight_kg(self):
        return max(Decimal('0'), (self.actual_weight_kg or Decimal('0')) - self.certified_weight_kg)

    def uncertified_weight_lbs(self):
        return max(Decimal('0'), (self.actual_weight_lbs or Decimal('0')) - self.certified_weight_lbs)

    class Meta:
        db_table = 'purchase_order_items'
        ordering = ['line_number', 'id']
        indexes = [
            models.Index(fields=['purchase_order', 'status'], name='idx_poitem_po_status'),
        ]
