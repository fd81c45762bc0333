from decimal import Decimal

from django.db import models


class Inventory(models.Model):
    """A lot of material on hand, usually created when a PO skid is received"""
    GRADE_CHOICES = [
        ('A', 'A'),
        ('B', 'B'),
        ('C', 'C'),
        ('D', 'D'),
    ]
    UNIT_CHOICES = [
        ('kg', 'Kilograms'),
        ('lbs', 'Pounds'),
        ('tonnes', 'Metric Tonnes'),
        ('tons', 'Short Tons'),
    ]
    VOLUME_UNIT_CHOICES = [
        ('cubic_feet', 'Cubic Feet'),
        ('cubic_yards', 'Cubic Yards'),
        ('cubic_meters', 'Cubic Meters'),
    ]
    SORTING_STATUS_CHOICES = [
        ('needs_sorting', 'Needs Sorting'),
        ('classified', 'Classified'),
    ]
    STATUS_CHOICES = [
        ('available', 'Available'),
        ('reserved', 'Reserved'),
        ('sold', 'Sold'),
        ('quarantined', 'Quarantined'),
        ('disposed', 'Disposed'),
    ]

    tenant_id = models.CharField(max_length=100, null=True, blank=True, db_index=True)
    inventory_id = models.CharField(max_length=100)
    sku_number = models.CharField(max_length=100, blank=True, db_index=True)
    vendor_name = models.CharField(max_length=200, blank=True)
    item_name = models.CharField(max_length=255, blank=True)
    item_description = models.TextField(blank=True)
    category = models.CharField(max_length=100, blank=True)
    sub_category = models.CharField(max_length=100, blank=True)
    product_type = models.CharField(max_length=100, blank=True)
    format = models.CharField(max_length=100, blank=True)
    purity = models.CharField(max_length=50, default='UNKNOWN')
    quality_grade = models.CharField(max_length=1, choices=GRADE_CHOICES, default='B')
    measurement_type = models.CharField(max_length=20, default='weight')
    unit_of_measure = models.CharField(max_length=10, choices=UNIT_CHOICES, default='kg')
    quantity_on_hand = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    quantity_kg = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    quantity_lbs = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    quantity_volume = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    volume_unit = models.CharField(max_length=20, choices=VOLUME_UNIT_CHOICES, blank=True)
    reserved_quantity = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    available_quantity = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    bin_location = models.CharField(max_length=100, blank=True)
    zone = models.CharField(max_length=100, blank=True)
    sorting_status = models.CharField(max_length=20, choices=SORTING_STATUS_CHOICES, default='classified')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='available')
    received_date = models.DateField(null=True, blank=True)
    processed_date = models.DateField(null=True, blank=True)
    purchase_order_number = models.CharField(max_length=100, blank=True, db_index=True)
    lot_number = models.CharField(max_length=150, blank=True)
    notes = models.TextField(blank=True)
    purchase_order_item = models.ForeignKey(
        'purchasing.PurchaseOrderItem', on_delete=models.SET_NULL, null=True, blank=True, related_name='inventory_items'
    )
    created_date = models.DateTimeField(auto_now_add=True)
    updated_date = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.inventory_id} - {self.item_name}"

    class Meta:
        db_table = 'inventory'
        ordering = ['-created_date', '-id']
        verbose_name_plural = 'inventory'
        constraints = [
            models.UniqueConstraint(fields=['tenant_id', 'inventory_id'], name='uniq_inventory_tenant_inventory_id'),
        ]
        indexes = [
            models.Index(fields=['tenant_id', 'status'], name='idx_inventory_tenant_status'),
            models.Index(fields=['zone', 'bin_location'], name='idx_inventory_location'),
            models.Index(fields=['sorting_status'], name='idx_inventory_sorting'),
        ]
