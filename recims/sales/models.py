from decimal import Decimal

from django.db import models

from recims.parties.models import Customer


class SalesOrder(models.Model):
    """Sales order to a customer, taxed at the ship-to province"""
    STATUS_CHOICES = [
        ('draft', 'Draft'),
        ('confirmed', 'Confirmed'),
        ('shipped', 'Shipped'),
        ('invoiced', 'Invoiced'),
        ('cancelled', 'Cancelled'),
    ]

    tenant_id = models.CharField(max_length=100, null=True, blank=True, db_index=True)
    so_number = models.CharField(max_length=100, unique=True)
    customer = models.ForeignKey(Customer, on_delete=models.SET_NULL, null=True, blank=True, related_name='sales_orders')
    customer_name = models.CharField(max_length=200, blank=True)
    po_number = models.CharField(max_length=100, default='TBD')
    ship_date = models.DateField(null=True, blank=True)
    carrier_code = models.CharField(max_length=50, blank=True)
    terms = models.CharField(max_length=50, blank=True)
    ship_method = models.CharField(max_length=50, blank=True)

    bill_line1 = models.CharField(max_length=200, blank=True)
    bill_line2 = models.CharField(max_length=200, blank=True)
    bill_city = models.CharField(max_length=100, blank=True)
    bill_region = models.CharField(max_length=50, blank=True)
    bill_postal_code = models.CharField(max_length=20, blank=True)
    bill_country = models.CharField(max_length=2, blank=True)

    ship_line1 = models.CharField(max_length=200, blank=True)
    ship_line2 = models.CharField(max_length=200, blank=True)
    ship_line3 = models.CharField(max_length=200, blank=True)
    ship_city = models.CharField(max_length=100, blank=True)
    ship_region = models.CharField(max_length=50, blank=True)
    ship_postal_code = models.CharField(max_length=20, blank=True)
    ship_country = models.CharField(max_length=2, blank=True)
    ship_contact_person = models.CharField(max_length=200, blank=True)
    ship_phone = models.CharField(max_length=50, blank=True)
    ship_email = models.CharField(max_length=200, blank=True)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='draft')
    currency = models.CharField(max_length=3, default='USD')
    subtotal = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    shipping_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    tax_total = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    tax_gst = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    tax_hst = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    tax_pst = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    tax_qst = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    tax_breakdown = models.JSONField(null=True, blank=True)
    total_cubic_feet = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    waybill_number = models.CharField(max_length=100, blank=True)
    waybill_created_at = models.DateTimeField(null=True, blank=True)
    comments_internal = models.TextField(blank=True)
    created_by = models.CharField(max_length=200, blank=True)
    created_date = models.DateTimeField(auto_now_add=True)
    updated_date = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.so_number

    class Meta:
        db_table = 'sales_orders'
        ordering = ['-created_date', '-id']
        indexes = [
            models.Index(fields=['tenant_id', 'status'], name='idx_so_tenant_status'),
        ]


class SalesOrderItem(models.Model):
    sales_order = models.ForeignKey(SalesOrder, on_delete=models.CASCADE, related_name='items')
    tenant_id = models.CharField(max_length=100, null=True, blank=True, db_index=True)
    line_number = models.PositiveIntegerField(default=10)
    sku_snapshot = models.CharField(max_length=100, blank=True)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=100, blank=True)
    product_type = models.CharField(max_length=100, blank=True)
    product_tax_category = models.CharField(max_length=50, default='tangible_goods')
    hts_code = models.CharField(max_length=50, blank=True)
    quantity_ordered = models.DecimalField(max_digits=14, decimal_places=3, default=Decimal('0'))
    uom = models.CharField(max_length=20, default='kg')
    unit_price = models.DecimalField(max_digits=12, decimal_places=4, default=Decimal('0'))
    discount_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    line_subtotal = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    line_tax_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    line_total = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    cubic_feet = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    created_date = models.DateTimeField(auto_now_add=True)
    updated_date = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.sales_order.so_number} #{self.line_number}"

    class Meta:
        db_table = 'sales_order_items'
        ordering = ['line_number', 'id']


class Carrier(models.Model):
    CARRIER_TYPE_CHOICES = [
        ('TRUCK', 'Truck'),
        ('RAIL', 'Rail'),
        ('AIR', 'Air'),
        ('SEA', 'Sea'),
    ]

    tenant_id = models.CharField(max_length=100, null=True, blank=True, db_index=True)
    carrier_code = models.CharField(max_length=50, blank=True)
    company_name = models.CharField(max_length=200)
    contact_person = models.CharField(max_length=200, blank=True)
    phone_number = models.CharField(max_length=50, blank=True)
    email = models.CharField(max_length=200, blank=True)
    billing_address = models.TextField(blank=True)
    tenant_billing_account = models.CharField(max_length=100, blank=True)
    carrier_type = models.CharField(max_length=10, choices=CARRIER_TYPE_CHOICES, default='TRUCK')
    service_types = models.JSONField(default=list, blank=True)
    website_url = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=10, default='active')
    created_date = models.DateTimeField(auto_now_add=True)
    updated_date = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.company_name

    class Meta:
        db_table = 'carriers'
        ordering = ['company_name', 'id']


class Waybill(models.Model):
    """Shipping document generated from a sales order"""
    STATUS_CHOICES = [
        ('draft', 'Draft'),
        ('dispatched', 'Dispatched'),
        ('delivered', 'Delivered'),
        ('cancelled', 'Cancelled'),
    ]

    tenant_id = models.CharField(max_length=100, null=True, blank=True, db_index=True)
    waybill_number = models.CharField(max_length=100, unique=True)
    sales_order = models.ForeignKey(SalesOrder, on_delete=models.SET_NULL, null=True, blank=True, related_name='waybills')
    so_number = models.CharField(max_length=100, blank=True)
    customer = models.ForeignKey(Customer, on_delete=models.SET_NULL, null=True, blank=True, related_name='waybills')
    customer_name = models.CharField(max_length=200, blank=True)
    customer_address = models.TextField(blank=True)
    customer_country = models.CharField(max_length=2, default='US')
    dispatch_date = models.DateField()
    carrier = models.ForeignKey(Carrier, on_delete=models.SET_NULL, null=True, blank=True, related_name='waybills')
    carrier_name = models.CharField(max_length=200, blank=True)
    vehicle_number = models.CharField(max_length=50, blank=True)
    driver_name = models.CharField(max_length=200, blank=True)
    incoterms = models.CharField(max_length=10, default='FOB')
    total_gross_weight_kg = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    total_gross_weight_lbs = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    total_net_weight_kg = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    total_net_weight_lbs = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    total_volume_cubic_feet = models.DecimalField(max_digits=14, decimal_places=4, default=Decimal('0'))
    total_volume_cubic_yards = models.DecimalField(max_digits=14, decimal_places=4, default=Decimal('0'))
    total_volume_cubic_meters = models.DecimalField(max_digits=14, decimal_places=4, default=Decimal('0'))
    total_packages = models.PositiveIntegerField(default=0)
    origin_country = models.CharField(max_length=2, default='US')
    special_instructions = models.TextField(blank=True)
    tracking_number = models.CharField(max_length=100, blank=True)
    bol_number = models.CharField(max_length=100, blank=True)
    authorized_by = models.CharField(max_length=200, blank=True)
    authorized_title = models.CharField(max_length=200, blank=True)
    signature_url = models.CharField(max_length=500, blank=True)
    signature_date = models.DateTimeField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='draft')
    created_by = models.CharField(max_length=200, blank=True)
    created_date = models.DateTimeField(auto_now_add=True)
    updated_date = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.waybill_number

    class Meta:
        db_table = 'waybills'
        ordering = ['-created_date', '-id']


class WaybillItem(models.Model):
    waybill = models.ForeignKey(Waybill, on_delete=models.CASCADE, related_name='items')
    tenant_id = models.CharField(max_length=100, null=True, blank=True, db_index=True)
    line_number = models.PositiveIntegerField(default=10)
    sales_order_item = models.ForeignKey(
        SalesOrderItem, on_delete=models.SET_NULL, null=True, blank=True, related_name='waybill_items'
    )
    sku_number = models.CharField(max_length=100, blank=True)
    item_description = models.TextField(blank=True)
    hts_code = models.CharField(max_length=50, blank=True)
    category = models.CharField(max_length=100, blank=True)
    quantity = models.DecimalField(max_digits=14, decimal_places=3, default=Decimal('0'))
    unit_of_measure = models.CharField(max_length=20, blank=True)
    weight_kg = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    weight_lbs = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    volume_cubic_feet = models.DecimalField(max_digits=14, decimal_places=4, default=Decimal('0'))
    volume_cubic_yards = models.DecimalField(max_digits=14, decimal_places=4, default=Decimal('0'))
    volume_cubic_meters = models.DecimalField(max_digits=14, decimal_places=4, default=Decimal('0'))
    unit_price = models.DecimalField(max_digits=12, decimal_places=4, default=Decimal('0'))
    line_total = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    origin_country = models.CharField(max_length=2, blank=True)

    def __str__(self):
        return f"{self.waybill.waybill_number} #{self.line_number}"

    class Meta:
        db_table = 'waybill_items'
        ordering = ['line_number', 'id']
