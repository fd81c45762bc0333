from django.db import models


class PartyBase(models.Model):
    """Fields shared by customers and vendors"""
    COUNTRY_CHOICES = [
        ('US', 'United States'),
        ('CA', 'Canada'),
    ]
    CURRENCY_CHOICES = [
        ('USD', 'US Dollar'),
        ('CAD', 'Canadian Dollar'),
    ]

    tenant_id = models.CharField(max_length=100, blank=True, null=True, db_index=True)
    external_id = models.CharField(max_length=100, blank=True)
    display_name = models.CharField(max_length=200)
    given_name = models.CharField(max_length=100, blank=True)
    family_name = models.CharField(max_length=100, blank=True)
    company_name = models.CharField(max_length=200, blank=True)
    contact_person = models.CharField(max_length=200, blank=True)
    primary_email = models.CharField(max_length=200, blank=True)
    primary_phone = models.CharField(max_length=50, blank=True)
    mobile_phone = models.CharField(max_length=50, blank=True)
    fax = models.CharField(max_length=50, blank=True)
    website = models.CharField(max_length=200, blank=True)
    notes = models.TextField(blank=True)
    country = models.CharField(max_length=2, choices=COUNTRY_CHOICES, default='CA')
    currency = models.CharField(max_length=3, choices=CURRENCY_CHOICES, default='CAD')
    active = models.BooleanField(default=True)
    payment_method_ref = models.CharField(max_length=100, blank=True)
    bill_line1 = models.CharField(max_length=200, blank=True)
    bill_line2 = models.CharField(max_length=200, blank=True)
    bill_line3 = models.CharField(max_length=200, blank=True)
    bill_city = models.CharField(max_length=100, blank=True)
    bill_region = models.CharField(max_length=50, blank=True)
    bill_postal_code = models.CharField(max_length=20, blank=True)
    bill_country_code = models.CharField(max_length=2, blank=True)
    created_date = models.DateTimeField(auto_now_add=True)
    updated_date = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.display_name

    class Meta:
        abstract = True


class Customer(PartyBase):
    """Customers (sales side)"""
    taxable = models.BooleanField(default=True)
    is_tax_exempt = models.BooleanField(default=False)
    tax_exemption_reason_code = models.CharField(max_length=50, blank=True)
    exemption_certificate_number = models.CharField(max_length=100, blank=True)
    default_tax_code_ref = models.CharField(max_length=50, blank=True)
    primary_tax_identifier = models.CharField(max_length=100, blank=True)
    sales_term_ref = models.CharField(max_length=50, blank=True)
    status = models.CharField(max_length=20, default='active')
    ship_line1 = models.CharField(max_length=200, blank=True)
    ship_line2 = models.CharField(max_length=200, blank=True)
    ship_line3 = models.CharField(max_length=200, blank=True)
    ship_city = models.CharField(max_length=100, blank=True)
    ship_region = models.CharField(max_length=50, blank=True)
    ship_postal_code = models.CharField(max_length=20, blank=True)
    ship_country_code = models.CharField(max_length=2, blank=True)

    class Meta:
        db_table = 'customers'
        ordering = ['-created_date', '-id']


class Vendor(PartyBase):
    """Vendors (material suppliers)"""
    STATUS_CHOICES = [
        ('active', 'Active'),
        ('inactive', 'Inactive'),
    ]

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active')
    print_on_check_name = models.CharField(max_length=200, blank=True)
    acct_num = models.CharField(max_length=100, blank=True)
    terms_ref = models.CharField(max_length=50, blank=True)
    vendor_1099 = models.BooleanField(default=False)
    w9_on_file = models.BooleanField(default=False)
    t4a_eligible = models.BooleanField(default=False)
    tax_identifier = models.CharField(max_length=100, blank=True)
    gst_hst_number = models.CharField(max_length=100, blank=True)
    remit_line1 = models.CharField(max_length=200, blank=True)
    remit_line2 = models.CharField(max_length=200, blank=True)
    remit_line3 = models.CharField(max_length=200, blank=True)
    remit_city = models.CharField(max_length=100, blank=True)
    remit_region = models.CharField(max_length=50, blank=True)
    remit_postal_code = models.CharField(max_length=20, blank=True)
    remit_country_code = models.CharField(max_length=2, blank=True)

    class Meta:
        db_table = 'vendors'
        ordering = ['-created_date', '-id']
