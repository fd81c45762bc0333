# Generated manually for the initial parties schema

from django.db import migrations, models


def party_fields():
    return [
        ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
        ('tenant_id', models.CharField(blank=True, db_index=True, max_length=100, null=True)),
        ('external_id', models.CharField(blank=True, max_length=100)),
        ('display_name', models.CharField(max_length=200)),
        ('given_name', models.CharField(blank=True, max_length=100)),
        ('family_name', models.CharField(blank=True, max_length=100)),
        ('company_name', models.CharField(blank=True, max_length=200)),
        ('contact_person', models.CharField(blank=True, max_length=200)),
        ('primary_email', models.CharField(blank=True, max_length=200)),
        ('primary_phone', models.CharField(blank=True, max_length=50)),
        ('mobile_phone', models.CharField(blank=True, max_length=50)),
        ('fax', models.CharField(blank=True, max_length=50)),
        ('website', models.CharField(blank=True, max_length=200)),
        ('notes', models.TextField(blank=True)),
        ('country', models.CharField(choices=[('US', 'United States'), ('CA', 'Canada')], default='CA', max_length=2)),
        ('currency', models.CharField(choices=[('USD', 'US Dollar'), ('CAD', 'Canadian Dollar')], default='CAD', max_length=3)),
        ('active', models.BooleanField(default=True)),
        ('payment_method_ref', models.CharField(blank=True, max_length=100)),
        ('bill_line1', models.CharField(blank=True, max_length=200)),
        ('bill_line2', models.CharField(blank=True, max_length=200)),
        ('bill_line3', models.CharField(blank=True, max_length=200)),
        ('bill_city', models.CharField(blank=True, max_length=100)),
        ('bill_region', models.CharField(blank=True, max_length=50)),
        ('bill_postal_code', models.CharField(blank=True, max_length=20)),
        ('bill_country_code', models.CharField(blank=True, max_length=2)),
        ('created_date', models.DateTimeField(auto_now_add=True)),
        ('updated_date', models.DateTimeField(auto_now=True)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Customer',
            fields=party_fields() + [
                ('taxable', models.BooleanField(default=True)),
                ('is_tax_exempt', models.BooleanField(default=False)),
                ('tax_exemption_reason_code', models.CharField(blank=True, max_length=50)),
                ('exemption_certificate_number', models.CharField(blank=True, max_length=100)),
                ('default_tax_code_ref', models.CharField(blank=True, max_length=50)),
                ('primary_tax_identifier', models.CharField(blank=True, max_length=100)),
                ('sales_term_ref', models.CharField(blank=True, max_length=50)),
                ('status', models.CharField(default='active', max_length=20)),
                ('ship_line1', models.CharField(blank=True, max_length=200)),
                ('ship_line2', models.CharField(blank=True, max_length=200)),
                ('ship_line3', models.CharField(blank=True, max_length=200)),
                ('ship_city', models.CharField(blank=True, max_length=100)),
                ('ship_region', models.CharField(blank=True, max_length=50)),
                ('ship_postal_code', models.CharField(blank=True, max_length=20)),
                ('ship_country_code', models.CharField(blank=True, max_length=2)),
            ],
            options={
                'db_table': 'customers',
                'ordering': ['-created_date', '-id'],
            },
        ),
        migrations.CreateModel(
            name='Vendor',
            fields=party_fields() + [
                ('status', models.CharField(choices=[('active', 'Active'), ('inactive', 'Inactive')], default='active', max_length=20)),
                ('print_on_check_name', models.CharField(blank=True, max_length=200)),
                ('acct_num', models.CharField(blank=True, max_length=100)),
                ('terms_ref', models.CharField(blank=True, max_length=50)),
                ('vendor_1099', models.BooleanField(default=False)),
                ('w9_on_file', models.BooleanField(default=False)),
                ('t4a_eligible', models.BooleanField(default=False)),
                ('tax_identifier', models.CharField(blank=True, max_length=100)),
                ('gst_hst_number', models.CharField(blank=True, max_length=100)),
                ('remit_line1', models.CharField(blank=True, max_length=200)),
                ('remit_line2', models.CharField(blank=True, max_length=200)),
                ('remit_line3', models.CharField(blank=True, max_length=200)),
                ('remit_city', models.CharField(blank=True, max_length=100)),
                ('remit_region', models.CharField(blank=True, max_length=50)),
                ('remit_postal_code', models.CharField(blank=True, max_length=20)),
                ('remit_country_code', models.CharField(blank=True, max_length=2)),
            ],
            options={
                'db_table': 'vendors',
                'ordering': ['-created_date', '-id'],
            },
        ),
    ]
