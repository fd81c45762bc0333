# Generated manually for the initial sales schema

from decimal import Decimal

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('parties', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Carrier',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tenant_id', models.CharField(blank=True, db_index=True, max_length=100, null=True)),
                ('carrier_code', models.CharField(blank=True, max_length=50)),
                ('company_name', models.CharField(max_length=200)),
                ('contact_person', models.CharField(blank=True, max_length=200)),
                ('phone_number', models.CharField(blank=True, max_length=50)),
                ('email', models.CharField(blank=True, max_length=200)),
                ('billing_address', models.TextField(blank=True)),
                ('tenant_billing_account', models.CharField(blank=True, max_length=100)),
                ('carrier_type', models.CharField(choices=[('TRUCK', 'Truck'), ('RAIL', 'Rail'), ('AIR', 'Air'), ('SEA', 'Sea')], default='TRUCK', max_length=10)),
                ('service_types', models.JSONField(blank=True, default=list)),
                ('website_url', models.CharField(blank=True, max_length=255)),
                ('status', models.CharField(default='active', max_length=10)),
                ('created_date', models.DateTimeField(auto_now_add=True)),
                ('updated_date', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'carriers',
                'ordering': ['company_name', 'id'],
            },
        ),
        migrations.CreateModel(
            name='SalesOrder',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tenant_id', models.CharField(blank=True, db_index=True, max_length=100, null=True)),
                ('so_number', models.CharField(max_length=100, unique=True)),
                ('customer_name', models.CharField(blank=True, max_length=200)),
                ('po_number', models.CharField(default='TBD', max_length=100)),
                ('ship_date', models.DateField(blank=True, null=True)),
                ('carrier_code', models.CharField(blank=True, max_length=50)),
                ('terms', models.CharField(blank=True, max_length=50)),
                ('ship_method', models.CharField(blank=True, max_length=50)),
                ('bill_line1', models.CharField(blank=True, max_length=200)),
                ('bill_line2', models.CharField(blank=True, max_length=200)),
                ('bill_city', models.CharField(blank=True, max_length=100)),
                ('bill_region', models.CharField(blank=True, max_length=50)),
                ('bill_postal_code', models.CharField(blank=True, max_length=20)),
                ('bill_country', models.CharField(blank=True, max_length=2)),
                ('ship_line1', models.CharField(blank=True, max_length=200)),
                ('ship_line2', models.CharField(blank=True, max_length=200)),
                ('ship_line3', models.CharField(blank=True, max_length=200)),
                ('ship_city', models.CharField(blank=True, max_length=100)),
                ('ship_region', models.CharField(blank=True, max_length=50)),
                ('ship_postal_code', models.CharField(blank=True, max_length=20)),
                ('ship_country', models.CharField(blank=True, max_length=2)),
                ('ship_contact_person', models.CharField(blank=True, max_length=200)),
                ('ship_phone', models.CharField(blank=True, max_length=50)),
                ('ship_email', models.CharField(blank=True, max_length=200)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('confirmed', 'Confirmed'), ('shipped', 'Shipped'), ('invoiced', 'Invoiced'), ('cancelled', 'Cancelled')], default='draft', max_length=20)),
                ('currency', models.CharField(default='USD', max_length=3)),
                ('subtotal', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('shipping_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('tax_total', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('tax_gst', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('tax_hst', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('tax_pst', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('tax_qst', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('total_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('tax_breakdown', models.JSONField(blank=True, null=True)),
                ('total_cubic_feet', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ('waybill_number', models.CharField(blank=True, max_length=100)),
                ('waybill_created_at', models.DateTimeField(blank=True, null=True)),
                ('comments_internal', models.TextField(blank=True)),
                ('created_by', models.CharField(blank=True, max_length=200)),
                ('created_date', models.DateTimeField(auto_now_add=True)),
                ('updated_date', models.DateTimeField(auto_now=True)),
                ('customer', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='sales_orders', to='parties.customer')),
            ],
            options={
                'db_table': 'sales_orders',
                'ordering': ['-created_date', '-id'],
                'indexes': [
                    models.Index(fields=['tenant_id', 'status'], name='idx_so_tenant_status'),
                ],
            },
        ),
        migrations.CreateModel(
            name='SalesOrderItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tenant_id', models.CharField(blank=True, db_index=True, max_length=100, null=True)),
                ('line_number', models.PositiveIntegerField(default=10)),
                ('sku_snapshot', models.CharField(blank=True, max_length=100)),
                ('description', models.TextField(blank=True)),
                ('category', models.CharField(blank=True, max_length=100)),
                ('product_type', models.CharField(blank=True, max_length=100)),
                ('product_tax_category', models.CharField(default='tangible_goods', max_length=50)),
                ('hts_code', models.CharField(blank=True, max_length=50)),
                ('quantity_ordered', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=14)),
                ('uom', models.CharField(default='kg', max_length=20)),
                ('unit_price', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=12)),
                ('discount_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('line_subtotal', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('line_tax_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('line_total', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('cubic_feet', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ('created_date', models.DateTimeField(auto_now_add=True)),
                ('updated_date', models.DateTimeField(auto_now=True)),
                ('sales_order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='sales.salesorder')),
            ],
            options={
                'db_table': 'sales_order_items',
                'ordering': ['line_number', 'id'],
            },
        ),
        migrations.CreateModel(
            name='Waybill',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tenant_id', models.CharField(blank=True, db_index=True, max_length=100, null=True)),
                ('waybill_number', models.CharField(max_length=100, unique=True)),
                ('so_number', models.CharField(blank=True, max_length=100)),
                ('customer_name', models.CharField(blank=True, max_length=200)),
                ('customer_address', models.TextField(blank=True)),
                ('customer_country', models.CharField(default='US', max_length=2)),
                ('dispatch_date', models.DateField()),
                ('carrier_name', models.CharField(blank=True, max_length=200)),
                ('vehicle_number', models.CharField(blank=True, max_length=50)),
                ('driver_name', models.CharField(blank=True, max_length=200)),
                ('incoterms', models.CharField(default='FOB', max_length=10)),
                ('total_gross_weight_kg', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('total_gross_weight_lbs', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('total_net_weight_kg', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('total_net_weight_lbs', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('total_volume_cubic_feet', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=14)),
                ('total_volume_cubic_yards', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=14)),
                ('total_volume_cubic_meters', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=14)),
                ('total_packages', models.PositiveIntegerField(default=0)),
                ('origin_country', models.CharField(default='US', max_length=2)),
                ('special_instructions', models.TextField(blank=True)),
                ('tracking_number', models.CharField(blank=True, max_length=100)),
                ('bol_number', models.CharField(blank=True, max_length=100)),
                ('authorized_by', models.CharField(blank=True, max_length=200)),
                ('authorized_title', models.CharField(blank=True, max_length=200)),
                ('signature_url', models.CharField(blank=True, max_length=500)),
                ('signature_date', models.DateTimeField(blank=True, null=True)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('dispatched', 'Dispatched'), ('delivered', 'Delivered'), ('cancelled', 'Cancelled')], default='draft', max_length=20)),
                ('created_by', models.CharField(blank=True, max_length=200)),
                ('created_date', models.DateTimeField(auto_now_add=True)),
                ('updated_date', models.DateTimeField(auto_now=True)),
                ('carrier', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='waybills', to='sales.carrier')),
                ('customer', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='waybills', to='parties.customer')),
                ('sales_order', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='waybills', to='sales.salesorder')),
            ],
            options={
                'db_table': 'waybills',
                'ordering': ['-created_date', '-id'],
            },
        ),
        migrations.CreateModel(
            name='WaybillItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tenant_id', models.CharField(blank=True, db_index=True, max_length=100, null=True)),
                ('line_number', models.PositiveIntegerField(default=10)),
                ('sku_number', models.CharField(blank=True, max_length=100)),
                ('item_description', models.TextField(blank=True)),
                ('hts_code', models.CharField(blank=True, max_length=50)),
                ('category', models.CharField(blank=True, max_length=100)),
                ('quantity', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=14)),
                ('unit_of_measure', models.CharField(blank=True, max_length=20)),
                ('weight_kg', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('weight_lbs', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('volume_cubic_feet', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=14)),
                ('volume_cubic_yards', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=14)),
                ('volume_cubic_meters', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=14)),
                ('unit_price', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=12)),
                ('line_total', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('origin_country', models.CharField(blank=True, max_length=2)),
                ('sales_order_item', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='waybill_items', to='sales.salesorderitem')),
                ('waybill', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='sales.waybill')),
            ],
            options={
                'db_table': 'waybill_items',
                'ordering': ['line_number', 'id'],
            },
        ),
    ]
