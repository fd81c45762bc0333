# Generated manually for the initial purchasing schema

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
            name='PurchaseOrder',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tenant_id', models.CharField(blank=True, db_index=True, max_length=100, null=True)),
                ('po_number', models.CharField(max_length=100, unique=True)),
                ('barcode_prefix', models.CharField(blank=True, max_length=100)),
                ('vendor_name', models.CharField(blank=True, max_length=200)),
                ('contact_person', models.CharField(blank=True, max_length=200)),
                ('shipping_address', models.TextField(blank=True)),
                ('payment_terms', models.CharField(default='Net 30', max_length=50)),
                ('order_date', models.DateField(blank=True, null=True)),
                ('expected_delivery_date', models.DateField(blank=True, null=True)),
                ('actual_delivery_date', models.DateField(blank=True, null=True)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('sent', 'Sent'), ('partially_received', 'Partially Received'), ('received', 'Received'), ('completed', 'Completed'), ('cancelled', 'Cancelled')], default='draft', max_length=30)),
                ('total_expected_weight_kg', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('total_expected_weight_lbs', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('total_received_weight_kg', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('total_received_weight_lbs', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('total_skids_expected', models.PositiveIntegerField(default=0)),
                ('total_skids_received', models.PositiveIntegerField(default=0)),
                ('total_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('currency', models.CharField(default='USD', max_length=3)),
                ('notes', models.TextField(blank=True)),
                ('created_by', models.CharField(blank=True, max_length=200)),
                ('created_date', models.DateTimeField(auto_now_add=True)),
                ('updated_date', models.DateTimeField(auto_now=True)),
                ('vendor', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='purchase_orders', to='parties.vendor')),
            ],
            options={
                'db_table': 'purchase_orders',
                'ordering': ['-created_date', '-id'],
                'indexes': [
                    models.Index(fields=['tenant_id', 'status'], name='idx_po_tenant_status'),
                    models.Index(fields=['order_date'], name='idx_po_order_date'),
                ],
            },
        ),
        migrations.CreateModel(
            name='PurchaseOrderItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tenant_id', models.CharField(blank=True, db_index=True, max_length=100, null=True)),
                ('line_number', models.PositiveIntegerField(default=1)),
                ('skid_number', models.CharField(blank=True, max_length=150)),
                ('barcode', models.CharField(blank=True, db_index=True, max_length=200)),
                ('category', models.CharField(blank=True, max_length=100)),
                ('sub_category', models.CharField(blank=True, max_length=100)),
                ('product_type', models.CharField(blank=True, max_length=100)),
                ('format', models.CharField(blank=True, max_length=100)),
                ('purity', models.CharField(default='UNKNOWN', max_length=50)),
                ('expected_weight_kg', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('expected_weight_lbs', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('actual_weight_kg', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ('actual_weight_lbs', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ('unit_price', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=12)),
                ('line_total', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('received', 'Received')], default='pending', max_length=20)),
                ('quality_grade', models.CharField(blank=True, choices=[('A', 'A'), ('B', 'B'), ('C', 'C'), ('D', 'D')], max_length=1)),
                ('bin_location', models.CharField(blank=True, max_length=100)),
                ('zone', models.CharField(blank=True, max_length=100)),
                ('variance_notes', models.TextField(blank=True)),
                ('inspection_notes', models.TextField(blank=True)),
                ('received_date', models.DateField(blank=True, null=True)),
                ('received_by', models.CharField(blank=True, max_length=200)),
                ('certificate_status', models.CharField(choices=[('uncertified', 'Uncertified'), ('partially_certified', 'Partially Certified'), ('certified', 'Certified')], default='uncertified', max_length=30)),
                ('certificate_ids', models.JSONField(blank=True, default=list)),
                ('certified_weight_kg', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('certified_weight_lbs', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('created_date', models.DateTimeField(auto_now_add=True)),
                ('updated_date', models.DateTimeField(auto_now=True)),
                ('purchase_order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='purchasing.purchaseorder')),
            ],
            options={
                'db_table': 'purchase_order_items',
                'ordering': ['line_number', 'id'],
                'indexes': [
                    models.Index(fields=['purchase_order', 'status'], name='idx_poitem_po_status'),
                ],
            },
        ),
    ]
