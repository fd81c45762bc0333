# Generated manually for the initial inventory schema

from decimal import Decimal

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('purchasing', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Inventory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tenant_id', models.CharField(blank=True, db_index=True, max_length=100, null=True)),
                ('inventory_id', models.CharField(max_length=100)),
                ('sku_number', models.CharField(blank=True, db_index=True, max_length=100)),
                ('vendor_name', models.CharField(blank=True, max_length=200)),
                ('item_name', models.CharField(blank=True, max_length=255)),
                ('item_description', models.TextField(blank=True)),
                ('category', models.CharField(blank=True, max_length=100)),
                ('sub_category', models.CharField(blank=True, max_length=100)),
                ('product_type', models.CharField(blank=True, max_length=100)),
                ('format', models.CharField(blank=True, max_length=100)),
                ('purity', models.CharField(default='UNKNOWN', max_length=50)),
                ('quality_grade', models.CharField(choices=[('A', 'A'), ('B', 'B'), ('C', 'C'), ('D', 'D')], default='B', max_length=1)),
                ('measurement_type', models.CharField(default='weight', max_length=20)),
                ('unit_of_measure', models.CharField(choices=[('kg', 'Kilograms'), ('lbs', 'Pounds'), ('tonnes', 'Metric Tonnes'), ('tons', 'Short Tons')], default='kg', max_length=10)),
                ('quantity_on_hand', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('quantity_kg', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('quantity_lbs', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('quantity_volume', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ('volume_unit', models.CharField(blank=True, choices=[('cubic_feet', 'Cubic Feet'), ('cubic_yards', 'Cubic Yards'), ('cubic_meters', 'Cubic Meters')], max_length=20)),
                ('reserved_quantity', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('available_quantity', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('bin_location', models.CharField(blank=True, max_length=100)),
                ('zone', models.CharField(blank=True, max_length=100)),
                ('sorting_status', models.CharField(choices=[('needs_sorting', 'Needs Sorting'), ('classified', 'Classified')], default='classified', max_length=20)),
                ('status', models.CharField(choices=[('available', 'Available'), ('reserved', 'Reserved'), ('sold', 'Sold'), ('quarantined', 'Quarantined'), ('disposed', 'Disposed')], default='available', max_length=20)),
                ('received_date', models.DateField(blank=True, null=True)),
                ('processed_date', models.DateField(blank=True, null=True)),
                ('purchase_order_number', models.CharField(blank=True, db_index=True, max_length=100)),
                ('lot_number', models.CharField(blank=True, max_length=150)),
                ('notes', models.TextField(blank=True)),
                ('created_date', models.DateTimeField(auto_now_add=True)),
                ('updated_date', models.DateTimeField(auto_now=True)),
                ('purchase_order_item', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='inventory_items', to='purchasing.purchaseorderitem')),
            ],
            options={
                'verbose_name_plural': 'inventory',
                'db_table': 'inventory',
                'ordering': ['-created_date', '-id'],
                'indexes': [
                    models.Index(fields=['tenant_id', 'status'], name='idx_inventory_tenant_status'),
                    models.Index(fields=['zone', 'bin_location'], name='idx_inventory_location'),
                    models.Index(fields=['sorting_status'], name='idx_inventory_sorting'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('tenant_id', 'inventory_id'), name='uniq_inventory_tenant_inventory_id'),
                ],
            },
        ),
    ]
