# Generated manually for the initial shipments schema

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('parties', '0001_initial'),
        ('purchasing', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='InboundShipment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tenant_id', models.CharField(blank=True, db_index=True, max_length=100, null=True)),
                ('load_id', models.CharField(db_index=True, max_length=100)),
                ('supplier_name', models.CharField(blank=True, max_length=200)),
                ('carrier_name', models.CharField(blank=True, max_length=200)),
                ('truck_number', models.CharField(blank=True, max_length=50)),
                ('driver_name', models.CharField(blank=True, max_length=200)),
                ('load_type', models.CharField(blank=True, max_length=50)),
                ('product_category', models.CharField(blank=True, max_length=100)),
                ('product_type', models.CharField(blank=True, max_length=100)),
                ('sku_number', models.CharField(blank=True, max_length=100)),
                ('gross_weight_kg', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ('tare_weight_kg', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ('net_weight_kg', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ('net_weight_lbs', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ('arrival_time', models.DateTimeField(blank=True, null=True)),
                ('status', models.CharField(choices=[('arrived', 'Arrived'), ('pending_inspection', 'Pending Inspection'), ('inspecting', 'Inspecting'), ('approved', 'Approved'), ('rejected', 'Rejected'), ('completed', 'Completed')], default='pending_inspection', max_length=30)),
                ('bin_assigned', models.CharField(blank=True, max_length=100)),
                ('zone', models.CharField(blank=True, max_length=100)),
                ('notes', models.TextField(blank=True)),
                ('operator_name', models.CharField(blank=True, max_length=200)),
                ('created_date', models.DateTimeField(auto_now_add=True)),
                ('updated_date', models.DateTimeField(auto_now=True)),
                ('purchase_order', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='inbound_shipments', to='purchasing.purchaseorder')),
                ('vendor', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='inbound_shipments', to='parties.vendor')),
            ],
            options={
                'db_table': 'inbound_shipments',
                'ordering': ['-created_date', '-id'],
                'indexes': [
                    models.Index(fields=['tenant_id', 'status'], name='idx_shipment_tenant_status'),
                    models.Index(fields=['arrival_time'], name='idx_shipment_arrival'),
                ],
            },
        ),
        migrations.CreateModel(
            name='QCCriteria',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tenant_id', models.CharField(blank=True, db_index=True, max_length=100, null=True)),
                ('criteria_name', models.CharField(max_length=200)),
                ('material_category', models.CharField(max_length=100)),
                ('min_purity_percent', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ('max_contamination_percent', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ('max_moisture_percent', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ('visual_inspection_required', models.BooleanField(default=True)),
                ('lab_testing_required', models.BooleanField(default=False)),
                ('status', models.CharField(choices=[('active', 'Active'), ('inactive', 'Inactive')], default='active', max_length=20)),
                ('created_date', models.DateTimeField(auto_now_add=True)),
                ('updated_date', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name_plural': 'QC criteria',
                'db_table': 'qc_criteria',
                'ordering': ['-created_date', '-id'],
            },
        ),
        migrations.CreateModel(
            name='QCInspection',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tenant_id', models.CharField(blank=True, db_index=True, max_length=100, null=True)),
                ('inspection_id', models.CharField(db_index=True, max_length=100)),
                ('load_id', models.CharField(blank=True, max_length=100)),
                ('inspector_name', models.CharField(blank=True, max_length=200)),
                ('inspector_email', models.CharField(blank=True, max_length=200)),
                ('inspection_date', models.DateTimeField(blank=True, null=True)),
                ('material_category', models.CharField(blank=True, max_length=100)),
                ('material_type', models.CharField(blank=True, max_length=100)),
                ('sku_number', models.CharField(blank=True, max_length=100)),
                ('measured_purity_percent', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ('measured_contamination_percent', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ('measured_moisture_percent', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ('visual_inspection_pass', models.BooleanField(default=True)),
                ('visual_inspection_notes', models.TextField(blank=True)),
                ('lab_test_pass', models.BooleanField(blank=True, null=True)),
                ('lab_test_notes', models.TextField(blank=True)),
                ('contaminants_found', models.JSONField(blank=True, default=list)),
                ('color_observed', models.CharField(blank=True, max_length=100)),
                ('weight_sampled_kg', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('overall_result', models.CharField(choices=[('pass', 'Pass'), ('fail', 'Fail')], default='pass', max_length=10)),
                ('pass_criteria_met', models.JSONField(blank=True, default=list)),
                ('fail_criteria', models.JSONField(blank=True, default=list)),
                ('disposition', models.CharField(choices=[('approve', 'Approve'), ('reject', 'Reject'), ('downgrade', 'Downgrade'), ('rework', 'Rework'), ('pending', 'Pending')], default='pending', max_length=20)),
                ('disposition_notes', models.TextField(blank=True)),
                ('downgrade_to_grade', models.CharField(blank=True, max_length=10)),
                ('photo_urls', models.JSONField(blank=True, default=list)),
                ('approved_by', models.CharField(blank=True, max_length=200)),
                ('approved_date', models.DateTimeField(blank=True, null=True)),
                ('created_date', models.DateTimeField(auto_now_add=True)),
                ('updated_date', models.DateTimeField(auto_now=True)),
                ('criteria', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='inspections', to='shipments.qccriteria')),
                ('shipment', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='inspections', to='shipments.inboundshipment')),
            ],
            options={
                'db_table': 'qc_inspections',
                'ordering': ['-created_date', '-id'],
                'indexes': [
                    models.Index(fields=['tenant_id', 'disposition'], name='idx_qc_tenant_disposition'),
                ],
            },
        ),
    ]
