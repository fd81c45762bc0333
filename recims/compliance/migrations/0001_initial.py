# Generated manually for the initial compliance schema

from decimal import Decimal

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
            name='CertificateSequence',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tenant_key', models.CharField(blank=True, max_length=100)),
                ('year', models.PositiveIntegerField()),
                ('last_number', models.PositiveIntegerField(default=0)),
            ],
            options={
                'db_table': 'certificate_sequences',
                'constraints': [
                    models.UniqueConstraint(fields=('tenant_key', 'year'), name='uniq_certificate_sequence'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ComplianceCertificate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tenant_id', models.CharField(blank=True, db_index=True, max_length=100, null=True)),
                ('certificate_number', models.CharField(max_length=50)),
                ('po_number', models.CharField(blank=True, max_length=100)),
                ('is_partial', models.BooleanField(default=False)),
                ('po_line_items', models.JSONField(blank=True, default=list)),
                ('vendor_name', models.CharField(blank=True, max_length=200)),
                ('vendor_address', models.TextField(blank=True)),
                ('certificate_date', models.DateField(blank=True, null=True)),
                ('material_type', models.CharField(blank=True, max_length=255)),
                ('material_category', models.CharField(blank=True, max_length=255)),
                ('weight_lbs', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('weight_kg', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('diversion_rate', models.DecimalField(decimal_places=2, default=Decimal('95.00'), max_digits=5)),
                ('destruction_method', models.CharField(default='recycling', max_length=100)),
                ('destruction_date', models.DateField(blank=True, null=True)),
                ('destruction_location', models.CharField(blank=True, max_length=255)),
                ('certificate_details', models.TextField(blank=True)),
                ('certifying_officer', models.CharField(blank=True, max_length=200)),
                ('certifying_title', models.CharField(blank=True, max_length=200)),
                ('certifying_email', models.CharField(blank=True, max_length=200)),
                ('certifying_phone', models.CharField(blank=True, max_length=50)),
                ('contact_type', models.CharField(default='primary', max_length=20)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('issued', 'Issued'), ('sent', 'Sent'), ('void', 'Void')], default='draft', max_length=10)),
                ('issued_by', models.CharField(blank=True, max_length=200)),
                ('issued_at', models.DateTimeField(blank=True, null=True)),
                ('sent_to', models.TextField(blank=True)),
                ('sent_at', models.DateTimeField(blank=True, null=True)),
                ('notes', models.TextField(blank=True)),
                ('created_date', models.DateTimeField(auto_now_add=True)),
                ('updated_date', models.DateTimeField(auto_now=True)),
                ('purchase_order', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='certificates', to='purchasing.purchaseorder')),
                ('vendor', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='certificates', to='parties.vendor')),
            ],
            options={
                'db_table': 'compliance_certificates',
                'ordering': ['-created_date', '-id'],
                'indexes': [
                    models.Index(fields=['tenant_id', 'status'], name='idx_cert_tenant_status'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('tenant_id', 'certificate_number'), name='uniq_certificate_tenant_number'),
                ],
            },
        ),
    ]
