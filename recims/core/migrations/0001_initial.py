# Generated manually for the initial core schema

import django.contrib.auth.validators
import django.db.models.deletion
import django.utils.timezone
import recims.core.models
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('username', models.CharField(error_messages={'unique': 'A user with that username already exists.'}, help_text='Required. 150 characters or fewer. Letters, digits and @/./+/-/_ only.', max_length=150, unique=True, validators=[django.contrib.auth.validators.UnicodeUsernameValidator()], verbose_name='username')),
                ('first_name', models.CharField(blank=True, max_length=150, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, max_length=150, verbose_name='last name')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into this admin site.', verbose_name='staff status')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('email', models.EmailField(max_length=254, unique=True)),
                ('full_name', models.CharField(blank=True, max_length=200)),
                ('tenant_id', models.CharField(blank=True, db_index=True, max_length=100, null=True)),
                ('role', models.CharField(choices=[('super_admin', 'Super Admin'), ('admin', 'Admin'), ('manager', 'Manager'), ('operator', 'Operator'), ('user', 'User')], default='user', max_length=30)),
                ('phone', models.CharField(blank=True, max_length=30, null=True)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'db_table': 'users',
            },
            managers=[
                ('objects', recims.core.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name='Tenant',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tenant_id', models.CharField(max_length=100, unique=True)),
                ('name', models.CharField(max_length=200)),
                ('display_name', models.CharField(blank=True, max_length=200)),
                ('status', models.CharField(choices=[('ACTIVE', 'Active'), ('SUSPENDED', 'Suspended'), ('INACTIVE', 'Inactive')], default='ACTIVE', max_length=20)),
                ('code', models.CharField(blank=True, max_length=100)),
                ('tenant_code', models.CharField(blank=True, max_length=50)),
                ('base_subdomain', models.CharField(blank=True, max_length=100)),
                ('business_type', models.CharField(default='general_manufacturing', max_length=100)),
                ('primary_contact_name', models.CharField(blank=True, max_length=200)),
                ('primary_contact_email', models.CharField(blank=True, max_length=200)),
                ('primary_contact_phone', models.CharField(blank=True, max_length=50)),
                ('default_currency', models.CharField(default='USD', max_length=3)),
                ('country_code', models.CharField(default='US', max_length=2)),
                ('region', models.CharField(default='Global', max_length=100)),
                ('phone_number_format', models.CharField(default='+1 (XXX) XXX-XXXX', max_length=50)),
                ('unit_system', models.CharField(choices=[('METRIC', 'Metric'), ('IMPERIAL', 'Imperial')], default='METRIC', max_length=10)),
                ('timezone', models.CharField(default='America/New_York', max_length=64)),
                ('date_format', models.CharField(default='YYYY-MM-DD', max_length=20)),
                ('branding_primary_color', models.CharField(default='#007A6E', max_length=20)),
                ('branding_secondary_color', models.CharField(default='#005247', max_length=20)),
                ('branding_logo_url', models.CharField(blank=True, max_length=500)),
                ('address_line1', models.CharField(blank=True, max_length=200)),
                ('address_line2', models.CharField(blank=True, max_length=200)),
                ('city', models.CharField(blank=True, max_length=100)),
                ('state_province', models.CharField(blank=True, max_length=100)),
                ('postal_code', models.CharField(blank=True, max_length=20)),
                ('address_country_code', models.CharField(blank=True, max_length=2)),
                ('website', models.CharField(blank=True, max_length=200)),
                ('description', models.TextField(blank=True)),
                ('number_format', models.JSONField(blank=True, default=recims.core.models.default_number_format)),
                ('default_load_types', models.JSONField(blank=True, default=list)),
                ('features', models.JSONField(blank=True, default=dict)),
                ('api_keys', models.JSONField(blank=True, default=dict)),
                ('created_date', models.DateTimeField(auto_now_add=True)),
                ('updated_date', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'tenants',
                'ordering': ['-created_date', '-id'],
            },
        ),
        migrations.CreateModel(
            name='TenantCategory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tenant_id', models.CharField(db_index=True, max_length=100)),
                ('category_name', models.CharField(max_length=200)),
                ('product_category', models.CharField(blank=True, max_length=200)),
                ('category_type', models.CharField(default='predefined', max_length=50)),
                ('sub_categories', models.JSONField(blank=True, default=list)),
                ('load_type_mapping', models.CharField(max_length=100)),
                ('description', models.TextField(blank=True)),
                ('sort_order', models.IntegerField(default=0)),
                ('is_active', models.BooleanField(default=True)),
                ('created_date', models.DateTimeField(auto_now_add=True)),
                ('updated_date', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'tenant_categories',
                'ordering': ['-created_date', '-id'],
            },
        ),
        migrations.CreateModel(
            name='TenantContact',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tenant_id', models.CharField(db_index=True, max_length=100)),
                ('contact_type', models.CharField(choices=[('primary', 'Primary'), ('secondary', 'Secondary'), ('backup', 'Backup')], default='primary', max_length=20)),
                ('contact_name', models.CharField(max_length=200)),
                ('first_name', models.CharField(blank=True, max_length=100)),
                ('last_name', models.CharField(blank=True, max_length=100)),
                ('contact_email', models.CharField(max_length=200)),
                ('contact_phone', models.CharField(blank=True, max_length=50)),
                ('job_title', models.CharField(max_length=200)),
                ('signature_type', models.CharField(choices=[('none', 'None'), ('upload', 'Upload'), ('generated', 'Generated')], default='none', max_length=20)),
                ('signature_url', models.CharField(blank=True, max_length=500)),
                ('signature_font', models.CharField(default='Allura', max_length=100)),
                ('is_active', models.BooleanField(default=True)),
                ('created_date', models.DateTimeField(auto_now_add=True)),
                ('updated_date', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'tenant_contacts',
                'ordering': ['-created_date', '-id'],
            },
        ),
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tenant_id', models.CharField(blank=True, db_index=True, max_length=100, null=True)),
                ('action', models.CharField(choices=[('create', 'Create'), ('update', 'Update'), ('delete', 'Delete'), ('login', 'Login'), ('stock_adjust', 'Stock Adjustment'), ('po_create', 'Purchase Order Created'), ('po_receive', 'Purchase Order Item Received'), ('qc_inspect', 'QC Inspection Recorded'), ('qc_disposition', 'QC Disposition Updated'), ('certificate_issue', 'Certificate Issued'), ('certificate_send', 'Certificate Sent'), ('certificate_void', 'Certificate Voided'), ('so_create', 'Sales Order Created'), ('waybill_create', 'Waybill Created')], max_length=50)),
                ('model_name', models.CharField(max_length=100)),
                ('object_id', models.CharField(max_length=100)),
                ('object_name', models.CharField(blank=True, help_text='Human-readable name of the object (e.g., PO number, certificate number)', max_length=255, null=True)),
                ('object_reference', models.CharField(blank=True, help_text='Reference identifier (e.g., skid barcode, load id)', max_length=255, null=True)),
                ('changes', models.JSONField(blank=True, default=dict)),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='audit_logs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'audit_logs',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['-created_at'], name='audit_created_idx'),
                    models.Index(fields=['action'], name='audit_action_idx'),
                    models.Index(fields=['model_name'], name='audit_model_idx'),
                    models.Index(fields=['object_reference'], name='audit_reference_idx'),
                ],
            },
        ),
    ]
