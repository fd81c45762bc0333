# Generated manually for the initial entities schema

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='EntityRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('entity_name', models.CharField(db_index=True, max_length=100)),
                ('tenant_id', models.CharField(blank=True, db_index=True, max_length=100, null=True)),
                ('payload', models.JSONField(blank=True, default=dict)),
                ('created_date', models.DateTimeField(auto_now_add=True)),
                ('updated_date', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'entity_records',
                'ordering': ['-created_date', '-id'],
                'indexes': [
                    models.Index(fields=['entity_name', 'tenant_id'], name='idx_entity_name_tenant'),
                ],
            },
        ),
    ]
