from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from recims.core.models import Tenant, User
from recims.core.utils import normalize_tenant_id


class Command(BaseCommand):
    help = 'Create the default tenant and a super admin account if they do not exist'

    def add_arguments(self, parser):
        parser.add_argument('--tenant-id', default=settings.RECIMS_DEFAULT_TENANT_ID)
        parser.add_argument('--tenant-name', default='Default Tenant')
        parser.add_argument('--email', default=settings.RECIMS_ADMIN_EMAIL)
        parser.add_argument('--password', default=settings.RECIMS_ADMIN_PASSWORD)

    def handle(self, *args, **options):
        tenant_id = normalize_tenant_id(options['tenant_id'])
        if not tenant_id:
            raise CommandError('A tenant id is required')

        name = options['tenant_name'].upper()
        tenant, created = Tenant.objects.get_or_create(
            tenant_id=tenant_id,
            defaults={
                'name': name,
                'display_name': name,
                'code': 'default',
                'tenant_code': 'DEFAULT',
                'base_subdomain': 'default',
                'address_country_code': 'US',
            }
        )
        if created:
            self.stdout.write(self.style.SUCCESS(f'Created tenant: {tenant.tenant_id}'))
        else:
            self.stdout.write(f'Tenant already exists: {tenant.tenant_id}')

        email = options['email']
        if User.objects.filter(email__iexact=email).exists():
            self.stdout.write(f'Admin user already exists: {email}')
            return

        password = options['password']
        if not password:
            self.stdout.write(self.style.WARNING(
                'No admin password given (RECIMS_ADMIN_PASSWORD or --password); skipping admin user'
            ))
            return

        User.objects.create_superuser(
            email=email,
            password=password,
            full_name='Super Admin',
            tenant_id=tenant.tenant_id,
        )
        self.stdout.write(self.style.SUCCESS(f'Created super admin: {email}'))
