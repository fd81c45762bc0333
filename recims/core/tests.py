"""
Test suite for the core module
Tests: auth, tenant scoping helpers, tenants, categories, contacts, users, audit trail, utils
"""
from django.core import mail
from django.test import TestCase, RequestFactory
from rest_framework import status

from recims.core.models import Tenant, TenantCategory, AuditLog
from recims.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from recims.core.tenancy import (
    scope_queryset, can_access_tenant, can_modify_tenant_row, resolve_write_tenant
)
from recims.core.utils import (
    normalize_tenant_id, to_boolean, sanitize_code, create_page_url, create_audit_log, get_client_ip
)


class UtilsTests(TestCase):
    """Value normalization helpers"""

    def test_normalize_tenant_id(self):
        self.assertEqual(normalize_tenant_id('  bcs '), 'BCS')
        self.assertIsNone(normalize_tenant_id(''))
        self.assertIsNone(normalize_tenant_id(None))
        self.assertEqual(normalize_tenant_id(None, 'min'), 'MIN')

    def test_to_boolean(self):
        self.assertTrue(to_boolean('yes'))
        self.assertFalse(to_boolean('0'))
        self.assertTrue(to_boolean(None, True))
        self.assertTrue(to_boolean('maybe', True))
        self.assertFalse(to_boolean(0))

    def test_sanitize_code(self):
        self.assertEqual(sanitize_code('Big Co!'), 'bigco')
        self.assertEqual(sanitize_code('', 'Fallback-1'), 'fallback-1')
        self.assertEqual(sanitize_code('!!!'), 'tenant')

    def test_create_page_url(self):
        """Whitespace in the path becomes dashes, query is kept"""
        self.assertEqual(create_page_url('Dashboard'), '/Dashboard')
        self.assertEqual(create_page_url('Edit Vendor'), '/Edit-Vendor')
        self.assertEqual(create_page_url('PurchaseOrderDetails?id=12'), '/PurchaseOrderDetails?id=12')
        self.assertEqual(create_page_url(''), '/')

    def test_get_client_ip_prefers_forwarded_header(self):
        request = RequestFactory().get('/', HTTP_X_FORWARDED_FOR='10.0.0.1, 10.0.0.2')
        self.assertEqual(get_client_ip(request), '10.0.0.1')

    def test_create_audit_log_requires_fields(self):
        """Missing fields skip the entry instead of raising"""
        self.assertIsNone(create_audit_log(action='create', model_name='Thing'))
        self.assertEqual(AuditLog.objects.count(), 0)

    def test_create_audit_log_defaults_tenant_to_user(self):
        user = TestDataFactory.create_user(tenant_id='ACME')
        entry = create_audit_log(user=user, action='create', model_name='Vendor', object_id=7)
        self.assertEqual(entry.tenant_id, 'ACME')
        self.assertEqual(entry.object_id, '7')


class TenancyTests(TestCase):
    """Scoping and write rules"""

    def setUp(self):
        self.user = TestDataFactory.create_user(tenant_id='ACME')
        self.other = TestDataFactory.create_user(tenant_id='OTHER')
        self.super_admin = TestDataFactory.create_super_admin()
        TenantCategory.objects.create(tenant_id='ACME', category_name='Plastics', load_type_mapping='PLASTIC')
        TenantCategory.objects.create(tenant_id='OTHER', category_name='Metals', load_type_mapping='METAL')

    def test_scope_queryset(self):
        self.assertEqual(scope_queryset(TenantCategory.objects.all(), self.user).count(), 1)
        self.assertEqual(scope_queryset(TenantCategory.objects.all(), self.super_admin).count(), 2)

    def test_shared_rows_readable_but_not_writable(self):
        self.assertTrue(can_access_tenant(None, self.user))
        self.assertFalse(can_modify_tenant_row(None, self.user))
        self.assertTrue(can_modify_tenant_row(None, self.super_admin))

    def test_cross_tenant_access(self):
        self.assertFalse(can_access_tenant('OTHER', self.user))
        self.assertTrue(can_access_tenant('acme', self.user))

    def test_resolve_write_tenant(self):
        """Operators always write into their own tenant"""
        self.assertEqual(resolve_write_tenant(self.user, 'OTHER'), 'ACME')
        self.assertEqual(resolve_write_tenant(self.super_admin, 'other'), 'OTHER')


class AuthTests(TestCase):
    """Login, refresh, me and password reset"""

    def setUp(self):
        self.user = TestDataFactory.create_user(email='op@test.com', tenant_id='ACME', password='s3cret-pass')
        self.client = AuthenticatedAPIClient()

    def test_login(self):
        response = self.client.post('/api/auth/login/', {'email': 'op@test.com', 'password': 's3cret-pass'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('token', response.data)
        self.assertEqual(response.data['user']['tenant_id'], 'ACME')
        self.assertTrue(AuditLog.objects.filter(action='login', user=self.user).exists())

    def test_login_invalid_password(self):
        response = self.client.post('/api/auth/login/', {'email': 'op@test.com', 'password': 'wrong'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['error'], 'Invalid email or password')

    def test_refresh(self):
        login = self.client.post('/api/auth/login/', {'email': 'op@test.com', 'password': 's3cret-pass'}, format='json')
        response = self.client.post('/api/auth/refresh/', {'refresh': login.data['refresh']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)

    def test_me_requires_authentication(self):
        response = self.client.get('/api/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me(self):
        self.client.authenticate_user(self.user)
        response = self.client.get('/api/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['email'], 'op@test.com')

    def test_me_update_ignores_role_for_operators(self):
        self.client.authenticate_user(self.user)
        response = self.client.patch('/api/auth/me/', {'full_name': 'Pat Op', 'role': 'super_admin'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertEqual(self.user.full_name, 'Pat Op')
        self.assertEqual(self.user.role, 'user')

    def test_me_update_without_fields(self):
        self.client.authenticate_user(self.user)
        response = self.client.patch('/api/auth/me/', {'role': 'admin'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_password_reset_sends_mail(self):
        response = self.client.post('/api/auth/password-reset/', {'email': 'op@test.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(mail.outbox), 1)

    def test_password_reset_unknown_email(self):
        """Same answer whether or not the account exists"""
        response = self.client.post('/api/auth/password-reset/', {'email': 'nobody@test.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(mail.outbox), 0)


class TenantTests(TestCase):
    """Tenant management"""

    def setUp(self):
        self.super_admin = TestDataFactory.create_super_admin()
        self.user = TestDataFactory.create_user(tenant_id='ACME')
        self.tenant = TestDataFactory.create_tenant(tenant_id='ACME')
        TestDataFactory.create_tenant(tenant_id='OTHER')
        self.client = AuthenticatedAPIClient()

    def test_create_tenant_normalizes_fields(self):
        self.client.authenticate_user(self.super_admin)
        response = self.client.post('/api/tenants/', {'name': 'Green Cycle', 'tenant_id': 'gcy'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['tenant_id'], 'GCY')
        self.assertEqual(response.data['name'], 'GREEN CYCLE')
        self.assertEqual(response.data['code'], 'greencycle')
        self.assertEqual(response.data['tenant_code'], 'GREENCYCLE')

    def test_create_tenant_requires_name(self):
        self.client.authenticate_user(self.super_admin)
        response = self.client.post('/api/tenants/', {'tenant_id': 'X'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_operator_cannot_create_tenant(self):
        self.client.authenticate_user(self.user)
        response = self.client.post('/api/tenants/', {'name': 'Nope'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_operator_sees_only_own_tenant(self):
        self.client.authenticate_user(self.user)
        response = self.client.get('/api/tenants/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([t['tenant_id'] for t in response.data], ['ACME'])

    def test_other_tenant_detail_hidden(self):
        other = Tenant.objects.get(tenant_id='OTHER')
        self.client.authenticate_user(self.user)
        response = self.client.get(f'/api/tenants/{other.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class TenantCategoryAndContactTests(TestCase):
    """Tenant-owned configuration rows"""

    def setUp(self):
        self.user = TestDataFactory.create_user(tenant_id='ACME')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_category_stamps_tenant(self):
        response = self.client.post('/api/tenant-categories/', {
            'category_name': ' Plastics ',
            'load_type_mapping': 'plastic',
            'sub_categories': ['PET', '', None, 'HDPE'],
            'tenant_id': 'OTHER',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['tenant_id'], 'ACME')
        self.assertEqual(response.data['category_name'], 'Plastics')
        self.assertEqual(response.data['load_type_mapping'], 'PLASTIC')
        self.assertEqual(response.data['sub_categories'], ['PET', 'HDPE'])

    def test_category_requires_load_type(self):
        response = self.client.post('/api/tenant-categories/', {'category_name': 'Paper'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('load_type_mapping', response.data)

    def test_cannot_modify_other_tenant_category(self):
        category = TenantCategory.objects.create(tenant_id='OTHER', category_name='Metals', load_type_mapping='METAL')
        response = self.client.delete(f'/api/tenant-categories/{category.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_contact_filters(self):
        TestDataFactory.create_tenant_contact(tenant_id='ACME', contact_type='primary')
        TestDataFactory.create_tenant_contact(tenant_id='ACME', contact_type='backup', is_active=False)
        response = self.client.get('/api/tenant-contacts/?contact_type=PRIMARY&is_active=true')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['contact_type'], 'primary')

    def test_contact_type_falls_back_to_primary(self):
        response = self.client.post('/api/tenant-contacts/', {
            'contact_type': 'weird',
            'contact_name': 'Sam Lee',
            'contact_email': 'sam@test.com',
            'job_title': 'Director',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['contact_type'], 'primary')


class UserManagementTests(TestCase):
    """User administration"""

    def setUp(self):
        self.admin = TestDataFactory.create_user(tenant_id='ACME', role='admin')
        self.operator = TestDataFactory.create_user(tenant_id='ACME')
        self.outsider = TestDataFactory.create_user(tenant_id='OTHER')
        self.client = AuthenticatedAPIClient()

    def test_operator_cannot_list_users(self):
        self.client.authenticate_user(self.operator)
        response = self.client.get('/api/users/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_lists_own_tenant(self):
        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/users/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual({u['tenant_id'] for u in response.data}, {'ACME'})

    def test_admin_creates_user_in_own_tenant(self):
        self.client.authenticate_user(self.admin)
        response = self.client.post('/api/users/', {
            'email': 'new@test.com',
            'password': 'Very-Strong-Pass-42',
            'tenant_id': 'OTHER',
            'role': 'operator',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['tenant_id'], 'ACME')

    def test_admin_cannot_grant_super_admin(self):
        self.client.authenticate_user(self.admin)
        response = self.client.post('/api/users/', {
            'email': 'boss@test.com',
            'password': 'Very-Strong-Pass-42',
            'role': 'super_admin',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_admin_cannot_delete_self(self):
        self.client.authenticate_user(self.admin)
        response = self.client.delete(f'/api/users/{self.admin.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_other_tenant_user_hidden(self):
        self.client.authenticate_user(self.admin)
        response = self.client.get(f'/api/users/{self.outsider.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class AuditLogTests(TestCase):
    """Audit trail visibility"""

    def setUp(self):
        self.admin = TestDataFactory.create_user(tenant_id='ACME', role='admin')
        self.operator = TestDataFactory.create_user(tenant_id='ACME')
        self.client = AuthenticatedAPIClient()
        create_audit_log(user=self.admin, action='create', model_name='Vendor', object_id=1)
        self.own = create_audit_log(user=self.operator, action='create', model_name='Inventory', object_id=2)

    def test_operator_sees_own_entries_only(self):
        self.client.authenticate_user(self.operator)
        response = self.client.get('/api/audit-logs/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['model_name'], 'Inventory')

    def test_admin_filters_by_model(self):
        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/audit-logs/?model=Vendor')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

    def test_detail(self):
        self.client.authenticate_user(self.operator)
        response = self.client.get(f'/api/audit-logs/{self.own.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['object_id'], '2')
