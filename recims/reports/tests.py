"""
Test suite for the reports module
Tests: dashboard, inbound, inventory, compliance and sales reports, date/bucket validation, cache invalidation
"""
from decimal import Decimal
from unittest import mock

from django.core.cache import cache
from django.test import TestCase
from django.utils import timezone
from rest_framework import status

from recims.compliance.models import ComplianceCertificate
from recims.core.cache_utils import invalidate_reports_cache
from recims.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from recims.inventory.models import Inventory
from recims.reports.queries import inventory_data
from recims.sales.models import SalesOrder


class ReportAPITests(TestCase):
    """Report endpoints"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user(tenant_id='ACME')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_dashboard_is_tenant_scoped(self):
        TestDataFactory.create_shipment(tenant_id='ACME')
        TestDataFactory.create_shipment(tenant_id='ACME')
        TestDataFactory.create_shipment(tenant_id='OTHER')
        response = self.client.get('/api/reports/dashboard/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_shipments'], 2)
        self.assertEqual(response.data['inbound_weight_kg'], 2000.0)
        self.assertEqual(sum(response.data['shipments_by_status'].values()), 2)

    def test_super_admin_sees_all_tenants(self):
        TestDataFactory.create_shipment(tenant_id='ACME')
        TestDataFactory.create_shipment(tenant_id='OTHER')
        admin_client = AuthenticatedAPIClient()
        admin_client.authenticate_user(TestDataFactory.create_super_admin())
        response = admin_client.get('/api/reports/dashboard/')
        self.assertEqual(response.data['total_shipments'], 2)

    def test_super_admin_with_tenant_uses_all_scope(self):
        TestDataFactory.create_shipment(tenant_id='ACME')
        TestDataFactory.create_shipment(tenant_id='OTHER')
        admin = TestDataFactory.create_user(tenant_id='HQ', role='super_admin')
        admin_client = AuthenticatedAPIClient()
        admin_client.authenticate_user(admin)
        with mock.patch('recims.core.cache_utils.cache') as mock_cache:
            mock_cache.get.return_value = None
            response = admin_client.get('/api/reports/dashboard/')
        self.assertEqual(response.data['total_shipments'], 2)
        cache_key = mock_cache.set.call_args[0][0]
        self.assertTrue(cache_key.startswith('tenant:ALL:reports_dashboard'))

    def test_invalid_date(self):
        response = self.client.get('/api/reports/dashboard/?date_from=03/01/2026')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid date format. Use YYYY-MM-DD')

    def test_invalid_bucket(self):
        response = self.client.get('/api/reports/inbound/?bucket=year')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('day, week, month', response.data['error'])

    def test_inbound_breakdown(self):
        TestDataFactory.create_shipment(tenant_id='ACME')
        TestDataFactory.create_shipment(tenant_id='ACME')
        response = self.client.get('/api/reports/inbound/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['summary']['total_loads'], 2)
        self.assertEqual(len(response.data['breakdown']), 1)
        self.assertEqual(response.data['breakdown'][0]['loads'], 2)
        self.assertEqual(response.data['breakdown'][0]['bucket'], timezone.now().date().isoformat())

    def test_inventory_report(self):
        TestDataFactory.create_inventory(tenant_id='ACME', category='PLASTIC', quantity_kg=Decimal('100.00'))
        TestDataFactory.create_inventory(tenant_id='ACME', category='METAL', quantity_kg=Decimal('40.00'))
        response = self.client.get('/api/reports/inventory/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['summary']['total_items'], 2)
        self.assertEqual(response.data['summary']['total_kg'], 140.0)
        self.assertEqual([row['category'] for row in response.data['by_category']], ['METAL', 'PLASTIC'])

    def test_compliance_report(self):
        ComplianceCertificate.objects.create(
            tenant_id='ACME', certificate_number='CERT-2026-0001', status='issued', issued_at=timezone.now(),
            weight_kg=Decimal('480.00'), weight_lbs=Decimal('1058.22'), diversion_rate=Decimal('90.00'),
        )
        ComplianceCertificate.objects.create(tenant_id='ACME', certificate_number='CERT-2026-0002')
        response = self.client.get('/api/reports/compliance/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        summary = response.data['summary']
        self.assertEqual(summary['certificates_issued'], 1)
        self.assertEqual(summary['certified_weight_kg'], 480.0)
        self.assertEqual(summary['average_diversion_rate'], 90.0)
        self.assertEqual(len(response.data['monthly']), 1)

    def test_sales_report_excludes_cancelled(self):
        SalesOrder.objects.create(tenant_id='ACME', so_number='SO-1', total_amount=Decimal('100.00'))
        SalesOrder.objects.create(
            tenant_id='ACME', so_number='SO-2', status='cancelled', total_amount=Decimal('50.00')
        )
        response = self.client.get('/api/reports/sales/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['summary']['total_orders'], 1)
        self.assertEqual(response.data['summary']['total_amount'], 100.0)
        statuses = {row['status']: row['orders'] for row in response.data['by_status']}
        self.assertEqual(statuses, {'cancelled': 1, 'draft': 1})


class ReportCacheTests(TestCase):
    """cached_query and signal-driven invalidation"""

    def setUp(self):
        cache.clear()

    def test_results_cached_until_invalidated(self):
        item = TestDataFactory.create_inventory(tenant_id='ACME', quantity_kg=Decimal('10.00'))
        self.assertEqual(inventory_data('ACME', False)['summary']['total_kg'], 10.0)

        # queryset.update() sends no signals
        Inventory.objects.filter(pk=item.pk).update(quantity_kg=Decimal('25.00'))
        self.assertEqual(inventory_data('ACME', False)['summary']['total_kg'], 10.0)

        invalidate_reports_cache('ACME')
        self.assertEqual(inventory_data('ACME', False)['summary']['total_kg'], 25.0)

    def test_save_invalidates(self):
        TestDataFactory.create_inventory(tenant_id='ACME')
        self.assertEqual(inventory_data('ACME', False)['summary']['total_items'], 1)
        TestDataFactory.create_inventory(tenant_id='ACME')
        self.assertEqual(inventory_data('ACME', False)['summary']['total_items'], 2)

    def test_tenants_cached_separately(self):
        TestDataFactory.create_inventory(tenant_id='ACME')
        self.assertEqual(inventory_data('ACME', False)['summary']['total_items'], 1)
        self.assertEqual(inventory_data('OTHER', False)['summary']['total_items'], 0)
        self.assertEqual(inventory_data(None, True)['summary']['total_items'], 1)
