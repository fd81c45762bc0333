"""
Test suite for the purchasing module
Tests: PO creation with skids, line append, receiving into inventory, totals, labels and lookup
"""
from decimal import Decimal

from django.test import TestCase
from rest_framework import status

from recims.core.models import AuditLog
from recims.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from recims.inventory.models import Inventory
from recims.purchasing.models import PurchaseOrder
from recims.purchasing.services import (
    PurchaseOrderError, ReceivingError, create_purchase_order, receive_item, recompute_totals,
    renumber_skids, skid_code, line_barcode
)


class SkidNumberingTests(TestCase):
    """Skid and barcode helpers"""

    def test_skid_code(self):
        self.assertEqual(skid_code('PO-1', 3), 'PO-1-SKD-003')
        self.assertEqual(line_barcode('PO-1-SKD-003', 4), 'PO-1-SKD-003-L4')

    def test_renumber_skids_closes_gaps(self):
        lines = renumber_skids([
            {'skid_number': '4'}, {'skid_number': '4'}, {'skid_number': '9'}, {'skid_number': '2'},
        ])
        self.assertEqual([l['skid_number'] for l in lines], [1, 1, 2, 3])
        self.assertEqual([l['line_number'] for l in lines], [1, 2, 3, 4])


class PurchaseOrderServiceTests(TestCase):
    """create_purchase_order and receive_item"""

    def setUp(self):
        self.user = TestDataFactory.create_user(tenant_id='ACME')
        self.vendor = TestDataFactory.create_vendor(tenant_id='ACME', terms_ref='Net 45')

    def test_create_metric_po(self):
        po = create_purchase_order(self.user, {'vendor': self.vendor}, [
            {'skid_number': '1', 'category': 'PLASTIC', 'expected_weight_kg': Decimal('100'), 'unit_price': Decimal('0.5')},
            {'skid_number': '1', 'category': 'PLASTIC', 'expected_weight_kg': Decimal('200'), 'unit_price': Decimal('0.25')},
            {'skid_number': '5', 'category': 'METAL', 'expected_weight_kg': Decimal('100')},
        ])
        self.assertEqual(po.status, 'draft')
        self.assertEqual(po.tenant_id, 'ACME')
        self.assertEqual(po.payment_terms, 'Net 45')
        self.assertEqual(po.total_skids_expected, 2)
        self.assertEqual(po.total_amount, Decimal('100.00'))
        self.assertEqual(po.total_expected_weight_kg, Decimal('400.00'))
        items = list(po.items.order_by('line_number'))
        self.assertEqual(items[0].skid_number, skid_code(po.po_number, 1))
        self.assertEqual(items[2].skid_number, skid_code(po.po_number, 2))
        self.assertEqual(items[1].barcode, f'{skid_code(po.po_number, 1)}-L2')
        self.assertTrue(AuditLog.objects.filter(action='po_create', object_name=po.po_number).exists())

    def test_imperial_tenant_prices_on_lbs(self):
        TestDataFactory.create_tenant(tenant_id='ACME', unit_system='IMPERIAL')
        po = create_purchase_order(self.user, {'vendor': self.vendor}, [
            {'category': 'PAPER', 'expected_weight_lbs': Decimal('1000'), 'unit_price': Decimal('0.10')},
        ])
        self.assertEqual(po.total_amount, Decimal('100.00'))
        self.assertEqual(po.items.get().expected_weight_kg, Decimal('453.59'))

    def test_create_requires_vendor(self):
        with self.assertRaisesMessage(PurchaseOrderError, 'Please select a vendor'):
            create_purchase_order(self.user, {}, [{'category': 'PAPER', 'expected_weight_kg': Decimal('1')}])

    def test_create_requires_lines_with_weight(self):
        with self.assertRaises(PurchaseOrderError):
            create_purchase_order(self.user, {'vendor': self.vendor}, [])
        with self.assertRaises(PurchaseOrderError):
            create_purchase_order(self.user, {'vendor': self.vendor}, [{'category': 'PAPER'}])

    def test_receive_item_creates_inventory(self):
        po = TestDataFactory.create_purchase_order(tenant_id='ACME', vendor=self.vendor)
        first = TestDataFactory.create_purchase_order_item(po, line_number=1)
        TestDataFactory.create_purchase_order_item(po, line_number=2)

        result = receive_item(self.user, first, {'actual_weight_kg': Decimal('480')})
        self.assertFalse(result['all_received'])
        self.assertTrue(result['needs_sorting'])

        inventory = Inventory.objects.get(inventory_id=result['inventory_id'])
        self.assertEqual(inventory.quantity_kg, Decimal('480.00'))
        self.assertEqual(inventory.quantity_lbs, Decimal('1058.22'))
        self.assertEqual(inventory.purchase_order_number, po.po_number)
        self.assertEqual(inventory.sorting_status, 'needs_sorting')

        po.refresh_from_db()
        self.assertEqual(po.status, 'partially_received')
        self.assertEqual(po.total_received_weight_kg, Decimal('480.00'))
        self.assertEqual(po.total_skids_received, 1)

    def test_receive_blank_weight_uses_expected(self):
        po = TestDataFactory.create_purchase_order(tenant_id='ACME', vendor=self.vendor)
        item = TestDataFactory.create_purchase_order_item(po, expected_weight_kg=Decimal('250.00'))
        result = receive_item(self.user, item, {})
        self.assertTrue(result['all_received'])
        item.refresh_from_db()
        self.assertEqual(item.actual_weight_kg, Decimal('250.00'))
        po.refresh_from_db()
        self.assertEqual(po.status, 'received')
        self.assertIsNotNone(po.actual_delivery_date)

    def test_receive_twice_rejected(self):
        po = TestDataFactory.create_purchase_order(tenant_id='ACME', vendor=self.vendor)
        item = TestDataFactory.create_purchase_order_item(po)
        receive_item(self.user, item, {})
        with self.assertRaisesMessage(ReceivingError, 'This item has already been received'):
            receive_item(self.user, item, {})
        self.assertEqual(Inventory.objects.count(), 1)

    def test_recompute_totals_from_lines(self):
        po = TestDataFactory.create_purchase_order(tenant_id='ACME', vendor=self.vendor)
        TestDataFactory.create_purchase_order_item(po, line_number=1, expected_weight_kg=Decimal('100.00'))
        TestDataFactory.create_received_item(po, line_number=2, actual_weight_kg=Decimal('90.00'))
        PurchaseOrder.objects.filter(pk=po.pk).update(total_expected_weight_kg=Decimal('1.00'))
        po.refresh_from_db()
        recompute_totals(po)
        self.assertEqual(po.total_expected_weight_kg, Decimal('600.00'))
        self.assertEqual(po.total_received_weight_kg, Decimal('90.00'))
        self.assertEqual(po.total_skids_received, 1)


class PurchaseOrderAPITests(TestCase):
    """Purchase order endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user(tenant_id='ACME')
        self.vendor = TestDataFactory.create_vendor(tenant_id='ACME')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_po(self):
        response = self.client.post('/api/purchase-orders/', {
            'vendor': self.vendor.id,
            'items': [
                {'skid_number': '1', 'category': 'PLASTIC', 'expected_weight_kg': '100', 'unit_price': '1.00'},
                {'skid_number': '2', 'category': 'PLASTIC', 'expected_weight_kg': '50'},
            ],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(len(response.data['items']), 2)
        self.assertEqual(response.data['total_skids_expected'], 2)
        self.assertEqual(response.data['vendor_name'], self.vendor.display_name)

    def test_create_po_without_items(self):
        response = self.client.post('/api/purchase-orders/', {'vendor': self.vendor.id, 'items': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Purchase order must have at least one product.')

    def test_list_paginated(self):
        for _ in range(3):
            TestDataFactory.create_purchase_order(tenant_id='ACME', vendor=self.vendor)
        TestDataFactory.create_purchase_order(tenant_id='OTHER')
        response = self.client.get('/api/purchase-orders/?limit=2')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 3)
        self.assertEqual(len(response.data['results']), 2)
        self.assertEqual(response.data['next'], 2)

    def test_list_bad_page(self):
        response = self.client.get('/api/purchase-orders/?page=abc')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_only_drafts(self):
        po = TestDataFactory.create_purchase_order(tenant_id='ACME', vendor=self.vendor, status='sent')
        response = self.client.delete(f'/api/purchase-orders/{po.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        po.status = 'draft'
        po.save()
        response = self.client.delete(f'/api/purchase-orders/{po.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

    def test_manual_status_changes(self):
        po = TestDataFactory.create_purchase_order(tenant_id='ACME', vendor=self.vendor)
        response = self.client.patch(f'/api/purchase-orders/{po.id}/', {'status': 'sent'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'sent')
        response = self.client.patch(f'/api/purchase-orders/{po.id}/', {'status': 'received'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('status', response.data)

    def test_received_po_cannot_return_to_draft(self):
        po = TestDataFactory.create_purchase_order(tenant_id='ACME', vendor=self.vendor, status='received')
        response = self.client.patch(f'/api/purchase-orders/{po.id}/', {'status': 'draft'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        po.refresh_from_db()
        self.assertEqual(po.status, 'received')
        response = self.client.delete(f'/api/purchase-orders/{po.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_add_item_on_new_skid(self):
        po = TestDataFactory.create_purchase_order(tenant_id='ACME', vendor=self.vendor)
        TestDataFactory.create_purchase_order_item(po, line_number=1, skid_number=skid_code(po.po_number, 1))
        response = self.client.post(f'/api/purchase-orders/{po.id}/items/', {
            'category': 'METAL', 'expected_weight_kg': '75',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['line_number'], 2)
        self.assertEqual(response.data['skid_number'], skid_code(po.po_number, 2))
        po.refresh_from_db()
        self.assertEqual(po.total_skids_expected, 2)

    def test_add_item_to_received_po(self):
        po = TestDataFactory.create_purchase_order(tenant_id='ACME', vendor=self.vendor, status='received')
        response = self.client.post(f'/api/purchase-orders/{po.id}/items/', {'category': 'METAL'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_receive_endpoint(self):
        po = TestDataFactory.create_purchase_order(tenant_id='ACME', vendor=self.vendor)
        item = TestDataFactory.create_purchase_order_item(po)
        url = f'/api/purchase-orders/{po.id}/items/{item.id}/receive/'
        response = self.client.post(url, {'actual_weight_lbs': '1000', 'zone': 'B'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['all_received'])
        self.assertEqual(response.data['purchase_order']['status'], 'received')
        response = self.client.post(url, {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'This item has already been received')

    def test_other_tenant_po_hidden(self):
        po = TestDataFactory.create_purchase_order(tenant_id='OTHER')
        response = self.client.get(f'/api/purchase-orders/{po.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_labels(self):
        po = TestDataFactory.create_purchase_order(tenant_id='ACME', vendor=self.vendor)
        item = TestDataFactory.create_purchase_order_item(po)
        response = self.client.get(f'/api/purchase-orders/{po.id}/labels/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['labels'][0]['barcode'], item.barcode)
        self.assertTrue(response.data['labels'][0]['label'].startswith('data:image/png;base64,'))

    def test_lookup_by_barcode(self):
        po = TestDataFactory.create_purchase_order(tenant_id='ACME', vendor=self.vendor)
        item = TestDataFactory.create_purchase_order_item(po)
        response = self.client.get(f'/api/purchase-orders/lookup/?barcode={item.barcode.lower()}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['purchase_order']['po_number'], po.po_number)
        response = self.client.get('/api/purchase-orders/lookup/?barcode=NOPE')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        response = self.client.get('/api/purchase-orders/lookup/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
