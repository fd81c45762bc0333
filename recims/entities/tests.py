"""
Test suite for the entities module
Tests: loose filtering, sorting and limits, generic records, typed entities, core aliases
"""
from django.test import TestCase
from rest_framework import status

from recims.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from recims.entities.models import EntityRecord
from recims.entities.query import (
    QueryError, normalize_entity_name, compact_entity_name, is_valid_entity_name, values_equal,
    filters_from_params, parse_limit, sort_records, apply_query,
)


class QueryHelperTests(TestCase):
    """Name normalization and record matching"""

    def test_entity_names(self):
        self.assertEqual(normalize_entity_name('Skid-Label'), 'skid_label')
        self.assertEqual(compact_entity_name('purchase_order'), 'purchaseorder')
        self.assertTrue(is_valid_entity_name('skid_label'))
        self.assertFalse(is_valid_entity_name('skid.label'))
        self.assertFalse(is_valid_entity_name(''))

    def test_values_equal(self):
        self.assertTrue(values_equal(5, '5'))
        self.assertTrue(values_equal(1.0, '1'))
        self.assertTrue(values_equal(True, 'true'))
        self.assertFalse(values_equal(True, 'yes'))
        self.assertTrue(values_equal(None, None))
        self.assertFalse(values_equal(None, ''))
        self.assertFalse(values_equal(1, True))

    def test_filters_from_params(self):
        filters = filters_from_params({'q': '{"zone": "A", "active": true}', 'priority': '2', 'sort': 'name'})
        self.assertEqual(filters, {'zone': 'A', 'active': True, 'priority': 2})
        with self.assertRaises(QueryError):
            filters_from_params({'q': '[1, 2]'})

    def test_parse_limit(self):
        self.assertIsNone(parse_limit(None))
        self.assertEqual(parse_limit('5'), 5)
        for bad in ('0', '-3', 'ten'):
            with self.assertRaises(QueryError):
                parse_limit(bad)

    def test_sort_missing_values_last(self):
        records = [{'n': 2}, {}, {'n': 9}, {'n': None}, {'n': 4}]
        self.assertEqual([r.get('n') for r in sort_records(records, 'n')], [2, 4, 9, None, None])
        self.assertEqual([r.get('n') for r in sort_records(records, '-n')], [9, 4, 2, None, None])

    def test_apply_query_list_filter(self):
        records = [{'status': 'open'}, {'status': 'closed'}, {'status': 'void'}]
        result = apply_query(records, {'status': ['open', 'void']}, limit=1)
        self.assertEqual(result, [{'status': 'open'}])


class GenericEntityAPITests(TestCase):
    """Schemaless records under /api/entities/"""

    def setUp(self):
        self.user = TestDataFactory.create_user(tenant_id='ACME')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def create_record(self, tenant_id='ACME', **payload):
        return EntityRecord.objects.create(entity_name='skid_label', tenant_id=tenant_id, payload=payload)

    def test_create_stamps_tenant(self):
        response = self.client.post('/api/entities/Skid-Label/', {
            'name': 'Bay 1', 'priority': 2, 'tenant_id': 'OTHER',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['tenant_id'], 'ACME')
        self.assertEqual(response.data['priority'], 2)
        self.assertIn('created_date', response.data)
        self.assertEqual(EntityRecord.objects.get().entity_name, 'skid_label')

    def test_create_requires_body(self):
        response = self.client.post('/api/entities/skid_label/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_invalid_entity_name(self):
        response = self.client.get('/api/entities/skid.label/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_filter_sort_limit(self):
        self.create_record(name='Bay 1', priority=2)
        self.create_record(name='Bay 2', priority=7)
        self.create_record(name='Bay 3')
        self.create_record(tenant_id='OTHER', name='Hidden', priority=9)
        response = self.client.get('/api/entities/skid_label/?sort=-priority')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([r['name'] for r in response.data], ['Bay 2', 'Bay 1', 'Bay 3'])
        response = self.client.get('/api/entities/skid_label/?priority=2')
        self.assertEqual([r['name'] for r in response.data], ['Bay 1'])
        response = self.client.get('/api/entities/skid_label/?sort=name&limit=1')
        self.assertEqual(len(response.data), 1)

    def test_bad_limit_and_q(self):
        self.assertEqual(self.client.get('/api/entities/skid_label/?limit=0').status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.client.get('/api/entities/skid_label/?q=oops').status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_merges_payload(self):
        record = self.create_record(name='Bay 1', priority=2)
        response = self.client.put(f'/api/entities/skid_label/{record.id}/', {'priority': 5}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['name'], 'Bay 1')
        self.assertEqual(response.data['priority'], 5)
        record.refresh_from_db()
        self.assertEqual(record.tenant_id, 'ACME')

    def test_other_tenant_record(self):
        record = self.create_record(tenant_id='OTHER', name='Hidden')
        response = self.client.get(f'/api/entities/skid_label/{record.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        response = self.client.put(f'/api/entities/skid_label/{record.id}/', {'name': 'Mine'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        record.refresh_from_db()
        self.assertEqual(record.payload['name'], 'Hidden')

    def test_shared_record_read_only_for_tenant_users(self):
        record = self.create_record(tenant_id=None, name='Shared')
        response = self.client.get(f'/api/entities/skid_label/{record.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        response = self.client.delete(f'/api/entities/skid_label/{record.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        admin_client = AuthenticatedAPIClient()
        admin_client.authenticate_user(TestDataFactory.create_super_admin())
        response = admin_client.delete(f'/api/entities/skid_label/{record.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(EntityRecord.objects.filter(id=record.id).exists())

    def test_delete(self):
        record = self.create_record(name='Bay 1')
        response = self.client.delete(f'/api/entities/skid_label/{record.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Deleted successfully')


class TypedEntityAPITests(TestCase):
    """Entity names backed by typed models, and core aliases"""

    def setUp(self):
        self.user = TestDataFactory.create_user(tenant_id='ACME')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_typed_list_is_scoped_and_filtered(self):
        TestDataFactory.create_inventory(tenant_id='ACME', category='PLASTIC')
        TestDataFactory.create_inventory(tenant_id='ACME', category='METAL')
        TestDataFactory.create_inventory(tenant_id='OTHER', category='PLASTIC')
        response = self.client.get('/api/entities/Inventory/?category=PLASTIC')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['tenant_id'], 'ACME')

    def test_typed_create(self):
        response = self.client.post('/api/entities/Carrier/', {'company_name': 'Polar Haul'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['tenant_id'], 'ACME')

    def test_inventory_create_uses_entry_rules(self):
        response = self.client.post('/api/entities/Inventory/', {
            'inventory_id': 'X1', 'unit_of_measure': 'lbs', 'quantity_lbs': '100', 'category': 'PLASTIC',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['tenant_id'], 'ACME')
        self.assertEqual(response.data['quantity_kg'], '45.36')
        self.assertEqual(response.data['quantity_on_hand'], '100.00')
        self.assertEqual(response.data['available_quantity'], '100.00')
        self.assertEqual(response.data['sorting_status'], 'needs_sorting')

    def test_workflow_entities_are_read_only(self):
        response = self.client.post('/api/entities/PurchaseOrder/', {'po_number': 'PO-1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
        self.assertIn('/api/purchase-orders/', response.data['error'])
        po = TestDataFactory.create_purchase_order(tenant_id='ACME')
        response = self.client.get(f'/api/entities/purchase_order/{po.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        response = self.client.delete(f'/api/entities/purchase_order/{po.id}/')
        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)

    def test_typed_update_is_partial(self):
        carrier = TestDataFactory.create_carrier(tenant_id='ACME')
        response = self.client.put(f'/api/entities/carrier/{carrier.id}/', {'phone_number': '555-0100'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['company_name'], 'Northern Freight')
        self.assertEqual(response.data['phone_number'], '555-0100')

    def test_core_alias_delegates(self):
        TestDataFactory.create_tenant(tenant_id='ACME')
        TestDataFactory.create_tenant(tenant_id='OTHER')
        response = self.client.get('/api/entities/Tenant/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([t['tenant_id'] for t in response.data], ['ACME'])
        response = self.client.post('/api/entities/tenant/', {'tenant_id': 'NEW', 'name': 'New'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
