"""
Test suite for the inventory module
Tests: unit conversion, sorting rules, identifiers, inventory endpoints, quantity adjustments
"""
from decimal import Decimal

from django.test import TestCase
from rest_framework import status

from recims.core.models import AuditLog
from recims.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from recims.inventory.models import Inventory
from recims.inventory.services import (
    needs_sorting, build_inventory_id, unique_inventory_id, describe_material, available_from
)
from recims.inventory.units import (
    to_decimal, kg_to_lbs, lbs_to_kg, normalize_weight, line_weight, convert_volume
)


class UnitConversionTests(TestCase):
    """Weight and volume conversions"""

    def test_to_decimal(self):
        self.assertEqual(to_decimal('12.5'), Decimal('12.5'))
        self.assertIsNone(to_decimal('abc'))
        self.assertEqual(to_decimal('', Decimal('0')), Decimal('0'))
        self.assertIsNone(to_decimal('NaN'))

    def test_kg_lbs(self):
        self.assertEqual(kg_to_lbs(Decimal('100')), Decimal('220.46'))
        self.assertEqual(lbs_to_kg(Decimal('220.46')), Decimal('100.00'))
        self.assertIsNone(kg_to_lbs(None))

    def test_normalize_weight_units(self):
        self.assertEqual(normalize_weight('kg', quantity_kg='10'), (Decimal('10.00'), Decimal('22.05')))
        self.assertEqual(normalize_weight('lbs', quantity_lbs='100'), (Decimal('45.36'), Decimal('100.00')))
        self.assertEqual(normalize_weight('tonnes', quantity_kg='2'), (Decimal('2000.00'), Decimal('4409.24')))
        self.assertEqual(normalize_weight('tons', quantity_lbs='1'), (Decimal('907.18'), Decimal('2000.00')))

    def test_normalize_weight_unknown_unit(self):
        with self.assertRaises(ValueError):
            normalize_weight('stone', quantity_kg='1')

    def test_line_weight(self):
        kg, lbs = line_weight('1', 'tonnes')
        self.assertEqual(kg, Decimal('1000'))
        self.assertEqual(lbs, Decimal('2204.62'))
        self.assertEqual(line_weight('5', 'pallets'), (Decimal('0'), Decimal('0')))

    def test_convert_volume(self):
        self.assertEqual(convert_volume('1', 'cubic_yards', 'cubic_feet'), Decimal('27.00'))
        self.assertEqual(convert_volume('54', 'cubic_feet', 'cubic_yards'), Decimal('2.00'))
        self.assertIsNone(convert_volume('0', 'cubic_feet', 'cubic_yards'))
        with self.assertRaises(ValueError):
            convert_volume('1', 'gallons', 'cubic_feet')


class SortingRuleTests(TestCase):
    """needs_sorting, identifiers and descriptions"""

    def test_needs_sorting(self):
        classified = {'sub_category': 'PET', 'product_type': 'Bottles', 'purity': '95%', 'format': 'Baled'}
        self.assertFalse(needs_sorting(classified))
        self.assertTrue(needs_sorting(dict(classified, purity='UNKNOWN')))
        self.assertTrue(needs_sorting(dict(classified, format='unknown')))
        self.assertTrue(needs_sorting(dict(classified, sub_category='')))

    def test_build_inventory_id(self):
        self.assertEqual(build_inventory_id(True, now_ms=1234), 'INV-000001234')
        self.assertEqual(build_inventory_id(False, 'SKID-01', now_ms=99), 'INV-SKID-01-99')
        self.assertEqual(build_inventory_id(False, now_ms=99), 'INV-99')

    def test_unique_inventory_id_suffixes(self):
        TestDataFactory.create_inventory(tenant_id='ACME', inventory_id='INV-1')
        TestDataFactory.create_inventory(tenant_id='ACME', inventory_id='INV-1-2')
        self.assertEqual(unique_inventory_id('ACME', 'INV-1'), 'INV-1-3')
        self.assertEqual(unique_inventory_id('OTHER', 'INV-1'), 'INV-1')

    def test_describe_material(self):
        name, description = describe_material('PLASTIC', 'PET', 'Bottles', 'Baled', '95%')
        self.assertEqual(name, 'PLASTIC - Bottles')
        self.assertEqual(description, 'PLASTIC > PET > Bottles | Format: Baled | Purity: 95%')

    def test_available_never_negative(self):
        self.assertEqual(available_from(Decimal('5'), Decimal('8')), Decimal('0.00'))


class InventoryAPITests(TestCase):
    """Inventory endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user(tenant_id='ACME')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_metric_entry(self):
        response = self.client.post('/api/inventory/', {
            'category': 'PLASTIC',
            'unit_of_measure': 'kg',
            'quantity_kg': '250',
            'reserved_quantity': '50',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['tenant_id'], 'ACME')
        self.assertEqual(Decimal(response.data['quantity_lbs']), Decimal('551.16'))
        self.assertEqual(Decimal(response.data['quantity_on_hand']), Decimal('250.00'))
        self.assertEqual(Decimal(response.data['available_quantity']), Decimal('200.00'))
        self.assertEqual(response.data['sorting_status'], 'needs_sorting')
        self.assertTrue(response.data['inventory_id'].startswith('INV-'))

    def test_create_imperial_entry_is_classified(self):
        response = self.client.post('/api/inventory/', {
            'category': 'METAL',
            'sub_category': 'Aluminum',
            'product_type': 'Cans',
            'format': 'Baled',
            'purity': '98%',
            'unit_of_measure': 'lbs',
            'quantity_lbs': '1000',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['sorting_status'], 'classified')
        self.assertEqual(Decimal(response.data['quantity_kg']), Decimal('453.59'))
        self.assertEqual(Decimal(response.data['quantity_on_hand']), Decimal('1000.00'))
        self.assertEqual(response.data['item_name'], 'METAL - Cans')

    def test_list_filters(self):
        TestDataFactory.create_inventory(tenant_id='ACME', category='PLASTIC', sorting_status='needs_sorting')
        TestDataFactory.create_inventory(tenant_id='ACME', category='METAL')
        TestDataFactory.create_inventory(tenant_id='OTHER', category='PLASTIC')
        response = self.client.get('/api/inventory/?category=plastic')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        response = self.client.get('/api/inventory/?sorting_status=needs_sorting')
        self.assertEqual(len(response.data), 1)

    def test_adjust_quantity(self):
        item = TestDataFactory.create_inventory(tenant_id='ACME', quantity_kg=Decimal('100.00'))
        response = self.client.post(f'/api/inventory/{item.id}/adjust/', {
            'quantity': '80', 'reason': 'Cycle count'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        item.refresh_from_db()
        self.assertEqual(item.quantity_kg, Decimal('80.00'))
        self.assertEqual(item.quantity_lbs, Decimal('176.37'))
        self.assertEqual(item.available_quantity, Decimal('80.00'))
        entry = AuditLog.objects.get(action='stock_adjust')
        self.assertEqual(entry.changes['reason'], 'Cycle count')

    def test_adjust_rejects_negative(self):
        item = TestDataFactory.create_inventory(tenant_id='ACME')
        response = self.client.post(f'/api/inventory/{item.id}/adjust/', {'quantity': '-1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_classify_moves_out_of_sorting_queue(self):
        item = TestDataFactory.create_inventory(tenant_id='ACME', sorting_status='needs_sorting')
        response = self.client.post(f'/api/inventory/{item.id}/classify/', {
            'sub_category': 'PET', 'product_type': 'Bottles', 'format': 'Loose', 'purity': '90%',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['sorting_status'], 'classified')
        self.assertIsNotNone(response.data['processed_date'])

    def test_update_other_tenant_row_hidden(self):
        item = TestDataFactory.create_inventory(tenant_id='OTHER')
        response = self.client.patch(f'/api/inventory/{item.id}/', {'zone': 'B'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_update_reconverts_weights(self):
        item = TestDataFactory.create_inventory(tenant_id='ACME')
        response = self.client.patch(f'/api/inventory/{item.id}/', {'quantity_kg': '10'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        item.refresh_from_db()
        self.assertEqual(item.quantity_lbs, Decimal('22.05'))
        self.assertEqual(item.available_quantity, Decimal('10.00'))

    def test_create_with_taken_inventory_id_is_suffixed(self):
        TestDataFactory.create_inventory(tenant_id='ACME', inventory_id='INV-BAY1')
        response = self.client.post('/api/inventory/', {
            'inventory_id': 'INV-BAY1', 'category': 'PLASTIC', 'unit_of_measure': 'kg', 'quantity_kg': '10',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['inventory_id'], 'INV-BAY1-2')

    def test_update_with_only_other_unit_weight(self):
        item = TestDataFactory.create_inventory(tenant_id='ACME', quantity_kg=Decimal('100.00'))
        response = self.client.patch(f'/api/inventory/{item.id}/', {'quantity_lbs': '500'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Decimal(response.data['quantity_kg']), Decimal('226.80'))
        self.assertEqual(Decimal(response.data['quantity_lbs']), Decimal('500.00'))
        self.assertEqual(Decimal(response.data['quantity_on_hand']), Decimal('226.80'))
        self.assertEqual(Decimal(response.data['available_quantity']), Decimal('226.80'))

    def test_by_location(self):
        TestDataFactory.create_inventory(tenant_id='ACME', zone='A', bin_location='A1', quantity_kg=Decimal('10.00'))
        TestDataFactory.create_inventory(tenant_id='ACME', zone='A', bin_location='A1', quantity_kg=Decimal('5.00'))
        response = self.client.get('/api/inventory/by-location/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]['item_count'], 2)
        self.assertEqual(response.data[0]['total_kg'], 15.0)

    def test_delete(self):
        item = TestDataFactory.create_inventory(tenant_id='ACME')
        response = self.client.delete(f'/api/inventory/{item.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Inventory.objects.filter(id=item.id).exists())
