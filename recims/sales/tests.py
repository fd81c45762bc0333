"""
Test suite for the sales module
Tests: Canadian/US tax, sales order creation, waybills, carriers, calculateUSTax
"""
from datetime import date
from decimal import Decimal

from django.test import TestCase
from rest_framework import status

from recims.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from recims.sales.models import SalesOrder, SalesOrderItem, Waybill
from recims.sales.services import SalesOrderError, create_sales_order, create_waybill, is_po_box, quote_order
from recims.sales.tax import calculate_canada_sales_tax, calculate_us_tax, province_rates


def order_line(quantity='10', price='100', **extra):
    line = {'sku_snapshot': 'PET-BALE', 'quantity_ordered': Decimal(quantity), 'unit_price': Decimal(price)}
    line.update(extra)
    return line


class CanadianTaxTests(TestCase):
    """calculate_canada_sales_tax"""

    def test_province_rates(self):
        self.assertEqual(province_rates('on'), [('HST', Decimal('0.13'))])
        self.assertEqual(province_rates('AB'), [('GST', Decimal('0.05'))])
        self.assertEqual(len(province_rates('QC')), 2)
        self.assertEqual(province_rates(''), [])
        self.assertEqual(province_rates('XX'), [])

    def test_ontario_hst_with_shipping(self):
        result = calculate_canada_sales_tax('ON', [order_line()], shipping_amount=Decimal('50'))
        totals = result['totals']
        self.assertEqual(totals['tax_by_type']['HST'], Decimal('136.50'))
        self.assertEqual(totals['total_tax'], Decimal('136.50'))
        self.assertEqual(totals['subtotal'], Decimal('1050.00'))
        self.assertEqual(totals['grand_total'], Decimal('1186.50'))
        self.assertEqual(result['per_line'][0]['line_tax_total'], Decimal('130.00'))
        self.assertEqual(result['shipping']['tax_total'], Decimal('6.50'))

    def test_quebec_gst_and_qst(self):
        totals = calculate_canada_sales_tax('QC', [order_line()])['totals']
        self.assertEqual(totals['tax_by_type']['GST'], Decimal('50.00'))
        self.assertEqual(totals['tax_by_type']['QST'], Decimal('99.75'))
        self.assertEqual(totals['total_tax'], Decimal('149.75'))

    def test_british_columbia_pst(self):
        totals = calculate_canada_sales_tax('BC', [order_line()])['totals']
        self.assertEqual(totals['tax_by_type']['PST'], Decimal('70.00'))
        self.assertEqual(totals['total_tax'], Decimal('120.00'))

    def test_labor_lines_untaxed(self):
        result = calculate_canada_sales_tax('ON', [
            order_line(), order_line(price='50', product_tax_category='labor'),
        ])
        self.assertEqual(result['per_line'][1]['taxes'], [])
        self.assertEqual(result['totals']['total_tax'], Decimal('130.00'))
        self.assertEqual(result['totals']['subtotal'], Decimal('1500.00'))

    def test_discount_reduces_basis(self):
        result = calculate_canada_sales_tax('AB', [order_line(discount_amount=Decimal('200'))])
        self.assertEqual(result['per_line'][0]['basis'], Decimal('800.00'))
        self.assertEqual(result['totals']['total_tax'], Decimal('40.00'))

    def test_exempt_customer(self):
        totals = calculate_canada_sales_tax('ON', [order_line()], customer_exempt=True)['totals']
        self.assertEqual(totals['total_tax'], Decimal('0.00'))
        self.assertEqual(totals['grand_total'], Decimal('1000.00'))


class USTaxAndQuoteTests(TestCase):
    """calculate_us_tax and quote_order"""

    def test_flat_rate(self):
        self.assertEqual(calculate_us_tax(Decimal('100')), {
            'subtotal': Decimal('100.00'), 'tax': Decimal('8.00'), 'total': Decimal('108.00'),
        })
        self.assertEqual(calculate_us_tax(Decimal('100'), Decimal('0.05'))['tax'], Decimal('5.00'))

    def test_quote_outside_canada(self):
        totals = quote_order([order_line()], 'US', 'NY', Decimal('50'))['totals']
        self.assertEqual(totals['total_tax'], Decimal('80.00'))
        self.assertEqual(totals['subtotal'], Decimal('1050.00'))
        self.assertEqual(totals['grand_total'], Decimal('1130.00'))

    def test_quote_canada_uses_province(self):
        totals = quote_order([order_line()], 'ca', 'NS')['totals']
        self.assertEqual(totals['tax_by_type']['HST'], Decimal('150.00'))

    def test_po_box_detection(self):
        self.assertTrue(is_po_box('P.O. Box 123'))
        self.assertTrue(is_po_box('', 'PO BOX 9'))
        self.assertFalse(is_po_box('12 Boxwood Ave'))


class SalesOrderServiceTests(TestCase):
    """create_sales_order and create_waybill"""

    def setUp(self):
        self.user = TestDataFactory.create_user(tenant_id='ACME', full_name='Dana Cole')
        TestDataFactory.create_tenant(tenant_id='ACME', tenant_code='ACM', default_currency='CAD')
        self.customer = TestDataFactory.create_customer(tenant_id='ACME', display_name='Harbour Plastics')
        self.carrier = TestDataFactory.create_carrier(tenant_id='ACME')

    def test_create_uses_customer_ship_to(self):
        so = create_sales_order(self.user, {'customer': self.customer}, [order_line('2', '100')])
        self.assertTrue(so.so_number.startswith('SO-ACM-'))
        self.assertEqual(so.status, 'draft')
        self.assertEqual(so.currency, 'CAD')
        self.assertEqual(so.ship_city, 'Toronto')
        self.assertEqual(so.ship_country, 'CA')
        self.assertEqual(so.po_number, 'TBD')
        self.assertEqual(so.subtotal, Decimal('200.00'))
        self.assertEqual(so.tax_hst, Decimal('26.00'))
        self.assertEqual(so.total_amount, Decimal('226.00'))
        item = SalesOrderItem.objects.get(sales_order=so)
        self.assertEqual(item.line_number, 10)
        self.assertEqual(item.line_tax_amount, Decimal('26.00'))
        self.assertEqual(item.line_total, Decimal('226.00'))

    def test_customer_required(self):
        with self.assertRaisesMessage(SalesOrderError, 'Please select a customer'):
            create_sales_order(self.user, {}, [order_line()])

    def test_po_box_rejected(self):
        data = {
            'customer': self.customer, 'ship_line1': 'PO Box 42', 'ship_city': 'Ottawa',
            'ship_region': 'ON', 'ship_postal_code': 'K1A 0B1', 'ship_country': 'CA',
        }
        with self.assertRaisesMessage(SalesOrderError, 'Cannot ship to PO Box address'):
            create_sales_order(self.user, data, [order_line()])

    def test_incomplete_address_rejected(self):
        customer = TestDataFactory.create_customer(tenant_id='ACME', ship_line1='', ship_city='')
        with self.assertRaisesMessage(SalesOrderError, 'Please enter complete shipping address'):
            create_sales_order(self.user, {'customer': customer}, [order_line()])

    def test_lines_without_price_dropped(self):
        with self.assertRaisesMessage(SalesOrderError, 'Please add at least one line item'):
            create_sales_order(self.user, {'customer': self.customer}, [order_line('5', '0'), order_line('0', '10')])

    def test_exempt_customer_untaxed(self):
        self.customer.is_tax_exempt = True
        self.customer.save()
        so = create_sales_order(self.user, {'customer': self.customer}, [order_line()])
        self.assertEqual(so.tax_total, Decimal('0.00'))
        self.assertEqual(so.total_amount, Decimal('1000.00'))

    def test_waybill_marks_order_shipped(self):
        so = create_sales_order(self.user, {'customer': self.customer}, [
            order_line('1', '100', uom='tonnes', cubic_feet=Decimal('27')),
        ])
        waybill = create_waybill(self.user, so, {'dispatch_date': date(2026, 3, 1), 'carrier': self.carrier})
        self.assertTrue(waybill.waybill_number.startswith('WB-ACM-'))
        self.assertEqual(waybill.total_net_weight_kg, Decimal('1000.00'))
        self.assertEqual(waybill.total_net_weight_lbs, Decimal('2204.62'))
        self.assertEqual(waybill.total_volume_cubic_yards, Decimal('1.0000'))
        self.assertEqual(waybill.total_packages, 1)
        self.assertEqual(waybill.carrier_name, 'Northern Freight')
        self.assertEqual(waybill.authorized_by, 'Dana Cole')
        self.assertIn('25 Harbour St', waybill.customer_address)
        self.assertEqual(waybill.items.count(), 1)

        so.refresh_from_db()
        self.assertEqual(so.status, 'shipped')
        self.assertEqual(so.waybill_number, waybill.waybill_number)

        with self.assertRaisesMessage(SalesOrderError, 'already exists for this sales order'):
            create_waybill(self.user, so, {'dispatch_date': date(2026, 3, 2), 'carrier': self.carrier})

    def test_waybill_requirements(self):
        so = create_sales_order(self.user, {'customer': self.customer}, [order_line()])
        with self.assertRaisesMessage(SalesOrderError, 'Dispatch date is required'):
            create_waybill(self.user, so, {'carrier': self.carrier})
        with self.assertRaisesMessage(SalesOrderError, 'Carrier is required'):
            create_waybill(self.user, so, {'dispatch_date': date(2026, 3, 1)})
        so.status = 'cancelled'
        so.save()
        with self.assertRaisesMessage(SalesOrderError, 'Cancelled sales orders cannot be shipped'):
            create_waybill(self.user, so, {'dispatch_date': date(2026, 3, 1), 'carrier': self.carrier})
        self.assertFalse(Waybill.objects.exists())


class SalesAPITests(TestCase):
    """Sales order, carrier, waybill and function endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user(tenant_id='ACME')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.customer = TestDataFactory.create_customer(tenant_id='ACME')

    def test_create_sales_order(self):
        response = self.client.post('/api/sales-orders/', {
            'customer': self.customer.id,
            'po_number': 'CUST-77',
            'items': [{'sku_snapshot': 'PET-BALE', 'quantity_ordered': '10', 'unit_price': '100'}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['tenant_id'], 'ACME')
        self.assertEqual(response.data['po_number'], 'CUST-77')
        self.assertEqual(Decimal(response.data['tax_hst']), Decimal('130.00'))
        self.assertEqual(len(response.data['items']), 1)

    def test_create_without_lines(self):
        response = self.client.post('/api/sales-orders/', {'customer': self.customer.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('line item', response.data['error'])

    def test_other_tenant_customer_rejected(self):
        other = TestDataFactory.create_customer(tenant_id='OTHER')
        response = self.client.post('/api/sales-orders/', {
            'customer': other.id, 'items': [{'quantity_ordered': '1', 'unit_price': '1'}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('customer', response.data)

    def test_list_status_filter(self):
        SalesOrder.objects.create(tenant_id='ACME', so_number='SO-1', status='draft')
        SalesOrder.objects.create(tenant_id='ACME', so_number='SO-2', status='shipped')
        SalesOrder.objects.create(tenant_id='OTHER', so_number='SO-3', status='draft')
        response = self.client.get('/api/sales-orders/?status=draft')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['so_number'], 'SO-1')

    def test_calculate_tax_preview(self):
        response = self.client.post('/api/sales-orders/calculate-tax/', {
            'country': 'CA', 'province': 'QC', 'items': [{'quantity_ordered': '10', 'unit_price': '100'}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['totals']['total_tax'], 149.75)
        response = self.client.post('/api/sales-orders/calculate-tax/', {'province': 'QC'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_waybill_endpoint(self):
        carrier = TestDataFactory.create_carrier(tenant_id='ACME')
        created = self.client.post('/api/sales-orders/', {
            'customer': self.customer.id, 'items': [{'quantity_ordered': '500', 'unit_price': '2', 'uom': 'kg'}],
        }, format='json')
        pk = created.data['id']
        response = self.client.post(f'/api/sales-orders/{pk}/waybill/', {
            'dispatch_date': '2026-03-01', 'carrier': carrier.id,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Decimal(response.data['total_net_weight_kg']), Decimal('500.00'))
        response = self.client.post(f'/api/sales-orders/{pk}/waybill/', {
            'dispatch_date': '2026-03-01', 'carrier': carrier.id,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.delete(f'/api/sales-orders/{pk}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.get('/api/waybills/')
        self.assertEqual(len(response.data), 1)

    def test_carrier_crud(self):
        response = self.client.post('/api/carriers/', {
            'company_name': ' Polar Haul ', 'carrier_code': 'ph',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['company_name'], 'Polar Haul')
        self.assertEqual(response.data['carrier_code'], 'PH')
        response = self.client.post('/api/carriers/', {'company_name': '  '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_calculate_us_tax_function(self):
        response = self.client.post('/api/functions/calculateUSTax/', {'subtotal': '100'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'subtotal': 100.0, 'tax': 8.0, 'total': 108.0})
        response = self.client.post('/api/functions/calculateUSTax/', {'subtotal': '100', 'rate': '2'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
