"""
Test suite for the parties module
Tests: address/currency validation, customer and vendor endpoints, tenant isolation
"""
from django.test import TestCase
from rest_framework import status

from recims.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from recims.parties.models import Customer, Vendor
from recims.parties.validators import validate_party, format_address


class PartyValidationTests(TestCase):
    """validate_party rules"""

    def base_customer(self, **overrides):
        values = {
            'display_name': 'Blue Box Ltd',
            'country': 'CA',
            'currency': 'CAD',
            'bill_country_code': 'CA',
            'bill_region': 'ON',
            'bill_postal_code': 'M5V 3L9',
        }
        values.update(overrides)
        return values

    def test_valid_canadian_customer(self):
        self.assertEqual(validate_party(self.base_customer()), {})

    def test_display_name_required(self):
        errors = validate_party(self.base_customer(display_name='  '))
        self.assertEqual(errors['display_name'], 'Display name is required')

    def test_currency_must_match_country(self):
        errors = validate_party(self.base_customer(currency='USD'))
        self.assertEqual(errors['currency'], 'Currency must be CAD for Canadian customers.')

    def test_billing_country_must_match(self):
        errors = validate_party(self.base_customer(bill_country_code='US', bill_region='', bill_postal_code=''))
        self.assertEqual(errors['bill_country_code'], 'Billing country must equal customer country.')

    def test_invalid_postal_code(self):
        errors = validate_party(self.base_customer(bill_postal_code='12345'))
        self.assertIn('bill_postal_code', errors)

    def test_us_address(self):
        values = {
            'display_name': 'Acme Metals',
            'country': 'US',
            'currency': 'USD',
            'bill_country_code': 'US',
            'bill_region': 'NY',
            'bill_postal_code': '10001-1234',
        }
        self.assertEqual(validate_party(values), {})
        values['bill_region'] = 'ZZ'
        values['bill_postal_code'] = '1000'
        errors = validate_party(values)
        self.assertEqual(errors['bill_region'], 'Use a valid 2-letter US state code.')
        self.assertEqual(errors['bill_postal_code'], 'ZIP must be ##### or #####-####.')

    def test_vendor_billing_country_optional(self):
        """Vendors only check billing country when one is given"""
        values = {'display_name': 'Scrap Co', 'country': 'US', 'currency': 'USD'}
        self.assertEqual(validate_party(values, 'vendor'), {})

    def test_vendor_remit_country(self):
        values = {'display_name': 'Scrap Co', 'country': 'US', 'currency': 'USD', 'remit_country_code': 'CA'}
        errors = validate_party(values, 'vendor')
        self.assertEqual(errors['remit_country_code'], 'Remittance country must equal vendor country or be empty.')

    def test_format_address(self):
        vendor = Vendor(bill_line1='1 Main St', bill_city='Ottawa', bill_region='ON',
                        bill_postal_code='K1A 0B1', bill_country_code='CA')
        self.assertEqual(format_address(vendor), '1 Main St, Ottawa, ON K1A 0B1, CA')


class CustomerAPITests(TestCase):
    """Customer endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user(tenant_id='ACME')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_customer(self):
        response = self.client.post('/api/customers/', {
            'display_name': 'Blue Box Ltd',
            'country': 'CA',
            'currency': 'CAD',
            'bill_region': 'on',
            'bill_postal_code': 'M5V 3L9',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['tenant_id'], 'ACME')
        self.assertEqual(response.data['bill_country_code'], 'CA')
        self.assertEqual(response.data['bill_region'], 'ON')

    def test_create_customer_currency_mismatch(self):
        response = self.client.post('/api/customers/', {
            'display_name': 'Blue Box Ltd',
            'country': 'US',
            'currency': 'CAD',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('currency', response.data)

    def test_partial_update_validates_stored_record(self):
        customer = TestDataFactory.create_customer(tenant_id='ACME', bill_country_code='CA')
        response = self.client.patch(f'/api/customers/{customer.id}/', {'currency': 'USD'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_search_filter(self):
        TestDataFactory.create_customer(display_name='Harbour Plastics', tenant_id='ACME')
        TestDataFactory.create_customer(display_name='Metro Paper', tenant_id='ACME')
        response = self.client.get('/api/customers/?search=harbour')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['display_name'], 'Harbour Plastics')

    def test_other_tenant_hidden(self):
        other = TestDataFactory.create_customer(tenant_id='OTHER')
        response = self.client.get(f'/api/customers/{other.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_shared_customer_read_only(self):
        shared = TestDataFactory.create_customer(tenant_id=None)
        response = self.client.get(f'/api/customers/{shared.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        response = self.client.delete(f'/api/customers/{shared.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(Customer.objects.filter(id=shared.id).exists())


class VendorAPITests(TestCase):
    """Vendor endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user(tenant_id='ACME')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_vendor(self):
        response = self.client.post('/api/vendors/', {
            'display_name': 'Scrap Co',
            'country': 'US',
            'currency': 'USD',
            'bill_region': 'NY',
            'bill_postal_code': '10001',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['tenant_id'], 'ACME')

    def test_delete_vendor(self):
        vendor = TestDataFactory.create_vendor(tenant_id='ACME')
        response = self.client.delete(f'/api/vendors/{vendor.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Vendor.objects.filter(id=vendor.id).exists())

    def test_active_filter(self):
        TestDataFactory.create_vendor(tenant_id='ACME', active=False)
        TestDataFactory.create_vendor(tenant_id='ACME')
        response = self.client.get('/api/vendors/?active=false')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
