"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from recims.core.models import Tenant, TenantContact
from recims.parties.models import Customer, Vendor
from recims.inventory.models import Inventory
from recims.purchasing.models import PurchaseOrder, PurchaseOrderItem
from recims.shipments.models import InboundShipment, QCCriteria
from recims.sales.models import Carrier
from decimal import Decimal
from django.utils import timezone
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(email=None, password='testpass123', tenant_id='TEST', role='user', **extra):
        """Create a test user"""
        if not email:
            email = f'testuser_{TestDataFactory.random_string(6).lower()}@test.com'
        return User.objects.create_user(
            email=email,
            password=password,
            tenant_id=tenant_id,
            role=role,
            **extra
        )

    @staticmethod
    def create_super_admin(email=None):
        return TestDataFactory.create_user(email=email, tenant_id=None, role='super_admin')

    @staticmethod
    def create_tenant(tenant_id='TEST', name=None, **extra):
        """Create a test tenant"""
        return Tenant.objects.create(
            tenant_id=tenant_id,
            name=name or f'Tenant {tenant_id}',
            tenant_code=extra.pop('tenant_code', tenant_id[:3]),
            **extra
        )

    @staticmethod
    def create_tenant_contact(tenant_id='TEST', contact_type='primary', **extra):
        return TenantContact.objects.create(
            tenant_id=tenant_id,
            contact_type=contact_type,
            contact_name=extra.pop('contact_name', 'Jordan Reyes'),
            contact_email=extra.pop('contact_email', 'jordan@test.com'),
            job_title=extra.pop('job_title', 'Operations Manager'),
            **extra
        )

    @staticmethod
    def create_vendor(display_name=None, tenant_id='TEST', **extra):
        """Create a test vendor"""
        if not display_name:
            display_name = f'Vendor_{TestDataFactory.random_string(6)}'
        return Vendor.objects.create(
            display_name=display_name,
            company_name=extra.pop('company_name', display_name),
            tenant_id=tenant_id,
            bill_line1=extra.pop('bill_line1', '100 Industrial Rd'),
            bill_city=extra.pop('bill_city', 'Toronto'),
            bill_region=extra.pop('bill_region', 'ON'),
            bill_postal_code=extra.pop('bill_postal_code', 'M5V 2T6'),
            bill_country_code=extra.pop('bill_country_code', 'CA'),
            **extra
        )

    @staticmethod
    def create_customer(display_name=None, tenant_id='TEST', **extra):
        """Create a test customer with a Canadian ship-to address"""
        if not display_name:
            display_name = f'Customer_{TestDataFactory.random_string(6)}'
        return Customer.objects.create(
            display_name=display_name,
            company_name=extra.pop('company_name', display_name),
            tenant_id=tenant_id,
            country=extra.pop('country', 'CA'),
            currency=extra.pop('currency', 'CAD'),
            ship_line1=extra.pop('ship_line1', '25 Harbour St'),
            ship_city=extra.pop('ship_city', 'Toronto'),
            ship_region=extra.pop('ship_region', 'ON'),
            ship_postal_code=extra.pop('ship_postal_code', 'M5J 2N8'),
            ship_country_code=extra.pop('ship_country_code', 'CA'),
            **extra
        )

    @staticmethod
    def create_inventory(tenant_id='TEST', inventory_id=None, quantity_kg=None, **extra):
        """Create a test inventory row"""
        if not inventory_id:
            inventory_id = f'INV-{TestDataFactory.random_string(8).upper()}'
        if quantity_kg is None:
            quantity_kg = Decimal('100.00')
        return Inventory.objects.create(
            tenant_id=tenant_id,
            inventory_id=inventory_id,
            item_name=extra.pop('item_name', 'Mixed PET'),
            category=extra.pop('category', 'PLASTIC'),
            quantity_on_hand=extra.pop('quantity_on_hand', quantity_kg),
            quantity_kg=quantity_kg,
            quantity_lbs=extra.pop('quantity_lbs', (quantity_kg * Decimal('2.20462')).quantize(Decimal('0.01'))),
            available_quantity=extra.pop('available_quantity', quantity_kg),
            **extra
        )

    @staticmethod
    def create_purchase_order(tenant_id='TEST', vendor=None, po_number=None, **extra):
        """Create a test purchase order"""
        if not vendor:
            vendor = TestDataFactory.create_vendor(tenant_id=tenant_id)
        if not po_number:
            po_number = f'PO-{TestDataFactory.random_string(8).upper()}'
        return PurchaseOrder.objects.create(
            tenant_id=tenant_id,
            po_number=po_number,
            vendor=vendor,
            vendor_name=vendor.display_name,
            order_date=extra.pop('order_date', timezone.now().date()),
            status=extra.pop('status', 'sent'),
            **extra
        )

    @staticmethod
    def create_purchase_order_item(purchase_order, line_number=1, expected_weight_kg=None, **extra):
        """Create a test PO line (skid)"""
        if expected_weight_kg is None:
            expected_weight_kg = Decimal('500.00')
        return PurchaseOrderItem.objects.create(
            purchase_order=purchase_order,
            tenant_id=purchase_order.tenant_id,
            line_number=line_number,
            skid_number=extra.pop('skid_number', f'{purchase_order.po_number}-{line_number:02d}'),
            barcode=extra.pop('barcode', f'{purchase_order.po_number}-{line_number:02d}'),
            category=extra.pop('category', 'PLASTIC'),
            product_type=extra.pop('product_type', 'PET'),
            expected_weight_kg=expected_weight_kg,
            expected_weight_lbs=(expected_weight_kg * Decimal('2.20462')).quantize(Decimal('0.01')),
            **extra
        )

    @staticmethod
    def create_received_item(purchase_order, line_number=1, actual_weight_kg=None, **extra):
        """Create a PO line that has already been received"""
        if actual_weight_kg is None:
            actual_weight_kg = Decimal('480.00')
        return TestDataFactory.create_purchase_order_item(
            purchase_order,
            line_number=line_number,
            status='received',
            actual_weight_kg=actual_weight_kg,
            actual_weight_lbs=(actual_weight_kg * Decimal('2.20462')).quantize(Decimal('0.01')),
            received_date=timezone.now().date(),
            **extra
        )

    @staticmethod
    def create_shipment(tenant_id='TEST', load_id=None, **extra):
        """Create a test inbound shipment"""
        if not load_id:
            load_id = f'LOAD-{TestDataFactory.random_string(6).upper()}'
        return InboundShipment.objects.create(
            tenant_id=tenant_id,
            load_id=load_id,
            supplier_name=extra.pop('supplier_name', 'Acme Scrap'),
            gross_weight_kg=extra.pop('gross_weight_kg', Decimal('1500.00')),
            tare_weight_kg=extra.pop('tare_weight_kg', Decimal('500.00')),
            arrival_time=extra.pop('arrival_time', timezone.now()),
            **extra
        )

    @staticmethod
    def create_qc_criteria(tenant_id='TEST', material_category='PLASTIC', **extra):
        return QCCriteria.objects.create(
            tenant_id=tenant_id,
            criteria_name=extra.pop('criteria_name', f'{material_category} standard'),
            material_category=material_category,
            **extra
        )

    @staticmethod
    def create_carrier(tenant_id='TEST', carrier_code=None, **extra):
        if not carrier_code:
            carrier_code = f'CR{TestDataFactory.random_string(4).upper()}'
        return Carrier.objects.create(
            tenant_id=tenant_id,
            carrier_code=carrier_code,
            company_name=extra.pop('company_name', 'Northern Freight'),
            **extra
        )


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
