"""
Sales order creation and waybill generation
"""
import logging
import re
import time
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from recims.core.exceptions import RecimsError
from recims.core.models import Tenant, TenantContact
from recims.core.tenancy import resolve_write_tenant
from recims.core.utils import create_audit_log
from recims.inventory.units import (
    CUBIC_FEET_PER_YARD, CUBIC_METERS_PER_FOOT, line_weight, round_weight, to_decimal,
)
from .models import SalesOrder, SalesOrderItem, Waybill, WaybillItem
from .tax import calculate_canada_sales_tax, calculate_us_tax, jsonable, line_net, round2

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')
FOUR_PLACES = Decimal('0.0001')
PO_BOX_PATTERN = re.compile(r'\b(P\.?\s*O\.?\s*BOX|POST\s*OFFICE\s*BOX|POBOX)\b', re.IGNORECASE)
SHIP_FIELDS = ('ship_line1', 'ship_line2', 'ship_line3', 'ship_city', 'ship_region', 'ship_postal_code')


class SalesOrderError(RecimsError):
    pass


def is_po_box(*lines):
    return any(PO_BOX_PATTERN.search(line or '') for line in lines)


def _tenant_for(tenant_id, tenant=None):
    if tenant is None and tenant_id:
        tenant = Tenant.objects.filter(tenant_id=tenant_id).first()
    return tenant


def _ship_to(data, customer):
    """Ship-to fields from the request, falling back to the customer's shipping address"""
    ship = {field: data.get(field) or '' for field in SHIP_FIELDS}
    ship['ship_country'] = data.get('ship_country') or ''
    if customer is not None and not ship['ship_line1']:
        for field in SHIP_FIELDS:
            ship[field] = getattr(customer, field) or ''
        ship['ship_country'] = customer.ship_country_code or customer.country or ''
    return ship


def quote_order(lines, ship_country, ship_region, shipping_amount=0, customer_exempt=False):
    """
    Tax the order lines. Canadian ship-to uses the provincial tables; anything
    else uses the flat US rate on the line subtotal.
    """
    shipping_amount = to_decimal(shipping_amount, ZERO)
    if (ship_country or '').upper() == 'CA':
        return calculate_canada_sales_tax(ship_region, lines, shipping_amount, customer_exempt)

    subtotal = sum((line_net(line) for line in lines), ZERO)
    us = calculate_us_tax(subtotal, rate=0 if customer_exempt else Decimal('0.08'))
    return {
        'per_line': [],
        'shipping': None,
        'totals': {
            'tax_by_type': {'GST': ZERO, 'HST': ZERO, 'PST': ZERO, 'QST': ZERO},
            'total_tax': us['tax'],
            'subtotal': round2(subtotal + shipping_amount),
            'grand_total': round2(subtotal + shipping_amount + us['tax']),
        },
    }


@transaction.atomic
def create_sales_order(user, data, lines, tenant=None, request=None):
    """Create a draft sales order with its lines, taxed at the ship-to address"""
    tenant_id = resolve_write_tenant(user, data.get('tenant_id'))
    tenant = _tenant_for(tenant_id, tenant)

    customer = data.get('customer')
    if customer is None:
        raise SalesOrderError("Please select a customer")

    ship = _ship_to(data, customer)
    if not all(ship[f] for f in ('ship_line1', 'ship_city', 'ship_region', 'ship_postal_code', 'ship_country')):
        raise SalesOrderError(
            "Please enter complete shipping address: Street, City, State/Province, "
            "Zip/Postal Code, and Country are required."
        )
    if is_po_box(ship['ship_line1'], ship['ship_line2'], ship['ship_line3']):
        raise SalesOrderError("Cannot ship to PO Box address. Please enter a valid street address.")

    lines = [
        line for line in lines or []
        if to_decimal(line.get('quantity_ordered'), ZERO) > 0 and to_decimal(line.get('unit_price'), ZERO) > 0
    ]
    if not lines:
        raise SalesOrderError("Please add at least one line item with quantity and price")

    shipping_amount = round2(data.get('shipping_amount'))
    breakdown = quote_order(
        lines, ship['ship_country'], ship['ship_region'], shipping_amount, customer.is_tax_exempt
    )
    totals = breakdown['totals']
    subtotal = sum((line_net(line) for line in lines), ZERO)
    tenant_code = (tenant.tenant_code if tenant else '') or 'TN'

    so = SalesOrder.objects.create(
        tenant_id=tenant_id,
        so_number=f"SO-{tenant_code}-{int(time.time() * 1000)}",
        customer=customer,
        customer_name=data.get('customer_name') or customer.display_name,
        po_number=data.get('po_number') or 'TBD',
        ship_date=data.get('ship_date'),
        carrier_code=data.get('carrier_code') or '',
        terms=data.get('terms') or customer.sales_term_ref or '',
        ship_method=data.get('ship_method') or '',
        bill_line1=customer.bill_line1,
        bill_line2=customer.bill_line2,
        bill_city=customer.bill_city,
        bill_region=customer.bill_region,
        bill_postal_code=customer.bill_postal_code,
        bill_country=customer.bill_country_code or customer.country,
        ship_contact_person=data.get('ship_contact_person') or '',
        ship_phone=data.get('ship_phone') or '',
        ship_email=data.get('ship_email') or '',
        currency=(tenant.default_currency if tenant else '') or 'USD',
        subtotal=round2(subtotal),
        shipping_amount=shipping_amount,
        tax_total=totals['total_tax'],
        tax_gst=totals['tax_by_type']['GST'],
        tax_hst=totals['tax_by_type']['HST'],
        tax_pst=totals['tax_by_type']['PST'],
        tax_qst=totals['tax_by_type']['QST'],
        total_amount=round2(subtotal + shipping_amount + totals['total_tax']),
        tax_breakdown=jsonable(breakdown),
        total_cubic_feet=to_decimal(data.get('total_cubic_feet')),
        comments_internal=data.get('comments_internal') or '',
        created_by=getattr(user, 'email', '') or '',
        status='draft',
        **ship,
    )

    per_line = breakdown['per_line']
    for index, line in enumerate(lines):
        net = round2(line_net(line))
        # US orders carry their tax at order level only
        line_tax = per_line[index]['line_tax_total'] if per_line else ZERO
        SalesOrderItem.objects.create(
            sales_order=so,
            tenant_id=tenant_id,
            line_number=(index + 1) * 10,
            sku_snapshot=line.get('sku_snapshot') or '',
            description=line.get('description') or '',
            category=line.get('category') or '',
            product_type=line.get('product_type') or '',
            product_tax_category=line.get('product_tax_category') or 'tangible_goods',
            hts_code=line.get('hts_code') or '',
            quantity_ordered=to_decimal(line.get('quantity_ordered'), ZERO),
            uom=line.get('uom') or 'kg',
            unit_price=to_decimal(line.get('unit_price'), ZERO),
            discount_amount=round2(line.get('discount_amount')),
            line_subtotal=net,
            line_tax_amount=line_tax,
            line_total=round2(net + line_tax),
            cubic_feet=to_decimal(line.get('cubic_feet')),
        )

    create_audit_log(
        request=request, user=user, action='create', model_name='SalesOrder', object_id=so.id,
        object_name=so.so_number, object_reference=so.customer_name, tenant_id=so.tenant_id,
        changes={'lines': len(lines), 'total_amount': str(so.total_amount)},
    )
    logger.info(f"Created sales order {so.so_number} with {len(lines)} lines")
    return so


def shipping_address_block(customer, so):
    """Multi-line ship-to address from the customer, or the order when there is none"""
    source = customer if customer is not None and customer.ship_line1 else so
    country = (customer.ship_country_code if source is customer else so.ship_country) or ''
    city_line = f"{source.ship_city or ''}, {source.ship_region or ''} {source.ship_postal_code or ''}".strip()
    parts = [source.ship_line1, source.ship_line2, source.ship_line3, city_line, country]
    return '\n'.join(part for part in parts if part)


def _signatory(tenant_id, user):
    contacts = TenantContact.objects.filter(tenant_id=tenant_id, is_active=True).order_by('id')
    contact = contacts.filter(contact_type='primary').first() or contacts.first()
    if contact is None:
        return getattr(user, 'full_name', '') or '', 'Authorized Officer', ''
    return contact.contact_name, contact.job_title or 'Authorized Officer', contact.signature_url or ''


@transaction.atomic
def create_waybill(user, so, data, request=None):
    """
    Generate the waybill for a sales order and mark the order shipped.

    Weights are summed per line unit of measure; volume comes from the
    lines' cubic feet.
    """
    so = SalesOrder.objects.select_for_update().get(pk=so.pk)
    if not data.get('dispatch_date'):
        raise SalesOrderError("Dispatch date is required")
    carrier = data.get('carrier')
    if carrier is None:
        raise SalesOrderError("Carrier is required")
    if so.status == 'cancelled':
        raise SalesOrderError("Cancelled sales orders cannot be shipped")
    if so.waybill_number:
        raise SalesOrderError(f"Waybill {so.waybill_number} already exists for this sales order")

    items = list(so.items.all())
    tenant = _tenant_for(so.tenant_id)
    origin_country = data.get('origin_country') or (tenant.country_code if tenant else '') or 'US'

    prepared = []
    total_kg = total_lbs = total_feet = Decimal('0')
    for index, item in enumerate(items):
        kg, lbs = line_weight(item.quantity_ordered, item.uom)
        feet = item.cubic_feet or Decimal('0')
        total_kg += kg
        total_lbs += lbs
        total_feet += feet
        prepared.append((index, item, kg, lbs, feet))

    customer = so.customer
    tenant_code = tenant.tenant_code if tenant else ''
    waybill_number = f"WB-{tenant_code or 'T'}-{int(time.time() * 1000)}"
    authorized_by, authorized_title, signature_url = _signatory(so.tenant_id, user)
    now = timezone.now()

    waybill = Waybill.objects.create(
        tenant_id=so.tenant_id,
        waybill_number=waybill_number,
        sales_order=so,
        so_number=so.so_number,
        customer=customer,
        customer_name=so.customer_name,
        customer_address=shipping_address_block(customer, so),
        customer_country=(customer.ship_country_code or customer.country if customer else so.ship_country) or 'US',
        dispatch_date=data['dispatch_date'],
        carrier=carrier,
        carrier_name=carrier.company_name,
        vehicle_number=data.get('vehicle_number') or '',
        driver_name=data.get('driver_name') or '',
        incoterms=data.get('incoterms') or 'FOB',
        total_gross_weight_kg=round_weight(total_kg),
        total_gross_weight_lbs=round_weight(total_lbs),
        total_net_weight_kg=round_weight(total_kg),
        total_net_weight_lbs=round_weight(total_lbs),
        total_volume_cubic_feet=total_feet.quantize(FOUR_PLACES),
        total_volume_cubic_yards=(total_feet / CUBIC_FEET_PER_YARD).quantize(FOUR_PLACES),
        total_volume_cubic_meters=(total_feet * CUBIC_METERS_PER_FOOT).quantize(FOUR_PLACES),
        total_packages=len(items),
        origin_country=origin_country,
        special_instructions=data.get('special_instructions') or '',
        tracking_number=data.get('tracking_number') or '',
        bol_number=data.get('bol_number') or waybill_number,
        authorized_by=authorized_by,
        authorized_title=authorized_title,
        signature_url=signature_url,
        signature_date=now,
        status='draft',
        created_by=getattr(user, 'email', '') or '',
    )

    WaybillItem.objects.bulk_create([
        WaybillItem(
            waybill=waybill,
            tenant_id=so.tenant_id,
            line_number=item.line_number or (index + 1) * 10,
            sales_order_item=item,
            sku_number=item.sku_snapshot,
            item_description=item.description,
            hts_code=item.hts_code,
            category=item.category,
            quantity=item.quantity_ordered,
            unit_of_measure=item.uom,
            weight_kg=round_weight(kg),
            weight_lbs=round_weight(lbs),
            volume_cubic_feet=feet.quantize(FOUR_PLACES),
            volume_cubic_yards=(feet / CUBIC_FEET_PER_YARD).quantize(FOUR_PLACES),
            volume_cubic_meters=(feet * CUBIC_METERS_PER_FOOT).quantize(FOUR_PLACES),
            unit_price=item.unit_price,
            line_total=item.line_subtotal,
            origin_country=origin_country,
        )
        for index, item, kg, lbs, feet in prepared
    ])

    so.waybill_number = waybill_number
    so.waybill_created_at = now
    so.status = 'shipped'
    so.save(update_fields=['waybill_number', 'waybill_created_at', 'status', 'updated_date'])

    create_audit_log(
        request=request, user=user, action='create', model_name='Waybill', object_id=waybill.id,
        object_name=waybill_number, object_reference=so.so_number, tenant_id=so.tenant_id,
        changes={'packages': len(items), 'weight_kg': str(waybill.total_net_weight_kg)},
    )
    logger.info(f"Created waybill {waybill_number} for {so.so_number}")
    return waybill
