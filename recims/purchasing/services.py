"""
Purchase order creation and receiving

Receiving locks the PO and the line, writes the inventory row and
recomputes the PO totals from the stored lines in one transaction.
"""
import logging
import time
from decimal import Decimal

from django.db import transaction
from django.db.models import Sum, Max
from django.utils import timezone

from recims.core.exceptions import RecimsError
from recims.core.models import Tenant
from recims.core.tenancy import resolve_write_tenant
from recims.core.utils import create_audit_log
from recims.inventory.models import Inventory
from recims.inventory.services import needs_sorting, build_inventory_id, unique_inventory_id, describe_material
from recims.inventory.units import kg_to_lbs, lbs_to_kg, round_weight, to_decimal
from recims.parties.validators import format_address
from .models import PurchaseOrder, PurchaseOrderItem

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')


class PurchaseOrderError(RecimsError):
    pass


class ReceivingError(PurchaseOrderError):
    pass


def skid_code(po_number, skid_index):
    return f"{po_number}-SKD-{int(skid_index):03d}"


def line_barcode(skid, line_number):
    return f"{skid}-L{line_number}"


def actor_name(user):
    return getattr(user, 'full_name', '') or getattr(user, 'email', '') or ''


def renumber_skids(items):
    """
    Skids become 1..n in first-seen order and lines 1..len, so gaps left by
    removed lines never reach the stored PO.
    """
    mapping = {}
    renumbered = []
    for index, item in enumerate(items):
        key = item.get('skid_number')
        if key not in mapping:
            mapping[key] = len(mapping) + 1
        line = dict(item)
        line['skid_number'] = mapping[key]
        line['line_number'] = index + 1
        renumbered.append(line)
    return renumbered


def _line_weights(item):
    """(kg, lbs) of an input line, deriving the side that was left empty"""
    kg = to_decimal(item.get('expected_weight_kg'))
    lbs = to_decimal(item.get('expected_weight_lbs'))
    if kg is None and lbs is not None:
        kg = lbs_to_kg(lbs)
    elif lbs is None and kg is not None:
        lbs = kg_to_lbs(kg)
    return round_weight(kg or ZERO), round_weight(lbs or ZERO)


def _validate_lines(items, metric):
    if not items:
        raise PurchaseOrderError("Purchase order must have at least one product.")
    weight_field = 'expected_weight_kg' if metric else 'expected_weight_lbs'
    for item in items:
        if not item.get('category') or not to_decimal(item.get(weight_field)):
            raise PurchaseOrderError(
                "All products must have a category and a weight specified for the selected unit system."
            )


@transaction.atomic
def create_purchase_order(user, data, items, tenant=None, request=None):
    """
    Create a draft PO with its lines.

    Lines are priced on the weight of the tenant's unit system (kg when metric).
    """
    tenant_id = resolve_write_tenant(user, data.get('tenant_id'))
    if tenant is None and tenant_id:
        tenant = Tenant.objects.filter(tenant_id=tenant_id).first()
    metric = tenant is None or tenant.unit_system != 'IMPERIAL'

    vendor = data.get('vendor')
    vendor_name = data.get('vendor_name') or (vendor.display_name if vendor else '')
    if not vendor_name:
        raise PurchaseOrderError("Please select a vendor")
    _validate_lines(items, metric)

    po_number = f"PO-{int(time.time() * 1000)}"
    lines = renumber_skids(items)
    prepared = []
    for line in lines:
        kg, lbs = _line_weights(line)
        price = to_decimal(line.get('unit_price'), ZERO)
        line_total = round_weight((kg if metric else lbs) * price)
        prepared.append((line, kg, lbs, price, line_total))

    po = PurchaseOrder.objects.create(
        tenant_id=tenant_id,
        po_number=po_number,
        barcode_prefix=po_number,
        vendor=vendor,
        vendor_name=vendor_name,
        contact_person=data.get('contact_person') or (vendor.contact_person if vendor else ''),
        shipping_address=data.get('shipping_address') or (format_address(vendor) if vendor else ''),
        payment_terms=data.get('payment_terms') or (vendor.terms_ref if vendor else '') or 'Net 30',
        order_date=data.get('order_date') or timezone.localdate(),
        expected_delivery_date=data.get('expected_delivery_date'),
        status='draft',
        total_expected_weight_kg=sum((p[1] for p in prepared), ZERO),
        total_expected_weight_lbs=sum((p[2] for p in prepared), ZERO),
        total_skids_expected=len({p[0]['skid_number'] for p in prepared}),
        total_amount=sum((p[4] for p in prepared), ZERO),
        currency=(tenant.default_currency if tenant else '') or 'USD',
        notes=data.get('notes') or '',
        created_by=actor_name(user),
    )

    for line, kg, lbs, price, line_total in prepared:
        skid = skid_code(po_number, line['skid_number'])
        PurchaseOrderItem.objects.create(
            purchase_order=po,
            tenant_id=tenant_id,
            line_number=line['line_number'],
            skid_number=skid,
            barcode=line_barcode(skid, line['line_number']),
            category=line.get('category') or '',
            sub_category=line.get('sub_category') or '',
            product_type=line.get('product_type') or '',
            format=line.get('format') or '',
            purity=line.get('purity') or 'UNKNOWN',
            expected_weight_kg=kg,
            expected_weight_lbs=lbs,
            unit_price=price,
            line_total=line_total,
            status='pending',
        )

    create_audit_log(
        request=request, user=user, action='po_create', model_name='PurchaseOrder', object_id=po.id,
        object_name=po.po_number, object_reference=po.vendor_name, tenant_id=po.tenant_id,
        changes={'items': len(prepared), 'total_amount': str(po.total_amount)},
    )
    logger.info(f"Created purchase order {po.po_number} with {len(prepared)} lines")
    return po


@transaction.atomic
def add_item(po, data, user, request=None):
    """Append a line to an existing PO, on a given skid code or a new skid"""
    po = PurchaseOrder.objects.select_for_update().get(pk=po.pk)
    line_number = (po.items.aggregate(last=Max('line_number'))['last'] or 0) + 1
    existing_skids = set(po.items.values_list('skid_number', flat=True))
    skid = data.get('skid_number')
    if skid not in existing_skids:
        skid = skid_code(po.po_number, len(existing_skids) + 1)

    tenant = Tenant.objects.filter(tenant_id=po.tenant_id).first() if po.tenant_id else None
    metric = tenant is None or tenant.unit_system != 'IMPERIAL'
    kg, lbs = _line_weights(data)
    price = to_decimal(data.get('unit_price'), ZERO)
    item = PurchaseOrderItem.objects.create(
        purchase_order=po,
        tenant_id=po.tenant_id,
        line_number=line_number,
        skid_number=skid,
        barcode=line_barcode(skid, line_number),
        category=data.get('category') or '',
        sub_category=data.get('sub_category') or '',
        product_type=data.get('product_type') or '',
        format=data.get('format') or '',
        purity=data.get('purity') or 'UNKNOWN',
        expected_weight_kg=kg,
        expected_weight_lbs=lbs,
        unit_price=price,
        line_total=round_weight((kg if metric else lbs) * price),
    )
    recompute_totals(po)
    create_audit_log(
        request=request, user=user, action='update', model_name='PurchaseOrder', object_id=po.id,
        object_name=po.po_number, object_reference=item.barcode, tenant_id=po.tenant_id,
        changes={'added_item': item.barcode},
    )
    return item


def recompute_totals(po):
    """Expected and received totals from the stored lines"""
    items = PurchaseOrderItem.objects.filter(purchase_order=po)
    expected = items.aggregate(
        kg=Sum('expected_weight_kg'), lbs=Sum('expected_weight_lbs'), amount=Sum('line_total')
    )
    received_items = items.filter(status='received')
    received = received_items.aggregate(kg=Sum('actual_weight_kg'), lbs=Sum('actual_weight_lbs'))

    po.total_expected_weight_kg = round_weight(expected['kg'] or ZERO)
    po.total_expected_weight_lbs = round_weight(expected['lbs'] or ZERO)
    po.total_amount = round_weight(expected['amount'] or ZERO)
    po.total_received_weight_kg = round_weight(received['kg'] or ZERO)
    po.total_received_weight_lbs = round_weight(received['lbs'] or ZERO)
    po.total_skids_expected = len(set(items.values_list('skid_number', flat=True)))
    po.total_skids_received = received_items.count()
    po.save()
    return po


def _actual_weights(item, data):
    # A blank or zero entry means "as expected"
    kg = to_decimal(data.get('actual_weight_kg'))
    lbs = to_decimal(data.get('actual_weight_lbs'))
    if not kg and not lbs:
        return item.expected_weight_kg, item.expected_weight_lbs
    if not kg:
        return lbs_to_kg(lbs), round_weight(lbs)
    if not lbs:
        return round_weight(kg), kg_to_lbs(kg)
    return round_weight(kg), round_weight(lbs)


@transaction.atomic
def receive_item(user, item, data, request=None):
    """
    Receive one PO line into inventory.

    Returns ``{all_received, inventory_id, needs_sorting}``.
    """
    po = PurchaseOrder.objects.select_for_update().get(pk=item.purchase_order_id)
    item = PurchaseOrderItem.objects.select_for_update().get(pk=item.pk)
    if item.status == 'received':
        raise ReceivingError("This item has already been received")

    today = timezone.localdate()
    kg, lbs = _actual_weights(item, data)
    item.actual_weight_kg = kg
    item.actual_weight_lbs = lbs
    item.status = 'received'
    item.quality_grade = data.get('quality_grade') or item.quality_grade or 'B'
    item.bin_location = data.get('bin_location') or item.bin_location
    item.zone = data.get('zone') or item.zone
    item.variance_notes = data.get('variance_notes') or item.variance_notes
    item.inspection_notes = data.get('inspection_notes') or item.inspection_notes
    item.received_date = today
    item.received_by = actor_name(user)
    item.save()

    unsorted = needs_sorting(item)
    item_name, item_description = describe_material(
        item.category, item.sub_category, item.product_type, item.format, item.purity
    )
    inventory = Inventory.objects.create(
        tenant_id=po.tenant_id,
        inventory_id=unique_inventory_id(po.tenant_id, build_inventory_id(unsorted, item.skid_number)),
        sku_number=data.get('sku_number') or '',
        vendor_name=po.vendor_name,
        item_name=item_name,
        item_description=item_description,
        category=item.category,
        sub_category=item.sub_category,
        product_type=item.product_type,
        format=item.format,
        purity=item.purity or 'UNKNOWN',
        quality_grade=item.quality_grade,
        unit_of_measure='kg',
        quantity_on_hand=kg,
        quantity_kg=kg,
        quantity_lbs=lbs,
        available_quantity=kg,
        bin_location=item.bin_location,
        zone=item.zone,
        sorting_status='needs_sorting' if unsorted else 'classified',
        status='available',
        received_date=today,
        processed_date=today,
        purchase_order_number=po.po_number,
        lot_number=item.skid_number,
        purchase_order_item=item,
    )

    recompute_totals(po)
    all_received = not po.items.exclude(status='received').exists()
    if all_received:
        po.status = 'received'
        po.actual_delivery_date = today
    else:
        po.status = 'partially_received'
    po.save(update_fields=['status', 'actual_delivery_date', 'updated_date'])

    create_audit_log(
        request=request, user=user, action='po_receive', model_name='PurchaseOrder', object_id=po.id,
        object_name=po.po_number, object_reference=item.barcode, tenant_id=po.tenant_id,
        changes={'actual_weight_kg': str(kg), 'actual_weight_lbs': str(lbs), 'inventory_id': inventory.inventory_id},
    )
    logger.info(f"Received {item.barcode} on {po.po_number} ({kg} kg)")
    return {
        'all_received': all_received,
        'inventory_id': inventory.inventory_id,
        'needs_sorting': unsorted,
    }
