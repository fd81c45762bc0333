"""
Inventory rules: sorting status, identifiers, descriptions and quantity changes
"""
import logging
import time
from collections.abc import Mapping
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from recims.core.tenancy import resolve_write_tenant
from recims.core.utils import create_audit_log
from .models import Inventory
from .units import normalize_weight, kg_to_lbs, lbs_to_kg, round_weight, to_decimal

logger = logging.getLogger(__name__)

METRIC_ENTRY_UNITS = ('kg', 'tonnes')
CLASSIFICATION_FIELDS = ('category', 'sub_category', 'product_type', 'format', 'purity', 'quality_grade')


def _value(item, key):
    if isinstance(item, Mapping):
        return item.get(key)
    return getattr(item, key, None)


def _now_ms():
    return int(time.time() * 1000)


def needs_sorting(item):
    """Material that is not fully identified goes to the sorting queue"""
    if not _value(item, 'sub_category') or not _value(item, 'product_type'):
        return True
    purity = _value(item, 'purity')
    if not purity or str(purity).upper() == 'UNKNOWN':
        return True
    fmt = _value(item, 'format')
    return not fmt or str(fmt).strip().lower() == 'unknown'


def build_inventory_id(needs_sorting, skid_number=None, now_ms=None):
    ms = now_ms if now_ms is not None else _now_ms()
    if needs_sorting:
        return f"INV-{str(ms).zfill(9)}"
    if skid_number:
        return f"INV-{skid_number}-{ms}"
    return f"INV-{ms}"


def unique_inventory_id(tenant_id, candidate):
    """Suffix ``candidate`` until no row of the tenant uses it"""
    inventory_id = candidate
    suffix = 2
    while Inventory.objects.filter(tenant_id=tenant_id, inventory_id=inventory_id).exists():
        inventory_id = f"{candidate}-{suffix}"
        suffix += 1
    return inventory_id


def describe_material(category=None, sub_category=None, product_type=None, format=None, purity=None):
    """Return ``(item_name, item_description)`` for a material"""
    category = category or ''
    item_name = f"{category} - {product_type or sub_category or 'Material'}"
    path = ' > '.join(part for part in (category, sub_category, product_type) if part)
    item_description = f"{path} | Format: {format or 'N/A'} | Purity: {purity or 'UNKNOWN'}"
    return item_name, item_description


def entry_quantity(unit, kg, lbs):
    """On-hand quantity in the entry unit: kg for metric entries, lbs for imperial"""
    return kg if unit in METRIC_ENTRY_UNITS else lbs


def available_from(on_hand, reserved):
    return max(Decimal('0.00'), round_weight(to_decimal(on_hand, Decimal('0')) - to_decimal(reserved, Decimal('0'))))


@transaction.atomic
def create_inventory(user, data, request=None):
    """
    Create an inventory row from entry data.

    ``data`` holds the entered unit plus ``quantity_kg`` or ``quantity_lbs``;
    both weights are stored, and the on-hand quantity stays in the entry unit.
    """
    values = dict(data)
    unit = (values.get('unit_of_measure') or 'kg').lower()
    kg, lbs = normalize_weight(unit, values.get('quantity_kg'), values.get('quantity_lbs'))
    on_hand = entry_quantity(unit, kg, lbs)
    reserved = round_weight(to_decimal(values.get('reserved_quantity'), Decimal('0')))

    values.update({
        'unit_of_measure': unit,
        'quantity_kg': kg,
        'quantity_lbs': lbs,
        'quantity_on_hand': on_hand,
        'reserved_quantity': reserved,
        'available_quantity': available_from(on_hand, reserved),
        'purity': values.get('purity') or 'UNKNOWN',
    })
    unsorted = needs_sorting(values)
    values['sorting_status'] = 'needs_sorting' if unsorted else 'classified'

    if not values.get('item_name') or not values.get('item_description'):
        item_name, item_description = describe_material(
            values.get('category'), values.get('sub_category'), values.get('product_type'),
            values.get('format'), values.get('purity'),
        )
        values['item_name'] = values.get('item_name') or item_name
        values['item_description'] = values.get('item_description') or item_description

    tenant_id = resolve_write_tenant(user, values.get('tenant_id'))
    values['tenant_id'] = tenant_id
    values['inventory_id'] = unique_inventory_id(
        tenant_id, values.get('inventory_id') or build_inventory_id(unsorted, values.get('lot_number'))
    )
    values.setdefault('received_date', timezone.localdate())

    item = Inventory.objects.create(**values)
    create_audit_log(
        request=request, user=user, action='create', model_name='Inventory', object_id=item.id,
        object_name=item.item_name, object_reference=item.inventory_id, tenant_id=item.tenant_id,
    )
    return item


@transaction.atomic
def adjust_quantity(item, new_quantity, reason, user, request=None):
    """Set the on-hand quantity (entry unit) and keep kg/lbs/available in step"""
    item = Inventory.objects.select_for_update().get(pk=item.pk)
    new_quantity = round_weight(to_decimal(new_quantity))
    if new_quantity is None or new_quantity < 0:
        raise ValueError("Quantity must be a non-negative number")

    old_quantity = item.quantity_on_hand
    item.quantity_on_hand = new_quantity
    if item.unit_of_measure in METRIC_ENTRY_UNITS:
        item.quantity_kg = new_quantity
        item.quantity_lbs = kg_to_lbs(new_quantity)
    else:
        item.quantity_lbs = new_quantity
        item.quantity_kg = lbs_to_kg(new_quantity)
    item.available_quantity = available_from(new_quantity, item.reserved_quantity)
    item.save()

    create_audit_log(
        request=request, user=user, action='stock_adjust', model_name='Inventory', object_id=item.id,
        object_name=item.item_name, object_reference=item.inventory_id, tenant_id=item.tenant_id,
        changes={'old_quantity': str(old_quantity), 'new_quantity': str(new_quantity), 'reason': reason or ''},
    )
    logger.info(f"Inventory {item.inventory_id} adjusted from {old_quantity} to {new_quantity}")
    return item


@transaction.atomic
def classify_item(item, data, user, request=None):
    """Apply sorting results and move the row out of (or back into) the sorting queue"""
    changes = {}
    for field in CLASSIFICATION_FIELDS:
        if field in data and data[field] is not None:
            changes[field] = data[field]
            setattr(item, field, data[field])
    for field in ('bin_location', 'zone', 'notes'):
        if data.get(field) is not None:
            setattr(item, field, data[field])

    item.item_name, item.item_description = describe_material(
        item.category, item.sub_category, item.product_type, item.format, item.purity
    )
    if needs_sorting(item):
        item.sorting_status = 'needs_sorting'
    else:
        item.sorting_status = 'classified'
        item.processed_date = timezone.localdate()
    item.save()

    create_audit_log(
        request=request, user=user, action='update', model_name='Inventory', object_id=item.id,
        object_name=item.item_name, object_reference=item.inventory_id, tenant_id=item.tenant_id,
        changes=changes,
    )
    return item
