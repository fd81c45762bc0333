"""
Report aggregations

Each function takes the scope tenant first so results are cached per tenant
(``cached_query``) and dropped by the signals in ``recims.reports.signals``.
``all_tenants`` is set for super admins, who see every tenant's rows.
"""
from datetime import datetime
from decimal import Decimal

from django.db.models import Sum, Count, Avg, Q, DecimalField
from django.db.models.functions import Coalesce, TruncDate, TruncWeek, TruncMonth

from recims.compliance.models import ComplianceCertificate
from recims.core.cache_utils import cached_query
from recims.inventory.models import Inventory
from recims.purchasing.models import PurchaseOrder
from recims.sales.models import SalesOrder
from recims.shipments.models import InboundShipment, QCInspection

BUCKETS = {
    'day': TruncDate,
    'week': TruncWeek,
    'month': TruncMonth,
}

ZERO = Decimal('0.00')


def _scoped(queryset, tenant_id, all_tenants):
    if all_tenants:
        return queryset
    condition = Q(tenant_id__isnull=True)
    if tenant_id:
        condition |= Q(tenant_id=tenant_id)
    return queryset.filter(condition)


def _sum(queryset, field):
    return queryset.aggregate(total=Sum(field, output_field=DecimalField()))['total'] or ZERO


def _label(value):
    if value is None:
        return None
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def _counts_by(queryset, field):
    return {row[field]: row['count'] for row in queryset.values(field).annotate(count=Count('id')).order_by(field)}


@cached_query(key_prefix="reports_dashboard")
def dashboard_data(tenant_id, all_tenants, date_from, date_to):
    shipments = _scoped(InboundShipment.objects.all(), tenant_id, all_tenants).filter(
        created_date__date__gte=date_from, created_date__date__lte=date_to
    )
    purchase_orders = _scoped(PurchaseOrder.objects.all(), tenant_id, all_tenants)
    inventory = _scoped(Inventory.objects.all(), tenant_id, all_tenants)
    inspections = _scoped(QCInspection.objects.all(), tenant_id, all_tenants)
    certificates = _scoped(ComplianceCertificate.objects.all(), tenant_id, all_tenants).filter(
        status='issued', issued_at__date__gte=date_from, issued_at__date__lte=date_to
    )

    inventory_by_sorting = {
        row['sorting_status']: float(row['total'] or ZERO)
        for row in inventory.values('sorting_status').annotate(
            total=Sum('quantity_kg', output_field=DecimalField())
        ).order_by('sorting_status')
    }

    return {
        'period': {'from': date_from.isoformat(), 'to': date_to.isoformat()},
        'shipments_by_status': _counts_by(shipments, 'status'),
        'total_shipments': shipments.count(),
        'inbound_weight_kg': float(_sum(shipments, 'net_weight_kg')),
        'purchase_orders_by_status': _counts_by(purchase_orders, 'status'),
        'inventory_kg_by_sorting_status': inventory_by_sorting,
        'open_qc_inspections': inspections.filter(disposition='pending').count(),
        'certificates_issued': certificates.count(),
        'certified_weight_kg': float(_sum(certificates, 'weight_kg')),
    }


@cached_query(key_prefix="reports_inbound")
def inbound_data(tenant_id, all_tenants, date_from, date_to, bucket='day'):
    shipments = _scoped(InboundShipment.objects.all(), tenant_id, all_tenants).annotate(
        received_at=Coalesce('arrival_time', 'created_date')
    ).filter(received_at__date__gte=date_from, received_at__date__lte=date_to)

    rows = shipments.annotate(
        bucket=BUCKETS[bucket]('received_at')
    ).values('bucket').annotate(
        net_weight_kg=Sum('net_weight_kg', output_field=DecimalField()),
        net_weight_lbs=Sum('net_weight_lbs', output_field=DecimalField()),
        loads=Count('id'),
    ).order_by('bucket')

    breakdown = [
        {
            'bucket': _label(row['bucket']),
            'net_weight_kg': float(row['net_weight_kg'] or ZERO),
            'net_weight_lbs': float(row['net_weight_lbs'] or ZERO),
            'loads': row['loads'],
        }
        for row in rows
    ]
    return {
        'period': {'from': date_from.isoformat(), 'to': date_to.isoformat()},
        'bucket': bucket,
        'summary': {
            'total_loads': shipments.count(),
            'total_net_weight_kg': float(_sum(shipments, 'net_weight_kg')),
            'total_net_weight_lbs': float(_sum(shipments, 'net_weight_lbs')),
        },
        'breakdown': breakdown,
    }


@cached_query(key_prefix="reports_inventory")
def inventory_data(tenant_id, all_tenants):
    inventory = _scoped(Inventory.objects.all(), tenant_id, all_tenants)

    def grouped(field):
        return [
            {
                field: row[field],
                'quantity_kg': float(row['kg'] or ZERO),
                'quantity_lbs': float(row['lbs'] or ZERO),
                'items': row['items'],
            }
            for row in inventory.values(field).annotate(
                kg=Sum('quantity_kg', output_field=DecimalField()),
                lbs=Sum('quantity_lbs', output_field=DecimalField()),
                items=Count('id'),
            ).order_by(field)
        ]

    return {
        'summary': {
            'total_items': inventory.count(),
            'total_kg': float(_sum(inventory, 'quantity_kg')),
            'total_lbs': float(_sum(inventory, 'quantity_lbs')),
        },
        'by_category': grouped('category'),
        'by_status': grouped('status'),
    }


@cached_query(key_prefix="reports_compliance")
def compliance_data(tenant_id, all_tenants, date_from, date_to):
    certificates = _scoped(ComplianceCertificate.objects.all(), tenant_id, all_tenants).filter(
        status='issued', issued_at__date__gte=date_from, issued_at__date__lte=date_to
    )
    monthly = certificates.annotate(
        month=TruncMonth('issued_at')
    ).values('month').annotate(
        weight_kg=Sum('weight_kg', output_field=DecimalField()),
        weight_lbs=Sum('weight_lbs', output_field=DecimalField()),
        certificates=Count('id'),
    ).order_by('month')
    average = certificates.aggregate(avg=Avg('diversion_rate'))['avg']

    return {
        'period': {'from': date_from.isoformat(), 'to': date_to.isoformat()},
        'summary': {
            'certificates_issued': certificates.count(),
            'certified_weight_kg': float(_sum(certificates, 'weight_kg')),
            'certified_weight_lbs': float(_sum(certificates, 'weight_lbs')),
            'average_diversion_rate': round(float(average), 2) if average is not None else None,
        },
        'monthly': [
            {
                'month': _label(row['month']),
                'weight_kg': float(row['weight_kg'] or ZERO),
                'weight_lbs': float(row['weight_lbs'] or ZERO),
                'certificates': row['certificates'],
            }
            for row in monthly
        ],
    }


@cached_query(key_prefix="reports_sales")
def sales_data(tenant_id, all_tenants, date_from, date_to, bucket='month'):
    orders = _scoped(SalesOrder.objects.all(), tenant_id, all_tenants).filter(
        created_date__date__gte=date_from, created_date__date__lte=date_to
    )
    active = orders.exclude(status='cancelled')

    rows = active.annotate(
        bucket=BUCKETS[bucket]('created_date')
    ).values('bucket').annotate(
        subtotal=Sum('subtotal', output_field=DecimalField()),
        tax_total=Sum('tax_total', output_field=DecimalField()),
        total=Sum('total_amount', output_field=DecimalField()),
        orders=Count('id'),
    ).order_by('bucket')

    by_status = [
        {
            'status': row['status'],
            'orders': row['orders'],
            'total': float(row['total'] or ZERO),
        }
        for row in orders.values('status').annotate(
            orders=Count('id'),
            total=Sum('total_amount', output_field=DecimalField()),
        ).order_by('status')
    ]

    return {
        'period': {'from': date_from.isoformat(), 'to': date_to.isoformat()},
        'bucket': bucket,
        'summary': {
            'total_orders': active.count(),
            'subtotal': float(_sum(active, 'subtotal')),
            'tax_total': float(_sum(active, 'tax_total')),
            'total_amount': float(_sum(active, 'total_amount')),
        },
        'breakdown': [
            {
                'bucket': _label(row['bucket']),
                'subtotal': float(row['subtotal'] or ZERO),
                'tax_total': float(row['tax_total'] or ZERO),
                'total': float(row['total'] or ZERO),
                'orders': row['orders'],
            }
            for row in rows
        ],
        'by_status': by_status,
    }
