import logging
import time

from django.db import transaction
from django.utils import timezone

from recims.core.exceptions import RecimsError
from recims.core.tenancy import scope_queryset, resolve_write_tenant
from recims.core.utils import create_audit_log
from .models import InboundShipment, QCCriteria, QCInspection
from .qc import evaluate_inspection

logger = logging.getLogger(__name__)

STATUS_TRANSITIONS = {
    'arrived': ('pending_inspection', 'inspecting', 'rejected'),
    'pending_inspection': ('inspecting', 'approved', 'rejected'),
    'inspecting': ('pending_inspection', 'approved', 'rejected'),
    'approved': ('completed',),
    'rejected': ('pending_inspection',),
    'completed': (),
}

DISPOSITION_SHIPMENT_STATUS = {
    'approve': 'approved',
    'reject': 'rejected',
}


class ShipmentError(RecimsError):
    pass


def _now_ms():
    return int(time.time() * 1000)


def _actor_name(user):
    return getattr(user, 'full_name', '') or getattr(user, 'email', '') or ''


def create_shipment(user, data, request=None):
    values = dict(data)
    values['tenant_id'] = resolve_write_tenant(user, values.get('tenant_id'))
    values['load_id'] = values.get('load_id') or f"LOAD-{_now_ms()}"
    values['arrival_time'] = values.get('arrival_time') or timezone.now()
    values['status'] = 'pending_inspection'
    values['operator_name'] = values.get('operator_name') or _actor_name(user)
    shipment = InboundShipment.objects.create(**values)
    create_audit_log(
        request=request, user=user, action='create', model_name='InboundShipment', object_id=shipment.id,
        object_name=shipment.load_id, object_reference=shipment.supplier_name, tenant_id=shipment.tenant_id,
    )
    return shipment


def check_transition(shipment, new_status):
    if new_status != shipment.status and new_status not in STATUS_TRANSITIONS.get(shipment.status, ()):
        raise ShipmentError(f"Cannot change status from {shipment.status} to {new_status}")


def change_status(shipment, new_status, user, request=None):
    if new_status not in dict(InboundShipment.STATUS_CHOICES):
        raise ShipmentError(f"Unknown status: {new_status}")
    check_transition(shipment, new_status)
    old_status = shipment.status
    shipment.status = new_status
    shipment.save(update_fields=['status', 'updated_date'])
    create_audit_log(
        request=request, user=user, action='update', model_name='InboundShipment', object_id=shipment.id,
        object_name=shipment.load_id, tenant_id=shipment.tenant_id,
        changes={'status': {'from': old_status, 'to': new_status}},
    )
    return shipment


def reopen_shipment(shipment, user, request=None):
    if shipment.status != 'rejected':
        raise ShipmentError("Only rejected shipments can be reopened")
    return change_status(shipment, 'pending_inspection', user, request=request)


def matching_criteria(shipment, user):
    """The first active criteria visible to the user for the shipment's category"""
    if not shipment.product_category:
        return None
    queryset = scope_queryset(QCCriteria.objects.filter(status='active'), user)
    return queryset.filter(material_category__iexact=shipment.product_category).order_by('-created_date', '-id').first()


@transaction.atomic
def record_inspection(user, shipment, data, request=None):
    """Evaluate the measurements, store the inspection and move the shipment to inspecting"""
    shipment = InboundShipment.objects.select_for_update().get(pk=shipment.pk)
    check_transition(shipment, 'inspecting')
    values = dict(data)
    values.pop('shipment', None)
    values.setdefault('visual_inspection_pass', True)
    criteria = matching_criteria(shipment, user)
    result, passed, failed = evaluate_inspection(values, criteria)

    inspection = QCInspection.objects.create(
        **values,
        tenant_id=shipment.tenant_id or resolve_write_tenant(user),
        inspection_id=f"QC-{_now_ms()}",
        shipment=shipment,
        load_id=shipment.load_id,
        criteria=criteria,
        inspector_name=_actor_name(user),
        inspector_email=getattr(user, 'email', '') or '',
        inspection_date=timezone.now(),
        material_category=shipment.product_category,
        material_type=shipment.product_type,
        sku_number=shipment.sku_number,
        overall_result=result,
        pass_criteria_met=passed,
        fail_criteria=failed,
    )

    if shipment.status != 'inspecting':
        change_status(shipment, 'inspecting', user, request=request)

    create_audit_log(
        request=request, user=user, action='qc_inspect', model_name='QCInspection', object_id=inspection.id,
        object_name=inspection.inspection_id, object_reference=shipment.load_id, tenant_id=inspection.tenant_id,
        changes={'overall_result': result, 'fail_criteria': failed},
    )
    logger.info(f"QC inspection {inspection.inspection_id} on {shipment.load_id}: {result}")
    return inspection


@transaction.atomic
def set_disposition(user, inspection, disposition, notes='', downgrade_to_grade=None, request=None):
    if disposition not in dict(QCInspection.DISPOSITION_CHOICES):
        raise ShipmentError(f"Unknown disposition: {disposition}")

    shipment_status = DISPOSITION_SHIPMENT_STATUS.get(disposition)
    shipment = InboundShipment.objects.select_for_update().get(pk=inspection.shipment_id)
    if shipment_status:
        check_transition(shipment, shipment_status)

    inspection.disposition = disposition
    inspection.disposition_notes = notes or ''
    if downgrade_to_grade is not None:
        inspection.downgrade_to_grade = downgrade_to_grade
    inspection.approved_by = _actor_name(user)
    inspection.approved_date = timezone.now()
    inspection.save()

    if shipment_status and shipment.status != shipment_status:
        change_status(shipment, shipment_status, user, request=request)

    create_audit_log(
        request=request, user=user, action='qc_disposition', model_name='QCInspection', object_id=inspection.id,
        object_name=inspection.inspection_id, object_reference=inspection.load_id, tenant_id=inspection.tenant_id,
        changes={'disposition': disposition, 'notes': notes or ''},
    )
    return inspection
