"""
Certificate numbering, issuance and PO line certification
"""
import logging
from decimal import Decimal

from django.conf import settings
from django.core.mail import send_mail
from django.db import transaction
from django.utils import timezone

from recims.core.exceptions import RecimsError
from recims.core.models import TenantContact
from recims.core.tenancy import resolve_write_tenant
from recims.core.utils import create_audit_log
from recims.inventory.units import KG_PER_LB, round_weight, to_decimal
from recims.parties.validators import format_address
from recims.purchasing.models import PurchaseOrder, PurchaseOrderItem
from .models import ComplianceCertificate, CertificateSequence

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')
CERTIFIED_TOLERANCE = Decimal('0.01')
CERTIFYING_FIELDS = ('certifying_officer', 'certifying_title', 'certifying_email', 'certifying_phone')
CERTIFIABLE_PO_STATUSES = ('partially_received', 'received')


class CertificateError(RecimsError):
    pass


def certificate_prefix(year):
    return f"CERT-{year}-"


def max_certificate_suffix(tenant_id, year):
    """Highest numeric suffix already used by the tenant for ``year``"""
    prefix = certificate_prefix(year)
    numbers = ComplianceCertificate.objects.filter(
        tenant_id=tenant_id, certificate_number__startswith=prefix
    ).values_list('certificate_number', flat=True)
    highest = 0
    for number in numbers:
        suffix = number[len(prefix):]
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return highest


def format_certificate_number(year, sequence):
    return f"{certificate_prefix(year)}{sequence:04d}"


@transaction.atomic
def allocate_certificate_number(tenant_id, year=None):
    """
    Hand out the next ``CERT-<year>-<NNNN>`` for a tenant.

    The sequence row is locked for the rest of the transaction, so two
    concurrent issuers queue up instead of reading the same maximum.
    """
    year = year or timezone.localdate().year
    sequence, _ = CertificateSequence.objects.select_for_update().get_or_create(
        tenant_key=tenant_id or '', year=year
    )
    # Certificates imported or edited outside the allocator still count
    sequence.last_number = max(sequence.last_number, max_certificate_suffix(tenant_id, year)) + 1
    sequence.save(update_fields=['last_number'])
    return format_certificate_number(year, sequence.last_number)


def peek_certificate_number(tenant_id, year=None):
    """The number the next allocation would return, without reserving it"""
    year = year or timezone.localdate().year
    sequence = CertificateSequence.objects.filter(tenant_key=tenant_id or '', year=year).first()
    last = sequence.last_number if sequence else 0
    return format_certificate_number(year, max(last, max_certificate_suffix(tenant_id, year)) + 1)


def line_certificate_status(item):
    if item.certified_weight_lbs <= 0:
        return 'uncertified'
    if abs(item.certified_weight_lbs - (item.actual_weight_lbs or ZERO)) < CERTIFIED_TOLERANCE:
        return 'certified'
    return 'partially_certified'


def _distinct_joined(values):
    seen = []
    for value in values:
        if value and value not in seen:
            seen.append(value)
    return ', '.join(seen)


def _certifying_defaults(tenant_id, contact_type, user):
    """Signatory from the tenant contact of the requested type, else the acting user"""
    contact = None
    if tenant_id:
        contact = TenantContact.objects.filter(
            tenant_id=tenant_id, contact_type=contact_type or 'primary', is_active=True
        ).order_by('id').first()
    if contact is not None:
        return {
            'certifying_officer': contact.contact_name,
            'certifying_title': contact.job_title,
            'certifying_email': contact.contact_email,
            'certifying_phone': contact.contact_phone,
        }
    return {
        'certifying_officer': getattr(user, 'full_name', '') or '',
        'certifying_title': '',
        'certifying_email': getattr(user, 'email', '') or '',
        'certifying_phone': '',
    }


@transaction.atomic
def create_certificate(user, data, po=None, item_ids=(), request=None):
    """
    Create a certificate, either for selected PO lines or for free-form material.

    PO lines contribute their uncertified weight, which then counts as certified.
    A PO whose lines are all certified is completed.
    """
    item_ids = list(dict.fromkeys(item_ids or ()))
    if po is not None and not item_ids:
        raise CertificateError("Please select at least one item from the purchase order")
    if po is None and not data.get('vendor_name'):
        raise CertificateError("Vendor name is required")
    if po is None and not data.get('material_type'):
        raise CertificateError("Material type is required")

    issue = data.get('status') == 'issued'
    today = timezone.localdate()
    items = []

    if po is not None:
        po = PurchaseOrder.objects.select_for_update().get(pk=po.pk)
        tenant_id = po.tenant_id
        if po.status not in CERTIFIABLE_PO_STATUSES:
            raise CertificateError("Only received purchase orders can be certified")
        items = list(
            PurchaseOrderItem.objects.select_for_update()
            .filter(purchase_order=po, pk__in=item_ids)
            .order_by('line_number', 'id')
        )
        if len(items) != len(item_ids):
            raise CertificateError("Selected items do not belong to this purchase order")
        for item in items:
            if item.status != 'received':
                raise CertificateError(f"Line {item.line_number} has not been received")
            if item.uncertified_weight_lbs() < CERTIFIED_TOLERANCE:
                raise CertificateError(f"Line {item.line_number} is already certified")
        total_lbs = sum((item.uncertified_weight_lbs() for item in items), ZERO)
        total_kg = sum((item.uncertified_weight_kg() for item in items), ZERO)
        material_category = _distinct_joined(item.category for item in items)
        material_type = _distinct_joined(item.product_type for item in items)
        is_partial = len(items) < po.items.count()
        vendor = po.vendor
        vendor_name = data.get('vendor_name') or po.vendor_name
    else:
        tenant_id = resolve_write_tenant(user, data.get('tenant_id'))
        total_lbs = to_decimal(data.get('weight_lbs'), ZERO)
        total_kg = to_decimal(data.get('weight_kg')) or total_lbs * KG_PER_LB
        material_category = data.get('material_category') or ''
        material_type = data.get('material_type')
        is_partial = False
        vendor = data.get('vendor')
        vendor_name = data.get('vendor_name')

    contact_type = data.get('contact_type') or 'primary'
    signatory = _certifying_defaults(tenant_id, contact_type, user)
    for field in CERTIFYING_FIELDS:
        if data.get(field):
            signatory[field] = data[field]

    certificate = ComplianceCertificate.objects.create(
        tenant_id=tenant_id,
        certificate_number=allocate_certificate_number(tenant_id, today.year),
        purchase_order=po,
        po_number=po.po_number if po else '',
        is_partial=is_partial,
        po_line_items=[
            {
                'line_id': item.id,
                'line_number': item.line_number,
                'skid_number': item.skid_number,
                'category': item.category,
                'product_type': item.product_type,
                'weight_lbs': float(item.uncertified_weight_lbs()),
                'weight_kg': float(item.uncertified_weight_kg()),
            }
            for item in items
        ],
        vendor=vendor,
        vendor_name=vendor_name or '',
        vendor_address=data.get('vendor_address') or (format_address(vendor) if vendor else ''),
        certificate_date=data.get('certificate_date') or today,
        material_type=material_type,
        material_category=material_category,
        weight_lbs=round_weight(total_lbs),
        weight_kg=round_weight(total_kg),
        diversion_rate=to_decimal(data.get('diversion_rate'), Decimal('95')),
        destruction_method=data.get('destruction_method') or 'recycling',
        destruction_date=data.get('destruction_date') or today,
        destruction_location=data.get('destruction_location') or '',
        certificate_details=data.get('certificate_details') or '',
        contact_type=contact_type,
        status='issued' if issue else 'draft',
        issued_by=getattr(user, 'email', '') if issue else '',
        issued_at=timezone.now() if issue else None,
        notes=data.get('notes') or '',
        **signatory,
    )

    for item in items:
        uncertified_lbs = item.uncertified_weight_lbs()
        uncertified_kg = item.uncertified_weight_kg()
        item.certified_weight_lbs = round_weight(item.certified_weight_lbs + uncertified_lbs)
        item.certified_weight_kg = round_weight(item.certified_weight_kg + uncertified_kg)
        item.certificate_ids = list(item.certificate_ids or []) + [certificate.id]
        item.certificate_status = line_certificate_status(item)
        item.save(update_fields=[
            'certified_weight_lbs', 'certified_weight_kg', 'certificate_ids', 'certificate_status', 'updated_date',
        ])

    if po is not None and not po.items.exclude(certificate_status='certified').exists():
        po.status = 'completed'
        po.save(update_fields=['status', 'updated_date'])

    create_audit_log(
        request=request, user=user, action='certificate_issue' if issue else 'create',
        model_name='ComplianceCertificate', object_id=certificate.id,
        object_name=certificate.certificate_number, object_reference=certificate.po_number or None,
        tenant_id=certificate.tenant_id,
        changes={'weight_lbs': str(certificate.weight_lbs), 'items': [item.id for item in items]},
    )
    logger.info(f"Certificate {certificate.certificate_number} created ({certificate.status})")
    return certificate


def issue_certificate(certificate, user, request=None):
    if certificate.status != 'draft':
        raise CertificateError("Only draft certificates can be issued")
    certificate.status = 'issued'
    certificate.issued_by = getattr(user, 'email', '') or ''
    certificate.issued_at = timezone.now()
    certificate.save(update_fields=['status', 'issued_by', 'issued_at', 'updated_date'])
    create_audit_log(
        request=request, user=user, action='certificate_issue', model_name='ComplianceCertificate',
        object_id=certificate.id, object_name=certificate.certificate_number, tenant_id=certificate.tenant_id,
    )
    return certificate


def certificate_email_body(certificate):
    lines = [
        f"Certificate of Recycling {certificate.certificate_number}",
        "",
        f"Vendor: {certificate.vendor_name}",
        f"Date: {certificate.certificate_date}",
        f"Material: {certificate.material_category} {certificate.material_type}".rstrip(),
        f"Weight: {certificate.weight_lbs} lbs ({certificate.weight_kg} kg)",
        f"Diversion rate: {certificate.diversion_rate}%",
        f"Method: {certificate.destruction_method}",
    ]
    if certificate.po_number:
        lines.append(f"Purchase order: {certificate.po_number}")
    if certificate.certifying_officer:
        lines.extend(["", f"Certified by {certificate.certifying_officer}", certificate.certifying_title or ''])
    return '\n'.join(lines).rstrip() + '\n'


def send_certificate(certificate, recipients, user, request=None):
    """Email the certificate summary and mark it sent"""
    recipients = [r.strip() for r in recipients or [] if r and r.strip()]
    if not recipients:
        raise CertificateError("At least one recipient email is required")
    if certificate.status == 'void':
        raise CertificateError("Void certificates cannot be sent")

    send_mail(
        subject=f"Certificate {certificate.certificate_number}",
        message=certificate_email_body(certificate),
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=recipients,
        fail_silently=False,
    )
    certificate.status = 'sent'
    certificate.sent_to = ', '.join(recipients)
    certificate.sent_at = timezone.now()
    certificate.save(update_fields=['status', 'sent_to', 'sent_at', 'updated_date'])
    create_audit_log(
        request=request, user=user, action='certificate_send', model_name='ComplianceCertificate',
        object_id=certificate.id, object_name=certificate.certificate_number, tenant_id=certificate.tenant_id,
        changes={'sent_to': recipients},
    )
    return certificate


@transaction.atomic
def void_certificate(certificate, user, reason='', request=None):
    """
    Void a certificate and hand its weight back to the PO lines it covered.
    """
    certificate = ComplianceCertificate.objects.select_for_update().get(pk=certificate.pk)
    if certificate.status == 'void':
        raise CertificateError("Certificate is already void")

    line_weights = {line.get('line_id'): line for line in certificate.po_line_items or []}
    items = PurchaseOrderItem.objects.select_for_update().filter(pk__in=list(line_weights))
    for item in items:
        line = line_weights[item.id]
        item.certified_weight_lbs = max(ZERO, round_weight(item.certified_weight_lbs - to_decimal(line.get('weight_lbs'), ZERO)))
        item.certified_weight_kg = max(ZERO, round_weight(item.certified_weight_kg - to_decimal(line.get('weight_kg'), ZERO)))
        item.certificate_ids = [cid for cid in item.certificate_ids or [] if cid != certificate.id]
        item.certificate_status = line_certificate_status(item)
        item.save(update_fields=[
            'certified_weight_lbs', 'certified_weight_kg', 'certificate_ids', 'certificate_status', 'updated_date',
        ])

    po = certificate.purchase_order
    if po is not None and po.status == 'completed':
        po.status = 'received'
        po.save(update_fields=['status', 'updated_date'])

    certificate.status = 'void'
    if reason:
        certificate.notes = f"{certificate.notes}\nVoided: {reason}".strip()
    certificate.save(update_fields=['status', 'notes', 'updated_date'])
    create_audit_log(
        request=request, user=user, action='certificate_void', model_name='ComplianceCertificate',
        object_id=certificate.id, object_name=certificate.certificate_number, tenant_id=certificate.tenant_id,
        changes={'reason': reason or ''},
    )
    return certificate
