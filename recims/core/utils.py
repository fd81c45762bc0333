"""Utility functions for audit logging and value normalization"""
import logging
import re
from urllib.parse import urlsplit

from .models import AuditLog

logger = logging.getLogger(__name__)

TRUE_STRINGS = ('true', '1', 'yes', 'y')
FALSE_STRINGS = ('false', '0', 'no', 'n')


def normalize_tenant_id(value, fallback=None):
    """Trim and upper-case a tenant id; empty input yields None"""
    base = value if value is not None else fallback
    base = str(base if base is not None else '').strip()
    return base.upper() if base else None


def to_boolean(value, fallback=False):
    """Coerce form/query style values to bool"""
    if value is None:
        return fallback
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in TRUE_STRINGS:
            return True
        if normalized in FALSE_STRINGS:
            return False
        return fallback
    return bool(value)


def sanitize_code(value, fallback=None):
    """Lower-case slug restricted to [a-z0-9-]; never empty"""
    base = str(value or fallback or 'tenant').lower()
    slug = re.sub(r'[^a-z0-9-]', '', base)
    return slug or 'tenant'


def create_page_url(page_name):
    """
    Build the client route for a page name.

    Whitespace runs in the path become '-', the query string is kept as is:
        create_page_url('PurchaseOrderDetails?id=12') -> '/PurchaseOrderDetails?id=12'
        create_page_url('Edit Vendor') -> '/Edit-Vendor'
    """
    if not page_name:
        return '/'
    parts = urlsplit(str(page_name))
    path = re.sub(r'\s+', '-', parts.path.strip())
    url = '/' + path.lstrip('/')
    if parts.query:
        url = f"{url}?{parts.query}"
    return url


def get_client_ip(request):
    """Extract client IP address from request"""
    if not request or not hasattr(request, 'META'):
        return None
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip or None


def create_audit_log(request=None, action=None, model_name=None, object_id=None,
                     changes=None, user=None, object_name=None, object_reference=None,
                     tenant_id=None):
    """
    Create an audit log entry

    Args:
        request: Django request object (for user and IP) - optional if user is provided
        action: Action type (create, update, po_receive, certificate_issue, etc.)
        model_name: Name of the model being acted upon
        object_id: ID of the object (as string)
        changes: Dictionary of changes made
        user: Optional user override (defaults to request.user if request provided)
        object_name: Human-readable name of the object (e.g., PO number, certificate number)
        object_reference: Reference identifier (e.g., skid barcode, load id)
        tenant_id: Tenant of the object (defaults to the acting user's tenant)
    """
    try:
        audit_user = None
        if user:
            audit_user = user
        elif request and hasattr(request, 'user'):
            audit_user = request.user

        ip_address = get_client_ip(request) if request else None

        if not action or not model_name or not object_id:
            logger.warning(
                f"Audit log creation skipped: missing required fields "
                f"(action={action}, model_name={model_name}, object_id={object_id})"
            )
            return None

        authenticated = audit_user is not None and audit_user.is_authenticated
        if tenant_id is None and authenticated:
            tenant_id = audit_user.tenant_id

        return AuditLog.objects.create(
            user=audit_user if authenticated else None,
            tenant_id=normalize_tenant_id(tenant_id),
            action=action,
            model_name=model_name,
            object_id=str(object_id),
            object_name=object_name,
            object_reference=object_reference,
            changes=changes or {},
            ip_address=ip_address
        )
    except Exception as e:
        # Don't fail the main operation if audit logging fails
        logger.error(f"Failed to create audit log: {str(e)}")
        return None
