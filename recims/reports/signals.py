"""
Cache invalidation signals
Drop a tenant's cached reports when one of the reported models changes
"""
import logging

from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver

from recims.compliance.models import ComplianceCertificate
from recims.core.cache_utils import invalidate_reports_cache
from recims.inventory.models import Inventory
from recims.purchasing.models import PurchaseOrder
from recims.sales.models import SalesOrder
from recims.shipments.models import InboundShipment, QCInspection

logger = logging.getLogger(__name__)

REPORTED_MODELS = (
    InboundShipment,
    QCInspection,
    Inventory,
    PurchaseOrder,
    SalesOrder,
    ComplianceCertificate,
)


def _invalidate(sender, instance, **kwargs):
    invalidate_reports_cache(instance.tenant_id)
    logger.debug(f"Reports cache invalidated for tenant {instance.tenant_id} ({sender.__name__} {instance.pk})")


for model in REPORTED_MODELS:
    receiver(post_save, sender=model, dispatch_uid=f'reports_post_save_{model.__name__}')(_invalidate)
    receiver(post_delete, sender=model, dispatch_uid=f'reports_post_delete_{model.__name__}')(_invalidate)
