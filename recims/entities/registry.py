"""
Entity names served by typed models instead of generic records.

Keys are compact names (lower case, no underscores) so ``PurchaseOrder``,
``purchase_order`` and ``purchase-order`` all resolve to the same entry.
"""
from collections import namedtuple

from django.utils.module_loading import import_string

# ``create`` names a service taking (user, validated_data, request) used instead of serializer.save()
TypedEntity = namedtuple('TypedEntity', ['model', 'serializer', 'writable', 'endpoint', 'create'], defaults=(None,))

# Delegated wholesale to the core views
CORE_ALIASES = {
    'tenant': 'tenants',
    'tenants': 'tenants',
    'tenantcategory': 'tenant_categories',
    'tenantcategories': 'tenant_categories',
    'tenantcontact': 'tenant_contacts',
    'tenantcontacts': 'tenant_contacts',
    'user': 'users',
    'users': 'users',
}

TYPED_ENTITIES = {
    'inventory': TypedEntity(
        'recims.inventory.models.Inventory', 'recims.inventory.serializers.InventorySerializer',
        True, '/api/inventory/', 'recims.inventory.services.create_inventory'),
    'customer': TypedEntity(
        'recims.parties.models.Customer', 'recims.parties.serializers.CustomerSerializer',
        True, '/api/customers/'),
    'vendor': TypedEntity(
        'recims.parties.models.Vendor', 'recims.parties.serializers.VendorSerializer',
        True, '/api/vendors/'),
    'purchaseorder': TypedEntity(
        'recims.purchasing.models.PurchaseOrder', 'recims.purchasing.serializers.PurchaseOrderSerializer',
        False, '/api/purchase-orders/'),
    'purchaseorderitem': TypedEntity(
        'recims.purchasing.models.PurchaseOrderItem', 'recims.purchasing.serializers.PurchaseOrderItemSerializer',
        False, '/api/purchase-orders/<id>/items/'),
    'inboundshipment': TypedEntity(
        'recims.shipments.models.InboundShipment', 'recims.shipments.serializers.InboundShipmentSerializer',
        True, '/api/inbound-shipments/'),
    'qccriteria': TypedEntity(
        'recims.shipments.models.QCCriteria', 'recims.shipments.serializers.QCCriteriaSerializer',
        True, '/api/qc-criteria/'),
    'qcinspection': TypedEntity(
        'recims.shipments.models.QCInspection', 'recims.shipments.serializers.QCInspectionSerializer',
        False, '/api/qc-inspections/'),
    'compliancecertificate': TypedEntity(
        'recims.compliance.models.ComplianceCertificate',
        'recims.compliance.serializers.ComplianceCertificateSerializer',
        False, '/api/compliance-certificates/'),
    'salesorder': TypedEntity(
        'recims.sales.models.SalesOrder', 'recims.sales.serializers.SalesOrderSerializer',
        False, '/api/sales-orders/'),
    'salesorderitem': TypedEntity(
        'recims.sales.models.SalesOrderItem', 'recims.sales.serializers.SalesOrderItemSerializer',
        False, '/api/sales-orders/'),
    'carrier': TypedEntity(
        'recims.sales.models.Carrier', 'recims.sales.serializers.CarrierSerializer',
        True, '/api/carriers/'),
    'waybill': TypedEntity(
        'recims.sales.models.Waybill', 'recims.sales.serializers.WaybillSerializer',
        False, '/api/sales-orders/<id>/waybill/'),
    'waybillitem': TypedEntity(
        'recims.sales.models.WaybillItem', 'recims.sales.serializers.WaybillItemSerializer',
        False, '/api/waybills/'),
    'audittrail': TypedEntity(
        'recims.core.models.AuditLog', 'recims.core.serializers.AuditLogSerializer',
        False, '/api/audit-logs/'),
}
TYPED_ENTITIES['purchaseorderline'] = TYPED_ENTITIES['purchaseorderitem']
TYPED_ENTITIES['salesorderline'] = TYPED_ENTITIES['salesorderitem']
TYPED_ENTITIES['auditlog'] = TYPED_ENTITIES['audittrail']


def core_alias(compact_name):
    return CORE_ALIASES.get(compact_name)


def typed_entity(compact_name):
    """(model, serializer_class, entry) for a typed entity name, or None"""
    entry = TYPED_ENTITIES.get(compact_name)
    if entry is None:
        return None
    return import_string(entry.model), import_string(entry.serializer), entry
