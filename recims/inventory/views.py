from django.db.models import Count, Sum
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from recims.core.tenancy import scope_queryset, get_scoped_object_or_404, can_modify_tenant_row
from recims.core.utils import create_audit_log
from .filters import InventoryFilter
from .models import Inventory
from .serializers import InventorySerializer, InventoryAdjustSerializer, InventoryClassifySerializer
from .services import create_inventory, adjust_quantity, classify_item


def _filtered_inventory(request):
    queryset = scope_queryset(Inventory.objects.all(), request.user)
    return InventoryFilter(request.query_params, queryset=queryset).qs


def _modifiable_item(request, pk):
    item = get_scoped_object_or_404(Inventory.objects.all(), request.user, pk=pk)
    if not can_modify_tenant_row(item.tenant_id, request.user):
        return item, Response(
            {'error': 'Insufficient privileges to update this record'}, status=status.HTTP_403_FORBIDDEN
        )
    return item, None


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def inventory_list_create(request):
    """List inventory (status, sorting_status, category, zone, bin, sku, PO, search) or add stock"""
    if request.method == 'GET':
        queryset = _filtered_inventory(request).order_by('-created_date', '-id')
        serializer = InventorySerializer(queryset, many=True)
        return Response(serializer.data)

    serializer = InventorySerializer(data=request.data, context={'request': request})
    if serializer.is_valid():
        try:
            item = create_inventory(request.user, serializer.validated_data, request=request)
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(InventorySerializer(item).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def inventory_detail(request, pk):
    """Retrieve, update or delete an inventory row"""
    if request.method == 'GET':
        item = get_scoped_object_or_404(Inventory.objects.all(), request.user, pk=pk)
        return Response(InventorySerializer(item).data)

    item, denied = _modifiable_item(request, pk)
    if denied:
        return denied

    if request.method == 'DELETE':
        create_audit_log(
            request=request, action='delete', model_name='Inventory', object_id=item.id,
            object_name=item.item_name, object_reference=item.inventory_id, tenant_id=item.tenant_id,
        )
        item.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = InventorySerializer(
        item, data=request.data, partial=request.method == 'PATCH', context={'request': request}
    )
    if serializer.is_valid():
        try:
            item = serializer.save()
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        create_audit_log(
            request=request, action='update', model_name='Inventory', object_id=item.id,
            object_name=item.item_name, object_reference=item.inventory_id,
            changes=dict(request.data), tenant_id=item.tenant_id,
        )
        return Response(InventorySerializer(item).data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def inventory_adjust(request, pk):
    """Set the on-hand quantity of a row, recording the reason in the audit trail"""
    item, denied = _modifiable_item(request, pk)
    if denied:
        return denied

    serializer = InventoryAdjustSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    item = adjust_quantity(
        item, serializer.validated_data['quantity'], serializer.validated_data['reason'], request.user,
        request=request,
    )
    return Response(InventorySerializer(item).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def inventory_classify(request, pk):
    """Record sorting results for a row"""
    item, denied = _modifiable_item(request, pk)
    if denied:
        return denied

    serializer = InventoryClassifySerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    item = classify_item(item, serializer.validated_data, request.user, request=request)
    return Response(InventorySerializer(item).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inventory_by_location(request):
    """Quantities grouped by zone and bin"""
    rows = (
        _filtered_inventory(request)
        .values('zone', 'bin_location')
        .annotate(item_count=Count('id'), total_kg=Sum('quantity_kg'), total_lbs=Sum('quantity_lbs'))
        .order_by('zone', 'bin_location')
    )
    return Response([
        {
            'zone': row['zone'] or '',
            'bin_location': row['bin_location'] or '',
            'item_count': row['item_count'],
            'total_kg': float(row['total_kg'] or 0),
            'total_lbs': float(row['total_lbs'] or 0),
        }
        for row in rows
    ])


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inventory_by_sku(request):
    """Quantities grouped by SKU; rows without a SKU are left out"""
    rows = (
        _filtered_inventory(request)
        .exclude(sku_number='')
        .values('sku_number', 'category', 'product_type')
        .annotate(
            item_count=Count('id'),
            total_kg=Sum('quantity_kg'),
            total_lbs=Sum('quantity_lbs'),
            available_quantity=Sum('available_quantity'),
        )
        .order_by('sku_number')
    )
    return Response([
        {
            'sku_number': row['sku_number'],
            'category': row['category'],
            'product_type': row['product_type'],
            'item_count': row['item_count'],
            'total_kg': float(row['total_kg'] or 0),
            'total_lbs': float(row['total_lbs'] or 0),
            'available_quantity': float(row['available_quantity'] or 0),
        }
        for row in rows
    ])
