from django.core.paginator import Paginator
from django.db import transaction
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from recims.core.tenancy import scope_queryset, get_scoped_object_or_404, can_modify_tenant_row
from recims.core.utils import create_audit_log
from .labels import generate_skid_label
from .models import PurchaseOrder, PurchaseOrderItem
from .serializers import (
    PurchaseOrderSerializer, PurchaseOrderItemSerializer, PurchaseOrderLineInputSerializer, ReceiveItemSerializer,
)
from .services import PurchaseOrderError, create_purchase_order, add_item, receive_item, recompute_totals

FORBIDDEN = {'error': 'Insufficient privileges to update this purchase order'}


def _scoped_orders(request):
    return scope_queryset(PurchaseOrder.objects.all(), request.user).prefetch_related('items')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def purchase_order_list_create(request):
    """List purchase orders (paginated) or create one with its lines"""
    if request.method == 'GET':
        queryset = _scoped_orders(request)

        vendor = request.query_params.get('vendor', None)
        date_from = request.query_params.get('date_from', None)
        date_to = request.query_params.get('date_to', None)
        status_filter = request.query_params.get('status', None)

        if vendor:
            queryset = queryset.filter(vendor_id=vendor)
        if date_from:
            queryset = queryset.filter(order_date__gte=date_from)
        if date_to:
            queryset = queryset.filter(order_date__lte=date_to)
        if status_filter:
            queryset = queryset.filter(status=status_filter)

        queryset = queryset.order_by('-created_date', '-id')

        try:
            page = int(request.query_params.get('page', 1))
            limit = int(request.query_params.get('limit', 15))
        except ValueError:
            return Response({'error': 'page and limit must be integers'}, status=status.HTTP_400_BAD_REQUEST)
        limit = max(1, limit)

        paginator = Paginator(queryset, limit)
        page_obj = paginator.get_page(page)

        serializer = PurchaseOrderSerializer(page_obj, many=True)
        response = Response({
            'results': serializer.data,
            'count': paginator.count,
            'next': page_obj.next_page_number() if page_obj.has_next() else None,
            'previous': page_obj.previous_page_number() if page_obj.has_previous() else None,
            'page': page_obj.number,
            'page_size': limit,
            'total_pages': paginator.num_pages,
        })
        response['Cache-Control'] = 'private, max-age=10, must-revalidate'
        response['X-Data-Version'] = timezone.now().isoformat()
        return response

    data = request.data.copy()
    items_data = data.pop('items', [])

    serializer = PurchaseOrderSerializer(data=data, context={'request': request})
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    lines = PurchaseOrderLineInputSerializer(data=items_data, many=True)
    if not lines.is_valid():
        return Response({'items': lines.errors}, status=status.HTTP_400_BAD_REQUEST)

    try:
        po = create_purchase_order(request.user, serializer.validated_data, lines.validated_data, request=request)
    except PurchaseOrderError as e:
        return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
    return Response(PurchaseOrderSerializer(po).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def purchase_order_detail(request, pk):
    """Retrieve, update or delete a purchase order; only drafts can be deleted"""
    po = get_scoped_object_or_404(_scoped_orders(request), request.user, pk=pk)

    if request.method == 'GET':
        return Response(PurchaseOrderSerializer(po).data)

    if not can_modify_tenant_row(po.tenant_id, request.user):
        return Response(FORBIDDEN, status=status.HTTP_403_FORBIDDEN)

    if request.method == 'DELETE':
        if po.status != 'draft':
            return Response(
                {'error': 'Only draft purchase orders can be deleted'}, status=status.HTTP_400_BAD_REQUEST
            )
        with transaction.atomic():
            create_audit_log(
                request=request, action='delete', model_name='PurchaseOrder', object_id=po.id,
                object_name=po.po_number, tenant_id=po.tenant_id,
            )
            po.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)

    data = request.data.copy()
    data.pop('items', None)
    serializer = PurchaseOrderSerializer(
        po, data=data, partial=request.method == 'PATCH', context={'request': request}
    )
    if serializer.is_valid():
        po = serializer.save()
        create_audit_log(
            request=request, action='update', model_name='PurchaseOrder', object_id=po.id,
            object_name=po.po_number, changes=dict(data), tenant_id=po.tenant_id,
        )
        return Response(PurchaseOrderSerializer(po).data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def purchase_order_items(request, pk):
    """List the lines of a PO or append one"""
    po = get_scoped_object_or_404(_scoped_orders(request), request.user, pk=pk)

    if request.method == 'GET':
        return Response(PurchaseOrderItemSerializer(po.items.all(), many=True).data)

    if not can_modify_tenant_row(po.tenant_id, request.user):
        return Response(FORBIDDEN, status=status.HTTP_403_FORBIDDEN)
    if po.status in ('received', 'completed', 'cancelled'):
        return Response(
            {'error': f'Cannot add items to a {po.status} purchase order'}, status=status.HTTP_400_BAD_REQUEST
        )

    line = PurchaseOrderLineInputSerializer(data=request.data)
    if not line.is_valid():
        return Response(line.errors, status=status.HTTP_400_BAD_REQUEST)
    data = dict(line.validated_data)
    if 'skid_number' not in request.data:
        data.pop('skid_number', None)
    item = add_item(po, data, request.user, request=request)
    return Response(PurchaseOrderItemSerializer(item).data, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def purchase_order_item_receive(request, pk, item_id):
    """Receive a line into inventory; a line can only be received once"""
    po = get_scoped_object_or_404(_scoped_orders(request), request.user, pk=pk)
    if not can_modify_tenant_row(po.tenant_id, request.user):
        return Response(FORBIDDEN, status=status.HTTP_403_FORBIDDEN)
    item = get_object_or_404(PurchaseOrderItem, pk=item_id, purchase_order=po)

    serializer = ReceiveItemSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        result = receive_item(request.user, item, serializer.validated_data, request=request)
    except PurchaseOrderError as e:
        return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)

    po.refresh_from_db()
    result['purchase_order'] = PurchaseOrderSerializer(po).data
    return Response(result)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def purchase_order_labels(request, pk):
    """Printable skid labels for every line, or for ?item_id= only"""
    po = get_scoped_object_or_404(_scoped_orders(request), request.user, pk=pk)
    items = po.items.all()
    item_id = request.query_params.get('item_id')
    if item_id:
        items = items.filter(pk=item_id)

    label_date = (po.order_date or timezone.localdate()).isoformat()
    labels = [
        {
            'item_id': item.id,
            'barcode': item.barcode,
            'skid_number': item.skid_number,
            'label': generate_skid_label(
                item.barcode, category=item.category, skid_number=item.skid_number,
                vendor_name=po.vendor_name, label_date=label_date,
            ),
        }
        for item in items
    ]
    return Response({'po_number': po.po_number, 'labels': labels})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def purchase_order_lookup(request):
    """Find a PO line by its scanned barcode"""
    barcode_value = (request.query_params.get('barcode') or '').strip()
    if not barcode_value:
        return Response({'error': 'barcode is required'}, status=status.HTTP_400_BAD_REQUEST)

    queryset = scope_queryset(PurchaseOrderItem.objects.select_related('purchase_order'), request.user)
    item = queryset.filter(barcode__iexact=barcode_value).first()
    if item is None:
        return Response({'error': 'No purchase order item found for this barcode'}, status=status.HTTP_404_NOT_FOUND)

    po = item.purchase_order
    return Response({
        'item': PurchaseOrderItemSerializer(item).data,
        'purchase_order': {
            'id': po.id,
            'po_number': po.po_number,
            'vendor_name': po.vendor_name,
            'status': po.status,
        },
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def purchase_order_recompute(request, pk):
    """Recompute expected/received totals from the stored lines"""
    po = get_scoped_object_or_404(_scoped_orders(request), request.user, pk=pk)
    if not can_modify_tenant_row(po.tenant_id, request.user):
        return Response(FORBIDDEN, status=status.HTTP_403_FORBIDDEN)
    with transaction.atomic():
        po = PurchaseOrder.objects.select_for_update().get(pk=po.pk)
        recompute_totals(po)
    return Response(PurchaseOrderSerializer(po).data)
