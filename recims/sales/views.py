from django.db.models import Q
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from recims.core.tenancy import scope_queryset, get_scoped_object_or_404, can_modify_tenant_row
from recims.core.utils import create_audit_log
from .models import SalesOrder, Carrier, Waybill
from .serializers import (
    SalesOrderSerializer, SalesOrderCreateSerializer, TaxQuoteSerializer, USTaxSerializer,
    CarrierSerializer, WaybillSerializer, WaybillCreateSerializer,
)
from .services import SalesOrderError, create_sales_order, create_waybill, quote_order
from .tax import calculate_us_tax, jsonable, US_DEFAULT_RATE

FORBIDDEN = {'error': 'Insufficient privileges to update this record'}


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def sales_order_list_create(request):
    """List sales orders (status, customer, search) or create one with its lines"""
    if request.method == 'GET':
        queryset = scope_queryset(SalesOrder.objects.prefetch_related('items'), request.user)

        status_filter = request.query_params.get('status', None)
        customer = request.query_params.get('customer', None)
        search = request.query_params.get('search', None)

        if status_filter:
            queryset = queryset.filter(status__in=status_filter.split(','))
        if customer:
            queryset = queryset.filter(customer_id=customer)
        if search:
            queryset = queryset.filter(
                Q(so_number__icontains=search) | Q(customer_name__icontains=search) | Q(po_number__icontains=search)
            )

        serializer = SalesOrderSerializer(queryset, many=True)
        return Response(serializer.data)

    serializer = SalesOrderCreateSerializer(data=request.data, context={'request': request})
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = dict(serializer.validated_data)
    lines = [dict(line) for line in data.pop('items', [])]
    try:
        so = create_sales_order(request.user, data, lines, request=request)
    except SalesOrderError as e:
        return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
    return Response(SalesOrderSerializer(so).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def sales_order_detail(request, pk):
    """Retrieve, update or delete a sales order; shipped orders cannot be deleted"""
    so = get_scoped_object_or_404(SalesOrder.objects.prefetch_related('items'), request.user, pk=pk)

    if request.method == 'GET':
        return Response(SalesOrderSerializer(so).data)

    if not can_modify_tenant_row(so.tenant_id, request.user):
        return Response(FORBIDDEN, status=status.HTTP_403_FORBIDDEN)

    if request.method == 'DELETE':
        if so.waybill_number:
            return Response(
                {'error': 'Sales orders with a waybill cannot be deleted'}, status=status.HTTP_400_BAD_REQUEST
            )
        create_audit_log(
            request=request, action='delete', model_name='SalesOrder', object_id=so.id,
            object_name=so.so_number, tenant_id=so.tenant_id,
        )
        so.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = SalesOrderSerializer(
        so, data=request.data, partial=request.method == 'PATCH', context={'request': request}
    )
    if serializer.is_valid():
        so = serializer.save()
        create_audit_log(
            request=request, action='update', model_name='SalesOrder', object_id=so.id,
            object_name=so.so_number, changes=dict(request.data), tenant_id=so.tenant_id,
        )
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def sales_order_calculate_tax(request):
    """Tax preview for unsaved order lines"""
    serializer = TaxQuoteSerializer(data=request.data, context={'request': request})
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    customer = data.get('customer')
    exempt = data['customer_exempt'] or bool(customer and customer.is_tax_exempt)
    lines = [dict(line) for line in data['items']]
    if not lines:
        return Response(
            {'error': 'Please add line items with prices and quantities first'}, status=status.HTTP_400_BAD_REQUEST
        )
    breakdown = quote_order(lines, data['country'], data['province'], data.get('shipping_amount'), exempt)
    return Response(jsonable(breakdown))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def sales_order_waybill(request, pk):
    """Generate the waybill for a sales order"""
    so = get_scoped_object_or_404(SalesOrder.objects.all(), request.user, pk=pk)
    if not can_modify_tenant_row(so.tenant_id, request.user):
        return Response(FORBIDDEN, status=status.HTTP_403_FORBIDDEN)

    serializer = WaybillCreateSerializer(data=request.data, context={'request': request})
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        waybill = create_waybill(request.user, so, dict(serializer.validated_data), request=request)
    except SalesOrderError as e:
        return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
    return Response(WaybillSerializer(waybill).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def carrier_list_create(request):
    if request.method == 'GET':
        queryset = scope_queryset(Carrier.objects.all(), request.user)
        status_filter = request.query_params.get('status', None)
        carrier_type = request.query_params.get('carrier_type', None)
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        if carrier_type:
            queryset = queryset.filter(carrier_type=carrier_type)
        return Response(CarrierSerializer(queryset, many=True).data)

    serializer = CarrierSerializer(data=request.data, context={'request': request})
    if serializer.is_valid():
        carrier = serializer.save()
        create_audit_log(
            request=request, action='create', model_name='Carrier', object_id=carrier.id,
            object_name=carrier.company_name, tenant_id=carrier.tenant_id,
        )
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def carrier_detail(request, pk):
    carrier = get_scoped_object_or_404(Carrier.objects.all(), request.user, pk=pk)

    if request.method == 'GET':
        return Response(CarrierSerializer(carrier).data)

    if not can_modify_tenant_row(carrier.tenant_id, request.user):
        return Response(FORBIDDEN, status=status.HTTP_403_FORBIDDEN)

    if request.method == 'DELETE':
        carrier.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = CarrierSerializer(
        carrier, data=request.data, partial=request.method == 'PATCH', context={'request': request}
    )
    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def waybill_list(request):
    queryset = scope_queryset(Waybill.objects.prefetch_related('items'), request.user)
    so_number = request.query_params.get('so_number', None)
    status_filter = request.query_params.get('status', None)
    if so_number:
        queryset = queryset.filter(so_number=so_number)
    if status_filter:
        queryset = queryset.filter(status=status_filter)
    return Response(WaybillSerializer(queryset, many=True).data)


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def waybill_detail(request, pk):
    """Retrieve a waybill, or update its dispatch details and status"""
    waybill = get_scoped_object_or_404(Waybill.objects.prefetch_related('items'), request.user, pk=pk)
    if request.method == 'GET':
        return Response(WaybillSerializer(waybill).data)

    if not can_modify_tenant_row(waybill.tenant_id, request.user):
        return Response(FORBIDDEN, status=status.HTTP_403_FORBIDDEN)
    serializer = WaybillSerializer(waybill, data=request.data, partial=True)
    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def calculate_us_tax_function(request):
    """Flat-rate US tax: ``{subtotal, tax, total}``"""
    serializer = USTaxSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    rate = serializer.validated_data.get('rate')
    result = calculate_us_tax(serializer.validated_data['subtotal'], US_DEFAULT_RATE if rate is None else rate)
    return Response(jsonable(result))
