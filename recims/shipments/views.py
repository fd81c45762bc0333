from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from recims.core.tenancy import scope_queryset, get_scoped_object_or_404, can_modify_tenant_row
from recims.core.utils import create_audit_log
from .models import InboundShipment, QCCriteria, QCInspection
from .serializers import (
    InboundShipmentSerializer, ShipmentStatusSerializer, QCCriteriaSerializer, QCInspectionSerializer,
    DispositionSerializer,
)
from .services import ShipmentError, create_shipment, change_status, reopen_shipment, record_inspection, set_disposition

FORBIDDEN = {'error': 'Insufficient privileges to update this record'}


def _simple_detail(request, queryset, serializer_class, pk, model_name, label_field):
    obj = get_scoped_object_or_404(queryset, request.user, pk=pk)

    if request.method == 'GET':
        return Response(serializer_class(obj).data)

    if not can_modify_tenant_row(obj.tenant_id, request.user):
        return Response(FORBIDDEN, status=status.HTTP_403_FORBIDDEN)

    if request.method == 'DELETE':
        create_audit_log(
            request=request, action='delete', model_name=model_name, object_id=obj.id,
            object_name=getattr(obj, label_field), tenant_id=obj.tenant_id,
        )
        obj.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = serializer_class(obj, data=request.data, partial=request.method == 'PATCH', context={'request': request})
    if serializer.is_valid():
        obj = serializer.save()
        create_audit_log(
            request=request, action='update', model_name=model_name, object_id=obj.id,
            object_name=getattr(obj, label_field), changes=dict(request.data), tenant_id=obj.tenant_id,
        )
        return Response(serializer_class(obj).data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


# Inbound shipment views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def shipment_list_create(request):
    """List inbound shipments (status, load_id, supplier, date_from, date_to) or log a new arrival"""
    if request.method == 'GET':
        queryset = scope_queryset(InboundShipment.objects.all(), request.user)

        status_filter = request.query_params.get('status', None)
        load_id = request.query_params.get('load_id', None)
        supplier = request.query_params.get('supplier', None)
        date_from = request.query_params.get('date_from', None)
        date_to = request.query_params.get('date_to', None)

        if status_filter:
            queryset = queryset.filter(status__in=[s.strip() for s in status_filter.split(',') if s.strip()])
        if load_id:
            queryset = queryset.filter(load_id=load_id)
        if supplier:
            queryset = queryset.filter(supplier_name__icontains=supplier)
        if date_from:
            queryset = queryset.filter(arrival_time__date__gte=date_from)
        if date_to:
            queryset = queryset.filter(arrival_time__date__lte=date_to)

        serializer = InboundShipmentSerializer(queryset.order_by('-created_date', '-id'), many=True)
        return Response(serializer.data)

    serializer = InboundShipmentSerializer(data=request.data, context={'request': request})
    if serializer.is_valid():
        shipment = create_shipment(request.user, serializer.validated_data, request=request)
        return Response(InboundShipmentSerializer(shipment).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def shipment_detail(request, pk):
    """Retrieve, update or delete an inbound shipment"""
    return _simple_detail(request, InboundShipment.objects.all(), InboundShipmentSerializer, pk, 'InboundShipment', 'load_id')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def shipment_status(request, pk):
    """Move a shipment to another status"""
    shipment = get_scoped_object_or_404(InboundShipment.objects.all(), request.user, pk=pk)
    if not can_modify_tenant_row(shipment.tenant_id, request.user):
        return Response(FORBIDDEN, status=status.HTTP_403_FORBIDDEN)

    serializer = ShipmentStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        shipment = change_status(shipment, serializer.validated_data['status'], request.user, request=request)
    except ShipmentError as e:
        return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
    return Response(InboundShipmentSerializer(shipment).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def shipment_reopen(request, pk):
    """Send a rejected shipment back to the inspection queue"""
    shipment = get_scoped_object_or_404(InboundShipment.objects.all(), request.user, pk=pk)
    if not can_modify_tenant_row(shipment.tenant_id, request.user):
        return Response(FORBIDDEN, status=status.HTTP_403_FORBIDDEN)
    try:
        shipment = reopen_shipment(shipment, request.user, request=request)
    except ShipmentError as e:
        return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
    return Response(InboundShipmentSerializer(shipment).data)


# QC criteria views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def qc_criteria_list_create(request):
    """List QC criteria (status, material_category) or create one"""
    if request.method == 'GET':
        queryset = scope_queryset(QCCriteria.objects.all(), request.user)
        status_filter = request.query_params.get('status', None)
        category = request.query_params.get('material_category', None)
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        if category:
            queryset = queryset.filter(material_category__iexact=category)
        return Response(QCCriteriaSerializer(queryset.order_by('-created_date', '-id'), many=True).data)

    serializer = QCCriteriaSerializer(data=request.data, context={'request': request})
    if serializer.is_valid():
        criteria = serializer.save()
        create_audit_log(
            request=request, action='create', model_name='QCCriteria', object_id=criteria.id,
            object_name=criteria.criteria_name, tenant_id=criteria.tenant_id,
        )
        return Response(QCCriteriaSerializer(criteria).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def qc_criteria_detail(request, pk):
    """Retrieve, update or delete QC criteria"""
    return _simple_detail(request, QCCriteria.objects.all(), QCCriteriaSerializer, pk, 'QCCriteria', 'criteria_name')


# QC inspection views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def qc_inspection_list_create(request):
    """List inspections (shipment, overall_result, disposition) or record one"""
    if request.method == 'GET':
        queryset = scope_queryset(QCInspection.objects.select_related('shipment'), request.user)
        shipment_id = request.query_params.get('shipment', None)
        result = request.query_params.get('overall_result', None)
        disposition = request.query_params.get('disposition', None)
        if shipment_id:
            queryset = queryset.filter(shipment_id=shipment_id)
        if result:
            queryset = queryset.filter(overall_result=result)
        if disposition:
            queryset = queryset.filter(disposition=disposition)
        return Response(QCInspectionSerializer(queryset.order_by('-created_date', '-id'), many=True).data)

    serializer = QCInspectionSerializer(data=request.data, context={'request': request})
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    shipment = serializer.validated_data['shipment']
    if not can_modify_tenant_row(shipment.tenant_id, request.user):
        return Response(FORBIDDEN, status=status.HTTP_403_FORBIDDEN)
    try:
        inspection = record_inspection(request.user, shipment, serializer.validated_data, request=request)
    except ShipmentError as e:
        return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
    return Response(QCInspectionSerializer(inspection).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def qc_inspection_detail(request, pk):
    """Retrieve, update or delete an inspection"""
    return _simple_detail(request, QCInspection.objects.all(), QCInspectionSerializer, pk, 'QCInspection', 'inspection_id')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def qc_inspection_disposition(request, pk):
    """Decide what happens to the inspected load"""
    inspection = get_scoped_object_or_404(QCInspection.objects.all(), request.user, pk=pk)
    if not can_modify_tenant_row(inspection.tenant_id, request.user):
        return Response(FORBIDDEN, status=status.HTTP_403_FORBIDDEN)

    serializer = DispositionSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        inspection = set_disposition(
            request.user, inspection, serializer.validated_data['disposition'],
            notes=serializer.validated_data['disposition_notes'],
            downgrade_to_grade=serializer.validated_data['downgrade_to_grade'],
            request=request,
        )
    except ShipmentError as e:
        return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
    return Response(QCInspectionSerializer(inspection).data)
