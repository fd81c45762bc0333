from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from recims.core.tenancy import scope_queryset, get_scoped_object_or_404, can_modify_tenant_row, resolve_write_tenant
from recims.core.utils import create_audit_log
from .models import ComplianceCertificate
from .serializers import (
    ComplianceCertificateSerializer, CertificateCreateSerializer, SendCertificateSerializer, VoidCertificateSerializer,
)
from .services import (
    CertificateError, create_certificate, issue_certificate, send_certificate, void_certificate,
    peek_certificate_number,
)

FORBIDDEN = {'error': 'Insufficient privileges to update this certificate'}


def _modifiable_certificate(request, pk):
    certificate = get_scoped_object_or_404(ComplianceCertificate.objects.all(), request.user, pk=pk)
    if not can_modify_tenant_row(certificate.tenant_id, request.user):
        return certificate, Response(FORBIDDEN, status=status.HTTP_403_FORBIDDEN)
    return certificate, None


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def certificate_list_create(request):
    """List certificates (status, po_number, vendor, search) or create one"""
    if request.method == 'GET':
        queryset = scope_queryset(ComplianceCertificate.objects.all(), request.user)

        status_filter = request.query_params.get('status', None)
        po_number = request.query_params.get('po_number', None)
        vendor = request.query_params.get('vendor', None)
        search = request.query_params.get('search', None)

        if status_filter:
            queryset = queryset.filter(status=status_filter)
        if po_number:
            queryset = queryset.filter(po_number=po_number)
        if vendor:
            queryset = queryset.filter(vendor_id=vendor)
        if search:
            queryset = queryset.filter(certificate_number__icontains=search) | queryset.filter(vendor_name__icontains=search)

        serializer = ComplianceCertificateSerializer(queryset.order_by('-created_date', '-id'), many=True)
        return Response(serializer.data)

    serializer = CertificateCreateSerializer(data=request.data, context={'request': request})
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = dict(serializer.validated_data)
    po = data.pop('purchase_order', None)
    item_ids = data.pop('item_ids', [])
    if po is not None and not can_modify_tenant_row(po.tenant_id, request.user):
        return Response(FORBIDDEN, status=status.HTTP_403_FORBIDDEN)

    try:
        certificate = create_certificate(request.user, data, po=po, item_ids=item_ids, request=request)
    except CertificateError as e:
        return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
    return Response(ComplianceCertificateSerializer(certificate).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def certificate_detail(request, pk):
    """Retrieve, update or delete a certificate; only drafts can be deleted"""
    if request.method == 'GET':
        certificate = get_scoped_object_or_404(ComplianceCertificate.objects.all(), request.user, pk=pk)
        return Response(ComplianceCertificateSerializer(certificate).data)

    certificate, denied = _modifiable_certificate(request, pk)
    if denied:
        return denied

    if request.method == 'DELETE':
        if certificate.status != 'draft':
            return Response(
                {'error': 'Only draft certificates can be deleted; void it instead'},
                status=status.HTTP_400_BAD_REQUEST,
            )
        create_audit_log(
            request=request, action='delete', model_name='ComplianceCertificate', object_id=certificate.id,
            object_name=certificate.certificate_number, tenant_id=certificate.tenant_id,
        )
        certificate.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = ComplianceCertificateSerializer(
        certificate, data=request.data, partial=request.method == 'PATCH', context={'request': request}
    )
    if serializer.is_valid():
        certificate = serializer.save()
        create_audit_log(
            request=request, action='update', model_name='ComplianceCertificate', object_id=certificate.id,
            object_name=certificate.certificate_number, changes=dict(request.data), tenant_id=certificate.tenant_id,
        )
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def certificate_issue(request, pk):
    """Issue a draft certificate"""
    certificate, denied = _modifiable_certificate(request, pk)
    if denied:
        return denied
    try:
        certificate = issue_certificate(certificate, request.user, request=request)
    except CertificateError as e:
        return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
    return Response(ComplianceCertificateSerializer(certificate).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def certificate_send(request, pk):
    """Email a certificate to ``recipients``"""
    certificate, denied = _modifiable_certificate(request, pk)
    if denied:
        return denied

    serializer = SendCertificateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        certificate = send_certificate(
            certificate, serializer.validated_data['recipients'], request.user, request=request
        )
    except CertificateError as e:
        return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
    return Response(ComplianceCertificateSerializer(certificate).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def certificate_void(request, pk):
    """Void a certificate, releasing the PO line weight it certified"""
    certificate, denied = _modifiable_certificate(request, pk)
    if denied:
        return denied

    serializer = VoidCertificateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    try:
        certificate = void_certificate(
            certificate, request.user, reason=serializer.validated_data['reason'], request=request
        )
    except CertificateError as e:
        return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
    return Response(ComplianceCertificateSerializer(certificate).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def certificate_next_number(request):
    """Preview the next certificate number for the caller's tenant"""
    tenant_id = resolve_write_tenant(request.user, request.query_params.get('tenant_id'))
    try:
        year = int(request.query_params.get('year') or timezone.localdate().year)
    except ValueError:
        return Response({'error': 'year must be an integer'}, status=status.HTTP_400_BAD_REQUEST)
    return Response({'certificate_number': peek_certificate_number(tenant_id, year), 'tenant_id': tenant_id})
