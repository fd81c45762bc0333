from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from recims.core.tenancy import scope_queryset, get_scoped_object_or_404, can_modify_tenant_row
from recims.core.utils import create_audit_log
from .filters import CustomerFilter, VendorFilter
from .models import Customer, Vendor
from .serializers import CustomerSerializer, VendorSerializer


def _party_list_create(request, model, serializer_class, filter_class):
    if request.method == 'GET':
        queryset = scope_queryset(model.objects.all(), request.user)
        filterset = filter_class(request.query_params, queryset=queryset)
        queryset = filterset.qs.order_by('-created_date', '-id')
        serializer = serializer_class(queryset, many=True)
        return Response(serializer.data)

    serializer = serializer_class(data=request.data, context={'request': request})
    if serializer.is_valid():
        party = serializer.save()
        create_audit_log(
            request=request, action='create', model_name=model.__name__, object_id=party.id,
            object_name=party.display_name, tenant_id=party.tenant_id,
        )
        return Response(serializer_class(party).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


def _party_detail(request, model, serializer_class, pk):
    party = get_scoped_object_or_404(model.objects.all(), request.user, pk=pk)

    if request.method == 'GET':
        return Response(serializer_class(party).data)

    if not can_modify_tenant_row(party.tenant_id, request.user):
        return Response({'error': 'Insufficient privileges to update this record'}, status=status.HTTP_403_FORBIDDEN)

    if request.method == 'DELETE':
        create_audit_log(
            request=request, action='delete', model_name=model.__name__, object_id=party.id,
            object_name=party.display_name, tenant_id=party.tenant_id,
        )
        party.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = serializer_class(
        party, data=request.data, partial=request.method == 'PATCH', context={'request': request}
    )
    if serializer.is_valid():
        serializer.save()
        create_audit_log(
            request=request, action='update', model_name=model.__name__, object_id=party.id,
            object_name=party.display_name, changes=dict(request.data), tenant_id=party.tenant_id,
        )
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


# Customer views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def customer_list_create(request):
    """List customers (search, status, active, country) or create a customer"""
    return _party_list_create(request, Customer, CustomerSerializer, CustomerFilter)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def customer_detail(request, pk):
    """Retrieve, update or delete a customer"""
    return _party_detail(request, Customer, CustomerSerializer, pk)


# Vendor views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def vendor_list_create(request):
    """List vendors (search, status, active, country) or create a vendor"""
    return _party_list_create(request, Vendor, VendorSerializer, VendorFilter)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def vendor_detail(request, pk):
    """Retrieve, update or delete a vendor"""
    return _party_detail(request, Vendor, VendorSerializer, pk)
