import logging

from django.utils import timezone
from django.utils.module_loading import import_string
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from recims.core import views as core_views
from recims.core.tenancy import scope_queryset, can_modify_tenant_row, resolve_write_tenant
from recims.core.utils import create_audit_log
from .models import EntityRecord
from .query import (
    QueryError, normalize_entity_name, is_valid_entity_name, filters_from_params, parse_limit, apply_query,
)
from .registry import core_alias, typed_entity
from .serializers import EntityRecordSerializer

logger = logging.getLogger(__name__)

CORE_VIEWS = {
    'tenants': (core_views.tenant_list_create, core_views.tenant_detail),
    'tenant_categories': (core_views.tenant_category_list_create, core_views.tenant_category_detail),
    'tenant_contacts': (core_views.tenant_contact_list_create, core_views.tenant_contact_detail),
    'users': (core_views.user_list_create, core_views.user_detail),
}


def _resolve(entity):
    """(normalized name, core alias, typed entry) or a 400 response"""
    name = normalize_entity_name(entity)
    if not is_valid_entity_name(name):
        return None, Response({'error': 'Invalid entity name'}, status=status.HTTP_400_BAD_REQUEST)
    compact = name.replace('_', '')
    return (name, core_alias(compact), typed_entity(compact)), None


def _ordered(queryset):
    field_names = {f.name for f in queryset.model._meta.get_fields()}
    if 'created_date' in field_names:
        return queryset.order_by('-created_date', '-id')
    if 'created_at' in field_names:
        return queryset.order_by('-created_at', '-id')
    return queryset.order_by('-id')


def _read_only(entity, entry):
    return Response(
        {'error': f'{entity} records are modified through {entry.endpoint}'},
        status=status.HTTP_405_METHOD_NOT_ALLOWED,
    )


def _request_body(request):
    body = request.data
    if hasattr(body, 'dict'):
        body = body.dict()
    return body if isinstance(body, dict) else None


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def entity_list_create(request, entity):
    """
    List or create records of any entity.

    GET accepts ``sort``, ``limit``, ``q`` (JSON filter object) and plain
    equality filters; filtering happens after tenant scoping.
    """
    resolved, error = _resolve(entity)
    if error:
        return error
    name, alias, typed = resolved
    if alias:
        # Hand the untouched request to the dedicated view
        return CORE_VIEWS[alias][0](request._request)

    if request.method == 'GET':
        try:
            filters = filters_from_params(request.query_params)
            limit = parse_limit(request.query_params.get('limit'))
        except QueryError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            if typed:
                model, serializer_class, _ = typed
                queryset = _ordered(scope_queryset(model.objects.all(), request.user))
                records = [dict(row) for row in serializer_class(queryset, many=True).data]
            else:
                queryset = scope_queryset(EntityRecord.objects.filter(entity_name=name), request.user)
                records = EntityRecordSerializer(queryset.order_by('-created_date', '-id'), many=True).data
            return Response(apply_query(records, filters, request.query_params.get('sort'), limit))
        except Exception as e:
            logger.exception(f"Entity list failed for {name}: {e}")
            return Response({'error': 'Entity operation failed'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if typed:
        model, serializer_class, entry = typed
        if not entry.writable:
            return _read_only(entity, entry)
        serializer = serializer_class(data=request.data, context={'request': request})
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        if entry.create:
            # The service writes its own audit entry
            try:
                obj = import_string(entry.create)(request.user, serializer.validated_data, request=request)
            except ValueError as e:
                return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        else:
            obj = serializer.save()
            create_audit_log(
                request=request, action='create', model_name=model.__name__, object_id=obj.id,
                object_name=str(obj), tenant_id=obj.tenant_id,
            )
        return Response(serializer_class(obj).data, status=status.HTTP_201_CREATED)

    payload = _request_body(request)
    if not payload:
        return Response({'error': 'No data provided'}, status=status.HTTP_400_BAD_REQUEST)
    payload = dict(payload)
    payload.pop('id', None)

    tenant_id = resolve_write_tenant(request.user, payload.get('tenant_id'))
    if tenant_id:
        payload['tenant_id'] = tenant_id
    else:
        payload.pop('tenant_id', None)
    timestamp = timezone.now().isoformat()
    payload.setdefault('created_date', timestamp)
    payload.setdefault('updated_date', timestamp)

    record = EntityRecord.objects.create(entity_name=name, tenant_id=tenant_id, payload=payload)
    create_audit_log(
        request=request, action='create', model_name=name, object_id=record.id, tenant_id=tenant_id,
    )
    return Response(EntityRecordSerializer(record).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def entity_detail(request, entity, pk):
    """Retrieve, merge-update or delete one record"""
    resolved, error = _resolve(entity)
    if error:
        return error
    name, alias, typed = resolved
    if alias:
        return CORE_VIEWS[alias][1](request._request, pk=pk)

    if typed:
        model, serializer_class, entry = typed
        base = model.objects.all()
    else:
        serializer_class, entry = EntityRecordSerializer, None
        base = EntityRecord.objects.filter(entity_name=name)

    if request.method == 'GET':
        obj = scope_queryset(base, request.user).filter(pk=pk).first()
        if obj is None:
            return Response({'error': 'Not found'}, status=status.HTTP_404_NOT_FOUND)
        return Response(serializer_class(obj).data)

    if entry is not None and not entry.writable:
        return _read_only(entity, entry)

    obj = base.filter(pk=pk).first()
    if obj is None:
        return Response({'error': 'Entity not found'}, status=status.HTTP_404_NOT_FOUND)
    if not can_modify_tenant_row(obj.tenant_id, request.user):
        verb = 'delete' if request.method == 'DELETE' else 'update'
        return Response(
            {'error': f'Insufficient privileges to {verb} this record'}, status=status.HTTP_403_FORBIDDEN
        )

    model_name = model.__name__ if typed else name
    if request.method == 'DELETE':
        create_audit_log(
            request=request, action='delete', model_name=model_name, object_id=obj.id, tenant_id=obj.tenant_id,
        )
        obj.delete()
        return Response({'message': 'Deleted successfully'})

    if typed:
        serializer = serializer_class(obj, data=request.data, partial=True, context={'request': request})
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        obj = serializer.save()
    else:
        changes = _request_body(request)
        if not changes:
            return Response({'error': 'No data provided'}, status=status.HTTP_400_BAD_REQUEST)
        payload = {**(obj.payload or {}), **changes}
        payload.pop('id', None)
        tenant_id = resolve_write_tenant(request.user, payload.get('tenant_id'), obj.tenant_id)
        if tenant_id:
            payload['tenant_id'] = tenant_id
        else:
            payload.pop('tenant_id', None)
        payload['updated_date'] = timezone.now().isoformat()
        payload.setdefault('created_date', obj.created_date.isoformat())
        obj.payload = payload
        obj.tenant_id = tenant_id
        obj.save()

    create_audit_log(
        request=request, action='update', model_name=model_name, object_id=obj.id,
        changes=_request_body(request), tenant_id=obj.tenant_id,
    )
    return Response(serializer_class(obj).data)
