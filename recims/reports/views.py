import logging
from datetime import datetime, timedelta

from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from recims.core.tenancy import actor_tenant_id, is_super_admin
from .queries import BUCKETS, dashboard_data, inbound_data, inventory_data, compliance_data, sales_data

logger = logging.getLogger('recims.reports')

DATE_ERROR = "Invalid date format. Use YYYY-MM-DD"


def _report_scope(request):
    """(tenant_id, all_tenants); super admins share the ALL cache scope"""
    if is_super_admin(request.user):
        return None, True
    return actor_tenant_id(request.user), False


def _date_range(request, default_days=30):
    """Parse ``date_from``/``date_to``; defaults to the last ``default_days`` days"""
    date_from = request.query_params.get('date_from', None)
    date_to = request.query_params.get('date_to', None)

    if not date_to:
        date_to = timezone.now().date()
    else:
        date_to = datetime.strptime(date_to, '%Y-%m-%d').date()

    if not date_from:
        date_from = date_to - timedelta(days=default_days)
    else:
        date_from = datetime.strptime(date_from, '%Y-%m-%d').date()

    return date_from, date_to


def _bucket(request, default):
    bucket = request.query_params.get('bucket', default)
    if bucket not in BUCKETS:
        raise ValueError(f"bucket must be one of: {', '.join(BUCKETS)}")
    return bucket


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard(request):
    """Dashboard KPIs for the period"""
    try:
        date_from, date_to = _date_range(request)
    except ValueError:
        return Response({'error': DATE_ERROR}, status=status.HTTP_400_BAD_REQUEST)
    tenant_id, all_tenants = _report_scope(request)
    logger.info(f"User {request.user.email} requested dashboard (tenant={tenant_id or 'ALL'}, {date_from}..{date_to})")
    return Response(dashboard_data(tenant_id, all_tenants, date_from, date_to))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inbound_report(request):
    """Inbound net weight and load count per day, week or month"""
    try:
        date_from, date_to = _date_range(request)
    except ValueError:
        return Response({'error': DATE_ERROR}, status=status.HTTP_400_BAD_REQUEST)
    try:
        bucket = _bucket(request, 'day')
    except ValueError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    tenant_id, all_tenants = _report_scope(request)
    logger.info(f"User {request.user.email} requested inbound report (bucket={bucket}, {date_from}..{date_to})")
    return Response(inbound_data(tenant_id, all_tenants, date_from, date_to, bucket=bucket))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inventory_report(request):
    tenant_id, all_tenants = _report_scope(request)
    return Response(inventory_data(tenant_id, all_tenants))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def compliance_report(request):
    """Certified weight per month and average diversion rate; defaults to the last year"""
    try:
        date_from, date_to = _date_range(request, default_days=365)
    except ValueError:
        return Response({'error': DATE_ERROR}, status=status.HTTP_400_BAD_REQUEST)
    tenant_id, all_tenants = _report_scope(request)
    return Response(compliance_data(tenant_id, all_tenants, date_from, date_to))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def sales_report(request):
    try:
        date_from, date_to = _date_range(request)
    except ValueError:
        return Response({'error': DATE_ERROR}, status=status.HTTP_400_BAD_REQUEST)
    try:
        bucket = _bucket(request, 'month')
    except ValueError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    tenant_id, all_tenants = _report_scope(request)
    logger.info(f"User {request.user.email} requested sales report (bucket={bucket}, {date_from}..{date_to})")
    return Response(sales_data(tenant_id, all_tenants, date_from, date_to, bucket=bucket))
