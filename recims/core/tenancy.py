"""
Tenant scoping helpers

Non-super-admins read their own tenant's rows plus shared rows (tenant_id NULL)
and always write into their own tenant. Super admins read and write everywhere.
"""
from django.db.models import Q
from django.shortcuts import get_object_or_404

from .exceptions import TenantAccessError
from .utils import normalize_tenant_id


def normalize_role(user):
    role = getattr(user, 'role', '') or ''
    return role.lower() if isinstance(role, str) else ''


def is_super_admin(user):
    if not user or not user.is_authenticated:
        return False
    return normalize_role(user) == 'super_admin'


def is_tenant_admin(user):
    return normalize_role(user) in ('admin', 'super_admin')


def actor_tenant_id(user):
    return normalize_tenant_id(getattr(user, 'tenant_id', None))


def scope_queryset(queryset, user, field='tenant_id'):
    """Restrict a queryset to the rows the user may see"""
    if is_super_admin(user):
        return queryset
    tenant_id = actor_tenant_id(user)
    condition = Q(**{f'{field}__isnull': True})
    if tenant_id:
        condition |= Q(**{field: tenant_id})
    return queryset.filter(condition)


def can_access_tenant(row_tenant_id, user):
    """Shared rows are accessible to everyone"""
    if is_super_admin(user):
        return True
    row_tenant = normalize_tenant_id(row_tenant_id)
    if not row_tenant:
        return True
    return row_tenant == actor_tenant_id(user)


def can_modify_tenant_row(row_tenant_id, user):
    """Owned rows are only writable by their own tenant"""
    if is_super_admin(user):
        return True
    return normalize_tenant_id(row_tenant_id) == actor_tenant_id(user)


def ensure_can_modify(row_tenant_id, user, message='Insufficient privileges to update this record'):
    if not can_modify_tenant_row(row_tenant_id, user):
        raise TenantAccessError(message)


def resolve_write_tenant(user, requested=None, existing=None):
    """Tenant a write lands in: the actor's own unless a super admin asks otherwise"""
    if is_super_admin(user):
        return normalize_tenant_id(requested or existing or actor_tenant_id(user))
    return normalize_tenant_id(actor_tenant_id(user), existing)


def stamp_tenant(data, user, existing=None):
    """Return a copy of ``data`` with tenant_id set per the write rule"""
    stamped = dict(data)
    stamped['tenant_id'] = resolve_write_tenant(user, stamped.get('tenant_id'), existing)
    return stamped


def get_scoped_object_or_404(queryset, user, **lookup):
    """get_object_or_404 over the rows the user may see"""
    return get_object_or_404(scope_queryset(queryset, user), **lookup)
