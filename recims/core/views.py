import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.tokens import default_token_generator
from django.core.exceptions import ObjectDoesNotExist
from django.core.mail import send_mail
from django.shortcuts import get_object_or_404
from django.utils.encoding import force_bytes
from django.utils.http import urlsafe_base64_encode
from rest_framework import serializers, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated, AllowAny, BasePermission
from rest_framework.response import Response
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer
from rest_framework_simplejwt.views import TokenRefreshView

from .models import Tenant, TenantCategory, TenantContact, AuditLog
from .serializers import (
    UserSerializer, UserCreateSerializer, MeSummarySerializer,
    TenantSerializer, TenantCategorySerializer, TenantContactSerializer,
    AuditLogSerializer
)
from .tenancy import (
    is_super_admin, is_tenant_admin, actor_tenant_id, scope_queryset, can_access_tenant,
    can_modify_tenant_row
)
from .utils import create_audit_log, normalize_tenant_id, to_boolean

User = get_user_model()
logger = logging.getLogger(__name__)


class IsTenantAdmin(BasePermission):
    """Admins of a tenant and super admins"""
    message = 'Insufficient privileges'

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and is_tenant_admin(request.user))


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['email'] = user.email
        token['tenant_id'] = user.tenant_id
        token['role'] = user.role
        return token


class CustomTokenRefreshSerializer(TokenRefreshSerializer):
    """Token refresh that treats deleted users as an invalid token"""
    def validate(self, attrs):
        try:
            return super().validate(attrs)
        except (InvalidToken, TokenError):
            raise InvalidToken('Token is invalid or expired.')
        except (ObjectDoesNotExist, User.DoesNotExist):
            raise InvalidToken('Token is invalid. User no longer exists.')


class CustomTokenRefreshView(TokenRefreshView):
    serializer_class = CustomTokenRefreshSerializer


def issue_access_token(user):
    return str(CustomTokenObtainPairSerializer.get_token(user).access_token)


@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Exchange email and password for a JWT pair"""
    serializer = CustomTokenObtainPairSerializer(data=request.data)
    try:
        serializer.is_valid(raise_exception=True)
    except (AuthenticationFailed, serializers.ValidationError):
        return Response({'error': 'Invalid email or password'}, status=status.HTTP_401_UNAUTHORIZED)

    user = serializer.user
    create_audit_log(
        request=request, user=user, action='login', model_name='User',
        object_id=user.id, object_name=user.email,
    )
    return Response({
        'token': serializer.validated_data['access'],
        'refresh': serializer.validated_data['refresh'],
        'user': MeSummarySerializer(user).data,
    })


@api_view(['GET', 'PUT', 'PATCH'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Get or update the current user"""
    user = request.user
    if request.method == 'GET':
        return Response(MeSummarySerializer(user).data)

    updatable_fields = ['full_name']
    if is_super_admin(user):
        updatable_fields += ['tenant_id', 'role']

    updates = {field: request.data[field] for field in updatable_fields if field in request.data}
    if not updates:
        return Response({'error': 'No valid fields provided'}, status=status.HTTP_400_BAD_REQUEST)

    if 'tenant_id' in updates:
        updates['tenant_id'] = normalize_tenant_id(updates['tenant_id'])
    if 'role' in updates:
        role = str(updates['role'] or '').lower()
        if role not in dict(User.ROLE_CHOICES):
            return Response({'error': 'Invalid role'}, status=status.HTTP_400_BAD_REQUEST)
        updates['role'] = role

    for field, value in updates.items():
        setattr(user, field, value)
    user.save(update_fields=list(updates.keys()) + ['updated_at'])

    return Response({
        'user': MeSummarySerializer(user).data,
        'token': issue_access_token(user),
    })


@api_view(['POST'])
@permission_classes([AllowAny])
def password_reset(request):
    """Send a reset link when the account exists; the answer never tells"""
    email = (request.data.get('email') or '').strip()
    user = User.objects.filter(email__iexact=email, is_active=True).first() if email else None
    if user:
        uid = urlsafe_base64_encode(force_bytes(user.pk))
        token = default_token_generator.make_token(user)
        link = f"{settings.FRONTEND_URL.rstrip('/')}/ResetPassword?uid={uid}&token={token}"
        try:
            send_mail(
                subject='RecIMS password reset',
                message=f"Use the link below to reset your password:\n\n{link}\n",
                from_email=settings.DEFAULT_FROM_EMAIL,
                recipient_list=[user.email],
            )
        except Exception as e:
            logger.error(f"Password reset email to {user.email} failed: {str(e)}")
    return Response({'message': 'If that email exists, a reset link has been sent'})


# Tenant views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def tenant_list_create(request):
    """List visible tenants or create a tenant (super admin only)"""
    if request.method == 'GET':
        queryset = Tenant.objects.all()
        if not is_super_admin(request.user):
            queryset = queryset.filter(tenant_id=actor_tenant_id(request.user))
        serializer = TenantSerializer(queryset, many=True)
        return Response(serializer.data)

    if not is_super_admin(request.user):
        return Response({'error': 'Insufficient privileges to manage tenants'}, status=status.HTTP_403_FORBIDDEN)
    serializer = TenantSerializer(data=request.data, context={'request': request})
    if serializer.is_valid():
        tenant = serializer.save()
        create_audit_log(
            request=request, action='create', model_name='Tenant', object_id=tenant.id,
            object_name=tenant.name, object_reference=tenant.tenant_id, tenant_id=tenant.tenant_id,
        )
        return Response(TenantSerializer(tenant).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def tenant_detail(request, pk):
    """Retrieve, update or delete a tenant"""
    tenant = get_object_or_404(Tenant, pk=pk)
    if not is_super_admin(request.user) and tenant.tenant_id != actor_tenant_id(request.user):
        return Response({'error': 'Not found'}, status=status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        return Response(TenantSerializer(tenant).data)

    if not is_super_admin(request.user):
        return Response({'error': 'Insufficient privileges to manage tenants'}, status=status.HTTP_403_FORBIDDEN)

    if request.method == 'DELETE':
        create_audit_log(
            request=request, action='delete', model_name='Tenant', object_id=tenant.id,
            object_name=tenant.name, object_reference=tenant.tenant_id, tenant_id=tenant.tenant_id,
        )
        tenant.delete()
        return Response({'message': 'Deleted successfully'})

    serializer = TenantSerializer(
        tenant, data=request.data, partial=request.method == 'PATCH', context={'request': request}
    )
    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


def _tenant_owned_list_create(request, model, serializer_class):
    if request.method == 'GET':
        queryset = scope_queryset(model.objects.all(), request.user).order_by('-created_date', '-id')
        return Response(serializer_class(queryset, many=True).data)

    serializer = serializer_class(data=request.data, context={'request': request})
    if serializer.is_valid():
        obj = serializer.save()
        create_audit_log(
            request=request, action='create', model_name=model.__name__, object_id=obj.id,
            object_name=str(obj), tenant_id=obj.tenant_id,
        )
        return Response(serializer_class(obj).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


def _tenant_owned_detail(request, model, serializer_class, pk, label):
    obj = get_object_or_404(model, pk=pk)
    if not can_access_tenant(obj.tenant_id, request.user):
        return Response({'error': 'Not found'}, status=status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        return Response(serializer_class(obj).data)

    if not can_modify_tenant_row(obj.tenant_id, request.user):
        verb = 'delete' if request.method == 'DELETE' else 'update'
        return Response(
            {'error': f'Insufficient privileges to {verb} {label}'},
            status=status.HTTP_403_FORBIDDEN
        )

    if request.method == 'DELETE':
        create_audit_log(
            request=request, action='delete', model_name=model.__name__, object_id=obj.id,
            object_name=str(obj), tenant_id=obj.tenant_id,
        )
        obj.delete()
        return Response({'message': 'Deleted successfully'})

    serializer = serializer_class(
        obj, data=request.data, partial=request.method == 'PATCH', context={'request': request}
    )
    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def tenant_category_list_create(request):
    """List or create tenant categories"""
    return _tenant_owned_list_create(request, TenantCategory, TenantCategorySerializer)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def tenant_category_detail(request, pk):
    return _tenant_owned_detail(request, TenantCategory, TenantCategorySerializer, pk, 'tenant category')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def tenant_contact_list_create(request):
    """List or create tenant contacts, filterable by contact_type and is_active"""
    if request.method == 'GET':
        queryset = scope_queryset(TenantContact.objects.all(), request.user)
        contact_type = request.query_params.get('contact_type')
        if contact_type:
            queryset = queryset.filter(contact_type=contact_type.lower())
        is_active = request.query_params.get('is_active')
        if is_active is not None and is_active != '':
            queryset = queryset.filter(is_active=to_boolean(is_active, True))
        queryset = queryset.order_by('-created_date', '-id')
        return Response(TenantContactSerializer(queryset, many=True).data)
    return _tenant_owned_list_create(request, TenantContact, TenantContactSerializer)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def tenant_contact_detail(request, pk):
    return _tenant_owned_detail(request, TenantContact, TenantContactSerializer, pk, 'tenant contact')


# User views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsTenantAdmin])
def user_list_create(request):
    """List users or create a user; tenant admins only see their tenant"""
    if request.method == 'GET':
        users = User.objects.all().order_by('email')
        if not is_super_admin(request.user):
            users = users.filter(tenant_id=actor_tenant_id(request.user))
        return Response(UserSerializer(users, many=True).data)

    serializer = UserCreateSerializer(data=request.data, context={'request': request})
    if serializer.is_valid():
        user = serializer.save()
        create_audit_log(
            request=request, action='create', model_name='User', object_id=user.id,
            object_name=user.email, tenant_id=user.tenant_id,
        )
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsTenantAdmin])
def user_detail(request, pk):
    """Retrieve, update or delete a user"""
    user = get_object_or_404(User, pk=pk)
    if not is_super_admin(request.user) and normalize_tenant_id(user.tenant_id) != actor_tenant_id(request.user):
        return Response({'error': 'Not found'}, status=status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        return Response(UserSerializer(user).data)
    elif request.method == 'DELETE':
        if user.pk == request.user.pk:
            return Response({'error': 'You cannot delete your own account'}, status=status.HTTP_400_BAD_REQUEST)
        create_audit_log(
            request=request, action='delete', model_name='User', object_id=user.id,
            object_name=user.email, tenant_id=user.tenant_id,
        )
        user.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = UserSerializer(
        user, data=request.data, partial=request.method == 'PATCH', context={'request': request}
    )
    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


# AuditLog views (read-only)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_list(request):
    """List audit logs with filtering"""
    queryset = scope_queryset(AuditLog.objects.select_related('user'), request.user)

    # Operators only see their own trail
    if not is_tenant_admin(request.user):
        queryset = queryset.filter(user=request.user)

    action_filter = request.query_params.get('action', None)
    if action_filter:
        queryset = queryset.filter(action=action_filter)

    model_filter = request.query_params.get('model', None)
    if model_filter:
        queryset = queryset.filter(model_name=model_filter)

    date_from = request.query_params.get('date_from', None)
    date_to = request.query_params.get('date_to', None)
    if date_from:
        queryset = queryset.filter(created_at__date__gte=date_from)
    if date_to:
        queryset = queryset.filter(created_at__date__lte=date_to)

    queryset = queryset.order_by('-created_at')
    serializer = AuditLogSerializer(queryset, many=True)
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_detail(request, pk):
    """Retrieve an audit log"""
    audit_log = get_object_or_404(AuditLog.objects.select_related('user'), pk=pk)

    if not can_access_tenant(audit_log.tenant_id, request.user):
        return Response({'error': 'Not found'}, status=status.HTTP_404_NOT_FOUND)
    if not is_tenant_admin(request.user) and audit_log.user_id != request.user.id:
        return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)

    serializer = AuditLogSerializer(audit_log)
    return Response(serializer.data)
