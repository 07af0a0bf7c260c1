import logging

from django.conf import settings
from django.contrib.auth import authenticate
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework_simplejwt.tokens import RefreshToken

from .filters import AuditLogFilter
from .models import User, AuditLog
from .permissions import IsAdminRole, CanViewAudit
from .responses import success_response, error_response
from .serializers import UserSerializer, UserWriteSerializer, RegisterSerializer, AuditLogSerializer
from .translation import translate_fields
from .utils import record_audit

logger = logging.getLogger(__name__)


def issue_tokens(user):
    refresh = RefreshToken.for_user(user)
    refresh['role'] = user.role
    refresh['name'] = user.name
    return {'access': str(refresh.access_token), 'refresh': str(refresh)}


def has_duplicate_email(errors):
    return any(getattr(detail, 'code', None) == 'duplicate_email' for detail in errors.get('email', []))


def parse_limit(request, default):
    """Read `?limit=` as a positive int, falling back to `default`"""
    try:
        limit = int(request.query_params.get('limit', default))
    except (TypeError, ValueError):
        raise ValidationError({'limit': 'El límite debe ser un número entero'})
    return limit if limit > 0 else default


# Auth views
@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """User registration endpoint"""
    data = translate_fields(request.data, RegisterSerializer.field_aliases)
    if not data.get('name') or not data.get('email') or not data.get('password'):
        return error_response('Nombre, email y contraseña son requeridos')
    if len(str(data['password'])) < 6:
        return error_response('La contraseña debe tener al menos 6 caracteres')
    if User.objects.filter(email__iexact=data['email']).exists():
        return error_response('El email ya está registrado', status_code=status.HTTP_409_CONFLICT)

    serializer = RegisterSerializer(data=data)
    serializer.is_valid(raise_exception=True)
    user = User.objects.create_user(
        email=serializer.validated_data['email'],
        password=serializer.validated_data['password'],
        name=serializer.validated_data['name'],
        role=serializer.validated_data['role'],
        is_active=True,
    )
    logger.info(f"User {user.email} registered with role {user.role}")

    record_audit(
        request=request,
        user=user,
        action=AuditLog.ACTION_REGISTER,
        entity='usuarios',
        entity_id=user.id,
        details=f"Usuario {user.name} se registró con rol {user.role}",
    )
    return success_response(
        message='Usuario registrado exitosamente',
        status_code=status.HTTP_201_CREATED,
        user=UserSerializer(user).data,
        **issue_tokens(user),
    )


@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Exchange email/password for JWT tokens"""
    email = request.data.get('email')
    password = request.data.get('password')
    if not email or not password:
        return error_response('Email y contraseña son requeridos')

    user = User.objects.filter(email__iexact=email).first()
    if user is None:
        logger.warning(f"Login attempt for unknown email {email}")
        return error_response('Credenciales inválidas', status_code=status.HTTP_401_UNAUTHORIZED)
    if not user.is_active:
        logger.warning(f"Login attempt for disabled user {email}")
        return error_response('Usuario desactivado', status_code=status.HTTP_403_FORBIDDEN)
    if authenticate(request._request, email=user.email, password=password) is None:
        return error_response('Credenciales inválidas', status_code=status.HTTP_401_UNAUTHORIZED)

    record_audit(
        request=request,
        user=user,
        action=AuditLog.ACTION_LOGIN,
        entity='usuarios',
        entity_id=user.id,
        details=f"Usuario {user.name} inició sesión",
    )
    return success_response(
        message='Login exitoso',
        user=UserSerializer(user).data,
        **issue_tokens(user),
    )


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    """Stateless logout: only leaves a trace in the audit log"""
    record_audit(
        request=request,
        action=AuditLog.ACTION_LOGOUT,
        entity='usuarios',
        entity_id=request.user.id,
        details=f"Usuario {request.user.name} cerró sesión",
    )
    return success_response(message='Sesión cerrada exitosamente')


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Get current user"""
    return success_response(UserSerializer(request.user).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def auth_user_detail(request, pk):
    """Get a user by id (session restore on the frontend)"""
    user = get_object_or_404(User, pk=pk)
    return success_response(UserSerializer(user).data)


# User views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def user_list_create(request):
    """List all users or create a new user"""
    if request.method == 'GET':
        users = User.objects.select_related('warehouse').order_by('-created_at')
        return success_response(UserSerializer(users, many=True).data)

    serializer = UserWriteSerializer(data=request.data)
    if not serializer.is_valid():
        if has_duplicate_email(serializer.errors):
            return error_response('El email ya está registrado', status_code=status.HTTP_409_CONFLICT)
        raise ValidationError(serializer.errors)
    user = serializer.save()
    logger.info(f"User {user.email} created by {request.user.email}")
    record_audit(
        request=request,
        action=AuditLog.ACTION_CREATE,
        entity='usuarios',
        entity_id=user.id,
        details=f"Usuario {user.name} creado con rol {user.role}",
    )
    return success_response(
        UserSerializer(user).data,
        message='Usuario creado exitosamente',
        status_code=status.HTTP_201_CREATED,
    )


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
def user_detail(request, pk):
    """Retrieve, update or soft delete a user"""
    user = get_object_or_404(User, pk=pk)

    if request.method == 'GET':
        return success_response(UserSerializer(user).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = UserWriteSerializer(user, data=request.data, partial=True)
        if not serializer.is_valid():
            if has_duplicate_email(serializer.errors):
                return error_response('El email ya está registrado', status_code=status.HTTP_409_CONFLICT)
            raise ValidationError(serializer.errors)
        user = serializer.save()
        record_audit(
            request=request,
            action=AuditLog.ACTION_UPDATE,
            entity='usuarios',
            entity_id=user.id,
            details=f"Usuario {user.name} actualizado",
        )
        return success_response(UserSerializer(user).data, message='Usuario actualizado exitosamente')
    else:  # DELETE
        user.is_active = False
        user.save(update_fields=['is_active', 'updated_at'])
        logger.info(f"User {user.email} deactivated by {request.user.email}")
        record_audit(
            request=request,
            action=AuditLog.ACTION_DELETE,
            entity='usuarios',
            entity_id=user.id,
            details=f"Usuario {user.name} desactivado",
        )
        return success_response(UserSerializer(user).data, message='Usuario eliminado exitosamente')


# AuditLog views (read-only)
@api_view(['GET'])
@permission_classes([IsAuthenticated, CanViewAudit])
def audit_log_list(request):
    """List audit logs with filtering"""
    filterset = AuditLogFilter(request.query_params, queryset=AuditLog.objects.all())
    if not filterset.is_valid():
        raise ValidationError(filterset.errors)
    limit = parse_limit(request, settings.AUDIT_DEFAULT_LIMIT)
    queryset = filterset.qs.order_by('-timestamp', '-id')[:limit]
    return success_response(AuditLogSerializer(queryset, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated, CanViewAudit])
def audit_log_detail(request, pk):
    """Retrieve an audit log"""
    audit_log = get_object_or_404(AuditLog, pk=pk)
    return success_response(AuditLogSerializer(audit_log).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated, CanViewAudit])
def audit_log_user_activity(request, user_id):
    """Recent activity of one user"""
    limit = parse_limit(request, 50)
    queryset = AuditLog.objects.filter(user_id=user_id).order_by('-timestamp', '-id')[:limit]
    return success_response(AuditLogSerializer(queryset, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated, CanViewAudit])
def audit_log_entity_history(request, entity, entity_id):
    """History of a single record"""
    limit = parse_limit(request, 50)
    queryset = AuditLog.objects.filter(entity=entity, entity_id=str(entity_id)).order_by('-timestamp', '-id')[:limit]
    return success_response(AuditLogSerializer(queryset, many=True).data)
