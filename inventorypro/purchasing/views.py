import logging
from decimal import Decimal
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.permissions import IsAuthenticated
from django.db.models import Count, Q, Sum
from django.shortcuts import get_object_or_404
from django.utils import timezone
from django_filters.utils import translate_validation
from inventorypro.core.models import AuditLog, User
from inventorypro.core.permissions import IsAdminRole, CanManageWarehouse
from inventorypro.core.responses import success_response, error_response
from inventorypro.core.translation import translate_fields
from inventorypro.core.utils import record_audit
from inventorypro.parties.models import Supplier
from .filters import PurchaseOrderFilter
from .models import PurchaseOrder
from .serializers import (
    PurchaseOrderSerializer, PurchaseOrderWriteSerializer, PurchaseOrderUpdateSerializer, ORDER_FIELD_ALIASES,
)
from .services import (
    create_purchase_order, update_purchase_order, transition_purchase_order, complete_purchase_order,
)

logger = logging.getLogger('inventorypro.purchasing')

ENTITY = 'orden_compra'


def order_queryset():
    return PurchaseOrder.objects.select_related('supplier', 'created_by', 'approved_by').prefetch_related('items')


def order_list_response(queryset):
    data = PurchaseOrderSerializer(queryset, many=True).data
    return success_response(data, count=len(data))


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def purchase_order_list_create(request):
    """List purchase orders (newest first) or create a new one"""
    if request.method == 'GET':
        queryset = order_queryset().order_by('-created_at', '-id')
        filterset = PurchaseOrderFilter(request.query_params, queryset=queryset)
        if not filterset.is_valid():
            raise translate_validation(filterset.errors)
        return order_list_response(filterset.qs)

    data = translate_fields(request.data, ORDER_FIELD_ALIASES)
    if not data.get('supplier') or not data.get('items'):
        logger.warning("Purchase order rejected: supplier or items missing")
        return error_response('Datos incompletos', status.HTTP_400_BAD_REQUEST)

    serializer = PurchaseOrderWriteSerializer(data=data)
    if not serializer.is_valid():
        logger.warning(f"Purchase order validation failed: {serializer.errors}")
        raise ValidationError(serializer.errors)
    order = create_purchase_order(serializer.validated_data, request.user)
    record_audit(
        request=request,
        action=AuditLog.ACTION_CREATE,
        entity=ENTITY,
        entity_id=order.id,
        details=f"Orden de compra creada para {order.supplier_name} por ${order.total_amount}",
    )
    return success_response(
        PurchaseOrderSerializer(order_queryset().get(pk=order.pk)).data,
        message='Orden de compra creada exitosamente',
        status_code=status.HTTP_201_CREATED,
    )


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def purchase_order_stats(request):
    """Order counts per status, total amount and orders created this month"""
    now = timezone.now()
    stats = PurchaseOrder.objects.aggregate(
        total=Count('id'),
        pendientes=Count('id', filter=Q(status=PurchaseOrder.STATUS_PENDING)),
        aprobadas=Count('id', filter=Q(status=PurchaseOrder.STATUS_APPROVED)),
        completadas=Count('id', filter=Q(status=PurchaseOrder.STATUS_COMPLETED)),
        rechazadas=Count('id', filter=Q(status=PurchaseOrder.STATUS_REJECTED)),
        totalAmount=Sum('total_amount'),
        thisMonth=Count('id', filter=Q(created_at__year=now.year, created_at__month=now.month)),
    )
    stats['totalAmount'] = float(stats['totalAmount'] or Decimal('0'))
    return success_response(stats)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def purchase_orders_by_status(request, order_status):
    valid_statuses = [choice for choice, _ in PurchaseOrder.STATUS_CHOICES]
    if order_status not in valid_statuses:
        return error_response('Estado inválido', status.HTTP_400_BAD_REQUEST)
    return order_list_response(order_queryset().filter(status=order_status))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def purchase_orders_by_supplier(request, supplier_id):
    supplier = get_object_or_404(Supplier, pk=supplier_id)
    return order_list_response(order_queryset().filter(supplier=supplier))


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def purchase_order_detail(request, pk):
    """Retrieve, edit (pending only) or delete a purchase order"""
    order = get_object_or_404(order_queryset(), pk=pk)

    if request.method == 'GET':
        return success_response(PurchaseOrderSerializer(order).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = PurchaseOrderUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            logger.warning(f"Purchase order {pk} update validation failed: {serializer.errors}")
            raise ValidationError(serializer.errors)
        order = update_purchase_order(order, serializer.validated_data)
        record_audit(
            request=request,
            action=AuditLog.ACTION_UPDATE,
            entity=ENTITY,
            entity_id=order.id,
            details='Orden de compra actualizada',
        )
        return success_response(
            PurchaseOrderSerializer(order_queryset().get(pk=order.pk)).data,
            message='Orden de compra actualizada exitosamente',
        )
    else:  # DELETE
        if not request.user.has_role(User.ROLE_ADMIN):
            raise PermissionDenied(IsAdminRole.message)
        if order.status == PurchaseOrder.STATUS_COMPLETED:
            return error_response('No se pueden eliminar órdenes completadas', status.HTTP_400_BAD_REQUEST)
        order_id = order.id
        order.delete()
        logger.info(f"Purchase order {order_id} deleted by {request.user.email}")
        record_audit(
            request=request,
            action=AuditLog.ACTION_DELETE,
            entity=ENTITY,
            entity_id=order_id,
            details='Orden de compra eliminada',
        )
        return success_response(message='Orden de compra eliminada exitosamente')


def _transition(request, pk, new_status, action, details, message):
    order = get_object_or_404(PurchaseOrder, pk=pk)
    order = transition_purchase_order(order, new_status, request.user)
    record_audit(request=request, action=action, entity=ENTITY, entity_id=order.id, details=details)
    return success_response(PurchaseOrderSerializer(order_queryset().get(pk=order.pk)).data, message=message)


@api_view(['PATCH'])
@permission_classes([IsAdminRole])
def purchase_order_approve(request, pk):
    return _transition(
        request, pk, PurchaseOrder.STATUS_APPROVED, AuditLog.ACTION_APPROVE,
        'Orden de compra aprobada', 'Orden de compra aprobada exitosamente',
    )


@api_view(['PATCH'])
@permission_classes([IsAdminRole])
def purchase_order_reject(request, pk):
    return _transition(
        request, pk, PurchaseOrder.STATUS_REJECTED, AuditLog.ACTION_REJECT,
        'Orden de compra rechazada', 'Orden de compra rechazada exitosamente',
    )


@api_view(['PATCH'])
@permission_classes([CanManageWarehouse])
def purchase_order_complete(request, pk):
    """Receive an approved order into stock"""
    order = get_object_or_404(PurchaseOrder, pk=pk)
    order = complete_purchase_order(order, request.user)
    record_audit(
        request=request,
        action=AuditLog.ACTION_COMPLETE,
        entity=ENTITY,
        entity_id=order.id,
        details='Orden de compra completada - Stock actualizado',
    )
    return success_response(
        PurchaseOrderSerializer(order_queryset().get(pk=order.pk)).data,
        message='Orden de compra completada - Productos recibidos en inventario',
    )
