import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from django.db.models import Q
from django.shortcuts import get_object_or_404
from inventorypro.core.models import AuditLog
from inventorypro.core.permissions import ReadOnlyOrWarehouseManager
from inventorypro.core.responses import success_response
from inventorypro.core.utils import record_audit
from .models import Warehouse
from .serializers import WarehouseSerializer

logger = logging.getLogger('inventorypro.locations')


@api_view(['GET', 'POST'])
@permission_classes([ReadOnlyOrWarehouseManager])
def warehouse_list_create(request):
    """List all warehouses or create a new warehouse"""
    if request.method == 'GET':
        warehouses = Warehouse.objects.all().order_by('name')
        active = request.query_params.get('active')
        if active is not None:
            warehouses = warehouses.filter(active=active.lower() in ('1', 'true', 'yes'))
        return success_response(WarehouseSerializer(warehouses, many=True).data)

    serializer = WarehouseSerializer(data=request.data)
    if not serializer.is_valid():
        logger.warning(f"Warehouse creation validation failed: {serializer.errors}")
        raise ValidationError(serializer.errors)
    warehouse = serializer.save()
    logger.info(f"Warehouse '{warehouse.name}' created by {request.user.email}")
    record_audit(
        request=request,
        action=AuditLog.ACTION_CREATE,
        entity='bodegas',
        entity_id=warehouse.id,
        details=f"Bodega {warehouse.name} creada",
    )
    return success_response(serializer.data, message='Bodega creada exitosamente', status_code=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([ReadOnlyOrWarehouseManager])
def warehouse_detail(request, pk):
    """Retrieve, update or soft delete a warehouse"""
    warehouse = get_object_or_404(Warehouse, pk=pk)

    if request.method == 'GET':
        return success_response(WarehouseSerializer(warehouse).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = WarehouseSerializer(warehouse, data=request.data, partial=True)
        if not serializer.is_valid():
            logger.warning(f"Warehouse update validation failed: {serializer.errors}")
            raise ValidationError(serializer.errors)
        warehouse = serializer.save()
        record_audit(
            request=request,
            action=AuditLog.ACTION_UPDATE,
            entity='bodegas',
            entity_id=warehouse.id,
            details=f"Bodega {warehouse.name} actualizada",
        )
        return success_response(serializer.data, message='Bodega actualizada exitosamente')
    else:  # DELETE
        warehouse.active = False
        warehouse.save(update_fields=['active', 'updated_at'])
        logger.info(f"Warehouse {pk} ({warehouse.name}) deactivated by {request.user.email}")
        record_audit(
            request=request,
            action=AuditLog.ACTION_DELETE,
            entity='bodegas',
            entity_id=warehouse.id,
            details=f"Bodega {warehouse.name} desactivada",
        )
        return success_response(WarehouseSerializer(warehouse).data, message='Bodega eliminada exitosamente')


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def warehouse_products(request, pk):
    """Active products stored in a warehouse (primary or secondary assignment)"""
    from inventorypro.catalog.models import Product
    from inventorypro.catalog.serializers import ProductSerializer

    warehouse = get_object_or_404(Warehouse, pk=pk)
    products = Product.objects.filter(
        Q(warehouse=warehouse) | Q(warehouses=warehouse),
        active=True,
    ).distinct().order_by('name')
    return success_response(ProductSerializer(products, many=True).data)
