import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from django.db.models import Q
from django.shortcuts import get_object_or_404
from inventorypro.core.models import AuditLog
from inventorypro.core.permissions import scoped_warehouse_id
from inventorypro.core.responses import success_response, error_response
from inventorypro.core.translation import translate_fields
from inventorypro.core.utils import record_audit
from .filters import ProductFilter
from .models import Product
from .serializers import ProductSerializer, PRODUCT_FIELD_ALIASES
from .utils import group_stock_alerts, STATUS_CRITICAL, STATUS_WARNING, STATUS_EXCESS

logger = logging.getLogger('inventorypro.catalog')


def visible_products(user):
    """Products the user may see; an encargado_bodega is confined to their warehouse"""
    queryset = Product.objects.select_related('warehouse', 'supplier').prefetch_related('warehouses')
    warehouse_id = scoped_warehouse_id(user)
    if warehouse_id is not None:
        queryset = queryset.filter(Q(warehouse_id=warehouse_id) | Q(warehouses__id=warehouse_id)).distinct()
    return queryset


def _is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def product_list_create(request):
    """List active products or create a new product"""
    if request.method == 'GET':
        queryset = visible_products(request.user).filter(active=True).order_by('-created_at', '-id')
        filterset = ProductFilter(request.query_params, queryset=queryset)
        return success_response(ProductSerializer(filterset.qs, many=True).data)

    data = translate_fields(request.data, PRODUCT_FIELD_ALIASES)
    if _is_blank(data.get('name')) or _is_blank(data.get('price')):
        logger.warning("Product creation rejected: name or price missing")
        return error_response('Nombre y precio son requeridos', status.HTTP_400_BAD_REQUEST)

    serializer = ProductSerializer(data=data)
    if not serializer.is_valid():
        logger.warning(f"Product creation validation failed: {serializer.errors}")
        raise ValidationError(serializer.errors)
    product = serializer.save()
    logger.info(f"Product '{product.name}' created by {request.user.email}")
    record_audit(
        request=request,
        action=AuditLog.ACTION_CREATE,
        entity='productos',
        entity_id=product.id,
        details=f"Producto {product.name} creado",
    )
    return success_response(serializer.data, message='Producto creado correctamente', status_code=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def product_detail(request, pk):
    """Retrieve, update or soft delete a product"""
    product = get_object_or_404(visible_products(request.user), pk=pk)

    if request.method == 'GET':
        return success_response(ProductSerializer(product).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = ProductSerializer(product, data=request.data, partial=True)
        if not serializer.is_valid():
            logger.warning(f"Product {pk} update validation failed: {serializer.errors}")
            raise ValidationError(serializer.errors)
        product = serializer.save()
        if getattr(product, '_prefetched_objects_cache', None):
            # warehouses may have changed, drop the stale prefetch
            product._prefetched_objects_cache = {}
        record_audit(
            request=request,
            action=AuditLog.ACTION_UPDATE,
            entity='productos',
            entity_id=product.id,
            details=f"Producto {product.name} actualizado",
        )
        return success_response(serializer.data, message='Producto actualizado correctamente')
    else:  # DELETE
        product.active = False
        product.save(update_fields=['active', 'updated_at'])
        logger.info(f"Product {pk} ({product.name}) deactivated by {request.user.email}")
        record_audit(
            request=request,
            action=AuditLog.ACTION_DELETE,
            entity='productos',
            entity_id=product.id,
            details=f"Producto {product.name} eliminado",
        )
        return success_response(ProductSerializer(product).data, message='Producto eliminado correctamente')


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def product_alerts(request):
    """Active products grouped by stock alert level"""
    products = visible_products(request.user).filter(active=True).order_by('name')
    alerts = group_stock_alerts(products)
    return success_response({
        level: ProductSerializer(alerts[level], many=True).data
        for level in (STATUS_CRITICAL, STATUS_WARNING, STATUS_EXCESS)
    })
