import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from django.db.models import Q
from django.shortcuts import get_object_or_404
from inventorypro.core.models import AuditLog
from inventorypro.core.responses import success_response
from inventorypro.core.utils import record_audit
from .models import Supplier
from .serializers import SupplierSerializer

logger = logging.getLogger('inventorypro.parties')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def supplier_list_create(request):
    """List all suppliers or create a new supplier"""
    if request.method == 'GET':
        queryset = Supplier.objects.all().order_by('name')
        search = request.query_params.get('search', None)
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) |
                Q(nit__icontains=search) |
                Q(contact__icontains=search) |
                Q(email__icontains=search)
            )
        return success_response(SupplierSerializer(queryset, many=True).data)

    serializer = SupplierSerializer(data=request.data)
    if not serializer.is_valid():
        raise ValidationError(serializer.errors)
    supplier = serializer.save()
    logger.info(f"Supplier '{supplier.name}' created by {request.user.email}")
    record_audit(
        request=request,
        action=AuditLog.ACTION_CREATE,
        entity='proveedores',
        entity_id=supplier.id,
        details=f"Proveedor {supplier.name} creado",
    )
    return success_response(serializer.data, message='Proveedor creado exitosamente', status_code=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def supplier_detail(request, pk):
    """Retrieve, update or soft delete a supplier"""
    supplier = get_object_or_404(Supplier, pk=pk)

    if request.method == 'GET':
        return success_response(SupplierSerializer(supplier).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = SupplierSerializer(supplier, data=request.data, partial=True)
        if not serializer.is_valid():
            raise ValidationError(serializer.errors)
        supplier = serializer.save()
        record_audit(
            request=request,
            action=AuditLog.ACTION_UPDATE,
            entity='proveedores',
            entity_id=supplier.id,
            details=f"Proveedor {supplier.name} actualizado",
        )
        return success_response(serializer.data, message='Proveedor actualizado exitosamente')
    else:  # DELETE
        supplier.active = False
        supplier.save(update_fields=['active', 'updated_at'])
        logger.info(f"Supplier {pk} ({supplier.name}) deactivated by {request.user.email}")
        record_audit(
            request=request,
            action=AuditLog.ACTION_DELETE,
            entity='proveedores',
            entity_id=supplier.id,
            details=f"Proveedor {supplier.name} desactivado",
        )
        return success_response(SupplierSerializer(supplier).data, message='Proveedor eliminado exitosamente')


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def supplier_products(request, pk):
    """Active products supplied by a supplier"""
    from inventorypro.catalog.models import Product
    from inventorypro.catalog.serializers import ProductSerializer

    supplier = get_object_or_404(Supplier, pk=pk)
    products = Product.objects.filter(supplier=supplier, active=True).order_by('name')
    return success_response(ProductSerializer(products, many=True).data)
