import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from inventorypro.catalog.views import visible_products
from inventorypro.core.permissions import scoped_warehouse_id
from inventorypro.core.responses import success_response, error_response
from inventorypro.core.translation import translate_fields
from inventorypro.core.utils import record_audit
from .filters import MovementFilter
from .models import Movement
from .serializers import MovementSerializer, MovementCreateSerializer, MOVEMENT_FIELD_ALIASES
from .services import register_movement

logger = logging.getLogger('inventorypro.inventory')


def visible_movements(user):
    queryset = Movement.objects.select_related('product', 'user', 'warehouse')
    if scoped_warehouse_id(user) is not None:
        queryset = queryset.filter(product__in=visible_products(user))
    return queryset


def _is_missing(value):
    return value is None or (isinstance(value, str) and not value.strip())


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def movement_list_create(request):
    """List movements (newest first) or register a new movement"""
    if request.method == 'GET':
        queryset = visible_movements(request.user).order_by('-date', '-id')
        filterset = MovementFilter(request.query_params, queryset=queryset)
        return success_response(MovementSerializer(filterset.qs, many=True).data)

    data = translate_fields(request.data, MOVEMENT_FIELD_ALIASES)
    if any(_is_missing(data.get(field)) for field in ('type', 'product', 'quantity')):
        logger.warning("Movement rejected: type, product or quantity missing")
        return error_response('Tipo, producto y cantidad son requeridos', status.HTTP_400_BAD_REQUEST)

    serializer = MovementCreateSerializer(data=data)
    if not serializer.is_valid():
        logger.warning(f"Movement validation failed: {serializer.errors}")
        raise ValidationError(serializer.errors)

    try:
        product_id = int(data['product'])
    except (TypeError, ValueError):
        raise ValidationError({'product': 'Producto inválido'})
    product = get_object_or_404(visible_products(request.user).filter(active=True), pk=product_id)

    validated = serializer.validated_data
    movement = register_movement(
        product,
        validated['type'],
        validated['quantity'],
        user=request.user,
        observation=validated['observation'],
        lot_number=validated['lot_number'],
        reason=validated['reason'],
        warehouse=validated['warehouse'],
        date=validated['date'],
    )

    record_audit(
        request=request,
        action=f"MOVIMIENTO_{movement.type.upper()}",
        entity='movimientos',
        entity_id=movement.id,
        details=(
            f"{movement.type} de {movement.quantity} unidades de {movement.product_name}. "
            f"Nuevo stock: {movement.new_stock}"
        ),
    )
    return success_response(
        {'movimiento': MovementSerializer(movement).data, 'nuevoStock': movement.new_stock},
        message=f"Movimiento de {movement.type} registrado exitosamente",
        status_code=status.HTTP_201_CREATED,
    )


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def movement_detail(request, pk):
    """Retrieve a movement"""
    movement = get_object_or_404(visible_movements(request.user), pk=pk)
    return success_response(MovementSerializer(movement).data)
