"""
Inventory reports

The summary is cached (REPORTS_CACHE_TTL) per tenant scope and invalidated by
the signals in core.cache_signals whenever products, movements or purchase
orders change.
"""
import logging
from decimal import Decimal
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from django.db.models import Count, DecimalField, ExpressionWrapper, F, Q, Sum
from django.db.models.functions import Coalesce
from django.shortcuts import get_object_or_404
from django.utils import timezone
from inventorypro.catalog.filters import stock_status_q
from inventorypro.catalog.models import Product
from inventorypro.catalog.utils import STOCK_STATUS_LEVELS, product_stock_status
from inventorypro.catalog.views import visible_products
from inventorypro.core.cache_utils import cached_query, REPORTS_PREFIX
from inventorypro.core.permissions import scoped_warehouse_id
from inventorypro.core.responses import success_response
from inventorypro.inventory.models import Movement
from inventorypro.purchasing.models import PurchaseOrder
from .utils import calculate_rotation_rate, predict_restock_date, suggest_optimal_stock

logger = logging.getLogger(__name__)


def _scoped_products(warehouse_id):
    queryset = Product.objects.filter(active=True)
    if warehouse_id is not None:
        queryset = queryset.filter(Q(warehouse_id=warehouse_id) | Q(warehouses__id=warehouse_id)).distinct()
    return queryset


@cached_query(key_prefix=REPORTS_PREFIX)
def build_inventory_summary(warehouse_id=None):
    products = _scoped_products(warehouse_id)
    # Aggregates over a DISTINCT queryset are unreliable, go through ids
    product_ids = list(products.values_list('id', flat=True))
    base = Product.objects.filter(id__in=product_ids)

    value_expr = ExpressionWrapper(F('stock') * F('price'), output_field=DecimalField(max_digits=20, decimal_places=2))
    aggregates = base.aggregate(
        total_products=Count('id'),
        total_units=Coalesce(Sum('stock'), 0),
        total_value=Coalesce(Sum(value_expr), Decimal('0'), output_field=DecimalField(max_digits=20, decimal_places=2)),
    )
    status_counts = {level: base.filter(stock_status_q(level)).count() for level in STOCK_STATUS_LEVELS}

    movements = Movement.objects.all()
    if warehouse_id is not None:
        movements = movements.filter(product_id__in=product_ids)
    movement_counts = {choice: 0 for choice, _ in Movement.TYPE_CHOICES}
    for row in movements.values('type').annotate(count=Count('id')):
        movement_counts[row['type']] = row['count']

    return {
        'totalProducts': aggregates['total_products'],
        'totalUnits': aggregates['total_units'],
        'totalValue': float(aggregates['total_value']),
        'stockStatus': status_counts,
        'movements': movement_counts,
        'pendingPurchaseOrders': PurchaseOrder.objects.filter(status=PurchaseOrder.STATUS_PENDING).count(),
        'generatedAt': timezone.now().isoformat(),
    }


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inventory_summary(request):
    """Inventory value, stock status distribution and activity counts"""
    return success_response(build_inventory_summary(warehouse_id=scoped_warehouse_id(request.user)))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def product_rotation(request, pk):
    """Rotation rate, predicted restock date and suggested stock levels of a product"""
    product = get_object_or_404(visible_products(request.user), pk=pk)
    units_sold = Movement.objects.filter(
        product=product, type=Movement.TYPE_EXIT
    ).aggregate(total=Coalesce(Sum('quantity'), 0))['total']

    rate = calculate_rotation_rate(units_sold, product.created_at)
    restock_date = predict_restock_date(product.stock, rate)
    return success_response({
        'productId': product.id,
        'productName': product.name,
        'stock': product.stock,
        'unitsSold': units_sold,
        'rotationRate': round(rate, 4),
        'restockDate': restock_date.isoformat() if restock_date else None,
        'suggestedStock': suggest_optimal_stock(rate),
        'stockStatus': product_stock_status(product),
    })
