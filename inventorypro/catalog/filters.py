import django_filters
from django.db.models import F, Q

from .models import Product
from .utils import STATUS_CRITICAL, STATUS_WARNING, STATUS_EXCESS, STATUS_GOOD


def stock_status_q(level):
    """Q object matching products whose stock falls in the given status level"""
    critical = Q(stock__lte=F('min_stock'))
    warning = Q(min_stock__gt=0, stock__gt=F('min_stock'), stock__lte=F('min_stock') * 1.5)
    excess = Q(max_stock__lte=0, stock__gt=0) | Q(max_stock__gt=0, stock__gt=F('max_stock') * 0.9)

    if level == STATUS_CRITICAL:
        return critical
    if level == STATUS_WARNING:
        return warning
    if level == STATUS_EXCESS:
        return ~critical & ~warning & excess
    if level == STATUS_GOOD:
        return ~critical & ~warning & ~excess
    return None


class ProductFilter(django_filters.FilterSet):
    """Filter for the product list"""

    search = django_filters.CharFilter(method='filter_search', label='Search')
    category = django_filters.CharFilter(field_name='category', lookup_expr='iexact')
    categoria = django_filters.CharFilter(field_name='category', lookup_expr='iexact')
    supplier = django_filters.NumberFilter(field_name='supplier_id')
    proveedor = django_filters.NumberFilter(field_name='supplier_id')
    warehouse = django_filters.NumberFilter(method='filter_warehouse', label='Warehouse ID')
    bodega = django_filters.NumberFilter(method='filter_warehouse', label='Warehouse ID')
    stock_status = django_filters.CharFilter(method='filter_stock_status', label='Stock status')

    class Meta:
        model = Product
        fields = ['search', 'category', 'supplier', 'warehouse', 'stock_status']

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value) |
            Q(code__icontains=value) |
            Q(category__icontains=value)
        )

    def filter_warehouse(self, queryset, name, value):
        """Products whose primary warehouse or warehouse set contains the warehouse"""
        return queryset.filter(Q(warehouse_id=value) | Q(warehouses__id=value)).distinct()

    def filter_stock_status(self, queryset, name, value):
        condition = stock_status_q(value.strip().lower())
        if condition is None:
            return queryset.none()
        return queryset.filter(condition)
