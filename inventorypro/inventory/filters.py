import django_filters

from .models import Movement


class MovementFilter(django_filters.FilterSet):
    """Filter for the movement list; Spanish parameter names are accepted too"""

    type = django_filters.CharFilter(field_name='type', lookup_expr='iexact')
    tipo = django_filters.CharFilter(field_name='type', lookup_expr='iexact')
    product = django_filters.NumberFilter(field_name='product_id')
    productoId = django_filters.NumberFilter(field_name='product_id')
    user = django_filters.NumberFilter(field_name='user_id')
    usuarioId = django_filters.NumberFilter(field_name='user_id')
    warehouse = django_filters.NumberFilter(field_name='warehouse_id')
    bodegaId = django_filters.NumberFilter(field_name='warehouse_id')
    purchase_order = django_filters.NumberFilter(field_name='purchase_order_id')
    date_from = django_filters.DateTimeFilter(field_name='date', lookup_expr='gte')
    fechaInicio = django_filters.DateTimeFilter(field_name='date', lookup_expr='gte')
    date_to = django_filters.DateTimeFilter(field_name='date', lookup_expr='lte')
    fechaFin = django_filters.DateTimeFilter(field_name='date', lookup_expr='lte')

    class Meta:
        model = Movement
        fields = ['type', 'product', 'user', 'warehouse', 'purchase_order']
