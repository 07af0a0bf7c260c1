import django_filters

from .models import AuditLog


class AuditLogFilter(django_filters.FilterSet):
    """Audit log query filters; Spanish parameter names are accepted too"""
    user_id = django_filters.NumberFilter(field_name='user_id')
    usuarioId = django_filters.NumberFilter(field_name='user_id')
    entity = django_filters.CharFilter(field_name='entity')
    entidad = django_filters.CharFilter(field_name='entity')
    action = django_filters.CharFilter(field_name='action', lookup_expr='iexact')
    accion = django_filters.CharFilter(field_name='action', lookup_expr='iexact')
    date_from = django_filters.DateTimeFilter(field_name='timestamp', lookup_expr='gte')
    fechaInicio = django_filters.DateTimeFilter(field_name='timestamp', lookup_expr='gte')
    date_to = django_filters.DateTimeFilter(field_name='timestamp', lookup_expr='lte')
    fechaFin = django_filters.DateTimeFilter(field_name='timestamp', lookup_expr='lte')

    class Meta:
        model = AuditLog
        fields = []
