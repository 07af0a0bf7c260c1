import django_filters

from .models import PurchaseOrder


class PurchaseOrderFilter(django_filters.FilterSet):
    """Filter for the purchase order list; Spanish parameter names are accepted too"""

    status = django_filters.ChoiceFilter(field_name='status', choices=PurchaseOrder.STATUS_CHOICES)
    estado = django_filters.ChoiceFilter(field_name='status', choices=PurchaseOrder.STATUS_CHOICES)
    supplier = django_filters.NumberFilter(field_name='supplier_id')
    proveedor = django_filters.NumberFilter(field_name='supplier_id')

    class Meta:
        model = PurchaseOrder
        fields = ['status', 'supplier']
