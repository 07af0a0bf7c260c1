from rest_framework import serializers

from inventorypro.core.translation import TranslatedFieldsMixin
from inventorypro.locations.models import Warehouse
from .models import Movement


MOVEMENT_FIELD_ALIASES = {
    'tipo': 'type',
    'producto_id': 'product',
    'productoId': 'product',
    'productId': 'product',
    'product_id': 'product',
    'cantidad': 'quantity',
    'observacion': 'observation',
    'lote': 'lot_number',
    'lotNumber': 'lot_number',
    'numero_lote': 'lot_number',
    'motivo': 'reason',
    'bodega_id': 'warehouse',
    'warehouseId': 'warehouse',
    'warehouse_id': 'warehouse',
    'fecha': 'date',
}


class MovementSerializer(serializers.ModelSerializer):
    class Meta:
        model = Movement
        fields = [
            'id', 'type', 'product', 'product_name', 'quantity', 'previous_stock', 'new_stock',
            'date', 'observation', 'user', 'user_name', 'lot_number', 'reason',
            'warehouse', 'warehouse_name', 'purchase_order', 'created_at',
        ]
        read_only_fields = fields


class MovementCreateSerializer(TranslatedFieldsMixin, serializers.Serializer):
    """Input of a manual movement; the product is resolved by the view"""
    field_aliases = MOVEMENT_FIELD_ALIASES

    type = serializers.CharField(max_length=20)
    quantity = serializers.IntegerField()
    observation = serializers.CharField(required=False, allow_blank=True, default='')
    lot_number = serializers.CharField(required=False, allow_blank=True, max_length=100, default='')
    reason = serializers.CharField(required=False, allow_blank=True, max_length=255, default='')
    warehouse = serializers.PrimaryKeyRelatedField(
        queryset=Warehouse.objects.all(), required=False, allow_null=True, default=None
    )
    date = serializers.DateTimeField(required=False, allow_null=True, default=None)

    def validate_type(self, value):
        return value.strip().lower()

    def validate(self, attrs):
        quantity = attrs['quantity']
        if quantity < 0 or (quantity == 0 and attrs['type'] != Movement.TYPE_ADJUSTMENT):
            raise serializers.ValidationError({'quantity': 'La cantidad debe ser mayor a 0'})
        return attrs
