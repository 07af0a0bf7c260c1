from rest_framework import serializers

from inventorypro.catalog.models import Product
from inventorypro.core.translation import TranslatedFieldsMixin
from inventorypro.parties.models import Supplier
from .models import PurchaseOrder, PurchaseOrderItem


ITEM_FIELD_ALIASES = {
    'producto_id': 'product',
    'productoId': 'product',
    'productId': 'product',
    'product_id': 'product',
    'producto_nombre': 'product_name',
    'productName': 'product_name',
    'cantidad': 'quantity',
    'precio': 'price',
    'unit_price': 'price',
}

ORDER_FIELD_ALIASES = {
    'proveedor_id': 'supplier',
    'supplierId': 'supplier',
    'supplier_id': 'supplier',
    'proveedor': 'supplier_name',
    'supplierName': 'supplier_name',
    'monto_total': 'total_amount',
    'totalAmount': 'total_amount',
    'notas': 'notes',
    'productos': 'items',
}


class PurchaseOrderItemSerializer(TranslatedFieldsMixin, serializers.ModelSerializer):
    field_aliases = ITEM_FIELD_ALIASES

    product = serializers.PrimaryKeyRelatedField(queryset=Product.objects.all())

    class Meta:
        model = PurchaseOrderItem
        fields = ['id', 'product', 'product_name', 'quantity', 'price', 'subtotal']
        read_only_fields = ['id', 'subtotal']


class PurchaseOrderSerializer(serializers.ModelSerializer):
    """Read representation of an order with its items"""
    items = PurchaseOrderItemSerializer(many=True, read_only=True)
    created_by_name = serializers.CharField(source='created_by.name', read_only=True, default=None)
    approved_by_name = serializers.CharField(source='approved_by.name', read_only=True, default=None)

    class Meta:
        model = PurchaseOrder
        fields = [
            'id', 'supplier', 'supplier_name', 'total_amount', 'status', 'notes',
            'created_by', 'created_by_name', 'approved_by', 'approved_by_name',
            'completed_at', 'created_at', 'updated_at', 'items',
        ]
        read_only_fields = fields


class PurchaseOrderWriteSerializer(TranslatedFieldsMixin, serializers.Serializer):
    """Input for creating or editing a pending order"""
    field_aliases = ORDER_FIELD_ALIASES

    supplier = serializers.PrimaryKeyRelatedField(queryset=Supplier.objects.all())
    supplier_name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    total_amount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True, min_value=0)
    notes = serializers.CharField(required=False, allow_blank=True)
    items = PurchaseOrderItemSerializer(many=True)

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError('La orden debe tener al menos un producto')
        return value


class PurchaseOrderUpdateSerializer(PurchaseOrderWriteSerializer):
    """Edit of a pending order: every field is optional, but items sent must be complete"""
    supplier = serializers.PrimaryKeyRelatedField(queryset=Supplier.objects.all(), required=False)
    items = PurchaseOrderItemSerializer(many=True, required=False)
