from rest_framework import serializers

from inventorypro.core.translation import TranslatedFieldsMixin
from .models import Product
from .utils import product_stock_status


PRODUCT_FIELD_ALIASES = {
    'nombre': 'name',
    'descripcion': 'description',
    'codigo': 'code',
    'categoria': 'category',
    'precio': 'price',
    'minStock': 'min_stock',
    'stockMinimo': 'min_stock',
    'maxStock': 'max_stock',
    'stockMaximo': 'max_stock',
    'supplierId': 'supplier',
    'supplier_id': 'supplier',
    'proveedor_id': 'supplier',
    'proveedor': 'supplier_name',
    'supplierName': 'supplier_name',
    'warehouseId': 'warehouse',
    'warehouse_id': 'warehouse',
    'bodega_id': 'warehouse',
    'warehouseIds': 'warehouses',
    'warehouse_ids': 'warehouses',
    'bodegas': 'warehouses',
    'imagen': 'image',
    'activo': 'active',
}


class ProductSerializer(TranslatedFieldsMixin, serializers.ModelSerializer):
    field_aliases = PRODUCT_FIELD_ALIASES

    warehouse_name = serializers.CharField(source='warehouse.name', read_only=True, default=None)
    stock_status = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'description', 'code', 'category', 'price', 'stock',
            'min_stock', 'max_stock', 'supplier', 'supplier_name', 'warehouse',
            'warehouse_name', 'warehouses', 'image', 'active', 'stock_status',
            'created_at', 'updated_at',
        ]
        extra_kwargs = {
            'code': {'required': False, 'allow_null': True, 'allow_blank': True},
        }

    def get_stock_status(self, obj):
        return product_stock_status(obj)

    def validate_code(self, value):
        # Blank codes are stored as NULL so they never collide on the unique index
        return value or None

    def validate(self, attrs):
        supplier = attrs.get('supplier')
        if supplier is not None and not attrs.get('supplier_name'):
            attrs['supplier_name'] = supplier.name
        return attrs
