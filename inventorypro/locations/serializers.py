from rest_framework import serializers

from inventorypro.core.translation import TranslatedFieldsMixin
from .models import Warehouse


class WarehouseSerializer(TranslatedFieldsMixin, serializers.ModelSerializer):
    field_aliases = {
        'nombre': 'name',
        'ubicacion': 'location',
        'capacidad': 'capacity',
        'encargado': 'manager',
        'responsable': 'manager',
        'activo': 'active',
        'activa': 'active',
    }

    class Meta:
        model = Warehouse
        fields = ['id', 'name', 'location', 'capacity', 'manager', 'active', 'created_at', 'updated_at']
