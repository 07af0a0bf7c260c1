from rest_framework import serializers

from inventorypro.core.translation import TranslatedFieldsMixin
from .models import Supplier


class SupplierSerializer(TranslatedFieldsMixin, serializers.ModelSerializer):
    field_aliases = {
        'nombre': 'name',
        'contacto': 'contact',
        'correo': 'email',
        'telefono': 'phone',
        'direccion': 'address',
        'activo': 'active',
    }

    class Meta:
        model = Supplier
        fields = ['id', 'name', 'contact', 'email', 'phone', 'nit', 'address', 'active', 'created_at', 'updated_at']
