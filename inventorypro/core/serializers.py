from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from .models import User, AuditLog
from .translation import TranslatedFieldsMixin

USER_FIELD_ALIASES = {
    'nombre': 'name',
    'rol': 'role',
    'activo': 'active',
    'bodega_id': 'warehouse',
    'warehouseId': 'warehouse',
    'warehouse_id': 'warehouse',
    'contrasena': 'password',
}


class UserSerializer(serializers.ModelSerializer):
    active = serializers.BooleanField(source='is_active', read_only=True)
    warehouse_name = serializers.CharField(source='warehouse.name', read_only=True, default=None)

    class Meta:
        model = User
        fields = [
            'id', 'name', 'email', 'role', 'active', 'avatar', 'warehouse', 'warehouse_name',
            'last_login', 'created_at', 'updated_at',
        ]


class UserWriteSerializer(TranslatedFieldsMixin, serializers.ModelSerializer):
    """Create/update users. Passwords are hashed, never echoed back."""
    field_aliases = USER_FIELD_ALIASES

    password = serializers.CharField(write_only=True, required=False, validators=[validate_password])
    active = serializers.BooleanField(source='is_active', required=False)

    class Meta:
        model = User
        fields = ['id', 'name', 'email', 'password', 'role', 'active', 'avatar', 'warehouse']
        # Uniqueness is checked in validate_email so the error carries the duplicate_email code
        extra_kwargs = {'email': {'validators': []}}

    def validate_email(self, value):
        queryset = User.objects.filter(email__iexact=value)
        if self.instance is not None:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            # Surfaces as 409 from the views
            raise serializers.ValidationError('El email ya está registrado', code='duplicate_email')
        return value

    def validate(self, attrs):
        if self.instance is None and not attrs.get('password'):
            raise serializers.ValidationError({'password': 'La contraseña es requerida'})
        return attrs

    def create(self, validated_data):
        password = validated_data.pop('password')
        return User.objects.create_user(password=password, **validated_data)

    def update(self, instance, validated_data):
        password = validated_data.pop('password', None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        if password:
            instance.set_password(password)
        instance.save()
        return instance


class RegisterSerializer(TranslatedFieldsMixin, serializers.Serializer):
    field_aliases = USER_FIELD_ALIASES

    name = serializers.CharField(max_length=200)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, validators=[validate_password])
    role = serializers.ChoiceField(choices=User.ROLE_CHOICES, default=User.ROLE_EMPLOYEE)


class AuditLogSerializer(serializers.ModelSerializer):
    user_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = AuditLog
        fields = ['id', 'user_id', 'user_name', 'action', 'entity', 'entity_id', 'details', 'ip_address', 'timestamp']
