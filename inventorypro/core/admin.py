from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User, AuditLog


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ['email', 'name', 'role', 'warehouse', 'is_active', 'created_at']
    list_filter = ['role', 'is_active', 'is_staff', 'warehouse']
    search_fields = ['email', 'name']
    ordering = ['email']
    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Perfil', {'fields': ('name', 'role', 'warehouse', 'avatar')}),
        ('Permisos', {'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        ('Fechas', {'fields': ('last_login', 'date_joined')}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'name', 'role', 'password1', 'password2'),
        }),
    )


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ['user_name', 'action', 'entity', 'entity_id', 'ip_address', 'timestamp']
    list_filter = ['action', 'entity', 'timestamp']
    search_fields = ['user_name', 'entity', 'entity_id', 'details']
    ordering = ['-timestamp']
    readonly_fields = ['user', 'user_name', 'action', 'entity', 'entity_id', 'details', 'ip_address', 'timestamp']
